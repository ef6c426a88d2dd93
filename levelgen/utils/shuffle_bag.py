"""
Shuffle Bag - weighted random draws without long streaks
"""

import random
from typing import Generic, List, Optional, TypeVar

T = TypeVar("T")


class ShuffleBag(Generic[T]):
    """
    Bag holding every item `weight` times.

    Items are drawn without replacement; once the bag is exhausted it is
    refilled and drawing continues, so over a full cycle every item comes out
    exactly as often as its weight.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()
        self._items: List[T] = []
        self._cursor = -1

    def __len__(self) -> int:
        return len(self._items)

    def add(self, item: T, weight: int = 1) -> None:
        if weight < 0:
            raise ValueError(f"Weight must be non-negative, got {weight}")
        self._items.extend([item] * weight)
        self._cursor = len(self._items) - 1

    def next(self, count: Optional[int] = None):
        """Draw one item, or a list of `count` items when count is given."""
        if count is not None:
            return [self._draw() for _ in range(count)]
        return self._draw()

    def _draw(self) -> T:
        if not self._items:
            raise IndexError("Cannot draw from an empty ShuffleBag")

        if self._cursor < 1:
            self._cursor = len(self._items) - 1
            return self._items[0]

        # Swap a random pick to the end of the live region
        pos = self.rng.randint(0, self._cursor)
        item = self._items[pos]
        self._items[pos] = self._items[self._cursor]
        self._items[self._cursor] = item
        self._cursor -= 1
        return item
