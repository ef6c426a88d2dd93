"""
Tests for the sector tree: coordinates, overlap rules, connectivity and destruction.
"""

import pytest

from levelgen.exceptions import StructuralInvariantViolation
from levelgen.level.connector import Connector
from levelgen.level.level import Level
from levelgen.level.room import Room
from levelgen.level.sector import Sector
from levelgen.tiles.cell_codes import CellCode, Layer
from levelgen.utils.directions import Direction


@pytest.fixture
def level() -> Level:
    return Level((30, 30))


def snapshot(level: Level):
    return [
        [level.grid.get_cell(x, y, layer) for x in range(level.width) for y in range(level.height)]
        for layer in Layer.concrete()
    ]


class TestSectorGeometry:

    def test_root_spans_level(self, level):
        assert level.root.id == 1
        assert level.root.is_root
        assert level.root.size == (30, 30)
        assert level.sectors[1] is level.root

    def test_ids_increase(self, level):
        a = Sector(level, (0, 0), (3, 3), CellCode.ROOM)
        b = Sector(level, (5, 5), (3, 3), CellCode.ROOM)
        assert b.id == a.id + 1
        assert a.parent is level.root

    def test_absolute_position_sums_chain(self, level):
        outer = Sector(level, (5, 5), (10, 10), CellCode.ROOM)
        inner = Sector(level, (2, 3), (3, 3), CellCode.ROOM_ITEM, parent=outer)
        assert inner.get_absolute_position() == (7, 8)
        assert inner.get_absolute_position((1, 1)) == (8, 9)
        assert level.get_cell((8, 9)) == CellCode.ROOM_ITEM
        assert outer.get_cell((3, 4)) == CellCode.ROOM_ITEM

    def test_reads_outside_are_error(self, level):
        sector = Sector(level, (5, 5), (4, 4), CellCode.ROOM)
        assert sector.get_cell((4, 0)) == CellCode.ERROR
        assert sector.get_cell((-1, 2)) == CellCode.ERROR

    def test_writes_outside_are_ignored(self, level):
        sector = Sector(level, (5, 5), (4, 4), CellCode.ROOM)
        sector.set_cell((4, 0), CellCode.DOOR)
        assert level.get_cell((9, 5)) == CellCode.EMPTY

    def test_is_in_and_from_global(self, level):
        sector = Sector(level, (5, 5), (4, 4), CellCode.ROOM)
        assert sector.is_in((0, 0))
        assert not sector.is_in((4, 4))
        assert sector.is_in_from_global((8, 8))
        assert not sector.is_in_from_global((9, 5))

    def test_fill_is_idempotent(self, level):
        sector = Sector(level, (2, 2), (5, 5), CellCode.ROOM_DICE)
        sector.fill(CellCode.ROOM_DICE)
        before = snapshot(level)
        sector.fill(CellCode.ROOM_DICE)
        assert snapshot(level) == before

    def test_overlapping_sibling_raises(self, level):
        Sector(level, (0, 0), (5, 5), CellCode.ROOM)
        with pytest.raises(StructuralInvariantViolation):
            Sector(level, (4, 4), (3, 3), CellCode.ROOM)

    def test_touching_siblings_allowed(self, level):
        Sector(level, (0, 0), (5, 5), CellCode.ROOM)
        touching = Sector(level, (5, 0), (5, 5), CellCode.ROOM)
        assert len(level.root.children) == 2
        assert touching.pos == (5, 0)

    def test_non_positive_size_raises(self, level):
        with pytest.raises(StructuralInvariantViolation):
            Sector(level, (0, 0), (0, 3), CellCode.ROOM)

    def test_get_sector_at(self, level):
        sector = Sector(level, (10, 10), (4, 4), CellCode.ROOM)
        assert level.get_sector_at((11, 12)) is sector
        assert level.get_sector_at((0, 0)) is level.root


class TestSiblings:

    def test_siblings_sorted_by_distance(self, level):
        a = Sector(level, (0, 0), (2, 2), CellCode.ROOM)
        far = Sector(level, (20, 20), (2, 2), CellCode.ROOM)
        near = Sector(level, (4, 0), (2, 2), CellCode.ROOM)

        siblings = a.get_siblings()
        assert siblings == [a, near, far]
        assert a.get_closest_sibling_sector() is near

    def test_no_siblings(self, level):
        only = Sector(level, (0, 0), (2, 2), CellCode.ROOM)
        assert only.get_siblings() is None
        assert only.get_closest_sibling_sector() is None
        assert level.root.get_siblings() is None


class TestConnectivity:

    def test_traversal_is_symmetric_with_cycles(self, level):
        a = Sector(level, (0, 0), (3, 3), CellCode.ROOM)
        b = Sector(level, (10, 0), (3, 3), CellCode.ROOM)
        c = Sector(level, (0, 10), (3, 3), CellCode.ROOM)
        lonely = Sector(level, (20, 20), (3, 3), CellCode.ROOM)

        level.connect(a, b)
        level.connect(b, c)
        level.connect(c, a)

        for sector in (a, b, c):
            assert sector.list_connected_sectors() == {a, b, c}
            assert sector.get_number_of_connected_sectors() == 3
        assert lonely.list_connected_sectors() == {lonely}

    def test_connector_to_missing_sector_raises(self, level):
        a = Sector(level, (0, 0), (3, 3), CellCode.ROOM)
        connector = Connector((0, 0), (5, 5), from_id=a.id, to_id=999)
        with pytest.raises(StructuralInvariantViolation):
            level.register_connector(connector)

    def test_connectors_listed_once(self, level):
        a = Sector(level, (0, 0), (3, 3), CellCode.ROOM)
        b = Sector(level, (3, 0), (3, 3), CellCode.ROOM)
        connector = level.connect(a, b)
        assert level.connectors() == [connector]


class TestDestroy:

    @pytest.fixture
    def linked(self, level):
        a = Sector(level, (0, 0), (3, 3), CellCode.ROOM)
        b = Sector(level, (10, 0), (3, 3), CellCode.ROOM_ITEM)
        c = Sector(level, (0, 10), (3, 3), CellCode.ROOM_DICE)
        level.add_room(Room(a))

        to_b = Connector((3, 1), (10, 1), from_id=a.id, to_id=b.id, path=[Direction.RIGHT] * 6)
        to_c = Connector((1, 3), (1, 10), from_id=a.id, to_id=c.id, path=[Direction.UP] * 6)
        for connector in (to_b, to_c):
            for p in connector.path_positions():
                level.set_cell(p, CellCode.HALL)
            level.register_connector(connector)

        # A prop on the corridor keeps that cell from reading as a plain hall
        level.set_cell((5, 1), CellCode.PROP)
        return a, b, c

    def test_destroy_clears_everything(self, level, linked):
        a, b, c = linked
        a.destroy()

        assert a.id not in level.sectors
        assert a.id not in level.root.child_ids
        assert b.connectors == []
        assert c.connectors == []
        assert level.rooms == []
        for x in range(3):
            for y in range(3):
                for layer in Layer.concrete():
                    assert level.get_cell((x, y), layer) == CellCode.EMPTY

    def test_destroy_reverts_only_hall_cells(self, level, linked):
        a, _, _ = linked
        a.destroy()

        for x in (3, 4, 6, 7, 8, 9):
            assert level.get_cell((x, 1)) == CellCode.EMPTY
        for y in range(3, 10):
            assert level.get_cell((1, y)) == CellCode.EMPTY
        assert level.get_cell((5, 1)) == CellCode.PROP

    def test_destroy_keeps_neighbours(self, level, linked):
        _, b, c = linked
        b_cells = [level.get_cell(b.get_absolute_position(p)) for p in b.cells()]
        linked[0].destroy()
        assert [level.get_cell(b.get_absolute_position(p)) for p in b.cells()] == b_cells
        assert level.get_cell(c.get_absolute_position()) == CellCode.ROOM_DICE

    def test_destroy_children_first(self, level):
        outer = Sector(level, (5, 5), (10, 10), CellCode.ROOM)
        inner = Sector(level, (1, 1), (2, 2), CellCode.ROOM_ITEM, parent=outer)
        outer.destroy()
        assert inner.id not in level.sectors
        assert outer.id not in level.sectors

    def test_root_cannot_be_destroyed(self, level):
        with pytest.raises(StructuralInvariantViolation):
            level.root.destroy()
