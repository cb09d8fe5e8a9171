"""Tests for hexwfc.wfc.grid module."""

import pytest

from hexwfc.wfc import (
    AxialCoord,
    Cell,
    CellAlreadyResolvedError,
    CoordinateOutOfRangeError,
    Direction,
    HexLattice,
    InvalidDimensionsError,
    LatticeError,
    TileSize,
    TileVariant,
)

VARIANTS = [TileVariant("blank", r) for r in (0, 60, 120, 180, 240, 300)]


class TestCell:
    """Tests for individual cells."""

    def test_starts_in_superposition(self):
        cell = Cell(AxialCoord(0, 0, 0), set(VARIANTS))
        assert not cell.is_resolved
        assert not cell.is_contradiction
        assert cell.entropy == 6

    def test_resolve(self):
        cell = Cell(AxialCoord(0, 0, 0), set(VARIANTS))
        cell.resolve(VARIANTS[2])
        assert cell.is_resolved
        assert cell.variant == VARIANTS[2]
        assert cell.candidates == {VARIANTS[2]}
        assert cell.entropy == 1

    def test_resolve_twice(self):
        cell = Cell(AxialCoord(1, -1, 0), set(VARIANTS))
        cell.resolve(VARIANTS[0])
        with pytest.raises(CellAlreadyResolvedError) as exc_info:
            cell.resolve(VARIANTS[1])
        assert exc_info.value.coord == (1, -1, 0)
        assert cell.variant == VARIANTS[0]

    def test_constrain_to(self):
        cell = Cell(AxialCoord(0, 0, 0), set(VARIANTS))
        assert cell.constrain_to(VARIANTS[:2]) is True
        assert cell.candidates == set(VARIANTS[:2])
        assert cell.constrain_to(VARIANTS) is False

    def test_constrain_to_nothing_is_a_contradiction(self):
        cell = Cell(AxialCoord(0, 0, 0), set(VARIANTS))
        cell.constrain_to([])
        assert cell.is_contradiction
        assert cell.entropy == 0

    def test_resolved_cell_is_never_constrained(self):
        cell = Cell(AxialCoord(0, 0, 0), set(VARIANTS))
        cell.resolve(VARIANTS[0])
        assert cell.constrain_to([]) is False
        assert cell.candidates == {VARIANTS[0]}


class TestLatticeDimensions:
    """Tests for lattice allocation."""

    @pytest.mark.parametrize("radius,height,expected", [(0, 1, 1), (2, 1, 9), (2, 3, 27), (4, 2, 50), (2, 0, 0)])
    def test_cell_count(self, radius, height, expected):
        lattice = HexLattice(radius, height, VARIANTS)
        assert len(lattice) == expected
        assert len(list(lattice.cells())) == expected

    @pytest.mark.parametrize("radius", [1, 3, -2])
    def test_bad_radius(self, radius):
        with pytest.raises(InvalidDimensionsError):
            HexLattice(radius, 1, VARIANTS)

    def test_negative_height(self):
        with pytest.raises(InvalidDimensionsError):
            HexLattice(2, -1, VARIANTS)

    def test_dimension_errors_are_lattice_errors(self):
        with pytest.raises(LatticeError):
            HexLattice(3, 1, VARIANTS)

    def test_every_cell_starts_unresolved(self):
        lattice = HexLattice(2, 2, VARIANTS)
        for cell in lattice.cells():
            assert not cell.is_resolved
            assert cell.candidates == set(VARIANTS)
        assert lattice.unresolved_count() == 18
        assert not lattice.is_complete()

    def test_candidate_sets_are_not_shared(self):
        lattice = HexLattice(2, 1, VARIANTS)
        lattice.get(0, 0, 0).constrain_to(VARIANTS[:1])
        assert lattice.get(1, 0, 0).candidates == set(VARIANTS)


class TestLatticeAccess:
    """Tests for get/set and bounds checking."""

    def test_get_returns_cell_with_its_coordinate(self, small_lattice):
        cell = small_lattice.get(-1, 1, 0)
        assert cell.coord == AxialCoord(-1, 1, 0)
        assert small_lattice[(-1, 1, 0)] is cell

    @pytest.mark.parametrize("coord", [(2, 0, 0), (0, -2, 0), (0, 0, 1), (0, 0, -1)])
    def test_get_out_of_range(self, small_lattice, coord):
        with pytest.raises(CoordinateOutOfRangeError) as exc_info:
            small_lattice.get(*coord)
        assert exc_info.value.coord == coord

    def test_set_resolves(self, small_lattice):
        small_lattice.set(0, 0, 0, VARIANTS[3])
        assert small_lattice.get(0, 0, 0).variant == VARIANTS[3]

    def test_set_out_of_range(self, small_lattice):
        with pytest.raises(CoordinateOutOfRangeError):
            small_lattice.set(5, 0, 0, VARIANTS[0])

    def test_set_twice(self, small_lattice):
        small_lattice.set(0, 0, 0, VARIANTS[0])
        with pytest.raises(CellAlreadyResolvedError):
            small_lattice.set(0, 0, 0, VARIANTS[1])

    def test_in_bounds(self, small_lattice):
        assert small_lattice.in_bounds(1, -1, 0)
        assert not small_lattice.in_bounds(1, -2, 0)
        assert not small_lattice.in_bounds(0, 0, 1)

    def test_is_complete(self, small_lattice):
        for coord in small_lattice.coords():
            small_lattice.set(*coord, VARIANTS[0])
        assert small_lattice.is_complete()
        assert small_lattice.unresolved_count() == 0


class TestLatticeGeometry:
    """Tests for world positions, neighbors and ordering."""

    def test_world_position(self):
        lattice = HexLattice(2, 2, VARIANTS, TileSize(length=8.0, width=9.0, height=4.0))
        assert lattice.world_position(0, 0, 0) == (0.0, 0.0, 0.0)
        assert lattice.world_position(1, 0, 1) == (4.0, 4.0, 6.75)
        assert lattice.world_position(-1, 1, 0) == (4.0, 0.0, -6.75)

    def test_world_position_out_of_range(self, small_lattice):
        with pytest.raises(CoordinateOutOfRangeError):
            small_lattice.world_position(3, 0, 0)

    def test_center_of_tall_lattice_has_eight_neighbors(self):
        lattice = HexLattice(2, 3, VARIANTS)
        neighbors = lattice.neighbors_of(0, 0, 1)
        assert len(neighbors) == 8
        assert {d for d, _ in neighbors} == set(Direction)

    def test_neighbor_coordinates_follow_direction_offsets(self):
        lattice = HexLattice(2, 3, VARIANTS)
        for direction, coord in lattice.neighbors_of(0, 0, 1):
            assert coord == AxialCoord(0, 0, 1).step(direction)

    def test_edges_have_fewer_neighbors(self):
        lattice = HexLattice(2, 1, VARIANTS)
        assert len(lattice.neighbors_of(0, 0, 0)) == 6
        # Corner (-1, -1) only reaches (-1, 0) and (0, -1)
        corner = lattice.neighbors_of(-1, -1, 0)
        assert {coord for _, coord in corner} == {AxialCoord(-1, 0, 0), AxialCoord(0, -1, 0)}

    def test_neighbor_relation_is_symmetric(self):
        lattice = HexLattice(2, 2, VARIANTS)
        for coord in lattice.coords():
            for direction, other in lattice.neighbors_of(*coord):
                assert (direction.opposite, coord) in lattice.neighbors_of(*other)

    def test_coords_order(self):
        lattice = HexLattice(2, 2, VARIANTS)
        coords = list(lattice.coords())
        assert coords == sorted(coords, key=lambda c: (c.q, c.layer, c.r))
        assert coords[:4] == [
            AxialCoord(-1, -1, 0),
            AxialCoord(-1, 0, 0),
            AxialCoord(-1, 1, 0),
            AxialCoord(-1, -1, 1),
        ]
        assert len(set(coords)) == len(lattice)


class TestLatticeSnapshots:
    """Tests for snapshot/restore/reset."""

    def test_snapshot_and_restore(self, small_lattice):
        small_lattice.set(0, 0, 0, VARIANTS[0])
        snapshot = small_lattice.snapshot()

        small_lattice.set(1, 0, 0, VARIANTS[1])
        small_lattice.get(0, 1, 0).constrain_to(VARIANTS[:2])

        small_lattice.restore(snapshot)
        assert small_lattice.get(0, 0, 0).variant == VARIANTS[0]
        assert not small_lattice.get(1, 0, 0).is_resolved
        assert small_lattice.get(0, 1, 0).candidates == set(VARIANTS)

    def test_reset(self, small_lattice):
        small_lattice.set(0, 0, 0, VARIANTS[0])
        small_lattice.reset()
        assert small_lattice.unresolved_count() == 9
        assert small_lattice.get(0, 0, 0).candidates == set(VARIANTS)
