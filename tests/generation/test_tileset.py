"""Tests for hexwfc.generation.tileset module."""

import math

import pytest

from hexwfc.config import GeneratorConfig
from hexwfc.generation import (
    SAMPLE_TILE_SIZE,
    GenerationFailedError,
    create_default_catalog,
    create_default_prototypes,
    solve_world,
)
from hexwfc.wfc import Direction, HexLattice, TileVariant


@pytest.fixture
def catalog():
    return create_default_catalog()


class TestSampleTileset:
    """Tests for the built-in sample prototypes."""

    def test_prototypes(self):
        names = [p.name for p in create_default_prototypes()]
        assert names == ["grass", "road", "rock", "air"]

    def test_catalog_size(self, catalog):
        assert len(catalog) == 24
        assert catalog.tile_size == SAMPLE_TILE_SIZE

    def test_road_ends_only_meet_road_ends(self, catalog):
        road = TileVariant("road", 0)
        assert catalog.allows(road, Direction.DEG_0, TileVariant("road", 0))
        assert catalog.allows(road, Direction.DEG_0, TileVariant("road", 180))
        assert not catalog.allows(road, Direction.DEG_0, TileVariant("road", 60))
        for rotation in (0, 60, 120, 180, 240, 300):
            assert not catalog.allows(road, Direction.DEG_0, TileVariant("grass", rotation))
            assert not catalog.allows(road, Direction.DEG_180, TileVariant("rock", rotation))

    def test_road_flanks_meet_grass(self, catalog):
        road = TileVariant("road", 0)
        assert catalog.allows(road, Direction.DEG_60, TileVariant("grass", 240))
        assert catalog.allows(road, Direction.DEG_300, TileVariant("grass", 0))

    def test_rock_stays_below_surface(self, catalog):
        for rotation in (0, 60, 120, 180, 240, 300):
            assert not catalog.allows(TileVariant("grass", 0), Direction.BELOW, TileVariant("air", rotation))
            assert catalog.allows(TileVariant("grass", 0), Direction.BELOW, TileVariant("rock", rotation))

    def test_sample_world_is_consistent(self, catalog):
        config = GeneratorConfig(radius=4, height=3, seed=7, max_retries=20)
        try:
            lattice = solve_world(config, catalog)
        except GenerationFailedError as e:
            assert e.attempts == 20
            return

        assert lattice.is_complete()
        for cell in lattice.cells():
            for direction, coord in lattice.neighbors_of(*cell.coord):
                assert catalog.allows(cell.variant, direction, lattice.get(*coord).variant)

    def test_sample_tiles_form_regular_hexes(self, catalog):
        """Lateral neighbors sit 8 units away, 60 degrees apart."""
        lattice = HexLattice(2, 1, catalog.variants(), catalog.tile_size)
        cx, _, cz = lattice.world_position(0, 0, 0)
        for direction, coord in lattice.neighbors_of(0, 0, 0):
            x, _, z = lattice.world_position(*coord)
            assert math.hypot(x - cx, z - cz) == pytest.approx(8.0)
            angle = math.degrees(math.atan2(z - cz, x - cx)) % 360
            assert angle == pytest.approx(direction.degrees)
