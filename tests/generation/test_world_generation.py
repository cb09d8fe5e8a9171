"""Tests for hexwfc.generation.world module."""

import logging

import pytest

from hexwfc.config import GeneratorConfig
from hexwfc.generation import (
    GenerationFailedError,
    LoggingSink,
    RecordingSink,
    WorldTransform,
    generate_world,
    iter_placements,
    place_lattice,
    solve_world,
)
from hexwfc.wfc import (
    HexLattice,
    LatticeIncompleteError,
    TileCatalog,
    TilePrototype,
    TileSize,
    TileVariant,
)


def resolved_lattice() -> HexLattice:
    """Radius 2, two layers, every cell resolved to a rotation derived from its position."""
    variants = [TileVariant("blank", r) for r in (0, 60, 120, 180, 240, 300)]
    lattice = HexLattice(2, 2, variants, TileSize(length=2.0, width=4.0, height=3.0))
    for i, coord in enumerate(lattice.coords()):
        lattice.set(*coord, variants[i % 6])
    return lattice


class TestPlacement:
    """Tests for handing a resolved lattice to a sink."""

    def test_iter_placements_order_and_transforms(self):
        lattice = resolved_lattice()
        placements = list(iter_placements(lattice))

        assert [p.coord for p in placements] == list(lattice.coords())
        for placement in placements:
            cell = lattice.get(*placement.coord)
            assert placement.variant == cell.variant
            assert placement.transform.translation == lattice.world_position(*placement.coord)
            assert placement.transform.rotation_degrees == cell.variant.rotation

    def test_iter_placements_incomplete(self, small_lattice):
        with pytest.raises(LatticeIncompleteError):
            list(iter_placements(small_lattice))

    @pytest.mark.asyncio
    async def test_place_lattice(self):
        lattice = resolved_lattice()
        sink = RecordingSink()

        count = await place_lattice(lattice, sink)

        assert count == len(lattice) == 18
        assert len(sink) == 18
        first_variant, first_transform = sink.placements[0]
        assert first_variant == TileVariant("blank", 0)
        assert first_transform == WorldTransform(translation=(-3.0, 0.0, -3.0), rotation_degrees=0)

    @pytest.mark.asyncio
    async def test_place_lattice_without_yielding(self):
        sink = RecordingSink()
        assert await place_lattice(resolved_lattice(), sink, yield_every=0) == 18

    @pytest.mark.asyncio
    async def test_place_incomplete_lattice_places_nothing(self, small_lattice):
        sink = RecordingSink()
        with pytest.raises(LatticeIncompleteError):
            await place_lattice(small_lattice, sink)
        assert len(sink) == 0

    @pytest.mark.asyncio
    async def test_logging_sink(self, caplog):
        sink = LoggingSink()
        with caplog.at_level(logging.INFO, logger="hexwfc"):
            await place_lattice(resolved_lattice(), sink)
        assert sink.count == 18
        assert "PLACE | blank0" in caplog.text


class TestSolveWorld:
    """Tests for solving with retries."""

    def test_collapses(self, open_field_catalog):
        config = GeneratorConfig(radius=2, height=2, seed=3)
        lattice = solve_world(config, open_field_catalog)
        assert lattice.is_complete()
        assert len(lattice) == 18

    def test_same_seed_same_world(self, open_field_catalog):
        config = GeneratorConfig(radius=4, height=1, seed=21)
        first = solve_world(config, open_field_catalog)
        second = solve_world(config, open_field_catalog)
        assert [c.variant for c in first.cells()] == [c.variant for c in second.cells()]

    def test_gives_up_after_max_retries(self, lonely_catalog):
        config = GeneratorConfig(radius=2, height=1, seed=0, max_retries=3)
        with pytest.raises(GenerationFailedError) as exc_info:
            solve_world(config, lonely_catalog)
        assert exc_info.value.attempts == 3
        assert exc_info.value.last_contradiction is not None

    def test_progress_callback(self, blank_catalog):
        calls = []
        config = GeneratorConfig(radius=2, height=1, seed=1)
        solve_world(config, blank_catalog, progress_callback=lambda done, total: calls.append((done, total)))
        assert calls[-1] == (9, 9)

    def test_prepare_pins_cells(self, open_field_catalog):
        def pin(lattice):
            lattice.set(0, 0, 0, TileVariant("forest", 120))

        config = GeneratorConfig(radius=2, height=1, seed=8)
        lattice = solve_world(config, open_field_catalog, prepare=pin)
        assert lattice.get(0, 0, 0).variant == TileVariant("forest", 120)

    def test_initial_candidates(self, open_field_catalog):
        config = GeneratorConfig(radius=2, height=1, seed=8)
        meadows = [v for v in open_field_catalog.variants() if v.base_id == "meadow"]
        lattice = solve_world(config, open_field_catalog, initial_candidates=meadows)
        assert {c.variant.base_id for c in lattice.cells()} == {"meadow"}

    def test_empty_prototypes_excluded_by_default(self):
        catalog = TileCatalog([TilePrototype(name="solid"), TilePrototype(name="void", empty=True)])
        lattice = solve_world(GeneratorConfig(radius=2, height=1, seed=1), catalog)
        assert {c.variant.base_id for c in lattice.cells()} == {"solid"}

        lattice = solve_world(GeneratorConfig(radius=2, height=1, seed=1, include_empty=True), catalog)
        assert len(lattice.initial_candidates) == 12


class TestGenerateWorld:
    """Tests for the async generate-and-place entry point."""

    @pytest.mark.asyncio
    async def test_places_every_cell(self, open_field_catalog):
        sink = RecordingSink()
        config = GeneratorConfig(radius=2, height=2, seed=5)

        lattice = await generate_world(config, open_field_catalog, sink)

        assert len(sink) == len(lattice) == 18
        assert [v for v, _ in sink.placements] == [c.variant for c in lattice.cells()]

    @pytest.mark.asyncio
    async def test_failure_places_nothing(self, lonely_catalog):
        sink = RecordingSink()
        config = GeneratorConfig(radius=2, height=1, seed=0, max_retries=2)

        with pytest.raises(GenerationFailedError):
            await generate_world(config, lonely_catalog, sink)
        assert len(sink) == 0

    @pytest.mark.asyncio
    async def test_first_placement_position(self, blank_catalog):
        sink = RecordingSink()
        config = GeneratorConfig(radius=2, height=1, seed=1)
        await generate_world(config, blank_catalog, sink)
        _, transform = sink.placements[0]
        # (-1, -1, 0) with the default unit tile size
        assert transform.translation == (-1.5, 0.0, -0.75)
