"""
World generation: solve a lattice and hand the tiles to a world sink.

This module provides the main entry point for generating a hex world. The
solver can hit contradictions, so generation retries with a fresh lattice
(and the next seed) until it succeeds or runs out of attempts. Only a fully
resolved lattice is ever handed to the sink.

The sink is whatever places tiles into a scene; the generator only needs it
to accept place(variant, transform) calls.
"""

from __future__ import annotations

import asyncio
import logging
import random
import time
from typing import Callable, Iterable, Iterator, NamedTuple, Protocol

from ..config import GeneratorConfig
from ..logging_config import log_generation
from ..wfc import (
    AxialCoord,
    HexLattice,
    HexSolver,
    LatticeIncompleteError,
    SolverState,
    TileCatalog,
    TileVariant,
)

logger = logging.getLogger(__name__)


class GenerationFailedError(Exception):
    """Every generation attempt ended in a contradiction."""

    def __init__(self, message: str, attempts: int, last_contradiction: AxialCoord | None = None):
        super().__init__(message)
        self.attempts = attempts
        self.last_contradiction = last_contradiction


class WorldTransform(NamedTuple):
    """Where and how to place a tile: center translation plus yaw in degrees."""

    translation: tuple[float, float, float]
    rotation_degrees: float


class Placement(NamedTuple):
    """One resolved cell, ready to be placed."""

    coord: AxialCoord
    variant: TileVariant
    transform: WorldTransform


class WorldSink(Protocol):
    """
    Protocol for whatever consumes generated tiles.

    place() is called once per cell, in the lattice's stable order.
    """

    def place(self, variant: TileVariant, transform: WorldTransform) -> None:
        ...


class RecordingSink:
    """Sink that keeps every placement in memory."""

    def __init__(self):
        self.placements: list[tuple[TileVariant, WorldTransform]] = []

    def place(self, variant: TileVariant, transform: WorldTransform) -> None:
        self.placements.append((variant, transform))

    def __len__(self) -> int:
        return len(self.placements)


class LoggingSink:
    """Sink that logs each placement."""

    def __init__(self, log: logging.Logger | None = None, level: int = logging.INFO):
        self._logger = log or logger
        self._level = level
        self.count = 0

    def place(self, variant: TileVariant, transform: WorldTransform) -> None:
        x, y, z = transform.translation
        self._logger.log(
            self._level,
            f"PLACE | {variant.tag} | pos=({x:.2f}, {y:.2f}, {z:.2f}) | yaw={transform.rotation_degrees}",
        )
        self.count += 1


def iter_placements(lattice: HexLattice) -> Iterator[Placement]:
    """
    Yield every cell's placement in stable (q, layer, r) order.

    Raises:
        LatticeIncompleteError: If any cell is still unresolved.
    """
    if not lattice.is_complete():
        raise LatticeIncompleteError(
            f"{lattice.unresolved_count()} cells are unresolved; only a collapsed lattice can be placed"
        )

    for cell in lattice.cells():
        transform = WorldTransform(
            translation=lattice.world_position(*cell.coord),
            rotation_degrees=cell.variant.rotation,
        )
        yield Placement(cell.coord, cell.variant, transform)


async def place_lattice(lattice: HexLattice, sink: WorldSink, yield_every: int = 1) -> int:
    """
    Hand every resolved cell to the sink.

    Control is yielded back to the event loop every yield_every placements
    so a shared loop isn't monopolized. 0 disables yielding.

    Returns:
        Number of placements made.

    Raises:
        LatticeIncompleteError: If any cell is still unresolved.
    """
    count = 0
    for placement in iter_placements(lattice):
        sink.place(placement.variant, placement.transform)
        count += 1
        if yield_every and count % yield_every == 0:
            await asyncio.sleep(0)
    return count


def solve_world(
    config: GeneratorConfig,
    catalog: TileCatalog,
    initial_candidates: Iterable[TileVariant] | None = None,
    progress_callback: Callable[[int, int], None] | None = None,
    prepare: Callable[[HexLattice], None] | None = None,
) -> HexLattice:
    """
    Solve a lattice, retrying on contradiction.

    Args:
        config: Lattice size, seed, heap order and retry settings.
        catalog: Variants and adjacency rules.
        initial_candidates: Starting candidates per cell. Defaults to the
                            catalog's variants (empty tiles only if
                            config.include_empty).
        progress_callback: Optional callback(resolved, total_cells).
        prepare: Optional hook run on each fresh lattice before solving,
                 e.g. to pin cells with HexLattice.set.

    Returns:
        The fully resolved lattice.

    Raises:
        GenerationFailedError: If every attempt ends in a contradiction.
    """
    if initial_candidates is None:
        candidates = catalog.variants(include_empty=config.include_empty)
    else:
        candidates = list(initial_candidates)

    last_contradiction: AxialCoord | None = None

    for attempt in range(config.max_retries):
        # Each attempt gets its own seed so a failed layout isn't repeated
        seed = config.seed + attempt if config.seed is not None else None
        rng = random.Random(seed)
        started = time.monotonic()

        # Create fresh lattice for each attempt
        lattice = HexLattice(config.radius, config.height, candidates, catalog.tile_size)
        if prepare is not None:
            prepare(lattice)

        solver = HexSolver(
            lattice,
            catalog,
            rng=rng,
            order=config.heap_order,
            max_backtracks=config.max_backtracks,
            snapshot_interval=config.snapshot_interval,
        )
        state = solver.solve(progress_callback)
        duration_ms = int((time.monotonic() - started) * 1000)

        if state is SolverState.COLLAPSED:
            log_generation(
                logger, attempt + 1, "collapsed", seed=seed, duration_ms=duration_ms,
                details=f"cells={len(lattice)}",
            )
            return lattice

        last_contradiction = solver.contradiction
        log_generation(
            logger, attempt + 1, "contradicted", seed=seed, duration_ms=duration_ms,
            details=f"cell={tuple(last_contradiction) if last_contradiction else None}",
        )
        logger.warning(f"Generation attempt {attempt + 1}/{config.max_retries} hit a contradiction")

    raise GenerationFailedError(
        f"World generation failed after {config.max_retries} attempts. "
        "Try a different seed, a larger retry budget or looser tile rules.",
        attempts=config.max_retries,
        last_contradiction=last_contradiction,
    )


async def generate_world(
    config: GeneratorConfig,
    catalog: TileCatalog,
    sink: WorldSink,
    progress_callback: Callable[[int, int], None] | None = None,
    prepare: Callable[[HexLattice], None] | None = None,
) -> HexLattice:
    """
    Generate a world and place it through the sink.

    Nothing is placed unless the solve collapses.

    Returns:
        The resolved lattice that was placed.

    Raises:
        GenerationFailedError: If every attempt ends in a contradiction.
    """
    lattice = solve_world(config, catalog, progress_callback=progress_callback, prepare=prepare)
    count = await place_lattice(lattice, sink, yield_every=config.yield_every)
    logger.info(f"Placed {count} tiles")
    return lattice
