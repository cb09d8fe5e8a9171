"""
Wave Function Collapse solver for the hex lattice.

The algorithm:
1. Pop the most constrained cell (fewest candidates) from the priority heap
2. Resolve it to one candidate (weighted random choice)
3. Propagate: narrow each neighbor's candidates to what the new tile accepts,
   and re-prioritize the neighbors that shrank
4. Repeat until every cell is resolved or a cell runs out of candidates

There is no backtracking by default: the first cell popped with zero
candidates ends the solve in CONTRADICTED, and the caller decides whether to
retry with another seed. Snapshot backtracking can be switched on with
max_backtracks.
"""

from __future__ import annotations

import logging
import random
from enum import Enum, auto
from typing import Callable

from ..logging_config import log_solver
from .catalog import TileCatalog
from .grid import AxialCoord, Cell, HexLattice, LatticeSnapshot
from .heap import Comparator, HeapOrder, PriorityHeap
from .tile import TileVariant

logger = logging.getLogger(__name__)


class SolverState(Enum):
    """The current state of the solver."""
    UNCOLLAPSED = auto()    # Not started yet
    COLLAPSING = auto()     # Still solving, more steps needed
    COLLAPSED = auto()      # Every cell resolved successfully
    CONTRADICTED = auto()   # Some cell ran out of candidates


class HexSolver:
    """
    Resolves every cell of a HexLattice against a TileCatalog.

    Usage:
        solver = HexSolver(lattice, catalog, seed=7)
        while solver.step() is SolverState.COLLAPSING:
            pass

    Or in one go:
        state = solver.solve()

    Cells the caller resolved beforehand (HexLattice.set) are kept and
    constrain their neighbors from the start.

    Supports backtracking on contradiction:
        solver = HexSolver(..., max_backtracks=10, snapshot_interval=50)
    """

    def __init__(
        self,
        lattice: HexLattice,
        catalog: TileCatalog,
        rng: random.Random | None = None,
        seed: int | None = None,
        order: HeapOrder | Comparator = HeapOrder.MIN,
        max_backtracks: int = 0,
        snapshot_interval: int = 50,
    ):
        """
        Initialize the solver.

        Args:
            lattice: The lattice to fill. The solver owns it until done.
            catalog: Variants and their adjacency rules.
            rng: Random source for tile choice. Built from seed if omitted.
            seed: Seed for the default random source.
            order: Heap ordering over candidate counts (MIN = fewest first).
            max_backtracks: Contradictions to recover from before giving up.
                            0 keeps the plain detect-and-report behaviour.
            snapshot_interval: Save a snapshot every N resolved cells (only
                               used when backtracking is enabled).

        Raises:
            ValueError: If the lattice starts with variants the catalog
                        does not contain.
        """
        unknown = [v for v in lattice.initial_candidates if v not in catalog]
        if unknown:
            raise ValueError(f"Lattice candidates not in catalog: {sorted(v.tag for v in unknown)}")

        self.lattice = lattice
        self.catalog = catalog
        self.max_backtracks = max_backtracks
        self.snapshot_interval = snapshot_interval
        self._rng = rng if rng is not None else random.Random(seed)
        self._order = order
        self._heap: PriorityHeap[AxialCoord] = PriorityHeap(order)

        # Catalog order, so choices don't depend on set iteration order
        self._rank: dict[TileVariant, int] = {v: i for i, v in enumerate(catalog.variants())}

        self._state = SolverState.UNCOLLAPSED
        self.contradiction: AxialCoord | None = None
        self.step_count = 0
        self._resolved_count = 0

        # For visualization/debugging
        self.last_resolved: AxialCoord | None = None
        self.last_propagated: set[AxialCoord] = set()

        # Backtracking state
        self._snapshots: list[tuple[int, LatticeSnapshot]] = []
        self._last_snapshot_at = 0
        self._backtrack_count = 0

    @property
    def state(self) -> SolverState:
        return self._state

    @property
    def resolved_count(self) -> int:
        """Number of cells resolved so far (pins included)."""
        return self._resolved_count

    @property
    def backtrack_count(self) -> int:
        return self._backtrack_count

    def initialize(self) -> SolverState:
        """
        Propagate from pinned cells and queue every unresolved cell.

        Cells are queued in the lattice's stable coordinate order, so ties
        between equally constrained cells break the same way on every run.

        Two adjacent pins that reject each other end the solve in
        CONTRADICTED before anything is queued.
        """
        if self._state is not SolverState.UNCOLLAPSED:
            return self._state

        pinned = [cell for cell in self.lattice.cells() if cell.is_resolved]
        for cell in pinned:
            if cell.variant not in self.catalog:
                raise ValueError(f"Cell {tuple(cell.coord)} is pinned to unknown variant {cell.variant.tag}")

        clash = self._find_pin_clash(pinned)
        if clash is not None:
            self._resolved_count = len(pinned)
            return self._handle_contradiction(clash)

        for cell in pinned:
            self._propagate(cell.coord, cell.variant)
        self._resolved_count = len(pinned)

        self._rebuild_heap()
        self._state = SolverState.COLLAPSING
        log_solver(
            logger, 0, "initialized",
            f"cells={len(self.lattice)} | pinned={len(pinned)} | candidates={len(self.lattice.initial_candidates)}",
        )

        if not self._heap:
            self._finish()
        return self._state

    def _find_pin_clash(self, pinned: list[Cell]) -> AxialCoord | None:
        """First pinned cell whose pinned neighbor it rejects, if any."""
        for cell in pinned:
            for direction, neighbor_coord in self.lattice.neighbors_of(*cell.coord):
                neighbor = self.lattice.get(*neighbor_coord)
                if neighbor.is_resolved and not self.catalog.allows(cell.variant, direction, neighbor.variant):
                    return cell.coord
        return None

    def _rebuild_heap(self) -> None:
        self._heap.clear()
        for cell in self.lattice.cells():
            if not cell.is_resolved:
                self._heap.insert(cell.coord, cell.entropy)

    def step(self) -> SolverState:
        """
        Resolve one cell and propagate.

        Returns the solver state after this step. Terminal states are
        returned unchanged on further calls.
        """
        if self._state is SolverState.UNCOLLAPSED:
            self.initialize()
        if self._state is not SolverState.COLLAPSING:
            return self._state

        self.last_resolved = None
        self.last_propagated.clear()

        cell = self._next_cell()
        if cell is None:
            return self._finish()

        if cell.is_contradiction:
            return self._handle_contradiction(cell.coord)

        if (
            self.max_backtracks > 0
            and self._resolved_count - self._last_snapshot_at >= self.snapshot_interval
        ):
            self._save_snapshot()

        variant = self._choose(cell)
        cell.resolve(variant)
        self._resolved_count += 1
        self.step_count += 1
        self.last_resolved = cell.coord

        self._propagate(cell.coord, variant)

        if not self._heap:
            return self._finish()
        return self._state

    def _next_cell(self) -> Cell | None:
        """Pop until an unresolved cell comes up (or the heap runs dry)."""
        while True:
            coord = self._heap.pop()
            if coord is None:
                return None
            cell = self.lattice.get(*coord)
            # Cells can be popped after being resolved some other way
            if not cell.is_resolved:
                return cell

    def _finish(self) -> SolverState:
        if self.lattice.is_complete():
            self._state = SolverState.COLLAPSED
            log_solver(logger, self.step_count, "collapsed", f"resolved={self._resolved_count}")
        else:
            self._state = SolverState.CONTRADICTED
            logger.warning("Heap exhausted with unresolved cells left")
        return self._state

    def _choose(self, cell: Cell) -> TileVariant:
        """Weighted random choice among the cell's candidates."""
        candidates = sorted(cell.candidates, key=self._rank.__getitem__)
        weights = [self.catalog.weight(v) for v in candidates]
        return self._rng.choices(candidates, weights=weights, k=1)[0]

    def _propagate(self, coord: AxialCoord, variant: TileVariant) -> None:
        """
        Narrow the neighbors of a freshly resolved cell.

        Neighbors that end up empty stay in superposition; they are reported
        as contradictions when popped, not here.
        """
        for direction, neighbor_coord in self.lattice.neighbors_of(*coord):
            neighbor = self.lattice.get(*neighbor_coord)
            if neighbor.is_resolved:
                continue

            allowed = [
                candidate
                for candidate in neighbor.candidates
                if self.catalog.allows(variant, direction, candidate)
            ]
            if neighbor.constrain_to(allowed):
                self.last_propagated.add(neighbor_coord)
                self._heap.update_priority(neighbor_coord, neighbor.entropy)

    def _save_snapshot(self) -> None:
        """Save current lattice state for backtracking."""
        self._snapshots.append((self._resolved_count, self.lattice.snapshot()))
        self._last_snapshot_at = self._resolved_count

    def _restore_snapshot(self) -> bool:
        """Restore to last snapshot. Returns False if no snapshots available."""
        if not self._snapshots:
            return False

        resolved_count, snapshot = self._snapshots.pop()
        self.lattice.restore(snapshot)
        self._resolved_count = resolved_count
        self._last_snapshot_at = self._snapshots[-1][0] if self._snapshots else 0
        self._backtrack_count += 1
        self._rebuild_heap()
        return True

    def _handle_contradiction(self, coord: AxialCoord) -> SolverState:
        """Backtrack if allowed, otherwise stop in CONTRADICTED."""
        if self._backtrack_count < self.max_backtracks and self._restore_snapshot():
            logger.info(
                f"Contradiction at {tuple(coord)}, backtracking to {self._resolved_count} resolved cells "
                f"(backtrack {self._backtrack_count}/{self.max_backtracks})"
            )
            return self._state

        self.contradiction = coord
        self._state = SolverState.CONTRADICTED
        log_solver(
            logger, self.step_count, "contradicted",
            f"cell={tuple(coord)} | resolved={self._resolved_count} | backtracks={self._backtrack_count}",
        )
        return self._state

    def solve(self, progress_callback: Callable[[int, int], None] | None = None) -> SolverState:
        """
        Run the solver to a terminal state.

        Args:
            progress_callback: Optional callback(resolved, total_cells),
                               called after every step.

        Returns:
            COLLAPSED on success, CONTRADICTED otherwise.
        """
        total = len(self.lattice)
        state = self.initialize()
        while state is SolverState.COLLAPSING:
            state = self.step()
            if progress_callback is not None:
                progress_callback(self._resolved_count, total)
        return state

    def reset(self) -> None:
        """Reset the solver and lattice for a new run (pins are cleared too)."""
        self.lattice.reset()
        self._heap = PriorityHeap(self._order)
        self._state = SolverState.UNCOLLAPSED
        self.contradiction = None
        self.step_count = 0
        self._resolved_count = 0
        self.last_resolved = None
        self.last_propagated.clear()
        self._snapshots.clear()
        self._last_snapshot_at = 0
        self._backtrack_count = 0
