"""
Hex lattice for Wave Function Collapse.

The lattice is the "wave function": a 3D block of cells addressed by axial
hex coordinates (q, r) plus a vertical layer. Every cell starts in
superposition (any candidate variant) and is resolved exactly once.

Coordinates outside the lattice are a caller bug, so every accessor checks
bounds and raises rather than clamping or returning a default.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Iterator, NamedTuple

from .tile import DEFAULT_TILE_SIZE, Direction, TileSize, TileVariant


# -----------------------------------------------------------------------------
# Exceptions
# -----------------------------------------------------------------------------


class LatticeError(Exception):
    """Base exception for lattice contract violations."""

    pass


class InvalidDimensionsError(LatticeError):
    """Radius is odd or negative, or height is negative."""

    pass


class CoordinateOutOfRangeError(LatticeError):
    """Coordinate is outside the lattice bounds."""

    def __init__(self, message: str, coord: tuple[int, int, int] | None = None):
        super().__init__(message)
        self.coord = coord


class CellAlreadyResolvedError(LatticeError):
    """A resolved cell cannot be resolved again."""

    def __init__(self, message: str, coord: tuple[int, int, int] | None = None):
        super().__init__(message)
        self.coord = coord


class LatticeIncompleteError(LatticeError):
    """Operation needs every cell resolved."""

    pass


# -----------------------------------------------------------------------------
# Cells
# -----------------------------------------------------------------------------


class AxialCoord(NamedTuple):
    """Axial hex coordinate plus vertical layer."""

    q: int
    r: int
    layer: int

    def step(self, direction: Direction) -> AxialCoord:
        """The coordinate one step away in the given direction (unchecked)."""
        dq, dr, dlayer = direction.offset
        return AxialCoord(self.q + dq, self.r + dr, self.layer + dlayer)


@dataclass
class Cell:
    """
    A single cell of the lattice.

    Superposition: variant is None and candidates holds what is still possible.
    Resolved: variant is set. Terminal, a resolved cell never changes again.

    An unresolved cell with no candidates left is a contradiction.
    """

    coord: AxialCoord
    candidates: set[TileVariant] = field(default_factory=set)
    variant: TileVariant | None = None

    @property
    def is_resolved(self) -> bool:
        return self.variant is not None

    @property
    def is_contradiction(self) -> bool:
        """Still in superposition but nothing left to choose from."""
        return self.variant is None and not self.candidates

    @property
    def entropy(self) -> int:
        """
        How uncertain this cell is.

        Simple count of candidates; resolved cells count as 1.
        Lower = more constrained = should be resolved first.
        """
        if self.variant is not None:
            return 1
        return len(self.candidates)

    def resolve(self, variant: TileVariant) -> None:
        """Commit this cell to a single variant."""
        if self.variant is not None:
            raise CellAlreadyResolvedError(
                f"Cell {tuple(self.coord)} is already resolved to {self.variant.tag}",
                tuple(self.coord),
            )
        self.variant = variant
        self.candidates = {variant}

    def constrain_to(self, allowed: Iterable[TileVariant]) -> bool:
        """
        Keep only candidates that are also in allowed.

        Resolved cells are never touched.

        Returns True if the cell lost candidates.
        """
        if self.variant is not None:
            return False
        old_count = len(self.candidates)
        self.candidates &= set(allowed)
        return len(self.candidates) < old_count


# Saved cell states, for restoring after a contradiction
LatticeSnapshot = dict[AxialCoord, tuple[frozenset[TileVariant], TileVariant | None]]


class HexLattice:
    """
    The 3D block of hex cells.

    q and r both range over [-radius/2, radius/2] and layer over [0, height),
    giving (radius + 1)^2 * height cells. World placement is derived from the
    tile size (lateral length, width and vertical height).
    """

    def __init__(
        self,
        radius: int,
        height: int,
        initial_candidates: Iterable[TileVariant],
        tile_size: TileSize = DEFAULT_TILE_SIZE,
    ):
        """
        Create a lattice with every cell in superposition.

        Args:
            radius: Even, non-negative extent of the q and r axes.
            height: Number of layers (non-negative).
            initial_candidates: Candidate variants every cell starts with.
            tile_size: Bounding size of one tile, for world placement.

        Raises:
            InvalidDimensionsError: If radius is odd or negative, or height is negative.
        """
        if isinstance(radius, bool) or not isinstance(radius, int) or radius < 0 or radius % 2 != 0:
            raise InvalidDimensionsError(f"Radius must be an even, non-negative integer, got {radius!r}")
        if isinstance(height, bool) or not isinstance(height, int) or height < 0:
            raise InvalidDimensionsError(f"Height must be a non-negative integer, got {height!r}")

        self.radius = radius
        self.height = height
        self.half = radius // 2
        self.tile_size = tile_size
        self.initial_candidates: frozenset[TileVariant] = frozenset(initial_candidates)

        side = radius + 1
        # Indexed [q][layer][r], offset by half so index 0 is -radius/2.
        # Each cell gets its own copy of the candidate set.
        self._cells: list[list[list[Cell]]] = [
            [
                [
                    Cell(
                        coord=AxialCoord(qi - self.half, ri - self.half, layer),
                        candidates=set(self.initial_candidates),
                    )
                    for ri in range(side)
                ]
                for layer in range(height)
            ]
            for qi in range(side)
        ]

    def __len__(self) -> int:
        return (self.radius + 1) ** 2 * self.height

    def in_bounds(self, q: int, r: int, layer: int) -> bool:
        """Check whether a coordinate lies inside the lattice."""
        return (
            -self.half <= q <= self.half
            and -self.half <= r <= self.half
            and 0 <= layer < self.height
        )

    def _check(self, q: int, r: int, layer: int) -> None:
        if not self.in_bounds(q, r, layer):
            raise CoordinateOutOfRangeError(
                f"Coordinate ({q}, {r}, {layer}) is outside the lattice "
                f"(q, r in [{-self.half}, {self.half}], layer in [0, {self.height}))",
                (q, r, layer),
            )

    def get(self, q: int, r: int, layer: int) -> Cell:
        """
        Get the cell at a coordinate.

        Raises:
            CoordinateOutOfRangeError: If the coordinate is outside the lattice.
        """
        self._check(q, r, layer)
        return self._cells[q + self.half][layer][r + self.half]

    def set(self, q: int, r: int, layer: int, variant: TileVariant) -> None:
        """
        Resolve the cell at a coordinate to a variant.

        Callers may use this to pin cells before solving.

        Raises:
            CoordinateOutOfRangeError: If the coordinate is outside the lattice.
            CellAlreadyResolvedError: If the cell was already resolved.
        """
        self.get(q, r, layer).resolve(variant)

    def __getitem__(self, coord: tuple[int, int, int]) -> Cell:
        return self.get(*coord)

    def world_position(self, q: int, r: int, layer: int) -> tuple[float, float, float]:
        """
        Axial -> world translation of a cell's center.

        Standard axial-to-offset hex transform, with y as the vertical axis:
            x = (r + q/2) * length
            y = layer * height
            z = 3/4 * q * width
        """
        self._check(q, r, layer)
        length, width, height = self.tile_size
        return (
            (r + 0.5 * q) * length,
            layer * height,
            0.75 * q * width,
        )

    def neighbors_of(self, q: int, r: int, layer: int) -> list[tuple[Direction, AxialCoord]]:
        """
        In-bounds neighbors of a coordinate, with the direction to each.

        Direction is FROM the input coordinate TO the neighbor.
        """
        self._check(q, r, layer)
        origin = AxialCoord(q, r, layer)
        result = []
        for direction in Direction:
            coord = origin.step(direction)
            if self.in_bounds(*coord):
                result.append((direction, coord))
        return result

    def coords(self) -> Iterator[AxialCoord]:
        """All coordinates in stable order: lexicographic (q, layer, r)."""
        for plane in self._cells:
            for row in plane:
                for cell in row:
                    yield cell.coord

    def cells(self) -> Iterator[Cell]:
        """All cells, in the same order as coords()."""
        for plane in self._cells:
            for row in plane:
                yield from row

    def is_complete(self) -> bool:
        """Check if every cell is resolved."""
        return all(cell.is_resolved for cell in self.cells())

    def unresolved_count(self) -> int:
        return sum(1 for cell in self.cells() if not cell.is_resolved)

    def snapshot(self) -> LatticeSnapshot:
        """Capture every cell's state."""
        return {
            cell.coord: (frozenset(cell.candidates), cell.variant)
            for cell in self.cells()
        }

    def restore(self, snapshot: LatticeSnapshot) -> None:
        """Put every cell back to a captured state."""
        for cell in self.cells():
            candidates, variant = snapshot[cell.coord]
            cell.candidates = set(candidates)
            cell.variant = variant

    def reset(self) -> None:
        """Reset all cells to the initial superposition."""
        for cell in self.cells():
            cell.candidates = set(self.initial_candidates)
            cell.variant = None
