"""
Tile definitions for hex-prism Wave Function Collapse.

A TilePrototype is an authored base tile: a name plus, for each of its
sides, the neighbors it may mate with. A TileVariant is a prototype turned
to one of six 60-degree orientations. Variants are what actually occupy
cells in the lattice.

Hex side slots are numbered in 60-degree steps, plus two vertical slots:

         120   60
      180   (  )   0
         240  300

    ABOVE: layer + 1
    BELOW: layer - 1
"""

from __future__ import annotations

from enum import Enum
from typing import NamedTuple

from pydantic import BaseModel, ConfigDict, Field


# The six orientations a base tile can be turned to
ROTATIONS: tuple[int, ...] = (0, 60, 120, 180, 240, 300)

# Side labels for the vertical slots (as authored on prototypes)
ABOVE_LABEL = 1
BELOW_LABEL = -1


class Direction(Enum):
    """
    The 8 adjacency slots of a hex prism.

    Lateral slots are named by the angle (in degrees) their side faces.
    The enum value is the slot index used by adjacency tables.
    """

    DEG_0 = 0
    DEG_60 = 1
    DEG_120 = 2
    DEG_180 = 3
    DEG_240 = 4
    DEG_300 = 5
    ABOVE = 6
    BELOW = 7

    @classmethod
    def from_degrees(cls, degrees: int) -> Direction:
        """Get the lateral slot facing the given angle (any multiple of 60)."""
        if degrees % 60 != 0:
            raise ValueError(f"{degrees} is not a multiple of 60 degrees")
        return cls((degrees % 360) // 60)

    @classmethod
    def lateral(cls) -> tuple[Direction, ...]:
        """The six lateral slots in angle order."""
        return _LATERAL

    @property
    def is_lateral(self) -> bool:
        return self.value < 6

    @property
    def degrees(self) -> int:
        """Angle this side faces. Only defined for lateral slots."""
        if not self.is_lateral:
            raise ValueError(f"{self.name} has no lateral angle")
        return self.value * 60

    @property
    def opposite(self) -> Direction:
        """The slot a neighbor uses to face back toward us."""
        return _DIRECTION_OPPOSITES[self]

    @property
    def offset(self) -> tuple[int, int, int]:
        """Axial (dq, dr, dlayer) step to the neighbor in this slot."""
        return _DIRECTION_OFFSETS[self]


_LATERAL: tuple[Direction, ...] = (
    Direction.DEG_0,
    Direction.DEG_60,
    Direction.DEG_120,
    Direction.DEG_180,
    Direction.DEG_240,
    Direction.DEG_300,
)

# Opposite lateral slots are 180 degrees apart
_DIRECTION_OPPOSITES: dict[Direction, Direction] = {
    **{d: Direction((d.value + 3) % 6) for d in _LATERAL},
    Direction.ABOVE: Direction.BELOW,
    Direction.BELOW: Direction.ABOVE,
}

# Standard axial neighbor offsets, listed counter-clockwise from 0 degrees.
# Matches HexLattice.world_position: +r is +x, +q is +z (shifted half a tile in x).
_DIRECTION_OFFSETS: dict[Direction, tuple[int, int, int]] = {
    Direction.DEG_0: (0, 1, 0),
    Direction.DEG_60: (1, 0, 0),
    Direction.DEG_120: (1, -1, 0),
    Direction.DEG_180: (0, -1, 0),
    Direction.DEG_240: (-1, 0, 0),
    Direction.DEG_300: (-1, 1, 0),
    Direction.ABOVE: (0, 0, 1),
    Direction.BELOW: (0, 0, -1),
}


class TileVariant(NamedTuple):
    """
    A base tile at one orientation.

    Two variants are the same iff both the base tile and the rotation match.
    The tag (e.g. "road120") is the string adjacency tables refer to.
    """

    base_id: str
    rotation: int

    @property
    def tag(self) -> str:
        return f"{self.base_id}{self.rotation}"

    def __str__(self) -> str:
        return self.tag


class TileSize(NamedTuple):
    """Bounding geometry of a tile: lateral length (x), width (z) and height (y)."""

    length: float
    width: float
    height: float


DEFAULT_TILE_SIZE = TileSize(length=1.0, width=1.0, height=1.0)


class NeighborLink(BaseModel):
    """
    One compatible-neighbor declaration on a prototype's side.

    Attributes:
        prototype: Name of the neighboring prototype.
        side: The neighbor's own side label that mates with ours. Required
              for lateral sides, ignored for above/below.
    """

    model_config = ConfigDict(frozen=True)

    prototype: str | None = None
    side: int | str | None = None


class TilePrototype(BaseModel):
    """
    An authored base tile.

    Attributes:
        name: Stable identifier, used as the prefix of every variant tag.
        sides: Side label -> neighbor links. Lateral labels are signed
               multiples of 60 ("0", "60", ..., "-60"); "1" is above and
               "-1" is below. A side with no links accepts any neighbor.
        weight: Relative frequency when the solver picks among candidates.
        empty: Marks a filler tile left out of the default candidate set.
        size: Bounding geometry, used to space tiles in world coordinates.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    sides: dict[str, tuple[NeighborLink, ...]] = Field(default_factory=dict)
    weight: float = Field(default=1.0, gt=0)
    empty: bool = False
    size: TileSize | None = None


def link(prototype: str, side: int | None = None) -> NeighborLink:
    """Shorthand for declaring a NeighborLink."""
    return NeighborLink(prototype=prototype, side=side)


def link_all_sides(prototype: str) -> tuple[NeighborLink, ...]:
    """
    Links to every lateral side of a neighbor.

    Declaring these on one of our sides makes the neighbor compatible
    at every orientation.
    """
    return tuple(NeighborLink(prototype=prototype, side=rotation) for rotation in ROTATIONS)
