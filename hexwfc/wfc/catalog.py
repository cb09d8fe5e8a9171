"""
Tile catalog: rotated variants and their compiled adjacency rules.

Authors declare a handful of base prototypes. The catalog turns each one into
six rotated variants and compiles, for every variant, the set of neighbor
tags it accepts in each of the 8 directions. That table is what the solver
consults when propagating constraints.

Construction is all-or-nothing: any malformed declaration raises
CatalogDefinitionError and no catalog is produced.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Iterable, Iterator, NamedTuple

from pydantic import TypeAdapter, ValidationError

from ..logging_config import log_catalog
from .tile import (
    ABOVE_LABEL,
    BELOW_LABEL,
    DEFAULT_TILE_SIZE,
    ROTATIONS,
    Direction,
    TilePrototype,
    TileSize,
    TileVariant,
)

logger = logging.getLogger(__name__)

# One frozenset of accepted neighbor tags per Direction, indexed by Direction.value
AdjacencyEntry = tuple[frozenset[str], ...]


class CatalogDefinitionError(Exception):
    """A prototype declaration cannot be compiled into a catalog."""

    def __init__(self, message: str, prototype: str | None = None):
        super().__init__(message)
        self.prototype = prototype


class SideLink(NamedTuple):
    """
    A parsed neighbor declaration.

    side is the declaring prototype's slot at rotation 0. For lateral slots
    neighbor_side holds the neighbor's own side in degrees (0-300); for
    vertical slots it is None.
    """

    side: Direction
    neighbor: str
    neighbor_side: int | None


def parse_side_label(label: int | str, prototype: str | None = None) -> Direction:
    """
    Convert an authored side label into a slot at rotation 0.

    Signed multiples of 60 are lateral sides (normalized into 0-300),
    1 is above and -1 is below.

    Raises:
        CatalogDefinitionError: If the label is not one of those integers.
    """
    if isinstance(label, bool):
        raise CatalogDefinitionError(f"Side label {label!r} is not an integer", prototype)
    try:
        value = int(label)
    except (TypeError, ValueError):
        raise CatalogDefinitionError(
            f"Side label {label!r} could not be converted to a number", prototype
        ) from None

    if value == ABOVE_LABEL:
        return Direction.ABOVE
    if value == BELOW_LABEL:
        return Direction.BELOW
    if value % 60 == 0:
        return Direction.from_degrees(value)

    raise CatalogDefinitionError(
        f"Side label {label!r} is neither a multiple of 60 nor an above/below marker",
        prototype,
    )


def parse_links(prototype: TilePrototype) -> tuple[SideLink, ...]:
    """
    Flatten a prototype's side declarations into SideLinks.

    Raises:
        CatalogDefinitionError: On bad side labels or incomplete links.
    """
    links: list[SideLink] = []

    for label, neighbor_links in prototype.sides.items():
        side = parse_side_label(label, prototype.name)

        for neighbor_link in neighbor_links:
            if not neighbor_link.prototype:
                raise CatalogDefinitionError(
                    f"Side {label} of {prototype.name} declares a link with no neighbor",
                    prototype.name,
                )

            if not side.is_lateral:
                links.append(SideLink(side, neighbor_link.prototype, None))
                continue

            if neighbor_link.side is None:
                raise CatalogDefinitionError(
                    f"Side {label} of {prototype.name} links to {neighbor_link.prototype} "
                    "without naming the neighbor's side",
                    prototype.name,
                )
            neighbor_side = parse_side_label(neighbor_link.side, prototype.name)
            if not neighbor_side.is_lateral:
                raise CatalogDefinitionError(
                    f"Lateral side {label} of {prototype.name} links to vertical side "
                    f"{neighbor_link.side} of {neighbor_link.prototype}",
                    prototype.name,
                )
            links.append(SideLink(side, neighbor_link.prototype, neighbor_side.degrees))

    return tuple(links)


def normalize_rotation(rotation: int) -> int:
    """Reduce a rotation into 0-300. Rotations must be multiples of 60."""
    if rotation % 60 != 0:
        raise ValueError(f"Rotation {rotation} is not a multiple of 60 degrees")
    return rotation % 360


def neighbor_orientation(rotated_side: int, neighbor_side: int) -> int:
    """
    Orientation a neighbor must have for its side to mate with ours.

    Our side faces rotated_side; the neighbor's side neighbor_side must face
    the opposite way, rotated_side + 180. The +540 keeps the subtraction
    non-negative before reduction.
    """
    return (rotated_side - neighbor_side + 540) % 360


def construct_all_variants(prototype: TilePrototype) -> list[TileVariant]:
    """Build one variant per canonical rotation."""
    return [TileVariant(prototype.name, rotation) for rotation in ROTATIONS]


def _compile_links(links: Iterable[SideLink], rotation: int) -> AdjacencyEntry:
    result: list[set[str]] = [set() for _ in Direction]

    for side_link in links:
        if side_link.side.is_lateral:
            rotated_side = (side_link.side.degrees + rotation) % 360
            slot = Direction.from_degrees(rotated_side)
            orientation = neighbor_orientation(rotated_side, side_link.neighbor_side)
            result[slot.value].add(f"{side_link.neighbor}{orientation}")
        else:
            # Vertical stacking ignores lateral rotation: every orientation mates
            for orientation in ROTATIONS:
                result[side_link.side.value].add(f"{side_link.neighbor}{orientation}")

    return tuple(frozenset(tags) for tags in result)


def compile_adjacencies(prototype: TilePrototype, rotation: int) -> AdjacencyEntry:
    """
    Compile a prototype's neighbor declarations at one rotation.

    Each lateral side is turned by the rotation to find the slot it faces,
    and each link on it yields the tag of the neighbor variant whose side
    faces back. Above/below links accept the neighbor at every orientation.

    Returns:
        8 frozensets of neighbor tags, indexed by Direction.value. An empty
        set means the side declared nothing.

    Raises:
        CatalogDefinitionError: On malformed declarations.
        ValueError: If rotation is not a multiple of 60.
    """
    return _compile_links(parse_links(prototype), normalize_rotation(rotation))


class TileCatalog:
    """
    Every rotated variant of a set of prototypes, with compiled adjacencies.

    The catalog is an ordinary value: build one per tileset and hand it to
    the solver. Nothing is registered globally.

    An empty compatibility set means the side is unconstrained. Two variants
    may sit next to each other when each accepts the other across the
    shared side (see allows()).
    """

    def __init__(self, prototypes: Iterable[TilePrototype]):
        """
        Compile a catalog.

        Args:
            prototypes: The authored base tiles.

        Raises:
            CatalogDefinitionError: If any declaration is malformed, names an
                unknown prototype, or two variants would share a tag.
        """
        self._prototypes: dict[str, TilePrototype] = {}
        for prototype in prototypes:
            if prototype.name in self._prototypes:
                raise CatalogDefinitionError(
                    f"Duplicate prototype name {prototype.name!r}", prototype.name
                )
            self._prototypes[prototype.name] = prototype

        # Flat (prototype, side) -> links table, resolved by name
        self._links: dict[tuple[str, Direction], tuple[SideLink, ...]] = {}
        for prototype in self._prototypes.values():
            grouped: dict[Direction, list[SideLink]] = {}
            for side_link in parse_links(prototype):
                if side_link.neighbor not in self._prototypes:
                    raise CatalogDefinitionError(
                        f"{prototype.name} links to unknown prototype {side_link.neighbor!r}",
                        prototype.name,
                    )
                grouped.setdefault(side_link.side, []).append(side_link)
            for side, side_links in grouped.items():
                self._links[(prototype.name, side)] = tuple(side_links)

        self._variants: list[TileVariant] = []
        self._by_tag: dict[str, TileVariant] = {}
        self._adjacency: dict[TileVariant, AdjacencyEntry] = {}

        for prototype in self._prototypes.values():
            links = [
                side_link
                for direction in Direction
                for side_link in self._links.get((prototype.name, direction), ())
            ]
            for variant in construct_all_variants(prototype):
                if variant.tag in self._by_tag:
                    other = self._by_tag[variant.tag]
                    raise CatalogDefinitionError(
                        f"Variant tag {variant.tag!r} is ambiguous between "
                        f"{other.base_id}@{other.rotation} and {variant.base_id}@{variant.rotation}",
                        prototype.name,
                    )
                self._variants.append(variant)
                self._by_tag[variant.tag] = variant
                self._adjacency[variant] = _compile_links(links, variant.rotation)

        log_catalog(logger, "compiled", prototypes=len(self._prototypes), variants=len(self._variants))

    def __len__(self) -> int:
        return len(self._variants)

    def __iter__(self) -> Iterator[TileVariant]:
        return iter(self._variants)

    def __contains__(self, variant: object) -> bool:
        return variant in self._adjacency

    @property
    def prototypes(self) -> dict[str, TilePrototype]:
        return dict(self._prototypes)

    @property
    def tile_size(self) -> TileSize:
        """Bounding geometry of the first prototype that declares one."""
        for prototype in self._prototypes.values():
            if prototype.size is not None:
                return prototype.size
        return DEFAULT_TILE_SIZE

    def variants(self, include_empty: bool = True) -> list[TileVariant]:
        """All variants in prototype order, optionally without filler tiles."""
        if include_empty:
            return list(self._variants)
        return [v for v in self._variants if not self._prototypes[v.base_id].empty]

    def links(self, prototype: str, side: Direction) -> tuple[SideLink, ...]:
        """Parsed declarations on one side of a prototype (at rotation 0)."""
        return self._links.get((prototype, side), ())

    def adjacency(self, variant: TileVariant) -> AdjacencyEntry:
        """All 8 compatibility sets of a variant."""
        return self._adjacency[variant]

    def compatible(self, variant: TileVariant, direction: Direction) -> frozenset[str]:
        """Tags the variant accepts in the given direction."""
        return self._adjacency[variant][direction.value]

    def variant_for_tag(self, tag: str) -> TileVariant:
        """Look up a variant by its tag."""
        return self._by_tag[tag]

    def weight(self, variant: TileVariant) -> float:
        return self._prototypes[variant.base_id].weight

    def allows(self, variant: TileVariant, direction: Direction, other: TileVariant) -> bool:
        """
        Whether other may sit in the given direction from variant.

        Both sides of the shared face must agree: variant must accept other
        in direction, and other must accept variant in the opposite direction.
        """
        ours = self._adjacency[variant][direction.value]
        if ours and other.tag not in ours:
            return False
        theirs = self._adjacency[other][direction.opposite.value]
        return not theirs or variant.tag in theirs


_PROTOTYPE_LIST = TypeAdapter(list[TilePrototype])


def load_prototypes(path: Path | str) -> list[TilePrototype]:
    """
    Load prototypes from a JSON file holding a list of prototype objects.

    Raises:
        CatalogDefinitionError: If the file is not valid JSON or does not
            match the prototype schema.
    """
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise CatalogDefinitionError(f"Catalog file {path} is not valid UTF-8 JSON: {e}") from e

    try:
        prototypes = _PROTOTYPE_LIST.validate_python(data)
    except ValidationError as e:
        raise CatalogDefinitionError(f"Catalog file {path} is malformed: {e}") from e

    log_catalog(logger, "loaded", prototypes=len(prototypes), details=str(path))
    return prototypes


def load_catalog(path: Path | str) -> TileCatalog:
    """Load and compile a catalog from a JSON file."""
    return TileCatalog(load_prototypes(path))
