"""World generation for hexwfc."""

from .tileset import SAMPLE_TILE_SIZE, create_default_catalog, create_default_prototypes
from .world import (
    GenerationFailedError,
    LoggingSink,
    Placement,
    RecordingSink,
    WorldSink,
    WorldTransform,
    generate_world,
    iter_placements,
    place_lattice,
    solve_world,
)

__all__ = [
    "SAMPLE_TILE_SIZE",
    "create_default_catalog",
    "create_default_prototypes",
    "GenerationFailedError",
    "LoggingSink",
    "Placement",
    "RecordingSink",
    "WorldSink",
    "WorldTransform",
    "generate_world",
    "iter_placements",
    "place_lattice",
    "solve_world",
]
