"""
hexwfc - Wave Function Collapse on hex-prism lattices.

Fills a 3D hexagonal lattice with rotated tile variants so that every pair of
neighboring cells satisfies the tiles' declared adjacency rules.

Main entry points:
- TileCatalog: compiles base prototypes into rotated variants + adjacency rules
- HexLattice: the bounds-checked cell storage with axial -> world mapping
- HexSolver: the collapse loop
- generate_world: solve with retries and hand tiles to a WorldSink

Example usage:
    from hexwfc import GeneratorConfig, RecordingSink, generate_world
    from hexwfc.generation import create_default_catalog

    sink = RecordingSink()
    lattice = await generate_world(GeneratorConfig(radius=4, height=2, seed=7),
                                   create_default_catalog(), sink)
"""

__version__ = "0.1.0"

from .config import GeneratorConfig
from .logging_config import setup_logging, get_logger
from .wfc import (
    Direction,
    TileVariant,
    TilePrototype,
    TileCatalog,
    CatalogDefinitionError,
    HexLattice,
    LatticeError,
    PriorityHeap,
    HeapOrder,
    HexSolver,
    SolverState,
)
from .generation import (
    GenerationFailedError,
    RecordingSink,
    WorldSink,
    WorldTransform,
    generate_world,
    solve_world,
)

__all__ = [
    "__version__",
    "GeneratorConfig",
    "setup_logging",
    "get_logger",
    "Direction",
    "TileVariant",
    "TilePrototype",
    "TileCatalog",
    "CatalogDefinitionError",
    "HexLattice",
    "LatticeError",
    "PriorityHeap",
    "HeapOrder",
    "HexSolver",
    "SolverState",
    "GenerationFailedError",
    "RecordingSink",
    "WorldSink",
    "WorldTransform",
    "generate_world",
    "solve_world",
]
