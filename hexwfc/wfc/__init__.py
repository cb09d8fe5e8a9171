"""Wave Function Collapse on a hex-prism lattice."""

from .tile import (
    ROTATIONS,
    DEFAULT_TILE_SIZE,
    Direction,
    TileVariant,
    TileSize,
    NeighborLink,
    TilePrototype,
    link,
    link_all_sides,
)
from .catalog import (
    AdjacencyEntry,
    CatalogDefinitionError,
    SideLink,
    TileCatalog,
    compile_adjacencies,
    construct_all_variants,
    load_catalog,
    load_prototypes,
    parse_side_label,
)
from .grid import (
    AxialCoord,
    Cell,
    HexLattice,
    LatticeError,
    InvalidDimensionsError,
    CoordinateOutOfRangeError,
    CellAlreadyResolvedError,
    LatticeIncompleteError,
)
from .heap import HeapOrder, PriorityHeap
from .solver import HexSolver, SolverState

__all__ = [
    # Tiles
    "ROTATIONS",
    "DEFAULT_TILE_SIZE",
    "Direction",
    "TileVariant",
    "TileSize",
    "NeighborLink",
    "TilePrototype",
    "link",
    "link_all_sides",
    # Catalog
    "AdjacencyEntry",
    "CatalogDefinitionError",
    "SideLink",
    "TileCatalog",
    "compile_adjacencies",
    "construct_all_variants",
    "load_catalog",
    "load_prototypes",
    "parse_side_label",
    # Lattice
    "AxialCoord",
    "Cell",
    "HexLattice",
    "LatticeError",
    "InvalidDimensionsError",
    "CoordinateOutOfRangeError",
    "CellAlreadyResolvedError",
    "LatticeIncompleteError",
    # Heap
    "HeapOrder",
    "PriorityHeap",
    # Solver
    "HexSolver",
    "SolverState",
]
