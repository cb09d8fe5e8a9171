"""Shared test fixtures for hexwfc."""

import tempfile
from pathlib import Path

import pytest

from hexwfc.wfc import (
    HexLattice,
    TileCatalog,
    TilePrototype,
    link,
    link_all_sides,
)


@pytest.fixture
def temp_data_dir() -> Path:
    """Create a temporary data directory for tests."""
    with tempfile.TemporaryDirectory(prefix="hexwfc_test_") as tmpdir:
        yield Path(tmpdir)


# =============================================================================
# Catalogs
# =============================================================================


@pytest.fixture
def blank_catalog() -> TileCatalog:
    """A single prototype that declares nothing on any side."""
    return TileCatalog([TilePrototype(name="blank")])


@pytest.fixture
def stacking_catalog() -> TileCatalog:
    """
    Ground and air with vertical rules only.

    Ground must have air above it, air must have ground below it. Any single
    vertical neighbor leaves at least one candidate, so a two-layer lattice
    can never contradict.
    """
    return TileCatalog([
        TilePrototype(name="ground", sides={"1": (link("air"),)}),
        TilePrototype(name="air", sides={"-1": (link("ground"),)}),
    ])


@pytest.fixture
def open_field_catalog() -> TileCatalog:
    """Two prototypes that accept each other on every side, at every orientation."""
    everything = link_all_sides("meadow") + link_all_sides("forest")
    sides = {str(side): everything for side in (0, 60, 120, 180, 240, 300)}
    sides["1"] = (link("meadow"), link("forest"))
    sides["-1"] = (link("meadow"), link("forest"))
    return TileCatalog([
        TilePrototype(name="meadow", weight=3.0, sides=sides),
        TilePrototype(name="forest", sides=sides),
    ])


@pytest.fixture
def lonely_catalog() -> TileCatalog:
    """
    Every lateral side only mates with side 0 of another copy.

    A neighbor in direction d then forces this tile's rotation to be d, so
    any cell with two lateral neighbors is impossible.
    """
    sides = {str(side): (link("lonely", 0),) for side in (0, 60, 120, 180, 240, 300)}
    return TileCatalog([TilePrototype(name="lonely", sides=sides)])


@pytest.fixture
def small_lattice(blank_catalog: TileCatalog) -> HexLattice:
    """Radius 2, single layer lattice over the blank catalog."""
    return HexLattice(2, 1, blank_catalog.variants())
