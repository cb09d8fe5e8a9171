"""
Built-in sample tileset.

Four prototypes that stack into a simple landscape:

    air     (filler above the ground)
    grass   road        (surface tiles)
    rock                (bedrock)

The road is a straight strip running through sides 0 and 180: its ends only
mate with other road ends, its flanks mate with grass or other road flanks.
Everything else accepts its lateral neighbors at any orientation.
"""

import math

from ..wfc import NeighborLink, TileCatalog, TilePrototype, TileSize, link, link_all_sides

ROAD_ENDS = (0, 180)
ROAD_FLANKS = (60, 120, 240, 300)

# Regular hex tiles 8 units across the flats, 4 units tall
SAMPLE_TILE_SIZE = TileSize(length=8.0, width=8.0 * 2 / math.sqrt(3), height=4.0)


def _road_flank_links() -> tuple[NeighborLink, ...]:
    return tuple(link("road", side) for side in ROAD_FLANKS)


def create_default_prototypes() -> list[TilePrototype]:
    """
    Create the sample prototypes with all adjacency rules declared.

    Returns a list in catalog order.
    """
    surface_neighbors = (
        link_all_sides("grass")
        + _road_flank_links()
        + link_all_sides("air")
        + link_all_sides("rock")
    )

    grass = TilePrototype(
        name="grass",
        weight=4.0,
        size=SAMPLE_TILE_SIZE,
        sides={
            **{str(side): surface_neighbors for side in ROAD_FLANKS + ROAD_ENDS},
            "1": (link("air"),),
            "-1": (link("rock"),),
        },
    )

    road = TilePrototype(
        name="road",
        weight=1.0,
        sides={
            # Road ends continue into another road's end
            **{str(side): tuple(link("road", end) for end in ROAD_ENDS) for side in ROAD_ENDS},
            **{
                str(side): link_all_sides("grass") + _road_flank_links() + link_all_sides("air")
                for side in ROAD_FLANKS
            },
            "1": (link("air"),),
            "-1": (link("rock"),),
        },
    )

    rock = TilePrototype(
        name="rock",
        weight=1.5,
        sides={
            **{
                str(side): link_all_sides("rock") + link_all_sides("grass") + link_all_sides("air")
                for side in ROAD_FLANKS + ROAD_ENDS
            },
            "1": (link("rock"), link("grass"), link("road"), link("air")),
            "-1": (link("rock"),),
        },
    )

    # Lateral sides left open: air sits next to anything
    air = TilePrototype(
        name="air",
        weight=2.0,
        sides={
            "1": (link("air"),),
            "-1": (link("air"), link("grass"), link("road"), link("rock")),
        },
    )

    return [grass, road, rock, air]


def create_default_catalog() -> TileCatalog:
    """Compile the sample prototypes into a catalog."""
    return TileCatalog(create_default_prototypes())
