"""hexwfc - generate a hex-prism world from the command line."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Callable

from dotenv import load_dotenv
from pydantic import ValidationError
from tqdm import tqdm

from .config import GeneratorConfig
from .generation import (
    GenerationFailedError,
    RecordingSink,
    create_default_catalog,
    generate_world,
)
from .logging_config import setup_logging
from .wfc import CatalogDefinitionError, HeapOrder, TileCatalog, load_catalog


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hexwfc",
        description="hexwfc - Wave Function Collapse on a hex-prism lattice",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  hexwfc                            # Sample tileset, default size
  hexwfc --radius 6 --height 3      # Bigger world
  hexwfc --catalog tiles.json       # Your own prototypes
  hexwfc --seed 42 --summary        # Reproducible run, counts only

Settings can also come from HEXWFC_* environment variables or a .env file.
        """,
    )
    parser.add_argument("--catalog", type=Path, help="JSON file with tile prototypes (default: built-in sample)")
    parser.add_argument("--radius", type=int, help="Even lattice radius")
    parser.add_argument("--height", type=int, help="Number of layers")
    parser.add_argument("--seed", type=int, help="Random seed for reproducible worlds")
    parser.add_argument(
        "--order",
        choices=[o.value for o in HeapOrder],
        help="Resolve cells with the fewest (min) or most (max) candidates first",
    )
    parser.add_argument("--max-retries", type=int, help="Attempts before giving up on contradictions")
    parser.add_argument("--max-backtracks", type=int, help="Snapshot backtracks per attempt (default: 0)")
    parser.add_argument(
        "--data",
        type=Path,
        default=Path("data"),
        help="Directory for the log file (default: data/)",
    )
    parser.add_argument("--summary", action="store_true", help="Print tile counts instead of every placement")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging to console")
    return parser


def progress_updater(pbar: tqdm) -> Callable[[int, int], None]:
    """Progress callback that advances pbar, restarting it when a retry begins."""
    last_progress = [0]

    def update_progress(current: int, total: int) -> None:
        if current < last_progress[0]:
            pbar.reset(total=total)
            last_progress[0] = 0
        delta = current - last_progress[0]
        if delta > 0:
            pbar.update(delta)
        last_progress[0] = current

    return update_progress


async def run_generation(config: GeneratorConfig, catalog: TileCatalog, summary: bool) -> int:
    """Generate a world and print the placements.

    Returns:
        Exit code
    """
    sink = RecordingSink()
    total_cells = (config.radius + 1) ** 2 * config.height
    pbar = tqdm(total=total_cells, desc="  Collapsing", unit="cells")
    update_progress = progress_updater(pbar)

    try:
        lattice = await generate_world(config, catalog, sink, progress_callback=update_progress)
    except GenerationFailedError as e:
        pbar.close()
        print(f"Error: {e}")
        return 1
    pbar.close()

    print(f"Generated {len(lattice)} cells (radius={config.radius}, height={config.height})")
    print()

    if summary:
        counts: dict[str, int] = {}
        for variant, _ in sink.placements:
            counts[variant.base_id] = counts.get(variant.base_id, 0) + 1
        for name, count in sorted(counts.items(), key=lambda item: -item[1]):
            print(f"  {name:<16} {count}")
        return 0

    for (variant, transform), coord in zip(sink.placements, lattice.coords()):
        x, y, z = transform.translation
        print(
            f"  ({coord.q:+d}, {coord.r:+d}, {coord.layer}) "
            f"{variant.tag:<16} at ({x:8.2f}, {y:8.2f}, {z:8.2f}) yaw {transform.rotation_degrees}"
        )
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point for hexwfc."""
    # Load environment variables first
    load_dotenv()

    args = build_parser().parse_args(argv)

    console_level = logging.DEBUG if args.debug else logging.WARNING
    log_path = setup_logging(args.data, console_level=console_level)

    try:
        config = GeneratorConfig.from_env(
            radius=args.radius,
            height=args.height,
            seed=args.seed,
            heap_order=args.order,
            max_retries=args.max_retries,
            max_backtracks=args.max_backtracks,
            catalog_path=args.catalog,
        )
    except ValidationError as e:
        print(f"Error: invalid settings\n{e}")
        return 2

    from . import __version__
    print(f"hexwfc v{__version__}")
    print(f"Log file: {log_path}")

    try:
        if config.catalog_path is not None:
            catalog = load_catalog(config.catalog_path)
            print(f"Catalog: {config.catalog_path} ({len(catalog)} variants)")
        else:
            catalog = create_default_catalog()
            print(f"Catalog: built-in sample ({len(catalog)} variants)")
    except (CatalogDefinitionError, OSError) as e:
        print(f"Error: could not load catalog: {e}")
        return 1
    print()

    return asyncio.run(run_generation(config, catalog, args.summary))


if __name__ == "__main__":
    sys.exit(main())
