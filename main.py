#!/usr/bin/env python3
"""
hexwfc - Wave Function Collapse on a hex-prism lattice.

Run this to generate a world from the built-in sample tileset or a JSON
catalog. Same as the installed `hexwfc` command.
"""

import sys

from hexwfc.main import main


if __name__ == "__main__":
    sys.exit(main())
