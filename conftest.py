"""Configure pytest for the rosemary repository."""

import pathlib
import sys

# Make `common` and `rosemary` importable without installing the package
sys.path.insert(0, str(pathlib.Path(__file__).parent))
