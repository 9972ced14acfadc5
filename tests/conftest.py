"""Pytest configuration for local package imports.

This prepends the repository `src` directory to sys.path so tests can import
the `purpleair` package and its top-level modules without installing them.
"""

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT / "src"))
