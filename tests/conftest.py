"""Pytest configuration for the codelang test suite."""

import sys
from pathlib import Path

# Add py/ to the path so tests run without installing the package
sys.path.insert(0, str(Path(__file__).parent.parent / "py"))
