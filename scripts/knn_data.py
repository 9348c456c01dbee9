#!/usr/bin/env python
"""Compute the k nearest neighbors of every vector in a binary data file."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from knndata.cli import main


if __name__ == "__main__":
    sys.exit(main())
