#!/usr/bin/env python
"""Vector search with a DiskANN index.

Usage:
    python -m scripts.diskann
"""

import sys

from vectorsearch.cli import diskann_main

if __name__ == "__main__":
    sys.exit(diskann_main())
