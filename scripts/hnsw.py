#!/usr/bin/env python
"""Vector search with an HNSW index.

Usage:
    python -m scripts.hnsw
"""

import sys

from vectorsearch.cli import hnsw_main

if __name__ == "__main__":
    sys.exit(hnsw_main())
