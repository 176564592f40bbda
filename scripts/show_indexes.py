#!/usr/bin/env python
"""Show collections and their indexes.

Usage:
    python -m scripts.show_indexes
"""

import sys

from vectorsearch.cli import show_indexes_main

if __name__ == "__main__":
    sys.exit(show_indexes_main())
