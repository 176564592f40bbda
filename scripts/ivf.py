#!/usr/bin/env python
"""Vector search with an IVF index.

Usage:
    python -m scripts.ivf
"""

import sys

from vectorsearch.cli import ivf_main

if __name__ == "__main__":
    sys.exit(ivf_main())
