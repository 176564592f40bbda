#!/usr/bin/env python
"""Generate embeddings for the sample hotel data.

Usage:
    python -m scripts.create_embeddings
"""

import sys

from vectorsearch.cli import create_embeddings_main

if __name__ == "__main__":
    sys.exit(create_embeddings_main())
