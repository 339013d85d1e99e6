#!/usr/bin/env python3
"""
repomirror - Main Entry Point

Keeps local mirrors of hosted git repositories and reads package
metadata from them.
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent))

from repomirror.cli import main

if __name__ == "__main__":
    main()
