"""
stillpoint CLI entry point.

Usage:
    python -m stillpoint.cli MODEL [options]
"""

import sys
from .main import main

if __name__ == "__main__":
    sys.exit(main())
