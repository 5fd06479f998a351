#!/usr/bin/env python3
"""
stepcalc - Step-by-step calculator

Thin wrapper that delegates all functionality to the stepcalc_pkg package.

Usage:
    python stepcalc.py --list                                  # Show operations
    python stepcalc.py number-theory primality n=360           # Run one operation
    python stepcalc.py geometry calculate shape=cone r=3 h=4 --format json
"""

from __future__ import annotations

import sys
from typing import List, Optional


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for stepcalc.

    Delegates to the stepcalc_pkg.cli module, which handles argument
    parsing, dispatch and output formatting.

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    from stepcalc_pkg.cli import main_entry

    return main_entry(argv)


if __name__ == "__main__":
    sys.exit(main())
