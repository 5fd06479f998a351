"""Main entry point for running stepcalc_pkg as a module.

This allows running stepcalc with:
    python -m stepcalc_pkg --list
    python -m stepcalc_pkg number-theory gcd-lcm a=12 b=18

This is equivalent to running:
    python -m stepcalc_pkg.cli
    python stepcalc.py
"""

from __future__ import annotations

import sys

from .cli import main_entry

if __name__ == "__main__":
    sys.exit(main_entry())
