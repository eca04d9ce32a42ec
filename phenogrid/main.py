"""CLI entry point for phenogrid.

Delegates to the cli module so the project supports
running via `python -m phenogrid.main`.
"""
import sys

from .cli import main as cli_main

if __name__ == "__main__":
    sys.exit(cli_main())
