"""
Main entry point for the inspector package.

Usage:
    python -m kubearch_py contexts [OPTIONS]
    python -m kubearch_py inspect [OPTIONS]
    python -m kubearch_py report [OPTIONS]
"""

import sys


def main() -> int:
    """Main entry point."""
    from .cli import main as cli_main
    return cli_main()


if __name__ == "__main__":
    sys.exit(main())
