"""
Main entry point for the Stride Agent CLI application.

This module provides the entry point used by the installed
``stride-agent`` console script and by ``python -m stride_agent.main``.
"""

import sys

from .cli import parse_args, handle_cli_command


def main(argv=None) -> int:
    """Main entry point for Stride Agent."""
    try:
        args = parse_args(argv)
        return handle_cli_command(args)
    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
