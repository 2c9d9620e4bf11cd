"""
Command-line argument parser for Stride Agent.
"""

import argparse


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser."""
    parser = argparse.ArgumentParser(
        prog="stride-agent",
        description="Stride Agent - free-text commands for the DevStride tracker",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  stride-agent 'Create epic "Launch v2"'
  stride-agent 'Create epic "Launch v2" in workstream "Mobile"'
  stride-agent move I20135 to Code Review
  stride-agent "What's the status of I20147?"
  echo "assign I20146 to Nico" | stride-agent
  stride-agent --parse-only start work on I20135
  stride-agent --list-tools
        """
    )

    parser.add_argument(
        "--version",
        action="version",
        version="Stride Agent 0.1.0"
    )

    parser.add_argument(
        "--config",
        type=str,
        metavar="PATH",
        help="Path to configuration file"
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging on stderr"
    )

    parser.add_argument(
        "--parse-only",
        action="store_true",
        help="Print the classified command without calling the tracker"
    )

    parser.add_argument(
        "--list-tools",
        action="store_true",
        help="List the structured tools served over MCP"
    )

    parser.add_argument(
        "text",
        nargs="*",
        help="Command text; read from standard input when omitted"
    )

    return parser


def parse_args(args=None):
    """Parse command line arguments."""
    parser = create_parser()
    return parser.parse_args(args)
