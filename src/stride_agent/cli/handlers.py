"""
CLI command handlers for Stride Agent.

Results are written to stdout as JSON; diagnostics go to stderr.

Exit codes:
    0  an outcome was produced (success, help or expected failure)
    1  usage or configuration error
    2  the command failed unexpectedly
"""

import asyncio
import json
import sys
from typing import Any, Callable, Optional, TextIO

from ..config import load_config, ConfigurationError, StrideAgentConfig
from ..core.commands import classify, handle_command
from ..tools import create_tool_registry
from ..tracker import create_tracker_client
from ..utils import setup_logging, get_logger, log_config_info, StrideAgentError

EXIT_OK = 0
EXIT_USAGE = 1
EXIT_FAILURE = 2

USAGE = 'Usage: stride-agent \'Create epic "My Epic"\''


def handle_cli_command(
    args,
    stdin: Optional[TextIO] = None,
    stdout: Optional[TextIO] = None,
    client_factory: Optional[Callable[[StrideAgentConfig], Any]] = None
) -> int:
    """
    Handle CLI commands based on parsed arguments.

    Returns:
        int: Exit code
    """
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout

    try:
        config = load_config(args.config)
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_USAGE

    setup_logging(config, verbose=args.verbose)
    log_config_info(config)
    logger = get_logger(__name__)

    if args.list_tools:
        return _handle_list_tools(stdout)

    text = " ".join(args.text).strip() or _read_stdin(stdin)
    if not text:
        print(USAGE, file=sys.stderr)
        return EXIT_USAGE

    try:
        if args.parse_only:
            _print_json(classify(text).to_dict(), stdout)
            return EXIT_OK

        outcome = asyncio.run(_run_command(text, config, client_factory or create_tracker_client))
        _print_json(outcome.to_dict(), stdout)
        return EXIT_OK

    except StrideAgentError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_FAILURE
    except Exception as e:
        logger.debug("Command failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_FAILURE


async def _run_command(text: str, config: StrideAgentConfig, client_factory: Callable[[StrideAgentConfig], Any]):
    client = client_factory(config)
    try:
        return await handle_command(text, client, config)
    finally:
        close = getattr(client, "close", None)
        if close is not None:
            await close()


def _read_stdin(stdin: TextIO) -> str:
    if stdin.isatty():
        return ""
    return stdin.read().strip()


def _handle_list_tools(stdout: TextIO) -> int:
    """List the structured tools."""
    registry = create_tool_registry()
    for schema in registry.list_tools():
        print(f"  {schema.name}: {schema.description}", file=stdout)
    return EXIT_OK


def _print_json(data: Any, stdout: TextIO) -> None:
    print(json.dumps(data, indent=2, default=str), file=stdout)
