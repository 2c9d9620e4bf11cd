"""
Main command processor for Stride Agent.

This module runs the interpretation pipeline: classify the text, resolve
named entities, dispatch exactly one tracker operation.
"""

from typing import Any, Optional

from .classifier import classify
from .dispatcher import CommandDispatcher
from .resolver import EntityResolver
from .types import Command, Outcome
from ...config.models import StrideAgentConfig
from ...utils.logging import get_logger


class CommandProcessor:
    """
    Turns free-text commands into tracker operations.

    Holds no per-command state; one instance may serve concurrent
    commands.
    """

    def __init__(self, client: Any, config: Optional[StrideAgentConfig] = None):
        self.client = client
        self.config = config or StrideAgentConfig()
        self.logger = get_logger(__name__)

        self.resolver = EntityResolver(
            client,
            self.config.workflow.lanes,
            concurrent=self.config.resolver.concurrent_board_lookups
        )
        self.dispatcher = CommandDispatcher(client, self.resolver)

    def parse(self, text: str) -> Command:
        """Classify ``text`` without touching the tracker."""
        return classify(text)

    async def process(self, text: str) -> Outcome:
        """
        Handle one command.

        Raises:
            CommandError: For a field update naming no recognized field
            TrackerError: For unexpected backend failures
        """
        self.logger.info(f"Processing command: {text[:80]}")

        command = self.parse(text)
        self.logger.debug(f"Classified as {command.intent.value}: {command.to_dict()['slots']}")

        outcome = await self.dispatcher.dispatch(command)
        if outcome.is_error:
            self.logger.info(f"Command not carried out: {outcome.error}")
        return outcome


async def handle_command(text: str, client: Any, config: Optional[StrideAgentConfig] = None) -> Outcome:
    """Process a single free-text command with a fresh processor."""
    return await CommandProcessor(client, config).process(text)
