"""
Command interpretation for Stride Agent.

This module turns free-text tracker commands into typed intents, resolves
named entities to identifiers and dispatches one tracker operation per
command.
"""

from .types import IntentKind, ResolutionPath, Command, EntityReference, Outcome, StatusLabel
from .extractors import extract_quoted, extract_after_keywords
from .classifier import classify, Rule, RULES
from .resolver import EntityResolver, BoardLookup
from .dispatcher import CommandDispatcher
from .processor import CommandProcessor, handle_command

__all__ = [
    "IntentKind",
    "ResolutionPath",
    "Command",
    "EntityReference",
    "Outcome",
    "StatusLabel",
    "extract_quoted",
    "extract_after_keywords",
    "classify",
    "Rule",
    "RULES",
    "EntityResolver",
    "BoardLookup",
    "CommandDispatcher",
    "CommandProcessor",
    "handle_command",
]
