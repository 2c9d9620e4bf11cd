"""
Shared types for command interpretation.
"""

from dataclasses import dataclass, field
from typing import Optional, List, Dict, Any
from enum import Enum

from ...config.models import StatusLabel


class IntentKind(Enum):
    """Command shapes recognized in free text."""

    CREATE_EPIC = "create_epic"
    CREATE_STORY = "create_story"
    GET_ITEM_STATUS = "get_item_status"
    UPDATE_ITEM_STATUS = "update_item_status"
    UPDATE_ITEM_FIELD = "update_item_field"
    POST_COMMENT = "post_comment"
    ASSIGN_ITEM = "assign_item"
    UNRECOGNIZED = "unrecognized"


class ResolutionPath(Enum):
    """How an entity reference got (or failed to get) its identifier."""

    DIRECT_ID = "direct_id"
    BOARD_SCOPED_LOOKUP = "board_scoped_lookup"
    TOP_LEVEL_LOOKUP = "top_level_lookup"
    NOT_FOUND = "not_found"


@dataclass
class Command:
    """A classified command with its extracted slots."""

    intent: IntentKind
    slots: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        slots = {k: (v.value if isinstance(v, Enum) else v) for k, v in self.slots.items()}
        return {"intent": self.intent.value, "slots": slots}


@dataclass(frozen=True)
class EntityReference:
    """A human-supplied name and the identifier it resolved to."""

    display_name: str
    resolved_id: Optional[str]
    resolution_path: ResolutionPath
    board_id: Optional[str] = None

    @property
    def found(self) -> bool:
        return self.resolution_path is not ResolutionPath.NOT_FOUND

    @classmethod
    def direct(cls, identifier: str) -> "EntityReference":
        return cls(display_name=identifier, resolved_id=identifier, resolution_path=ResolutionPath.DIRECT_ID)

    @classmethod
    def not_found(cls, display_name: str) -> "EntityReference":
        return cls(display_name=display_name, resolved_id=None, resolution_path=ResolutionPath.NOT_FOUND)


@dataclass
class Outcome:
    """
    Uniform result of handling one command.

    Exactly one of three shapes: a success payload (``id`` and ``raw``),
    a help payload (``message`` and ``examples``), or an expected failure
    (``error``).
    """

    id: Optional[str] = None
    raw: Any = None
    error: Optional[str] = None
    message: Optional[str] = None
    examples: List[str] = field(default_factory=list)

    @property
    def is_error(self) -> bool:
        return self.error is not None

    @property
    def is_help(self) -> bool:
        return self.message is not None

    @classmethod
    def success(cls, record: Any, fallback_id: Optional[str] = None) -> "Outcome":
        """Normalize a backend record into ``{id, raw}``."""
        identifier = None
        if isinstance(record, dict):
            for key in ("id", "_id", "number"):
                if record.get(key):
                    identifier = record[key]
                    break
        return cls(id=identifier or fallback_id, raw=record)

    @classmethod
    def failure(cls, error: str) -> "Outcome":
        return cls(error=error)

    @classmethod
    def help(cls, message: str, examples: List[str]) -> "Outcome":
        return cls(message=message, examples=list(examples))

    def to_dict(self) -> Dict[str, Any]:
        if self.is_error:
            return {"error": self.error}
        if self.is_help:
            return {"message": self.message, "examples": self.examples}
        return {"id": self.id, "raw": self.raw}


__all__ = [
    "IntentKind",
    "ResolutionPath",
    "Command",
    "EntityReference",
    "Outcome",
    "StatusLabel",
]
