"""
Intent classification for free-text tracker commands.

Classification walks an ordered rule table. Each rule pairs a predicate
with a slot extractor; the first rule whose predicate matches and whose
extractor returns slots decides the intent. An extractor returning None
hands the text on to the next rule, so several rules may look at the
same input before one claims it.
"""

import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from .extractors import contains_word, extract_after_keywords, extract_quoted, keyword_pattern
from .types import Command, IntentKind, StatusLabel
from ...utils.error_handling import CommandError
from ...utils.logging import get_logger

logger = get_logger(__name__)

Slots = Dict[str, Any]

ITEM_ID_PATTERN = re.compile(r'\bI\d+\b', re.IGNORECASE)
FIELD_ITEM_PATTERN = re.compile(r'\bitem\s+(\w[\w-]*)', re.IGNORECASE)
WORKSTREAM_PATTERN = re.compile(
    r'in workstream "([^"]+)"|in the "([^"]+)" workstream|in workstream \'([^\']+)\'',
    re.IGNORECASE,
)

CREATION_VERBS = ("create", "add", "make", "new")
INQUIRY_VERBS = ("status", "get", "what", "show")
MOVEMENT_VERBS = ("move", "start", "begin", "set", "change", "mark", "working")
MOVEMENT_TARGETS = ("work", "status", "to")
PROGRESS_VERBS = ("start", "move", "begin", "working")
POSTING_VERBS = ("post", "add", "comment", "say")

WORKSTREAM_KEYWORDS = ["in workstream", "in the workstream"]
COMMENT_KEYWORDS = ["saying", "with", "message", "saying:"]
ASSIGNEE_KEYWORDS = ["to", "assign"]

HELP_MESSAGE = "Could not parse command."
HELP_EXAMPLES = [
    'Create epic "My Epic"',
    'Create epic "My Epic" in workstream "Mobile"',
    'Create story "User can log in"',
    "What's the status of I20147?",
    "Move I20135 to Code Review",
    'Update item ITEM_ID set title "New title"',
    'Comment on I20135 saying "Looks good"',
    "Assign I20146 to Nico",
]


@dataclass(frozen=True)
class Rule:
    """One entry of the classification table."""

    name: str
    predicate: Callable[[str], bool]
    extractor: Callable[[str], Optional[Slots]]
    intent: IntentKind


def find_item_id(text: str) -> Optional[str]:
    """First ``I<digits>`` token, upper-cased."""
    match = ITEM_ID_PATTERN.search(text)
    return match.group(0).upper() if match else None


def find_status(text: str) -> Optional[StatusLabel]:
    """First status label, in table order, whose text occurs in the input."""
    for label in StatusLabel:
        if keyword_pattern(label.value).search(text):
            return label
    return None


def find_workstream(text: str) -> Optional[str]:
    """Workstream name from an ``in workstream ...`` clause."""
    match = WORKSTREAM_PATTERN.search(text)
    if match:
        return match.group(1) or match.group(2) or match.group(3)
    return extract_after_keywords(text, WORKSTREAM_KEYWORDS)


def _title_keywords(item_type: str) -> List[str]:
    return [
        f"{item_type} called",
        f"{item_type} named",
        f"{item_type}:",
        f"create {item_type}",
        f"add {item_type}",
        f"new {item_type}",
    ]


def _extract_title(text: str, item_type: str) -> str:
    quoted = extract_quoted(text)
    if quoted:
        return quoted

    title = extract_after_keywords(text, _title_keywords(item_type))
    if not title:
        return text

    # An unquoted title runs up to a trailing workstream clause
    clause = re.search(r'\s+in (?:the )?(?:workstream\b|"|\')', title, re.IGNORECASE)
    if clause and clause.start() > 0:
        return title[:clause.start()]
    return title


# Predicates

def is_create_epic(text: str) -> bool:
    return contains_word(text, *CREATION_VERBS) and contains_word(text, "epic")


def is_create_story(text: str) -> bool:
    return contains_word(text, *CREATION_VERBS) and contains_word(text, "story")


def is_status_query(text: str) -> bool:
    return contains_word(text, *INQUIRY_VERBS) and ITEM_ID_PATTERN.search(text) is not None


def is_status_update(text: str) -> bool:
    if contains_word(text, *MOVEMENT_VERBS) and contains_word(text, *MOVEMENT_TARGETS):
        return True
    return find_status(text) is not None


def is_field_update(text: str) -> bool:
    return contains_word(text, "update") and contains_word(text, "item")


def is_comment(text: str) -> bool:
    return contains_word(text, *POSTING_VERBS) and ITEM_ID_PATTERN.search(text) is not None


def is_assignment(text: str) -> bool:
    return contains_word(text, "assign") and contains_word(text, "to")


# Slot extractors

def extract_epic_slots(text: str) -> Optional[Slots]:
    slots: Slots = {"title": _extract_title(text, "epic")}
    workstream = find_workstream(text)
    if workstream:
        slots["workstream"] = workstream
    return slots


def extract_story_slots(text: str) -> Optional[Slots]:
    return {"title": _extract_title(text, "story")}


def extract_status_query_slots(text: str) -> Optional[Slots]:
    item_id = find_item_id(text)
    return {"item_id": item_id} if item_id else None


def extract_status_update_slots(text: str) -> Optional[Slots]:
    item_id = find_item_id(text)
    if not item_id:
        return None

    status = find_status(text)
    if status is None and contains_word(text, *PROGRESS_VERBS):
        status = StatusLabel.IN_PROGRESS
    if status is None:
        return None

    return {"item_id": item_id, "status": status}


def extract_field_update_slots(text: str) -> Optional[Slots]:
    match = FIELD_ITEM_PATTERN.search(text)
    if not match:
        return None

    patch: Dict[str, Any] = {}
    new_title = extract_quoted(text)
    if contains_word(text, "title") and new_title:
        patch["title"] = new_title

    if not patch:
        raise CommandError(
            "No recognized update fields (try quoting the new title).",
            details={"item_id": match.group(1)}
        )

    return {"item_id": match.group(1), "patch": patch}


def extract_comment_slots(text: str) -> Optional[Slots]:
    item_id = find_item_id(text)
    if not item_id:
        return None

    message = extract_quoted(text) or extract_after_keywords(text, COMMENT_KEYWORDS)
    if not message or message == text:
        return None

    return {"item_id": item_id, "message": message}


def extract_assignment_slots(text: str) -> Optional[Slots]:
    item_id = find_item_id(text)
    assignee = extract_after_keywords(text, ASSIGNEE_KEYWORDS)
    if not item_id or not assignee:
        return None
    return {"item_id": item_id, "assignee": assignee}


RULES: List[Rule] = [
    Rule("create_epic", is_create_epic, extract_epic_slots, IntentKind.CREATE_EPIC),
    Rule("create_story", is_create_story, extract_story_slots, IntentKind.CREATE_STORY),
    Rule("status_query", is_status_query, extract_status_query_slots, IntentKind.GET_ITEM_STATUS),
    Rule("status_update", is_status_update, extract_status_update_slots, IntentKind.UPDATE_ITEM_STATUS),
    Rule("field_update", is_field_update, extract_field_update_slots, IntentKind.UPDATE_ITEM_FIELD),
    Rule("comment", is_comment, extract_comment_slots, IntentKind.POST_COMMENT),
    Rule("assignment", is_assignment, extract_assignment_slots, IntentKind.ASSIGN_ITEM),
]


def classify(text: str, rules: Optional[List[Rule]] = None) -> Command:
    """
    Classify ``text`` into exactly one Command.

    Raises:
        CommandError: For a field update naming no recognized field
    """
    text = text.strip()

    for rule in rules if rules is not None else RULES:
        if not rule.predicate(text):
            continue

        slots = rule.extractor(text)
        if slots is None:
            logger.debug(f"Rule '{rule.name}' matched but found no slots, falling through")
            continue

        logger.debug(f"Rule '{rule.name}' classified input as {rule.intent.value}")
        return Command(rule.intent, slots)

    logger.debug("No rule matched; returning help")
    return Command(IntentKind.UNRECOGNIZED, {"message": HELP_MESSAGE, "examples": list(HELP_EXAMPLES)})
