"""
Entity resolution: turning display names into tracker identifiers.

Workstreams are looked up board by board in enumeration order, then in
the organization-wide listing. The first board holding a workstream with
the requested name wins, even when lookups run concurrently. Status
labels resolve through the static lane table without any network call.
"""

import asyncio
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Union

from .types import EntityReference, ResolutionPath, StatusLabel
from ...tracker import TrackerError, record_id
from ...utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class BoardLookup:
    """Result of listing one board's workstreams: the list or the failure."""

    board_id: str
    workstreams: List[Dict[str, Any]] = field(default_factory=list)
    error: Optional[Exception] = None

    @property
    def failed(self) -> bool:
        return self.error is not None


def workstream_id(workstream: Dict[str, Any]) -> Optional[str]:
    for key in ("id", "_id", "workstreamId"):
        if workstream.get(key):
            return workstream[key]
    return None


def find_by_name(workstreams: Optional[Iterable[Any]], name: str) -> Optional[str]:
    """Identifier of the first workstream whose name equals ``name``, ignoring case."""
    wanted = name.lower()
    for workstream in workstreams or []:
        if not isinstance(workstream, dict):
            continue
        if (workstream.get("name") or "").lower() == wanted and workstream_id(workstream):
            return workstream_id(workstream)
    return None


def valid_statuses() -> str:
    return ", ".join(label.value for label in StatusLabel)


def unknown_status_message(label: str) -> str:
    return f"Unknown status: {label}. Valid statuses: {valid_statuses()}"


def workstream_not_found_message(name: str) -> str:
    return f"Workstream '{name}' not found; please provide the workstream ID."


class EntityResolver:
    """Resolves workstream names and status labels for one tracker client."""

    def __init__(self, client: Any, lanes: Dict[StatusLabel, str], concurrent: bool = False):
        self.client = client
        self.lanes = lanes
        self.concurrent = concurrent

    async def resolve_workstream(self, name: str) -> EntityReference:
        """
        Resolve a workstream display name.

        Board enumeration errors propagate. Per-board failures are logged
        and the scan moves on to the next board.
        """
        boards = await self.client.list_boards()
        board_ids = [record_id(board) for board in boards or [] if record_id(board)]
        logger.debug(f"Resolving workstream '{name}' across {len(board_ids)} boards")

        if self.concurrent:
            reference = await self._scan_concurrently(name, board_ids)
        else:
            reference = await self._scan_in_order(name, board_ids)
        if reference is not None:
            return reference

        try:
            top_level = await self.client.list_workstreams()
        except TrackerError as e:
            logger.warning(f"Top-level workstream lookup failed: {e}")
            top_level = None

        resolved = find_by_name(top_level, name)
        if resolved:
            logger.debug(f"Workstream '{name}' found in top-level listing: {resolved}")
            return EntityReference(name, resolved, ResolutionPath.TOP_LEVEL_LOOKUP)

        logger.info(f"Workstream '{name}' not found")
        return EntityReference.not_found(name)

    def resolve_status(self, label: Union[str, StatusLabel]) -> EntityReference:
        """Resolve a status label to its lane id through the static table."""
        text = label.value if isinstance(label, StatusLabel) else str(label).strip()
        for status in StatusLabel:
            if status.value.lower() == text.lower() and status in self.lanes:
                return EntityReference(status.value, self.lanes[status], ResolutionPath.DIRECT_ID)
        return EntityReference.not_found(text)

    async def lookup_board(self, board_id: str) -> BoardLookup:
        """List one board's workstreams, capturing a failure instead of raising."""
        try:
            workstreams = await self.client.list_workstreams(board_id)
        except TrackerError as e:
            logger.warning(f"Workstream lookup failed for board {board_id}: {e}")
            return BoardLookup(board_id, error=e)

        if not isinstance(workstreams, list) or not workstreams:
            logger.debug(f"Board {board_id} has no workstreams")
            return BoardLookup(board_id)

        return BoardLookup(board_id, workstreams)

    def _match(self, lookup: BoardLookup, name: str) -> Optional[EntityReference]:
        if lookup.failed:
            return None
        resolved = find_by_name(lookup.workstreams, name)
        if not resolved:
            return None
        logger.debug(f"Workstream '{name}' found on board {lookup.board_id}: {resolved}")
        return EntityReference(name, resolved, ResolutionPath.BOARD_SCOPED_LOOKUP, board_id=lookup.board_id)

    async def _scan_in_order(self, name: str, board_ids: List[str]) -> Optional[EntityReference]:
        for board_id in board_ids:
            reference = self._match(await self.lookup_board(board_id), name)
            if reference is not None:
                return reference
        return None

    async def _scan_concurrently(self, name: str, board_ids: List[str]) -> Optional[EntityReference]:
        tasks = [asyncio.create_task(self.lookup_board(board_id)) for board_id in board_ids]
        try:
            # Awaited in enumeration order so the lowest-ranked match wins
            for task in tasks:
                reference = self._match(await task, name)
                if reference is not None:
                    return reference
            return None
        finally:
            pending = [task for task in tasks if not task.done()]
            for task in pending:
                task.cancel()
            if pending:
                await asyncio.gather(*pending, return_exceptions=True)
