"""
HTTP client for the DevStride tracker REST API.

This module provides a thin async interface over the organization-scoped
endpoints. Not-found responses on lookup endpoints are normalized to
``None`` or ``[]`` so callers can tell "nothing there" from "request
failed"; every other failure is raised as a TrackerError.
"""

import asyncio
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Union

import httpx

from .exceptions import (
    TrackerConfigurationError,
    TrackerConnectionError,
    TrackerError,
    TrackerServerError,
    TrackerTimeoutError,
)
from ..config.models import ItemType, TrackerConfig, WorkflowConfig
from ..utils.logging import get_logger

logger = get_logger(__name__)

SPRINT_PAGE_SIZE = 50
SPRINT_ITEMS_LIMIT = 100


@dataclass
class CreateItemOptions:
    """Optional fields for workstream-scoped item creation."""
    description: Optional[str] = None
    priority: Optional[str] = None
    due_date: Optional[str] = None
    assignee: Optional[str] = None
    parent_number: Optional[str] = None


def record_id(record: Any) -> Optional[str]:
    """Identifier of a tracker record, whichever key the API used."""
    if not isinstance(record, dict):
        return None
    for key in ("id", "_id", "boardId", "workstreamId"):
        if record.get(key):
            return record[key]
    return None


class TrackerClient:
    """
    Async HTTP client for the tracker API.

    Handles authentication, envelope unwrapping, not-found normalization
    and optional retries on connection errors and timeouts.
    """

    def __init__(
        self,
        config: Optional[TrackerConfig] = None,
        workflow: Optional[WorkflowConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Initialize tracker client.

        Args:
            config: Connection settings (base URL, credentials, timeouts)
            workflow: Work type and board parent tables used for creation
            transport: Optional httpx transport, mainly for tests
        """
        self.config = config or TrackerConfig()
        self.workflow = workflow or WorkflowConfig()
        self.base_url = self.config.base_url
        self.max_retries = self.config.max_retries
        self.retry_delay = self.config.retry_delay

        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(self.config.timeout),
            auth=httpx.BasicAuth(self.config.api_key or "", self.config.api_secret or ""),
            headers={
                "Content-Type": "application/json",
                "Accept": "application/json"
            },
            transport=transport
        )

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()

    async def close(self):
        """Close the HTTP client."""
        await self.client.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
        allow_404: bool = False
    ) -> Any:
        """
        Send a request and return the decoded JSON body.

        Returns None for a 404 when ``allow_404`` is set.

        Raises:
            TrackerConnectionError: If unable to connect
            TrackerTimeoutError: If the request times out
            TrackerServerError: If the API returns an error status
        """
        for attempt in range(self.max_retries + 1):
            try:
                logger.debug(f"{method} {path} (attempt {attempt + 1})")
                response = await self.client.request(method, path, params=params, json=json)

                if allow_404 and response.status_code == 404:
                    logger.debug(f"{method} {path} returned 404")
                    return None

                response.raise_for_status()
                if not response.content:
                    return None
                return response.json()

            except httpx.ConnectError as e:
                if attempt < self.max_retries:
                    logger.warning(f"Connection failed (attempt {attempt + 1}), retrying in {self.retry_delay}s...")
                    await asyncio.sleep(self.retry_delay)
                    continue
                raise TrackerConnectionError(
                    f"Unable to connect to tracker API at {self.base_url} after {self.max_retries + 1} attempts: {e}"
                ) from e

            except httpx.TimeoutException as e:
                if attempt < self.max_retries:
                    logger.warning(f"Request timeout (attempt {attempt + 1}), retrying in {self.retry_delay}s...")
                    await asyncio.sleep(self.retry_delay)
                    continue
                raise TrackerTimeoutError(f"{method} {path} timed out after {self.max_retries + 1} attempts") from e

            except httpx.RequestError as e:
                # Any other transport failure
                if attempt < self.max_retries:
                    logger.warning(f"Transport error (attempt {attempt + 1}), retrying in {self.retry_delay}s...")
                    await asyncio.sleep(self.retry_delay)
                    continue
                raise TrackerConnectionError(
                    f"Transport error talking to tracker API for {method} {path} "
                    f"after {self.max_retries + 1} attempts: {e}"
                ) from e

            except httpx.HTTPStatusError as e:
                error_msg = f"Tracker API returned error {e.response.status_code} for {method} {path}"
                try:
                    error_data = e.response.json()
                    if isinstance(error_data, dict):
                        error_msg += f": {error_data.get('message') or error_data.get('detail') or 'Unknown error'}"
                except ValueError:
                    error_msg += f": {e.response.text}"

                raise TrackerServerError(error_msg, e.response.status_code) from e

            except ValueError as e:
                raise TrackerServerError(f"Tracker API returned invalid JSON for {method} {path}: {e}") from e

    @staticmethod
    def _unwrap(data: Any) -> Any:
        """Strip the ``{"data": ...}`` envelope some endpoints use."""
        if isinstance(data, dict) and data.get("data") is not None:
            return data["data"]
        return data

    @staticmethod
    def _item_number(item_id: str) -> str:
        """Reduce a ``prefix:number`` identifier to its number part."""
        return item_id.split(":")[1] if ":" in item_id else item_id

    # Boards and workstreams

    async def list_boards(self) -> Optional[List[Dict[str, Any]]]:
        """List boards, or None when the endpoint is not found."""
        return self._unwrap(await self._request("GET", "/boards", allow_404=True))

    async def get_board(self, board_id: str) -> Optional[Dict[str, Any]]:
        """Fetch a single board, or None when it does not exist."""
        return self._unwrap(await self._request("GET", f"/boards/{board_id}", allow_404=True))

    async def list_workstreams(self, board_id: Optional[str] = None) -> Optional[List[Dict[str, Any]]]:
        """
        List workstreams of one board, or of the whole organization.

        A board-scoped 404 yields None rather than the global listing.
        """
        path = f"/boards/{board_id}/workstreams" if board_id else "/workstreams"
        return self._unwrap(await self._request("GET", path, allow_404=True))

    async def list_boards_and_workstreams(self) -> List[Dict[str, Any]]:
        """
        Collect every workstream visible to the organization.

        Best effort: boards whose lookup fails are skipped and logged.
        """
        result: List[Dict[str, Any]] = []

        try:
            boards = await self.list_boards()
        except TrackerError as e:
            logger.warning(f"Board listing failed, using top-level workstreams only: {e}")
            boards = None

        if isinstance(boards, list):
            for board in boards:
                board_id = record_id(board)
                if not board_id:
                    continue
                try:
                    workstreams = await self.list_workstreams(board_id)
                except TrackerError as e:
                    logger.warning(f"Workstream lookup failed for board {board_id}: {e}")
                    continue
                if isinstance(workstreams, list):
                    result.extend(workstreams)

        top_level = await self.list_workstreams()
        if isinstance(top_level, list):
            result.extend(top_level)

        return result

    async def get_current_sprint_board(
        self,
        folder_id: str,
        today: Optional[date] = None
    ) -> Optional[Dict[str, Any]]:
        """
        Find the time-boxed board in a folder whose date range covers today.

        Boards are fetched page by page following the ``meta.cursor`` value.
        """
        today = today or date.today()
        boards: List[Dict[str, Any]] = []
        cursor = None
        seen_cursors = set()

        while True:
            params: Dict[str, Any] = {"limit": SPRINT_PAGE_SIZE}
            if cursor:
                params["cursor"] = cursor

            page = await self._request("GET", "/boards", params=params, allow_404=True)
            if page is None:
                break

            if isinstance(page, list):
                boards.extend(page)
                break

            if isinstance(page, dict) and isinstance(page.get("data"), list):
                boards.extend(page["data"])

            cursor = (page.get("meta") or {}).get("cursor") if isinstance(page, dict) else None
            if not cursor or cursor in seen_cursors:
                break
            seen_cursors.add(cursor)

        for board in boards:
            if board.get("boardFolderId") != folder_id or not board.get("timeBased"):
                continue
            start = _parse_date(board.get("startDate"))
            end = _parse_date(board.get("endDate"))
            if start and end and start <= today <= end:
                return board

        return None

    async def get_sprint_items(self, board_id: str) -> List[Dict[str, Any]]:
        """Work items attached to a board."""
        params = {"itemType": "workitem", "boardId": board_id, "limit": SPRINT_ITEMS_LIMIT}
        data = await self._request("GET", "/items", params=params, allow_404=True)
        return self._unwrap(data) or []

    # Items

    async def list_items(self, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        """List items, or an empty list when the endpoint is not found."""
        params = {"limit": limit} if limit else None
        data = await self._request("GET", "/items", params=params, allow_404=True)
        return self._unwrap(data) or []

    async def get_item(self, item_id: str) -> Dict[str, Any]:
        """Fetch a single item record."""
        return self._unwrap(await self._request("GET", f"/items/{item_id}"))

    async def create_item(
        self,
        item_type: Union[ItemType, str],
        title: str,
        description: Optional[str] = None
    ) -> Dict[str, Any]:
        """Create an item outside any workstream."""
        payload: Dict[str, Any] = {"type": ItemType(item_type).value, "title": title}
        if description:
            payload["description"] = description

        logger.info(f"Creating {payload['type']}: {title}")
        return self._unwrap(await self._request("POST", "/items", json=payload))

    async def create_item_in_workstream(
        self,
        item_type: Union[ItemType, str],
        title: str,
        board_id: Optional[str],
        options: Optional[CreateItemOptions] = None
    ) -> Dict[str, Any]:
        """
        Create a work item under a parent workstream.

        The parent is ``options.parent_number`` or, failing that, the
        workstream configured for ``board_id``.

        Raises:
            TrackerConfigurationError: If no parent or work type is known
        """
        options = options or CreateItemOptions()

        parent_number = options.parent_number or self.workflow.board_workstreams.get(board_id or "")
        if not parent_number:
            raise TrackerConfigurationError(f"No parent workstream configured for board {board_id}")

        try:
            work_type_id = self.workflow.work_types[ItemType(item_type)]
        except (ValueError, KeyError) as e:
            raise TrackerConfigurationError(f"Unknown item type: {item_type}") from e

        payload: Dict[str, Any] = {"workTypeId": work_type_id, "title": title, "parentNumber": parent_number}
        if board_id:
            payload["boardId"] = board_id
        if options.description:
            payload["description"] = {"html": f"<p>{options.description}</p>"}
        if options.priority:
            payload["priority"] = options.priority
        if options.due_date:
            payload["dueDate"] = options.due_date
        if options.assignee:
            payload["assignee"] = options.assignee

        logger.info(f"Creating {ItemType(item_type).value} under {parent_number}: {title}")
        return self._unwrap(await self._request("POST", "/work-items", json=payload))

    async def update_item(self, item_id: str, patch: Dict[str, Any]) -> Dict[str, Any]:
        """Apply a partial update to a work item."""
        number = self._item_number(item_id)
        logger.info(f"Updating item {number}: {sorted(patch)}")
        return self._unwrap(await self._request("PATCH", f"/work-items/{number}", json=patch))

    async def update_item_status(self, item_id: str, lane_id: str) -> Dict[str, Any]:
        """Move an item to the lane with the given id."""
        return await self.update_item(item_id, {"laneId": lane_id})

    async def assign_item(self, item_id: str, assignee: str) -> Dict[str, Any]:
        """Assign an item to a user by username."""
        return await self.update_item(item_id, {"assigneeUsername": assignee})

    async def post_comment(self, item_number: str, message: str) -> Any:
        """Post an HTML comment on an item; the response is returned verbatim."""
        payload = {"message": {"html": message}, "itemNumber": item_number}
        logger.info(f"Posting comment on {item_number}")
        return await self._request("POST", "/item-comments", json=payload)


def _parse_date(value: Any) -> Optional[date]:
    """Parse an ISO date or timestamp into a date."""
    if not value or not isinstance(value, str):
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
    except ValueError:
        try:
            return date.fromisoformat(value[:10])
        except ValueError:
            logger.debug(f"Ignoring unparseable date: {value}")
            return None
