"""
Command dispatch: one classified command, one tracker operation.
"""

from typing import Any

from .resolver import EntityResolver, unknown_status_message, workstream_not_found_message
from .types import Command, IntentKind, Outcome
from ...config.models import ItemType
from ...tracker import CreateItemOptions
from ...utils.logging import get_logger, log_performance

logger = get_logger(__name__)


class CommandDispatcher:
    """Invokes the tracker operation for a command and normalizes the result."""

    def __init__(self, client: Any, resolver: EntityResolver):
        self.client = client
        self.resolver = resolver

        self._handlers = {
            IntentKind.CREATE_EPIC: self._create_epic,
            IntentKind.CREATE_STORY: self._create_story,
            IntentKind.GET_ITEM_STATUS: self._get_item_status,
            IntentKind.UPDATE_ITEM_STATUS: self._update_item_status,
            IntentKind.UPDATE_ITEM_FIELD: self._update_item_field,
            IntentKind.POST_COMMENT: self._post_comment,
            IntentKind.ASSIGN_ITEM: self._assign_item,
            IntentKind.UNRECOGNIZED: self._unrecognized,
        }

    async def dispatch(self, command: Command) -> Outcome:
        """
        Carry out ``command``.

        Expected failures (unknown workstream or status) come back as error
        outcomes before any mutating call; tracker errors propagate.
        """
        handler = self._handlers[command.intent]
        with log_performance(f"dispatch {command.intent.value}"):
            return await handler(command.slots)

    async def _create_epic(self, slots) -> Outcome:
        title = slots["title"]
        workstream_name = slots.get("workstream")

        if not workstream_name:
            return Outcome.success(await self.client.create_item(ItemType.EPIC, title))

        reference = await self.resolver.resolve_workstream(workstream_name)
        if not reference.found:
            return Outcome.failure(workstream_not_found_message(workstream_name))

        record = await self.client.create_item_in_workstream(
            ItemType.EPIC,
            title,
            reference.board_id,
            CreateItemOptions(parent_number=reference.resolved_id)
        )
        return Outcome.success(record)

    async def _create_story(self, slots) -> Outcome:
        return Outcome.success(await self.client.create_item(ItemType.STORY, slots["title"]))

    async def _get_item_status(self, slots) -> Outcome:
        item_id = slots["item_id"]
        return Outcome.success(await self.client.get_item(item_id), fallback_id=item_id)

    async def _update_item_status(self, slots) -> Outcome:
        item_id = slots["item_id"]
        reference = self.resolver.resolve_status(slots["status"])
        if not reference.found:
            return Outcome.failure(unknown_status_message(reference.display_name))

        logger.info(f"Moving {item_id} to {reference.display_name}")
        record = await self.client.update_item_status(item_id, reference.resolved_id)
        return Outcome.success(record, fallback_id=item_id)

    async def _update_item_field(self, slots) -> Outcome:
        item_id = slots["item_id"]
        record = await self.client.update_item(item_id, slots["patch"])
        return Outcome.success(record, fallback_id=item_id)

    async def _post_comment(self, slots) -> Outcome:
        item_id = slots["item_id"]
        record = await self.client.post_comment(item_id, slots["message"])
        return Outcome.success(record, fallback_id=item_id)

    async def _assign_item(self, slots) -> Outcome:
        item_id = slots["item_id"]
        record = await self.client.assign_item(item_id, slots["assignee"])
        return Outcome.success(record, fallback_id=item_id)

    async def _unrecognized(self, slots) -> Outcome:
        return Outcome.help(slots["message"], slots["examples"])
