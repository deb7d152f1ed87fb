"""
Friend Finder: Conversation Store.

The demo chat with the sample partner, persisted under
`chat_demo_messages` as one ordered list. List order is creation order;
messages are only ever appended. After every append the whole list is
written back, and a failed write leaves the in-memory list ahead of disk.
While the stored history cannot be read, appends stay in memory only and
are written together with that history once it can be read.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Callable

from pydantic import TypeAdapter

from src.core.persistence import decode_record, time_id, write_record
from src.data.catalog import SAMPLE_PARTNER
from src.data.models import ChatMessage, ChatPartner, MessageKind
from src.ports.storage_port import PersistenceError

if TYPE_CHECKING:
    from src.ports.storage_port import KeyValueStorage

logger = logging.getLogger(__name__)

CHAT_KEY = "chat_demo_messages"

_MESSAGES_ADAPTER = TypeAdapter(list[ChatMessage])


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ConversationStore:
    """Ordered message list for the single demo conversation."""

    def __init__(
        self,
        storage: KeyValueStorage,
        clock: Callable[[], datetime] = _utcnow,
        partner: ChatPartner = SAMPLE_PARTNER,
    ) -> None:
        self._storage = storage
        self._clock = clock
        self.partner = partner
        self._messages: list[ChatMessage] = []
        self._loaded = False
        self._lock = asyncio.Lock()

    @property
    def messages(self) -> list[ChatMessage]:
        """The in-memory list as of the last load or append."""
        return list(self._messages)

    async def load(self) -> list[ChatMessage]:
        """Reload the persisted list; [] when it cannot be read."""
        async with self._lock:
            try:
                raw = await self._storage.get_item(CHAT_KEY)
            except PersistenceError as exc:
                logger.warning("Could not read '%s', using default: %s", CHAT_KEY, exc)
                return []
            self._messages = decode_record(CHAT_KEY, raw, _MESSAGES_ADAPTER) or []
            self._loaded = True
        return list(self._messages)

    async def append_message(self, text: str) -> ChatMessage | None:
        """Send a plain message. Blank text is ignored and returns None."""
        return await self._append(text, MessageKind.MESSAGE)

    async def append_proposal(self, activity: str) -> ChatMessage | None:
        """Send an activity proposal; the activity name becomes the text."""
        return await self._append(activity, MessageKind.PROPOSAL)

    async def _merge_history_locked(self) -> bool:
        """Put persisted history ahead of messages not yet saved.

        Returns False when the medium could not be read; the list is then
        left alone so the next write cannot replace stored history.
        """
        try:
            raw = await self._storage.get_item(CHAT_KEY)
        except PersistenceError as exc:
            logger.warning("Could not read chat history before append: %s", exc)
            return False
        stored = decode_record(CHAT_KEY, raw, _MESSAGES_ADAPTER) or []
        self._messages = [*stored, *self._messages]
        self._loaded = True
        return True

    async def _append(self, text: str, kind: MessageKind) -> ChatMessage | None:
        text = (text or "").strip()
        if not text:
            return None

        async with self._lock:
            history_read = self._loaded or await self._merge_history_locked()

            now = self._clock()
            message = ChatMessage(
                id=time_id(now),
                from_me=True,
                text=text,
                time=now,
                kind=kind,
            )
            self._messages.append(message)

            if not history_read:
                logger.error(
                    "Chat history unreadable, keeping %d messages unsaved",
                    len(self._messages),
                )
                return message

            try:
                await write_record(
                    self._storage, CHAT_KEY, _MESSAGES_ADAPTER, self._messages,
                )
            except PersistenceError as exc:
                logger.error(
                    "Failed to persist %d chat messages: %s", len(self._messages), exc,
                )

        logger.info("Chat %s appended: #%s", kind.value, message.id)
        return message
