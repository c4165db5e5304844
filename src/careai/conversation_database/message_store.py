"""
Append-only message log.

'MessageStore' is the only writer of 'Message' records. It never updates or
deletes a message (the controller's cascade delete goes straight to the
repository). 'recent_messages' selects by recency but returns chronological
order, which is the order the language model must see.
"""

from collections.abc import Mapping

from pydantic import JsonValue

from careai.conversation_database.data_models.message import Message, MessageDatabase
from careai.llms.base import Roles
from careai.utils.database import generate_uid
from careai.utils.time import get_current_timestamp


class MessageStore:
    def __init__(self, message_db: MessageDatabase) -> None:
        self.message_db = message_db

    async def append(
        self,
        conversation_id: str,
        user_id: str | None,
        content: str,
        role: Roles,
        metadata: Mapping[str, JsonValue] | None = None,
    ) -> Message:
        """Persist a new message with a fresh id and the current timestamp."""
        return await self.message_db.create_message(
            Message(
                id=generate_uid(),
                conversation_id=conversation_id,
                user_id=user_id,
                content=content,
                role=role,
                create_timestamp=get_current_timestamp(),
                metadata=dict(metadata or {}),
            )
        )

    async def recent_messages(self, conversation_id: str, limit: int) -> list[Message]:
        """Return the 'limit' most recent messages, oldest first."""
        if limit <= 0:
            return []
        newest = await self.message_db.get_messages_by_conversation_id(conversation_id, newest_first=True, limit=limit)
        return list(reversed(newest))
