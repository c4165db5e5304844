"""
Message data model and storage interface.

Messages are immutable and append-only. A message refers to its conversation
by id only, never by object, so conversations own their messages without a
reference cycle. Within a conversation, 'create_timestamp' defines the order
presented to the language model; backends break timestamp ties by insertion
order.

The 'MessageDatabase' ABC is the pluggable storage backend.
"""

from abc import ABC, abstractmethod

from pydantic import BaseModel, ConfigDict, Field, JsonValue

from careai.llms.base import Roles


class Message(BaseModel):
    """
    A single message within a conversation.

    'user_id' is None for messages that carry no user identity.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    conversation_id: str
    user_id: str | None
    content: str
    role: Roles
    create_timestamp: int
    metadata: dict[str, JsonValue] = Field(default_factory=dict)


class MessageDatabase(ABC):
    """Abstract repository for 'Message' records."""

    @abstractmethod
    async def create_message(self, message: Message) -> Message:
        pass

    @abstractmethod
    async def get_messages_by_conversation_id(
        self,
        conversation_id: str,
        newest_first: bool = False,
        limit: int | None = None,
    ) -> list[Message]:
        """Return the conversation's messages ordered by timestamp.

        'limit' is applied after ordering, so 'newest_first=True' with a limit
        selects the most recent messages.
        """
        pass

    @abstractmethod
    async def delete_messages_by_conversation_id(self, conversation_id: str) -> int:
        """Delete every message of a conversation and return how many were removed."""
        pass
