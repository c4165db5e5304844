"""
Conversation data model and storage interface.

The 'ConversationDatabase' ABC is the pluggable storage backend for conversation
records. Concrete implementations are interchangeable at construction time,
keeping the engine and API layer free of storage-specific code.

'state' is a free-form bag for cross-turn scratch data (for example the
parameters of a service request still being collected). Values are
'JsonValue', so any backend can persist them as JSON.
"""

from abc import ABC, abstractmethod

from pydantic import BaseModel, Field, JsonValue, model_validator

from careai.conversation_database.data_models.message import Message


class Conversation(BaseModel):
    """A single conversation session owned by a user."""

    id: str
    user_id: str
    title: str
    create_timestamp: int
    update_timestamp: int
    complete_timestamp: int | None = None
    state: dict[str, JsonValue] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _check_timestamps(self) -> "Conversation":
        if self.update_timestamp < self.create_timestamp:
            raise ValueError("update_timestamp must not be earlier than create_timestamp")
        return self

    @property
    def is_completed(self) -> bool:
        return self.complete_timestamp is not None


class ConversationThread(Conversation):
    """A conversation together with its messages, oldest first."""

    messages: list[Message] = Field(default_factory=list)


class ConversationDatabase(ABC):
    """Abstract repository for 'Conversation' records."""

    @abstractmethod
    async def create_conversation(self, conversation: Conversation) -> Conversation:
        pass

    @abstractmethod
    async def get_conversation_by_id(self, conversation_id: str) -> Conversation | None:
        pass

    @abstractmethod
    async def get_conversations_by_user_id(self, user_id: str) -> list[Conversation]:
        pass

    @abstractmethod
    async def update_conversation(self, conversation: Conversation) -> Conversation:
        pass

    @abstractmethod
    async def delete_conversation(self, conversation_id: str) -> bool:
        pass
