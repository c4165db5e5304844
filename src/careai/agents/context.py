"""
Context window assembly.

The window sent to the model is always: one persona system message, then the
most recent stored history in chronological order, then the incoming user
message (which is not persisted yet at this point). Bounding the history is
the only guard against unbounded prompt growth: the limit is capped at
'MAX_HISTORY_LIMIT', so a window never exceeds 12 messages.

Tool messages are part of the data model but are never forwarded to the model.
"""

from loguru import logger

from careai.config import MAX_HISTORY_LIMIT
from careai.conversation_database.data_models.message import Message
from careai.conversation_database.message_store import MessageStore
from careai.llms.base import LLMMessage, Roles

PERSONA_PROMPT = "You are a helpful and empathetic AI assistant for social services."
DEFAULT_HISTORY_LIMIT = MAX_HISTORY_LIMIT

_FORWARDED_ROLES = {Roles.SYSTEM, Roles.USER, Roles.ASSISTANT}


class ContextWindowBuilder:
    """
    Builds the bounded message list for a general reply.

    Attributes:
        history_limit: Maximum number of stored messages included, 0 to
            'MAX_HISTORY_LIMIT'.
    """

    def __init__(
        self,
        message_store: MessageStore,
        history_limit: int = DEFAULT_HISTORY_LIMIT,
        system_prompt: str = PERSONA_PROMPT,
    ) -> None:
        if not 0 <= history_limit <= MAX_HISTORY_LIMIT:
            raise ValueError(f"history_limit must be between 0 and {MAX_HISTORY_LIMIT}, got {history_limit}")
        self.message_store = message_store
        self.history_limit = history_limit
        self.system_prompt = system_prompt

    @staticmethod
    def to_llm_messages(history: list[Message]) -> list[LLMMessage]:
        return [
            LLMMessage(role=message.role, content=message.content)
            for message in history
            if message.role in _FORWARDED_ROLES
        ]

    async def build(self, conversation_id: str, new_user_message: str) -> list[LLMMessage]:
        history = await self.message_store.recent_messages(conversation_id, self.history_limit)
        window = [
            LLMMessage(role=Roles.SYSTEM, content=self.system_prompt),
            *self.to_llm_messages(history),
            LLMMessage(role=Roles.USER, content=new_user_message),
        ]
        logger.debug(f"Context window for conversation {conversation_id}: {len(window)} messages")
        return window
