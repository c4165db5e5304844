"""
Conversation registry.

Conversations are created lazily: the first turn sent to an unknown
conversation id creates it. An existing conversation is never overwritten,
so a second caller with a different user id gets the original record back.
"""

from loguru import logger

from careai.conversation_database.data_models.conversation import (
    Conversation,
    ConversationDatabase,
    ConversationThread,
)
from careai.conversation_database.data_models.message import MessageDatabase
from careai.utils.database import generate_uid
from careai.utils.time import format_date, get_current_timestamp

DEFAULT_CONVERSATION_TITLE = "New Conversation"


class ConversationRegistry:
    def __init__(self, conversation_db: ConversationDatabase, message_db: MessageDatabase) -> None:
        self.conversation_db = conversation_db
        self.message_db = message_db

    async def get_or_create(self, conversation_id: str, user_id: str) -> ConversationThread:
        """Return the conversation with its messages, creating and persisting it if absent."""
        conversation = await self.conversation_db.get_conversation_by_id(conversation_id)
        if conversation is None:
            create_time = get_current_timestamp()
            conversation = await self.conversation_db.create_conversation(
                Conversation(
                    id=conversation_id,
                    user_id=user_id,
                    title=DEFAULT_CONVERSATION_TITLE,
                    create_timestamp=create_time,
                    update_timestamp=create_time,
                )
            )
            logger.info(f"Created conversation {conversation_id} for user {user_id}")
            return ConversationThread(**conversation.model_dump())

        messages = await self.message_db.get_messages_by_conversation_id(conversation_id)
        return ConversationThread(**conversation.model_dump(), messages=messages)

    async def start(self, user_id: str) -> Conversation:
        """Create a conversation with a system-generated id."""
        create_time = get_current_timestamp()
        conversation = await self.conversation_db.create_conversation(
            Conversation(
                id=generate_uid(),
                user_id=user_id,
                title=f"Conversation {format_date(create_time)}",
                create_timestamp=create_time,
                update_timestamp=create_time,
            )
        )
        logger.info(f"Started conversation {conversation.id} for user {user_id}")
        return conversation

    async def touch(self, conversation: Conversation) -> Conversation:
        """Persist 'conversation' with a refreshed update timestamp."""
        update_time = max(get_current_timestamp(), conversation.update_timestamp)
        return await self.conversation_db.update_conversation(
            Conversation(
                id=conversation.id,
                user_id=conversation.user_id,
                title=conversation.title,
                create_timestamp=conversation.create_timestamp,
                update_timestamp=update_time,
                complete_timestamp=conversation.complete_timestamp,
                state=conversation.state,
            )
        )
