"""
CareAI controller (Facade).

'CareAIController' is the single entry point for application logic used by the
HTTP layer. It coordinates the storage repositories, the conversation registry
and the response dispatcher:

    'start_conversation'      - create a conversation with a generated id.
    'process_new_message'     - run one turn and return the reply with its timestamp.
    'get_conversation_by_id'  - a conversation with its messages.
    'delete_conversation'     - cascade delete of a conversation and its messages,
                                waiting for any turn in progress on it.

'build_controller' wires the default in-memory backends and the completion
client from 'Settings'.
"""

from pydantic import BaseModel

from careai.agents.classifier import IntentClassifier
from careai.agents.context import ContextWindowBuilder
from careai.agents.dispatcher import ResponseDispatcher
from careai.config import Settings
from careai.conversation_database.data_models.conversation import (
    Conversation,
    ConversationDatabase,
    ConversationThread,
)
from careai.conversation_database.data_models.message import MessageDatabase
from careai.conversation_database.in_memory import (
    InMemoryConversationDatabase,
    InMemoryMessageDatabase,
)
from careai.conversation_database.message_store import MessageStore
from careai.conversation_database.registry import ConversationRegistry
from careai.exceptions import ConversationNotFoundError
from careai.llms.client import CompletionClient, build_completion_client
from careai.utils.validation import require_text


class MessageInput(BaseModel):
    user_id: str
    message: str


class ConversationInput(BaseModel):
    user_id: str


class TurnReply(BaseModel):
    message: str
    timestamp: int


class CareAIController:
    def __init__(
        self,
        conversation_db: ConversationDatabase,
        message_db: MessageDatabase,
        registry: ConversationRegistry,
        dispatcher: ResponseDispatcher,
    ):
        self.conversation_db = conversation_db
        self.message_db = message_db
        self.registry = registry
        self.dispatcher = dispatcher

    async def start_conversation(self, conversation_input: ConversationInput) -> Conversation:
        require_text(conversation_input.user_id, "User ID")
        return await self.registry.start(conversation_input.user_id)

    async def process_new_message(self, conversation_id: str, user_input: MessageInput) -> TurnReply:
        answer = await self.dispatcher.process_turn(conversation_id, user_input.user_id, user_input.message)
        return TurnReply(message=answer.content, timestamp=answer.create_timestamp)

    async def get_conversations_by_user_id(self, user_id: str) -> list[Conversation]:
        require_text(user_id, "User ID")
        return await self.conversation_db.get_conversations_by_user_id(user_id)

    async def get_conversation_by_id(self, conversation_id: str) -> ConversationThread:
        conversation = await self.conversation_db.get_conversation_by_id(conversation_id)
        if conversation is None:
            raise ConversationNotFoundError(conversation_id)
        messages = await self.message_db.get_messages_by_conversation_id(conversation_id)
        return ConversationThread(**conversation.model_dump(), messages=messages)

    async def delete_conversation(self, conversation_id: str) -> bool:
        async with self.dispatcher.conversation_lock(conversation_id):
            await self.message_db.delete_messages_by_conversation_id(conversation_id)
            return await self.conversation_db.delete_conversation(conversation_id)


def build_controller(
    settings: Settings,
    client: CompletionClient | None = None,
    conversation_db: ConversationDatabase | None = None,
    message_db: MessageDatabase | None = None,
) -> CareAIController:
    """Wire a controller from 'settings', defaulting to in-memory storage."""
    conversation_db = conversation_db or InMemoryConversationDatabase()
    message_db = message_db or InMemoryMessageDatabase()
    client = client or build_completion_client(settings.completion)

    registry = ConversationRegistry(conversation_db, message_db)
    message_store = MessageStore(message_db)
    dispatcher = ResponseDispatcher(
        registry=registry,
        message_store=message_store,
        context_builder=ContextWindowBuilder(message_store, history_limit=settings.history_limit),
        classifier=IntentClassifier(client),
        client=client,
        reject_completed_conversations=settings.reject_completed_conversations,
    )
    return CareAIController(
        conversation_db=conversation_db,
        message_db=message_db,
        registry=registry,
        dispatcher=dispatcher,
    )
