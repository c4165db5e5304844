"""
Turn orchestration.

'ResponseDispatcher' processes one user message end to end:

    1. general reply from the persona prompt and the bounded context window;
    2. service category of the raw message (runs concurrently with step 1);
    3. for any category other than 'GeneralInquiry', a second, service-specific
       completion appended to the general reply after a blank line;
    4. the user message and the final reply are persisted and the
       conversation's update timestamp is refreshed.

Completion failures never escape a turn: they are replaced by fixed apology
texts, so the user always gets a reply. Storage errors do escape.

Turns on the same conversation id are serialized by a per-conversation lock,
so concurrent requests cannot interleave their history reads and writes.
Turns on different conversations run concurrently.
"""

import asyncio
from collections.abc import Mapping
from textwrap import dedent
from weakref import WeakValueDictionary

from loguru import logger
from pydantic import JsonValue

from careai.agents.classifier import GENERAL_INQUIRY, IntentClassifier
from careai.agents.context import ContextWindowBuilder
from careai.conversation_database.data_models.message import Message
from careai.conversation_database.message_store import MessageStore
from careai.conversation_database.registry import ConversationRegistry
from careai.exceptions import CompletionUnavailableError, ConversationClosedError
from careai.llms.base import LLMMessage, Roles, SamplingConfig
from careai.llms.client import CompletionClient
from careai.utils.validation import require_text

SERVICE_UNAVAILABLE_REPLY = (
    "I'm sorry, but the AI service is currently unavailable. "
    "Please try again later or contact support if the issue persists."
)
PROCESSING_ERROR_REPLY = (
    "I'm sorry, but I encountered an error while processing your message. Please try again later."
)
SERVICE_REQUEST_UNAVAILABLE_REPLY = "I'm sorry, but the service is currently unavailable. Please try again later."
SERVICE_REQUEST_ERROR_REPLY = (
    "I'm sorry, but I encountered an error while processing your service request. "
    "Please try again later or contact support if the issue persists."
)

GENERAL_SAMPLING = SamplingConfig(max_tokens=1000, temperature=0.7, top_p=0.95)
SERVICE_SAMPLING = SamplingConfig(max_tokens=500, temperature=0.5)

SERVICE_PROMPT_TEMPLATE = dedent("""
    You are an AI that helps with social services. The user has requested help with: {service_type}.
    Please provide a helpful and empathetic response based on the user's needs.
""").strip()


def format_service_request(service_type: str, parameters: Mapping[str, JsonValue]) -> str:
    details = ", ".join(f"{key}: {value}" for key, value in parameters.items())
    return f"I need help with: {service_type}. Additional details: {details}"


class ResponseDispatcher:
    def __init__(
        self,
        registry: ConversationRegistry,
        message_store: MessageStore,
        context_builder: ContextWindowBuilder,
        classifier: IntentClassifier,
        client: CompletionClient,
        reject_completed_conversations: bool = False,
    ) -> None:
        self.registry = registry
        self.message_store = message_store
        self.context_builder = context_builder
        self.classifier = classifier
        self.client = client
        self.reject_completed_conversations = reject_completed_conversations
        self._locks: WeakValueDictionary[str, asyncio.Lock] = WeakValueDictionary()

    def conversation_lock(self, conversation_id: str) -> asyncio.Lock:
        """The lock serializing turns on 'conversation_id'. Hold it to change the conversation outside a turn."""
        lock = self._locks.get(conversation_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[conversation_id] = lock
        return lock

    async def general_reply(self, window: list[LLMMessage]) -> str:
        if not self.client.enabled:
            logger.warning("OpenAI service is disabled or not properly configured")
            return SERVICE_UNAVAILABLE_REPLY
        try:
            return await self.client.complete(window, GENERAL_SAMPLING)
        except CompletionUnavailableError as exc:
            logger.error(f"Error generating general reply: {exc}")
            return PROCESSING_ERROR_REPLY

    async def service_reply(self, user_id: str, service_type: str, parameters: Mapping[str, JsonValue]) -> str:
        """Answer a request for 'service_type' with a service-specific prompt."""
        if not self.client.enabled:
            logger.warning("OpenAI service is disabled or not properly configured")
            return SERVICE_REQUEST_UNAVAILABLE_REPLY

        logger.info(f"Processing service request of type {service_type!r} for user {user_id}")
        try:
            return await self.client.complete(
                [
                    LLMMessage(role=Roles.SYSTEM, content=SERVICE_PROMPT_TEMPLATE.format(service_type=service_type)),
                    LLMMessage(role=Roles.USER, content=format_service_request(service_type, parameters)),
                ],
                SERVICE_SAMPLING,
            )
        except CompletionUnavailableError as exc:
            logger.error(f"Error processing service request of type {service_type!r} for user {user_id}: {exc}")
            return SERVICE_REQUEST_ERROR_REPLY

    async def process_turn(self, conversation_id: str, user_id: str, message: str) -> Message:
        """Run a full turn and return the persisted assistant message."""
        require_text(conversation_id, "Conversation ID")
        require_text(user_id, "User ID")
        require_text(message, "Message")

        async with self.conversation_lock(conversation_id):
            conversation = await self.registry.get_or_create(conversation_id, user_id)
            if conversation.is_completed and self.reject_completed_conversations:
                raise ConversationClosedError(conversation_id)

            window = await self.context_builder.build(conversation_id, message)
            reply, category = await asyncio.gather(
                self.general_reply(window),
                self.classifier.classify(message),
            )
            if category != GENERAL_INQUIRY:
                service_reply = await self.service_reply(user_id, category, {"userMessage": message})
                reply = f"{reply}\n\n{service_reply}"

            await self.message_store.append(conversation_id, user_id, message, Roles.USER)
            answer = await self.message_store.append(
                conversation_id,
                None,
                reply,
                Roles.ASSISTANT,
                metadata={"service_category": category},
            )
            await self.registry.touch(conversation)

        logger.info(f"Successfully processed message for conversation {conversation_id} (category={category!r})")
        return answer

    async def handle_turn(self, conversation_id: str, user_id: str, message: str) -> str:
        return (await self.process_turn(conversation_id, user_id, message)).content
