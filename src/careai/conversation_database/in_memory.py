"""
In-memory implementations of the storage repositories.

These backends keep records in plain dictionaries for the lifetime of the
process. They enforce the same constraints a relational backend would
(unique ids, updates only of existing rows) and raise 'StorageError' when a
constraint is violated. Records are copied on the way in and out so callers
can never mutate stored state by accident.
"""

from collections import defaultdict

from careai.conversation_database.data_models.conversation import Conversation, ConversationDatabase
from careai.conversation_database.data_models.message import Message, MessageDatabase
from careai.conversation_database.data_models.service_request import ServiceRequest, ServiceRequestDatabase
from careai.conversation_database.data_models.user import User, UserDatabase
from careai.exceptions import StorageError


class InMemoryConversationDatabase(ConversationDatabase):
    def __init__(self) -> None:
        self._conversations: dict[str, Conversation] = {}

    async def create_conversation(self, conversation: Conversation) -> Conversation:
        if conversation.id in self._conversations:
            raise StorageError(f"Conversation with id {conversation.id} already exists")
        self._conversations[conversation.id] = conversation.model_copy(deep=True)
        return conversation.model_copy(deep=True)

    async def get_conversation_by_id(self, conversation_id: str) -> Conversation | None:
        conversation = self._conversations.get(conversation_id)
        return conversation.model_copy(deep=True) if conversation else None

    async def get_conversations_by_user_id(self, user_id: str) -> list[Conversation]:
        return sorted(
            (c.model_copy(deep=True) for c in self._conversations.values() if c.user_id == user_id),
            key=lambda c: c.update_timestamp,
            reverse=True,
        )

    async def update_conversation(self, conversation: Conversation) -> Conversation:
        if conversation.id not in self._conversations:
            raise StorageError(f"Conversation with id {conversation.id} not found")
        self._conversations[conversation.id] = conversation.model_copy(deep=True)
        return conversation.model_copy(deep=True)

    async def delete_conversation(self, conversation_id: str) -> bool:
        return self._conversations.pop(conversation_id, None) is not None


class InMemoryMessageDatabase(MessageDatabase):
    """Messages grouped per conversation, kept in insertion order."""

    def __init__(self) -> None:
        self._messages: dict[str, list[Message]] = defaultdict(list)
        self._ids: set[str] = set()

    async def create_message(self, message: Message) -> Message:
        if message.id in self._ids:
            raise StorageError(f"Message with id {message.id} already exists")
        self._ids.add(message.id)
        self._messages[message.conversation_id].append(message.model_copy(deep=True))
        return message.model_copy(deep=True)

    async def get_messages_by_conversation_id(
        self,
        conversation_id: str,
        newest_first: bool = False,
        limit: int | None = None,
    ) -> list[Message]:
        indexed = list(enumerate(self._messages.get(conversation_id, [])))
        # insertion index breaks timestamp ties
        indexed.sort(key=lambda item: (item[1].create_timestamp, item[0]), reverse=newest_first)
        messages = [message for _, message in indexed]
        if limit is not None:
            messages = messages[: max(limit, 0)]
        return [message.model_copy(deep=True) for message in messages]

    async def delete_messages_by_conversation_id(self, conversation_id: str) -> int:
        messages = self._messages.pop(conversation_id, [])
        self._ids.difference_update(message.id for message in messages)
        return len(messages)


class InMemoryUserDatabase(UserDatabase):
    def __init__(self) -> None:
        self._users: dict[str, User] = {}

    async def create_user(self, user: User) -> User:
        if user.id in self._users:
            raise StorageError(f"User with id {user.id} already exists")
        self._users[user.id] = user.model_copy(deep=True)
        return user.model_copy(deep=True)

    async def get_user_by_id(self, user_id: str) -> User | None:
        user = self._users.get(user_id)
        return user.model_copy(deep=True) if user else None


class InMemoryServiceRequestDatabase(ServiceRequestDatabase):
    def __init__(self) -> None:
        self._requests: dict[str, ServiceRequest] = {}

    async def create_service_request(self, service_request: ServiceRequest) -> ServiceRequest:
        if service_request.id in self._requests:
            raise StorageError(f"Service request with id {service_request.id} already exists")
        self._requests[service_request.id] = service_request.model_copy(deep=True)
        return service_request.model_copy(deep=True)

    async def get_service_request_by_id(self, service_request_id: str) -> ServiceRequest | None:
        service_request = self._requests.get(service_request_id)
        return service_request.model_copy(deep=True) if service_request else None

    async def get_service_requests_by_user_id(self, user_id: str) -> list[ServiceRequest]:
        return sorted(
            (r.model_copy(deep=True) for r in self._requests.values() if r.user_id == user_id),
            key=lambda r: r.create_timestamp,
        )

    async def update_service_request(self, service_request: ServiceRequest) -> ServiceRequest:
        if service_request.id not in self._requests:
            raise StorageError(f"Service request with id {service_request.id} not found")
        self._requests[service_request.id] = service_request.model_copy(deep=True)
        return service_request.model_copy(deep=True)
