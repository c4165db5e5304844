"""Shared fixtures for the CareAI test suite."""

import os

import pytest
from scripted_llm import ScriptedLLM

from careai.agents.classifier import IntentClassifier
from careai.agents.context import ContextWindowBuilder
from careai.agents.dispatcher import ResponseDispatcher
from careai.conversation_database.data_models.message import Message
from careai.conversation_database.in_memory import InMemoryConversationDatabase, InMemoryMessageDatabase
from careai.conversation_database.message_store import MessageStore
from careai.conversation_database.registry import ConversationRegistry
from careai.llms.base import Roles
from careai.llms.client import CompletionClient


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch):
    """Keep settings independent of the developer's shell."""
    for name in list(os.environ):
        if name.startswith(("CAREAI_", "OPENAI_")):
            monkeypatch.delenv(name)


@pytest.fixture
def conversation_db() -> InMemoryConversationDatabase:
    return InMemoryConversationDatabase()


@pytest.fixture
def message_db() -> InMemoryMessageDatabase:
    return InMemoryMessageDatabase()


@pytest.fixture
def message_store(message_db) -> MessageStore:
    return MessageStore(message_db)


@pytest.fixture
def registry(conversation_db, message_db) -> ConversationRegistry:
    return ConversationRegistry(conversation_db, message_db)


@pytest.fixture
def make_message():
    """Factory for messages with explicit timestamps."""

    def _make(
        conversation_id: str,
        index: int,
        role: Roles = Roles.USER,
        timestamp: int | None = None,
    ) -> Message:
        return Message(
            id=f"{conversation_id}-m{index}",
            conversation_id=conversation_id,
            user_id="U1" if role == Roles.USER else None,
            content=f"message {index}",
            role=role,
            create_timestamp=1_000 + index if timestamp is None else timestamp,
        )

    return _make


@pytest.fixture
def make_dispatcher(registry, message_store):
    """Build a dispatcher around a 'ScriptedLLM' (or a disabled client when 'llm' is None)."""

    def _make(llm: ScriptedLLM | None, reject_completed_conversations: bool = False) -> ResponseDispatcher:
        client = CompletionClient(llm=llm, default_model="gpt-4" if llm else None)
        return ResponseDispatcher(
            registry=registry,
            message_store=message_store,
            context_builder=ContextWindowBuilder(message_store),
            classifier=IntentClassifier(client),
            client=client,
            reject_completed_conversations=reject_completed_conversations,
        )

    return _make
