"""Unit tests for the context window builder."""

import pytest

from careai.agents.context import PERSONA_PROMPT, ContextWindowBuilder
from careai.llms.base import Roles


class TestContextWindowBuilder:
    async def test_empty_history(self, message_store):
        window = await ContextWindowBuilder(message_store).build("C1", "I need help paying rent")

        assert [(m.role, m.content) for m in window] == [
            (Roles.SYSTEM, PERSONA_PROMPT),
            (Roles.USER, "I need help paying rent"),
        ]

    @pytest.mark.parametrize("history_length", [0, 1, 9, 10, 11, 50])
    async def test_window_never_exceeds_twelve(self, message_store, message_db, make_message, history_length):
        for index in range(history_length):
            role = Roles.USER if index % 2 == 0 else Roles.ASSISTANT
            await message_db.create_message(make_message("C1", index, role))

        window = await ContextWindowBuilder(message_store).build("C1", "new message")

        assert len(window) == min(history_length, 10) + 2
        assert len(window) <= 12
        assert window[0].role is Roles.SYSTEM
        assert window[-1].content == "new message"

    async def test_history_in_chronological_order(self, message_store, message_db, make_message):
        for index in range(12):
            await message_db.create_message(make_message("C1", index))

        window = await ContextWindowBuilder(message_store).build("C1", "new message")

        assert [m.content for m in window[1:-1]] == [f"message {i}" for i in range(2, 12)]

    async def test_roles_translated_and_tool_dropped(self, message_store, message_db, make_message):
        await message_db.create_message(make_message("C1", 1, Roles.SYSTEM))
        await message_db.create_message(make_message("C1", 2, Roles.USER))
        await message_db.create_message(make_message("C1", 3, Roles.TOOL))
        await message_db.create_message(make_message("C1", 4, Roles.ASSISTANT))

        window = await ContextWindowBuilder(message_store).build("C1", "new message")

        assert [m.role for m in window] == [Roles.SYSTEM, Roles.SYSTEM, Roles.USER, Roles.ASSISTANT, Roles.USER]
        assert all(m.role is not Roles.TOOL for m in window)

    async def test_history_limit_is_configurable(self, message_store, message_db, make_message):
        for index in range(5):
            await message_db.create_message(make_message("C1", index))

        window = await ContextWindowBuilder(message_store, history_limit=2).build("C1", "new message")

        assert [m.content for m in window[1:-1]] == ["message 3", "message 4"]

    @pytest.mark.parametrize("history_limit", [-1, 11, 40])
    def test_history_limit_outside_bounds_rejected(self, message_store, history_limit):
        with pytest.raises(ValueError):
            ContextWindowBuilder(message_store, history_limit=history_limit)
