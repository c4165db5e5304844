"""
CareAI conversation engine.

Routes user messages to a chat completions endpoint, keeps per-conversation
history, and classifies each message into a social-service category so that
service-specific answers can be appended to the general reply.

    from careai import Settings, build_controller

    controller = build_controller(Settings.from_env())
    reply = await controller.dispatcher.handle_turn("C1", "U1", "I need help paying rent")
"""

from careai.config import CompletionSettings, Settings
from careai.conversation_database.controller import CareAIController, build_controller

__all__ = [
    "CareAIController",
    "CompletionSettings",
    "Settings",
    "build_controller",
]
