"""
Exception hierarchy for the CareAI conversation engine.

Errors fall into four groups that are handled at different boundaries:

    'InvalidInputError'           - rejected before any I/O, surfaced as a client error.
    'CompletionUnavailableError'  - absorbed by the classifier and the dispatcher,
                                    which substitute a fallback category or an apology.
    'StorageError'                - never recovered locally, bubbles to the caller.
    'ConfigurationError'          - invalid settings detected at startup.

A disabled or credential-less completion provider is deliberately not a
'ConfigurationError': the service starts and answers with static
unavailability messages instead.
"""


class CareAIError(Exception):
    """Base class for every error raised by the package."""


class ConfigurationError(CareAIError):
    """Settings could not be parsed into a usable configuration."""


class InvalidInputError(CareAIError, ValueError):
    """A required input (user id, message, conversation id) is missing or blank."""


class ConversationNotFoundError(CareAIError):
    """The requested conversation does not exist."""

    def __init__(self, conversation_id: str) -> None:
        super().__init__(f"Conversation with id {conversation_id} not found")
        self.conversation_id = conversation_id


class ConversationClosedError(CareAIError):
    """A turn was sent to a completed conversation while rejection is enabled."""

    def __init__(self, conversation_id: str) -> None:
        super().__init__(f"Conversation with id {conversation_id} is completed")
        self.conversation_id = conversation_id


class CompletionUnavailableError(CareAIError):
    """The completion provider is disabled, unreachable, or returned an error."""


class StorageError(CareAIError):
    """A persistence read or write failed."""
