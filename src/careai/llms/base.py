"""
Core LLM abstractions and message data models.

Every completion backend implements the 'LLM' ABC. The shared message format
('LLMMessage') is backend-agnostic so the context builder, the classifier and
the dispatcher never need to know which provider answers them.

'SamplingConfig' carries the generation parameters of a single call. Each
call site owns its own config.
"""

from abc import ABC, abstractmethod
from enum import StrEnum

from pydantic import BaseModel, Field


class Roles(StrEnum):
    """Conversation roles as used by the OpenAI chat completions API."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"
    TOOL = "tool"


class LLMMessage(BaseModel):
    """A single message in a conversation sent to or received from an LLM."""

    content: str = ""
    role: Roles = Roles.ASSISTANT


class SamplingConfig(BaseModel):
    """
    Generation parameters for one completion call.

    Attributes:
        max_tokens: Hard cap on the generated length.
        temperature: Randomness, from 0.0 (deterministic) to 1.0.
        top_p: Nucleus sampling factor (cumulative-probability cutoff).
        model: Deployment or model name. 'None' uses the client's configured
            deployment.
    """

    max_tokens: int | None = Field(default=None, gt=0)
    temperature: float | None = Field(default=None, ge=0.0, le=1.0)
    top_p: float | None = Field(default=None, ge=0.0, le=1.0)
    model: str | None = None


class LLM(ABC):
    """
    Abstract base class for language model backends.

    Concrete implementations adapt a specific API client to a common interface.
    Implementations raise 'CompletionUnavailableError' for any provider-side
    failure and must not retry on their own.
    """

    @abstractmethod
    async def generate(self, conversation: list[LLMMessage], sampling: SamplingConfig) -> LLMMessage:
        """Return a single complete response for the given conversation."""
        pass
