"""
Completion client adapter.

'CompletionClient' is the single seam between the conversation engine and the
language model. It turns a list of 'LLMMessage' plus a 'SamplingConfig' into
a completion string, and reports every kind of unavailability (disabled
provider, provider error, empty answer) as 'CompletionUnavailableError'.

The client holds no per-call state and can be shared by concurrent turns.
"""

from loguru import logger

from careai.config import CompletionSettings
from careai.exceptions import CompletionUnavailableError
from careai.llms.base import LLM, LLMMessage, SamplingConfig
from careai.llms.openai import OpenAILLM


class CompletionClient:
    """
    Single-attempt completion calls against an optional 'LLM' backend.

    Attributes:
        llm: The backend, or 'None' when the provider is disabled.
        default_model: Deployment used when a sampling config names none.
    """

    def __init__(self, llm: LLM | None, default_model: str | None = None) -> None:
        self.llm = llm
        self.default_model = default_model

    @property
    def enabled(self) -> bool:
        return self.llm is not None

    async def complete(self, messages: list[LLMMessage], sampling: SamplingConfig) -> str:
        """Return the completion text for 'messages'. Never retries."""
        if self.llm is None:
            raise CompletionUnavailableError("Completion provider is disabled or not configured")

        if sampling.model is None and self.default_model:
            sampling = sampling.model_copy(update={"model": self.default_model})

        try:
            response = await self.llm.generate(messages, sampling)
        except CompletionUnavailableError:
            raise
        except Exception as exc:
            raise CompletionUnavailableError(f"Completion provider failed: {exc}") from exc

        if not response.content.strip():
            raise CompletionUnavailableError("Completion provider returned no content")
        return response.content


def build_completion_client(settings: CompletionSettings) -> CompletionClient:
    """Create the process-wide completion client from 'settings'.

    A disabled or incomplete configuration does not fail startup: the returned
    client is disabled and every call site degrades to its static fallback.
    """
    if not settings.is_configured:
        logger.warning("OpenAI is disabled or not properly configured")
        return CompletionClient(llm=None)

    try:
        llm = OpenAILLM(
            model_name=settings.deployment,
            api_key=settings.api_key,
            endpoint=settings.endpoint,
            provider=settings.provider,
            api_version=settings.api_version,
            organization=settings.organization,
        )
    except Exception as exc:
        logger.error(f"Failed to initialize OpenAI client: {exc}")
        return CompletionClient(llm=None)

    logger.info(f"Completion client ready ({settings.provider}, deployment={settings.deployment!r})")
    return CompletionClient(llm=llm, default_model=settings.deployment)
