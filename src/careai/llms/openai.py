"""
OpenAI and Azure OpenAI chat completions backend.

'OpenAILLM' wraps the async clients of the 'openai' SDK. The Azure variant is
the default because the service is deployed against an Azure OpenAI resource;
'provider="openai"' targets any OpenAI-compatible endpoint instead.

The SDK retries failed requests twice by default. The client is built with
'max_retries=0' so that every logical step hits the provider exactly once.
"""

from typing import Any, Literal

from loguru import logger
from openai import AsyncAzureOpenAI, AsyncOpenAI, OpenAIError

from careai.exceptions import CompletionUnavailableError
from careai.llms.base import LLM, LLMMessage, Roles, SamplingConfig


class OpenAILLM(LLM):
    """
    Chat completions backend for OpenAI-compatible APIs.

    Attributes:
        model_name: Deployment (Azure) or model (OpenAI) used when the sampling
            config does not name one.
    """

    def __init__(
        self,
        model_name: str,
        api_key: str,
        endpoint: str,
        provider: Literal["azure", "openai"] = "azure",
        api_version: str | None = None,
        organization: str | None = None,
    ) -> None:
        self.model_name = model_name
        self.provider = provider
        self.client: AsyncOpenAI
        if provider == "azure":
            self.client = AsyncAzureOpenAI(
                api_key=api_key,
                azure_endpoint=endpoint,
                api_version=api_version,
                organization=organization,
                max_retries=0,
            )
        else:
            self.client = AsyncOpenAI(
                api_key=api_key,
                base_url=endpoint,
                organization=organization,
                max_retries=0,
            )

    @staticmethod
    def _request_options(sampling: SamplingConfig) -> dict[str, Any]:
        options: dict[str, Any] = {}
        if sampling.max_tokens is not None:
            options["max_tokens"] = sampling.max_tokens
        if sampling.temperature is not None:
            options["temperature"] = sampling.temperature
        if sampling.top_p is not None:
            options["top_p"] = sampling.top_p
        return options

    async def generate(self, conversation: list[LLMMessage], sampling: SamplingConfig) -> LLMMessage:
        model = sampling.model or self.model_name
        try:
            response = await self.client.chat.completions.create(
                model=model,
                messages=[{"role": message.role.value, "content": message.content} for message in conversation],
                **self._request_options(sampling),
            )
        except OpenAIError as exc:
            logger.warning(f"{self.provider} completion request for {model!r} failed: {exc}")
            raise CompletionUnavailableError(f"Completion request failed: {exc}") from exc

        if not response.choices:
            raise CompletionUnavailableError("Completion response contained no choices")
        return LLMMessage(role=Roles.ASSISTANT, content=response.choices[0].message.content or "")
