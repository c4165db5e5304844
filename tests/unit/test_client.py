"""Unit tests for the completion client adapter and the OpenAI backend."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, Mock

import httpx
import openai
import pytest
from scripted_llm import ScriptedLLM

from careai.config import CompletionSettings
from careai.exceptions import CompletionUnavailableError
from careai.llms.base import LLMMessage, Roles, SamplingConfig
from careai.llms.client import CompletionClient, build_completion_client
from careai.llms.openai import OpenAILLM

MESSAGES = [LLMMessage(role=Roles.USER, content="hello")]


class TestCompletionClient:
    async def test_disabled_client_raises(self):
        client = CompletionClient(llm=None)
        assert not client.enabled
        with pytest.raises(CompletionUnavailableError):
            await client.complete(MESSAGES, SamplingConfig())

    async def test_returns_completion_text(self):
        llm = ScriptedLLM(lambda conversation, sampling: "hi")
        assert await CompletionClient(llm).complete(MESSAGES, SamplingConfig()) == "hi"
        assert len(llm.calls) == 1

    async def test_default_model_filled_in(self):
        llm = ScriptedLLM(lambda conversation, sampling: "hi")
        await CompletionClient(llm, default_model="care-gpt4").complete(MESSAGES, SamplingConfig(max_tokens=10))
        assert llm.calls[0][1].model == "care-gpt4"
        assert llm.calls[0][1].max_tokens == 10

    async def test_explicit_model_kept(self):
        llm = ScriptedLLM(lambda conversation, sampling: "hi")
        await CompletionClient(llm, default_model="care-gpt4").complete(MESSAGES, SamplingConfig(model="other"))
        assert llm.calls[0][1].model == "other"

    async def test_unexpected_errors_are_wrapped_without_retry(self):
        llm = ScriptedLLM(lambda conversation, sampling: RuntimeError("boom"))
        with pytest.raises(CompletionUnavailableError, match="boom"):
            await CompletionClient(llm).complete(MESSAGES, SamplingConfig())
        assert len(llm.calls) == 1

    @pytest.mark.parametrize("content", ["", "   \n"])
    async def test_blank_completion_is_unavailable(self, content):
        llm = ScriptedLLM(lambda conversation, sampling: content)
        with pytest.raises(CompletionUnavailableError):
            await CompletionClient(llm).complete(MESSAGES, SamplingConfig())


class TestBuildCompletionClient:
    @pytest.mark.parametrize(
        "settings",
        [
            CompletionSettings(enabled=False, api_key="key", endpoint="https://example.openai.azure.com"),
            CompletionSettings(api_key="", endpoint="https://example.openai.azure.com"),
            CompletionSettings(api_key="key", endpoint=""),
        ],
    )
    def test_unconfigured_provider_gives_disabled_client(self, settings):
        assert not build_completion_client(settings).enabled

    def test_configured_provider(self):
        client = build_completion_client(
            CompletionSettings(
                api_key="key",
                endpoint="https://example.openai.azure.com",
                model_name="gpt-4",
                deployment_name="care-gpt4",
            )
        )
        assert client.enabled
        assert isinstance(client.llm, OpenAILLM)
        assert client.default_model == "care-gpt4"


def _response(content):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


class TestOpenAILLM:
    @pytest.fixture
    def llm(self):
        llm = OpenAILLM(
            model_name="care-gpt4",
            api_key="key",
            endpoint="https://example.openai.azure.com",
            api_version="2024-06-01",
        )
        llm.client = Mock()
        llm.client.chat.completions.create = AsyncMock(return_value=_response("Hello!"))
        return llm

    def test_sdk_retries_disabled(self):
        for provider in ("azure", "openai"):
            llm = OpenAILLM(
                model_name="gpt-4",
                api_key="key",
                endpoint="https://example.openai.azure.com",
                provider=provider,
                api_version="2024-06-01",
            )
            assert llm.client.max_retries == 0

    def test_provider_selects_client_class(self):
        azure = OpenAILLM("gpt-4", "key", "https://example.openai.azure.com", api_version="2024-06-01")
        plain = OpenAILLM("gpt-4", "key", "https://api.openai.com/v1", provider="openai")
        assert isinstance(azure.client, openai.AsyncAzureOpenAI)
        assert isinstance(plain.client, openai.AsyncOpenAI)
        assert not isinstance(plain.client, openai.AsyncAzureOpenAI)

    async def test_sampling_passed_through(self, llm):
        answer = await llm.generate(
            [LLMMessage(role=Roles.SYSTEM, content="persona"), *MESSAGES],
            SamplingConfig(max_tokens=1000, temperature=0.7, top_p=0.95),
        )

        assert answer.content == "Hello!"
        assert answer.role is Roles.ASSISTANT
        llm.client.chat.completions.create.assert_awaited_once_with(
            model="care-gpt4",
            messages=[{"role": "system", "content": "persona"}, {"role": "user", "content": "hello"}],
            max_tokens=1000,
            temperature=0.7,
            top_p=0.95,
        )

    async def test_unset_sampling_options_omitted(self, llm):
        await llm.generate(MESSAGES, SamplingConfig(model="other"))
        kwargs = llm.client.chat.completions.create.await_args.kwargs
        assert kwargs["model"] == "other"
        assert "max_tokens" not in kwargs
        assert "temperature" not in kwargs
        assert "top_p" not in kwargs

    async def test_provider_error_becomes_unavailable(self, llm):
        llm.client.chat.completions.create.side_effect = openai.APIConnectionError(
            request=httpx.Request("POST", "https://example.openai.azure.com")
        )
        with pytest.raises(CompletionUnavailableError):
            await llm.generate(MESSAGES, SamplingConfig())

    async def test_missing_choices_becomes_unavailable(self, llm):
        llm.client.chat.completions.create.return_value = SimpleNamespace(choices=[])
        with pytest.raises(CompletionUnavailableError):
            await llm.generate(MESSAGES, SamplingConfig())

    async def test_null_content_is_empty_string(self, llm):
        llm.client.chat.completions.create.return_value = _response(None)
        assert (await llm.generate(MESSAGES, SamplingConfig())).content == ""
