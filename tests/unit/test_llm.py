"""Tests for the LLM transport implementations."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from chatcompare.config import ClientConfig
from chatcompare.llm import LLM, Echo, OpenRouter
from chatcompare.models import Usage


class TestLLMInterface:
    def test_llm_is_abstract(self):
        with pytest.raises(TypeError) as exc_info:
            LLM()
        assert "abstract" in str(exc_info.value).lower()

    def test_extract_usage_defaults_to_none(self):
        class Minimal(LLM):
            async def generate_response(self, messages, model, **kwargs):
                return "ok"

            def extract_content(self, response):
                return response

        assert Minimal().extract_usage("ok") is None


class TestOpenRouter:
    @pytest.fixture
    def config(self):
        return ClientConfig(
            credential="sk-or-test",
            headers={"HTTP-Referer": "http://localhost", "X-Title": "Test"},
        )

    def test_client_uses_shared_config(self, config):
        with patch("openai.AsyncOpenAI") as mock_openai:
            llm = OpenRouter(config)
            llm.client

        mock_openai.assert_called_once_with(
            api_key="sk-or-test",
            base_url="https://openrouter.ai/api/v1",
            default_headers={"HTTP-Referer": "http://localhost", "X-Title": "Test"},
        )

    def test_client_is_cached_until_credential_changes(self, config):
        with patch("openai.AsyncOpenAI") as mock_openai:
            base = MagicMock(api_key="sk-or-test")
            mock_openai.return_value = base
            llm = OpenRouter(config)
            first = llm.client
            assert llm.client is first

            rotated = MagicMock(api_key="sk-or-other")
            base.with_options.return_value = rotated
            config.configure("sk-or-other")
            second = llm.client
            third = llm.client

        assert first is base
        assert second is rotated
        assert third is rotated
        mock_openai.assert_called_once()
        base.with_options.assert_called_once_with(api_key="sk-or-other")

    @pytest.mark.asyncio
    async def test_generate_response(self, config, completion_response):
        llm = OpenRouter(config)
        fake_client = MagicMock()
        fake_client.chat.completions.create = AsyncMock(
            return_value=completion_response("Hi!")
        )
        fake_client.api_key = config.credential
        llm._client = fake_client

        messages = [{"role": "user", "content": "Hello"}]
        response = await llm.generate_response(
            messages, "openai/gpt-4o-mini", temperature=0.7, max_tokens=1000
        )

        fake_client.chat.completions.create.assert_awaited_once_with(
            model="openai/gpt-4o-mini",
            messages=messages,
            temperature=0.7,
            max_tokens=1000,
        )
        assert llm.extract_content(response) == "Hi!"

    def test_extract_usage(self, config, completion_response):
        llm = OpenRouter(config)
        usage = llm.extract_usage(completion_response(usage=(10, 20, 30)))
        assert usage == Usage(prompt_tokens=10, completion_tokens=20, total_tokens=30)

    def test_extract_usage_absent(self, config, completion_response):
        llm = OpenRouter(config)
        assert llm.extract_usage(completion_response(usage=None)) is None

    def test_extract_content_no_choices(self, config):
        llm = OpenRouter(config)
        response = MagicMock()
        response.choices = []
        assert llm.extract_content(response) is None


class TestEcho:
    @pytest.mark.asyncio
    async def test_echoes_last_message(self):
        llm = Echo()
        response = await llm.generate_response(
            [{"role": "system", "content": "Be nice"}, {"role": "user", "content": "Ping"}],
            "echo-v1",
        )

        content = llm.extract_content(response)
        assert "Echo LLM" in content
        assert "Ping" in content
        assert llm.calls == ["echo-v1"]

    @pytest.mark.asyncio
    async def test_reports_usage(self):
        llm = Echo()
        response = await llm.generate_response([{"role": "user", "content": "a b c"}], "m")

        usage = llm.extract_usage(response)
        assert usage.prompt_tokens == 3
        assert usage.total_tokens == usage.prompt_tokens + usage.completion_tokens

    @pytest.mark.asyncio
    async def test_scripted_failure(self):
        llm = Echo(failures={"bad": "timeout"})
        with pytest.raises(RuntimeError, match="timeout"):
            await llm.generate_response([{"role": "user", "content": "x"}], "bad")

    @pytest.mark.asyncio
    async def test_scripted_exception_instance(self):
        llm = Echo(failures={"bad": ConnectionError("refused")})
        with pytest.raises(ConnectionError):
            await llm.generate_response([{"role": "user", "content": "x"}], "bad")

    def test_extract_content_non_dict(self):
        assert Echo().extract_content("plain") == "plain"
