# tests/test_llm_adapter.py
"""
LLM client: parameter resolution and provider dispatch.
"""
import pytest

from specflow.core.exceptions import LLMError
from specflow.llm import LLMClient, LLMParams, client_for


class TestClientFor:

    def test_defaults_come_from_settings(self):
        client = client_for()

        assert client.provider == "gemini"
        assert client.temperature == 0.7

    def test_phase_params_override_defaults(self):
        client = client_for(LLMParams(provider="anthropic", model="claude-x", temperature=0.2, max_tokens=100))

        assert (client.provider, client.model, client.temperature, client.max_tokens) == (
            "anthropic", "claude-x", 0.2, 100,
        )

    def test_unknown_provider(self):
        with pytest.raises(LLMError):
            client_for(LLMParams(provider="mystery"))


class TestComplete:

    @pytest.mark.asyncio
    async def test_one_call_with_the_client_parameters(self, monkeypatch):
        calls = []

        async def fake_call(**kwargs):
            calls.append(kwargs)
            return "generated"

        monkeypatch.setattr("specflow.llm.adapter._provider_map", lambda: {"gemini": fake_call})
        client = LLMClient(provider="gemini", model="m", temperature=0.1, max_tokens=50, timeout=9)

        assert await client.complete("prompt", system_prompt="system") == "generated"
        assert calls == [{
            "prompt": "prompt",
            "system_prompt": "system",
            "model": "m",
            "temperature": 0.1,
            "max_tokens": 50,
            "timeout": 9,
        }]

    @pytest.mark.asyncio
    async def test_provider_failure_becomes_llm_error(self, monkeypatch):
        async def broken(**kwargs):
            raise RuntimeError("quota exhausted")

        monkeypatch.setattr("specflow.llm.adapter._provider_map", lambda: {"gemini": broken})

        with pytest.raises(LLMError, match="quota exhausted") as exc_info:
            await LLMClient(provider="gemini").complete("prompt")

        assert exc_info.value.provider == "gemini"

    @pytest.mark.asyncio
    async def test_empty_response_is_empty_string(self, monkeypatch):
        async def silent(**kwargs):
            return None

        monkeypatch.setattr("specflow.llm.adapter._provider_map", lambda: {"gemini": silent})

        assert await LLMClient(provider="gemini").complete("prompt") == ""

    def test_client_is_immutable(self):
        client = LLMClient(provider="gemini")

        with pytest.raises(AttributeError):
            client.temperature = 1.5
