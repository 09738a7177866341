# specflow/llm/adapter.py
"""
LLM client - single interface for all providers.

NO FALLBACK: If the configured provider fails, the request fails.
NO RETRIES: A failed call aborts the phase; the user re-triggers it.

An LLMClient is an immutable bundle of call parameters. Executors receive one
as an argument for the duration of a single call chain and never store it.
"""
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from pydantic import BaseModel, Field

from specflow.core.config import settings
from specflow.core.exceptions import LLMError
from specflow.core.logging import log


SUPPORTED_PROVIDERS = ("gemini", "openai", "anthropic")


class LLMParams(BaseModel):
    """Per-executor generation parameters, as declared in the phase specification."""
    provider: Optional[str] = None
    model: Optional[str] = None
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    max_tokens: int = Field(default=8000, gt=0)


def _provider_map() -> Dict[str, Callable]:
    # Import here to avoid circular imports
    from .providers import gemini, openai, anthropic

    return {
        "gemini": gemini.call,
        "openai": openai.call,
        "anthropic": anthropic.call,
    }


@dataclass(frozen=True)
class LLMClient:
    """One-request-per-call wrapper around a provider."""
    provider: str
    model: Optional[str] = None
    temperature: float = 0.7
    max_tokens: int = 8000
    timeout: int = 120

    async def complete(self, prompt: str, system_prompt: str = "") -> str:
        """
        Issue exactly one generation request.

        Raises:
            LLMError: unknown provider, or any provider failure
        """
        provider_map = _provider_map()
        if self.provider not in provider_map:
            raise LLMError(self.provider, f"Unknown provider: {self.provider}")

        log("LLM", f"→ {self.provider}/{self.model or 'default'} (max_tokens={self.max_tokens}, temperature={self.temperature})")
        try:
            text = await provider_map[self.provider](
                prompt=prompt,
                system_prompt=system_prompt,
                model=self.model,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
                timeout=self.timeout,
            )
        except Exception as e:
            raise LLMError(self.provider, f"Provider error: {e}")

        log("LLM", f"← {self.provider} returned {len(text or '')} chars")
        return text or ""


LLMFactory = Callable[[LLMParams], LLMClient]


def client_for(params: Optional[LLMParams] = None) -> LLMClient:
    """Build a client from phase-spec params, falling back to settings defaults."""
    params = params or LLMParams()
    provider = params.provider or settings.llm.default_provider
    if provider not in SUPPORTED_PROVIDERS:
        raise LLMError(provider, f"Unknown provider: {provider}")
    return LLMClient(
        provider=provider,
        model=params.model or settings.llm.default_model,
        temperature=params.temperature,
        max_tokens=params.max_tokens,
        timeout=settings.llm.request_timeout,
    )
