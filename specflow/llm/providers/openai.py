# specflow/llm/providers/openai.py
"""
OpenAI chat completions.
"""
from typing import Optional

from specflow.core.config import settings
from .http import post_json, warn_if_truncated


DEFAULT_MODEL = "gpt-4o-mini"
API_URL = "https://api.openai.com/v1/chat/completions"


async def call(
    prompt: str,
    system_prompt: str = "",
    model: Optional[str] = None,
    temperature: float = 0.7,
    max_tokens: int = 8000,
    timeout: int = 120,
) -> str:
    api_key = settings.llm.openai_api_key
    if not api_key:
        raise RuntimeError("OPENAI_API_KEY not configured")

    # Role instructions go in as the leading system message
    messages = [{"role": "system", "content": system_prompt}] if system_prompt else []
    messages.append({"role": "user", "content": prompt})

    data = await post_json(
        "openai",
        API_URL,
        {
            "model": model or DEFAULT_MODEL,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
        },
        {"Authorization": f"Bearer {api_key}"},
        timeout,
    )

    choices = data.get("choices") or []
    if not choices:
        raise RuntimeError("No choices in OpenAI response")

    warn_if_truncated("openai", choices[0].get("finish_reason"), ("length",), max_tokens)
    return choices[0].get("message", {}).get("content") or ""
