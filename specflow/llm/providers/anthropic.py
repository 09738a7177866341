# specflow/llm/providers/anthropic.py
"""
Anthropic messages API.
"""
from typing import Optional

from specflow.core.config import settings
from .http import post_json, warn_if_truncated


DEFAULT_MODEL = "claude-3-5-sonnet-latest"
API_URL = "https://api.anthropic.com/v1/messages"
API_VERSION = "2023-06-01"


async def call(
    prompt: str,
    system_prompt: str = "",
    model: Optional[str] = None,
    temperature: float = 0.7,
    max_tokens: int = 8000,
    timeout: int = 120,
) -> str:
    api_key = settings.llm.anthropic_api_key
    if not api_key:
        raise RuntimeError("ANTHROPIC_API_KEY not configured")

    payload = {
        "model": model or DEFAULT_MODEL,
        "max_tokens": max_tokens,
        "temperature": temperature,
        "messages": [{"role": "user", "content": prompt}],
    }
    if system_prompt:
        payload["system"] = system_prompt

    data = await post_json(
        "anthropic",
        API_URL,
        payload,
        {"x-api-key": api_key, "anthropic-version": API_VERSION},
        timeout,
    )

    blocks = [block for block in data.get("content") or [] if block.get("type") == "text"]
    if not blocks:
        raise RuntimeError("No text content in Anthropic response")

    warn_if_truncated("anthropic", data.get("stop_reason"), ("max_tokens",), max_tokens)
    return "".join(block.get("text", "") for block in blocks)
