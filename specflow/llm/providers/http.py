# specflow/llm/providers/http.py
"""
Shared request path for the HTTP providers.

One POST per generation. Non-200 answers become RuntimeError with the
provider name and a clipped body; LLMClient wraps them in LLMError.
"""
import json
from typing import Any, Dict, Optional

import aiohttp

from specflow.core.logging import log


ERROR_BODY_LIMIT = 200


async def post_json(
    provider: str,
    url: str,
    payload: Dict[str, Any],
    headers: Dict[str, str],
    timeout: int,
) -> Dict[str, Any]:
    log("PROMPT", f"{provider} request: {len(json.dumps(payload))} bytes")

    async with aiohttp.ClientSession() as session:
        async with session.post(
            url,
            json=payload,
            headers={"Content-Type": "application/json", **headers},
            timeout=aiohttp.ClientTimeout(total=timeout),
        ) as response:
            text = await response.text()

    if response.status == 429:
        log("LLM", f"{provider} rate limited: {text[:300]}")
        raise RuntimeError(f"Rate limited (429): {text[:ERROR_BODY_LIMIT]}")
    if response.status in (401, 403):
        raise RuntimeError(f"API key rejected ({response.status}): {text[:ERROR_BODY_LIMIT]}")
    if response.status != 200:
        raise RuntimeError(f"{provider} API error {response.status}: {text[:ERROR_BODY_LIMIT]}")

    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise RuntimeError(f"Failed to parse {provider} response: {e}")


def warn_if_truncated(provider: str, stop_reason: Optional[str], limit_reasons: tuple, max_tokens: int) -> None:
    """Documents cut at the token limit are later rejected by the parser as incomplete."""
    if stop_reason in limit_reasons:
        log("LLM", f"⚠️ {provider} stopped at max_tokens={max_tokens}; output is truncated")
