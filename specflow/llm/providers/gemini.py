# specflow/llm/providers/gemini.py
"""
Google Gemini provider (default).
"""
from typing import Optional

from specflow.core.config import settings
from .http import post_json, warn_if_truncated


DEFAULT_MODEL = "gemini-2.0-flash"
API_URL = "https://generativelanguage.googleapis.com/v1beta/models"


async def call(
    prompt: str,
    system_prompt: str = "",
    model: Optional[str] = None,
    temperature: float = 0.7,
    max_tokens: int = 8000,
    timeout: int = 120,
) -> str:
    """
    One generateContent request.

    Raises:
        RuntimeError: missing key, HTTP error, or a response without text
    """
    api_key = settings.llm.gemini_api_key
    if not api_key:
        raise RuntimeError("GEMINI_API_KEY not configured")

    payload = {
        "contents": [{"role": "user", "parts": [{"text": prompt}]}],
        "generationConfig": {
            "temperature": temperature,
            "maxOutputTokens": max_tokens,
        },
    }
    if system_prompt:
        payload["systemInstruction"] = {"parts": [{"text": system_prompt}]}

    data = await post_json(
        "gemini",
        f"{API_URL}/{model or DEFAULT_MODEL}:generateContent",
        payload,
        {"x-goog-api-key": api_key},
        timeout,
    )

    candidates = data.get("candidates") or []
    if not candidates:
        feedback = data.get("promptFeedback", {}).get("blockReason")
        raise RuntimeError(f"No candidates in Gemini response{f' (blocked: {feedback})' if feedback else ''}")

    candidate = candidates[0]
    parts = candidate.get("content", {}).get("parts") or []
    if not parts:
        raise RuntimeError(f"Empty Gemini candidate (finishReason={candidate.get('finishReason')})")

    warn_if_truncated("gemini", candidate.get("finishReason"), ("MAX_TOKENS",), max_tokens)
    return "".join(part.get("text", "") for part in parts)
