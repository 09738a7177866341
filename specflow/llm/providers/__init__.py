"""
LLM Providers - Individual provider implementations.
"""
from . import gemini, openai, anthropic

__all__ = ["gemini", "openai", "anthropic"]
