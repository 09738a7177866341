"""
LLM module - Unified interface for all LLM providers.
"""
from .adapter import LLMClient, LLMFactory, LLMParams, client_for, SUPPORTED_PROVIDERS

__all__ = ["LLMClient", "LLMFactory", "LLMParams", "client_for", "SUPPORTED_PROVIDERS"]
