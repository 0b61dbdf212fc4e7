# -*- coding: utf-8 -*-
"""
LLM Services
============

Usage:
    from src.services.llm import complete_structured, get_llm_config

    config = get_llm_config()
    result = await complete_structured(
        prompt="...", schema=MyModel, model=config.model, api_key=config.api_key
    )
"""

from .config import LLMConfig, get_llm_config, get_token_limit_kwargs
from .exceptions import (
    LLMAPIError,
    LLMAuthenticationError,
    LLMConfigError,
    LLMError,
    LLMRateLimitError,
)
from .factory import complete, complete_structured
from .langchain_provider import LangChainProvider
from .types import StructuredCompletion, TokenUsage

__all__ = [
    "LLMConfig",
    "get_llm_config",
    "get_token_limit_kwargs",
    "LLMError",
    "LLMConfigError",
    "LLMAPIError",
    "LLMAuthenticationError",
    "LLMRateLimitError",
    "complete",
    "complete_structured",
    "LangChainProvider",
    "StructuredCompletion",
    "TokenUsage",
]
