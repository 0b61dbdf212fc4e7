# -*- coding: utf-8 -*-
"""
LLM Configuration
=================

Reads the active LLM provider settings from the environment (``.env`` is loaded
through python-dotenv):

- LLM_BINDING      provider binding: openai, azure_openai, anthropic, ollama
- LLM_MODEL        model name (required)
- LLM_API_KEY      provider API key
- LLM_HOST         base URL for OpenAI-compatible or local servers
- LLM_API_VERSION  API version (Azure OpenAI)
- LLM_MAX_RETRIES  retry count handed to the LangChain chat model
"""

from dataclasses import dataclass
import os
from typing import Any, Optional

from dotenv import load_dotenv

from src.services.config.loader import PROJECT_ROOT

from .exceptions import LLMConfigError

load_dotenv(PROJECT_ROOT / ".env", override=False)

DEFAULT_MAX_RETRIES = 2

# Models that only accept max_completion_tokens
_COMPLETION_TOKEN_PREFIXES = ("o1", "o3", "o4", "gpt-5")


@dataclass(frozen=True)
class LLMConfig:
    binding: str
    model: str
    api_key: Optional[str] = None
    base_url: Optional[str] = None
    api_version: Optional[str] = None
    max_retries: int = DEFAULT_MAX_RETRIES


def get_llm_config() -> LLMConfig:
    """
    Build the LLM configuration from environment variables.

    Raises:
        LLMConfigError: If LLM_MODEL is not set or LLM_MAX_RETRIES is invalid
    """
    model = (os.getenv("LLM_MODEL") or "").strip()
    if not model:
        raise LLMConfigError("LLM_MODEL is not set. Configure it in .env or the environment.")

    raw_retries = os.getenv("LLM_MAX_RETRIES")
    try:
        max_retries = int(raw_retries) if raw_retries else DEFAULT_MAX_RETRIES
    except ValueError as e:
        raise LLMConfigError(f"LLM_MAX_RETRIES must be an integer, got {raw_retries!r}") from e
    if max_retries < 0:
        raise LLMConfigError("LLM_MAX_RETRIES must be >= 0")

    return LLMConfig(
        binding=(os.getenv("LLM_BINDING") or "openai").strip().lower(),
        model=model,
        api_key=os.getenv("LLM_API_KEY") or None,
        base_url=os.getenv("LLM_HOST") or None,
        api_version=os.getenv("LLM_API_VERSION") or None,
        max_retries=max_retries,
    )


def get_token_limit_kwargs(model: str, max_tokens: int) -> dict[str, Any]:
    """Return the token limit kwarg under the name the model family expects."""
    if model.lower().startswith(_COMPLETION_TOKEN_PREFIXES):
        return {"max_completion_tokens": max_tokens}
    return {"max_tokens": max_tokens}


__all__ = ["LLMConfig", "get_llm_config", "get_token_limit_kwargs", "DEFAULT_MAX_RETRIES"]
