# -*- coding: utf-8 -*-
"""
LLM Factory
===========

Module-level entry points that fill in the provider binding from the active
LLMConfig before delegating to LangChainProvider.
"""

from typing import Any, Optional, Type

from pydantic import BaseModel

from .config import get_llm_config
from .langchain_provider import LangChainProvider
from .types import StructuredCompletion


def _resolve_binding(binding: Optional[str]) -> str:
    if binding:
        return binding
    return get_llm_config().binding


async def complete(prompt: str, binding: Optional[str] = None, **kwargs: Any) -> str:
    """Plain-text completion through the configured provider."""
    return await LangChainProvider.complete(
        prompt=prompt, binding=_resolve_binding(binding), **kwargs
    )


async def complete_structured(
    prompt: str,
    schema: Type[BaseModel],
    binding: Optional[str] = None,
    **kwargs: Any,
) -> StructuredCompletion:
    """Structured completion through the configured provider."""
    return await LangChainProvider.complete_structured(
        prompt=prompt, schema=schema, binding=_resolve_binding(binding), **kwargs
    )


__all__ = ["complete", "complete_structured"]
