# -*- coding: utf-8 -*-
"""
LLM Result Types
================
"""

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class TokenUsage:
    """Token counts reported by a single model call."""

    input_tokens: int = 0
    output_tokens: int = 0

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens


@dataclass
class StructuredCompletion(Generic[T]):
    """
    Result of a structured-output call.

    ``output`` is None when the model's reply could not be parsed into the
    requested schema; ``usage`` is still set whenever the provider reported it.
    """

    output: Optional[T] = None
    usage: Optional[TokenUsage] = None


__all__ = ["TokenUsage", "StructuredCompletion"]
