# -*- coding: utf-8 -*-
"""
LLM Exceptions
==============

Provider failures are mapped onto this hierarchy so callers never depend on a
specific SDK's exception types.
"""

from typing import Optional


class LLMError(Exception):
    """Base class for all LLM service errors."""

    def __init__(self, message: str, provider: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.provider = provider

    def __str__(self) -> str:
        if self.provider:
            return f"[{self.provider}] {self.message}"
        return self.message


class LLMConfigError(LLMError):
    """Missing or invalid LLM configuration (model, binding, packages)."""


class LLMAPIError(LLMError):
    """The provider returned an error or could not be reached."""

    def __init__(
        self,
        message: str,
        provider: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message, provider=provider)
        self.status_code = status_code


class LLMAuthenticationError(LLMAPIError):
    """Invalid or missing credentials."""

    def __init__(self, message: str, provider: Optional[str] = None):
        super().__init__(message, provider=provider, status_code=401)


class LLMRateLimitError(LLMAPIError):
    """Provider rate limit exceeded."""

    def __init__(self, message: str, provider: Optional[str] = None):
        super().__init__(message, provider=provider, status_code=429)


__all__ = [
    "LLMError",
    "LLMConfigError",
    "LLMAPIError",
    "LLMAuthenticationError",
    "LLMRateLimitError",
]
