# -*- coding: utf-8 -*-
"""
LangChain LLM Provider
======================

Provides LangChain-based LLM integration with:
- Multi-provider support (OpenAI, Azure OpenAI, Anthropic, Ollama)
- Structured output bound to pydantic schemas, with token usage reported even
  when the reply cannot be parsed
- Provider error mapping onto the LLMError hierarchy

Usage:
    from src.services.llm.langchain_provider import LangChainProvider

    result = await LangChainProvider.complete_structured(
        prompt="Classify this article...",
        system_prompt="You are an exam coach",
        schema=RelevanceAssessment,
        model="gpt-4o-mini",
        binding="openai",
    )
    result.output   # RelevanceAssessment or None
    result.usage    # TokenUsage or None
"""

import os
from typing import Any, Dict, List, Optional, Type

from pydantic import BaseModel, ValidationError

from src.logging import get_logger

from .config import get_token_limit_kwargs
from .exceptions import (
    LLMAPIError,
    LLMAuthenticationError,
    LLMConfigError,
    LLMError,
    LLMRateLimitError,
)
from .types import StructuredCompletion, TokenUsage
from .utils import get_effective_temperature, is_local_llm_server, sanitize_url

logger = get_logger("LangChain")

# Langfuse callback handler - lazy loaded
_langfuse_handler: Optional[Any] = None
_langfuse_checked: bool = False


def _get_langfuse_handler():
    """Lazily initialize and return the Langfuse callback handler, if installed."""
    global _langfuse_handler, _langfuse_checked
    if _langfuse_checked:
        return _langfuse_handler
    _langfuse_checked = True
    if not os.getenv("LANGFUSE_PUBLIC_KEY"):
        return None
    try:
        from langfuse.langchain import CallbackHandler

        _langfuse_handler = CallbackHandler()
        logger.info("Langfuse tracing enabled")
    except Exception as e:
        logger.debug(f"Langfuse tracing unavailable: {e}")
        _langfuse_handler = None
    return _langfuse_handler


def _invoke_config() -> Dict[str, Any]:
    langfuse_cb = _get_langfuse_handler()
    return {"callbacks": [langfuse_cb]} if langfuse_cb else {}


def _extract_usage(message: Any) -> Optional[TokenUsage]:
    """
    Read token usage from a LangChain AIMessage.

    Prefers the normalised ``usage_metadata``; falls back to the OpenAI-style
    ``response_metadata["token_usage"]`` block. Returns None when the provider
    reported nothing.
    """
    if message is None:
        return None

    usage_metadata = getattr(message, "usage_metadata", None)
    if usage_metadata:
        return TokenUsage(
            input_tokens=int(usage_metadata.get("input_tokens", 0) or 0),
            output_tokens=int(usage_metadata.get("output_tokens", 0) or 0),
        )

    response_metadata = getattr(message, "response_metadata", None) or {}
    token_usage = response_metadata.get("token_usage") or response_metadata.get("usage")
    if token_usage:
        return TokenUsage(
            input_tokens=int(
                token_usage.get("prompt_tokens", token_usage.get("input_tokens", 0)) or 0
            ),
            output_tokens=int(
                token_usage.get("completion_tokens", token_usage.get("output_tokens", 0)) or 0
            ),
        )
    return None


def _map_error(error: Exception, binding: str) -> LLMError:
    if isinstance(error, LLMError):
        return error

    error_msg = str(error)
    lowered = error_msg.lower()
    status_code = getattr(error, "status_code", None)

    if status_code == 401 or "authentication" in lowered or "api key" in lowered:
        return LLMAuthenticationError(f"Authentication failed: {error_msg}", provider=binding)
    if status_code == 429 or "rate limit" in lowered or "429" in error_msg:
        return LLMRateLimitError(f"Rate limit exceeded: {error_msg}", provider=binding)
    return LLMAPIError(
        f"LangChain API error: {error_msg}",
        provider=binding,
        status_code=status_code if isinstance(status_code, int) else None,
    )


class LangChainProvider:
    """
    LangChain-based LLM provider.

    All methods are classmethods; a chat model instance is built per call from
    the resolved parameters.
    """

    @classmethod
    def _get_llm(
        cls,
        binding: str,
        model: str,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        api_version: Optional[str] = None,
        temperature: float = 0.7,
        max_retries: Optional[int] = None,
        **kwargs: Any,
    ) -> Any:
        """
        Get a LangChain chat model for the specified provider.

        Args:
            binding: Provider binding (openai, azure_openai, anthropic, ollama)
            model: Model name
            api_key: API key
            base_url: Base URL for the API
            api_version: API version (Azure OpenAI only)
            temperature: Temperature for generation
            max_retries: Retry count for transient provider errors
            **kwargs: Token limit and other provider-specific arguments

        Returns:
            LangChain BaseChatModel instance
        """
        binding_lower = (binding or "openai").lower()

        common_kwargs: Dict[str, Any] = {
            "temperature": get_effective_temperature(binding_lower, model, temperature),
            **kwargs,
        }

        if binding_lower in ["anthropic", "claude"]:
            if max_retries is not None:
                common_kwargs["max_retries"] = max_retries
            return cls._get_anthropic_llm(model, api_key, base_url, **common_kwargs)
        elif binding_lower == "ollama" or (base_url and is_local_llm_server(base_url)):
            return cls._get_ollama_llm(model, base_url, **common_kwargs)
        elif binding_lower in ["azure", "azure_openai"]:
            if max_retries is not None:
                common_kwargs["max_retries"] = max_retries
            return cls._get_azure_llm(model, api_key, base_url, api_version, **common_kwargs)
        else:
            if max_retries is not None:
                common_kwargs["max_retries"] = max_retries
            return cls._get_openai_llm(model, api_key, base_url, **common_kwargs)

    @classmethod
    def _get_openai_llm(
        cls,
        model: str,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        **kwargs: Any,
    ) -> Any:
        """Get OpenAI-compatible LLM instance."""
        from langchain_openai import ChatOpenAI

        if base_url:
            base_url = sanitize_url(base_url, model)

        api_key = api_key or os.getenv("OPENAI_API_KEY")

        llm_kwargs: Dict[str, Any] = {"model": model, **kwargs}
        if api_key:
            llm_kwargs["api_key"] = api_key
        if base_url:
            llm_kwargs["base_url"] = base_url

        return ChatOpenAI(**llm_kwargs)

    @classmethod
    def _get_azure_llm(
        cls,
        model: str,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        api_version: Optional[str] = None,
        **kwargs: Any,
    ) -> Any:
        """Get Azure OpenAI LLM instance."""
        from langchain_openai import AzureChatOpenAI

        if not base_url:
            raise LLMConfigError("LLM_HOST (Azure endpoint) is required", provider="azure_openai")
        if not api_version:
            raise LLMConfigError("LLM_API_VERSION is required", provider="azure_openai")

        return AzureChatOpenAI(
            azure_deployment=model,
            azure_endpoint=sanitize_url(base_url, model),
            api_version=api_version,
            api_key=api_key or os.getenv("AZURE_OPENAI_API_KEY"),
            **kwargs,
        )

    @classmethod
    def _get_anthropic_llm(
        cls,
        model: str,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        **kwargs: Any,
    ) -> Any:
        """Get Anthropic LLM instance."""
        try:
            from langchain_anthropic import ChatAnthropic
        except ImportError:
            raise LLMConfigError(
                "langchain-anthropic not installed. Run: pip install 'newsprep[anthropic]'"
            )

        api_key = api_key or os.getenv("ANTHROPIC_API_KEY")
        if not api_key:
            raise LLMAuthenticationError("Anthropic API key not provided", provider="anthropic")

        # ChatAnthropic has no max_completion_tokens alias
        if "max_completion_tokens" in kwargs:
            kwargs["max_tokens"] = kwargs.pop("max_completion_tokens")

        llm_kwargs: Dict[str, Any] = {"model": model, "api_key": api_key, **kwargs}
        if base_url:
            llm_kwargs["base_url"] = base_url

        return ChatAnthropic(**llm_kwargs)

    @classmethod
    def _get_ollama_llm(
        cls,
        model: str,
        base_url: Optional[str] = None,
        **kwargs: Any,
    ) -> Any:
        """Get Ollama LLM instance."""
        try:
            from langchain_ollama import ChatOllama
        except ImportError:
            raise LLMConfigError(
                "langchain-ollama not installed. Run: pip install 'newsprep[ollama]'"
            )

        # Ollama names the generation limit num_predict
        max_tokens = kwargs.pop("max_tokens", None) or kwargs.pop("max_completion_tokens", None)
        llm_kwargs: Dict[str, Any] = {"model": model, **kwargs}
        if max_tokens:
            llm_kwargs["num_predict"] = max_tokens

        if base_url:
            base_url = base_url.rstrip("/")
            if base_url.endswith("/v1"):
                base_url = base_url[:-3]
            llm_kwargs["base_url"] = base_url

        return ChatOllama(**llm_kwargs)

    @classmethod
    def _build_messages(cls, prompt: str, system_prompt: str) -> List[Any]:
        from langchain_core.messages import HumanMessage, SystemMessage

        result: List[Any] = []
        if system_prompt:
            result.append(SystemMessage(content=system_prompt))
        result.append(HumanMessage(content=prompt))
        return result

    @classmethod
    def _llm_kwargs(
        cls,
        model: str,
        temperature: Optional[float],
        max_tokens: Optional[int],
    ) -> Dict[str, Any]:
        llm_kwargs: Dict[str, Any] = {}
        if temperature is not None:
            llm_kwargs["temperature"] = temperature
        if max_tokens:
            llm_kwargs.update(get_token_limit_kwargs(model, max_tokens))
        return llm_kwargs

    @classmethod
    async def complete(
        cls,
        prompt: str,
        system_prompt: str = "You are a helpful assistant.",
        model: Optional[str] = None,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        api_version: Optional[str] = None,
        binding: str = "openai",
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        max_retries: Optional[int] = None,
    ) -> str:
        """
        Complete a prompt and return the plain-text reply.

        Used for connectivity checks; the analysis stages use
        ``complete_structured``.
        """
        if not model:
            raise LLMConfigError("Model not specified", provider=binding)

        try:
            llm = cls._get_llm(
                binding=binding,
                model=model,
                api_key=api_key,
                base_url=base_url,
                api_version=api_version,
                max_retries=max_retries,
                **cls._llm_kwargs(model, temperature, max_tokens),
            )
            response = await llm.ainvoke(
                cls._build_messages(prompt, system_prompt), config=_invoke_config()
            )
        except Exception as e:
            raise _map_error(e, binding) from e

        content = response.content if hasattr(response, "content") else str(response)
        return content if isinstance(content, str) else str(content)

    @classmethod
    async def complete_structured(
        cls,
        prompt: str,
        schema: Type[BaseModel],
        system_prompt: str = "You are a helpful assistant.",
        model: Optional[str] = None,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        api_version: Optional[str] = None,
        binding: str = "openai",
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        max_retries: Optional[int] = None,
    ) -> StructuredCompletion:
        """
        Complete a prompt with output bound to a pydantic schema.

        Args:
            prompt: User prompt
            schema: Pydantic model the reply must conform to
            system_prompt: System prompt
            model: Model name
            api_key: API key
            base_url: Base URL for the API
            api_version: API version (for Azure OpenAI)
            binding: Provider binding
            temperature: Temperature for generation
            max_tokens: Maximum tokens to generate
            max_retries: Retry count for transient provider errors

        Returns:
            StructuredCompletion; ``output`` is None if the reply did not parse

        Raises:
            LLMError: On configuration or provider failure
        """
        if not model:
            raise LLMConfigError("Model not specified", provider=binding)

        try:
            llm = cls._get_llm(
                binding=binding,
                model=model,
                api_key=api_key,
                base_url=base_url,
                api_version=api_version,
                max_retries=max_retries,
                **cls._llm_kwargs(model, temperature, max_tokens),
            )
            structured = llm.with_structured_output(schema, include_raw=True)
            result = await structured.ainvoke(
                cls._build_messages(prompt, system_prompt), config=_invoke_config()
            )
        except Exception as e:
            raise _map_error(e, binding) from e

        raw = result.get("raw") if isinstance(result, dict) else None
        parsed = result.get("parsed") if isinstance(result, dict) else result
        parsing_error = result.get("parsing_error") if isinstance(result, dict) else None

        if parsing_error is not None:
            logger.warning(f"Structured output did not match {schema.__name__}: {parsing_error}")
            parsed = None
        elif parsed is not None and not isinstance(parsed, schema):
            try:
                parsed = schema.model_validate(parsed)
            except ValidationError as e:
                logger.warning(f"Structured output did not match {schema.__name__}: {e}")
                parsed = None

        return StructuredCompletion(output=parsed, usage=_extract_usage(raw))


__all__ = [
    "LangChainProvider",
]
