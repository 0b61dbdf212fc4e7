# -*- coding: utf-8 -*-
"""
Agent Configuration Resolver
============================

Resolves agent configuration with proper priority:
1. Explicit overrides (passed to methods)
2. Module-specific config (from agents.yaml)
3. LLM config (from the environment)
4. Defaults
"""

import os
from typing import Any, Optional

from src.services.config import get_agent_params
from src.services.llm import LLMConfig, get_llm_config
from src.services.llm.config import DEFAULT_MAX_RETRIES
from src.services.llm.exceptions import LLMConfigError


class AgentConfigResolver:
    """
    Resolves agent configuration from multiple sources.

    Usage:
        resolver = AgentConfigResolver("newspaper", "relevance_agent")
        model = resolver.get_model()
        kwargs = resolver.get_llm_kwargs(temperature=0.2)
    """

    def __init__(self, module_name: str, agent_name: str):
        """
        Initialize the config resolver.

        Args:
            module_name: Module name (e.g., "newspaper")
            agent_name: Agent name (e.g., "relevance_agent")
        """
        self.module_name = module_name
        self.agent_name = agent_name
        self._agent_params = get_agent_params(module_name)
        self._llm_config: Optional[LLMConfig] = None
        self._refresh_llm_config()

    def _refresh_llm_config(self) -> None:
        # Missing LLM config is reported lazily by get_model()
        try:
            self._llm_config = get_llm_config()
        except LLMConfigError:
            self._llm_config = None

    def get_model(self, override: Optional[str] = None) -> str:
        """
        Get model name with priority resolution.

        Raises:
            ValueError: If no model is configured
        """
        if override:
            return override
        if self._llm_config and self._llm_config.model:
            return self._llm_config.model
        env_model = os.getenv("LLM_MODEL")
        if env_model:
            return env_model
        raise ValueError(
            f"Model not configured for agent {self.agent_name}. "
            "Please set LLM_MODEL in .env or the environment."
        )

    def get_temperature(self, override: Optional[float] = None) -> float:
        if override is not None:
            return override
        return self._agent_params["temperature"]

    def get_max_tokens(self, override: Optional[int] = None) -> int:
        if override is not None:
            return override
        return self._agent_params["max_tokens"]

    def get_max_retries(self) -> int:
        if self._llm_config:
            return self._llm_config.max_retries
        return DEFAULT_MAX_RETRIES

    def get_api_key(self) -> Optional[str]:
        if self._llm_config:
            return self._llm_config.api_key
        return os.getenv("LLM_API_KEY")

    def get_base_url(self) -> Optional[str]:
        if self._llm_config:
            return self._llm_config.base_url
        return os.getenv("LLM_HOST")

    def get_api_version(self) -> Optional[str]:
        """Get API version (Azure OpenAI)."""
        if self._llm_config:
            return self._llm_config.api_version
        return os.getenv("LLM_API_VERSION")

    def get_binding(self) -> str:
        if self._llm_config:
            return self._llm_config.binding
        return os.getenv("LLM_BINDING", "openai")

    def get_llm_kwargs(
        self,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> dict[str, Any]:
        """
        Build the generation kwargs for an LLM call.

        Token limits are passed as ``max_tokens`` here; the provider renames
        them for model families that expect ``max_completion_tokens``.
        """
        kwargs: dict[str, Any] = {"temperature": self.get_temperature(temperature)}
        resolved_max_tokens = self.get_max_tokens(max_tokens)
        if resolved_max_tokens:
            kwargs["max_tokens"] = resolved_max_tokens
        return kwargs


__all__ = [
    "AgentConfigResolver",
]
