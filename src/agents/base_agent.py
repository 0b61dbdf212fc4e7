#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
BaseAgent - base class for all module agents.

Delegates to dedicated services:
- AgentConfigResolver: Configuration management
- LLMOrchestrator: Structured LLM calls, logging and token stats
- PromptManager: Prompt loading
"""

from abc import ABC, abstractmethod
from typing import Any, Optional, Type

from pydantic import BaseModel

from src.logging import get_logger
from src.services.agent import AgentConfigResolver, LLMOrchestrator
from src.services.llm import StructuredCompletion
from src.services.prompt import get_prompt_manager


class BaseAgent(ABC):
    """
    Base class for all module agents.

    This class provides:
    - LLM configuration management (via AgentConfigResolver)
    - Agent parameters (temperature, max_tokens) from agents.yaml
    - Prompt loading via PromptManager
    - Structured LLM call interface (via LLMOrchestrator)
    - Logging

    Subclasses must implement the `process()` method.

    Example:
        class MyAgent(BaseAgent):
            def __init__(self, language="en"):
                super().__init__(
                    module_name="mymodule",
                    agent_name="my_agent",
                    language=language,
                )

            async def process(self, text: str) -> StructuredCompletion:
                return await self.call_llm_structured(
                    user_prompt=self.get_prompt("user_template").format(text=text),
                    system_prompt=self.get_prompt("system"),
                    schema=MyModel,
                )
    """

    def __init__(
        self,
        module_name: str,
        agent_name: str,
        language: str = "en",
        log_dir: Optional[str] = None,
    ):
        """
        Initialize base Agent.

        Args:
            module_name: Module name (e.g. "newspaper"); selects agents.yaml params
                and the prompts directory
            agent_name: Agent name (e.g. "relevance_agent")
            language: Prompt language code, default 'en'
            log_dir: Optional log directory path
        """
        self.module_name = module_name
        self.agent_name = agent_name
        self.language = language

        logger_name = f"{module_name.capitalize()}.{agent_name}"
        self.logger = get_logger(logger_name, log_dir=log_dir)

        self._config_resolver = AgentConfigResolver(module_name, agent_name)

        self._orchestrator = LLMOrchestrator(
            config_resolver=self._config_resolver,
            agent_name=agent_name,
            module_name=module_name,
            logger=self.logger,
        )

        try:
            self.prompts = get_prompt_manager().load_prompts(
                module_name=module_name,
                agent_name=agent_name,
                language=language,
            )
            if self.prompts:
                self.logger.debug(f"Prompts loaded: {agent_name} ({language})")
        except Exception as e:
            self.prompts = None
            self.logger.warning(f"Failed to load prompts for {agent_name}: {e}")

    # -------------------------------------------------------------------------
    # LLM Call Interface (delegates to LLMOrchestrator)
    # -------------------------------------------------------------------------

    async def call_llm_structured(
        self,
        user_prompt: str,
        system_prompt: str,
        schema: Type[BaseModel],
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        model: Optional[str] = None,
        stage: Optional[str] = None,
    ) -> StructuredCompletion:
        """
        Call the LLM with output bound to ``schema``.

        Args:
            user_prompt: User prompt
            system_prompt: System prompt
            schema: Pydantic model for the reply
            temperature: Temperature parameter (optional, uses config by default)
            max_tokens: Maximum tokens (optional, uses config by default)
            model: Model name (optional, uses config by default)
            stage: Stage marker for logging and tracking

        Returns:
            StructuredCompletion with parsed output (or None) and token usage
        """
        return await self._orchestrator.complete_structured(
            user_prompt=user_prompt,
            system_prompt=system_prompt,
            schema=schema,
            temperature=temperature,
            max_tokens=max_tokens,
            model=model,
            stage=stage,
        )

    # -------------------------------------------------------------------------
    # Statistics (delegates to LLMOrchestrator)
    # -------------------------------------------------------------------------

    @classmethod
    def get_stats(cls, module_name: str):
        return LLMOrchestrator.get_stats(module_name)

    @classmethod
    def reset_stats(cls, module_name: Optional[str] = None):
        LLMOrchestrator.reset_stats(module_name)

    @classmethod
    def print_stats(cls, module_name: Optional[str] = None):
        LLMOrchestrator.print_stats(module_name)

    # -------------------------------------------------------------------------
    # Prompt Helpers
    # -------------------------------------------------------------------------

    def get_prompt(self, key: str = "system", fallback: Optional[str] = None) -> Optional[str]:
        """
        Get a prompt template by key.

        Args:
            key: Prompt key in the agent's YAML file
            fallback: Value returned when prompts or the key are missing

        Returns:
            Prompt string or fallback
        """
        if not self.prompts:
            return fallback
        value = self.prompts.get(key)
        return value if value is not None else fallback

    def require_prompt(self, key: str) -> str:
        """
        Get a prompt template that the agent cannot work without.

        Raises:
            ValueError: If the key is missing
        """
        value = self.get_prompt(key)
        if not value:
            raise ValueError(
                f"{self.__class__.__name__} missing '{key}' prompt, please configure it in "
                f"prompts/{self.language}/{self.agent_name}.yaml"
            )
        return value

    # -------------------------------------------------------------------------
    # Abstract Method
    # -------------------------------------------------------------------------

    @abstractmethod
    async def process(self, *args, **kwargs) -> Any:
        """
        Main processing logic of Agent (must be implemented by subclasses).

        Returns:
            Processing result
        """


__all__ = ["BaseAgent"]
