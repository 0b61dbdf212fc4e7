# -*- coding: utf-8 -*-
"""
LLM Orchestrator
================

Orchestrates LLM calls with:
- Parameter resolution via AgentConfigResolver
- Logging (input/output)
- Token usage tracking in the shared per-module LLMStats
- Error logging with agent context
"""

import time
from typing import Any, Optional, Type

from pydantic import BaseModel

from src.logging import LLMStats, get_logger
from src.services.llm import StructuredCompletion
from src.services.llm import complete_structured as llm_complete_structured

from .config_resolver import AgentConfigResolver


class LLMOrchestrator:
    """
    Orchestrates LLM calls for agents.

    Usage:
        config = AgentConfigResolver("newspaper", "relevance_agent")
        orchestrator = LLMOrchestrator(config, "relevance_agent", "newspaper")

        result = await orchestrator.complete_structured(
            user_prompt="...",
            system_prompt="...",
            schema=RelevanceAssessment,
        )
    """

    # Shared stats per module (class-level singleton pattern)
    _stats: dict[str, LLMStats] = {}

    def __init__(
        self,
        config_resolver: AgentConfigResolver,
        agent_name: str,
        module_name: str,
        logger: Any = None,
    ):
        """
        Initialize the LLM orchestrator.

        Args:
            config_resolver: AgentConfigResolver instance for parameter resolution
            agent_name: Agent name for logging and tracking
            module_name: Module name for stats grouping
            logger: Optional custom logger (defaults to module.agent logger)
        """
        self.config = config_resolver
        self.agent_name = agent_name
        self.module_name = module_name
        self.logger = logger or get_logger(f"{module_name}.{agent_name}")

    @classmethod
    def get_stats(cls, module_name: str) -> LLMStats:
        """Get or create shared LLMStats for a module."""
        if module_name not in cls._stats:
            cls._stats[module_name] = LLMStats(module_name=module_name.capitalize())
        return cls._stats[module_name]

    @classmethod
    def reset_stats(cls, module_name: Optional[str] = None) -> None:
        """
        Reset stats for a module or all modules.

        Args:
            module_name: Module name (if None, reset all)
        """
        if module_name:
            if module_name in cls._stats:
                cls._stats[module_name].reset()
        else:
            for stats in cls._stats.values():
                stats.reset()

    @classmethod
    def print_stats(cls, module_name: Optional[str] = None) -> None:
        if module_name:
            if module_name in cls._stats:
                cls._stats[module_name].print_summary()
        else:
            for stats in cls._stats.values():
                stats.print_summary()

    def _track_tokens(self, model: str, result: StructuredCompletion) -> None:
        usage = result.usage
        self.get_stats(self.module_name).add_call(
            model=model,
            input_tokens=usage.input_tokens if usage else 0,
            output_tokens=usage.output_tokens if usage else 0,
            success=result.output is not None,
        )

    async def complete_structured(
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
        Run a structured-output call with full orchestration.

        Args:
            user_prompt: User prompt
            system_prompt: System prompt
            schema: Pydantic model the reply is parsed into
            temperature: Temperature override
            max_tokens: Max tokens override
            model: Model override
            stage: Stage name for logging/tracking

        Returns:
            StructuredCompletion (output may be None, usage may be set regardless)

        Raises:
            LLMError: Propagated from the provider after logging
        """
        resolved_model = self.config.get_model(model)
        stage_label = stage or self.agent_name

        kwargs = self.config.get_llm_kwargs(temperature=temperature, max_tokens=max_tokens)

        start_time = time.time()
        self.logger.log_llm_input(
            agent_name=self.agent_name,
            stage=stage_label,
            system_prompt=system_prompt,
            user_prompt=user_prompt,
            metadata={"model": resolved_model, "schema": schema.__name__, **kwargs},
        )

        try:
            result = await llm_complete_structured(
                prompt=user_prompt,
                schema=schema,
                system_prompt=system_prompt,
                model=resolved_model,
                binding=self.config.get_binding(),
                api_key=self.config.get_api_key(),
                base_url=self.config.get_base_url(),
                api_version=self.config.get_api_version(),
                max_retries=self.config.get_max_retries(),
                **kwargs,
            )
        except Exception as e:
            self.logger.error(f"LLM call failed [{stage_label}]: {e}")
            raise

        duration = time.time() - start_time
        self._track_tokens(resolved_model, result)

        self.logger.log_llm_output(
            agent_name=self.agent_name,
            stage=stage_label,
            response=result.output.model_dump_json() if result.output is not None else "<unparsed>",
            metadata={
                "duration": round(duration, 2),
                "input_tokens": result.usage.input_tokens if result.usage else None,
                "output_tokens": result.usage.output_tokens if result.usage else None,
            },
        )

        return result


__all__ = [
    "LLMOrchestrator",
]
