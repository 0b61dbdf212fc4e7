# -*- coding: utf-8 -*-
"""
Agent Services
==============

Services for agent infrastructure:
- AgentConfigResolver: Configuration resolution with priority
- LLMOrchestrator: LLM call orchestration with logging and tracking

Usage:
    from src.services.agent import AgentConfigResolver, LLMOrchestrator

    config = AgentConfigResolver("newspaper", "relevance_agent")
    orchestrator = LLMOrchestrator(
        config_resolver=config,
        agent_name="relevance_agent",
        module_name="newspaper",
    )
    result = await orchestrator.complete_structured(
        user_prompt="...", system_prompt="...", schema=RelevanceAssessment
    )
"""

from .config_resolver import AgentConfigResolver
from .orchestrator import LLMOrchestrator

__all__ = [
    "AgentConfigResolver",
    "LLMOrchestrator",
]
