# -*- coding: utf-8 -*-
"""
Prompt Services
===============

Usage:
    from src.services.prompt import get_prompt_manager

    prompts = get_prompt_manager().load_prompts("newspaper", "relevance_agent", "en")
"""

from .manager import PromptManager, get_prompt_manager, normalize_language

__all__ = ["PromptManager", "get_prompt_manager", "normalize_language"]
