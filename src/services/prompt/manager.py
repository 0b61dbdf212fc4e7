# -*- coding: utf-8 -*-
"""
Prompt Manager
==============

Loads agent prompt templates from
``src/agents/<module>/prompts/<language>/<agent>.yaml``.

Each file is a YAML mapping; agents read keys such as ``system`` and
``user_template`` through ``BaseAgent.get_prompt``. When the requested language
is missing, English is used.
"""

from functools import lru_cache
from pathlib import Path
import threading
from typing import Any, Optional

import yaml

from src.logging import get_logger

logger = get_logger("PromptManager")

AGENTS_DIR = Path(__file__).resolve().parents[2] / "agents"
FALLBACK_LANGUAGE = "en"

_LANGUAGE_ALIASES = {
    "english": "en",
    "en-us": "en",
    "en-gb": "en",
    "hindi": "hi",
}


def normalize_language(language: Optional[str]) -> str:
    if not language:
        return FALLBACK_LANGUAGE
    lowered = language.strip().lower()
    return _LANGUAGE_ALIASES.get(lowered, lowered)


class PromptManager:
    """Caching loader for agent prompt files."""

    def __init__(self, agents_dir: Optional[Path] = None):
        self.agents_dir = Path(agents_dir) if agents_dir else AGENTS_DIR
        self._cache: dict[tuple[str, str, str], dict[str, Any]] = {}
        self._lock = threading.Lock()

    def _prompt_path(self, module_name: str, agent_name: str, language: str) -> Path:
        return self.agents_dir / module_name / "prompts" / language / f"{agent_name}.yaml"

    def load_prompts(
        self,
        module_name: str,
        agent_name: str,
        language: str = FALLBACK_LANGUAGE,
    ) -> dict[str, Any]:
        """
        Load the prompt mapping for one agent.

        Raises:
            FileNotFoundError: If neither the requested nor the fallback language exists
        """
        lang = normalize_language(language)
        key = (module_name, agent_name, lang)
        with self._lock:
            if key in self._cache:
                return self._cache[key]

        path = self._prompt_path(module_name, agent_name, lang)
        if not path.exists() and lang != FALLBACK_LANGUAGE:
            logger.debug(f"No {lang} prompts for {module_name}/{agent_name}, using {FALLBACK_LANGUAGE}")
            path = self._prompt_path(module_name, agent_name, FALLBACK_LANGUAGE)
        if not path.exists():
            raise FileNotFoundError(f"Prompt file not found: {path}")

        with open(path, encoding="utf-8") as f:
            prompts = yaml.safe_load(f) or {}

        with self._lock:
            self._cache[key] = prompts
        return prompts

    def clear_cache(self) -> None:
        with self._lock:
            self._cache.clear()


@lru_cache(maxsize=1)
def get_prompt_manager() -> PromptManager:
    return PromptManager()


__all__ = ["PromptManager", "get_prompt_manager", "normalize_language"]
