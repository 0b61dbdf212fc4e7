# -*- coding: utf-8 -*-
"""
LLM Call Statistics
===================

Process-wide tally of LLM calls and token usage, grouped per module.
Shared by every agent of a module through ``LLMOrchestrator.get_stats()``.
"""

from dataclasses import dataclass, field
import threading
from typing import Optional

from .logger import get_logger


@dataclass
class _ModelTally:
    calls: int = 0
    failures: int = 0
    input_tokens: int = 0
    output_tokens: int = 0


@dataclass
class LLMStats:
    """Accumulated LLM usage for one module."""

    module_name: str
    _by_model: dict[str, _ModelTally] = field(default_factory=dict)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def add_call(
        self,
        model: str,
        input_tokens: int = 0,
        output_tokens: int = 0,
        success: bool = True,
    ) -> None:
        with self._lock:
            tally = self._by_model.setdefault(model, _ModelTally())
            tally.calls += 1
            tally.input_tokens += input_tokens
            tally.output_tokens += output_tokens
            if not success:
                tally.failures += 1

    @property
    def total_calls(self) -> int:
        return sum(t.calls for t in self._by_model.values())

    @property
    def total_failures(self) -> int:
        return sum(t.failures for t in self._by_model.values())

    @property
    def total_tokens(self) -> int:
        return sum(t.input_tokens + t.output_tokens for t in self._by_model.values())

    def reset(self) -> None:
        with self._lock:
            self._by_model.clear()

    def summary(self) -> dict[str, dict[str, int]]:
        with self._lock:
            return {
                model: {
                    "calls": t.calls,
                    "failures": t.failures,
                    "input_tokens": t.input_tokens,
                    "output_tokens": t.output_tokens,
                }
                for model, t in self._by_model.items()
            }

    def print_summary(self, logger_name: Optional[str] = None) -> None:
        logger = get_logger(logger_name or self.module_name)
        if not self._by_model:
            logger.info(f"[{self.module_name}] No LLM calls recorded")
            return
        for model, tally in self.summary().items():
            logger.info(
                f"[{self.module_name}] {model}: {tally['calls']} calls "
                f"({tally['failures']} without output), "
                f"{tally['input_tokens']} in / {tally['output_tokens']} out tokens"
            )


__all__ = ["LLMStats"]
