# -*- coding: utf-8 -*-
"""
Usage and Cost Accounting
=========================

Sums token usage across the stage calls of one analysis run and converts it
to a cost:

    cost = round(((input/1000) * input_rate + (output/1000) * output_rate) * currency_rate, 2)

Rates are USD per 1K tokens; ``currency_rate`` converts the USD figure into the
reporting currency (INR by default).
"""

from dataclasses import dataclass
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from src.services.llm.types import TokenUsage


@dataclass(frozen=True)
class CostRates:
    input_rate_per_1k: float = 0.00035
    output_rate_per_1k: float = 0.00105
    currency_rate: float = 83.0

    @classmethod
    def from_settings(cls, settings) -> "CostRates":
        return cls(
            input_rate_per_1k=settings.input_rate_per_1k,
            output_rate_per_1k=settings.output_rate_per_1k,
            currency_rate=settings.currency_rate,
        )


def compute_cost(input_tokens: int, output_tokens: int, rates: CostRates) -> float:
    usd = (input_tokens / 1000) * rates.input_rate_per_1k + (
        output_tokens / 1000
    ) * rates.output_rate_per_1k
    return round(usd * rates.currency_rate, 2)


class UsageMetrics(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    input_tokens: int = Field(default=0, ge=0)
    output_tokens: int = Field(default=0, ge=0)
    total_tokens: int = Field(default=0, ge=0)
    cost: float = Field(default=0.0, ge=0)


class UsageAccountant:
    """Per-run token tally. Not shared between runs."""

    def __init__(self, rates: Optional[CostRates] = None):
        self.rates = rates or CostRates()
        self.input_tokens = 0
        self.output_tokens = 0
        self.calls = 0

    def accumulate(self, usage: Optional[TokenUsage]) -> None:
        """Add one call's usage; calls that reported nothing are ignored."""
        if usage is None:
            return
        self.input_tokens += usage.input_tokens
        self.output_tokens += usage.output_tokens
        self.calls += 1

    def compute_cost(self, total_input: int, total_output: int) -> float:
        return compute_cost(total_input, total_output, self.rates)

    def metrics(self) -> UsageMetrics:
        return UsageMetrics(
            input_tokens=self.input_tokens,
            output_tokens=self.output_tokens,
            total_tokens=self.input_tokens + self.output_tokens,
            cost=self.compute_cost(self.input_tokens, self.output_tokens),
        )


__all__ = ["CostRates", "compute_cost", "UsageMetrics", "UsageAccountant"]
