# -*- coding: utf-8 -*-
"""
Usage Services
==============

Usage:
    from src.services.usage import CostRates, UsageAccountant

    accountant = UsageAccountant(CostRates())
    accountant.accumulate(result.usage)
    accountant.metrics().cost
"""

from .accountant import CostRates, UsageAccountant, UsageMetrics, compute_cost

__all__ = ["CostRates", "UsageAccountant", "UsageMetrics", "compute_cost"]
