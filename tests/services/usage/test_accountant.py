import pytest

from src.services.llm.types import TokenUsage
from src.services.usage import CostRates, UsageAccountant, compute_cost


def test_compute_cost_default_rates():
    # ((1000/1000)*0.00035 + (2000/1000)*0.00105) * 83 = 0.20335
    assert compute_cost(1000, 2000, CostRates()) == pytest.approx(0.2)


def test_compute_cost_is_rounded_to_two_places():
    rates = CostRates(input_rate_per_1k=1.0, output_rate_per_1k=1.0, currency_rate=1.0)
    assert compute_cost(1234, 0, rates) == 1.23


def test_compute_cost_zero_tokens():
    assert compute_cost(0, 0, CostRates()) == 0.0


def test_accountant_sums_reported_usage_only():
    accountant = UsageAccountant(CostRates(input_rate_per_1k=1.0, output_rate_per_1k=2.0, currency_rate=1.0))
    accountant.accumulate(TokenUsage(input_tokens=1000, output_tokens=500))
    accountant.accumulate(None)
    accountant.accumulate(TokenUsage(input_tokens=1000, output_tokens=500))

    metrics = accountant.metrics()
    assert metrics.input_tokens == 2000
    assert metrics.output_tokens == 1000
    assert metrics.total_tokens == 3000
    assert metrics.cost == 4.0
    assert accountant.calls == 2


def test_cost_is_derived_from_token_counts():
    accountant = UsageAccountant()
    accountant.accumulate(TokenUsage(input_tokens=12000, output_tokens=3000))
    metrics = accountant.metrics()
    assert metrics.cost == accountant.compute_cost(metrics.input_tokens, metrics.output_tokens)


def test_metrics_serialize_with_camel_case():
    accountant = UsageAccountant()
    accountant.accumulate(TokenUsage(input_tokens=10, output_tokens=5))
    dumped = accountant.metrics().model_dump(by_alias=True)
    assert dumped["inputTokens"] == 10
    assert dumped["totalTokens"] == 15
