from types import SimpleNamespace

import pytest

from mortgage_sim import advice, config
from mortgage_sim.data_models import Strategy
from mortgage_sim.engine import compare_strategies


class FakeModels:
    def __init__(self, text=None, error=None):
        self.text = text
        self.error = error
        self.calls = []

    def generate_content(self, model, contents):
        self.calls.append((model, contents))
        if self.error is not None:
            raise self.error
        return SimpleNamespace(text=self.text)


def _client(**kwargs):
    return SimpleNamespace(models=FakeModels(**kwargs))


@pytest.fixture
def comparison(make_loan, make_plan):
    return compare_strategies(make_loan(), make_plan()).for_strategy(Strategy.SHORTEN_TERM)


def test_prompt_contains_comparison_figures(comparison):
    prompt = advice.build_advice_prompt(comparison)
    assert f"{comparison.baseline.total_interest:.2f}" in prompt
    assert comparison.baseline.payoff_date.isoformat() in prompt
    assert "Paid off earlier by: 61 months" in prompt
    assert "shorten term" in prompt


def test_returns_text_verbatim(comparison):
    client = _client(text="**Pay it down.**")
    assert advice.get_mortgage_advice(comparison, client=client) == "**Pay it down.**"
    model, contents = client.models.calls[0]
    assert model == config.ADVICE_MODEL
    assert "Interest saved" in contents


def test_empty_response(comparison):
    assert advice.get_mortgage_advice(comparison, client=_client(text="")) == config.ADVICE_EMPTY


def test_failure_returns_fallback(comparison, caplog):
    client = _client(error=ConnectionError("offline"))
    assert advice.get_mortgage_advice(comparison, client=client) == config.ADVICE_FAILED
    assert "failed" in caplog.text
    assert len(client.models.calls) == 1


def test_client_construction_failure_returns_fallback(comparison, monkeypatch):
    def broken_client(**kwargs):
        raise ValueError("missing api key")

    monkeypatch.setattr(advice.genai, "Client", broken_client)
    assert advice.get_mortgage_advice(comparison) == config.ADVICE_FAILED
