import json

import pytest

import mortgage_sim_web.app as web
from mortgage_sim.engine import compare_strategies


@pytest.fixture
def client():
    web.app.config["TESTING"] = True
    with web.app.test_client() as client:
        yield client


def _form(**overrides):
    form = dict(web.DEFAULT_FORM, start_date="2025-01-01")
    form.update(overrides)
    return form


def test_index_renders_default_comparison(client):
    response = client.get("/")
    assert response.status_code == 200
    html = response.get_data(as_text=True)
    assert "Schedule (182 periods)" in html
    assert "Showing 24 / 182 periods" in html
    assert "Choose &ldquo;Shorten term&rdquo;" in html


def test_reduce_payment_strategy(client):
    html = client.post("/", data=_form(strategy="reduce-payment")).get_data(as_text=True)
    assert "Schedule (293 periods)" in html


@pytest.mark.parametrize(
    "action, visible, expected",
    [("more", "24", 48), ("all", "24", 182), ("collapse", "96", 24), ("run", "48", 48)],
)
def test_pagination(client, action, visible, expected):
    html = client.post("/", data=_form(action=action, visible_rows=visible)).get_data(as_text=True)
    assert f"Showing {expected} / 182 periods" in html


def test_invalid_input_shows_error(client):
    html = client.post("/", data=_form(principal="abc")).get_data(as_text=True)
    assert "Invalid amount: abc" in html
    assert "Schedule (" not in html


def test_invalid_term_shows_error(client):
    html = client.post("/", data=_form(term="0")).get_data(as_text=True)
    assert "Invalid term" in html


def test_oversized_term_shows_error(client):
    response = client.post("/", data=_form(term="1000000000"))
    assert response.status_code == 200
    html = response.get_data(as_text=True)
    assert "must be at most 1200 periods" in html
    assert "Schedule (" not in html


def test_rate_changes_from_form(client):
    html = client.post("/", data=_form(rate_changes="2025-03-01:3.5\n2025-06:3.0", action="all")).get_data(as_text=True)
    assert "3.50%" in html
    assert "3.00%" in html


def test_advice_action(client, monkeypatch):
    monkeypatch.setattr(web, "get_mortgage_advice", lambda comparison: f"Saved {comparison.savings.periods} periods")
    html = client.post("/", data=_form(action="advice")).get_data(as_text=True)
    assert "Saved 178 periods" in html


def test_chart_data(make_loan, make_plan):
    comparison = compare_strategies(make_loan(), make_plan()).for_strategy(web.Strategy.SHORTEN_TERM)
    balance = web.balance_chart_data(comparison)
    assert len(balance) == 31  # every 12th of 360 periods plus the last one
    assert balance[0]["label"] == "Year 0"
    assert balance[-1]["baseline"] == 0
    assert balance[-1]["optimized"] == 0

    composition = web.composition_chart_data(comparison.optimized)
    assert len(composition) == 299
    assert composition[0] == {"period": 1, "principal": 1390, "interest": 3500, "payment": 4890}

    split = web.cost_split_data(comparison.optimized)
    assert split["principal"] == pytest.approx(1000000.0, abs=0.01)
    json.dumps(split)
