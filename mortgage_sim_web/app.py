import json
from datetime import date
from typing import Any, Dict, List

import click
from flask import Flask, render_template, request

from mortgage_sim import config
from mortgage_sim.advice import get_mortgage_advice
from mortgage_sim.data_models import Comparison, SimulationResult, Strategy, StrategyComparison
from mortgage_sim.engine import compare_strategies
from mortgage_sim.main import build_loan_from_options, build_plan_from_options

app = Flask(__name__)
app.config["ASSET_VERSION"] = config.ASSET_VERSION
app.secret_key = config.FLASK_SECRET_KEY


@app.template_filter("money")
def money(value) -> str:
    return f"{round(float(value)):,}"


DEFAULT_FORM = {
    "principal": "1000000",
    "rate": "4.2",
    "term": "360",
    "method": "level-payment",
    "rate_changes": "",
    "lump_sum": "100000",
    "lump_sum_period": "12",
    "monthly_extra": "2000",
    "strategy": Strategy.SHORTEN_TERM.value,
}


def _form_values(form) -> Dict[str, str]:
    values = dict(DEFAULT_FORM, start_date=date.today().isoformat())
    for key in values:
        if key in form:
            values[key] = form.get(key, "").strip()
    return values


def parse_form_list(value: str) -> list[str]:
    """Parse a comma or newline separated list of entries from a form field.

    Returns a list of trimmed strings, skipping any empty entries.
    """
    if not value:
        return []
    parts = [p.strip() for p in value.replace("\n", ",").split(",")]
    return [p for p in parts if p]


def _run_comparison(values: Dict[str, str]) -> StrategyComparison:
    loan = build_loan_from_options(
        values["principal"],
        float(values["rate"] or 0),
        int(values["term"] or 0),
        values["method"],
        values["start_date"],
        tuple(parse_form_list(values["rate_changes"])),
    )
    plan = build_plan_from_options(
        values["lump_sum"] or "0",
        int(values["lump_sum_period"] or 1),
        values["monthly_extra"] or "0",
        values["strategy"],
    )
    return compare_strategies(loan, plan)


def _visible_rows(action: str, current: int, total: int) -> int:
    if action == "more":
        return min(current + config.ROWS_PER_PAGE, total)
    if action == "all":
        return total
    if action == "collapse":
        return config.DEFAULT_VISIBLE_ROWS
    return max(current, config.DEFAULT_VISIBLE_ROWS)


def balance_chart_data(comparison: Comparison) -> List[Dict[str, Any]]:
    """Remaining balance of the baseline and the optimized plan, once a year."""
    baseline = comparison.baseline.schedule
    optimized = {r.period: r.balance for r in comparison.optimized.schedule}
    points = []
    for i, record in enumerate(baseline):
        if i % config.CHART_SAMPLE_EVERY != 0 and i != len(baseline) - 1:
            continue
        points.append(
            {
                "label": f"Year {record.period // 12}",
                "baseline": round(float(record.balance)),
                "optimized": round(float(optimized.get(record.period, 0))),
            }
        )
    return points


def composition_chart_data(result: SimulationResult) -> List[Dict[str, Any]]:
    """Principal and interest inside each scheduled payment, extras excluded."""
    return [
        {
            "period": r.period,
            "principal": round(float(r.principal)),
            "interest": round(float(r.interest)),
            "payment": round(float(r.principal + r.interest)),
        }
        for r in result.schedule
    ]


def cost_split_data(result: SimulationResult) -> Dict[str, float]:
    return {
        "principal": float(result.total_principal),
        "interest": float(result.total_interest),
    }


@app.route("/", methods=["GET", "POST"])
def index():
    error = None
    advice = None
    scenarios = None
    comparison = None
    charts = None
    schedule = []
    action = request.form.get("action", "run")
    values = _form_values(request.form)

    try:
        scenarios = _run_comparison(values)
    except (ValueError, click.ClickException) as exc:
        error = exc.format_message() if isinstance(exc, click.ClickException) else str(exc)

    visible_rows = config.DEFAULT_VISIBLE_ROWS
    if scenarios is not None:
        comparison = scenarios.for_strategy(Strategy(values["strategy"].lower()))
        optimized = comparison.optimized
        try:
            current_rows = int(request.form.get("visible_rows", config.DEFAULT_VISIBLE_ROWS))
        except ValueError:
            current_rows = config.DEFAULT_VISIBLE_ROWS
        visible_rows = _visible_rows(action, current_rows, optimized.total_periods)
        schedule = optimized.schedule[:visible_rows]
        charts = {
            "balance": balance_chart_data(comparison),
            "composition": composition_chart_data(optimized),
            "crossover": optimized.crossover_period,
            "cost_split": cost_split_data(optimized),
        }
        if action == "advice":
            advice = get_mortgage_advice(comparison)

    return render_template(
        "index.html",
        form=values,
        error=error,
        scenarios=scenarios,
        comparison=comparison,
        schedule=schedule,
        visible_rows=visible_rows,
        default_visible_rows=config.DEFAULT_VISIBLE_ROWS,
        rows_per_page=config.ROWS_PER_PAGE,
        advice=advice,
        charts_payload=json.dumps(charts) if charts else "null",
        asset_version=app.config["ASSET_VERSION"],
        methods=[("level-payment", "Level payment"), ("level-principal", "Level principal")],
        strategies=list(Strategy),
    )


if __name__ == "__main__":
    print("Starting mortgage simulator web app...")
    app.run(host="0.0.0.0", port=8710, debug=True)
