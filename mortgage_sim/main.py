"""Command-line interface for the mortgage simulator.

This module uses the ``click`` library to implement a multi-command
interface. Users can compute full amortization schedules, view summaries,
compare the two early-repayment strategies against the plain schedule or ask
for written advice. Results can be printed to the terminal or exported to
JSON/CSV files.
"""

from __future__ import annotations

import csv
import json
import logging
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple

import click

from . import config
from .advice import get_mortgage_advice
from .data_models import (
    EarlyRepaymentPlan,
    LoanDefinition,
    PeriodRecord,
    RateChange,
    RepaymentMethod,
    Strategy,
)
from .engine import compare_strategies, simulate, summarize
from .formatter import print_comparison, print_schedule, print_summary
from .utils import decimal_from_str, parse_date, parse_rate_change


AMOUNT_SUFFIXES = {"k": 1_000.0, "m": 1_000_000.0}


def parse_amount(value: str) -> float:
    """Read a loan or extra-payment amount typed on the command line.

    ``"1m"`` is a million and ``"100k"`` a hundred thousand; commas are ignored.
    """
    text = value.strip().lower().replace(",", "")
    multiplier = AMOUNT_SUFFIXES.get(text[-1:], 1.0)
    if text[-1:] in AMOUNT_SUFFIXES:
        text = text[:-1]
    try:
        return float(text) * multiplier
    except ValueError:
        raise click.BadParameter(f"Invalid amount: {text}")


def parse_rate_change_strings(values: Tuple[str, ...]) -> List[RateChange]:
    rate_changes: List[RateChange] = []
    for item in values:
        try:
            rate_changes.append(parse_rate_change(item))
        except ValueError as exc:
            raise click.BadParameter(str(exc))
    return rate_changes


def build_loan_from_options(
    principal: str,
    rate: float,
    term: int,
    method: str,
    start_date: str,
    rate_change: Tuple[str, ...] = (),
) -> LoanDefinition:
    try:
        start_dt = parse_date(start_date)
    except ValueError as exc:
        raise click.BadParameter(str(exc))
    return LoanDefinition(
        principal=decimal_from_str(str(parse_amount(principal))),
        rate=decimal_from_str(str(rate)),
        term=term,
        start_date=start_dt,
        method=RepaymentMethod(method.lower()),
        rate_changes=parse_rate_change_strings(rate_change),
    )


def build_plan_from_options(
    lump_sum: Optional[str],
    lump_sum_period: int,
    monthly_extra: Optional[str],
    strategy: str,
    extra_start: Optional[int] = None,
) -> Optional[EarlyRepaymentPlan]:
    """Return the early-repayment plan, or ``None`` when no extras were given."""
    if not lump_sum and not monthly_extra:
        return None
    return EarlyRepaymentPlan(
        lump_sum=decimal_from_str(str(parse_amount(lump_sum))) if lump_sum else decimal_from_str("0"),
        lump_sum_period=lump_sum_period,
        monthly_extra=decimal_from_str(str(parse_amount(monthly_extra))) if monthly_extra else decimal_from_str("0"),
        strategy=Strategy(strategy.lower()),
        extra_start_period=extra_start,
    )


def serialize_schedule(schedule: List[PeriodRecord]) -> List[Dict[str, Any]]:
    return [
        {
            "period": r.period,
            "date": r.date.isoformat(),
            "rate": float(r.rate),
            "payment": float(r.payment),
            "principal": float(r.principal),
            "interest": float(r.interest),
            "extra": float(r.extra),
            "balance": float(r.balance),
        }
        for r in schedule
    ]


def export_to_json(path: Path, schedule: List[PeriodRecord], summary: Dict[str, Any]) -> None:
    """Export schedule and summary to a JSON file."""
    data = {"summary": summary, "schedule": serialize_schedule(schedule)}
    with path.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)


def export_to_csv(path: Path, schedule: List[PeriodRecord]) -> None:
    """Export schedule to a CSV file."""
    header = ["Period", "Date", "Rate", "Payment", "Principal", "Interest", "Extra", "Balance"]
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(header)
        for r in schedule:
            writer.writerow(
                [
                    r.period,
                    r.date.isoformat(),
                    float(r.rate),
                    float(r.payment),
                    float(r.principal),
                    float(r.interest),
                    float(r.extra),
                    float(r.balance),
                ]
            )


def loan_options(func: Callable) -> Callable:
    """Attach the loan and early-repayment options shared by every command."""
    options = [
        click.option("--principal", "-p", "principal", required=True, help="Loan amount (accepts k/m suffixes)"),
        click.option("--rate", "-r", "rate", required=True, type=float, help="Initial annual interest rate (percent)"),
        click.option("--term", "-t", "term", required=True, type=int, help="Loan term in months"),
        click.option(
            "--method",
            "method",
            type=click.Choice([m.value for m in RepaymentMethod]),
            default=RepaymentMethod.LEVEL_PAYMENT.value,
            help="Repayment method",
        ),
        click.option("--start-date", "-s", "start_date", required=True, help="First payment date (YYYY-MM or YYYY-MM-DD)"),
        click.option("--rate-change", "rate_change", multiple=True, help="Rate change in YYYY-MM[-DD]:RATE format"),
        click.option("--lump-sum", "lump_sum", help="One-time extra payment amount"),
        click.option("--lump-sum-period", "lump_sum_period", type=int, default=1, show_default=True, help="Period of the one-time payment"),
        click.option("--monthly-extra", "monthly_extra", help="Extra amount paid every period"),
        click.option("--extra-start", "extra_start", type=int, help="First period of the monthly extra (defaults to --lump-sum-period)"),
        click.option(
            "--strategy",
            "strategy",
            type=click.Choice([s.value for s in Strategy]),
            default=Strategy.SHORTEN_TERM.value,
            help="What extra payments do to the schedule",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _build_inputs(params: Dict[str, Any]) -> Tuple[LoanDefinition, Optional[EarlyRepaymentPlan]]:
    loan = build_loan_from_options(
        params["principal"],
        params["rate"],
        params["term"],
        params["method"],
        params["start_date"],
        params["rate_change"],
    )
    plan = build_plan_from_options(
        params["lump_sum"],
        params["lump_sum_period"],
        params["monthly_extra"],
        params["strategy"],
        params["extra_start"],
    )
    return loan, plan


def _require_plan(plan: Optional[EarlyRepaymentPlan]) -> EarlyRepaymentPlan:
    if plan is None:
        raise click.BadParameter("Give --lump-sum and/or --monthly-extra to compare strategies")
    return plan


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Log simulation details to stderr")
def cli(verbose: bool) -> None:
    """A command-line mortgage simulator for early-repayment planning."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@loan_options
@click.option("--output", "output", type=str, help="Output file path (.json or .csv)")
def schedule(output: Optional[str], **params: Any) -> None:
    """Compute and print the full amortization schedule."""
    loan, plan = _build_inputs(params)
    try:
        result = simulate(loan, plan)
    except ValueError as exc:
        raise click.BadParameter(str(exc))
    summary_data = summarize(result, loan)
    if output:
        path = Path(output)
        if path.suffix.lower() == ".json":
            export_to_json(path, result.schedule, summary_data)
            click.echo(f"Schedule exported to {path}")
        elif path.suffix.lower() == ".csv":
            export_to_csv(path, result.schedule)
            click.echo(f"Schedule exported to {path}")
        else:
            raise click.BadParameter("Unsupported output format; use .json or .csv")
    else:
        print_summary(summary_data)
        # Limit schedule length printed to avoid flooding the terminal
        max_rows = config.CLI_MAX_ROWS
        if len(result.schedule) > max_rows:
            click.echo(f"Schedule has {len(result.schedule)} rows; showing first {max_rows} rows.")
            print_schedule(result.schedule[:max_rows])
        else:
            print_schedule(result.schedule)


@cli.command()
@loan_options
@click.option("--output", "output", type=str, help="Output file path (.json)")
def summary(output: Optional[str], **params: Any) -> None:
    """Compute and print only the summary metrics for a loan."""
    loan, plan = _build_inputs(params)
    try:
        result = simulate(loan, plan)
    except ValueError as exc:
        raise click.BadParameter(str(exc))
    summary_data = summarize(result, loan)
    if output:
        path = Path(output)
        if path.suffix.lower() != ".json":
            raise click.BadParameter("Summary export must use .json extension")
        with path.open("w", encoding="utf-8") as f:
            json.dump({"summary": summary_data}, f, indent=2)
        click.echo(f"Summary exported to {path}")
    else:
        print_summary(summary_data)


@cli.command()
@loan_options
def compare(**params: Any) -> None:
    """Compare the plain schedule with both early-repayment strategies.

    Example:

        mortgage-sim compare -p 1m -r 4.2 -t 360 -s 2025-01 --lump-sum 100k --lump-sum-period 12
    """
    loan, plan = _build_inputs(params)
    plan = _require_plan(plan)
    try:
        scenarios = compare_strategies(loan, plan)
    except ValueError as exc:
        raise click.BadParameter(str(exc))
    print_comparison(scenarios)


@cli.command()
@loan_options
def advice(**params: Any) -> None:
    """Ask the text API for advice on the chosen strategy."""
    loan, plan = _build_inputs(params)
    plan = _require_plan(plan)
    try:
        scenarios = compare_strategies(loan, plan)
    except ValueError as exc:
        raise click.BadParameter(str(exc))
    comparison = scenarios.for_strategy(Strategy(params["strategy"]))
    click.echo(get_mortgage_advice(comparison))


if __name__ == "__main__":
    cli()
