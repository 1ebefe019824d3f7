"""Output helpers for the mortgage simulator.

This module provides simple functions to render amortization schedules,
summaries and strategy comparisons in a tabular text format. We rely only on
built-in printing and string formatting.
"""

from __future__ import annotations

from typing import Dict, Iterable

from .data_models import PeriodRecord, StrategyComparison
from .engine import summarize


def print_summary(summary: Dict[str, object]) -> None:
    """Print a summary of loan metrics in a human-readable format."""
    print("Summary")
    print("-" * 72)
    if "principal" in summary:
        print(f"Principal          : {summary['principal']:.2f}")
    print(f"Total interest     : {summary['total_interest']:.2f}")
    if summary.get("total_extra"):
        print(f"Extra payments     : {summary['total_extra']:.2f}")
    print(f"Total paid         : {summary['total_payment']:.2f}")
    print(f"First payment      : {summary['first_payment']:.2f}")
    print(f"Last payment       : {summary['last_payment']:.2f}")
    if "original_end_date" in summary:
        print(f"Original end date  : {summary['original_end_date']}")
    print(f"Payoff date        : {summary['payoff_date']}")
    print(f"Periods            : {summary['total_periods']}")
    print("-" * 72)


def print_schedule(schedule: Iterable[PeriodRecord]) -> None:
    """Print the amortization schedule as a simple table."""
    headers = [
        "Period",
        "Date",
        "Rate",
        "Payment",
        "Principal",
        "Interest",
        "Extra",
        "Balance",
    ]
    print("\t".join(headers))
    for record in schedule:
        row = [
            str(record.period),
            record.date.isoformat(),
            f"{record.rate:.2f}%",
            f"{record.payment:.2f}",
            f"{record.principal:.2f}",
            f"{record.interest:.2f}",
            f"{record.extra:.2f}",
            f"{record.balance:.2f}",
        ]
        print("\t".join(row))


def print_comparison(scenarios: StrategyComparison) -> None:
    """Print the baseline and both early-repayment strategies side by side.

    The difference columns are measured against the baseline; a negative
    value means the strategy is cheaper or shorter.
    """
    baseline = summarize(scenarios.baseline)
    shorten = summarize(scenarios.shorten_term)
    reduce = summarize(scenarios.reduce_payment)
    print("Comparison")
    print("=" * 72)
    print(f"{'Metric':16s} {'Baseline':>16s} {'Shorten term':>18s} {'Reduce payment':>18s}")
    for key in ("total_interest", "total_payment", "first_payment", "last_payment"):
        print(f"{key:16s} {baseline[key]:16.2f} {shorten[key]:18.2f} {reduce[key]:18.2f}")
    print(
        f"{'total_periods':16s} {baseline['total_periods']:16d} "
        f"{shorten['total_periods']:18d} {reduce['total_periods']:18d}"
    )
    print(f"{'payoff_date':16s} {baseline['payoff_date']:>16s} {shorten['payoff_date']:>18s} {reduce['payoff_date']:>18s}")
    print("-" * 72)
    best = scenarios.best_strategy
    print(f"Recommended        : {best.label}")
    print(f"Extra interest saved over the other strategy: {scenarios.interest_gap:.2f}")
    print("=" * 72)
