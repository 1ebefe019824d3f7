"""Data models for the mortgage simulator.

This module defines dataclasses representing the loan being simulated, the
optional early-repayment plan, the per-period schedule records and the
results produced by the engine. Using dataclasses makes it easy to construct,
inspect and serialize these structures.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import List, Optional


class RepaymentMethod(str, Enum):
    """How the scheduled payment is split between principal and interest."""

    LEVEL_PAYMENT = "level-payment"  # fixed total payment per period
    LEVEL_PRINCIPAL = "level-principal"  # fixed principal portion per period


class Strategy(str, Enum):
    """What happens to the schedule after an extra payment.

    ``SHORTEN_TERM`` keeps the scheduled payment (or principal share) and lets
    the loan finish earlier. ``REDUCE_PAYMENT`` re-amortizes the remaining
    balance over the originally scheduled remaining periods, lowering every
    future payment.
    """

    SHORTEN_TERM = "shorten-term"
    REDUCE_PAYMENT = "reduce-payment"

    @property
    def label(self) -> str:
        return "Shorten term" if self == Strategy.SHORTEN_TERM else "Reduce payment"


@dataclass(frozen=True)
class RateChange:
    """A change to the annual interest rate.

    Attributes
    ----------
    date: date
        The date the new rate takes effect. Only its year and month matter:
        the change applies to the period that falls in that calendar month.
    rate: Decimal
        The new annual nominal rate in percent.
    """

    date: date
    rate: Decimal


@dataclass(frozen=True)
class LoanDefinition:
    """The loan being simulated. Immutable for the duration of a run."""

    principal: Decimal
    rate: Decimal  # initial annual nominal interest rate in percent
    term: int  # total number of monthly periods
    start_date: date  # date of the first period
    method: RepaymentMethod = RepaymentMethod.LEVEL_PAYMENT
    rate_changes: List[RateChange] = field(default_factory=list)


@dataclass(frozen=True)
class EarlyRepaymentPlan:
    """Extra payments applied on top of the scheduled ones.

    Attributes
    ----------
    lump_sum: Decimal
        One-time extra amount applied at ``lump_sum_period``.
    lump_sum_period: int
        1-based period index at which the lump sum is paid.
    monthly_extra: Decimal
        Recurring extra amount paid every period from ``extra_start_period`` on.
    strategy: Strategy
        Whether extras shorten the term or reduce later payments.
    extra_start_period: Optional[int]
        First period of the recurring extra. Defaults to ``lump_sum_period``.
    """

    lump_sum: Decimal = Decimal("0")
    lump_sum_period: int = 1
    monthly_extra: Decimal = Decimal("0")
    strategy: Strategy = Strategy.SHORTEN_TERM
    extra_start_period: Optional[int] = None

    @property
    def recurring_start(self) -> int:
        if self.extra_start_period is None:
            return self.lump_sum_period
        return self.extra_start_period

    def extra_for(self, period: int) -> Decimal:
        """Return the unclamped extra amount scheduled for ``period``."""
        extra = Decimal("0")
        if period >= self.recurring_start:
            extra += self.monthly_extra
        if period == self.lump_sum_period:
            extra += self.lump_sum
        return extra


@dataclass(frozen=True)
class PeriodRecord:
    """One period of the amortization schedule.

    ``payment`` is the scheduled payment (principal + interest) and does not
    include ``extra``. ``balance`` is the remaining balance after the period,
    never negative.
    """

    period: int
    date: date
    payment: Decimal
    principal: Decimal
    interest: Decimal
    extra: Decimal
    balance: Decimal
    rate: Decimal


@dataclass
class SimulationResult:
    total_interest: Decimal
    total_payment: Decimal  # scheduled payments plus extras
    payoff_date: date
    total_periods: int
    schedule: List[PeriodRecord]

    @property
    def total_principal(self) -> Decimal:
        return self.total_payment - self.total_interest

    @property
    def total_extra(self) -> Decimal:
        return sum((r.extra for r in self.schedule), Decimal("0"))

    @property
    def last_payment(self) -> Decimal:
        return self.schedule[-1].payment if self.schedule else Decimal("0")

    @property
    def crossover_period(self) -> Optional[int]:
        """First period whose principal portion exceeds its interest portion."""
        for record in self.schedule:
            if record.principal > record.interest:
                return record.period
        return None


@dataclass
class Savings:
    interest: Decimal
    periods: int
    money: Decimal


@dataclass
class Comparison:
    """A baseline schedule set against one early-repayment scenario."""

    baseline: SimulationResult
    optimized: SimulationResult
    savings: Savings
    strategy: Strategy = Strategy.SHORTEN_TERM


@dataclass
class StrategyComparison:
    """Baseline plus both early-repayment strategies for the same plan."""

    baseline: SimulationResult
    shorten_term: SimulationResult
    reduce_payment: SimulationResult

    @property
    def best_strategy(self) -> Strategy:
        if self.shorten_term.total_interest < self.reduce_payment.total_interest:
            return Strategy.SHORTEN_TERM
        return Strategy.REDUCE_PAYMENT

    @property
    def interest_gap(self) -> Decimal:
        return abs(self.shorten_term.total_interest - self.reduce_payment.total_interest)

    def result_for(self, strategy: Strategy) -> SimulationResult:
        if strategy == Strategy.SHORTEN_TERM:
            return self.shorten_term
        return self.reduce_payment

    def for_strategy(self, strategy: Strategy) -> Comparison:
        optimized = self.result_for(strategy)
        interest_saved = self.baseline.total_interest - optimized.total_interest
        return Comparison(
            baseline=self.baseline,
            optimized=optimized,
            savings=Savings(
                interest=interest_saved,
                periods=self.baseline.total_periods - optimized.total_periods,
                money=interest_saved,
            ),
            strategy=strategy,
        )
