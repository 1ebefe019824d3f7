"""Core calculation engine for the mortgage simulator.

This module implements the month-by-month amortization simulation for both
level-payment (annuity) and level-principal loans. It supports mid-term rate
changes, a one-time lump sum, recurring extra payments and the two early
repayment strategies (shorten the term or reduce the payment). Results are
returned as a ``SimulationResult`` holding the full schedule and totals.

The simulation is a fold: an immutable ``ScheduleState`` is threaded through
``_step`` once per period, so ``simulate`` is a pure function of its inputs.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date
from decimal import Decimal, Overflow, getcontext
from typing import Callable, Dict, List, Optional, Tuple
import logging

from . import config
from .data_models import (
    EarlyRepaymentPlan,
    LoanDefinition,
    PeriodRecord,
    RateChange,
    RepaymentMethod,
    SimulationResult,
    Strategy,
    StrategyComparison,
)
from .utils import add_months, same_month

getcontext().prec = config.DECIMAL_PRECISION  # increase precision for financial calculations

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


class InvalidLoanError(ValueError):
    """Raised when a loan or repayment plan cannot be simulated."""


def monthly_rate(annual_rate: Decimal) -> Decimal:
    """Convert an annual rate in percent to a monthly decimal rate."""
    return annual_rate / Decimal(100) / Decimal(12)


def level_payment(principal: Decimal, rate_per_month: Decimal, periods: int) -> Decimal:
    """Return the level (annuity) payment for a loan.

    The formula is:

        payment = P * (i * (1 + i)^n) / ((1 + i)^n - 1)

    where ``P`` is the principal, ``i`` is the monthly interest rate and
    ``n`` is the number of payments. When the interest rate is zero, the
    payment simplifies to ``P / n``.
    """
    if periods <= 0:
        raise InvalidLoanError("Term must be positive")
    if rate_per_month <= 0:
        return principal / Decimal(periods)
    try:
        factor = (1 + rate_per_month) ** periods
    except Overflow as exc:
        raise InvalidLoanError(f"Rate {rate_per_month} per period over {periods} periods is out of range") from exc
    return principal * (rate_per_month * factor) / (factor - 1)


def installment_for(method: RepaymentMethod, balance: Decimal, annual_rate: Decimal, periods: int) -> Decimal:
    """Amortize ``balance`` over ``periods``.

    For level-payment loans this is the fixed total payment; for
    level-principal loans it is the fixed principal share per period.
    """
    if method == RepaymentMethod.LEVEL_PAYMENT:
        return level_payment(balance, monthly_rate(annual_rate), periods)
    if periods <= 0:
        raise InvalidLoanError("Term must be positive")
    return balance / Decimal(periods)


@dataclass(frozen=True)
class ScheduleState:
    """Running state carried from one period to the next."""

    period: int
    annual_rate: Decimal
    balance: Decimal
    installment: Decimal  # fixed payment or fixed principal share, depending on method
    total_interest: Decimal = ZERO
    total_payment: Decimal = ZERO

    @classmethod
    def initial(cls, loan: LoanDefinition) -> "ScheduleState":
        return cls(
            period=1,
            annual_rate=loan.rate,
            balance=loan.principal,
            installment=installment_for(loan.method, loan.principal, loan.rate, loan.term),
        )


# Recompute the installment after a period with a nonzero extra payment.
# Signature: (loan, balance after the period, annual rate, period, current installment)
AfterExtraPolicy = Callable[[LoanDefinition, Decimal, Decimal, int, Decimal], Decimal]


def _keep_installment(loan: LoanDefinition, balance: Decimal, annual_rate: Decimal, period: int, installment: Decimal) -> Decimal:
    return installment


def _reamortize_remaining(loan: LoanDefinition, balance: Decimal, annual_rate: Decimal, period: int, installment: Decimal) -> Decimal:
    remaining = loan.term - period
    if remaining <= 0:
        return installment
    return installment_for(loan.method, balance, annual_rate, remaining)


AFTER_EXTRA_POLICIES: Dict[Strategy, AfterExtraPolicy] = {
    Strategy.SHORTEN_TERM: _keep_installment,
    Strategy.REDUCE_PAYMENT: _reamortize_remaining,
}


def _sort_rate_changes(rate_changes: List[RateChange]) -> List[RateChange]:
    # stable: events with the same date keep their input order
    return sorted(rate_changes, key=lambda rc: rc.date)


def _rate_change_for(rate_changes: List[RateChange], current_date: date) -> Optional[RateChange]:
    """Return the first rate change falling in the month of ``current_date``."""
    for change in rate_changes:
        if same_month(change.date, current_date):
            return change
    return None


def _validate(loan: LoanDefinition, early: Optional[EarlyRepaymentPlan]) -> None:
    if loan.term <= 0:
        raise InvalidLoanError(f"Invalid term: {loan.term} (must be at least 1 period)")
    if loan.term > config.MAX_TERM:
        raise InvalidLoanError(f"Invalid term: {loan.term} (must be at most {config.MAX_TERM} periods)")
    if loan.principal <= 0:
        raise InvalidLoanError(f"Invalid principal: {loan.principal} (must be positive)")
    if loan.rate < 0:
        raise InvalidLoanError(f"Invalid rate: {loan.rate} (must not be negative)")
    for change in loan.rate_changes:
        if change.rate < 0:
            raise InvalidLoanError(f"Invalid rate change on {change.date}: {change.rate}")
    if early is None:
        return
    if early.lump_sum_period < 1:
        raise InvalidLoanError(f"Invalid lump sum period: {early.lump_sum_period} (periods start at 1)")
    if early.recurring_start < 1:
        raise InvalidLoanError(f"Invalid extra start period: {early.recurring_start} (periods start at 1)")
    if early.lump_sum < 0 or early.monthly_extra < 0:
        raise InvalidLoanError("Extra payments must not be negative")


def _step(
    state: ScheduleState,
    loan: LoanDefinition,
    early: Optional[EarlyRepaymentPlan],
    rate_changes: List[RateChange],
) -> Tuple[ScheduleState, PeriodRecord]:
    """Simulate one period and return the next state with the period's record."""
    period = state.period
    current_date = add_months(loan.start_date, period - 1)
    annual_rate = state.annual_rate
    installment = state.installment

    change = _rate_change_for(rate_changes, current_date)
    if change is not None and change.rate != annual_rate:
        annual_rate = change.rate
        remaining = max(1, loan.term - period + 1)
        installment = installment_for(loan.method, state.balance, annual_rate, remaining)
        logger.debug("Period %d: rate changed to %s%%, installment now %s", period, annual_rate, installment)

    interest = state.balance * monthly_rate(annual_rate)
    if loan.method == RepaymentMethod.LEVEL_PAYMENT:
        principal = min(state.balance, installment - interest)
    else:
        principal = min(state.balance, installment)
    if principal < 0:
        principal = ZERO
    payment = principal + interest

    extra = ZERO
    if early is not None:
        # never pay more than what is left after the scheduled principal
        extra = min(state.balance - principal, early.extra_for(period))

    balance = state.balance - principal - extra

    record = PeriodRecord(
        period=period,
        date=current_date,
        payment=payment,
        principal=principal,
        interest=interest,
        extra=extra,
        balance=balance if balance > config.BALANCE_TOLERANCE else ZERO,
        rate=annual_rate,
    )

    if early is not None and extra > 0:
        installment = AFTER_EXTRA_POLICIES[Strategy(early.strategy)](loan, balance, annual_rate, period, installment)

    next_state = replace(
        state,
        period=period + 1,
        annual_rate=annual_rate,
        balance=balance,
        installment=installment,
        total_interest=state.total_interest + interest,
        total_payment=state.total_payment + payment + extra,
    )
    return next_state, record


def simulate(
    loan: LoanDefinition,
    early: Optional[EarlyRepaymentPlan] = None,
    *,
    max_periods: int = config.MAX_PERIODS,
) -> SimulationResult:
    """Simulate the amortization schedule of a loan.

    Parameters
    ----------
    loan: LoanDefinition
        The loan to simulate, including any scheduled rate changes.
    early: Optional[EarlyRepaymentPlan]
        Extra payments and the strategy applied after each of them. ``None``
        simulates the plain schedule.
    max_periods: int
        Safety cap on the number of periods. The loop also stops as soon as
        the balance drops to half a cent or less.

    Returns
    -------
    SimulationResult
        Totals, payoff date and one ``PeriodRecord`` per simulated period.

    Raises
    ------
    InvalidLoanError
        If the term is not positive or exceeds ``config.MAX_TERM``, the
        principal is not positive, a rate is negative or too large to
        amortize, or the repayment plan refers to a period before the first one.
    """
    _validate(loan, early)
    rate_changes = _sort_rate_changes(loan.rate_changes)

    state = ScheduleState.initial(loan)
    schedule: List[PeriodRecord] = []
    while state.balance > config.BALANCE_TOLERANCE and state.period <= max_periods:
        state, record = _step(state, loan, early, rate_changes)
        schedule.append(record)

    if state.balance > config.BALANCE_TOLERANCE:
        logger.warning(
            "Schedule stopped at the %d-period cap with %s still outstanding", max_periods, state.balance
        )

    return SimulationResult(
        total_interest=state.total_interest,
        total_payment=state.total_payment,
        payoff_date=schedule[-1].date if schedule else loan.start_date,
        total_periods=len(schedule),
        schedule=schedule,
    )


def compare_strategies(loan: LoanDefinition, plan: EarlyRepaymentPlan) -> StrategyComparison:
    """Simulate the baseline and both early-repayment strategies for ``plan``."""
    return StrategyComparison(
        baseline=simulate(loan),
        shorten_term=simulate(loan, replace(plan, strategy=Strategy.SHORTEN_TERM)),
        reduce_payment=simulate(loan, replace(plan, strategy=Strategy.REDUCE_PAYMENT)),
    )


def summarize(result: SimulationResult, loan: Optional[LoanDefinition] = None) -> Dict[str, object]:
    """Return a JSON-friendly dictionary of a result's aggregate metrics."""
    summary: Dict[str, object] = {
        "total_interest": float(result.total_interest),
        "total_payment": float(result.total_payment),
        "total_principal": float(result.total_principal),
        "total_extra": float(result.total_extra),
        "payoff_date": result.payoff_date.isoformat(),
        "total_periods": result.total_periods,
        "first_payment": float(result.schedule[0].payment) if result.schedule else 0.0,
        "last_payment": float(result.last_payment),
    }
    if loan is not None:
        summary["principal"] = float(loan.principal)
        summary["term_periods"] = loan.term
        summary["original_end_date"] = add_months(loan.start_date, loan.term - 1).isoformat()
    return summary
