from datetime import date
from decimal import Decimal

import pytest

from mortgage_sim.data_models import EarlyRepaymentPlan, LoanDefinition, RepaymentMethod, Strategy


@pytest.fixture
def make_loan():
    def _make(principal="1000000", rate="4.2", term=360, method=RepaymentMethod.LEVEL_PAYMENT, rate_changes=(), start=date(2025, 1, 1)):
        return LoanDefinition(
            principal=Decimal(principal),
            rate=Decimal(rate),
            term=term,
            start_date=start,
            method=method,
            rate_changes=list(rate_changes),
        )

    return _make


@pytest.fixture
def make_plan():
    def _make(lump_sum="100000", lump_sum_period=12, monthly_extra="0", strategy=Strategy.SHORTEN_TERM, extra_start_period=None):
        return EarlyRepaymentPlan(
            lump_sum=Decimal(lump_sum),
            lump_sum_period=lump_sum_period,
            monthly_extra=Decimal(monthly_extra),
            strategy=strategy,
            extra_start_period=extra_start_period,
        )

    return _make
