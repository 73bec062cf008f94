"""
Tests for profitability turnaround classification
"""
from datetime import date

import pytest

from mcp_stock_signals.core.domain import CompanyProfile, EarningsActual, QuarterlyFigure, TurnaroundStatus
from mcp_stock_signals.core.errors import InsufficientDataError
from mcp_stock_signals.core.turnaround import (
    TurnaroundClassifier,
    classify_turnaround,
    quarterly_change,
    recent_eps,
    select_recent_quarters,
)


class TestClassifyTurnaround:
    """Decision table: (current NI, previous NI, current OI, previous OI)."""

    def test_profit_turnaround_needs_both_flips(self):
        assert classify_turnaround(5.0, -10.0, 2.0, -3.0) == TurnaroundStatus.PROFIT_TURNAROUND

    def test_net_flip_with_positive_operating_history(self):
        """Operating income was already positive, so this is not a turnaround."""
        assert classify_turnaround(5.0, -10.0, 2.0, 1.0) == TurnaroundStatus.CONTINUED_PROFIT

    def test_net_flip_with_operating_loss(self):
        assert classify_turnaround(5.0, -10.0, -1.0, -1.0) == TurnaroundStatus.CONTINUED_LOSS

    def test_loss_turnaround_ignores_operating_income(self):
        """
        Asymmetric on purpose: a loss turnaround only looks at net income,
        while a profit turnaround requires operating income to flip too.
        """
        assert classify_turnaround(-5.0, 10.0, 100.0, 100.0) == TurnaroundStatus.LOSS_TURNAROUND
        assert classify_turnaround(-5.0, 10.0, -1.0, 3.0) == TurnaroundStatus.LOSS_TURNAROUND

    def test_continued_profit(self):
        assert classify_turnaround(20.0, 10.0, 5.0, 4.0) == TurnaroundStatus.CONTINUED_PROFIT

    def test_continued_profit_requires_positive_operating_income(self):
        assert classify_turnaround(20.0, 10.0, -5.0, 4.0) == TurnaroundStatus.CONTINUED_LOSS

    def test_continued_loss(self):
        assert classify_turnaround(-20.0, -10.0, -5.0, -4.0) == TurnaroundStatus.CONTINUED_LOSS

    def test_zeros_are_not_flips(self):
        assert classify_turnaround(0.0, -10.0, 1.0, -1.0) == TurnaroundStatus.CONTINUED_LOSS
        assert classify_turnaround(5.0, 0.0, 1.0, -1.0) == TurnaroundStatus.CONTINUED_PROFIT
        assert classify_turnaround(-5.0, 0.0, 1.0, 1.0) == TurnaroundStatus.CONTINUED_LOSS

    def test_every_status_is_known(self):
        assert set(TurnaroundStatus.ALL) == {
            "profit_turnaround", "loss_turnaround", "continued_profit", "continued_loss"
        }


class TestQuarterlyChange:
    """Percent change measured against |previous|."""

    def test_growth(self):
        assert quarterly_change(150.0, 100.0) == 50.0

    def test_from_loss_is_positive(self):
        assert quarterly_change(50.0, -100.0) == 150.0

    def test_decline(self):
        assert quarterly_change(-50.0, 100.0) == -150.0

    def test_zero_previous(self):
        assert quarterly_change(5.0, 0.0) is None
        assert quarterly_change(5.0, -0.0) is None

    def test_zero_current(self):
        assert quarterly_change(0.0, -10.0) == 100.0


class TestSelectRecentQuarters:
    """Picking the two latest usable quarters."""

    def test_sorted_newest_first(self):
        older = QuarterlyFigure(end_date=date(2023, 12, 31), net_income=1.0)
        newest = QuarterlyFigure(end_date=date(2024, 6, 30), net_income=3.0)
        middle = QuarterlyFigure(end_date=date(2024, 3, 31), net_income=2.0)

        assert select_recent_quarters([older, newest, middle]) == (newest, middle)

    def test_missing_net_income_skipped(self):
        blank = QuarterlyFigure(end_date=date(2024, 6, 30), net_income=None, operating_income=5.0)
        current = QuarterlyFigure(end_date=date(2024, 3, 31), net_income=2.0)
        previous = QuarterlyFigure(end_date=date(2023, 12, 31), net_income=1.0)

        assert select_recent_quarters([blank, current, previous]) == (current, previous)

    def test_duplicate_dates_collapsed(self):
        first = QuarterlyFigure(end_date=date(2024, 6, 30), net_income=3.0)
        restated = QuarterlyFigure(end_date=date(2024, 6, 30), net_income=4.0)
        previous = QuarterlyFigure(end_date=date(2024, 3, 31), net_income=2.0)

        current, prior = select_recent_quarters([first, restated, previous])
        assert current is first
        assert prior is previous

    def test_insufficient(self):
        only = QuarterlyFigure(end_date=date(2024, 6, 30), net_income=3.0)
        duplicate = QuarterlyFigure(end_date=date(2024, 6, 30), net_income=3.0)

        with pytest.raises(InsufficientDataError, match="need 2 quarters"):
            select_recent_quarters([only, duplicate])

    def test_empty(self):
        with pytest.raises(InsufficientDataError):
            select_recent_quarters([])

    def test_insufficient_data_is_a_value_error(self):
        assert issubclass(InsufficientDataError, ValueError)


class TestDerivedOperatingIncome:
    """Operating income fallback."""

    def test_reported(self):
        figure = QuarterlyFigure(end_date=date(2024, 6, 30), operating_income=12.0,
                                 total_revenue=100.0, total_operating_expenses=50.0)
        assert figure.derived_operating_income == 12.0

    def test_reported_zero_kept(self):
        figure = QuarterlyFigure(end_date=date(2024, 6, 30), operating_income=0.0,
                                 total_revenue=100.0, total_operating_expenses=50.0)
        assert figure.derived_operating_income == 0.0

    def test_revenue_minus_expenses(self):
        figure = QuarterlyFigure(end_date=date(2024, 6, 30), total_revenue=100.0, total_operating_expenses=80.0)
        assert figure.derived_operating_income == 20.0

    def test_missing_operand(self):
        figure = QuarterlyFigure(end_date=date(2024, 6, 30), total_revenue=100.0)
        assert figure.derived_operating_income == 0.0


class TestTurnaroundClassifier:
    """End-to-end classification of a quarterly history."""

    def test_profit_turnaround_with_profile(self):
        figures = [
            QuarterlyFigure(end_date=date(2024, 3, 31), net_income=-100.0, operating_income=-40.0),
            QuarterlyFigure(end_date=date(2024, 6, 30), net_income=50.0,
                            total_revenue=300.0, total_operating_expenses=280.0),
        ]
        profile = CompanyProfile(symbol="TURN", company_name="Turn Co", market_cap=5e9)

        result = TurnaroundClassifier().classify("TURN", figures, profile)

        assert result.status == TurnaroundStatus.PROFIT_TURNAROUND
        assert result.current_net_income == 50.0
        assert result.previous_net_income == -100.0
        assert result.current_operating_income == 20.0
        assert result.previous_operating_income == -40.0
        assert result.quarterly_change == 150.0
        assert result.market_cap == 5e9
        assert result.company_name == "Turn Co"
        assert result.current_period == "2024-06-30"
        assert result.previous_period == "2024-03-31"
        assert result.timestamp is not None

    def test_without_profile(self):
        figures = [
            QuarterlyFigure(end_date=date(2024, 6, 30), net_income=10.0, operating_income=5.0),
            QuarterlyFigure(end_date=date(2024, 3, 31), net_income=0.0, operating_income=5.0),
        ]

        result = TurnaroundClassifier().classify("FLAT", figures)

        assert result.status == TurnaroundStatus.CONTINUED_PROFIT
        assert result.quarterly_change is None
        assert result.market_cap is None
        assert result.company_name is None

    def test_to_dict(self):
        figures = [
            QuarterlyFigure(end_date=date(2024, 6, 30), net_income=-1.0, operating_income=-1.0),
            QuarterlyFigure(end_date=date(2024, 3, 31), net_income=-2.0, operating_income=-1.0),
        ]

        data = TurnaroundClassifier().classify("DOWN", figures).to_dict()

        assert data["symbol"] == "DOWN"
        assert data["status"] == "continued_loss"
        assert data["quarterly_change"] == 50.0

    def test_eps_from_latest_two_reported_quarters(self):
        figures = [
            QuarterlyFigure(end_date=date(2024, 6, 30), net_income=10.0, operating_income=5.0),
            QuarterlyFigure(end_date=date(2024, 3, 31), net_income=-2.0, operating_income=-1.0),
        ]
        history = [
            EarningsActual(quarter=date(2023, 12, 31), eps=-0.40),
            EarningsActual(quarter=date(2024, 6, 30), eps=0.08),
            EarningsActual(quarter=date(2024, 3, 31), eps=-0.03),
        ]

        result = TurnaroundClassifier().classify("TURN", figures, eps_history=history)

        assert result.current_eps == 0.08
        assert result.previous_eps == -0.03
        assert result.to_dict()["current_eps"] == 0.08

    def test_eps_absent_without_history(self):
        figures = [
            QuarterlyFigure(end_date=date(2024, 6, 30), net_income=10.0, operating_income=5.0),
            QuarterlyFigure(end_date=date(2024, 3, 31), net_income=-2.0, operating_income=-1.0),
        ]

        result = TurnaroundClassifier().classify("TURN", figures)

        assert result.current_eps is None
        assert result.previous_eps is None


class TestRecentEps:
    """Current and previous EPS actuals."""

    def test_single_quarter(self):
        assert recent_eps([EarningsActual(quarter=date(2024, 6, 30), eps=1.1)]) == (1.1, None)

    def test_empty(self):
        assert recent_eps([]) == (None, None)

    def test_missing_actual_kept_in_place(self):
        history = [
            EarningsActual(quarter=date(2024, 6, 30), eps=None),
            EarningsActual(quarter=date(2024, 3, 31), eps=0.5),
        ]
        assert recent_eps(history) == (None, 0.5)
