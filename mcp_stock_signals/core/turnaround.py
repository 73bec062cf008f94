"""
Profitability turnaround classification

Compares the two most recent quarters of net income and operating income.
"""
from datetime import datetime, timezone
from typing import Iterable, Optional

from .domain import CompanyProfile, EarningsActual, QuarterlyFigure, TurnaroundResult, TurnaroundStatus
from .errors import InsufficientDataError


def select_recent_quarters(figures: Iterable[QuarterlyFigure]) -> tuple[QuarterlyFigure, QuarterlyFigure]:
    """
    Pick (current, previous) from a quarterly history.

    Quarters without net income are dropped, the rest sorted newest first and
    de-duplicated by end date (first one wins).
    """
    usable = [f for f in figures if f.net_income is not None]
    usable.sort(key=lambda f: f.end_date, reverse=True)

    seen_dates = set()
    unique = []
    for figure in usable:
        if figure.end_date not in seen_dates:
            seen_dates.add(figure.end_date)
            unique.append(figure)

    if len(unique) < 2:
        raise InsufficientDataError(
            f"Insufficient quarterly data: need 2 quarters with net income, found {len(unique)}"
        )
    return unique[0], unique[1]


def classify_turnaround(
    current_net_income: float,
    previous_net_income: float,
    current_operating_income: float,
    previous_operating_income: float
) -> str:
    """
    Assign a trajectory status. First matching rule wins:

    1. profit_turnaround - net income AND operating income both flip from
       negative to positive
    2. loss_turnaround - net income flips from positive to negative
       (operating income is not consulted)
    3. continued_profit - current net and operating income both positive
    4. continued_loss - everything else, zeros and mixed signs included
    """
    net_flip = previous_net_income < 0 and current_net_income > 0
    operating_flip = previous_operating_income < 0 and current_operating_income > 0
    if net_flip and operating_flip:
        return TurnaroundStatus.PROFIT_TURNAROUND
    if previous_net_income > 0 and current_net_income < 0:
        return TurnaroundStatus.LOSS_TURNAROUND
    if current_net_income > 0 and current_operating_income > 0:
        return TurnaroundStatus.CONTINUED_PROFIT
    return TurnaroundStatus.CONTINUED_LOSS


def quarterly_change(current: float, previous: float) -> Optional[float]:
    """Percent change against |previous|, None when previous is exactly zero"""
    if previous == 0:
        return None
    return (current - previous) / abs(previous) * 100


def recent_eps(history: Iterable[EarningsActual]) -> tuple[Optional[float], Optional[float]]:
    """(current, previous) EPS actuals from the two latest reported quarters"""
    latest = sorted(history, key=lambda actual: actual.quarter, reverse=True)
    current = latest[0].eps if latest else None
    previous = latest[1].eps if len(latest) > 1 else None
    return current, previous


class TurnaroundClassifier:
    """Build a TurnaroundResult from a quarterly income history"""

    def classify(
        self,
        symbol: str,
        figures: Iterable[QuarterlyFigure],
        profile: Optional[CompanyProfile] = None,
        eps_history: Iterable[EarningsActual] = ()
    ) -> TurnaroundResult:
        current, previous = select_recent_quarters(figures)
        return self.classify_quarters(symbol, current, previous, profile, eps_history)

    def classify_quarters(
        self,
        symbol: str,
        current: QuarterlyFigure,
        previous: QuarterlyFigure,
        profile: Optional[CompanyProfile] = None,
        eps_history: Iterable[EarningsActual] = ()
    ) -> TurnaroundResult:
        """Result for an already selected (current, previous) pair"""
        current_net = float(current.net_income)
        previous_net = float(previous.net_income)
        current_operating = float(current.derived_operating_income)
        previous_operating = float(previous.derived_operating_income)
        current_eps, previous_eps = recent_eps(eps_history)

        return TurnaroundResult(
            symbol=symbol,
            status=classify_turnaround(current_net, previous_net, current_operating, previous_operating),
            current_net_income=current_net,
            previous_net_income=previous_net,
            current_operating_income=current_operating,
            previous_operating_income=previous_operating,
            quarterly_change=quarterly_change(current_net, previous_net),
            current_eps=current_eps,
            previous_eps=previous_eps,
            market_cap=profile.market_cap if profile else None,
            company_name=profile.company_name if profile else None,
            current_period=current.end_date.isoformat(),
            previous_period=previous.end_date.isoformat(),
            timestamp=datetime.now(timezone.utc).isoformat()
        )
