"""
Turnaround screening across a list of symbols
"""
import logging
from functools import cmp_to_key
from typing import Callable

from .domain import ScreenCriteria, TurnaroundResult, TurnaroundStatus

logger = logging.getLogger(__name__)


def _by_change_descending(a: TurnaroundResult, b: TurnaroundResult) -> int:
    # Unknown change on either side compares equal; the sort is stable
    if a.quarterly_change is None or b.quarterly_change is None:
        return 0
    if a.quarterly_change > b.quarterly_change:
        return -1
    if a.quarterly_change < b.quarterly_change:
        return 1
    return 0


def rank_by_change(results: list[TurnaroundResult]) -> list[TurnaroundResult]:
    return sorted(results, key=cmp_to_key(_by_change_descending))


class ScreeningAggregator:
    """
    Classify symbols one at a time and keep the profit turnarounds.

    Symbols run sequentially in list order to stay inside quote API rate
    limits. A symbol that fails is logged and skipped.
    """

    def __init__(self, analyze: Callable[[str], TurnaroundResult]):
        self.analyze = analyze

    def screen(self, criteria: ScreenCriteria) -> list[TurnaroundResult]:
        matches = []
        for symbol in criteria.symbols:
            try:
                result = self.analyze(symbol)
            except Exception as e:
                logger.warning(f"Skipping {symbol}: {e}")
                continue

            if not criteria.accepts_market_cap(result.market_cap):
                continue
            if result.status == TurnaroundStatus.PROFIT_TURNAROUND:
                matches.append(result)

        return rank_by_change(matches)
