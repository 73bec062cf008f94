"""
Yahoo Finance Adapter

Implements QuoteProvider port using the yfinance library.
"""
import logging
import math
from datetime import datetime, timezone
from typing import Any, Optional

import pandas as pd
import yfinance as yf

from ..core.domain import (
    CompanyProfile,
    EarningsActual,
    EarningsForecast,
    FinancialSnapshot,
    ForecastItem,
    QuarterlyFigure,
    StockQuote,
)
from ..core.ports import QuoteProvider

logger = logging.getLogger(__name__)

# Income statement row labels used by yfinance
NET_INCOME_ROWS = ("Net Income", "Net Income Common Stockholders")
OPERATING_INCOME_ROWS = ("Operating Income",)
TOTAL_REVENUE_ROWS = ("Total Revenue",)
OPERATING_EXPENSE_ROWS = ("Total Expenses",)

# Snapshot metric -> yfinance info key
FINANCIAL_METRICS = {
    "market_cap": "marketCap",
    "enterprise_value": "enterpriseValue",
    "trailing_pe": "trailingPE",
    "forward_pe": "forwardPE",
    "peg_ratio": "trailingPegRatio",
    "price_to_book": "priceToBook",
    "price_to_sales": "priceToSalesTrailing12Months",
    "enterprise_to_revenue": "enterpriseToRevenue",
    "enterprise_to_ebitda": "enterpriseToEbitda",
    "total_revenue": "totalRevenue",
    "revenue_per_share": "revenuePerShare",
    "quarterly_revenue_growth": "revenueGrowth",
    "gross_profit": "grossProfits",
    "ebitda": "ebitda",
    "net_income_to_common": "netIncomeToCommon",
    "quarterly_earnings_growth": "earningsGrowth",
    "total_cash": "totalCash",
    "total_cash_per_share": "totalCashPerShare",
    "total_debt": "totalDebt",
    "debt_to_equity": "debtToEquity",
    "current_ratio": "currentRatio",
    "book_value_per_share": "bookValue",
    "operating_cash_flow": "operatingCashflow",
    "levered_free_cash_flow": "freeCashflow",
    "return_on_assets": "returnOnAssets",
    "return_on_equity": "returnOnEquity",
    "profit_margin": "profitMargins",
    "operating_margin": "operatingMargins",
    "dividend_yield": "dividendYield",
    "payout_ratio": "payoutRatio",
    "beta": "beta",
}

# yfinance estimate index -> period label
QUARTERLY_PERIODS = {"0q": "Current Quarter", "+1q": "Next Quarter"}
ANNUAL_PERIODS = {"0y": "Current Fiscal Year", "+1y": "Next Fiscal Year"}


def _number(value: Any) -> Optional[float]:
    """Coerce a cell or info value to float, None for missing/NaN"""
    if value is None:
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number):
        return None
    return number


def _row_value(column: pd.Series, labels: tuple[str, ...]) -> Optional[float]:
    for label in labels:
        if label in column.index:
            value = _number(column[label])
            if value is not None:
                return value
    return None


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def income_statement_to_figures(statement: Optional[pd.DataFrame]) -> list[QuarterlyFigure]:
    """
    Convert a yfinance quarterly income statement to QuarterlyFigures.

    The frame has line items as rows and period end dates as columns.
    """
    if statement is None or statement.empty:
        return []

    figures = []
    for period_end in statement.columns:
        column = statement[period_end]
        figures.append(QuarterlyFigure(
            end_date=pd.Timestamp(period_end).date(),
            net_income=_row_value(column, NET_INCOME_ROWS),
            operating_income=_row_value(column, OPERATING_INCOME_ROWS),
            total_revenue=_row_value(column, TOTAL_REVENUE_ROWS),
            total_operating_expenses=_row_value(column, OPERATING_EXPENSE_ROWS)
        ))
    return figures


def earnings_history_to_actuals(history: Optional[pd.DataFrame]) -> list[EarningsActual]:
    """
    Convert yfinance earnings_history to EarningsActuals.

    The frame has one row per reported quarter, indexed by quarter end, with
    the reported figure in "epsActual".
    """
    if history is None or history.empty or "epsActual" not in history.columns:
        return []
    return [
        EarningsActual(quarter=pd.Timestamp(quarter).date(), eps=_number(eps))
        for quarter, eps in history["epsActual"].items()
    ]


def estimates_to_forecasts(
    earnings: Optional[pd.DataFrame],
    revenue: Optional[pd.DataFrame],
    periods: dict[str, str]
) -> list[ForecastItem]:
    """Join EPS and revenue consensus frames on the yfinance period index"""
    forecasts = []
    for key, label in periods.items():
        eps_row = earnings.loc[key] if earnings is not None and key in earnings.index else None
        revenue_row = revenue.loc[key] if revenue is not None and key in revenue.index else None
        if eps_row is None and revenue_row is None:
            continue

        analysts = _number(eps_row.get("numberOfAnalysts")) if eps_row is not None else None
        forecasts.append(ForecastItem(
            period=label,
            earnings_per_share=_number(eps_row.get("avg")) if eps_row is not None else None,
            eps_low=_number(eps_row.get("low")) if eps_row is not None else None,
            eps_high=_number(eps_row.get("high")) if eps_row is not None else None,
            revenue=_number(revenue_row.get("avg")) if revenue_row is not None else None,
            analyst_count=int(analysts) if analysts is not None else None,
            growth=_number(eps_row.get("growth")) if eps_row is not None else None
        ))
    return forecasts


class YahooQuoteAdapter(QuoteProvider):
    """Quote provider using yfinance"""

    def __init__(self):
        logging.getLogger("yfinance").setLevel(logging.WARNING)

    def _ticker(self, symbol: str) -> yf.Ticker:
        return yf.Ticker(symbol)

    def _info(self, symbol: str) -> dict:
        info = self._ticker(symbol).info
        return info or {}

    def get_quote(self, symbol: str) -> StockQuote:
        info = self._info(symbol)
        price = _number(info.get("regularMarketPrice")) or _number(info.get("currentPrice"))
        if not price:
            raise ValueError(f"Stock data not found for symbol: {symbol}")

        volume = _number(info.get("regularMarketVolume"))
        return StockQuote(
            symbol=info.get("symbol") or symbol,
            price=price,
            currency=info.get("currency") or "USD",
            change=_number(info.get("regularMarketChange")),
            change_percent=_number(info.get("regularMarketChangePercent")),
            market_cap=_number(info.get("marketCap")),
            volume=int(volume) if volume is not None else None,
            timestamp=_now()
        )

    def get_financial_snapshot(self, symbol: str) -> FinancialSnapshot:
        info = self._info(symbol)
        return FinancialSnapshot(
            symbol=symbol,
            company_name=info.get("shortName"),
            metrics={name: _number(info.get(key)) for name, key in FINANCIAL_METRICS.items()},
            timestamp=_now()
        )

    def get_profile(self, symbol: str) -> CompanyProfile:
        info = self._info(symbol)
        return CompanyProfile(
            symbol=symbol,
            company_name=info.get("shortName") or info.get("longName"),
            market_cap=_number(info.get("marketCap"))
        )

    def get_quarterly_figures(self, symbol: str) -> list[QuarterlyFigure]:
        statement = self._ticker(symbol).quarterly_income_stmt
        figures = income_statement_to_figures(statement)
        logger.debug(f"{symbol}: {len(figures)} quarterly income statements")
        return figures

    def get_eps_history(self, symbol: str) -> list[EarningsActual]:
        return earnings_history_to_actuals(self._ticker(symbol).earnings_history)

    def get_earnings_forecast(self, symbol: str, horizon: str) -> EarningsForecast:
        if horizon not in ("quarterly", "annual"):
            raise ValueError(f"Unknown forecast horizon: {horizon}")

        ticker = self._ticker(symbol)
        periods = QUARTERLY_PERIODS if horizon == "quarterly" else ANNUAL_PERIODS
        forecasts = estimates_to_forecasts(ticker.earnings_estimate, ticker.revenue_estimate, periods)

        info = ticker.info or {}
        return EarningsForecast(
            symbol=symbol,
            horizon=horizon,
            forecasts=forecasts,
            company_name=info.get("shortName"),
            timestamp=_now()
        )
