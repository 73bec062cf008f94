"""
Domain Models - Pure business entities

No external dependencies. These represent the core business concepts.
"""
from dataclasses import asdict, dataclass, field
from datetime import date
from typing import Optional


class TurnaroundStatus:
    """Profitability trajectory labels"""
    PROFIT_TURNAROUND = "profit_turnaround"
    LOSS_TURNAROUND = "loss_turnaround"
    CONTINUED_PROFIT = "continued_profit"
    CONTINUED_LOSS = "continued_loss"

    ALL = (PROFIT_TURNAROUND, LOSS_TURNAROUND, CONTINUED_PROFIT, CONTINUED_LOSS)


@dataclass
class Filing:
    """A SEC filing document"""
    ticker: str
    form_type: str
    filing_date: str  # YYYY-MM-DD format
    accession_number: str
    sec_url: str
    company_name: Optional[str] = None
    cik: Optional[str] = None


@dataclass
class QuarterlyFigure:
    """One reporting quarter of income-statement figures"""
    end_date: date
    net_income: Optional[float] = None
    operating_income: Optional[float] = None
    total_revenue: Optional[float] = None
    total_operating_expenses: Optional[float] = None

    @property
    def derived_operating_income(self) -> float:
        """
        Operating income, derived when the statement does not report it.

        Falls back to revenue minus operating expenses, and to 0.0 when either
        operand is missing. A zero fallback can hide a real operating loss.
        """
        if self.operating_income is not None:
            return self.operating_income
        if self.total_revenue is not None and self.total_operating_expenses is not None:
            return self.total_revenue - self.total_operating_expenses
        return 0.0


@dataclass
class CompanyProfile:
    """Name and size of a listed company"""
    symbol: str
    company_name: Optional[str] = None
    market_cap: Optional[float] = None


@dataclass
class EarningsActual:
    """Reported EPS for one fiscal quarter"""
    quarter: date
    eps: Optional[float] = None


@dataclass(frozen=True)
class TurnaroundResult:
    """Profitability trajectory of one symbol at one point in time"""
    symbol: str
    status: str
    current_net_income: float
    previous_net_income: float
    current_operating_income: float
    previous_operating_income: float
    quarterly_change: Optional[float] = None
    current_eps: Optional[float] = None
    previous_eps: Optional[float] = None
    market_cap: Optional[float] = None
    company_name: Optional[str] = None
    current_period: Optional[str] = None
    previous_period: Optional[str] = None
    timestamp: Optional[str] = None

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class ScreenCriteria:
    """Bounds for a multi-symbol turnaround screen"""
    symbols: list[str]
    min_market_cap: Optional[float] = None
    max_market_cap: Optional[float] = None

    def __post_init__(self):
        if not self.symbols:
            raise ValueError("At least one stock symbol is required")

    def accepts_market_cap(self, market_cap: Optional[float]) -> bool:
        """Inclusive bounds check; an unknown market cap is always accepted"""
        if market_cap is None:
            return True
        if self.min_market_cap is not None and market_cap < self.min_market_cap:
            return False
        if self.max_market_cap is not None and market_cap > self.max_market_cap:
            return False
        return True


@dataclass
class ValueRange:
    """Lower and upper bound of a guided figure, in base units"""
    min: Optional[float] = None
    max: Optional[float] = None


@dataclass
class GuidanceCandidate:
    """A raw pattern match within filing text"""
    matched_text: str
    context_window: str
    category: str
    source_form: str


@dataclass
class GuidanceItem:
    """A forward-looking statement ready to hand back to the caller"""
    guidance_type: str
    period: str
    guidance: str
    source: str
    filing_date: str
    value: Optional[float] = None
    value_range: Optional[ValueRange] = None
    url: Optional[str] = None
    context: Optional[str] = None

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class GuidanceReport:
    """Guidance collected from a company's recent filings"""
    symbol: str
    guidances: list[GuidanceItem]
    filings_examined: int = 0
    filings_failed: int = 0
    company_name: Optional[str] = None
    timestamp: Optional[str] = None


@dataclass
class StockQuote:
    """Latest market quote"""
    symbol: str
    price: float
    currency: str = "USD"
    change: Optional[float] = None
    change_percent: Optional[float] = None
    market_cap: Optional[float] = None
    volume: Optional[int] = None
    timestamp: Optional[str] = None


@dataclass
class FinancialSnapshot:
    """Valuation and fundamental metrics for one symbol"""
    symbol: str
    company_name: Optional[str] = None
    metrics: dict[str, Optional[float]] = field(default_factory=dict)
    timestamp: Optional[str] = None


@dataclass
class ForecastItem:
    """Analyst consensus for one fiscal period"""
    period: str
    earnings_per_share: Optional[float] = None
    eps_low: Optional[float] = None
    eps_high: Optional[float] = None
    revenue: Optional[float] = None
    analyst_count: Optional[int] = None
    growth: Optional[float] = None
    source: str = "analyst_consensus"


@dataclass
class EarningsForecast:
    """Quarterly or annual consensus estimates"""
    symbol: str
    horizon: str  # "quarterly" or "annual"
    forecasts: list[ForecastItem]
    company_name: Optional[str] = None
    timestamp: Optional[str] = None


@dataclass
class PdfDocument:
    """Text and statistics extracted from an investor-relations PDF"""
    symbol: str
    document_type: str
    country: str
    source: str  # URL or local path
    text: str
    page_count: int
    document_size: int  # bytes
    processing_time_ms: int
    extraction_date: str
    word_count: int
    contains_financial_data: bool
    guidances: list[GuidanceItem] = field(default_factory=list)

    @property
    def text_length(self) -> int:
        return len(self.text)

    def to_dict(self) -> dict:
        data = asdict(self)
        data["text_length"] = self.text_length
        return data
