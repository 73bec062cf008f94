"""
Shared fakes for the quote and filing ports
"""
from datetime import date

import pytest

from mcp_stock_signals.core.domain import (
    CompanyProfile,
    EarningsActual,
    EarningsForecast,
    Filing,
    FinancialSnapshot,
    ForecastItem,
    QuarterlyFigure,
    StockQuote,
)
from mcp_stock_signals.core.ports import DocumentSource, FilingFetcher, PdfTextExtractor, QuoteProvider

PDF_BYTES = b"%PDF-1.7\n% minimal stand-in\n"

IR_TEXT = (
    "Second quarter results.\n"
    "We expect revenue to be between $10 million and $15 million for fiscal 2025.\n"
    "Cash flow remained strong."
)


def quarters(*net_incomes, operating_incomes=None):
    """Quarterly history, newest first, ending 2024-06-30 and going back"""
    ends = [date(2024, 6, 30), date(2024, 3, 31), date(2023, 12, 31), date(2023, 9, 30)]
    operating_incomes = operating_incomes or net_incomes
    return [
        QuarterlyFigure(end_date=end, net_income=ni, operating_income=oi)
        for end, ni, oi in zip(ends, net_incomes, operating_incomes)
    ]


class FakeQuotes(QuoteProvider):
    """In-memory quote provider keyed by symbol"""

    def __init__(self, figures=None, profiles=None, prices=None, forecasts=None, metrics=None, eps=None):
        self.figures = figures or {}
        self.profiles = profiles or {}
        self.prices = prices or {}
        self.forecasts = forecasts or {}
        self.metrics = metrics or {}
        self.eps = eps or {}
        self.profile_requests = []

    def get_quote(self, symbol):
        if symbol not in self.prices:
            raise ValueError(f"Stock data not found for symbol: {symbol}")
        return StockQuote(symbol=symbol, price=self.prices[symbol], change=1.0, change_percent=0.5,
                          market_cap=1e9, volume=1000)

    def get_financial_snapshot(self, symbol):
        return FinancialSnapshot(symbol=symbol, company_name=f"{symbol} Inc.",
                                 metrics=self.metrics.get(symbol, {"trailing_pe": None}))

    def get_profile(self, symbol):
        self.profile_requests.append(symbol)
        if symbol not in self.profiles:
            raise ValueError("profile unavailable")
        return self.profiles[symbol]

    def get_quarterly_figures(self, symbol):
        if symbol not in self.figures:
            raise ValueError(f"No income statement for {symbol}")
        return self.figures[symbol]

    def get_eps_history(self, symbol):
        if symbol not in self.eps:
            raise ValueError(f"No earnings history for {symbol}")
        return self.eps[symbol]

    def get_earnings_forecast(self, symbol, horizon):
        return EarningsForecast(symbol=symbol, horizon=horizon, forecasts=self.forecasts.get(symbol, []))


class FakeFetcher(FilingFetcher):
    """In-memory filing fetcher; texts keyed by accession number"""

    def __init__(self, filings=None, texts=None):
        self.filings = filings or []
        self.texts = texts or {}
        self.requests = []

    def list_recent(self, ticker, form_types, limit):
        self.requests.append((ticker, list(form_types), limit))
        matching = [f for f in self.filings if f.form_type in form_types]
        return matching[:limit]

    def fetch_text(self, filing):
        text = self.texts.get(filing.accession_number)
        if isinstance(text, Exception):
            raise text
        if text is None:
            raise ValueError(f"Filing {filing.accession_number} not found")
        return text


class FakeDocuments(DocumentSource):
    """Document bytes keyed by URL or path"""

    def __init__(self, documents=None):
        self.documents = documents or {}

    def download(self, url):
        if url not in self.documents:
            raise ValueError("PDF download failed: HTTP 404")
        return self.documents[url]

    def read(self, path):
        if path not in self.documents:
            raise FileNotFoundError(f"No such file: {path}")
        return self.documents[path]


class FakePdf(PdfTextExtractor):
    """Returns the same text for any PDF"""

    def __init__(self, text=IR_TEXT, page_count=3):
        self.text = text
        self.page_count = page_count

    def extract(self, pdf_bytes):
        return self.text, self.page_count


def make_filing(form_type, filing_date, accession, ticker="ACME"):
    return Filing(
        ticker=ticker,
        form_type=form_type,
        filing_date=filing_date,
        accession_number=accession,
        sec_url=f"https://www.sec.gov/Archives/edgar/data/1/{accession}.htm",
        company_name="Acme Corp"
    )


@pytest.fixture
def fake_quotes():
    """Quote provider with one of each trajectory"""
    return FakeQuotes(
        figures={
            "TURN": quarters(50.0, -100.0, operating_incomes=(20.0, -40.0)),
            "LOSS": quarters(-5.0, 10.0),
            "UP": quarters(30.0, 20.0),
            "DOWN": quarters(-30.0, -20.0),
            "THIN": quarters(10.0),
        },
        profiles={
            "TURN": CompanyProfile(symbol="TURN", company_name="Turn Co", market_cap=5e9),
            "UP": CompanyProfile(symbol="UP", company_name="Up Co", market_cap=2e9),
        },
        prices={"AAPL": 189.84, "MSFT": 410.5},
        forecasts={
            "NVDA": [ForecastItem(period="Current Quarter", earnings_per_share=0.64, analyst_count=40)],
        },
        metrics={"AAPL": {"trailing_pe": 29.5, "market_cap": 2.9e12}},
        eps={
            "TURN": [
                EarningsActual(quarter=date(2024, 3, 31), eps=-0.25),
                EarningsActual(quarter=date(2024, 6, 30), eps=0.12),
            ],
        },
    )


@pytest.fixture
def fake_fetcher():
    """Three recent filings, the middle one unreadable"""
    filings = [
        make_filing("10-Q", "2024-05-03", "0001"),
        make_filing("8-K", "2024-04-20", "0002"),
        make_filing("10-K", "2024-02-01", "0003"),
    ]
    texts = {
        "0001": "We expect revenue to be between $10 million and $15 million for the quarter.",
        "0002": ValueError("SEC.gov timeout"),
        "0003": (
            "For the fiscal year ended December 31, 2023 results were solid.\n"
            "We expect revenue to be between $10 million and $15 million for the quarter."
        ),
    }
    return FakeFetcher(filings=filings, texts=texts)


@pytest.fixture
def fake_documents():
    """One PDF by URL, one on disk, one HTML page posing as a PDF"""
    return FakeDocuments({
        "https://ir.example.com/q2.pdf": PDF_BYTES,
        "/data/ir/q2.pdf": PDF_BYTES,
        "https://ir.example.com/q2.html": b"<html><body>Q2</body></html>",
        "/data/ir/notes.txt": b"plain notes",
    })
