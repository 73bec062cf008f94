"""
Ports - Interfaces for external dependencies

These define HOW the core interacts with the outside world,
but NOT the implementation details.
"""
from abc import ABC, abstractmethod

from .domain import (
    CompanyProfile,
    EarningsActual,
    EarningsForecast,
    Filing,
    FinancialSnapshot,
    QuarterlyFigure,
    StockQuote,
)


class QuoteProvider(ABC):
    """Port for market quotes and income-statement history"""

    @abstractmethod
    def get_quote(self, symbol: str) -> StockQuote:
        """Latest price quote"""
        pass

    @abstractmethod
    def get_financial_snapshot(self, symbol: str) -> FinancialSnapshot:
        """Valuation, profitability and balance-sheet metrics"""
        pass

    @abstractmethod
    def get_profile(self, symbol: str) -> CompanyProfile:
        """Company name and market cap"""
        pass

    @abstractmethod
    def get_quarterly_figures(self, symbol: str) -> list[QuarterlyFigure]:
        """Quarterly income-statement history, any order"""
        pass

    @abstractmethod
    def get_eps_history(self, symbol: str) -> list[EarningsActual]:
        """Reported quarterly EPS, any order"""
        pass

    @abstractmethod
    def get_earnings_forecast(self, symbol: str, horizon: str) -> EarningsForecast:
        """Analyst consensus, horizon is "quarterly" or "annual" """
        pass


class FilingFetcher(ABC):
    """Port for fetching filings from SEC"""

    @abstractmethod
    def list_recent(self, ticker: str, form_types: list[str], limit: int) -> list[Filing]:
        """Most recent filings of the given forms, newest first"""
        pass

    @abstractmethod
    def fetch_text(self, filing: Filing) -> str:
        """Download filing content as plain text"""
        pass


class DocumentSource(ABC):
    """Port for raw document bytes, remote or local"""

    @abstractmethod
    def download(self, url: str) -> bytes:
        """Fetch a document over HTTP(S)"""
        pass

    @abstractmethod
    def read(self, path: str) -> bytes:
        """Read a document from the local filesystem"""
        pass


class PdfTextExtractor(ABC):
    """Port for turning PDF bytes into plain text"""

    @abstractmethod
    def extract(self, pdf_bytes: bytes) -> tuple[str, int]:
        """(text, page count)"""
        pass
