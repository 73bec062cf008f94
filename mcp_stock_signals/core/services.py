"""
Application Services - Use cases that orchestrate domain logic

These are the entry points to the core. They coordinate between
domain models and ports, but contain no infrastructure concerns.
"""
import logging
import time
from datetime import datetime, timezone
from typing import Literal, Optional

from .domain import (
    CompanyProfile,
    EarningsActual,
    EarningsForecast,
    Filing,
    FinancialSnapshot,
    GuidanceItem,
    GuidanceReport,
    PdfDocument,
    ScreenCriteria,
    StockQuote,
    TurnaroundResult,
)
from .documents import contains_financial_data, is_pdf, validate_request, word_count
from .errors import InsufficientDataError
from .guidance import (
    AnnualReportGuidanceExtractor,
    GuidanceAssembler,
    GuidancePatternExtractor,
    estimate_fiscal_year,
    period_label,
)
from .ports import DocumentSource, FilingFetcher, PdfTextExtractor, QuoteProvider
from .screening import ScreeningAggregator
from .turnaround import TurnaroundClassifier, select_recent_quarters

logger = logging.getLogger(__name__)

GUIDANCE_FORMS = ["10-K", "10-Q", "8-K"]


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class StockQuoteService:
    """Use case: Latest quote for one or more symbols"""

    def __init__(self, quotes: QuoteProvider):
        self.quotes = quotes

    def execute(self, symbol: str) -> StockQuote:
        try:
            return self.quotes.get_quote(symbol)
        except Exception as e:
            raise ValueError(f"Failed to fetch stock price for {symbol}: {e}") from e

    def execute_many(self, symbols: list[str]) -> list[StockQuote]:
        """All-or-nothing: the first failing symbol fails the call"""
        return [self.execute(symbol) for symbol in symbols]


class FinancialDataService:
    """Use case: Fundamental metrics for a symbol"""

    def __init__(self, quotes: QuoteProvider):
        self.quotes = quotes

    def execute(self, symbol: str) -> FinancialSnapshot:
        try:
            snapshot = self.quotes.get_financial_snapshot(symbol)
        except Exception as e:
            raise ValueError(f"Failed to fetch financial data for {symbol}: {e}") from e

        if not any(value is not None for value in snapshot.metrics.values()):
            raise InsufficientDataError(f"Financial data not found for symbol: {symbol}")
        return snapshot


class TurnaroundAnalysisService:
    """Use case: Classify a symbol's profitability trajectory"""

    def __init__(self, quotes: QuoteProvider, classifier: Optional[TurnaroundClassifier] = None):
        self.quotes = quotes
        self.classifier = classifier or TurnaroundClassifier()

    def _profile(self, symbol: str) -> Optional[CompanyProfile]:
        # Name and market cap are optional on the result
        try:
            return self.quotes.get_profile(symbol)
        except Exception as e:
            logger.warning(f"No profile for {symbol}: {e}")
            return None

    def _eps_history(self, symbol: str) -> list[EarningsActual]:
        try:
            return self.quotes.get_eps_history(symbol)
        except Exception as e:
            logger.warning(f"No EPS history for {symbol}: {e}")
            return []

    def execute(self, symbol: str) -> TurnaroundResult:
        try:
            # Enrichment lookups only once two usable quarters exist
            current, previous = select_recent_quarters(self.quotes.get_quarterly_figures(symbol))
            return self.classifier.classify_quarters(
                symbol,
                current,
                previous,
                profile=self._profile(symbol),
                eps_history=self._eps_history(symbol)
            )
        except InsufficientDataError as e:
            raise InsufficientDataError(
                f"Failed to analyze profitability turnaround for {symbol}: {e}"
            ) from e
        except Exception as e:
            raise ValueError(f"Failed to analyze profitability turnaround for {symbol}: {e}") from e


class ScreenTurnaroundService:
    """Use case: Find profit turnarounds in a list of symbols"""

    def __init__(self, analysis: TurnaroundAnalysisService):
        self.aggregator = ScreeningAggregator(analysis.execute)

    def execute(
        self,
        symbols: list[str],
        min_market_cap: Optional[float] = None,
        max_market_cap: Optional[float] = None
    ) -> list[TurnaroundResult]:
        criteria = ScreenCriteria(
            symbols=list(symbols),
            min_market_cap=min_market_cap,
            max_market_cap=max_market_cap
        )
        return self.aggregator.screen(criteria)


class EarningsForecastService:
    """Use case: Analyst consensus estimates"""

    def __init__(self, quotes: QuoteProvider):
        self.quotes = quotes

    def execute(self, symbol: str, horizon: Literal["quarterly", "annual"] = "quarterly") -> EarningsForecast:
        try:
            forecast = self.quotes.get_earnings_forecast(symbol, horizon)
        except Exception as e:
            raise ValueError(f"Failed to fetch {horizon} earnings forecast for {symbol}: {e}") from e

        if not forecast.forecasts:
            raise InsufficientDataError(f"No {horizon} earnings forecast available for {symbol}")
        return forecast


class EarningsGuidanceService:
    """Use case: Management guidance from recent 10-K, 10-Q and 8-K filings"""

    def __init__(
        self,
        fetcher: FilingFetcher,
        extractor: Optional[GuidancePatternExtractor] = None,
        filing_limit: int = 5,
        form_types: Optional[list[str]] = None
    ):
        self.fetcher = fetcher
        self.extractor = extractor or GuidancePatternExtractor()
        self.filing_limit = filing_limit
        self.form_types = form_types or GUIDANCE_FORMS

    def _period(self, filing: Filing, text: str) -> str:
        return period_label(filing.form_type, filing.filing_date)

    def _extract(self, text: str, filing: Filing):
        return self.extractor.extract(text, filing.form_type)

    def execute(self, symbol: str) -> GuidanceReport:
        """
        Collect guidance filing by filing.

        A filing that cannot be downloaded or parsed is logged and skipped.
        Raises InsufficientDataError when nothing is found at all.
        """
        try:
            filings = self.fetcher.list_recent(symbol, self.form_types, self.filing_limit)
        except Exception as e:
            raise ValueError(f"Failed to fetch filings for {symbol}: {e}") from e

        if not filings:
            raise InsufficientDataError(f"No {'/'.join(self.form_types)} filings found for {symbol}")

        assembler = GuidanceAssembler()
        failed = 0
        for filing in filings:
            try:
                text = self.fetcher.fetch_text(filing)
                candidates = self._extract(text, filing)
                assembler.add_filing(filing, candidates, period=self._period(filing, text))
            except Exception as e:
                failed += 1
                logger.warning(
                    f"Failed to process {filing.form_type} filing {filing.accession_number} for {symbol}: {e}"
                )
                continue

        items = assembler.items
        if not items:
            raise InsufficientDataError(
                f"No guidance statements found in {len(filings)} recent filings for {symbol}"
            )

        return GuidanceReport(
            symbol=symbol.upper(),
            guidances=items,
            filings_examined=len(filings),
            filings_failed=failed,
            company_name=filings[0].company_name,
            timestamp=_now()
        )


class AnnualReportGuidanceService(EarningsGuidanceService):
    """Use case: Detailed guidance from 10-K annual reports only"""

    def __init__(self, fetcher: FilingFetcher, filing_limit: int = 3):
        super().__init__(fetcher, filing_limit=filing_limit, form_types=["10-K"])
        self.annual_extractor = AnnualReportGuidanceExtractor()

    def _period(self, filing: Filing, text: str) -> str:
        return estimate_fiscal_year(filing.filing_date, text)

    def _extract(self, text: str, filing: Filing):
        return self.annual_extractor.extract(text, filing.form_type)


class TextGuidanceService:
    """Use case: Run guidance extraction over caller-supplied text"""

    def __init__(self, extractor: Optional[GuidancePatternExtractor] = None):
        self.extractor = extractor or GuidancePatternExtractor()

    def execute(
        self,
        text: str,
        filing_type: str,
        filing_date: Optional[str] = None,
        url: Optional[str] = None
    ) -> list[GuidanceItem]:
        filing_date = filing_date or datetime.now(timezone.utc).date().isoformat()
        candidates = self.extractor.extract(text, filing_type)
        if not candidates:
            raise InsufficientDataError(f"No recognizable guidance patterns found in {filing_type} text")

        assembler = GuidanceAssembler()
        assembler.add(candidates, filing_date=filing_date, period=period_label(filing_type, filing_date), url=url)
        return assembler.items


class PdfDocumentService:
    """
    Use case: Text from an investor-relations PDF, remote or local.

    Optionally runs guidance extraction over the extracted text; a document
    without recognizable guidance yields an empty list rather than an error.
    """

    def __init__(
        self,
        source: DocumentSource,
        extractor: PdfTextExtractor,
        guidance: Optional[TextGuidanceService] = None
    ):
        self.source = source
        self.extractor = extractor
        self.guidance = guidance or TextGuidanceService()

    def from_url(
        self,
        symbol: str,
        url: str,
        document_type: str,
        country: str,
        extract_guidance: bool = False
    ) -> PdfDocument:
        started = time.perf_counter()
        try:
            validate_request(document_type, country)
            data = self.source.download(url)
            if not is_pdf(data):
                raise ValueError("Downloaded file is not a PDF")
            return self._document(symbol, url, data, document_type, country, extract_guidance, started)
        except Exception as e:
            raise ValueError(f"Failed to extract IR document for {symbol}: {e}") from e

    def from_file(
        self,
        symbol: str,
        path: str,
        document_type: str,
        country: str,
        extract_guidance: bool = False
    ) -> PdfDocument:
        started = time.perf_counter()
        try:
            validate_request(document_type, country)
            data = self.source.read(path)
            if not is_pdf(data):
                raise ValueError(f"{path} is not a PDF")
            return self._document(symbol, path, data, document_type, country, extract_guidance, started)
        except Exception as e:
            raise ValueError(f"Failed to extract local PDF for {symbol}: {e}") from e

    def _guidance(self, text: str, document_type: str, url: Optional[str]) -> list[GuidanceItem]:
        try:
            return self.guidance.execute(text, filing_type=document_type, url=url)
        except InsufficientDataError:
            return []

    def _document(
        self,
        symbol: str,
        source: str,
        data: bytes,
        document_type: str,
        country: str,
        extract_guidance: bool,
        started: float
    ) -> PdfDocument:
        text, page_count = self.extractor.extract(data)
        url = source if source.startswith(("http://", "https://")) else None
        guidances = self._guidance(text, document_type, url) if extract_guidance else []
        elapsed_ms = int((time.perf_counter() - started) * 1000)

        logger.info(f"{symbol}: {page_count} pages, {len(data)} bytes from {source} in {elapsed_ms}ms")
        return PdfDocument(
            symbol=symbol,
            document_type=document_type,
            country=country,
            source=source,
            text=text,
            page_count=page_count,
            document_size=len(data),
            processing_time_ms=elapsed_ms,
            extraction_date=_now(),
            word_count=word_count(text),
            contains_financial_data=contains_financial_data(text),
            guidances=guidances
        )
