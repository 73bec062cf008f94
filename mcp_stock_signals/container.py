"""
Dependency Injection Container

Wires together the hexagonal architecture by creating and injecting dependencies.
"""
from typing import Optional

from .adapters import YahooQuoteAdapter, EdgarAdapter, HttpDocumentSource, PyMuPdfExtractor
from .config import get_guidance_filing_limit, get_user_agent
from .core import (
    DocumentSource,
    FilingFetcher,
    PdfTextExtractor,
    QuoteProvider,
    StockQuoteService,
    FinancialDataService,
    TurnaroundAnalysisService,
    ScreenTurnaroundService,
    EarningsForecastService,
    EarningsGuidanceService,
    AnnualReportGuidanceService,
    TextGuidanceService,
    PdfDocumentService,
)


class Container:
    """Dependency injection container for the application"""

    def __init__(
        self,
        user_agent: Optional[str] = None,
        quotes: Optional[QuoteProvider] = None,
        fetcher: Optional[FilingFetcher] = None,
        guidance_filing_limit: Optional[int] = None,
        documents: Optional[DocumentSource] = None,
        pdf: Optional[PdfTextExtractor] = None
    ):
        # Adapters (infrastructure)
        self.quotes = quotes or YahooQuoteAdapter()
        self.fetcher = fetcher or EdgarAdapter(user_agent or get_user_agent())
        self.documents = documents or HttpDocumentSource()
        self.pdf = pdf or PyMuPdfExtractor()

        if guidance_filing_limit is None:
            guidance_filing_limit = get_guidance_filing_limit()

        # Services (use cases)
        self.stock_quote = StockQuoteService(quotes=self.quotes)
        self.financial_data = FinancialDataService(quotes=self.quotes)

        self.analyze_turnaround = TurnaroundAnalysisService(quotes=self.quotes)
        self.screen_turnaround = ScreenTurnaroundService(analysis=self.analyze_turnaround)

        self.earnings_forecast = EarningsForecastService(quotes=self.quotes)

        self.earnings_guidance = EarningsGuidanceService(
            fetcher=self.fetcher,
            filing_limit=guidance_filing_limit
        )
        self.annual_guidance = AnnualReportGuidanceService(fetcher=self.fetcher)
        self.text_guidance = TextGuidanceService()
        self.pdf_documents = PdfDocumentService(
            source=self.documents,
            extractor=self.pdf,
            guidance=self.text_guidance
        )
