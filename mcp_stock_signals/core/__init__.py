"""
Core - Domain logic and ports

This package contains:
- domain.py: Pure domain models
- errors.py: Core error types
- ports.py: Port interfaces (abstractions for external dependencies)
- numeric.py: Guided value and range parsing
- guidance.py: Guidance statement extraction and assembly
- turnaround.py: Profitability turnaround classification
- screening.py: Multi-symbol turnaround screening
- documents.py: IR PDF validation and text statistics
- services.py: Application services (use cases)
"""
from .domain import (
    CompanyProfile,
    EarningsForecast,
    Filing,
    FinancialSnapshot,
    ForecastItem,
    GuidanceCandidate,
    GuidanceItem,
    GuidanceReport,
    EarningsActual,
    PdfDocument,
    QuarterlyFigure,
    ScreenCriteria,
    StockQuote,
    TurnaroundResult,
    TurnaroundStatus,
    ValueRange,
)
from .errors import InsufficientDataError
from .ports import QuoteProvider, FilingFetcher, DocumentSource, PdfTextExtractor
from .services import (
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

__all__ = [
    # Domain models
    "CompanyProfile",
    "EarningsForecast",
    "Filing",
    "FinancialSnapshot",
    "ForecastItem",
    "GuidanceCandidate",
    "GuidanceItem",
    "GuidanceReport",
    "EarningsActual",
    "PdfDocument",
    "QuarterlyFigure",
    "ScreenCriteria",
    "StockQuote",
    "TurnaroundResult",
    "TurnaroundStatus",
    "ValueRange",
    # Errors
    "InsufficientDataError",
    # Ports
    "QuoteProvider",
    "FilingFetcher",
    "DocumentSource",
    "PdfTextExtractor",
    # Services
    "StockQuoteService",
    "FinancialDataService",
    "TurnaroundAnalysisService",
    "ScreenTurnaroundService",
    "EarningsForecastService",
    "EarningsGuidanceService",
    "AnnualReportGuidanceService",
    "TextGuidanceService",
    "PdfDocumentService",
]
