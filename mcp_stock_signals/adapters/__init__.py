"""
Adapters - External implementations of ports

This package contains implementations of the core ports:
- yahoo.py: yfinance quote provider
- edgar.py: EDGAR/edgartools filing fetcher
- pdf.py: httpx document source and PyMuPDF text extractor
"""
from .yahoo import YahooQuoteAdapter
from .edgar import EdgarAdapter
from .pdf import HttpDocumentSource, PyMuPdfExtractor

__all__ = [
    "YahooQuoteAdapter",
    "EdgarAdapter",
    "HttpDocumentSource",
    "PyMuPdfExtractor",
]
