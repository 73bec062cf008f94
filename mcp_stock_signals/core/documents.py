"""
Investor-relations PDF documents - validation and text statistics

The PDF parsing itself lives behind the PdfTextExtractor port.
"""
DOCUMENT_TYPES = ("earnings_presentation", "annual_report", "quarterly_report", "10-K", "10-Q")
COUNTRIES = ("US", "JP")

MAX_DOCUMENT_BYTES = 50 * 1024 * 1024

PDF_MAGIC = b"%PDF"

FINANCIAL_KEYWORDS = (
    "revenue", "profit", "earnings", "income", "cash flow", "balance sheet",
    "assets", "liabilities", "equity", "quarterly", "annual", "fiscal",
    "売上", "利益", "収益", "営業利益", "経常利益", "純利益", "売上高",
    "資産", "負債", "純資産", "四半期", "決算", "業績", "キャッシュフロー",
)


def is_pdf(data: bytes) -> bool:
    return data[:4] == PDF_MAGIC


def word_count(text: str) -> int:
    """Whitespace-separated tokens"""
    return len(text.split())


def contains_financial_data(text: str) -> bool:
    """Any English or Japanese financial keyword, case-insensitive"""
    lowered = text.lower()
    return any(keyword in lowered for keyword in FINANCIAL_KEYWORDS)


def validate_request(document_type: str, country: str) -> None:
    if document_type not in DOCUMENT_TYPES:
        raise ValueError(
            f"Unsupported document type: {document_type} (expected one of {', '.join(DOCUMENT_TYPES)})"
        )
    if country not in COUNTRIES:
        raise ValueError(f"Unsupported country: {country} (expected one of {', '.join(COUNTRIES)})")
