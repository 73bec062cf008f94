"""
MCP Tool Definitions

Single source of truth for tool schemas and descriptions.
Used by both stdio and HTTP/SSE servers.
"""

_SYMBOL = {
    "type": "string",
    "description": "Stock symbol (e.g. AAPL, GOOGL, TSLA)"
}

_SYMBOL_ONLY = {
    "type": "object",
    "properties": {"symbol": _SYMBOL},
    "required": ["symbol"]
}

_PDF_PROPERTIES = {
    "document_type": {
        "type": "string",
        "enum": ["earnings_presentation", "annual_report", "quarterly_report", "10-K", "10-Q"],
        "description": "Kind of document"
    },
    "country": {
        "type": "string",
        "enum": ["US", "JP"],
        "description": "Listing country"
    },
    "extract_guidance": {
        "type": "boolean",
        "description": "Also extract guidance statements from the text (default: false)"
    }
}

# Tool schemas for MCP
TOOL_SCHEMAS = {
    "get_stock_price": {
        "name": "get_stock_price",
        "description": """Real-time stock price for a symbol.

get_stock_price("AAPL") → price, change, market cap, volume
""",
        "inputSchema": _SYMBOL_ONLY
    },
    "get_multiple_stock_prices": {
        "name": "get_multiple_stock_prices",
        "description": """Real-time stock prices for several symbols. Fails if any symbol fails.

get_multiple_stock_prices(["AAPL", "MSFT"]) → one quote per symbol
""",
        "inputSchema": {
            "type": "object",
            "properties": {
                "symbols": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "Stock symbols (e.g. [\"AAPL\", \"GOOGL\", \"TSLA\"])"
                }
            },
            "required": ["symbols"]
        }
    },
    "get_financial_data": {
        "name": "get_financial_data",
        "description": """Fundamental metrics: valuation multiples, margins, returns, balance sheet.

get_financial_data("TSLA") → P/E, P/B, ROE, debt/equity, ...
""",
        "inputSchema": _SYMBOL_ONLY
    },
    "analyze_profitability_turnaround": {
        "name": "analyze_profitability_turnaround",
        "description": """Has the company turned from loss to profit (or profit to loss) in the latest quarter?

Compares the two most recent quarters of net income and operating income.
Status: profit_turnaround | loss_turnaround | continued_profit | continued_loss

analyze_profitability_turnaround("PLTR")
""",
        "inputSchema": _SYMBOL_ONLY
    },
    "screen_profit_turnaround_stocks": {
        "name": "screen_profit_turnaround_stocks",
        "description": """Screen symbols for loss-to-profit turnarounds, ranked by quarterly net income change.

screen_profit_turnaround_stocks(["AAPL", "PLTR", "RIVN"], min_market_cap=1e9)
Symbols that fail to load are skipped.
""",
        "inputSchema": {
            "type": "object",
            "properties": {
                "symbols": {
                    "type": "array",
                    "items": {"type": "string"},
                    "minItems": 1,
                    "description": "Stock symbols to screen"
                },
                "min_market_cap": {
                    "type": "number",
                    "description": "Minimum market capitalization, inclusive (optional)"
                },
                "max_market_cap": {
                    "type": "number",
                    "description": "Maximum market capitalization, inclusive (optional)"
                }
            },
            "required": ["symbols"]
        }
    },
    "get_quarterly_earnings_forecast": {
        "name": "get_quarterly_earnings_forecast",
        "description": """Analyst consensus EPS and revenue for the current and next quarter.

get_quarterly_earnings_forecast("NVDA")
""",
        "inputSchema": _SYMBOL_ONLY
    },
    "get_annual_earnings_forecast": {
        "name": "get_annual_earnings_forecast",
        "description": """Analyst consensus EPS and revenue for the current and next fiscal year.

get_annual_earnings_forecast("NVDA")
""",
        "inputSchema": _SYMBOL_ONLY
    },
    "get_earnings_guidance": {
        "name": "get_earnings_guidance",
        "description": """Management guidance extracted from recent 10-K, 10-Q and 8-K filings.

Pattern-based: statements with values/ranges in base units (million/billion scaled).
get_earnings_guidance("AAPL") → up to 20 guidance statements with filing links
""",
        "inputSchema": _SYMBOL_ONLY
    },
    "get_10k_earnings_guidance": {
        "name": "get_10k_earnings_guidance",
        "description": """Detailed guidance from 10-K annual reports (annual outlook, strategy, capex, MD&A).

get_10k_earnings_guidance("MSFT") → guidance labelled by fiscal year
""",
        "inputSchema": _SYMBOL_ONLY
    },
    "extract_guidance_from_text": {
        "name": "extract_guidance_from_text",
        "description": """Extract guidance statements from text you already have (e.g. a pasted filing excerpt).

extract_guidance_from_text("We expect revenue of $1.5 billion ...", "10-Q")
""",
        "inputSchema": {
            "type": "object",
            "properties": {
                "text": {
                    "type": "string",
                    "description": "Filing text to scan"
                },
                "filing_type": {
                    "type": "string",
                    "description": "Form type (e.g. 10-K, 10-Q, 8-K)"
                },
                "filing_date": {
                    "type": "string",
                    "description": "Filing date (YYYY-MM-DD). Defaults to today."
                }
            },
            "required": ["text", "filing_type"]
        }
    },
    "extract_ir_document": {
        "name": "extract_ir_document",
        "description": """Download an investor-relations PDF (earnings presentation, annual or quarterly report) and extract its text.

extract_ir_document("AAPL", "https://investor.example.com/q2.pdf", "earnings_presentation", "US")

Set extract_guidance to also scan the text for management guidance.
""",
        "inputSchema": {
            "type": "object",
            "properties": {
                "symbol": _SYMBOL,
                "document_url": {
                    "type": "string",
                    "description": "URL of the PDF document"
                },
                **_PDF_PROPERTIES
            },
            "required": ["symbol", "document_url", "document_type", "country"]
        }
    },
    "extract_local_pdf": {
        "name": "extract_local_pdf",
        "description": """Extract text from a PDF on the server's filesystem.

extract_local_pdf("7203", "/data/ir/toyota_q2.pdf", "quarterly_report", "JP")
""",
        "inputSchema": {
            "type": "object",
            "properties": {
                "symbol": _SYMBOL,
                "file_path": {
                    "type": "string",
                    "description": "Path to the PDF file"
                },
                **_PDF_PROPERTIES
            },
            "required": ["symbol", "file_path", "document_type", "country"]
        }
    }
}
