"""
stock-signals MCP Server

MCP delivery layer - wraps the hexagonal handlers as FastMCP tools.
Separation of concerns: this file only handles MCP protocol.
"""
import argparse
import logging
from typing import Optional

from mcp.server.fastmcp import FastMCP

from .adapters.mcp import MCPHandlers
from .config import get_host, get_port
from .container import Container

# Suppress INFO logs
logging.getLogger("edgar").setLevel(logging.WARNING)
logging.getLogger("yfinance").setLevel(logging.WARNING)

# Initialize MCP server with HTTP config
mcp = FastMCP("stock-signals", host=get_host(), port=get_port())

_handlers: Optional[MCPHandlers] = None


def get_handlers() -> MCPHandlers:
    """Build the container on first tool call"""
    global _handlers
    if _handlers is None:
        _handlers = MCPHandlers(Container())
    return _handlers


@mcp.tool()
async def get_stock_price(symbol: str) -> dict:
    """
    Real-time stock price for a symbol.

    Args:
        symbol: Stock symbol (e.g., "AAPL", "GOOGL", "TSLA")

    Returns:
        Price, change, change percent, market cap and volume
    """
    return await get_handlers().get_stock_price(symbol=symbol)


@mcp.tool()
async def get_multiple_stock_prices(symbols: list[str]) -> dict:
    """
    Real-time stock prices for several symbols. Fails if any symbol fails.

    Args:
        symbols: Stock symbols (e.g., ["AAPL", "GOOGL", "TSLA"])
    """
    return await get_handlers().get_multiple_stock_prices(symbols=symbols)


@mcp.tool()
async def get_financial_data(symbol: str) -> dict:
    """
    Fundamental metrics: valuation multiples, margins, returns, balance sheet.

    Args:
        symbol: Stock symbol (e.g., "TSLA")
    """
    return await get_handlers().get_financial_data(symbol=symbol)


@mcp.tool()
async def analyze_profitability_turnaround(symbol: str) -> dict:
    """
    Has the company turned from loss to profit (or profit to loss) in the latest quarter?

    Compares the two most recent quarters of net income and operating income.

    Args:
        symbol: Stock symbol (e.g., "PLTR")

    Returns:
        status: profit_turnaround | loss_turnaround | continued_profit | continued_loss
        plus both quarters' figures and the quarterly net income change (%)
    """
    return await get_handlers().analyze_profitability_turnaround(symbol=symbol)


@mcp.tool()
async def screen_profit_turnaround_stocks(
    symbols: list[str],
    min_market_cap: Optional[float] = None,
    max_market_cap: Optional[float] = None
) -> dict:
    """
    Screen symbols for loss-to-profit turnarounds, ranked by quarterly net income change.

    Symbols that fail to load are skipped, not reported.

    Args:
        symbols: Stock symbols to screen
        min_market_cap: Minimum market capitalization, inclusive (optional)
        max_market_cap: Maximum market capitalization, inclusive (optional)

    Example:
        screen_profit_turnaround_stocks(["AAPL", "PLTR", "RIVN"], min_market_cap=1e9)
    """
    return await get_handlers().screen_profit_turnaround_stocks(
        symbols=symbols,
        min_market_cap=min_market_cap,
        max_market_cap=max_market_cap
    )


@mcp.tool()
async def get_quarterly_earnings_forecast(symbol: str) -> dict:
    """
    Analyst consensus EPS and revenue for the current and next quarter.

    Args:
        symbol: Stock symbol (e.g., "NVDA")
    """
    return await get_handlers().get_earnings_forecast(symbol=symbol, horizon="quarterly")


@mcp.tool()
async def get_annual_earnings_forecast(symbol: str) -> dict:
    """
    Analyst consensus EPS and revenue for the current and next fiscal year.

    Args:
        symbol: Stock symbol (e.g., "NVDA")
    """
    return await get_handlers().get_earnings_forecast(symbol=symbol, horizon="annual")


@mcp.tool()
async def get_earnings_guidance(symbol: str) -> dict:
    """
    Management guidance extracted from recent 10-K, 10-Q and 8-K filings.

    Values and ranges are reported in base units (million/billion scaled,
    percentages as-is).

    Args:
        symbol: Stock symbol (e.g., "AAPL")

    Returns:
        Up to 20 guidance statements with category, period, value/range and filing link
    """
    return await get_handlers().get_earnings_guidance(symbol=symbol)


@mcp.tool()
async def get_10k_earnings_guidance(symbol: str) -> dict:
    """
    Detailed guidance from 10-K annual reports (annual outlook, strategy, capex, MD&A).

    Args:
        symbol: Stock symbol (e.g., "MSFT")
    """
    return await get_handlers().get_10k_earnings_guidance(symbol=symbol)


@mcp.tool()
async def extract_guidance_from_text(
    text: str,
    filing_type: str,
    filing_date: Optional[str] = None
) -> dict:
    """
    Extract guidance statements from text you already have.

    Args:
        text: Filing text to scan
        filing_type: Form type ("10-K", "10-Q", "8-K", etc.)
        filing_date: Optional filing date (YYYY-MM-DD). Defaults to today.

    Example:
        extract_guidance_from_text("We expect revenue of $1.5 billion for the year.", "10-Q")
    """
    return await get_handlers().extract_guidance_from_text(
        text=text,
        filing_type=filing_type,
        filing_date=filing_date
    )


@mcp.tool()
async def extract_ir_document(
    symbol: str,
    document_url: str,
    document_type: str,
    country: str,
    extract_guidance: bool = False
) -> dict:
    """
    Download an investor-relations PDF and extract its text.

    Args:
        symbol: Stock symbol (e.g., "AAPL")
        document_url: URL of the PDF
        document_type: earnings_presentation | annual_report | quarterly_report | 10-K | 10-Q
        country: "US" or "JP"
        extract_guidance: Also scan the text for guidance statements

    Returns:
        Extracted text, page count, size, word count and whether financial terms appear
    """
    return await get_handlers().extract_ir_document(
        symbol=symbol,
        document_url=document_url,
        document_type=document_type,
        country=country,
        extract_guidance=extract_guidance
    )


@mcp.tool()
async def extract_local_pdf(
    symbol: str,
    file_path: str,
    document_type: str,
    country: str,
    extract_guidance: bool = False
) -> dict:
    """
    Extract text from a PDF on the server's filesystem.

    Args:
        symbol: Stock symbol the document belongs to
        file_path: Path to the PDF
        document_type: earnings_presentation | annual_report | quarterly_report | 10-K | 10-Q
        country: "US" or "JP"
        extract_guidance: Also scan the text for guidance statements
    """
    return await get_handlers().extract_local_pdf(
        symbol=symbol,
        file_path=file_path,
        document_type=document_type,
        country=country,
        extract_guidance=extract_guidance
    )


def main():
    """Main entry point for the MCP server."""
    parser = argparse.ArgumentParser(
        description="stock-signals: quotes, turnaround screening and SEC guidance over MCP."
    )
    parser.add_argument(
        "--transport",
        default="stdio",
        choices=["stdio", "streamable-http"],
        help="Transport method (default: stdio)"
    )
    parser.add_argument(
        "--host",
        default=None,
        help="Host to bind to for HTTP transport (default: $HOST or 127.0.0.1)"
    )
    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port to bind to for HTTP transport (default: $PORT or 5002)"
    )
    args = parser.parse_args()

    if args.host:
        mcp.settings.host = args.host
    if args.port:
        mcp.settings.port = args.port

    # Run the server
    if args.transport == "streamable-http":
        print(f"Starting stock-signals on http://{mcp.settings.host}:{mcp.settings.port}")
        mcp.run(transport="streamable-http")
    else:
        mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
