#!/usr/bin/env python3
"""
CLI for stock-signals MCP - test tools without MCP restart

Usage:
  ./cli list-tools                        # Show MCP tool definitions
  ./cli quote AAPL MSFT                   # Latest quotes
  ./cli financials TSLA                   # Fundamental metrics
  ./cli turnaround PLTR                   # Loss/profit trajectory for one symbol
  ./cli screen PLTR RIVN SNAP --min-cap 1e9
  ./cli forecast NVDA                     # Quarterly analyst consensus
  ./cli forecast NVDA --annual            # Annual analyst consensus
  ./cli guidance AAPL                     # Guidance from recent 10-K/10-Q/8-K
  ./cli guidance-10k MSFT                 # Guidance from 10-K annual reports
  ./cli extract excerpt.txt 10-Q          # Guidance from a local text file ("-" for stdin)
  ./cli pdf AAPL https://example.com/q2.pdf earnings_presentation --guidance
  ./cli pdf 7203 q2.pdf quarterly_report --country JP   # Local file

Fast iteration: Uses hexagonal core directly (no MCP layer)
"""

import argparse
import asyncio
import json
import sys

from .container import Container
from .core.documents import COUNTRIES, DOCUMENT_TYPES
from .adapters.mcp import TOOL_SCHEMAS, MCPHandlers
from .formatters import (
    format_stock_price,
    format_multiple_stock_prices,
    format_financial_data,
    format_turnaround,
    format_screen,
    format_earnings_forecast,
    format_guidance,
    format_pdf_document,
)


async def list_tools_command() -> int:
    """Show MCP tool definitions"""
    print("=" * 80)
    print("MCP TOOL DEFINITIONS")
    print("=" * 80)
    print()

    for tool_schema in TOOL_SCHEMAS.values():
        print(f"Tool: {tool_schema['name']}")
        print(f"Claude sees: mcp__stock-signals__{tool_schema['name']}")
        print()
        print("Description:")
        print(tool_schema['description'])
        print()
        print("Input Schema:")
        print(json.dumps(tool_schema['inputSchema'], indent=2))
        print()
        print("-" * 80)
        print()

    return 0


async def run_tool(call, formatter, handlers: MCPHandlers | None = None) -> int:
    """Call one handler, print its BBG Lite rendering, exit 1 on failure"""
    try:
        handlers = handlers or MCPHandlers(Container())
        result = await call(handlers)

        print(formatter(result))

        if not result["success"]:
            return 1

        return 0
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        import traceback
        traceback.print_exc()
        return 1


def read_text(path: str) -> str:
    """Read filing text from a file, or stdin when path is '-'"""
    if path == "-":
        return sys.stdin.read()
    with open(path, encoding="utf-8") as f:
        return f.read()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="stock-signals CLI - Test MCP tools without server restart"
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # list-tools command
    subparsers.add_parser("list-tools", help="Show MCP tool definitions")

    # quote command
    quote_parser = subparsers.add_parser("quote", help="Latest stock quote(s)")
    quote_parser.add_argument("symbols", nargs="+", help="Stock symbol(s) (e.g., AAPL MSFT)")

    # financials command
    financials_parser = subparsers.add_parser("financials", help="Fundamental metrics")
    financials_parser.add_argument("symbol", help="Stock symbol (e.g., TSLA)")

    # turnaround command
    turnaround_parser = subparsers.add_parser("turnaround", help="Analyze profitability turnaround")
    turnaround_parser.add_argument("symbol", help="Stock symbol (e.g., PLTR)")

    # screen command
    screen_parser = subparsers.add_parser("screen", help="Screen symbols for profit turnarounds")
    screen_parser.add_argument("symbols", nargs="+", help="Stock symbols to screen")
    screen_parser.add_argument("--min-cap", type=float, default=None, help="Minimum market cap (inclusive)")
    screen_parser.add_argument("--max-cap", type=float, default=None, help="Maximum market cap (inclusive)")

    # forecast command
    forecast_parser = subparsers.add_parser("forecast", help="Analyst earnings forecast")
    forecast_parser.add_argument("symbol", help="Stock symbol (e.g., NVDA)")
    forecast_parser.add_argument("--annual", action="store_true", help="Annual instead of quarterly")

    # guidance command
    guidance_parser = subparsers.add_parser("guidance", help="Guidance from recent 10-K/10-Q/8-K")
    guidance_parser.add_argument("symbol", help="Stock symbol (e.g., AAPL)")

    # guidance-10k command
    guidance_10k_parser = subparsers.add_parser("guidance-10k", help="Guidance from 10-K annual reports")
    guidance_10k_parser.add_argument("symbol", help="Stock symbol (e.g., MSFT)")

    # extract command
    extract_parser = subparsers.add_parser("extract", help="Extract guidance from a text file")
    extract_parser.add_argument("path", help="Text file path, or - for stdin")
    extract_parser.add_argument("filing_type", help="Form type (e.g., 10-Q)")
    extract_parser.add_argument("--date", help="Filing date (YYYY-MM-DD), defaults to today")

    # pdf command
    pdf_parser = subparsers.add_parser("pdf", help="Extract text from an IR PDF (URL or local path)")
    pdf_parser.add_argument("symbol", help="Stock symbol (e.g., AAPL)")
    pdf_parser.add_argument("source", help="PDF URL or local file path")
    pdf_parser.add_argument("document_type", choices=DOCUMENT_TYPES, help="Kind of document")
    pdf_parser.add_argument("--country", choices=COUNTRIES, default="US", help="Listing country (default: US)")
    pdf_parser.add_argument("--guidance", action="store_true", help="Also extract guidance statements")

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    # Run command
    if args.command == "list-tools":
        return asyncio.run(list_tools_command())
    elif args.command == "quote":
        if len(args.symbols) == 1:
            return asyncio.run(run_tool(
                lambda h: h.get_stock_price(symbol=args.symbols[0]),
                format_stock_price
            ))
        return asyncio.run(run_tool(
            lambda h: h.get_multiple_stock_prices(symbols=args.symbols),
            format_multiple_stock_prices
        ))
    elif args.command == "financials":
        return asyncio.run(run_tool(
            lambda h: h.get_financial_data(symbol=args.symbol),
            format_financial_data
        ))
    elif args.command == "turnaround":
        return asyncio.run(run_tool(
            lambda h: h.analyze_profitability_turnaround(symbol=args.symbol),
            format_turnaround
        ))
    elif args.command == "screen":
        return asyncio.run(run_tool(
            lambda h: h.screen_profit_turnaround_stocks(
                symbols=args.symbols,
                min_market_cap=args.min_cap,
                max_market_cap=args.max_cap
            ),
            format_screen
        ))
    elif args.command == "forecast":
        horizon = "annual" if args.annual else "quarterly"
        return asyncio.run(run_tool(
            lambda h: h.get_earnings_forecast(symbol=args.symbol, horizon=horizon),
            format_earnings_forecast
        ))
    elif args.command == "guidance":
        return asyncio.run(run_tool(
            lambda h: h.get_earnings_guidance(symbol=args.symbol),
            format_guidance
        ))
    elif args.command == "guidance-10k":
        return asyncio.run(run_tool(
            lambda h: h.get_10k_earnings_guidance(symbol=args.symbol),
            format_guidance
        ))
    elif args.command == "extract":
        try:
            text = read_text(args.path)
        except OSError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        return asyncio.run(run_tool(
            lambda h: h.extract_guidance_from_text(
                text=text,
                filing_type=args.filing_type,
                filing_date=args.date
            ),
            format_guidance
        ))
    elif args.command == "pdf":
        if args.source.startswith(("http://", "https://")):
            call = lambda h: h.extract_ir_document(
                symbol=args.symbol,
                document_url=args.source,
                document_type=args.document_type,
                country=args.country,
                extract_guidance=args.guidance
            )
        else:
            call = lambda h: h.extract_local_pdf(
                symbol=args.symbol,
                file_path=args.source,
                document_type=args.document_type,
                country=args.country,
                extract_guidance=args.guidance
            )
        return asyncio.run(run_tool(call, format_pdf_document))
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
