#!/usr/bin/env python3
"""
MCP HTTP/SSE Server - Hexagonal Architecture

Clean HTTP/SSE server using dependency injection and hexagonal architecture.

Run with: poetry run uvicorn mcp_stock_signals.server_http:app --host 127.0.0.1 --port 5002

Configuration:
- PORT: Server port (default: 5002)
- HOST: Bind address (default: 127.0.0.1)
- USER_AGENT: SEC EDGAR identity
"""

import json
import logging
import signal
import sys
from datetime import datetime, timezone
from typing import Any

from mcp.server import Server
from mcp.server.sse import SseServerTransport
from mcp.types import TextContent, Tool
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.routing import Mount, Route

from .config import get_host, get_port
from .container import Container
from .adapters.mcp import TOOL_SCHEMAS, MCPHandlers
from .formatters import FORMATTERS

# Configure logging with millisecond precision
logging.basicConfig(
    level=logging.INFO,
    format="[%(asctime)s] [%(levelname)s] %(message)s",
    datefmt="%Y/%m/%d %H:%M:%S"
)


class MillisecondFormatter(logging.Formatter):
    """Custom formatter with milliseconds as :XXXX format"""
    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:  # noqa: N802
        """Override formatTime to include milliseconds with : separator"""
        ct = datetime.fromtimestamp(record.created, tz=timezone.utc)
        if datefmt:
            s = ct.strftime("%Y/%m/%d %H:%M:%S")
            ms = int((record.created % 1) * 10000)
            return f"{s}:{ms:04d}"
        return super().formatTime(record, datefmt)


# Apply custom formatter to root logger
for handler in logging.root.handlers:
    handler.setFormatter(MillisecondFormatter(
        "[%(asctime)s] [%(levelname)s] %(message)s",
        datefmt="%Y/%m/%d %H:%M:%S"
    ))

logger = logging.getLogger(__name__)

# Initialize dependency injection container
container = Container()

# Initialize MCP handlers
handlers = MCPHandlers(container)

# MCP Server instance
mcp_server = Server("stock-signals-mcp")

# SSE transport for multi-client support
sse_transport = SseServerTransport("/messages/")


@mcp_server.list_tools()  # type: ignore[misc,no-untyped-call]
async def list_tools() -> list[Tool]:
    """List available MCP tools"""
    return [Tool(**schema) for schema in TOOL_SCHEMAS.values()]


@mcp_server.call_tool()  # type: ignore[misc,no-untyped-call]
async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
    """Handle tool calls"""
    logger.info(f"call_tool: {name} args={_summarize(arguments)}")

    try:
        result = await dispatch_tool(handlers, name, arguments)
    except Exception as e:
        logger.error(f"call_tool: {name} FAILED: {e}")
        raise

    formatter = FORMATTERS.get(name)
    if formatter:
        formatted_text = formatter(result)
    else:
        formatted_text = json.dumps(result, indent=2)

    logger.info(f"call_tool: {name} returning {len(formatted_text)} chars")
    return [TextContent(type="text", text=formatted_text)]


def _summarize(arguments: dict[str, Any]) -> dict[str, Any]:
    # Filing text can be huge, log its size only
    return {
        key: (f"<{len(value)} chars>" if key == "text" and isinstance(value, str) else value)
        for key, value in arguments.items()
    }


async def dispatch_tool(handlers: MCPHandlers, name: str, arguments: dict[str, Any]) -> Any:
    """Dispatch tool call to appropriate handler"""
    if name == "get_stock_price":
        return await handlers.get_stock_price(symbol=arguments["symbol"])

    elif name == "get_multiple_stock_prices":
        return await handlers.get_multiple_stock_prices(symbols=arguments["symbols"])

    elif name == "get_financial_data":
        return await handlers.get_financial_data(symbol=arguments["symbol"])

    elif name == "analyze_profitability_turnaround":
        return await handlers.analyze_profitability_turnaround(symbol=arguments["symbol"])

    elif name == "screen_profit_turnaround_stocks":
        return await handlers.screen_profit_turnaround_stocks(
            symbols=arguments["symbols"],
            min_market_cap=arguments.get("min_market_cap"),
            max_market_cap=arguments.get("max_market_cap")
        )

    elif name == "get_quarterly_earnings_forecast":
        return await handlers.get_earnings_forecast(symbol=arguments["symbol"], horizon="quarterly")

    elif name == "get_annual_earnings_forecast":
        return await handlers.get_earnings_forecast(symbol=arguments["symbol"], horizon="annual")

    elif name == "get_earnings_guidance":
        return await handlers.get_earnings_guidance(symbol=arguments["symbol"])

    elif name == "get_10k_earnings_guidance":
        return await handlers.get_10k_earnings_guidance(symbol=arguments["symbol"])

    elif name == "extract_guidance_from_text":
        return await handlers.extract_guidance_from_text(
            text=arguments["text"],
            filing_type=arguments["filing_type"],
            filing_date=arguments.get("filing_date")
        )

    elif name == "extract_ir_document":
        return await handlers.extract_ir_document(
            symbol=arguments["symbol"],
            document_url=arguments["document_url"],
            document_type=arguments["document_type"],
            country=arguments["country"],
            extract_guidance=arguments.get("extract_guidance", False)
        )

    elif name == "extract_local_pdf":
        return await handlers.extract_local_pdf(
            symbol=arguments["symbol"],
            file_path=arguments["file_path"],
            document_type=arguments["document_type"],
            country=arguments["country"],
            extract_guidance=arguments.get("extract_guidance", False)
        )

    else:
        raise ValueError(f"Unknown tool: {name}")


# HTTP routes
async def handle_ping(request: Request) -> Response:
    """Health check endpoint"""
    return JSONResponse({"status": "ok"})


async def handle_sse(request: Request) -> Response:
    """SSE endpoint for MCP communication"""
    client_addr = request.client.host if request.client else "unknown"
    logger.info(f"SSE connect from {client_addr}")
    async with sse_transport.connect_sse(
        request.scope, request.receive, request._send
    ) as streams:
        logger.info(f"SSE session started for {client_addr}")
        await mcp_server.run(
            streams[0], streams[1], mcp_server.create_initialization_options()
        )
        logger.info(f"SSE disconnect from {client_addr}")
    return Response()


routes = [
    Route("/ping", handle_ping),
    Route("/sse", handle_sse),
    Mount("/messages/", app=sse_transport.handle_post_message),
]

app = Starlette(debug=False, routes=routes)


# Graceful shutdown on SIGTERM
def handle_sigterm(signum, frame):
    logger.info("Received SIGTERM, shutting down gracefully...")
    sys.exit(0)


def main():
    """Run the HTTP/SSE server under uvicorn"""
    import uvicorn

    signal.signal(signal.SIGTERM, handle_sigterm)
    port = get_port()
    host = get_host()
    logger.info(f"Starting MCP HTTP server on {host}:{port}")
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    main()
