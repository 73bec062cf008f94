"""
MCP Tool Handlers

Shared handlers for MCP tools that use the hexagonal core.
"""
import asyncio
from dataclasses import asdict
from typing import Any, Optional

from ...container import Container


class MCPHandlers:
    """Handlers for MCP tools using dependency injection"""

    def __init__(self, container: Container):
        self.container = container

    async def get_stock_price(self, symbol: str) -> dict[str, Any]:
        """Latest quote for one symbol"""
        try:
            quote = await asyncio.to_thread(self.container.stock_quote.execute, symbol)
            return {
                "success": True,
                **asdict(quote)
            }

        except Exception as e:
            return {
                "success": False,
                "error": str(e)
            }

    async def get_multiple_stock_prices(self, symbols: list[str]) -> dict[str, Any]:
        """Latest quotes for several symbols"""
        try:
            if not isinstance(symbols, list):
                raise ValueError("symbols must be an array")

            quotes = await asyncio.to_thread(self.container.stock_quote.execute_many, symbols)
            return {
                "success": True,
                "quotes": [asdict(q) for q in quotes],
                "count": len(quotes)
            }

        except Exception as e:
            return {
                "success": False,
                "error": str(e)
            }

    async def get_financial_data(self, symbol: str) -> dict[str, Any]:
        """Fundamental metrics"""
        try:
            snapshot = await asyncio.to_thread(self.container.financial_data.execute, symbol)
            return {
                "success": True,
                **asdict(snapshot)
            }

        except Exception as e:
            return {
                "success": False,
                "error": str(e)
            }

    async def analyze_profitability_turnaround(self, symbol: str) -> dict[str, Any]:
        """Quarter-over-quarter profitability trajectory"""
        try:
            result = await asyncio.to_thread(self.container.analyze_turnaround.execute, symbol)
            return {
                "success": True,
                **result.to_dict()
            }

        except Exception as e:
            return {
                "success": False,
                "error": str(e)
            }

    async def screen_profit_turnaround_stocks(
        self,
        symbols: list[str],
        min_market_cap: Optional[float] = None,
        max_market_cap: Optional[float] = None
    ) -> dict[str, Any]:
        """Profit turnarounds among symbols, best improvement first"""
        try:
            results = await asyncio.to_thread(
                self.container.screen_turnaround.execute,
                symbols=symbols,
                min_market_cap=min_market_cap,
                max_market_cap=max_market_cap
            )
            return {
                "success": True,
                "results": [r.to_dict() for r in results],
                "count": len(results),
                "screened": len(symbols),
                "min_market_cap": min_market_cap,
                "max_market_cap": max_market_cap
            }

        except Exception as e:
            return {
                "success": False,
                "error": f"Failed to screen turnaround stocks: {str(e)}"
            }

    async def get_earnings_forecast(self, symbol: str, horizon: str) -> dict[str, Any]:
        """Analyst consensus, quarterly or annual"""
        try:
            forecast = await asyncio.to_thread(
                self.container.earnings_forecast.execute,
                symbol=symbol,
                horizon=horizon
            )
            return {
                "success": True,
                **asdict(forecast)
            }

        except Exception as e:
            return {
                "success": False,
                "error": str(e)
            }

    async def get_earnings_guidance(self, symbol: str) -> dict[str, Any]:
        """Guidance from recent 10-K/10-Q/8-K filings"""
        return await self._guidance_report(self.container.earnings_guidance, symbol)

    async def get_10k_earnings_guidance(self, symbol: str) -> dict[str, Any]:
        """Guidance from recent 10-K filings"""
        return await self._guidance_report(self.container.annual_guidance, symbol)

    async def _guidance_report(self, service, symbol: str) -> dict[str, Any]:
        try:
            report = await asyncio.to_thread(service.execute, symbol)
            return {
                "success": True,
                "symbol": report.symbol,
                "company_name": report.company_name,
                "guidances": [g.to_dict() for g in report.guidances],
                "count": len(report.guidances),
                "filings_examined": report.filings_examined,
                "filings_failed": report.filings_failed,
                "timestamp": report.timestamp
            }

        except Exception as e:
            return {
                "success": False,
                "error": f"Failed to get earnings guidance for {symbol}: {str(e)}"
            }

    async def extract_guidance_from_text(
        self,
        text: str,
        filing_type: str,
        filing_date: Optional[str] = None
    ) -> dict[str, Any]:
        """Guidance from caller-supplied text"""
        try:
            items = await asyncio.to_thread(
                self.container.text_guidance.execute,
                text=text,
                filing_type=filing_type,
                filing_date=filing_date
            )
            return {
                "success": True,
                "filing_type": filing_type,
                "guidances": [g.to_dict() for g in items],
                "count": len(items)
            }

        except Exception as e:
            return {
                "success": False,
                "error": f"Failed to extract guidance: {str(e)}"
            }

    async def extract_ir_document(
        self,
        symbol: str,
        document_url: str,
        document_type: str,
        country: str,
        extract_guidance: bool = False
    ) -> dict[str, Any]:
        """Text from an investor-relations PDF at a URL"""
        try:
            document = await asyncio.to_thread(
                self.container.pdf_documents.from_url,
                symbol=symbol,
                url=document_url,
                document_type=document_type,
                country=country,
                extract_guidance=extract_guidance
            )
            return {
                "success": True,
                **document.to_dict()
            }

        except Exception as e:
            return {
                "success": False,
                "error": str(e)
            }

    async def extract_local_pdf(
        self,
        symbol: str,
        file_path: str,
        document_type: str,
        country: str,
        extract_guidance: bool = False
    ) -> dict[str, Any]:
        """Text from a PDF on the server's filesystem"""
        try:
            document = await asyncio.to_thread(
                self.container.pdf_documents.from_file,
                symbol=symbol,
                path=file_path,
                document_type=document_type,
                country=country,
                extract_guidance=extract_guidance
            )
            return {
                "success": True,
                **document.to_dict()
            }

        except Exception as e:
            return {
                "success": False,
                "error": str(e)
            }
