"""stock-signals: stock quotes, profitability turnaround screening and SEC guidance extraction over MCP."""
__version__ = "0.1.0"
