"""
MCP Adapters

Tool schemas and async handlers shared by the stdio, HTTP and CLI front ends.
"""
from .tool_definitions import TOOL_SCHEMAS
from .handlers import MCPHandlers

__all__ = ["TOOL_SCHEMAS", "MCPHandlers"]
