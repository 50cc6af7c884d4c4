"""Model Context Protocol tool server over newline-delimited JSON-RPC on stdio."""

from stdio_mcp.mcp.protocol import (
    JSONRPCError,
    JSONRPCRequest,
    JSONRPCResponse,
    ServerCapabilities,
    ServerInfo,
)
from stdio_mcp.mcp.server import MCPServer
from stdio_mcp.mcp.value import JSONValue, ValueKind
from stdio_mcp.tools.errors import ToolError
from stdio_mcp.tools.registry import FunctionTool, Tool, ToolProvider, ToolRegistry, define_tool
from stdio_mcp.tools.schema import Schema
from stdio_mcp.tools.validator import SchemaValidator

__all__ = [
    "FunctionTool",
    "JSONRPCError",
    "JSONRPCRequest",
    "JSONRPCResponse",
    "JSONValue",
    "MCPServer",
    "Schema",
    "SchemaValidator",
    "ServerCapabilities",
    "ServerInfo",
    "Tool",
    "ToolError",
    "ToolProvider",
    "ToolRegistry",
    "ValueKind",
    "define_tool",
]
