import logging
from typing import Any

from stdio_mcp.mcp.value import Arguments
from stdio_mcp.tools.errors import ToolError
from stdio_mcp.tools.registry import define_tool
from stdio_mcp.tools.schema import Schema

log = logging.getLogger(__name__)


@define_tool(
    "echo",
    "Echo back the input message",
    Schema.object(
        properties={
            "message": Schema.string(description="Message to echo back"),
            "uppercase": Schema.boolean(description="Convert to uppercase"),
        },
        required=["message"],
    ),
)
async def echo(arguments: Arguments, context: Any) -> str:
    message = arguments["message"].string_value if "message" in arguments else None
    if message is None:
        raise ToolError("Missing required argument: message")

    uppercase = arguments["uppercase"].bool_value if "uppercase" in arguments else None
    return message.upper() if uppercase else message


@define_tool(
    "add",
    "Add two numbers",
    Schema.object(
        properties={
            "a": Schema.number(description="First number"),
            "b": Schema.number(description="Second number"),
        },
        required=["a", "b"],
    ),
)
async def add(arguments: Arguments, context: Any) -> str:
    a = arguments["a"].double_value if "a" in arguments else None
    b = arguments["b"].double_value if "b" in arguments else None
    if a is None or b is None:
        raise ToolError("Missing required arguments: a and b")
    return str(a + b)


BASIC_TOOLS = [echo, add]
