import asyncio

import pytest

from stdio_mcp.mcp.value import JSONValue
from stdio_mcp.tools.errors import ToolError
from stdio_mcp.tools.implementations.basic import BASIC_TOOLS, add, echo


def _execute(tool, **arguments):
    values = {key: JSONValue.from_python(value) for key, value in arguments.items()}
    return asyncio.run(tool.execute(values, None))


def test_bundled_tools():
    assert [tool.name for tool in BASIC_TOOLS] == ["echo", "add"]


def test_echo_returns_message():
    assert _execute(echo, message="Hello, World!") == "Hello, World!"


def test_echo_uppercase():
    assert _execute(echo, message="hello", uppercase=True) == "HELLO"
    assert _execute(echo, message="hello", uppercase=False) == "hello"


def test_echo_without_message_fails():
    with pytest.raises(ToolError):
        _execute(echo)


def test_add_numbers():
    assert _execute(add, a=5, b=3) == "8.0"
    assert _execute(add, a=2.5, b=0.25) == "2.75"


def test_add_requires_both_operands():
    with pytest.raises(ToolError):
        _execute(add, a=1)
