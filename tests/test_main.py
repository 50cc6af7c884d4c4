import asyncio
import json

from stdio_mcp.__main__ import build_server
from stdio_mcp.config.settings import settings


def test_build_server_registers_bundled_tools():
    server = build_server()

    assert server.registry.tool_names == ["add", "echo"]
    assert server.info.name == settings.server.SERVER_NAME
    assert server.max_line_bytes == settings.server.MAX_LINE_BYTES


def test_built_server_answers_tool_calls():
    server = build_server()
    line = json.dumps(
        {
            "jsonrpc": "2.0",
            "id": 7,
            "method": "tools/call",
            "params": {"name": "echo", "arguments": {"message": "ping", "uppercase": True}},
        }
    )

    response = json.loads(asyncio.run(server.handle_line(line)))
    assert response == {
        "jsonrpc": "2.0",
        "id": 7,
        "result": {"content": [{"type": "text", "text": "PING"}]},
    }
