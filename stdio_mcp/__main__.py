"""Entry point serving the bundled ``echo`` and ``add`` tools over stdio."""

import asyncio
import logging

from stdio_mcp.config.settings import settings
from stdio_mcp.mcp.protocol import ServerCapabilities, ServerInfo
from stdio_mcp.mcp.server import MCPServer
from stdio_mcp.tools.implementations.basic import BASIC_TOOLS
from stdio_mcp.utils.logging import setup_logging

log = logging.getLogger(__name__)


def build_server() -> MCPServer:
    info = ServerInfo(
        name=settings.server.SERVER_NAME,
        version=settings.server.SERVER_VERSION,
        capabilities=ServerCapabilities(
            resources=settings.server.ENABLE_RESOURCES,
            prompts=settings.server.ENABLE_PROMPTS,
        ),
    )
    server = MCPServer(
        info,
        validate_arguments=settings.server.VALIDATE_TOOL_ARGUMENTS,
        max_line_bytes=settings.server.MAX_LINE_BYTES,
    )
    server.register_all(BASIC_TOOLS)
    return server


def main() -> None:
    setup_logging()
    if not settings.server.VALIDATE_TOOL_ARGUMENTS:
        log.warning("Tool argument validation is disabled (VALIDATE_TOOL_ARGUMENTS=false).")
    try:
        asyncio.run(build_server().run())
    except KeyboardInterrupt:
        log.info("Interrupted, exiting.")


if __name__ == "__main__":
    main()
