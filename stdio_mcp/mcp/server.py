import logging
from enum import Enum
from typing import Generic, Iterable, Optional, TypeVar, Union

from stdio_mcp.mcp.protocol import (
    INTERNAL_ERROR,
    PARSE_ERROR,
    JSONRPCDecodeError,
    JSONRPCResponse,
    ServerInfo,
    decode_request,
)
from stdio_mcp.mcp.router import NotificationHandler, RequestRouter, create_error_response
from stdio_mcp.mcp.transport import (
    DEFAULT_MAX_LINE_BYTES,
    LineTooLongError,
    ServerTransport,
    StdioTransport,
)
from stdio_mcp.tools.registry import Tool, ToolProvider, ToolRegistry

log = logging.getLogger(__name__)

ContextT = TypeVar("ContextT")


class ServerState(str, Enum):
    IDLE = "idle"
    PROCESSING = "processing"


class MCPServer(Generic[ContextT]):
    """
    MCP server speaking newline-delimited JSON-RPC 2.0 over stdio.

    Lines are handled strictly one at a time: each line is decoded, routed and
    answered before the next one is read, so at most one request is in flight.
    The context is shared by every tool invocation.
    """

    def __init__(
        self,
        info: ServerInfo,
        context: ContextT = None,
        *,
        validate_arguments: bool = True,
        max_line_bytes: int = DEFAULT_MAX_LINE_BYTES,
    ):
        self.info = info
        self.context = context
        self.max_line_bytes = max_line_bytes
        self.registry: ToolRegistry[ContextT] = ToolRegistry()
        self.router: RequestRouter[ContextT] = RequestRouter(
            info, self.registry, context, validate_arguments=validate_arguments
        )
        self.state = ServerState.IDLE

    # --- Registration ---

    def register(self, tool: Tool[ContextT]) -> None:
        self.registry.register(tool)

    def register_all(self, tools: Iterable[Tool[ContextT]]) -> None:
        self.registry.register_all(tools)

    def register_provider(self, provider: ToolProvider[ContextT]) -> None:
        self.registry.register_provider(provider)

    def on_notification(self, method: str, handler: NotificationHandler) -> None:
        """Installs a handler for a notification method; it receives the params (or None)."""
        self.router.add_notification_handler(method, handler)

    # --- Line processing ---

    async def handle_line(self, line: Union[str, bytes]) -> Optional[str]:
        """
        Processes one transport line and returns the response line, or ``None``
        when nothing must be sent (blank lines and notifications).
        """
        if not line.strip():
            return None

        self.state = ServerState.PROCESSING
        try:
            try:
                request = decode_request(line)
            except JSONRPCDecodeError as exc:
                log.warning(f"Rejecting undecodable line: {exc.message}")
                return create_error_response(PARSE_ERROR, exc.message, None).encode()

            if request.is_notification:
                await self.router.handle_notification(request)
                return None

            response = await self.router.handle_request(request)
            return self._encode(response)
        finally:
            self.state = ServerState.IDLE

    def _encode(self, response: JSONRPCResponse) -> str:
        try:
            return response.encode()
        except (ValueError, RecursionError) as exc:
            # e.g. a non-finite number in the result
            log.error(f"Could not encode response for id {response.id!r}: {exc}")
            return create_error_response(INTERNAL_ERROR, "Encoding error", response.id).encode()

    # --- Serving ---

    async def serve(self, transport: ServerTransport) -> None:
        """Runs the read loop on ``transport`` until its input is exhausted."""
        log.info(f"{self.info.name} {self.info.version} serving {len(self.registry.tool_names)} tools")
        while True:
            try:
                line = await transport.receive()
            except LineTooLongError as exc:
                log.warning(f"Discarding oversized line: {exc}")
                await transport.send(
                    create_error_response(PARSE_ERROR, f"Parse error: {exc}", None).encode()
                )
                continue

            if line is None:
                break

            output = await self.handle_line(line)
            if output is not None:
                await transport.send(output)

        log.info("Input closed, shutting down.")

    async def run(self) -> None:
        """Serves over the process's stdin and stdout."""
        transport = StdioTransport(max_line_bytes=self.max_line_bytes)
        await transport.connect()
        try:
            await self.serve(transport)
        finally:
            await transport.close()
