import inspect
import logging
from typing import Any, Awaitable, Callable, Dict, Generic, Optional, TypeVar, Union

from stdio_mcp.mcp.protocol import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    METHOD_NOT_FOUND,
    SERVER_ERROR,
    CallToolResult,
    InitializeResult,
    JSONRPCError,
    JSONRPCRequest,
    JSONRPCResponse,
    RequestID,
    ServerInfo,
)
from stdio_mcp.mcp.value import JSONValue
from stdio_mcp.tools.errors import ToolError
from stdio_mcp.tools.registry import ToolRegistry

log = logging.getLogger(__name__)

ContextT = TypeVar("ContextT")

NotificationHandler = Callable[[Optional[JSONValue]], Union[None, Awaitable[None]]]


class JSONRPCDispatchError(Exception):
    """Custom exception for errors during request dispatching."""

    def __init__(self, code: int, message: str, data: Any = None):
        self.code = code
        self.message = message
        self.data = data
        super().__init__(message)


class RequestRouter(Generic[ContextT]):
    """
    Routes decoded requests to their method handlers and turns every failure into
    a JSON-RPC error object, so that no exception reaches the transport.
    """

    def __init__(
        self,
        info: ServerInfo,
        registry: ToolRegistry[ContextT],
        context: ContextT,
        validate_arguments: bool = True,
    ):
        self.info = info
        self.registry = registry
        self.context = context
        self.validate_arguments = validate_arguments
        self._notification_handlers: Dict[str, NotificationHandler] = {}

    def add_notification_handler(self, method: str, handler: NotificationHandler) -> None:
        self._notification_handlers[method] = handler

    async def handle_request(self, request: JSONRPCRequest) -> JSONRPCResponse:
        """Produces the response for a request that carries an id."""
        try:
            result = await self.dispatch_request(request)
            return create_success_response(result, request.id)
        except JSONRPCDispatchError as exc:
            return create_error_response(exc.code, exc.message, request.id, exc.data)
        except Exception as e:
            log.exception("An unexpected internal error occurred.")
            return create_error_response(
                INTERNAL_ERROR,
                f"Internal server error: {type(e).__name__}",
                request.id,
                data=str(e),
            )

    async def dispatch_request(self, request: JSONRPCRequest) -> Any:
        """Dispatches the JSON-RPC request to the appropriate method handler."""
        method = request.method
        log.debug(f"Dispatching method: {method}")

        if method == "initialize":
            return self.handle_initialize(request.params)
        elif method == "tools/list":
            return self.handle_list_tools()
        elif method == "tools/call":
            return await self.handle_call_tool(request.params)

        raise JSONRPCDispatchError(METHOD_NOT_FOUND, f"Method not found: {method}")

    async def handle_notification(self, request: JSONRPCRequest) -> None:
        """Handles a request without an id. Nothing is ever sent back, failures are only logged."""
        method = request.method
        handler = self._notification_handlers.get(method)
        try:
            if handler is not None:
                outcome = handler(request.params)
                if inspect.isawaitable(outcome):
                    await outcome
            elif method == "notifications/initialized":
                log.info("Client initialized")
            elif method == "notifications/cancelled":
                log.info("Request cancelled")
            else:
                log.info(f"Unknown notification: {method}")
        except Exception:
            log.exception(f"Notification handler for '{method}' failed")

    # --- Method Handlers ---

    def handle_initialize(self, params: Optional[JSONValue]) -> Dict[str, Any]:
        """Handles the 'initialize' request (capability negotiation)."""
        client = params.get("clientInfo") if params is not None else None
        client_name = client.get("name").string_value if client and client.get("name") else None
        log.info(f"Initializing session for client {client_name or 'unknown'}")

        return InitializeResult.for_server(self.info).model_dump()

    def handle_list_tools(self) -> JSONValue:
        """Handles the 'tools/list' request."""
        tools = self.registry.list_tools()
        log.info(f"Listing {len(tools.get('tools').array_value)} tools")
        return tools

    async def handle_call_tool(self, params: Optional[JSONValue]) -> Dict[str, Any]:
        """Handles 'tools/call' requests."""
        name_value = params.get("name") if params is not None else None
        tool_name = name_value.string_value if name_value is not None else None

        if tool_name is None:
            raise JSONRPCDispatchError(INVALID_PARAMS, "Missing tool name")

        arguments_value = params.get("arguments")
        arguments = arguments_value.object_value if arguments_value is not None else None
        if arguments is None:
            if arguments_value is not None and not arguments_value.is_null:
                log.warning(f"Ignoring non-object arguments for tool '{tool_name}'")
            arguments = {}

        log.debug(f"Tool call request - name: {tool_name}, argument keys: {sorted(arguments)}")

        try:
            text = await self.registry.call(
                tool_name, arguments, self.context, validate=self.validate_arguments
            )
        except ToolError as e:
            log.warning(f"Tool '{tool_name}' failed: {e.message}")
            raise JSONRPCDispatchError(SERVER_ERROR, e.message)
        except Exception as e:
            log.exception(f"Error executing tool '{tool_name}'")
            raise JSONRPCDispatchError(SERVER_ERROR, str(e) or type(e).__name__)

        return CallToolResult.from_text(text).model_dump()


# --- Helper Functions ---


def create_error_response(
    code: int, message: str, id: Optional[RequestID], data: Any = None
) -> JSONRPCResponse:
    """Creates a standardized JSON-RPC error response."""
    return JSONRPCResponse.failure(id, JSONRPCError(code=code, message=message, data=data))


def create_success_response(result: Any, id: Optional[RequestID]) -> JSONRPCResponse:
    """Creates a standardized JSON-RPC success response."""
    return JSONRPCResponse.success(id, result)
