import inspect
import logging
import threading
from dataclasses import dataclass
from typing import (
    Any,
    Awaitable,
    Callable,
    Dict,
    Generic,
    Iterable,
    List,
    Mapping,
    Optional,
    Protocol,
    Sequence,
    TypeVar,
    Union,
    runtime_checkable,
)

from stdio_mcp.mcp.value import Arguments, JSONValue
from stdio_mcp.tools.errors import (
    SchemaValidationError,
    ToolExecutionError,
    UnknownToolError,
)
from stdio_mcp.tools.schema import Schema
from stdio_mcp.tools.validator import SchemaValidator
from stdio_mcp.utils import audit
from stdio_mcp.utils.audit import ToolExecutionStatus

log = logging.getLogger(__name__)

ContextT = TypeVar("ContextT")
ContextT_contra = TypeVar("ContextT_contra", contravariant=True)

ToolResult = Union[str, Awaitable[str]]


@runtime_checkable
class Tool(Protocol[ContextT_contra]):
    """
    A named, schema-described callable exposed to the client.

    ``execute`` receives the call arguments and the server's shared context. It
    may be a coroutine function or a plain function, and returns the text sent
    back to the client.
    """

    name: str
    description: str
    input_schema: JSONValue

    def execute(self, arguments: Arguments, context: ContextT_contra) -> ToolResult: ...


@runtime_checkable
class ToolProvider(Protocol[ContextT_contra]):
    """Groups related tools so they can be registered in one call."""

    @property
    def tools(self) -> Sequence[Tool[ContextT_contra]]: ...


@dataclass(frozen=True)
class FunctionTool(Generic[ContextT]):
    """Declarative tool wrapping a plain ``function(arguments, context)``."""

    name: str
    description: str
    input_schema: JSONValue
    function: Callable[[Arguments, ContextT], ToolResult]

    def __post_init__(self):
        object.__setattr__(self, "input_schema", JSONValue.from_python(self.input_schema))

    def execute(self, arguments: Arguments, context: ContextT) -> ToolResult:
        return self.function(arguments, context)


def define_tool(
    name: str, description: str, input_schema: Optional[Any] = None
) -> Callable[[Callable[[Arguments, Any], ToolResult]], FunctionTool]:
    """
    Decorator turning a function into a ``FunctionTool``.

    >>> @define_tool("echo", "Echo back a message", Schema.object(
    ...     {"message": Schema.string()}, required=["message"]))
    ... async def echo(arguments, context):
    ...     return arguments["message"].string_value
    """

    def decorator(function: Callable[[Arguments, Any], ToolResult]) -> FunctionTool:
        schema = input_schema if input_schema is not None else Schema.empty()
        return FunctionTool(name=name, description=description, input_schema=schema, function=function)

    return decorator


class ToolRegistry(Generic[ContextT]):
    """
    Manages the registration, discovery, and execution of tools.

    The name-to-tool map is guarded by a lock that is only held for map reads and
    writes, never while a tool executes, so tools may call back into the registry.
    """

    def __init__(self):
        self._tools: Dict[str, Tool[ContextT]] = {}
        self._lock = threading.Lock()

    def register(self, tool: Tool[ContextT]) -> None:
        """Registers a tool, replacing any tool already registered under its name."""
        with self._lock:
            replaced = tool.name in self._tools
            self._tools[tool.name] = tool
        if replaced:
            log.debug(f"Replaced tool: {tool.name}")
        else:
            log.info(f"Registered tool: {tool.name}")

    def register_all(self, tools: Iterable[Tool[ContextT]]) -> None:
        for tool in tools:
            self.register(tool)

    def register_provider(self, provider: ToolProvider[ContextT]) -> None:
        self.register_all(provider.tools)

    @property
    def tool_names(self) -> List[str]:
        with self._lock:
            return sorted(self._tools)

    def tool(self, name: str) -> Optional[Tool[ContextT]]:
        with self._lock:
            return self._tools.get(name)

    def list_tools(self) -> JSONValue:
        """Builds the ``tools/list`` result, one entry per tool ordered by name."""
        with self._lock:
            tools = sorted(self._tools.values(), key=lambda tool: tool.name)
        return JSONValue.object(
            {
                "tools": [
                    {
                        "name": tool.name,
                        "description": tool.description,
                        "inputSchema": JSONValue.from_python(tool.input_schema),
                    }
                    for tool in tools
                ]
            }
        )

    async def call(
        self,
        name: str,
        arguments: Mapping[str, Any],
        context: ContextT,
        validate: bool = True,
    ) -> str:
        """
        Executes a tool after validating its arguments against the tool's input schema.

        Raises ``UnknownToolError`` for unregistered names and a
        ``SchemaValidationError`` for rejected arguments; anything the tool itself
        raises propagates unchanged.
        """
        arguments = {key: JSONValue.from_python(value) for key, value in arguments.items()}

        tool = self.tool(name)
        if tool is None:
            audit.record_tool_execution(name, ToolExecutionStatus.UNKNOWN)
            raise UnknownToolError(name)

        if validate:
            try:
                SchemaValidator.validate(arguments, JSONValue.from_python(tool.input_schema))
            except SchemaValidationError as exc:
                audit.record_tool_execution(name, ToolExecutionStatus.INVALID, error=exc.message)
                raise

        log.info(f"Executing tool '{name}'")
        try:
            result = tool.execute(arguments, context)
            if inspect.isawaitable(result):
                result = await result
        except Exception as exc:
            audit.record_tool_execution(name, ToolExecutionStatus.ERROR, error=str(exc))
            raise

        if not isinstance(result, str):
            audit.record_tool_execution(name, ToolExecutionStatus.ERROR, error="non-text result")
            raise ToolExecutionError(name, f"expected a str result, got {type(result).__name__}")

        audit.record_tool_execution(name, ToolExecutionStatus.SUCCESS, arguments=arguments)
        return result
