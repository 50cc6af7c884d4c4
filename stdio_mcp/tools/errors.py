"""Tool-facing error types raised by the registry and the schema validator."""


class ToolError(Exception):
    """Base error for failures surfaced to the client as a tool error.

    Tool implementations raise it (or a subclass) for expected failures; the
    message is sent verbatim in the JSON-RPC error object.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def __str__(self) -> str:
        return self.message


class UnknownToolError(ToolError):
    """Requested tool does not exist in the registry."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown tool: {name}")


class ToolExecutionError(ToolError):
    """A tool completed but produced an unusable result."""

    def __init__(self, name: str, detail: str = "") -> None:
        self.name = name
        self.detail = detail
        super().__init__(f"Tool execution failed: {name}" + (f": {detail}" if detail else ""))


class SchemaValidationError(ToolError):
    """Base error for arguments that do not satisfy a tool's input schema."""

    def __init__(self, path: str, message: str) -> None:
        self.path = path
        super().__init__(message)


class MissingArgumentError(SchemaValidationError):
    def __init__(self, name: str) -> None:
        super().__init__(name, f"Missing required argument: {name}")


class TypeMismatchError(SchemaValidationError):
    def __init__(self, path: str, expected: str, actual: str) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(path, f"Invalid type for '{path}': expected {expected}, got {actual}")


class BelowMinimumError(SchemaValidationError):
    def __init__(self, path: str, minimum) -> None:
        self.minimum = minimum
        super().__init__(path, f"Invalid value for '{path}': must be >= {minimum}")


class AboveMaximumError(SchemaValidationError):
    def __init__(self, path: str, maximum) -> None:
        self.maximum = maximum
        super().__init__(path, f"Invalid value for '{path}': must be <= {maximum}")


class NotInEnumError(SchemaValidationError):
    def __init__(self, path: str, allowed) -> None:
        self.allowed = list(allowed)
        super().__init__(
            path, f"Invalid value for '{path}': must be one of {', '.join(self.allowed)}"
        )
