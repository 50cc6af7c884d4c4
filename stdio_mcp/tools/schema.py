from typing import Any, Dict, Mapping, Optional, Sequence, Union

from stdio_mcp.mcp.value import JSONValue

Number = Union[int, float]


class Schema:
    """
    Builders for the JSON Schema subset accepted as a tool's ``input_schema``.

    Every builder returns a plain ``JSONValue``; schemas carry no behavior and are
    read-only once a tool is registered.
    """

    @staticmethod
    def object(
        properties: Optional[Mapping[str, Any]] = None,
        required: Sequence[str] = (),
    ) -> JSONValue:
        schema: Dict[str, Any] = {
            "type": "object",
            "properties": JSONValue.object(properties or {}),
        }
        # Declaration order is the order in which missing arguments are reported
        required_names = list(dict.fromkeys(required))
        if required_names:
            schema["required"] = required_names
        return JSONValue.object(schema)

    @staticmethod
    def string(
        description: Optional[str] = None, enum: Optional[Sequence[str]] = None
    ) -> JSONValue:
        schema: Dict[str, Any] = {"type": "string"}
        if description is not None:
            schema["description"] = description
        if enum is not None:
            schema["enum"] = list(enum)
        return JSONValue.object(schema)

    @staticmethod
    def integer(
        description: Optional[str] = None,
        minimum: Optional[int] = None,
        maximum: Optional[int] = None,
    ) -> JSONValue:
        schema: Dict[str, Any] = {"type": "integer"}
        if description is not None:
            schema["description"] = description
        if minimum is not None:
            schema["minimum"] = int(minimum)
        if maximum is not None:
            schema["maximum"] = int(maximum)
        return JSONValue.object(schema)

    @staticmethod
    def number(
        description: Optional[str] = None,
        minimum: Optional[Number] = None,
        maximum: Optional[Number] = None,
    ) -> JSONValue:
        schema: Dict[str, Any] = {"type": "number"}
        if description is not None:
            schema["description"] = description
        if minimum is not None:
            schema["minimum"] = float(minimum)
        if maximum is not None:
            schema["maximum"] = float(maximum)
        return JSONValue.object(schema)

    @staticmethod
    def boolean(description: Optional[str] = None) -> JSONValue:
        schema: Dict[str, Any] = {"type": "boolean"}
        if description is not None:
            schema["description"] = description
        return JSONValue.object(schema)

    @staticmethod
    def array(items: Any, description: Optional[str] = None) -> JSONValue:
        schema: Dict[str, Any] = {"type": "array", "items": JSONValue.from_python(items)}
        if description is not None:
            schema["description"] = description
        return JSONValue.object(schema)

    @staticmethod
    def empty() -> JSONValue:
        """Schema for a tool that takes no arguments."""
        return JSONValue.object({"type": "object", "properties": {}})
