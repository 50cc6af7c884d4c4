import logging
from typing import Mapping, Optional, Union

from stdio_mcp.mcp.value import JSONValue, ValueKind
from stdio_mcp.tools.errors import (
    AboveMaximumError,
    BelowMinimumError,
    MissingArgumentError,
    NotInEnumError,
    TypeMismatchError,
)

log = logging.getLogger(__name__)


class SchemaValidator:
    """
    Checks tool arguments against the JSON Schema subset built by ``Schema``.

    Validation is first-fault: the earliest violation is raised and nothing else
    is checked. Required arguments are verified, in declaration order, before any
    type check. Arguments without a property schema and unknown schema types are
    accepted so that clients may send forward-compatible extra fields.
    """

    @classmethod
    def validate(cls, arguments: Mapping[str, JSONValue], schema: JSONValue) -> None:
        if _declared_type(schema) != "object":
            return

        required = schema.get("required")
        for entry in (required.array_value if required is not None else None) or []:
            name = entry.string_value
            if name is not None and name not in arguments:
                raise MissingArgumentError(name)

        properties = schema.get("properties")
        for key, value in arguments.items():
            property_schema = properties.get(key) if properties is not None else None
            if property_schema is None:
                log.debug(f"Ignoring argument '{key}' with no declared schema")
                continue
            cls.validate_value(value, property_schema, key)

    @classmethod
    def validate_value(cls, value: JSONValue, schema: JSONValue, path: str) -> None:
        """Validates a single value; ``path`` labels the value in error messages."""
        declared = _declared_type(schema)

        if declared == "string":
            text = value.string_value
            if text is None:
                raise TypeMismatchError(path, "string", _describe(value))
            allowed = schema.get("enum")
            if allowed is not None and allowed.array_value is not None:
                options = [option.string_value for option in allowed.array_value]
                if text not in options:
                    raise NotInEnumError(path, [str(option) for option in options])

        elif declared == "integer":
            number = _as_integer(value)
            if number is None:
                raise TypeMismatchError(path, "integer", _describe(value))
            _check_bounds(number, schema, path)

        elif declared == "number":
            number = value.double_value
            if number is None:
                raise TypeMismatchError(path, "number", _describe(value))
            # Keep integers exact for the bounds comparison
            _check_bounds(value.int_value if value.kind is ValueKind.INT else number, schema, path)

        elif declared == "boolean":
            if value.bool_value is None:
                raise TypeMismatchError(path, "boolean", _describe(value))

        elif declared == "array":
            items = value.array_value
            if items is None:
                raise TypeMismatchError(path, "array", _describe(value))
            item_schema = schema.get("items")
            if item_schema is not None:
                for index, item in enumerate(items):
                    cls.validate_value(item, item_schema, f"{path}[{index}]")

        elif declared == "object":
            if value.object_value is None:
                raise TypeMismatchError(path, "object", _describe(value))


def _declared_type(schema: JSONValue) -> Optional[str]:
    declared = schema.get("type")
    return declared.string_value if declared is not None else None


def _as_integer(value: JSONValue) -> Optional[int]:
    if value.kind is ValueKind.INT:
        return value.int_value
    if value.kind is ValueKind.DOUBLE and value.double_value.is_integer():
        return int(value.double_value)
    return None


def _bound(schema: JSONValue, key: str) -> Optional[Union[int, float]]:
    bound = schema.get(key)
    if bound is None:
        return None
    if bound.kind is ValueKind.INT:
        return bound.int_value
    return bound.double_value


def _check_bounds(number: Union[int, float], schema: JSONValue, path: str) -> None:
    minimum = _bound(schema, "minimum")
    if minimum is not None and number < minimum:
        raise BelowMinimumError(path, minimum)
    maximum = _bound(schema, "maximum")
    if maximum is not None and number > maximum:
        raise AboveMaximumError(path, maximum)


def _describe(value: JSONValue) -> str:
    return value.kind.value
