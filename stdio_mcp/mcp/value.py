import json
import math
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union


class ValueKind(str, Enum):
    NULL = "null"
    BOOL = "boolean"
    INT = "integer"
    DOUBLE = "number"
    STRING = "string"
    ARRAY = "array"
    OBJECT = "object"


class JSONValue:
    """
    Immutable, type-tagged representation of an arbitrary JSON document.

    Integral number literals decode to the INT variant and literals with a
    fraction or exponent decode to DOUBLE, so ``decode(encode(v)) == v`` holds
    for every representable value. Accessors return ``None`` instead of raising
    when the variant does not match.
    """

    __slots__ = ("_kind", "_payload")

    def __init__(self, kind: ValueKind, payload: Any = None):
        object.__setattr__(self, "_kind", kind)
        object.__setattr__(self, "_payload", payload)

    def __setattr__(self, name, value):
        raise AttributeError("JSONValue is immutable.")

    # --- Constructors ---

    @classmethod
    def null(cls) -> "JSONValue":
        return cls(ValueKind.NULL)

    @classmethod
    def boolean(cls, value: bool) -> "JSONValue":
        return cls(ValueKind.BOOL, bool(value))

    @classmethod
    def integer(cls, value: int) -> "JSONValue":
        return cls(ValueKind.INT, int(value))

    @classmethod
    def double(cls, value: float) -> "JSONValue":
        return cls(ValueKind.DOUBLE, float(value))

    @classmethod
    def string(cls, value: str) -> "JSONValue":
        return cls(ValueKind.STRING, str(value))

    @classmethod
    def array(cls, items: Iterable[Any] = ()) -> "JSONValue":
        return cls(ValueKind.ARRAY, tuple(cls.from_python(item) for item in items))

    @classmethod
    def object(cls, members: Optional[Mapping[str, Any]] = None) -> "JSONValue":
        converted = {}
        for key, member in (members or {}).items():
            if not isinstance(key, str):
                raise TypeError(f"JSON object keys must be strings, got {type(key).__name__}.")
            converted[key] = cls.from_python(member)
        return cls(ValueKind.OBJECT, MappingProxyType(converted))

    @classmethod
    def from_python(cls, obj: Any) -> "JSONValue":
        """Converts plain Python data (as produced by ``json.loads``) into a JSONValue."""
        if isinstance(obj, JSONValue):
            return obj
        if obj is None:
            return cls.null()
        # bool is a subclass of int and must be tested first
        if isinstance(obj, bool):
            return cls.boolean(obj)
        if isinstance(obj, int):
            return cls.integer(obj)
        if isinstance(obj, float):
            return cls.double(obj)
        if isinstance(obj, str):
            return cls.string(obj)
        if isinstance(obj, (list, tuple)):
            return cls.array(obj)
        if isinstance(obj, Mapping):
            return cls.object(obj)
        raise TypeError(f"Cannot represent {type(obj).__name__} as a JSON value.")

    @classmethod
    def decode(cls, text: Union[str, bytes]) -> "JSONValue":
        """Parses JSON text. Raises ``ValueError`` (``json.JSONDecodeError``) on malformed input."""
        return cls.from_python(json.loads(text, parse_constant=_reject_constant))

    # --- Serialization ---

    def to_python(self) -> Any:
        if self._kind is ValueKind.ARRAY:
            return [item.to_python() for item in self._payload]
        if self._kind is ValueKind.OBJECT:
            return {key: member.to_python() for key, member in self._payload.items()}
        return self._payload

    def encode(self) -> str:
        """Compact, single-line JSON text."""
        return json.dumps(
            self.to_python(), separators=(",", ":"), ensure_ascii=False, allow_nan=False
        )

    # --- Accessors ---

    @property
    def kind(self) -> ValueKind:
        return self._kind

    @property
    def is_null(self) -> bool:
        return self._kind is ValueKind.NULL

    @property
    def string_value(self) -> Optional[str]:
        return self._payload if self._kind is ValueKind.STRING else None

    @property
    def int_value(self) -> Optional[int]:
        return self._payload if self._kind is ValueKind.INT else None

    @property
    def double_value(self) -> Optional[float]:
        if self._kind is ValueKind.DOUBLE:
            return self._payload
        if self._kind is ValueKind.INT:
            return float(self._payload)
        return None

    @property
    def bool_value(self) -> Optional[bool]:
        return self._payload if self._kind is ValueKind.BOOL else None

    @property
    def array_value(self) -> Optional[List["JSONValue"]]:
        return list(self._payload) if self._kind is ValueKind.ARRAY else None

    @property
    def object_value(self) -> Optional[Dict[str, "JSONValue"]]:
        return dict(self._payload) if self._kind is ValueKind.OBJECT else None

    def get(self, key: Union[str, int]) -> Optional["JSONValue"]:
        """Member by key (objects) or by index (arrays); ``None`` when absent."""
        if isinstance(key, str):
            if self._kind is ValueKind.OBJECT:
                return self._payload.get(key)
            return None
        if isinstance(key, int) and not isinstance(key, bool):
            if self._kind is ValueKind.ARRAY and 0 <= key < len(self._payload):
                return self._payload[key]
        return None

    # --- Dunder protocol ---

    def __eq__(self, other):
        if not isinstance(other, JSONValue):
            return NotImplemented
        if self._kind is not other._kind:
            return False
        if self._kind is ValueKind.OBJECT:
            return dict(self._payload) == dict(other._payload)
        return self._payload == other._payload

    def __hash__(self):
        return hash((self._kind, self._hash_key()))

    def _hash_key(self) -> Any:
        if self._kind is ValueKind.ARRAY:
            return self._payload
        if self._kind is ValueKind.OBJECT:
            return frozenset(self._payload.items())
        if self._kind is ValueKind.DOUBLE and math.isnan(self._payload):
            return "nan"
        return self._payload

    def __repr__(self):
        return f"JSONValue({self._kind.name}, {self.to_python()!r})"


# Tool arguments: the members of a tools/call "arguments" object.
Arguments = Dict[str, JSONValue]


def _reject_constant(name: str):
    raise ValueError(f"{name} is not a valid JSON number.")
