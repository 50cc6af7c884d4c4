import json
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from stdio_mcp.mcp.value import JSONValue

# MCP protocol revision implemented by this server
MCP_VERSION = "2024-11-05"

# Standard JSON-RPC 2.0 Error Codes
PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603

# Implementation-defined server errors (reserved band -32099..-32000)
SERVER_ERROR = -32000
SERVER_ERROR_MIN = -32099
SERVER_ERROR_MAX = -32000

RequestID = Union[str, int]


def _to_value(value: Any) -> Optional[JSONValue]:
    if value is None:
        return None
    try:
        return JSONValue.from_python(value)
    except TypeError as exc:
        raise ValueError(str(exc)) from exc


def _compact(payload: Any) -> str:
    # Single-line and ASCII-only; lone surrogates stay \u-escaped
    return json.dumps(payload, separators=(",", ":"), ensure_ascii=True, allow_nan=False)


# --- JSON-RPC 2.0 Base Models ---


class JSONRPCRequest(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    jsonrpc: Literal["2.0"] = "2.0"
    method: str
    params: Optional[JSONValue] = None
    id: Optional[RequestID] = None

    @field_validator("id", mode="before")
    @classmethod
    def validate_id(cls, request_id):
        if isinstance(request_id, bool):
            raise ValueError("JSON-RPC id must not be boolean.")

        if isinstance(request_id, float):
            # JSON-RPC expects integers or strings – floats introduce ambiguity for transports.
            if not request_id.is_integer():
                raise ValueError("JSON-RPC id must not be fractional.")
            return int(request_id)

        return request_id

    @field_validator("params", mode="before")
    @classmethod
    def validate_params(cls, params):
        return _to_value(params)

    @property
    def is_notification(self) -> bool:
        return self.id is None

    def to_wire(self) -> Dict[str, Any]:
        message: Dict[str, Any] = {"jsonrpc": self.jsonrpc, "method": self.method}
        if self.id is not None:
            message["id"] = self.id
        if self.params is not None:
            message["params"] = self.params.to_python()
        return message

    def encode(self) -> str:
        return _compact(self.to_wire())


class JSONRPCError(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    code: int
    message: str
    data: Optional[JSONValue] = None

    @field_validator("data", mode="before")
    @classmethod
    def validate_data(cls, data):
        return _to_value(data)

    @classmethod
    def parse_error(cls, message: str) -> "JSONRPCError":
        return cls(code=PARSE_ERROR, message=message)

    @classmethod
    def invalid_request(cls, message: str) -> "JSONRPCError":
        return cls(code=INVALID_REQUEST, message=message)

    @classmethod
    def method_not_found(cls, method: str) -> "JSONRPCError":
        return cls(code=METHOD_NOT_FOUND, message=f"Method not found: {method}")

    @classmethod
    def invalid_params(cls, message: str) -> "JSONRPCError":
        return cls(code=INVALID_PARAMS, message=message)

    @classmethod
    def internal_error(cls, message: str) -> "JSONRPCError":
        return cls(code=INTERNAL_ERROR, message=message)

    @classmethod
    def server_error(cls, message: str, code: int = SERVER_ERROR) -> "JSONRPCError":
        if not SERVER_ERROR_MIN <= code <= SERVER_ERROR_MAX:
            raise ValueError(
                f"Server error code {code} is outside the reserved range "
                f"{SERVER_ERROR_MIN}..{SERVER_ERROR_MAX}."
            )
        return cls(code=code, message=message)

    def to_wire(self) -> Dict[str, Any]:
        error: Dict[str, Any] = {"code": self.code, "message": self.message}
        if self.data is not None:
            error["data"] = self.data.to_python()
        return error


class JSONRPCResponse(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    jsonrpc: Literal["2.0"] = "2.0"
    result: Optional[JSONValue] = None
    error: Optional[JSONRPCError] = None
    id: Optional[RequestID] = None

    @field_validator("result", mode="before")
    @classmethod
    def validate_result(cls, result):
        # An explicit null result is still a result
        if result is None:
            return JSONValue.null()
        return _to_value(result)

    @model_validator(mode="after")
    def check_consistency(self):
        if self.result is not None and self.error is not None:
            raise ValueError("JSON-RPC response cannot have both result and error.")
        if self.result is None and self.error is None:
            raise ValueError("JSON-RPC response must include either result or error.")
        return self

    @classmethod
    def success(cls, id: Optional[RequestID], result: Any) -> "JSONRPCResponse":
        return cls(id=id, result=result)

    @classmethod
    def failure(cls, id: Optional[RequestID], error: JSONRPCError) -> "JSONRPCResponse":
        return cls(id=id, error=error)

    @property
    def is_error(self) -> bool:
        return self.error is not None

    def to_wire(self) -> Dict[str, Any]:
        """Wire form: ``id`` is always present, and only one of result/error is emitted."""
        message: Dict[str, Any] = {"jsonrpc": self.jsonrpc, "id": self.id}
        if self.error is not None:
            message["error"] = self.error.to_wire()
        else:
            message["result"] = self.result.to_python()
        return message

    def encode(self) -> str:
        return _compact(self.to_wire())


class JSONRPCDecodeError(Exception):
    """Raised when a transport line cannot be decoded into a JSON-RPC request."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


def decode_request(line: Union[str, bytes]) -> JSONRPCRequest:
    """Decodes one transport line into a request, raising ``JSONRPCDecodeError`` on failure."""
    try:
        payload = JSONValue.decode(line)
    except (ValueError, UnicodeDecodeError) as exc:
        raise JSONRPCDecodeError(f"Parse error: {exc}") from exc
    except RecursionError as exc:
        raise JSONRPCDecodeError("Parse error: nesting too deep") from exc

    members = payload.object_value
    if members is None:
        raise JSONRPCDecodeError("Parse error: request must be a JSON object.")
    # The model defaults the version for local construction; on the wire it is mandatory
    if "jsonrpc" not in members:
        raise JSONRPCDecodeError("Parse error: invalid request (jsonrpc: Field required)")

    try:
        return JSONRPCRequest.model_validate(payload.to_python())
    except RecursionError as exc:
        raise JSONRPCDecodeError("Parse error: nesting too deep") from exc
    except ValidationError as exc:
        details = "; ".join(
            f"{'.'.join(str(part) for part in error['loc']) or 'request'}: {error['msg']}"
            for error in exc.errors()
        )
        raise JSONRPCDecodeError(f"Parse error: invalid request ({details})") from exc


# --- MCP Specific Models ---


class ServerCapabilities(BaseModel):
    """Capabilities advertised during ``initialize``; tools are on by default."""

    tools: bool = True
    resources: bool = False
    prompts: bool = False

    def to_result(self) -> Dict[str, Any]:
        enabled = {"tools": self.tools, "resources": self.resources, "prompts": self.prompts}
        return {name: {} for name, on in enabled.items() if on}


class ServerInfo(BaseModel):
    name: str
    version: str
    capabilities: ServerCapabilities = Field(default_factory=ServerCapabilities)


class InitializeResult(BaseModel):
    protocolVersion: str = MCP_VERSION
    serverInfo: Dict[str, str]
    capabilities: Dict[str, Any]

    @classmethod
    def for_server(cls, info: ServerInfo) -> "InitializeResult":
        return cls(
            serverInfo={"name": info.name, "version": info.version},
            capabilities=info.capabilities.to_result(),
        )


class TextContent(BaseModel):
    type: Literal["text"] = "text"
    text: str


class CallToolResult(BaseModel):
    content: List[TextContent]

    @classmethod
    def from_text(cls, text: str) -> "CallToolResult":
        return cls(content=[TextContent(text=text)])
