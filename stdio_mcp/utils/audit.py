"""Tool execution audit trail.

The registry records one :class:`ToolExecutionEvent` per ``call``. Events are
handed to the registered sinks as plain dicts; with no sink installed they are
logged at INFO as ``AUDIT_EVENT``.
"""

import logging
from enum import Enum
from typing import Any, Callable, Dict, List, Literal, Mapping, Optional

from pydantic import BaseModel

from stdio_mcp.mcp.value import JSONValue

log = logging.getLogger(__name__)

# Upper bound on the serialized arguments kept in a success event
PARAMS_LIMIT = 500

AuditRecord = Dict[str, Any]
AuditSink = Callable[[AuditRecord], None]

_sinks: List[AuditSink] = []


class ToolExecutionStatus(str, Enum):
    SUCCESS = "success"
    INVALID = "invalid"
    UNKNOWN = "unknown"
    ERROR = "error"


class ToolExecutionEvent(BaseModel):
    type: Literal["tool_execution"] = "tool_execution"
    tool: str
    status: ToolExecutionStatus
    error: Optional[str] = None
    params: Optional[str] = None

    def as_record(self) -> AuditRecord:
        return self.model_dump(mode="json", exclude_none=True)


def register_sink(sink: AuditSink) -> None:
    if sink not in _sinks:
        _sinks.append(sink)


def clear_sinks() -> None:
    _sinks.clear()


def emit(event: ToolExecutionEvent) -> None:
    record = event.as_record()
    if not _sinks:
        log.info("AUDIT_EVENT", extra={"event": record})
        return

    for sink in list(_sinks):
        try:
            sink(record)
        except Exception as exc:
            log.error(f"Audit sink {sink!r} failed: {exc}")


def summarize_arguments(arguments: Mapping[str, JSONValue]) -> str:
    """Compact JSON of the call arguments, cut to ``PARAMS_LIMIT`` characters."""
    try:
        return JSONValue.object(arguments).encode()[:PARAMS_LIMIT]
    except (ValueError, RecursionError):
        return "Params serialization failed"


def record_tool_execution(
    tool: str,
    status: ToolExecutionStatus,
    *,
    error: Optional[str] = None,
    arguments: Optional[Mapping[str, JSONValue]] = None,
) -> None:
    """Builds and emits the event for one registry call."""
    emit(
        ToolExecutionEvent(
            tool=tool,
            status=status,
            error=error,
            params=summarize_arguments(arguments) if arguments is not None else None,
        )
    )
