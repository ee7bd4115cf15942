"""
MCP Utilities

JSON logging on the ``kie-mcp`` logger, per-context correlation IDs, the error
dict shape returned by MCP tools, and the decorator that applies both to a
tool function.

Every log line is one JSON object:
    {"timestamp": ..., "level": ..., "logger": "kie-mcp", "message": <event>,
     "correlation_id": ..., <event fields>}
"""

import functools
import json
import logging
import time
import uuid
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from .config import get_log_level
from .errors import KieError, ValidationError

# =============================================================================
# Structured Logging
# =============================================================================

logger = logging.getLogger("kie-mcp")
logger.setLevel(get_log_level())


class JSONFormatter(logging.Formatter):
    """One JSON object per record; event fields are merged at the top level."""

    def format(self, record):
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        entry = {
            "timestamp": created.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        cid = getattr(record, "correlation_id", None)
        if cid:
            entry["correlation_id"] = cid
        entry.update(getattr(record, "event_fields", {}))
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, separators=(",", ":"), default=str)


if not logger.handlers:
    # stderr only: stdout carries the MCP stdio transport and CLI results
    _stderr = logging.StreamHandler()
    _stderr.setFormatter(JSONFormatter())
    logger.addHandler(_stderr)


correlation_id_var: ContextVar[Optional[str]] = ContextVar("kie_correlation_id", default=None)


def _short_id() -> str:
    return uuid.uuid4().hex[:8]


def set_correlation_id(cid: str):
    correlation_id_var.set(cid)


def get_correlation_id() -> str:
    """Correlation ID of the current context, created on first use."""
    cid = correlation_id_var.get()
    if not cid:
        cid = _short_id()
        set_correlation_id(cid)
    return cid


def clear_correlation_id():
    correlation_id_var.set(None)


def log_structured(level: str, message: str, **fields):
    """
    Log an event with the current correlation ID.

    Example:
        log_structured("info", "node_started", node="zImage", total_items=3)
    """
    logger.log(
        logging.getLevelName(level.upper()),
        message,
        extra={"correlation_id": get_correlation_id(), "event_fields": fields},
    )


class ToolInvocation:
    """Timing and outcome of one MCP tool call, logged when it finishes."""

    def __init__(self, tool_name: str):
        self.tool_name = tool_name
        self.invocation_id = _short_id()
        self.correlation_id = get_correlation_id()
        self._started = time.perf_counter()

    def complete(self, status: str = "success", error: Optional[str] = None) -> Dict[str, Any]:
        """Log tool_completed, or tool_failed for any other status."""
        fields: Dict[str, Any] = {
            "tool": self.tool_name,
            "invocation_id": self.invocation_id,
            "status": status,
            "latency_ms": round((time.perf_counter() - self._started) * 1000, 2),
        }
        if error:
            fields["error"] = error
        if status == "success":
            log_structured("info", "tool_completed", **fields)
        else:
            log_structured("error", "tool_failed", **fields)
        return fields


# =============================================================================
# MCP-Compliant Responses
# =============================================================================


def mcp_error(message: str, code: str = "TOOL_ERROR", details: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    Error dict in the shape every tool returns: {error, code, isError, details?}.

    Example:
        return mcp_error("Unknown node: foo", "NOT_FOUND", {"node": "foo"})
    """
    error: Dict[str, Any] = {"error": message, "code": code, "isError": True}
    if details:
        error["details"] = details
    return error


def validation_error(message: str, field: Optional[str] = None) -> Dict[str, Any]:
    return ValidationError(message, field=field).to_dict()


def to_mcp_response(result: Any) -> Dict[str, Any]:
    """Wrap non-dict results as {"data": ...}; flag bare error dicts with isError."""
    if not isinstance(result, dict):
        return {"data": result}
    if "error" in result and "isError" not in result:
        return {**result, **mcp_error(result["error"], result.get("code", "TOOL_ERROR"), result.get("details"))}
    return result


# =============================================================================
# Tool Decorator
# =============================================================================


def mcp_tool_wrapper(func):
    """
    Log each call of an MCP tool and turn exceptions into error dicts.

    KieError subclasses keep their own code; anything else is reported as
    INTERNAL_ERROR. A returned dict with isError is logged as a failure.

    Example:
        @mcp.tool()
        @mcp_tool_wrapper
        def describe_node(name: str) -> dict:
            ...
    """

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        call = ToolInvocation(func.__name__)
        try:
            result = func(*args, **kwargs)
        except KieError as e:
            call.complete("error", e.message)
            return e.to_dict()
        except Exception as e:
            call.complete("error", str(e))
            return mcp_error(str(e), "INTERNAL_ERROR")

        if isinstance(result, dict) and result.get("isError"):
            call.complete("error", result["error"])
        else:
            call.complete()
        return result

    return wrapper
