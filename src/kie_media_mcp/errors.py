"""
Error Types

Exception hierarchy shared by the dispatcher, the nodes and the outer surfaces.

Every error carries a ``code`` and renders to the same dict shape the MCP
tools return:
- Include "error" with the human-readable message
- Include "code" for error categorization
- Include "isError": true
- Include "details" when there is extra context
"""

from typing import Any, Dict, Optional


class KieError(Exception):
    """Base class for all errors raised by this package."""

    code = "KIE_ERROR"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert to MCP-compliant error dict."""
        result: Dict[str, Any] = {
            "error": self.message,
            "code": self.code,
            "isError": True,
        }
        if self.details:
            result["details"] = self.details
        return result


class ValidationError(KieError):
    """
    A parameter failed a local check before any request was sent.

    Example:
        ValidationError("Maximum 2 image URLs allowed, got 3", field="image_urls")
    """

    code = "VALIDATION_ERROR"

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message, {"field": field} if field else None)
        self.field = field


class TransportError(KieError):
    """Network failure or non-2xx response from the Kie.ai API."""

    code = "TRANSPORT_ERROR"

    def __init__(self, message: str, status: Optional[int] = None, url: Optional[str] = None):
        details = {}
        if status is not None:
            details["status"] = status
        if url:
            details["url"] = url
        super().__init__(message, details)
        self.status = status
        self.url = url


class DecodeError(KieError):
    """A successful response body was not valid JSON."""

    code = "DECODE_ERROR"


class ConfigError(KieError):
    """Credentials or other configuration are missing."""

    code = "CONFIG_ERROR"


class NodeNotFoundError(KieError):
    """Node name not registered."""

    code = "NOT_FOUND"
