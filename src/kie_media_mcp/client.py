"""
Kie.ai API Client

Low-level HTTP dispatcher shared by every node. Resolves the origin, injects
the bearer credential and decodes the JSON body. No retries.
"""

import json
import urllib.error
import urllib.parse
import urllib.request
from dataclasses import dataclass, field
from typing import Any, Dict, Optional
from uuid import uuid4

from .config import CREDENTIAL_TEST_PATH, FILE_UPLOAD_ORIGIN, Credentials
from .errors import DecodeError, TransportError, ValidationError
from .mcp_utils import log_structured

JOBS = "jobs"
FILES = "files"


@dataclass
class FilePart:
    """A single file field in a multipart form."""

    field: str
    filename: str
    content: bytes
    content_type: str = "application/octet-stream"


def _disposition_value(value: str) -> str:
    """Percent-escape quote and line breaks, as browsers do for form-data names."""
    return str(value).replace("\r", "%0D").replace("\n", "%0A").replace('"', "%22")


@dataclass
class MultipartForm:
    """Plain text fields plus at most one file."""

    fields: Dict[str, str] = field(default_factory=dict)
    file: Optional[FilePart] = None

    def encode(self) -> tuple[bytes, str]:
        """Return (body, content_type) for the form."""
        boundary = f"----KieBoundary{uuid4().hex}"
        body_parts = []

        if self.file is not None:
            body_parts.append(f"--{boundary}".encode())
            body_parts.append(
                f'Content-Disposition: form-data; name="{_disposition_value(self.file.field)}"; '
                f'filename="{_disposition_value(self.file.filename)}"'.encode()
            )
            body_parts.append(f"Content-Type: {self.file.content_type}".encode())
            body_parts.append(b"")
            body_parts.append(self.file.content)

        for name, value in self.fields.items():
            body_parts.append(f"--{boundary}".encode())
            body_parts.append(f'Content-Disposition: form-data; name="{_disposition_value(name)}"'.encode())
            body_parts.append(b"")
            body_parts.append(str(value).encode())

        body_parts.append(f"--{boundary}--".encode())
        body_parts.append(b"")

        return b"\r\n".join(body_parts), f"multipart/form-data; boundary={boundary}"


@dataclass
class Request:
    """One outbound call, built fresh per item."""

    method: str
    path: str
    body: Optional[Dict[str, Any]] = None
    query: Optional[Dict[str, Any]] = None
    form: Optional[MultipartForm] = None
    origin: str = JOBS


class KieClient:
    """HTTP client for the Kie.ai jobs and file storage APIs."""

    def __init__(self, credentials: Credentials):
        self.credentials = credentials

    def base_url(self, origin: str = JOBS) -> str:
        if origin == FILES:
            return FILE_UPLOAD_ORIGIN
        return self.credentials.domain

    def build_url(self, path: str, query: Optional[Dict[str, Any]] = None, origin: str = JOBS) -> str:
        url = f"{self.base_url(origin)}{path}"
        if query:
            url += ("&" if "?" in url else "?") + urllib.parse.urlencode(query)
        return url

    def dispatch(self, request: Request, timeout: Optional[float] = None) -> Any:
        """Send a Request descriptor and return the decoded JSON body."""
        return self.request(
            request.method,
            request.path,
            body=request.body,
            query=request.query,
            form=request.form,
            origin=request.origin,
            timeout=timeout,
        )

    def request(
        self,
        method: str,
        path: str,
        body: Optional[Dict[str, Any]] = None,
        query: Optional[Dict[str, Any]] = None,
        form: Optional[MultipartForm] = None,
        origin: str = JOBS,
        timeout: Optional[float] = None,
    ) -> Any:
        """
        Make an authenticated request to the Kie.ai API.

        Args:
            method: HTTP method (GET or POST).
            path: Path relative to the origin, e.g. "/api/v1/jobs/createTask".
            body: JSON-serializable body.
            query: Query parameters appended to the URL.
            form: Multipart form; replaces the JSON body when given.
            origin: "jobs" (configurable domain) or "files" (file storage).
            timeout: Socket timeout; transport default when None.

        Returns:
            Decoded JSON response.

        Raises:
            TransportError: Network failure or non-2xx status.
            DecodeError: 2xx response whose body is not JSON.
        """
        url = self.build_url(path, query, origin)
        req = urllib.request.Request(url, method=method)
        req.add_header("Authorization", self.credentials.authorization)
        req.add_header("Accept", "application/json")

        if form is not None:
            req.data, content_type = form.encode()
            req.add_header("Content-Type", content_type)
        else:
            req.add_header("Content-Type", "application/json")
            if body is not None and method.upper() != "GET":
                try:
                    req.data = json.dumps(body, allow_nan=False).encode()
                except ValueError:
                    raise ValidationError("Request body contains a non-finite number (NaN or Infinity)") from None

        log_structured("debug", "kie_request", method=method, url=url, multipart=form is not None)

        try:
            if timeout is None:
                resp = urllib.request.urlopen(req)
            else:
                resp = urllib.request.urlopen(req, timeout=timeout)
            with resp:
                raw = resp.read()
        except urllib.error.HTTPError as e:
            raise TransportError(_http_error_message(e), status=e.code, url=url) from e
        except urllib.error.URLError as e:
            raise TransportError(f"Cannot connect to Kie.ai: {e.reason}", url=url) from e

        try:
            return json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise DecodeError(f"Invalid JSON response from {path}: {e}") from e

    def get(self, path: str, query: Optional[Dict[str, Any]] = None, origin: str = JOBS) -> Any:
        """GET request."""
        return self.request("GET", path, query=query, origin=origin)

    def post(self, path: str, body: Dict[str, Any], origin: str = JOBS) -> Any:
        """POST request with a JSON body."""
        return self.request("POST", path, body=body, origin=origin)

    def post_form(self, path: str, form: MultipartForm, origin: str = FILES) -> Any:
        """POST request with a multipart form."""
        return self.request("POST", path, form=form, origin=origin)

    def check_credentials(self) -> Any:
        """Query remaining credits; fails with TransportError on a bad key."""
        return self.get(CREDENTIAL_TEST_PATH)


def _http_error_message(error: urllib.error.HTTPError) -> str:
    """Prefer the API's own msg field over the bare HTTP reason."""
    try:
        payload = json.loads(error.read() or b"{}")
    except (json.JSONDecodeError, UnicodeDecodeError, OSError):
        payload = {}
    detail = payload.get("msg") or payload.get("message") if isinstance(payload, dict) else None
    return f"HTTP {error.code}: {detail or error.reason}"


# Global client instance
_client: Optional[KieClient] = None


def get_client() -> KieClient:
    """Get or create global client instance from the environment."""
    global _client
    if _client is None:
        _client = KieClient(Credentials.from_env())
    return _client


def reset_client():
    """Drop the global client so the next call re-reads the environment."""
    global _client
    _client = None
