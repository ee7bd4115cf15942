"""Shared CLI utilities: exit codes, output helpers and error classification."""

import json
import os
import sys
from pathlib import Path
from typing import Any

from .errors import ValidationError

# Exit codes
EXIT_OK = 0
EXIT_ERROR = 1
EXIT_VALIDATION = 3
EXIT_PARTIAL = 4
EXIT_CONNECTION = 5
EXIT_NOT_FOUND = 6

_ERROR_EXIT_CODES = {
    "VALIDATION_ERROR": EXIT_VALIDATION,
    "INVALID_PARAMS": EXIT_VALIDATION,
    "TRANSPORT_ERROR": EXIT_CONNECTION,
    "NOT_FOUND": EXIT_NOT_FOUND,
}


def _exit_code_for_error(code: str) -> int:
    return _ERROR_EXIT_CODES.get(code, EXIT_ERROR)


def _output(data: Any, pretty: bool = False) -> None:
    """Results go to stdout as one JSON document; logs stay on stderr."""
    sys.stdout.write(json.dumps(data, indent=2 if pretty else None, default=str) + "\n")
    sys.stdout.flush()


def _error(message: str, code: str = "CLI_ERROR") -> dict:
    return {"error": message, "code": code, "isError": True}


def _is_pretty() -> bool:
    return os.environ.get("KIE_PRETTY", "").lower() in ("1", "true", "yes")


def _parse_json_arg(value: str) -> Any:
    """Inline JSON, or @path to read it from a file."""
    if not value.startswith("@"):
        return json.loads(value)
    path = Path(value[1:])
    if not path.is_file():
        raise ValidationError(f"File not found: {path}")
    return json.loads(path.read_text())


def _add_output_args(parser) -> None:
    parser.add_argument("--pretty", action="store_true", help="Pretty-print JSON output")
