"""
Task Record Normalization

The recordInfo endpoint returns the task's request parameters and its result
as JSON-encoded strings. This module unwraps them one level (two for the
``input`` string nested inside ``param``) and keeps the raw string whenever it
does not parse.
"""

import json
from dataclasses import dataclass
from typing import Any, Dict, Union

from .types import TaskFailure, TaskRecord


@dataclass(frozen=True)
class Parsed:
    """A value that decoded cleanly (or was never a string)."""

    value: Any


@dataclass(frozen=True)
class Raw:
    """A string that was expected to be JSON but was not."""

    text: str
    error: str = ""

    @property
    def value(self) -> str:
        return self.text


ParseResult = Union[Parsed, Raw]

# Handled explicitly below; everything else in data is copied through.
_UNWRAPPED_FIELDS = ("param", "resultJson", "failCode", "failMsg")


def try_parse_json(value: Any) -> ParseResult:
    """Decode a JSON string, or pass the original through tagged as Raw."""
    if not isinstance(value, str):
        return Parsed(value)
    try:
        return Parsed(json.loads(value))
    except json.JSONDecodeError as e:
        return Raw(value, str(e))


def parse_parameters(param: Any) -> Any:
    """Unwrap ``param`` and, inside it, an ``input`` that is itself a JSON string."""
    parameters = try_parse_json(param).value
    if isinstance(parameters, dict) and isinstance(parameters.get("input"), str):
        parameters = {**parameters, "input": try_parse_json(parameters["input"]).value}
    return parameters


def failure_info(data: Dict[str, Any]) -> TaskFailure:
    """failCode/failMsg as {code, message}, dropping absent or empty members."""
    error: TaskFailure = {}
    if data.get("failCode") not in (None, ""):
        error["code"] = data["failCode"]
    if data.get("failMsg") not in (None, ""):
        error["message"] = data["failMsg"]
    return error


def normalize_task_record(response: Any) -> Any:
    """
    Reshape a recordInfo envelope into a flat task record.

    Args:
        response: {"code": 200, "msg": "success", "data": {"taskId": ..., "param": "...", ...}}

    Returns:
        {"taskId": ..., "state": ..., "parameters": {...}, "result": {...}, "error": {...}?}
        The response is returned unchanged when it has no data object.
    """
    if not isinstance(response, dict) or not isinstance(response.get("data"), dict):
        return response

    data = response["data"]
    record: TaskRecord = {key: value for key, value in data.items() if key not in _UNWRAPPED_FIELDS}

    if "param" in data:
        record["parameters"] = parse_parameters(data["param"])
    if "resultJson" in data:
        record["result"] = try_parse_json(data["resultJson"]).value

    error = failure_info(data)
    if error:
        record["error"] = error

    return record
