"""
Node Parameter Schemas

Each node declares its parameters as a dataclass whose fields are built with
``param()``. The field metadata carries what the host form would enforce:
allowed options, numeric bounds, required flag and the host's alias.

``parse_params`` turns one item's loose parameter bag into a typed instance;
``json_schema`` renders the same declaration as JSON Schema for tool listings.
"""

import copy
import dataclasses
import json
import math
import re
import typing
from typing import Any, Dict, Iterable, Optional, Tuple, Type, TypeVar

from .errors import ValidationError

P = TypeVar("P")

_TRUE = {"true", "1", "yes", "on"}
_FALSE = {"false", "0", "no", "off", ""}

_JSON_TYPES = {
    str: "string",
    int: "integer",
    float: "number",
    bool: "boolean",
    list: "array",
    dict: "object",
}


def param(
    default: Any = None,
    *,
    required: bool = False,
    options: Optional[Iterable[Any]] = None,
    minimum: Optional[float] = None,
    maximum: Optional[float] = None,
    alias: Optional[str] = None,
    description: str = "",
):
    """Declare one node parameter."""
    metadata = {
        "required": required,
        "options": tuple(options) if options is not None else None,
        "minimum": minimum,
        "maximum": maximum,
        "alias": alias,
        "description": description,
    }
    if isinstance(default, (list, dict)):
        return dataclasses.field(default_factory=lambda: copy.deepcopy(default), metadata=metadata)
    return dataclasses.field(default=default, metadata=metadata)


def callback_param():
    """The optional webhook every job node accepts."""
    return param("", alias="callBackUrl", description="Optional webhook URL to receive completion notification")


def camel_case(name: str) -> str:
    """image_urls -> imageUrls"""
    head, *rest = name.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


def parse_params(cls: Type[P], raw: Optional[Dict[str, Any]]) -> P:
    """
    Build a params dataclass from an item's parameter values.

    Keys are matched by field name, then camelCase name, then alias. Missing or
    null values fall back to the declared default.

    Raises:
        ValidationError: Missing required value, bad type, value outside the
            declared options or bounds.
    """
    raw = raw or {}
    hints = typing.get_type_hints(cls)
    values = {}

    for f in dataclasses.fields(cls):
        meta = f.metadata
        found, value = _lookup(raw, f.name, meta.get("alias"))
        if not found or value is None:
            if meta.get("required"):
                raise ValidationError(f"Missing required parameter: {f.name}", field=f.name)
            continue

        value = _coerce(value, _base_type(hints[f.name]), f.name)

        if meta.get("required") and isinstance(value, str) and not value.strip():
            raise ValidationError(f"Missing required parameter: {f.name}", field=f.name)

        options = meta.get("options")
        if options is not None and value not in options:
            allowed = ", ".join(str(o) for o in options)
            raise ValidationError(f"Invalid value for {f.name}: {value!r}. Allowed: {allowed}", field=f.name)

        if meta.get("minimum") is not None and value < meta["minimum"]:
            raise ValidationError(f"Parameter '{f.name}' must be >= {meta['minimum']}, got {value}", field=f.name)
        if meta.get("maximum") is not None and value > meta["maximum"]:
            raise ValidationError(f"Parameter '{f.name}' must be <= {meta['maximum']}, got {value}", field=f.name)

        values[f.name] = value

    return cls(**values)


def json_schema(cls: Type) -> Dict[str, Any]:
    """Render a params dataclass as a JSON Schema object."""
    hints = typing.get_type_hints(cls)
    properties = {}
    required = []

    for f in dataclasses.fields(cls):
        meta = f.metadata
        prop: Dict[str, Any] = {}
        json_type = _JSON_TYPES.get(_base_type(hints[f.name]))
        if json_type:
            prop["type"] = json_type
        if meta.get("description"):
            prop["description"] = meta["description"]
        if meta.get("options") is not None:
            prop["enum"] = list(meta["options"])
        if meta.get("minimum") is not None:
            prop["minimum"] = meta["minimum"]
        if meta.get("maximum") is not None:
            prop["maximum"] = meta["maximum"]
        if meta.get("alias"):
            prop["alias"] = meta["alias"]

        if f.default is not dataclasses.MISSING:
            prop["default"] = f.default
        elif f.default_factory is not dataclasses.MISSING:
            prop["default"] = f.default_factory()

        properties[f.name] = prop
        if meta.get("required"):
            required.append(f.name)

    schema = {"type": "object", "properties": properties}
    if required:
        schema["required"] = required
    return schema


def _lookup(raw: Dict[str, Any], name: str, alias: Optional[str]) -> Tuple[bool, Any]:
    for key in (name, camel_case(name), alias):
        if key and key in raw:
            return True, raw[key]
    return False, None


def _base_type(hint) -> type:
    """Optional[X] -> X, List[X] -> list, Dict[K, V] -> dict."""
    origin = typing.get_origin(hint)
    if origin is typing.Union:
        args = [a for a in typing.get_args(hint) if a is not type(None)]
        return _base_type(args[0]) if args else object
    if origin is not None:
        return origin
    return hint


def _coerce(value: Any, target: type, name: str) -> Any:
    if target is str:
        if isinstance(value, (dict, list)):
            raise ValidationError(f"Parameter '{name}' must be a string", field=name)
        return str(value)

    if target is bool:
        if isinstance(value, bool):
            return value
        if isinstance(value, (int, float)):
            return bool(value)
        if isinstance(value, str) and value.strip().lower() in _TRUE | _FALSE:
            return value.strip().lower() in _TRUE
        raise ValidationError(f"Parameter '{name}' must be a boolean, got {value!r}", field=name)

    if target is int:
        if isinstance(value, bool):
            raise ValidationError(f"Parameter '{name}' must be an integer, got {value!r}", field=name)
        if isinstance(value, int):
            return value
        if isinstance(value, float) and value.is_integer():
            return int(value)
        if isinstance(value, str) and re.fullmatch(r"\s*-?\d+\s*", value):
            return int(value)
        raise ValidationError(f"Parameter '{name}' must be an integer, got {value!r}", field=name)

    if target is float:
        if isinstance(value, bool):
            raise ValidationError(f"Parameter '{name}' must be a number, got {value!r}", field=name)
        try:
            number = float(value)
        except (TypeError, ValueError):
            raise ValidationError(f"Parameter '{name}' must be a number, got {value!r}", field=name) from None
        if not math.isfinite(number):
            raise ValidationError(f"Parameter '{name}' must be a finite number, got {value!r}", field=name)
        return number

    if target in (list, dict):
        if isinstance(value, str):
            try:
                value = json.loads(value)
            except json.JSONDecodeError as e:
                raise ValidationError(f"Parameter '{name}' is not valid JSON: {e}", field=name) from None
        if not isinstance(value, target):
            kind = "an array" if target is list else "an object"
            raise ValidationError(f"Parameter '{name}' must be {kind}", field=name)
        return value

    return value
