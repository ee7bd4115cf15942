"""
Parameter Checks

Input checks shared by the nodes. Each one raises ValidationError with a
message meant for the end user.
"""

import math
import re
import time
import uuid
from typing import Iterable, List, Optional, Sequence

from .errors import ValidationError

# Allowed extensions when inferring a filename from a URL.
URL_EXTENSIONS = frozenset(
    ["jpg", "jpeg", "png", "gif", "webp", "svg", "mp4", "mov", "avi", "mp3", "wav", "pdf", "doc", "docx"]
)

MIME_EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/png": "png",
    "image/gif": "gif",
    "image/webp": "webp",
    "video/mp4": "mp4",
    "audio/mp3": "mp3",
    "audio/mpeg": "mp3",
    "application/pdf": "pdf",
}

# Shot durations may drift by float rounding; anything within this passes.
DURATION_TOLERANCE = 0.1

_DATA_URI_RE = re.compile(r"data:([^;]+);")


def split_list(value: Optional[str]) -> List[str]:
    """Split a comma-separated string into trimmed, non-empty entries."""
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]


def require_value(value, name: str) -> None:
    """Required-for-this-operation check on a parameter that has no schema-level requirement."""
    if not _present(value):
        raise ValidationError(f"Missing required parameter: {name}", field=name)


def check_count(
    values: Sequence,
    label: str,
    minimum: int = 0,
    maximum: Optional[int] = None,
    field: Optional[str] = None,
) -> None:
    """Fail unless minimum <= len(values) <= maximum."""
    count = len(values)
    if count < minimum:
        raise ValidationError(f"At least {minimum} {label} required, got {count}", field=field)
    if maximum is not None and count > maximum:
        raise ValidationError(f"Maximum {maximum} {label} allowed, got {count}", field=field)


def require_exactly_one(name_a: str, value_a, name_b: str, value_b) -> None:
    """Exactly one of two optional inputs must be present."""
    has_a = _present(value_a)
    has_b = _present(value_b)
    if not has_a and not has_b:
        raise ValidationError(f"Either {name_a} or {name_b} must be provided")
    if has_a and has_b:
        raise ValidationError(f"Cannot use both {name_a} and {name_b} together. Please choose one method.")


def check_duration_sum(durations: Iterable[float], target) -> float:
    """
    Check that durations add up to target within DURATION_TOLERANCE.

    Args:
        durations: Per-shot durations in seconds.
        target: Total duration, number or numeric string ("15").

    Returns:
        The summed duration.
    """
    try:
        target_duration = float(target)
    except (TypeError, ValueError):
        raise ValidationError("Video duration must be a valid number", field="n_frames") from None
    if not math.isfinite(target_duration):
        raise ValidationError("Video duration must be a valid number", field="n_frames")

    total = sum(durations)
    difference = abs(total - target_duration)
    if difference > DURATION_TOLERANCE:
        raise ValidationError(
            f"Total shot durations ({_fmt(total)}s) must equal selected video duration "
            f"({_fmt(target_duration)}s). Current difference: {difference:.1f}s",
            field="shots",
        )
    return total


def require_prefix(url: str, prefix: str, message: str, field: Optional[str] = None) -> None:
    """Fail unless url starts with prefix."""
    if not (url or "").startswith(prefix):
        raise ValidationError(message, field=field)


def extension_from_url(url: str, allowed: Iterable[str] = URL_EXTENSIONS, default: str = "jpg") -> str:
    """Infer a file extension from the last dot-segment of a URL, ignoring the query."""
    parts = url.split("?")[0].split(".")
    if len(parts) > 1:
        ext = parts[-1].lower()
        if ext in allowed:
            return ext
    return default


def extension_from_data_uri(data: str, default: str = "bin") -> str:
    """Infer a file extension from a data URI's declared MIME type."""
    match = _DATA_URI_RE.search(data or "")
    if match:
        return MIME_EXTENSIONS.get(match.group(1), default)
    return default


def synthesize_filename(extension: str) -> str:
    """Build file-<epoch ms>-<8 random chars>.<extension>."""
    timestamp = int(time.time() * 1000)
    token = uuid.uuid4().hex[:8]
    return f"file-{timestamp}-{token}.{extension}"


def _present(value) -> bool:
    if isinstance(value, str):
        return bool(value.strip())
    if isinstance(value, (list, tuple)):
        return len(value) > 0
    return value is not None


def _fmt(value: float) -> str:
    """15.0 -> '15', 7.5 -> '7.5'."""
    return f"{value:g}"
