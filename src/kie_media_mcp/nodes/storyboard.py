"""
Sora 2 Pro Storyboard

Multi-shot video generation. Shots are given either as form fields (scene +
duration per shot, validated here) or as a raw JSON input object passed
through after a structural check.

Shot durations must add up to the selected video duration (n_frames).
"""

import math
from dataclasses import dataclass
from typing import Any, Dict, List

from ..client import Request
from ..errors import ValidationError
from ..params import check_duration_sum
from ..schema import callback_param, param
from ..types import Shot
from .base import KieNode, create_task

MODEL = "sora-2-pro-storyboard"

MAX_SHOTS = 10
MIN_SHOT_DURATION = 0.1
MAX_SHOT_DURATION = 15

DEFAULT_JSON_INPUT = {
    "shots": [
        {"Scene": "A cute fluffy kitten wearing headphones, sitting at a cozy table with cake", "duration": 7.5},
        {"Scene": "The same kitten, cake finished, licking lips with satisfied smile", "duration": 7.5},
    ],
    "n_frames": "15",
    "image_urls": ["https://example.com/image.jpg"],
    "aspect_ratio": "landscape",
}


@dataclass
class StoryboardParams:
    input_mode: str = param("form", options=("form", "json"))
    n_frames: str = param("15", description="Total video duration in seconds (10, 15, or 25)")
    image_url: str = param("", description="Optional source image URL (JPEG, PNG, WebP, max 10MB)")
    aspect_ratio: str = param("landscape", options=("landscape", "portrait"))
    shots: List[Dict[str, Any]] = param([], description='Shots as [{"scene", "duration"}], 1-10 shots of 0.1-15s each')
    json_input: Dict[str, Any] = param(DEFAULT_JSON_INPUT, description="Complete storyboard input, JSON mode only")
    call_back_url: str = callback_param()


def _check_shot_count(shots: List[Any]) -> None:
    if not shots:
        raise ValidationError("At least one shot is required", field="shots")
    if len(shots) > MAX_SHOTS:
        raise ValidationError(f"Maximum {MAX_SHOTS} shots allowed", field="shots")


def format_shots(shots: List[Dict[str, Any]]) -> List[Shot]:
    """Validate form-mode shots and convert them to the API's {Scene, duration} shape."""
    _check_shot_count(shots)

    formatted: List[Shot] = []
    for shot in shots:
        if not isinstance(shot, dict):
            raise ValidationError("All shots must have a scene description", field="shots")
        scene = str(shot.get("scene") or shot.get("Scene") or "").strip()
        if not scene:
            raise ValidationError("All shots must have a scene description", field="shots")
        try:
            duration = float(shot.get("duration", 5))
        except (TypeError, ValueError):
            raise ValidationError("Shot duration must be between 0.1 and 15 seconds", field="shots") from None
        if not math.isfinite(duration) or duration < MIN_SHOT_DURATION or duration > MAX_SHOT_DURATION:
            raise ValidationError("Shot duration must be between 0.1 and 15 seconds", field="shots")
        formatted.append({"Scene": scene, "duration": duration})
    return formatted


def check_json_input(input_data: Any) -> Dict[str, Any]:
    """Structural check on a JSON-mode storyboard; the object is sent as-is."""
    if not isinstance(input_data, dict):
        raise ValidationError("Invalid JSON input", field="jsonInput")
    if not isinstance(input_data.get("shots"), list):
        raise ValidationError('JSON must include "shots" array', field="jsonInput")
    if not input_data.get("n_frames"):
        raise ValidationError('JSON must include "n_frames"', field="jsonInput")
    if not input_data.get("aspect_ratio"):
        raise ValidationError('JSON must include "aspect_ratio"', field="jsonInput")
    _check_shot_count(input_data["shots"])
    return input_data


class Sora2ProStoryboardNode(KieNode):
    name = "sora2ProStoryboard"
    display_name = "Kie Sora 2 Pro Storyboard"
    description = "Generate multi-shot storyboard videos with Sora 2 Pro"
    Params = StoryboardParams

    def build(self, params: StoryboardParams, item: Dict[str, Any]) -> Request:
        if params.input_mode == "json":
            return create_task(MODEL, check_json_input(params.json_input), params.call_back_url)

        formatted = format_shots(params.shots)
        check_duration_sum((shot["duration"] for shot in formatted), params.n_frames)

        input_data: Dict[str, Any] = {
            "shots": formatted,
            "n_frames": params.n_frames,
            "aspect_ratio": params.aspect_ratio,
        }
        if params.image_url.strip():
            input_data["image_urls"] = [params.image_url]
        return create_task(MODEL, input_data, params.call_back_url)
