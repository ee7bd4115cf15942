"""Qwen image generation, transformation and editing."""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..client import Request
from ..params import require_value
from ..schema import callback_param, param, parse_params
from .base import KieNode, create_task

IMAGE_SIZES = ("square", "square_hd", "portrait_4_3", "portrait_16_9", "landscape_4_3", "landscape_16_9")

# (num_inference_steps, guidance_scale) when the advanced options leave them unset
EDIT_DEFAULTS = (25, 4)
GENERATE_DEFAULTS = (30, 2.5)


@dataclass
class QwenAdvancedOptions:
    num_inference_steps: Optional[int] = param(minimum=2, maximum=250)
    guidance_scale: Optional[float] = param(minimum=0, maximum=20)
    seed: int = param(-1, description="-1 for a random seed")
    acceleration: Optional[str] = param(options=("none", "regular", "high"))
    output_format: Optional[str] = param(options=("png", "jpeg"))
    enable_safety_checker: Optional[bool] = param()
    call_back_url: str = callback_param()


@dataclass
class QwenParams:
    prompt: str = param(required=True, description="Text prompt for the image")
    operation: str = param("generateTransform", options=("generateTransform", "edit"))
    image_url: str = param("", description="Source image; required for edit, switches generate to image-to-image")
    strength: float = param(0.8, minimum=0, maximum=1, description="Image-to-image denoising strength")
    image_size: str = param("square_hd", options=IMAGE_SIZES)
    negative_prompt: str = param("")
    advanced_options: Dict[str, Any] = param({})


class QwenNode(KieNode):
    name = "qwen"
    display_name = "Kie Qwen"
    description = "Generate, transform or edit images with Qwen models"
    Params = QwenParams

    def build(self, params: QwenParams, item: Dict[str, Any]) -> Request:
        advanced = parse_params(QwenAdvancedOptions, params.advanced_options)
        input_data: Dict[str, Any] = {"prompt": params.prompt, "image_size": params.image_size}

        if params.operation == "edit":
            require_value(params.image_url, "imageUrl")
            model = "qwen/image-edit"
            input_data["image_url"] = params.image_url
            steps, guidance = EDIT_DEFAULTS
        else:
            if params.image_url:
                model = "qwen/image-to-image"
                input_data["image_url"] = params.image_url
                input_data["strength"] = params.strength
            else:
                model = "qwen/text-to-image"
            steps, guidance = GENERATE_DEFAULTS

        # zero counts as unset, like a blank form field
        input_data["num_inference_steps"] = advanced.num_inference_steps or steps
        input_data["guidance_scale"] = advanced.guidance_scale or guidance

        if params.negative_prompt:
            input_data["negative_prompt"] = params.negative_prompt
        if advanced.seed and advanced.seed != -1:
            input_data["seed"] = advanced.seed
        if advanced.acceleration:
            input_data["acceleration"] = advanced.acceleration
        if advanced.output_format:
            input_data["output_format"] = advanced.output_format
        if advanced.enable_safety_checker is not None:
            input_data["enable_safety_checker"] = advanced.enable_safety_checker

        return create_task(model, input_data, advanced.call_back_url)
