"""
Image Generation Nodes

Text-to-image and image-to-image models behind /api/v1/jobs/createTask.
Models that accept optional input images switch to their image-to-image
variant when any URL is supplied.
"""

from dataclasses import dataclass
from typing import Any, Dict

from ..client import Request
from ..params import check_count, split_list
from ..schema import callback_param, param
from .base import KieNode, create_task

SEEDREAM_ASPECT_RATIOS = ("1:1", "4:3", "3:4", "16:9", "9:16", "2:3", "3:2", "21:9")
SEEDREAM_QUALITIES = ("basic", "high")

MAX_INPUT_IMAGES = 8


# =============================================================================
# Flux-2 Pro
# =============================================================================


@dataclass
class Flux2ProParams:
    prompt: str = param(required=True, description="Text description for image generation (3-5000 characters)")
    input_urls: str = param("", description="Optional comma-separated input image URLs (1-8). Empty for text-to-image.")
    aspect_ratio: str = param("1:1", options=("1:1", "4:3", "3:4", "16:9", "9:16", "3:2", "2:3", "auto"))
    resolution: str = param("1K", options=("1K", "2K"))
    call_back_url: str = callback_param()


class Flux2ProNode(KieNode):
    name = "flux2Pro"
    display_name = "Kie Flux-2 Pro"
    description = "Generate or transform images using Flux-2 Pro models"
    Params = Flux2ProParams

    def build(self, params: Flux2ProParams, item: Dict[str, Any]) -> Request:
        input_urls = split_list(params.input_urls)
        check_count(input_urls, "input image URLs", maximum=MAX_INPUT_IMAGES, field="inputUrls")

        input_data = {"prompt": params.prompt, "aspect_ratio": params.aspect_ratio, "resolution": params.resolution}
        if input_urls:
            input_data["input_urls"] = input_urls
            model = "flux-2/pro-image-to-image"
        else:
            model = "flux-2/pro-text-to-image"
        return create_task(model, input_data, params.call_back_url)


# =============================================================================
# Google Nano Banana Pro
# =============================================================================


@dataclass
class NanoBananaProParams:
    prompt: str = param(required=True, description="Text description for image generation or modification")
    image_input: str = param("", description="Optional comma-separated input image URLs. Empty for text-to-image.")
    aspect_ratio: str = param("1:1", options=("1:1", "9:16", "16:9", "4:3", "3:4"))
    resolution: str = param("1K", options=("1K", "2K", "4K"))
    output_format: str = param("png", options=("png", "jpeg", "webp"))
    call_back_url: str = callback_param()


class NanoBananaProNode(KieNode):
    name = "googleNanoBananaPro"
    display_name = "Kie Google Nano Banana Pro"
    description = "Image generation using Google's Nano Banana Pro Image-to-Image model"
    Params = NanoBananaProParams

    def build(self, params: NanoBananaProParams, item: Dict[str, Any]) -> Request:
        image_input = split_list(params.image_input)
        check_count(image_input, "input images", maximum=MAX_INPUT_IMAGES, field="imageInput")

        input_data = {
            "prompt": params.prompt,
            "aspect_ratio": params.aspect_ratio,
            "resolution": params.resolution,
            "output_format": params.output_format,
        }
        if image_input:
            input_data["image_input"] = image_input
        return create_task("nano-banana-pro", input_data, params.call_back_url)


# =============================================================================
# Seedream 4.5
# =============================================================================


@dataclass
class SeedreamParams:
    prompt: str = param(required=True, description="Text prompt for image generation or editing")
    image_urls: str = param("", description="Optional comma-separated image URLs; switches to the edit model")
    aspect_ratio: str = param("1:1", options=SEEDREAM_ASPECT_RATIOS)
    quality: str = param("basic", options=SEEDREAM_QUALITIES)
    call_back_url: str = callback_param()


@dataclass
class SeedreamTextToImageParams:
    prompt: str = param(required=True, description="Text prompt for image generation")
    aspect_ratio: str = param("1:1", options=SEEDREAM_ASPECT_RATIOS)
    quality: str = param("basic", options=SEEDREAM_QUALITIES)
    call_back_url: str = callback_param()


@dataclass
class SeedreamEditImageParams:
    prompt: str = param(required=True, description="Text prompt describing the edit")
    image_urls: str = param(required=True, description="Comma-separated URLs of the images to edit")
    aspect_ratio: str = param("1:1", options=SEEDREAM_ASPECT_RATIOS)
    quality: str = param("basic", options=SEEDREAM_QUALITIES)
    call_back_url: str = callback_param()


def _seedream_input(params) -> Dict[str, Any]:
    return {"prompt": params.prompt, "aspect_ratio": params.aspect_ratio, "quality": params.quality}


class SeedreamNode(KieNode):
    name = "seedream"
    display_name = "Kie Seedream"
    description = "Generate or edit images with Seedream 4.5"
    Params = SeedreamParams

    def build(self, params: SeedreamParams, item: Dict[str, Any]) -> Request:
        image_urls = split_list(params.image_urls)
        input_data = _seedream_input(params)
        if image_urls:
            input_data["image_urls"] = image_urls
            model = "seedream/4.5-edit"
        else:
            model = "seedream/4.5-text-to-image"
        return create_task(model, input_data, params.call_back_url)


class SeedreamTextToImageNode(KieNode):
    name = "seedreamTextToImage"
    display_name = "Seedream Text to Image"
    description = "Generate images from text with Seedream 4.5"
    Params = SeedreamTextToImageParams

    def build(self, params: SeedreamTextToImageParams, item: Dict[str, Any]) -> Request:
        return create_task("seedream/4.5-text-to-image", _seedream_input(params), params.call_back_url)


class SeedreamEditImageNode(KieNode):
    name = "seedreamEditImage"
    display_name = "Seedream Edit Image"
    description = "Edit images with Seedream 4.5"
    Params = SeedreamEditImageParams

    def build(self, params: SeedreamEditImageParams, item: Dict[str, Any]) -> Request:
        image_urls = split_list(params.image_urls)
        check_count(image_urls, "image URL", minimum=1, field="imageUrls")
        input_data = {"prompt": params.prompt, "image_urls": image_urls}
        input_data.update(_seedream_input(params))
        return create_task("seedream/4.5-edit", input_data, params.call_back_url)


# =============================================================================
# Z-Image
# =============================================================================


@dataclass
class ZImageParams:
    prompt: str = param(required=True, description="Text description to generate an image")
    aspect_ratio: str = param("1:1", options=("1:1", "4:3", "3:4", "16:9", "9:16"))
    call_back_url: str = callback_param()


class ZImageNode(KieNode):
    name = "zImage"
    display_name = "Kie Z-Image"
    description = "Generate images using text prompts with Kie.ai Z-Image"
    Params = ZImageParams

    def build(self, params: ZImageParams, item: Dict[str, Any]) -> Request:
        input_data = {"prompt": params.prompt, "aspect_ratio": params.aspect_ratio}
        return create_task("z-image", input_data, params.call_back_url)


# =============================================================================
# Image Upscaler
# =============================================================================


@dataclass
class ImageUpscalerParams:
    image_url: str = param(required=True, description="URL of the image to upscale")
    service: str = param("topaz", options=("topaz", "recraft"))
    upscale_factor: str = param("2", options=("1", "2", "4", "8"), description="Topaz only")
    call_back_url: str = callback_param()


class ImageUpscalerNode(KieNode):
    name = "imageUpscaler"
    display_name = "Kie Image Upscaler"
    description = "Upscale images with Topaz or Recraft Crisp"
    Params = ImageUpscalerParams

    def build(self, params: ImageUpscalerParams, item: Dict[str, Any]) -> Request:
        if params.service == "topaz":
            return create_task(
                "topaz/image-upscale",
                {"image_url": params.image_url, "upscale_factor": params.upscale_factor},
                params.call_back_url,
            )
        return create_task("recraft/crisp-upscale", {"image": params.image_url}, params.call_back_url)
