"""
Veo 3 Video Generation

Veo has its own endpoints rather than createTask:
    generateVideo  POST /api/v1/veo/generate-video
    extendVideo    POST /api/v1/veo/extend-video
    get1080p       GET  /api/v1/veo/get-1080p-video?taskId=&index=
    get4k          POST /api/v1/veo/get-4k-video
"""

from dataclasses import dataclass
from typing import Any, Dict

from ..client import Request
from ..params import check_count, require_value, split_list
from ..schema import callback_param, param
from .base import KieNode

GENERATE_PATH = "/api/v1/veo/generate-video"
EXTEND_PATH = "/api/v1/veo/extend-video"
GET_1080P_PATH = "/api/v1/veo/get-1080p-video"
GET_4K_PATH = "/api/v1/veo/get-4k-video"

GENERATION_TYPES = ("auto", "TEXT_2_VIDEO", "FIRST_AND_LAST_FRAMES_2_VIDEO", "REFERENCE_2_VIDEO")
MIN_SEED = 10000
MAX_SEED = 99999


@dataclass
class Veo3Params:
    operation: str = param("generateVideo", options=("generateVideo", "extendVideo", "get1080p", "get4k"))

    # generateVideo
    prompt: str = param("", description="Text prompt describing the video")
    image_urls: str = param("", description="Optional comma-separated image URLs (max 2) for image-to-video")
    model: str = param("veo3_fast", options=("veo3", "veo3_fast"))
    generation_type: str = param("auto", options=GENERATION_TYPES)
    aspect_ratio: str = param("16:9", options=("16:9", "9:16", "1:1"))
    seeds: int = param(MIN_SEED, minimum=MIN_SEED, maximum=MAX_SEED)
    watermark: str = param("", description="Optional watermark text")
    enable_translation: bool = param(True, description="Translate non-English prompts to English")
    enable_fallback: bool = param(False, description="Fall back to another model when content is rejected")

    # extendVideo
    task_id_extend: str = param("", description="Task ID of the video to extend")
    prompt_extend: str = param("", description="Prompt for the extension")
    seeds_extend: int = param(MIN_SEED, minimum=MIN_SEED, maximum=MAX_SEED)
    watermark_extend: str = param("")

    # get1080p / get4k
    task_id_1080p: str = param("", description="Task ID of a 16:9 generation")
    index_1080p: int = param(0, minimum=0, description="Video index to retrieve")
    task_id_4k: str = param("", description="Task ID of the generation to upgrade")
    index_4k: int = param(0, minimum=0, description="Video index to upgrade")

    call_back_url: str = callback_param()


class Veo3Node(KieNode):
    name = "veo3"
    display_name = "Kie Veo3"
    description = "Generate, extend and upscale videos with Google Veo 3"
    Params = Veo3Params

    def build(self, params: Veo3Params, item: Dict[str, Any]) -> Request:
        if params.operation == "extendVideo":
            return self._extend(params)
        if params.operation == "get1080p":
            require_value(params.task_id_1080p, "taskId1080p")
            return Request(
                "GET", GET_1080P_PATH, query={"taskId": params.task_id_1080p, "index": params.index_1080p}
            )
        if params.operation == "get4k":
            require_value(params.task_id_4k, "taskId4k")
            body = {"taskId": params.task_id_4k, "index": params.index_4k}
            return Request("POST", GET_4K_PATH, body=_with_callback(body, params.call_back_url))
        return self._generate(params)

    def _generate(self, params: Veo3Params) -> Request:
        require_value(params.prompt, "prompt")
        body: Dict[str, Any] = {
            "prompt": params.prompt,
            "model": params.model,
            "aspect_ratio": params.aspect_ratio,
            "seeds": params.seeds,
            "enableTranslation": params.enable_translation,
            "enableFallback": params.enable_fallback,
        }
        if params.generation_type != "auto":
            body["generationType"] = params.generation_type

        image_urls = split_list(params.image_urls)
        check_count(image_urls, "image URLs", maximum=2, field="imageUrls")
        if image_urls:
            body["imageUrls"] = image_urls
        if params.watermark:
            body["watermark"] = params.watermark
        return Request("POST", GENERATE_PATH, body=_with_callback(body, params.call_back_url))

    def _extend(self, params: Veo3Params) -> Request:
        require_value(params.task_id_extend, "taskIdExtend")
        require_value(params.prompt_extend, "promptExtend")
        body: Dict[str, Any] = {
            "taskId": params.task_id_extend,
            "prompt": params.prompt_extend,
            "seeds": params.seeds_extend,
        }
        if params.watermark_extend:
            body["watermark"] = params.watermark_extend
        return Request("POST", EXTEND_PATH, body=_with_callback(body, params.call_back_url))


def _with_callback(body: Dict[str, Any], callback_url: str) -> Dict[str, Any]:
    if callback_url:
        body["callBackUrl"] = callback_url
    return body
