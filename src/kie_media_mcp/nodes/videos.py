"""
Video Generation Nodes

Text-to-video, image-to-video and video post-processing models behind
/api/v1/jobs/createTask. Veo 3 and the Sora storyboard live in their own
modules.
"""

from dataclasses import dataclass
from typing import Any, Dict

from ..client import Request
from ..errors import ValidationError
from ..params import check_count, require_exactly_one, require_prefix, require_value, split_list
from ..schema import callback_param, param
from .base import KieNode, create_task

VIDEO_OPERATIONS = ("textToVideo", "imageToVideo")

SORA_VIDEO_PREFIX = "https://sora.chatgpt.com/"
MAX_CHARACTER_IDS = 5


# =============================================================================
# Grok Imagine
# =============================================================================


@dataclass
class GrokImagineParams:
    prompt: str = param(required=True, description="Text description of desired video motion (max 5000 characters)")
    operation: str = param("textToVideo", options=VIDEO_OPERATIONS)
    image_urls: str = param("", description="Comma-separated image URLs. Cannot be used together with Task ID.")
    task_id: str = param("", description="Task ID of a Grok image generation. Cannot be used together with Image URLs.")
    index: int = param(0, minimum=0, maximum=5, description="Which image of the referenced task to animate")
    mode: str = param("normal", options=("normal", "fun", "spicy"))
    aspect_ratio: str = param("2:3", options=("2:3", "3:2", "1:1", "16:9", "9:16"), description="Text-to-video only")
    duration: str = param("6", options=("6", "10"))
    call_back_url: str = callback_param()


class GrokImagineNode(KieNode):
    name = "grokImagine"
    display_name = "Kie Grok Imagine"
    description = "Generate videos from text or images with Grok Imagine"
    Params = GrokImagineParams

    def build(self, params: GrokImagineParams, item: Dict[str, Any]) -> Request:
        input_data: Dict[str, Any] = {"prompt": params.prompt, "mode": params.mode, "duration": params.duration}

        if params.operation == "textToVideo":
            input_data["aspect_ratio"] = params.aspect_ratio
            return create_task("grok-imagine/text-to-video", input_data, params.call_back_url)

        require_exactly_one("Image URLs", params.image_urls, "Task ID", params.task_id)
        if params.image_urls.strip():
            image_urls = split_list(params.image_urls)
            if not image_urls:
                raise ValidationError("At least one image URL is required when using Image URLs", field="imageUrls")
            input_data["image_urls"] = image_urls
        else:
            input_data["task_id"] = params.task_id.strip()
            input_data["index"] = params.index
        return create_task("grok-imagine/image-to-video", input_data, params.call_back_url)


# =============================================================================
# Hailuo 02 Pro
# =============================================================================


@dataclass
class HailuoParams:
    prompt: str = param(required=True, description="Detailed text description for video generation")
    operation: str = param("textToVideo", options=VIDEO_OPERATIONS)
    image_url: str = param("", description="Source image URL, image-to-video only")
    end_image_url: str = param("", description="Optional last frame, image-to-video only")
    prompt_optimizer: bool = param(True)
    call_back_url: str = callback_param()


class HailuoNode(KieNode):
    name = "hailuo"
    display_name = "Kie Hailuo"
    description = "Generate videos with Hailuo 02 Pro"
    Params = HailuoParams

    def build(self, params: HailuoParams, item: Dict[str, Any]) -> Request:
        input_data: Dict[str, Any] = {"prompt": params.prompt, "prompt_optimizer": params.prompt_optimizer}

        if params.operation == "textToVideo":
            return create_task("hailuo/02-text-to-video-pro", input_data, params.call_back_url)

        require_value(params.image_url, "imageUrl")
        input_data["image_url"] = params.image_url
        if params.end_image_url:
            input_data["end_image_url"] = params.end_image_url
        return create_task("hailuo/02-image-to-video-pro", input_data, params.call_back_url)


# =============================================================================
# Infinitalk
# =============================================================================


@dataclass
class InfinitalkParams:
    image_url: str = param(required=True, description="Portrait image to animate")
    audio_url: str = param(required=True, description="Speech audio driving the animation")
    prompt: str = param(required=True, description="Text description of the desired animation style")
    resolution: str = param("720p", options=("480p", "720p", "1080p"))
    call_back_url: str = callback_param()


class InfinitalkNode(KieNode):
    name = "infinitalk"
    display_name = "Kie Infinitalk"
    description = "Generate talking-head videos from an image and audio"
    Params = InfinitalkParams

    def build(self, params: InfinitalkParams, item: Dict[str, Any]) -> Request:
        input_data = {
            "image_url": params.image_url,
            "audio_url": params.audio_url,
            "prompt": params.prompt,
            "resolution": params.resolution,
        }
        return create_task("infinitalk/from-audio", input_data, params.call_back_url)


# =============================================================================
# Seedance 1.5 Pro
# =============================================================================


@dataclass
class SeedanceParams:
    prompt: str = param(required=True, description="Text description of the video")
    input_urls: str = param("", description="Optional comma-separated input image URLs (0-2)")
    duration: int = param(8, minimum=1, maximum=30, description="Video length in seconds")
    aspect_ratio: str = param("1:1", options=("1:1",))
    resolution: str = param("720p", options=("720p",))
    fixed_lens: bool = param(False)
    generate_audio: bool = param(False)
    call_back_url: str = callback_param()


class SeedanceNode(KieNode):
    name = "seedance"
    display_name = "Kie Seedance"
    description = "Generate videos with ByteDance Seedance 1.5 Pro"
    Params = SeedanceParams

    def build(self, params: SeedanceParams, item: Dict[str, Any]) -> Request:
        input_urls = split_list(params.input_urls)
        check_count(input_urls, "input images", maximum=2, field="inputUrls")

        input_data: Dict[str, Any] = {
            "prompt": params.prompt,
            "aspect_ratio": params.aspect_ratio,
            "resolution": params.resolution,
            "duration": str(params.duration),
            "fixed_lens": params.fixed_lens,
            "generate_audio": params.generate_audio,
        }
        if input_urls:
            input_data["input_urls"] = input_urls
        return create_task("bytedance/seedance-1.5-pro", input_data, params.call_back_url)


# =============================================================================
# Sora 2
# =============================================================================


@dataclass
class Sora2CharactersParams:
    character_file_url: str = param(required=True, description="Video of the character, 1-4 seconds")
    character_prompt: str = param("", description="Optional description of the character")
    safety_instruction: str = param("", description="Optional safety guidance for the character")
    call_back_url: str = callback_param()


class Sora2CharactersNode(KieNode):
    name = "sora2Characters"
    display_name = "Kie Sora 2 Characters"
    description = "Create reusable Sora 2 characters; the result carries a character_id"
    Params = Sora2CharactersParams

    def build(self, params: Sora2CharactersParams, item: Dict[str, Any]) -> Request:
        input_data: Dict[str, Any] = {"character_file_url": [params.character_file_url]}
        if params.character_prompt:
            input_data["character_prompt"] = params.character_prompt
        if params.safety_instruction:
            input_data["safety_instruction"] = params.safety_instruction
        return create_task("sora-2-characters", input_data, params.call_back_url)


@dataclass
class Sora2ProParams:
    operation: str = param("textToVideo", options=VIDEO_OPERATIONS)
    prompt: str = param("", description="Text prompt, text-to-video only")
    image_urls: str = param("", description="Comma-separated image URLs, image-to-video only")
    prompt_image_to_video: str = param("", description="Optional prompt, image-to-video only")
    aspect_ratio: str = param("landscape", options=("landscape", "portrait"))
    n_frames: str = param("10", options=("10", "15"), description="Video length in seconds")
    size: str = param("high", options=("standard", "high"))
    remove_watermark: bool = param(False)
    character_id_list: str = param("", description="Comma-separated character IDs from Sora 2 Characters (max 5)")
    call_back_url: str = callback_param()


class Sora2ProNode(KieNode):
    name = "sora2Pro"
    display_name = "Kie Sora 2 Pro"
    description = "Generate videos with Sora 2 Pro"
    Params = Sora2ProParams

    def build(self, params: Sora2ProParams, item: Dict[str, Any]) -> Request:
        input_data: Dict[str, Any] = {
            "aspect_ratio": params.aspect_ratio,
            "n_frames": params.n_frames,
            "size": params.size,
            "remove_watermark": params.remove_watermark,
        }

        if params.operation == "textToVideo":
            require_value(params.prompt, "prompt")
            model = "sora-2-pro-text-to-video"
            input_data["prompt"] = params.prompt
        else:
            model = "sora-2-pro-image-to-video"
            image_urls = split_list(params.image_urls)
            check_count(image_urls, "image URL", minimum=1, field="imageUrls")
            input_data["image_urls"] = image_urls
            if params.prompt_image_to_video:
                input_data["prompt"] = params.prompt_image_to_video

        character_ids = split_list(params.character_id_list)
        check_count(character_ids, "character IDs", maximum=MAX_CHARACTER_IDS, field="characterIdList")
        if character_ids:
            input_data["character_id_list"] = character_ids

        return create_task(model, input_data, params.call_back_url)


@dataclass
class SoraWatermarkRemoverParams:
    video_url: str = param(required=True, description="Sora 2 video URL (https://sora.chatgpt.com/...)")
    call_back_url: str = callback_param()


class SoraWatermarkRemoverNode(KieNode):
    name = "soraWatermarkRemover"
    display_name = "Kie Sora Watermark Remover"
    description = "Remove the watermark from Sora 2 videos"
    Params = SoraWatermarkRemoverParams

    def build(self, params: SoraWatermarkRemoverParams, item: Dict[str, Any]) -> Request:
        require_prefix(
            params.video_url,
            SORA_VIDEO_PREFIX,
            f"Video URL must be from OpenAI Sora 2 (must start with {SORA_VIDEO_PREFIX})",
            field="videoUrl",
        )
        return create_task("sora-watermark-remover", {"video_url": params.video_url}, params.call_back_url)


# =============================================================================
# Video Upscaler
# =============================================================================


@dataclass
class VideoUpscalerParams:
    video_url: str = param(required=True, description="URL of the video to upscale")
    upscale_factor: str = param("2", options=("1", "2", "4"))
    call_back_url: str = callback_param()


class VideoUpscalerNode(KieNode):
    name = "videoUpscaler"
    display_name = "Kie Video Upscaler"
    description = "Upscale videos with Topaz"
    Params = VideoUpscalerParams

    def build(self, params: VideoUpscalerParams, item: Dict[str, Any]) -> Request:
        input_data = {"video_url": params.video_url, "upscale_factor": params.upscale_factor}
        return create_task("topaz/video-upscale", input_data, params.call_back_url)


# =============================================================================
# Wan 2.6
# =============================================================================


@dataclass
class Wan26Params:
    prompt: str = param(required=True, description="Text description of the video")
    operation: str = param("textToVideo", options=VIDEO_OPERATIONS + ("videoToVideo",))
    image_url: str = param("", description="Source image URL, image-to-video only")
    video_urls: str = param("", description="Comma-separated source video URLs (1-3), video-to-video only")
    duration: str = param("5", options=("5", "10", "15"))
    resolution: str = param("1080p", options=("720p", "1080p"))
    call_back_url: str = callback_param()


class Wan26Node(KieNode):
    name = "wan26"
    display_name = "Kie Wan 2.6"
    description = "Generate videos with Wan 2.6"
    Params = Wan26Params

    def build(self, params: Wan26Params, item: Dict[str, Any]) -> Request:
        input_data: Dict[str, Any] = {
            "prompt": params.prompt,
            "duration": params.duration,
            "resolution": params.resolution,
        }

        if params.operation == "textToVideo":
            model = "wan/2-6-text-to-video"
        elif params.operation == "imageToVideo":
            require_value(params.image_url, "imageUrl")
            model = "wan/2-6-image-to-video"
            input_data["image_urls"] = [params.image_url]
        else:
            video_urls = split_list(params.video_urls)
            check_count(video_urls, "video URLs", minimum=1, maximum=3, field="videoUrls")
            model = "wan/2-6-video-to-video"
            input_data["video_urls"] = video_urls

        return create_task(model, input_data, params.call_back_url)
