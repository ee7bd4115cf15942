"""
Payload tests for every generation node.

Requests are built with preview(), so nothing is dispatched.
"""

import pytest

from kie_media_mcp.errors import NodeNotFoundError, ValidationError
from kie_media_mcp.nodes import NODES, get_node, list_nodes

CREATE_TASK = "/api/v1/jobs/createTask"


def build(name, **item):
    return get_node(name).preview(item)


def body(name, **item):
    request = build(name, **item)
    assert request.method == "POST"
    assert request.path == CREATE_TASK
    assert request.origin == "jobs"
    return request.body


class TestRegistry:
    def test_all_nodes_registered(self):
        assert set(NODES) == {
            "fileUpload", "kie", "flux2Pro", "googleNanoBananaPro", "grokImagine", "hailuo",
            "imageUpscaler", "infinitalk", "qwen", "seedance", "seedream", "seedreamTextToImage",
            "seedreamEditImage", "sora2Characters", "sora2Pro", "sora2ProStoryboard",
            "soraWatermarkRemover", "taskStatus", "jobLookup", "veo3", "videoUpscaler", "wan26", "zImage",
        }

    def test_unknown_node(self):
        with pytest.raises(NodeNotFoundError, match="Unknown node: nope"):
            get_node("nope")

    def test_list_sorted_with_descriptions(self):
        listed = list_nodes()
        assert [n["name"] for n in listed] == sorted(NODES)
        assert all(n["display_name"] for n in listed)

    @pytest.mark.parametrize("name", sorted(NODES))
    def test_describe_renders_schema(self, name):
        described = NODES[name].describe()
        assert described["name"] == name
        assert described["parameters"]["type"] == "object"


class TestCallback:
    def test_included_only_when_set(self):
        assert "callBackUrl" not in body("zImage", prompt="fox")
        assert body("zImage", prompt="fox", callBackUrl="https://hook.test")["callBackUrl"] == "https://hook.test"


class TestImageNodes:
    def test_flux_text_to_image(self):
        assert body("flux2Pro", prompt="a fox") == {
            "model": "flux-2/pro-text-to-image",
            "input": {"prompt": "a fox", "aspect_ratio": "1:1", "resolution": "1K"},
        }

    def test_flux_image_to_image(self):
        sent = body("flux2Pro", prompt="a fox", inputUrls="a.png, b.png", aspectRatio="auto")
        assert sent["model"] == "flux-2/pro-image-to-image"
        assert sent["input"]["input_urls"] == ["a.png", "b.png"]
        assert sent["input"]["aspect_ratio"] == "auto"

    def test_flux_too_many_inputs(self):
        urls = ",".join(f"https://x.test/{i}.png" for i in range(9))
        with pytest.raises(ValidationError, match="got 9"):
            build("flux2Pro", prompt="a fox", inputUrls=urls)

    def test_nano_banana(self):
        sent = body("googleNanoBananaPro", prompt="p", imageInput="a.png", resolution="4K", outputFormat="webp")
        assert sent == {
            "model": "nano-banana-pro",
            "input": {
                "prompt": "p",
                "aspect_ratio": "1:1",
                "resolution": "4K",
                "output_format": "webp",
                "image_input": ["a.png"],
            },
        }

    def test_nano_banana_omits_empty_images(self):
        assert "image_input" not in body("googleNanoBananaPro", prompt="p")["input"]

    def test_seedream_switches_to_edit(self):
        assert body("seedream", prompt="p")["model"] == "seedream/4.5-text-to-image"
        sent = body("seedream", prompt="p", imageUrls="a.png", quality="high")
        assert sent["model"] == "seedream/4.5-edit"
        assert sent["input"] == {"prompt": "p", "aspect_ratio": "1:1", "quality": "high", "image_urls": ["a.png"]}

    def test_seedream_text_to_image(self):
        assert body("seedreamTextToImage", prompt="p", aspectRatio="21:9") == {
            "model": "seedream/4.5-text-to-image",
            "input": {"prompt": "p", "aspect_ratio": "21:9", "quality": "basic"},
        }

    def test_seedream_edit_requires_image(self):
        with pytest.raises(ValidationError):
            build("seedreamEditImage", prompt="p", imageUrls=" , ")
        sent = body("seedreamEditImage", prompt="p", imageUrls="a.png,b.png")
        assert sent["input"]["image_urls"] == ["a.png", "b.png"]

    def test_seedream_rejects_unknown_ratio(self):
        with pytest.raises(ValidationError, match="Invalid value for aspect_ratio"):
            build("seedreamTextToImage", prompt="p", aspectRatio="5:4")

    def test_z_image(self):
        assert body("zImage", prompt="p", aspectRatio="16:9") == {
            "model": "z-image",
            "input": {"prompt": "p", "aspect_ratio": "16:9"},
        }

    def test_upscaler_topaz(self):
        assert body("imageUpscaler", imageUrl="https://x.test/a.png", upscaleFactor=4) == {
            "model": "topaz/image-upscale",
            "input": {"image_url": "https://x.test/a.png", "upscale_factor": "4"},
        }

    def test_upscaler_recraft_has_no_factor(self):
        assert body("imageUpscaler", imageUrl="https://x.test/a.png", service="recraft") == {
            "model": "recraft/crisp-upscale",
            "input": {"image": "https://x.test/a.png"},
        }


class TestQwen:
    def test_text_to_image_defaults(self):
        assert body("qwen", prompt="p") == {
            "model": "qwen/text-to-image",
            "input": {"prompt": "p", "image_size": "square_hd", "num_inference_steps": 30, "guidance_scale": 2.5},
        }

    def test_image_to_image_has_strength(self):
        sent = body("qwen", prompt="p", imageUrl="https://x.test/a.png", strength=0.4)
        assert sent["model"] == "qwen/image-to-image"
        assert sent["input"]["strength"] == 0.4
        assert sent["input"]["image_url"] == "https://x.test/a.png"

    def test_strength_must_be_finite(self):
        with pytest.raises(ValidationError, match="must be a finite number"):
            build("qwen", prompt="p", imageUrl="https://x.test/a.png", strength="nan")

    def test_edit_defaults_and_requires_image(self):
        with pytest.raises(ValidationError, match="imageUrl"):
            build("qwen", prompt="p", operation="edit")
        sent = body("qwen", prompt="p", operation="edit", imageUrl="https://x.test/a.png")
        assert sent["model"] == "qwen/image-edit"
        assert sent["input"]["num_inference_steps"] == 25
        assert sent["input"]["guidance_scale"] == 4
        assert "strength" not in sent["input"]

    def test_advanced_options(self):
        sent = body(
            "qwen",
            prompt="p",
            negativePrompt="blurry",
            advancedOptions={
                "numInferenceSteps": 50,
                "guidanceScale": 7.5,
                "seed": 42,
                "acceleration": "high",
                "outputFormat": "jpeg",
                "enableSafetyChecker": False,
                "callBackUrl": "https://hook.test",
            },
        )
        assert sent["callBackUrl"] == "https://hook.test"
        assert sent["input"] == {
            "prompt": "p",
            "image_size": "square_hd",
            "num_inference_steps": 50,
            "guidance_scale": 7.5,
            "negative_prompt": "blurry",
            "seed": 42,
            "acceleration": "high",
            "output_format": "jpeg",
            "enable_safety_checker": False,
        }

    @pytest.mark.parametrize("seed", [-1, 0])
    def test_random_seed_omitted(self, seed):
        assert "seed" not in body("qwen", prompt="p", advancedOptions={"seed": seed})["input"]

    def test_advanced_options_validated(self):
        with pytest.raises(ValidationError):
            build("qwen", prompt="p", advancedOptions={"numInferenceSteps": 1})


class TestVideoNodes:
    def test_grok_text_to_video(self):
        assert body("grokImagine", prompt="p") == {
            "model": "grok-imagine/text-to-video",
            "input": {"prompt": "p", "mode": "normal", "duration": "6", "aspect_ratio": "2:3"},
        }

    def test_grok_image_urls(self):
        sent = body("grokImagine", prompt="p", operation="imageToVideo", imageUrls="a.png, b.png")
        assert sent["model"] == "grok-imagine/image-to-video"
        assert sent["input"]["image_urls"] == ["a.png", "b.png"]
        assert "aspect_ratio" not in sent["input"]
        assert "task_id" not in sent["input"]

    def test_grok_task_reference(self):
        sent = body("grokImagine", prompt="p", operation="imageToVideo", taskId="task_9", index=3)
        assert sent["input"]["task_id"] == "task_9"
        assert sent["input"]["index"] == 3

    @pytest.mark.parametrize("extra", [{}, {"imageUrls": "a.png", "taskId": "task_9"}])
    def test_grok_exclusivity(self, extra):
        with pytest.raises(ValidationError):
            build("grokImagine", prompt="p", operation="imageToVideo", **extra)

    def test_grok_separator_only_urls_still_conflict_with_task_id(self):
        with pytest.raises(ValidationError, match="Cannot use both"):
            build("grokImagine", prompt="p", operation="imageToVideo", imageUrls=",", taskId="task_9")

    def test_grok_separator_only_urls(self):
        with pytest.raises(ValidationError, match="At least one image URL is required"):
            build("grokImagine", prompt="p", operation="imageToVideo", imageUrls=" , ")

    def test_grok_index_range(self):
        with pytest.raises(ValidationError):
            build("grokImagine", prompt="p", operation="imageToVideo", taskId="t", index=6)

    def test_hailuo(self):
        assert body("hailuo", prompt="p")["model"] == "hailuo/02-text-to-video-pro"
        sent = body("hailuo", prompt="p", operation="imageToVideo", imageUrl="a.png", endImageUrl="b.png")
        assert sent == {
            "model": "hailuo/02-image-to-video-pro",
            "input": {"prompt": "p", "prompt_optimizer": True, "image_url": "a.png", "end_image_url": "b.png"},
        }
        with pytest.raises(ValidationError):
            build("hailuo", prompt="p", operation="imageToVideo")

    def test_infinitalk(self):
        assert body("infinitalk", imageUrl="face.png", audioUrl="talk.mp3", prompt="p") == {
            "model": "infinitalk/from-audio",
            "input": {"image_url": "face.png", "audio_url": "talk.mp3", "prompt": "p", "resolution": "720p"},
        }

    def test_seedance(self):
        sent = body("seedance", prompt="p", inputUrls="a.png,b.png", duration=12, generateAudio=True)
        assert sent == {
            "model": "bytedance/seedance-1.5-pro",
            "input": {
                "prompt": "p",
                "aspect_ratio": "1:1",
                "resolution": "720p",
                "duration": "12",
                "fixed_lens": False,
                "generate_audio": True,
                "input_urls": ["a.png", "b.png"],
            },
        }

    def test_seedance_limits(self):
        with pytest.raises(ValidationError, match="Maximum 2 input images allowed, got 3"):
            build("seedance", prompt="p", inputUrls="a,b,c")
        with pytest.raises(ValidationError):
            build("seedance", prompt="p", duration=31)

    def test_seedance_offers_square_720p_only(self):
        with pytest.raises(ValidationError, match="Allowed: 1:1"):
            build("seedance", prompt="p", aspectRatio="16:9")
        with pytest.raises(ValidationError, match="Allowed: 720p"):
            build("seedance", prompt="p", resolution="1080p")

    def test_sora_characters(self):
        assert body("sora2Characters", characterFileUrl="https://x.test/c.mp4", characterPrompt="a cat") == {
            "model": "sora-2-characters",
            "input": {"character_file_url": ["https://x.test/c.mp4"], "character_prompt": "a cat"},
        }

    def test_sora_pro_text_to_video(self):
        assert body("sora2Pro", prompt="p", characterIdList="c1, c2") == {
            "model": "sora-2-pro-text-to-video",
            "input": {
                "aspect_ratio": "landscape",
                "n_frames": "10",
                "size": "high",
                "remove_watermark": False,
                "prompt": "p",
                "character_id_list": ["c1", "c2"],
            },
        }

    def test_sora_pro_image_to_video(self):
        sent = body("sora2Pro", operation="imageToVideo", imageUrls="a.png", promptImageToVideo="move")
        assert sent["model"] == "sora-2-pro-image-to-video"
        assert sent["input"]["image_urls"] == ["a.png"]
        assert sent["input"]["prompt"] == "move"
        with pytest.raises(ValidationError):
            build("sora2Pro", operation="imageToVideo", imageUrls="")

    def test_sora_pro_character_limit(self):
        with pytest.raises(ValidationError, match="got 6"):
            build("sora2Pro", prompt="p", characterIdList="1,2,3,4,5,6")

    def test_watermark_remover(self):
        url = "https://sora.chatgpt.com/p/s_abc"
        assert body("soraWatermarkRemover", videoUrl=url) == {
            "model": "sora-watermark-remover",
            "input": {"video_url": url},
        }

    def test_watermark_remover_rejects_other_hosts(self, fake_client):
        node = get_node("soraWatermarkRemover")

        result = node.run_item({"videoUrl": "https://example.com/v.mp4"}, 0, fake_client)

        assert result.error.message == (
            "Video URL must be from OpenAI Sora 2 (must start with https://sora.chatgpt.com/)"
        )
        fake_client.dispatch.assert_not_called()

    def test_video_upscaler(self):
        assert body("videoUpscaler", videoUrl="v.mp4") == {
            "model": "topaz/video-upscale",
            "input": {"video_url": "v.mp4", "upscale_factor": "2"},
        }
        with pytest.raises(ValidationError):
            build("videoUpscaler", videoUrl="v.mp4", upscaleFactor="8")

    def test_wan26_operations(self):
        assert body("wan26", prompt="p")["model"] == "wan/2-6-text-to-video"
        i2v = body("wan26", prompt="p", operation="imageToVideo", imageUrl="a.png", duration="10")
        assert i2v["input"] == {"prompt": "p", "duration": "10", "resolution": "1080p", "image_urls": ["a.png"]}
        v2v = body("wan26", prompt="p", operation="videoToVideo", videoUrls="a.mp4,b.mp4")
        assert v2v["model"] == "wan/2-6-video-to-video"
        assert v2v["input"]["video_urls"] == ["a.mp4", "b.mp4"]

    @pytest.mark.parametrize("urls", ["", "a,b,c,d"])
    def test_wan26_video_count(self, urls):
        with pytest.raises(ValidationError):
            build("wan26", prompt="p", operation="videoToVideo", videoUrls=urls)


class TestStoryboard:
    def shots(self, *durations):
        return [{"scene": f"scene {i}", "duration": d} for i, d in enumerate(durations)]

    def test_form_mode(self):
        sent = body("sora2ProStoryboard", shots=self.shots(7.5, 7.5), imageUrl="https://x.test/a.png")
        assert sent == {
            "model": "sora-2-pro-storyboard",
            "input": {
                "shots": [{"Scene": "scene 0", "duration": 7.5}, {"Scene": "scene 1", "duration": 7.5}],
                "n_frames": "15",
                "aspect_ratio": "landscape",
                "image_urls": ["https://x.test/a.png"],
            },
        }

    def test_duration_mismatch(self):
        with pytest.raises(ValidationError, match="Current difference: 5.0s"):
            build("sora2ProStoryboard", shots=self.shots(5, 5, 5), nFrames="10")

    def test_shot_rules(self):
        with pytest.raises(ValidationError, match="At least one shot is required"):
            build("sora2ProStoryboard", shots=[])
        with pytest.raises(ValidationError, match="Maximum 10 shots allowed"):
            build("sora2ProStoryboard", shots=self.shots(*[1.5] * 11))
        with pytest.raises(ValidationError, match="All shots must have a scene description"):
            build("sora2ProStoryboard", shots=[{"scene": " ", "duration": 15}])
        with pytest.raises(ValidationError, match="between 0.1 and 15 seconds"):
            build("sora2ProStoryboard", shots=self.shots(16))

    @pytest.mark.parametrize("n_frames", ["nan", "inf"])
    def test_total_duration_must_be_finite(self, n_frames):
        with pytest.raises(ValidationError, match="Video duration must be a valid number"):
            build("sora2ProStoryboard", shots=self.shots(5), nFrames=n_frames)

    @pytest.mark.parametrize("duration", ["nan", float("nan"), "inf"])
    def test_shot_duration_must_be_finite(self, duration):
        with pytest.raises(ValidationError, match="between 0.1 and 15 seconds"):
            build("sora2ProStoryboard", shots=self.shots(duration), nFrames="10")

    def test_json_mode_passes_input_through(self):
        storyboard = {"shots": [{"Scene": "a", "duration": 10}], "n_frames": "10", "aspect_ratio": "portrait"}
        sent = body("sora2ProStoryboard", inputMode="json", jsonInput=storyboard)
        assert sent["input"] == storyboard

    def test_json_mode_structure(self):
        with pytest.raises(ValidationError, match='"n_frames"'):
            build("sora2ProStoryboard", inputMode="json", jsonInput={"shots": [{}], "aspect_ratio": "landscape"})


class TestVeo3:
    def test_generate(self):
        request = build("veo3", prompt="waves", imageUrls="a.png", watermark="me", callBackUrl="https://hook.test")
        assert request.path == "/api/v1/veo/generate-video"
        assert request.body == {
            "prompt": "waves",
            "model": "veo3_fast",
            "aspect_ratio": "16:9",
            "seeds": 10000,
            "enableTranslation": True,
            "enableFallback": False,
            "imageUrls": ["a.png"],
            "watermark": "me",
            "callBackUrl": "https://hook.test",
        }

    def test_generation_type_omitted_when_auto(self):
        assert "generationType" not in build("veo3", prompt="p").body
        assert build("veo3", prompt="p", generationType="REFERENCE_2_VIDEO").body["generationType"] == (
            "REFERENCE_2_VIDEO"
        )

    def test_generate_limits(self):
        with pytest.raises(ValidationError, match="got 3"):
            build("veo3", prompt="p", imageUrls="a,b,c")
        with pytest.raises(ValidationError):
            build("veo3", prompt="p", seeds=9999)

    def test_extend(self):
        request = build("veo3", operation="extendVideo", taskIdExtend="v1", promptExtend="more", seedsExtend=12345)
        assert request.path == "/api/v1/veo/extend-video"
        assert request.body == {"taskId": "v1", "prompt": "more", "seeds": 12345}

    def test_get_1080p_is_query(self):
        request = build("veo3", operation="get1080p", taskId1080p="v1", index1080p=1)
        assert request.method == "GET"
        assert request.path == "/api/v1/veo/get-1080p-video"
        assert request.query == {"taskId": "v1", "index": 1}
        assert request.body is None

    def test_get_4k(self):
        request = build("veo3", operation="get4k", taskId4k="v1")
        assert request.path == "/api/v1/veo/get-4k-video"
        assert request.body == {"taskId": "v1", "index": 0}


class TestTaskNodes:
    def test_task_status_request(self):
        request = build("taskStatus", taskId="task_123")
        assert request.method == "GET"
        assert request.path == "/api/v1/jobs/recordInfo"
        assert request.query == {"taskId": "task_123"}

    def test_task_status_normalizes(self, fake_client):
        fake_client.dispatch.return_value = {
            "code": 200,
            "data": {"taskId": "task_123", "state": "success", "resultJson": '{"resultUrls": ["u"]}'},
        }

        result = get_node("taskStatus").run_item({"taskId": "task_123"}, 0, fake_client)

        assert result.payload == {"taskId": "task_123", "state": "success", "result": {"resultUrls": ["u"]}}

    def test_job_lookup_is_raw(self, fake_client):
        raw = {"code": 200, "data": {"taskId": "t/1", "resultJson": "{}"}}
        fake_client.dispatch.return_value = raw

        result = get_node("jobLookup").run_item({"task_id": "t/1"}, 0, fake_client)

        assert fake_client.dispatch.call_args[0][0].path == "/api/v1/jobs/t%2F1"
        assert result.payload == raw

    def test_task_id_required(self):
        with pytest.raises(ValidationError, match="task_id"):
            build("taskStatus")
