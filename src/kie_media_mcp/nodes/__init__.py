"""
Node registry.

Every node is registered under its camelCase name, e.g. "grokImagine".
"""

from typing import Dict, List, Type

from ..errors import NodeNotFoundError
from .base import ItemResult, KieNode
from .images import (
    Flux2ProNode,
    ImageUpscalerNode,
    NanoBananaProNode,
    SeedreamEditImageNode,
    SeedreamNode,
    SeedreamTextToImageNode,
    ZImageNode,
)
from .qwen import QwenNode
from .storyboard import Sora2ProStoryboardNode
from .tasks import JobLookupNode, TaskStatusNode
from .uploads import FileUploadNode, KieResourceNode
from .veo3 import Veo3Node
from .videos import (
    GrokImagineNode,
    HailuoNode,
    InfinitalkNode,
    SeedanceNode,
    Sora2CharactersNode,
    Sora2ProNode,
    SoraWatermarkRemoverNode,
    VideoUpscalerNode,
    Wan26Node,
)

NODES: Dict[str, Type[KieNode]] = {
    cls.name: cls
    for cls in (
        FileUploadNode,
        KieResourceNode,
        Flux2ProNode,
        NanoBananaProNode,
        GrokImagineNode,
        HailuoNode,
        ImageUpscalerNode,
        InfinitalkNode,
        QwenNode,
        SeedanceNode,
        SeedreamNode,
        SeedreamTextToImageNode,
        SeedreamEditImageNode,
        Sora2CharactersNode,
        Sora2ProNode,
        Sora2ProStoryboardNode,
        SoraWatermarkRemoverNode,
        TaskStatusNode,
        JobLookupNode,
        Veo3Node,
        VideoUpscalerNode,
        Wan26Node,
        ZImageNode,
    )
}


def get_node(name: str) -> KieNode:
    """Instantiate a registered node by name."""
    try:
        return NODES[name]()
    except KeyError:
        raise NodeNotFoundError(
            f"Unknown node: {name}. Available: {', '.join(sorted(NODES))}"
        ) from None


def list_nodes() -> List[Dict[str, str]]:
    """Name, display name and description of every node, sorted by name."""
    return [
        {"name": cls.name, "display_name": cls.display_name, "description": cls.description}
        for _, cls in sorted(NODES.items())
    ]


__all__ = ["NODES", "ItemResult", "KieNode", "get_node", "list_nodes"]
