"""
Kie.ai Media MCP

Generative-media nodes for the Kie.ai API (image, video, upscaling, file
upload and task status), usable from Python, as an MCP server or from the
``kie`` command line.
"""

__version__ = "0.1.0"

from .nodes import NODES, ItemResult, KieNode, get_node, list_nodes
from .runner import run_node

__all__ = [
    "__version__",
    "NODES",
    "ItemResult",
    "KieNode",
    "get_node",
    "list_nodes",
    "run_node",
]
