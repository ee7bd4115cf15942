"""Kie.ai Media MCP Server - Main entry point."""

from typing import Any, Dict, List

from mcp.server.fastmcp import FastMCP

from . import nodes, runner
from .client import get_client
from .mcp_utils import mcp_tool_wrapper, to_mcp_response, validation_error

# Initialize MCP server
mcp = FastMCP(
    "kie-media-mcp",
    instructions="Kie.ai generative media: image, video and upload nodes plus task status",
)


def _single(node_name: str, item: Dict[str, Any]) -> Any:
    """Run one item through a node, raising on failure, and return its payload."""
    (result,) = runner.run_items(node_name, [item])
    return result.payload


# =============================================================================
# Node Tools (3)
# =============================================================================


@mcp.tool()
@mcp_tool_wrapper
def list_nodes() -> dict:
    """List every Kie.ai node with its display name and description."""
    available = nodes.list_nodes()
    return {"nodes": available, "count": len(available)}


@mcp.tool()
@mcp_tool_wrapper
def describe_node(name: str) -> dict:
    """Get a node's parameter schema (JSON Schema) by name, e.g. 'grokImagine'."""
    return nodes.get_node(name).describe()


@mcp.tool()
@mcp_tool_wrapper
def run_node(name: str, items: List[Dict[str, Any]], continue_on_fail: bool = False) -> dict:
    """
    Run a node over a list of parameter items, one Kie.ai request per item.

    Items are dicts keyed by parameter name (snake_case or camelCase).
    With continue_on_fail, failed items become {"error": ...} records;
    otherwise the first failure is returned as the error.
    """
    if not items:
        return validation_error("At least one item is required", "items")
    return runner.summarize(runner.run_items(name, items, continue_on_fail=continue_on_fail))


# =============================================================================
# Shortcut Tools (3)
# =============================================================================


@mcp.tool()
@mcp_tool_wrapper
def get_task_status(task_id: str) -> dict:
    """
    Get a task's state, parameters, result and failure info.

    A failed generation is still a successful lookup: its failure comes back
    under "error" without isError.
    """
    record = _single("taskStatus", {"task_id": task_id})
    return record if isinstance(record, dict) else {"data": record}


@mcp.tool()
@mcp_tool_wrapper
def upload_file_from_url(file_url: str, file_name: str = "", upload_path: str = "") -> dict:
    """Copy a remote file into Kie.ai storage (deleted after 3 days). Returns the hosted URL info."""
    item = {"operation": "uploadUrl", "file_url": file_url, "file_name": file_name, "upload_path": upload_path}
    return to_mcp_response(_single("fileUpload", item))


@mcp.tool()
@mcp_tool_wrapper
def get_credits() -> dict:
    """Get the remaining credit balance; also verifies the API key."""
    return to_mcp_response(get_client().check_credentials())


def main():
    """Entry point for the MCP server."""
    mcp.run()


if __name__ == "__main__":
    main()
