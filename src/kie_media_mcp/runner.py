"""
Node Execution

Run a node over a list of items and render the host records.
"""

from typing import Any, Dict, List, Optional, Sequence, Union

from .client import KieClient
from .nodes import ItemResult, KieNode, get_node
from .types import ExecutionRecords


def run_items(
    node: Union[str, KieNode],
    items: Sequence[Optional[Dict[str, Any]]],
    continue_on_fail: bool = False,
    client: Optional[KieClient] = None,
) -> List[ItemResult]:
    """Resolve the node by name if needed and run it over items."""
    if isinstance(node, str):
        node = get_node(node)
    return node.run(items, continue_on_fail=continue_on_fail, client=client)


def to_records(results: Sequence[ItemResult]) -> ExecutionRecords:
    records: ExecutionRecords = []
    for result in results:
        records.extend(result.to_records())
    return records


def run_node(
    node: Union[str, KieNode],
    items: Sequence[Optional[Dict[str, Any]]],
    continue_on_fail: bool = False,
    client: Optional[KieClient] = None,
) -> ExecutionRecords:
    """
    Run a node over items and return the flattened host records.

    Args:
        node: Registered node name (e.g. "zImage") or a node instance.
        items: One parameter dict per unit of work.
        continue_on_fail: Emit {"error": message} records for failed items
            instead of aborting on the first failure.
        client: Dispatcher to use; the global client when None.

    Returns:
        [{"json": {...}, "pairedItem": {"item": index}}, ...] in input order.

    Raises:
        NodeNotFoundError: Unknown node name.
        KieError: First failure when continue_on_fail is False.
    """
    return to_records(run_items(node, items, continue_on_fail, client))


def summarize(results: Sequence[ItemResult]) -> Dict[str, Any]:
    """Counts plus the records, as returned by the MCP run_node tool."""
    failed = [r.index for r in results if not r.ok]
    return {
        "total_items": len(results),
        "errors": len(failed),
        "failed_items": failed,
        "records": to_records(results),
    }
