"""Node abstract base class and per-item result."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, ClassVar, Dict, List, Optional, Sequence, Type

from ..client import KieClient, Request, get_client
from ..errors import KieError
from ..mcp_utils import get_correlation_id, log_structured
from ..schema import json_schema, parse_params
from ..types import CreateTaskBody, ExecutionRecord

CREATE_TASK_PATH = "/api/v1/jobs/createTask"


@dataclass
class ItemResult:
    """Outcome of one item: a payload on success, the captured error otherwise."""

    index: int
    payload: Any = None
    error: Optional[KieError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_records(self) -> List[ExecutionRecord]:
        """Render as host records; a JSON array becomes one record per element."""
        paired = {"item": self.index}
        if self.error is not None:
            return [{"json": {"error": self.error.message}, "pairedItem": paired}]
        entries = self.payload if isinstance(self.payload, list) else [self.payload]
        return [{"json": _as_object(entry), "pairedItem": dict(paired)} for entry in entries]


class KieNode(ABC):
    """
    Base class for all Kie.ai nodes.

    Subclasses set ``name``, ``display_name``, ``description`` and ``Params``
    (a dataclass declared with ``schema.param``) and implement ``build``.
    """

    name: ClassVar[str]
    display_name: ClassVar[str]
    description: ClassVar[str] = ""
    Params: ClassVar[Type]

    def parse(self, item: Optional[Dict[str, Any]]) -> Any:
        """Typed params for one item."""
        return parse_params(self.Params, item)

    @abstractmethod
    def build(self, params: Any, item: Dict[str, Any]) -> Request:
        """
        Validate params and build the outbound request.

        Args:
            params: Parsed Params instance.
            item: The raw item, for binary attachments.

        Raises:
            ValidationError: On any adapter-specific rule.
        """

    def reshape(self, response: Any, params: Any) -> Any:
        """Shape the decoded response for the host. Identity by default."""
        return response

    def run_item(self, item: Optional[Dict[str, Any]], index: int, client: Optional[KieClient] = None) -> ItemResult:
        """Process one item; KieErrors are captured, never raised."""
        item = item or {}
        try:
            params = self.parse(item)
            request = self.build(params, item)
            response = (client or get_client()).dispatch(request)
            return ItemResult(index, payload=self.reshape(response, params))
        except KieError as e:
            return ItemResult(index, error=e)

    def run(
        self,
        items: Sequence[Optional[Dict[str, Any]]],
        continue_on_fail: bool = False,
        client: Optional[KieClient] = None,
    ) -> List[ItemResult]:
        """
        Process items strictly in order.

        Args:
            items: One parameter dict per unit of work.
            continue_on_fail: Record failed items and keep going instead of aborting.
            client: Dispatcher to use; the global client when None.

        Returns:
            One ItemResult per processed item, in input order.

        Raises:
            KieError: The first item's error when continue_on_fail is False.
        """
        cid = get_correlation_id()
        log_structured("info", "node_started",
            node=self.name,
            correlation_id=cid,
            total_items=len(items),
            continue_on_fail=continue_on_fail,
        )

        results = []
        for index, item in enumerate(items):
            result = self.run_item(item, index, client)
            if not result.ok:
                log_structured("warning", "item_failed",
                    node=self.name,
                    correlation_id=cid,
                    item=index,
                    code=result.error.code,
                    error=result.error.message,
                )
                if not continue_on_fail:
                    raise result.error
            results.append(result)

        failed = sum(1 for r in results if not r.ok)
        log_structured("info", "node_completed",
            node=self.name,
            correlation_id=cid,
            total_items=len(items),
            succeeded=len(results) - failed,
            errors=failed,
        )
        return results

    def preview(self, item: Optional[Dict[str, Any]]) -> Request:
        """Build the request for an item without sending it."""
        item = item or {}
        return self.build(self.parse(item), item)

    @classmethod
    def describe(cls) -> Dict[str, Any]:
        return {
            "name": cls.name,
            "display_name": cls.display_name,
            "description": cls.description,
            "parameters": json_schema(cls.Params),
        }

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"


def create_task(model: str, input_data: Dict[str, Any], callback_url: str = "") -> Request:
    """POST /api/v1/jobs/createTask with callBackUrl only when set."""
    body: CreateTaskBody = {"model": model, "input": input_data}
    if callback_url:
        body["callBackUrl"] = callback_url
    return Request("POST", CREATE_TASK_PATH, body=body)


def _as_object(entry: Any) -> Dict[str, Any]:
    if isinstance(entry, dict):
        return entry
    return {"data": entry}
