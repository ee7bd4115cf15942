"""Task status lookups."""

import urllib.parse
from dataclasses import dataclass
from typing import Any, Dict

from ..client import Request
from ..normalize import normalize_task_record
from ..schema import param
from .base import KieNode

RECORD_INFO_PATH = "/api/v1/jobs/recordInfo"


@dataclass
class TaskStatusParams:
    task_id: str = param(required=True, description="The ID of the task to check")


class TaskStatusNode(KieNode):
    """recordInfo lookup with the JSON-string fields unwrapped."""

    name = "taskStatus"
    display_name = "Kie Task Status"
    description = "Get the status and results of a Kie.ai task"
    Params = TaskStatusParams

    def build(self, params: TaskStatusParams, item: Dict[str, Any]) -> Request:
        return Request("GET", RECORD_INFO_PATH, query={"taskId": params.task_id})

    def reshape(self, response: Any, params: TaskStatusParams) -> Any:
        return normalize_task_record(response)


class JobLookupNode(KieNode):
    """Raw job lookup by path; the response is passed through untouched."""

    name = "jobLookup"
    display_name = "Kie Job Lookup"
    description = "Fetch a Kie.ai job by ID without reshaping the response"
    Params = TaskStatusParams

    def build(self, params: TaskStatusParams, item: Dict[str, Any]) -> Request:
        return Request("GET", f"/api/v1/jobs/{urllib.parse.quote(params.task_id, safe='')}")
