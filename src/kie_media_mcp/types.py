"""
Type Definitions

TypedDicts for request bodies and the records handed back to the host.

Usage:
    from kie_media_mcp.types import CreateTaskBody, ExecutionRecord
"""

from typing import Any, Dict, List, Union

from typing_extensions import NotRequired, TypedDict


# =============================================================================
# Request Bodies
# =============================================================================


class CreateTaskBody(TypedDict):
    """Body for POST /api/v1/jobs/createTask."""

    model: str
    input: Dict[str, Any]
    callBackUrl: NotRequired[str]


class Shot(TypedDict):
    """One storyboard shot as sent to the API."""

    Scene: str
    duration: float


class UploadBody(TypedDict):
    """Body for the URL and Base64 upload endpoints."""

    fileUrl: NotRequired[str]
    base64Data: NotRequired[str]
    fileName: NotRequired[str]
    uploadPath: NotRequired[str]


# =============================================================================
# Host Items and Records
# =============================================================================


class BinaryData(TypedDict, total=False):
    """Binary attachment on an item; data is base64 text or raw bytes."""

    data: Union[str, bytes]
    fileName: str
    mimeType: str


class PairedItem(TypedDict):
    item: int


class ExecutionRecord(TypedDict):
    """One output record, tagged with the index of the item it came from."""

    json: Dict[str, Any]
    pairedItem: PairedItem


# =============================================================================
# Task Status
# =============================================================================


class TaskFailure(TypedDict, total=False):
    code: Any
    message: str


class TaskRecord(TypedDict, total=False):
    """Normalized recordInfo data."""

    taskId: str
    model: str
    state: str
    parameters: Any
    result: Any
    error: TaskFailure
    costTime: int
    completeTime: int
    createTime: int
    updateTime: int


ExecutionRecords = List[ExecutionRecord]
