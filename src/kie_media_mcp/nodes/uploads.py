"""
File Upload Nodes

Upload a file to Kie.ai's temporary storage from a URL, a binary item or a
Base64 string. Uploaded files are deleted after 3 days; uploads are free.

Two nodes share the same endpoints:
    fileUpload  - synthesizes a filename when none is given
    kie         - resource/operation form, sends fileName only when supplied
"""

import base64
import binascii
from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..client import FILES, FilePart, MultipartForm, Request
from ..errors import ValidationError
from ..params import extension_from_data_uri, extension_from_url, require_value, synthesize_filename
from ..schema import param
from ..types import BinaryData, UploadBody
from .base import KieNode

URL_UPLOAD_PATH = "/api/file-url-upload"
STREAM_UPLOAD_PATH = "/api/file-stream-upload"
BASE64_UPLOAD_PATH = "/api/file-base64-upload"

OPERATIONS = ("uploadUrl", "uploadStream", "uploadBase64")


@dataclass
class UploadParams:
    operation: str = param("uploadUrl", options=OPERATIONS)
    file_url: str = param("", description="URL of the file to download and upload (max 100MB, 30s timeout)")
    binary_property_name: str = param("data", description="Name of the binary property containing the file")
    base64_data: str = param("", description="Base64 encoded file data, optionally as a data URI")
    file_name: str = param("", description="Custom filename; same filename overwrites the previous file")
    upload_path: str = param("", description="Optional directory path for organizing files")


@dataclass
class ResourceUploadParams(UploadParams):
    resource: str = param("fileUpload", options=("fileUpload",))


def binary_part(item: Dict[str, Any], property_name: str, file_name: str = "") -> FilePart:
    """
    Read a binary attachment off an item as a multipart file part.

    The filename is the explicit file_name, else the attachment's own
    fileName, else "file".

    Raises:
        ValidationError: No such binary property, or its data is not valid Base64.
    """
    binary: BinaryData = (item.get("binary") or {}).get(property_name)
    if not binary or binary.get("data") is None:
        raise ValidationError(f'No binary data property "{property_name}" exists on item!', field="binaryPropertyName")

    data = binary["data"]
    if isinstance(data, str):
        try:
            content = base64.b64decode(data, validate=True)
        except (binascii.Error, ValueError):
            raise ValidationError(f'Binary property "{property_name}" is not valid Base64') from None
    else:
        content = bytes(data)

    return FilePart(
        field="file",
        filename=file_name or binary.get("fileName") or "file",
        content=content,
        content_type=binary.get("mimeType") or "application/octet-stream",
    )


class FileUploadNode(KieNode):
    """Upload files to Kie.ai storage, naming them when no filename is given."""

    name = "fileUpload"
    display_name = "Kie.ai File Upload"
    description = "Upload files to Kie.ai storage (URL, Stream, or Base64)"
    Params = UploadParams

    synthesize_names = True

    def build(self, params: UploadParams, item: Dict[str, Any]) -> Request:
        if params.operation == "uploadUrl":
            return self._url_request(params)
        if params.operation == "uploadStream":
            return self._stream_request(params, item)
        return self._base64_request(params)

    def _url_request(self, params: UploadParams) -> Request:
        require_value(params.file_url, "fileUrl")
        body: UploadBody = {"fileUrl": params.file_url}
        file_name = params.file_name
        if not file_name and self.synthesize_names:
            file_name = synthesize_filename(extension_from_url(params.file_url))
        self._add_naming(body, file_name, params.upload_path)
        return Request("POST", URL_UPLOAD_PATH, body=body, origin=FILES)

    def _stream_request(self, params: UploadParams, item: Dict[str, Any]) -> Request:
        part = binary_part(item, params.binary_property_name, params.file_name)
        fields = {}
        if params.file_name:
            fields["fileName"] = params.file_name
        if params.upload_path:
            fields["uploadPath"] = params.upload_path
        return Request("POST", STREAM_UPLOAD_PATH, form=MultipartForm(fields, part), origin=FILES)

    def _base64_request(self, params: UploadParams) -> Request:
        require_value(params.base64_data, "base64Data")
        body: UploadBody = {"base64Data": params.base64_data}
        file_name = params.file_name
        if not file_name and self.synthesize_names:
            file_name = synthesize_filename(extension_from_data_uri(params.base64_data))
        self._add_naming(body, file_name, params.upload_path)
        return Request("POST", BASE64_UPLOAD_PATH, body=body, origin=FILES)

    @staticmethod
    def _add_naming(body: UploadBody, file_name: Optional[str], upload_path: str) -> None:
        if file_name:
            body["fileName"] = file_name
        if upload_path:
            body["uploadPath"] = upload_path


class KieResourceNode(FileUploadNode):
    """Generic Kie.ai node: resource + operation, filenames passed through as given."""

    name = "kie"
    display_name = "Kie.ai"
    description = "Interact with Kie.ai API"
    Params = ResourceUploadParams

    synthesize_names = False
