"""
Pytest fixtures shared by the test suite
"""

import json
import logging
from unittest.mock import MagicMock

import pytest

from kie_media_mcp.client import KieClient, reset_client
from kie_media_mcp.config import Credentials
from kie_media_mcp.mcp_utils import JSONFormatter, clear_correlation_id, set_correlation_id

TASK_CREATED = {"code": 200, "msg": "success", "data": {"taskId": "task_123"}}


@pytest.fixture
def credentials():
    return Credentials(api_key="test-key", domain="https://api.example.test")


@pytest.fixture
def fake_client():
    """Dispatcher double; every dispatch returns a createTask success envelope."""
    client = MagicMock(spec=KieClient)
    client.dispatch.return_value = TASK_CREATED
    return client


@pytest.fixture
def kie_env(monkeypatch):
    """Environment with an API key and a fresh global client."""
    monkeypatch.setenv("KIE_API_KEY", "env-key")
    monkeypatch.delenv("KIE_DOMAIN", raising=False)
    reset_client()
    yield
    reset_client()


class LogCapture(logging.Handler):
    """Keeps every record emitted on the kie-mcp logger during a test."""

    def __init__(self):
        super().__init__(level=logging.DEBUG)
        self.records = []
        self._formatter = JSONFormatter()

    def emit(self, record):
        self.records.append(record)

    def get_json_logs(self):
        """Records as the JSON objects the production handler would write."""
        return [json.loads(self._formatter.format(r)) for r in self.records]

    def clear(self):
        self.records.clear()


@pytest.fixture
def capturing_logger():
    kie_logger = logging.getLogger("kie-mcp")
    capture = LogCapture()
    previous = kie_logger.level
    kie_logger.addHandler(capture)
    kie_logger.setLevel(logging.DEBUG)
    try:
        yield capture
    finally:
        kie_logger.removeHandler(capture)
        kie_logger.setLevel(previous)


@pytest.fixture
def correlation_context():
    """Set a fixed correlation ID for the test; cleared afterwards."""
    yield lambda cid: set_correlation_id(cid) or cid
    clear_correlation_id()
