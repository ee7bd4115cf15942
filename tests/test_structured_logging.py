"""Tests for JSON structured logging and the MCP tool wrapper."""

import re

from kie_media_mcp.errors import TransportError, ValidationError
from kie_media_mcp.mcp_utils import (
    ToolInvocation,
    clear_correlation_id,
    get_correlation_id,
    log_structured,
    mcp_error,
    mcp_tool_wrapper,
    to_mcp_response,
    validation_error,
)
from kie_media_mcp.nodes import get_node


class TestJSONFormatter:
    """JSON log format output"""

    def test_json_output_format(self, capturing_logger):
        log_structured("info", "node_started")

        logs = capturing_logger.get_json_logs()
        assert len(logs) == 1
        assert logs[0]["message"] == "node_started"
        assert logs[0]["level"] == "INFO"
        assert logs[0]["logger"] == "kie-mcp"
        assert "timestamp" in logs[0]

    def test_custom_fields_flattened(self, capturing_logger):
        log_structured("info", "kie_request", method="POST", multipart=False)

        log = capturing_logger.get_json_logs()[0]
        assert log["method"] == "POST"
        assert log["multipart"] is False

    def test_all_log_levels(self, capturing_logger):
        for level in ("debug", "info", "warning", "error", "critical"):
            capturing_logger.clear()
            log_structured(level, f"test_{level}")

            assert capturing_logger.get_json_logs()[0]["level"] == level.upper()

    def test_timestamp_format(self, capturing_logger):
        log_structured("info", "timestamp_test")

        timestamp = capturing_logger.get_json_logs()[0]["timestamp"]
        assert re.match(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d+Z$", timestamp)


class TestCorrelationID:
    def test_auto_generation(self):
        clear_correlation_id()

        cid = get_correlation_id()

        assert cid
        assert get_correlation_id() == cid

    def test_persists_across_calls(self, capturing_logger, correlation_context):
        correlation_context("batch_cid")

        log_structured("info", "call_1")
        log_structured("error", "call_2")

        assert {log["correlation_id"] for log in capturing_logger.get_json_logs()} == {"batch_cid"}


class TestToolInvocation:
    def test_completion_logged(self, capturing_logger):
        ToolInvocation(tool_name="run_node").complete("success")

        log = capturing_logger.get_json_logs()[0]
        assert log["message"] == "tool_completed"
        assert log["tool"] == "run_node"
        assert log["status"] == "success"
        assert "latency_ms" in log

    def test_error_logged(self, capturing_logger):
        ToolInvocation(tool_name="run_node").complete("error", error="Something failed")

        log = capturing_logger.get_json_logs()[0]
        assert log["message"] == "tool_failed"
        assert log["level"] == "ERROR"
        assert log["error"] == "Something failed"


class TestToolWrapper:
    def test_kie_error_becomes_error_dict(self, capturing_logger):
        @mcp_tool_wrapper
        def failing():
            raise TransportError("HTTP 401: Invalid key", status=401)

        result = failing()

        assert result == {
            "error": "HTTP 401: Invalid key",
            "code": "TRANSPORT_ERROR",
            "isError": True,
            "details": {"status": 401},
        }
        assert capturing_logger.get_json_logs()[-1]["message"] == "tool_failed"

    def test_unexpected_error_is_internal(self):
        @mcp_tool_wrapper
        def broken():
            raise RuntimeError("boom")

        assert broken() == {"error": "boom", "code": "INTERNAL_ERROR", "isError": True}

    def test_error_result_logged_as_failure(self, capturing_logger):
        @mcp_tool_wrapper
        def rejecting():
            return validation_error("At least one item is required", "items")

        result = rejecting()

        assert result["details"] == {"field": "items"}
        assert capturing_logger.get_json_logs()[-1]["status"] == "error"

    def test_success_passes_through(self):
        @mcp_tool_wrapper
        def ok():
            return {"count": 1}

        assert ok() == {"count": 1}


class TestResponses:
    def test_mcp_error_without_details(self):
        assert mcp_error("nope", "NOT_FOUND") == {"error": "nope", "code": "NOT_FOUND", "isError": True}

    def test_to_mcp_response_wraps_lists(self):
        assert to_mcp_response([1, 2]) == {"data": [1, 2]}

    def test_to_mcp_response_flags_errors(self):
        assert to_mcp_response({"error": "bad"})["isError"] is True

    def test_validation_error_dict_matches_exception(self):
        assert validation_error("bad", "prompt") == ValidationError("bad", field="prompt").to_dict()


class TestNodeRunLogging:
    """Node runs emit started, per-failure and completed events"""

    def test_batch_events(self, capturing_logger, correlation_context, fake_client):
        correlation_context("run_cid")

        get_node("zImage").run([{"prompt": "a"}, {}], continue_on_fail=True, client=fake_client)

        logs = {log["message"]: log for log in capturing_logger.get_json_logs()}
        assert logs["node_started"]["total_items"] == 2
        assert logs["node_started"]["continue_on_fail"] is True
        assert logs["item_failed"]["item"] == 1
        assert logs["item_failed"]["code"] == "VALIDATION_ERROR"
        assert logs["item_failed"]["level"] == "WARNING"
        assert logs["node_completed"]["succeeded"] == 1
        assert logs["node_completed"]["errors"] == 1
        assert logs["node_completed"]["correlation_id"] == "run_cid"
