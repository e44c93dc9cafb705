#  Place Search - Structured Logging Tests
#
#  Tests for JSON formatter and context variable propagation.
#
#  Depends on: placesearch/logging_config.py
#  Used by:    pytest

import json
import logging
import sys

from placesearch.logging_config import (
    JSONFormatter,
    client_id_var,
    request_id_var,
    set_client_id,
    set_request_id,
    setup_logging,
)


def _record(msg="hello", level=logging.INFO, exc_info=None):
    return logging.LogRecord(
        name="test", level=level, pathname="", lineno=0,
        msg=msg, args=(), exc_info=exc_info,
    )


class TestJSONFormatter:
    def test_output_is_valid_json(self):
        data = json.loads(JSONFormatter().format(_record("hello world")))
        assert data["level"] == "INFO"
        assert data["logger"] == "test"
        assert data["message"] == "hello world"
        assert data["timestamp"].endswith("Z")

    def test_request_id_included_when_set(self):
        token = request_id_var.set("req-abc123")
        try:
            data = json.loads(JSONFormatter().format(_record()))
            assert data["request_id"] == "req-abc123"
        finally:
            request_id_var.reset(token)

    def test_client_id_included_when_set(self):
        token = client_id_var.set("10.0.0.7")
        try:
            data = json.loads(JSONFormatter().format(_record()))
            assert data["client_id"] == "10.0.0.7"
        finally:
            client_id_var.reset(token)

    def test_context_vars_absent_when_not_set(self):
        set_request_id(None)
        set_client_id(None)
        data = json.loads(JSONFormatter().format(_record()))
        assert "request_id" not in data
        assert "client_id" not in data

    def test_search_context_included_when_passed(self):
        record = _record("Search served")
        record.mode = "mock"
        record.cache = "HIT"
        record.results = 5
        data = json.loads(JSONFormatter().format(record))
        assert (data["mode"], data["cache"], data["results"]) == ("mock", "HIT", 5)

    def test_search_context_absent_by_default(self):
        data = json.loads(JSONFormatter().format(_record()))
        assert "mode" not in data
        assert "cache" not in data
        assert "results" not in data

    def test_exception_included(self):
        try:
            raise ValueError("test error")
        except ValueError:
            exc_info = sys.exc_info()

        data = json.loads(JSONFormatter().format(_record("oops", logging.ERROR, exc_info)))
        assert "ValueError" in data["exception"]


class TestSetupLogging:
    def test_json_format(self):
        logger = logging.getLogger("placesearch")
        logger.handlers.clear()

        setup_logging("INFO", "json")
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0].formatter, JSONFormatter)
        assert logger.level == logging.INFO

        logger.handlers.clear()

    def test_text_format(self):
        logger = logging.getLogger("placesearch")
        logger.handlers.clear()

        setup_logging("DEBUG", "text")
        assert len(logger.handlers) == 1
        assert not isinstance(logger.handlers[0].formatter, JSONFormatter)
        assert logger.level == logging.DEBUG

        logger.handlers.clear()

    def test_idempotent(self):
        """Calling setup_logging twice doesn't duplicate handlers."""
        logger = logging.getLogger("placesearch")
        logger.handlers.clear()

        setup_logging("INFO", "json")
        setup_logging("INFO", "json")
        assert len(logger.handlers) == 1

        logger.handlers.clear()

    def test_quiets_http_client(self):
        setup_logging("DEBUG", "text")
        assert logging.getLogger("httpx").level == logging.WARNING
        logging.getLogger("placesearch").handlers.clear()


class TestRequestIDMiddleware:
    async def test_request_id_header_returned(self, app_client):
        resp = await app_client.get("/api/health")
        assert resp.status_code == 200
        rid = resp.headers.get("x-request-id")
        assert rid is not None
        assert len(rid) == 12  # uuid hex[:12]

    async def test_context_cleared_after_request(self, app_client):
        await app_client.post("/api/search", json={
            "location": {"lat": 35.68, "lng": 139.76}, "radius_m": 500,
        })
        assert request_id_var.get(None) is None
        assert client_id_var.get(None) is None
