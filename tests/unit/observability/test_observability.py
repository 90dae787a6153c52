"""Tests for metrics path normalization and JSON logging."""

import json
import logging

from kinderhub.model import new_id
from kinderhub.observability.logging import JsonFormatter, request_id_var, user_id_var
from kinderhub.observability.metrics import get_metrics, normalize_path


class TestNormalizePath:
    """Tests for normalize_path."""

    def test_ids_are_replaced(self) -> None:
        kid_id = new_id()
        assert normalize_path(f"/api/v4/kids/{kid_id}") == "/api/v4/kids/{id}"

    def test_nested_ids(self) -> None:
        path = f"/api/v4/users/{new_id()}/targets/{new_id()}/reactions/heart"
        assert normalize_path(path) == "/api/v4/users/{id}/targets/{id}/reactions/heart"

    def test_plain_segments_kept(self) -> None:
        assert normalize_path("/api/v4/vaccine_book") == "/api/v4/vaccine_book"

    def test_root(self) -> None:
        assert normalize_path("/") == "/"


class TestMetricsRegistry:
    """Tests for the global metrics registry."""

    def test_initialized_once(self) -> None:
        assert get_metrics() is get_metrics()

    def test_exposition(self) -> None:
        output = get_metrics().generate_latest()
        assert b"kinderhub_mem_cache_hits" in output


class TestJsonFormatter:
    """Tests for JsonFormatter."""

    def make_record(self, message: str) -> logging.LogRecord:
        return logging.LogRecord(
            name="kinderhub.services.kids",
            level=logging.INFO,
            pathname=__file__,
            lineno=1,
            msg=message,
            args=(),
            exc_info=None,
        )

    def test_basic_fields(self) -> None:
        data = json.loads(JsonFormatter().format(self.make_record("Kid created")))

        assert data["level"] == "INFO"
        assert data["logger"] == "kinderhub.services.kids"
        assert data["message"] == "Kid created"

    def test_context_ids(self) -> None:
        request_token = request_id_var.set("req-1")
        user_token = user_id_var.set("u1")
        try:
            data = json.loads(JsonFormatter().format(self.make_record("x")))
        finally:
            request_id_var.reset(request_token)
            user_id_var.reset(user_token)

        assert data["request_id"] == "req-1"
        assert data["user_id"] == "u1"
        assert "trace_id" not in data
