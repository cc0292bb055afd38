"""Tests for correlation IDs in the request context and error envelopes."""

import re

from core.correlation import (
    correlation_id_var,
    generate_correlation_id,
    get_correlation_id,
    set_correlation_id,
)
from core.logging_config import correlation_filter
from models.exceptions import DomainException, NotFoundException


class TestCorrelationIdContext:
    def test_generated_id_is_short_hex(self) -> None:
        assert re.match(r"^[0-9a-f]{8}$", generate_correlation_id())

    def test_set_and_get(self) -> None:
        set_correlation_id("abc12345")
        assert get_correlation_id() == "abc12345"

    def test_empty_outside_request(self) -> None:
        correlation_id_var.set("")
        assert get_correlation_id() == ""

    def test_log_records_carry_current_id(self) -> None:
        set_correlation_id("feed0001")
        record: dict = {"extra": {}}
        assert correlation_filter(record) is True  # type: ignore[arg-type]
        assert record["extra"]["correlation_id"] == "feed0001"

    def test_log_records_use_dash_without_id(self) -> None:
        correlation_id_var.set("")
        record: dict = {"extra": {}}
        correlation_filter(record)  # type: ignore[arg-type]
        assert record["extra"]["correlation_id"] == "-"


class TestDomainExceptionCorrelation:
    def test_exception_picks_up_request_id(self) -> None:
        set_correlation_id("req00042")
        exc = NotFoundException("Missing")
        assert exc.correlation_id == "req00042"

    def test_explicit_id_wins(self) -> None:
        set_correlation_id("req00042")
        exc = DomainException("Boom", correlation_id="explicit")
        assert exc.correlation_id == "explicit"

    def test_generates_id_outside_request(self) -> None:
        correlation_id_var.set("")
        exc = DomainException("Boom")
        assert re.match(r"^[0-9a-f]{8}$", exc.correlation_id)


class TestCorrelationMiddleware:
    def test_incoming_id_is_echoed(self, client) -> None:
        response = client.get(
            "/api/health", headers={"X-Correlation-ID": "client01"}
        )
        assert response.status_code == 200
        assert response.headers["X-Correlation-ID"] == "client01"
        assert "X-Response-Time" in response.headers

    def test_id_generated_when_missing(self, client) -> None:
        response = client.get("/api/health")
        assert re.match(r"^[0-9a-f]{8}$", response.headers["X-Correlation-ID"])

    def test_error_envelope_carries_request_id(self, client, admin_headers) -> None:
        response = client.get(
            "/api/reports/999",
            headers={**admin_headers, "X-Correlation-ID": "trace123"},
        )
        assert response.status_code == 404
        body = response.json()
        assert body["success"] is False
        assert body["correlation_id"] == "trace123"
