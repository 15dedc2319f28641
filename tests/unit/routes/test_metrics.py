"""
Unit tests for metrics endpoint.
"""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from rental_reservations.main import app
from rental_reservations.metrics import (
    gateway_latency,
    gateway_requests,
    payments_processed,
    reservations_cancelled,
    reservations_created,
)


@pytest.fixture
def client() -> TestClient:
    """FastAPI test client."""
    return TestClient(app)


@pytest.mark.unit
def test_metrics_endpoint_returns_prometheus_format(client: TestClient) -> None:
    """Test that /metrics endpoint returns Prometheus text format."""
    response = client.get("/metrics")

    assert response.status_code == 200
    assert "text/plain" in response.headers["content-type"]


@pytest.mark.unit
def test_metrics_endpoint_contains_reservation_metrics(client: TestClient) -> None:
    """Test that /metrics includes the reservation and gateway metrics."""
    reservations_created.inc()
    reservations_cancelled.labels(paid="true").inc()
    payments_processed.labels(status="confirmed").inc()
    gateway_requests.labels(operation="verify", status_code="200").inc()
    gateway_latency.labels(operation="verify").observe(0.12)

    content = client.get("/metrics").text

    assert "rental_reservations_created_total" in content
    assert "rental_reservations_cancelled_total" in content
    assert "rental_payments_processed_total" in content
    assert "rental_gateway_requests_total" in content
    assert "rental_gateway_latency_seconds" in content
