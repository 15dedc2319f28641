"""
Prometheus metrics for reservation lifecycle and payment gateway calls.

Metrics are exposed via the /metrics endpoint for scraping by Prometheus.

Example:
    >>> from rental_reservations.metrics import gateway_latency
    >>> with gateway_latency.labels(operation="verify").time():
    ...     gateway.verify(token, receipt_id, expected_cost)
"""

from __future__ import annotations

from prometheus_client import Counter, Histogram

# =============================================================================
# Reservation Metrics
# =============================================================================

reservations_created = Counter(
    "rental_reservations_created_total",
    "Total number of reservations created",
)

reservation_conflicts = Counter(
    "rental_reservation_conflicts_total",
    "Reservation attempts rejected because the dates were already booked",
)

reservations_cancelled = Counter(
    "rental_reservations_cancelled_total",
    "Total number of reservations cancelled",
    ["paid"],
)
"""
Counter for cancellations.

Labels:
    paid: "true" if a gateway refund was requested, "false" for unpaid reservations
"""

payments_processed = Counter(
    "rental_payments_processed_total",
    "Payment confirmations by outcome",
    ["status"],
)
"""
Counter for confirm-with-payment attempts.

Labels:
    status: confirmed, already_paid, verification_failed, gateway_error
"""

# =============================================================================
# Gateway Metrics
# =============================================================================

gateway_requests = Counter(
    "rental_gateway_requests_total",
    "Total payment gateway requests made",
    ["operation", "status_code"],
)
"""
Counter for payment gateway requests.

Labels:
    operation: token, verify, confirm, cancel
    status_code: HTTP status code, or "error" when no response was received
"""

gateway_latency = Histogram(
    "rental_gateway_latency_seconds",
    "Payment gateway request latency in seconds",
    ["operation"],
    buckets=(0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, float("inf")),
)

token_refreshes = Counter(
    "rental_gateway_token_refreshes_total",
    "Total number of gateway access token requests",
)
