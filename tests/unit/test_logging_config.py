"""
Unit tests for structlog configuration.
"""

from __future__ import annotations

import json

import pytest
import structlog

from rental_reservations.logging_config import add_service_name, setup_logging


@pytest.fixture(autouse=True)
def reset_structlog():
    yield
    structlog.reset_defaults()
    setup_logging()


@pytest.mark.unit
def test_add_service_name_keeps_existing_value() -> None:
    assert add_service_name(None, "info", {"event": "x"})["service"] == "rental-reservations"
    assert add_service_name(None, "info", {"service": "other"})["service"] == "other"


@pytest.mark.unit
def test_json_output_includes_context(capsys: pytest.CaptureFixture[str]) -> None:
    """Test that JSON logs carry the event, level, service and bound context."""
    setup_logging("INFO", json_logs=True)
    structlog.contextvars.bind_contextvars(request_id="req-1")
    try:
        structlog.get_logger("test").info("reservation_created", reservation_id=7)
    finally:
        structlog.contextvars.clear_contextvars()

    line = capsys.readouterr().out.strip().splitlines()[-1]
    payload = json.loads(line)
    assert payload["event"] == "reservation_created"
    assert payload["reservation_id"] == 7
    assert payload["request_id"] == "req-1"
    assert payload["service"] == "rental-reservations"
    assert payload["level"] == "info"


@pytest.mark.unit
def test_level_filters_lower_events(capsys: pytest.CaptureFixture[str]) -> None:
    setup_logging("WARNING", json_logs=True)

    structlog.get_logger("test").info("hidden_event")

    assert "hidden_event" not in capsys.readouterr().out
