"""
Unit tests for the gateway token cache.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import pytest

from rental_reservations.cache import TokenCache

NOW = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


@pytest.mark.unit
def test_get_returns_cached_token() -> None:
    cache = TokenCache(ttl_seconds=60)
    cache.set("app-1", "tok")

    assert cache.get("app-1") == "tok"
    assert cache.get("app-2") is None


@pytest.mark.unit
def test_expired_token_is_evicted() -> None:
    """Test that a token past its TTL is dropped on lookup."""
    cache = TokenCache(ttl_seconds=60)
    with patch("rental_reservations.cache.utc_now", return_value=NOW):
        cache.set("app-1", "tok")

    with patch("rental_reservations.cache.utc_now", return_value=NOW + timedelta(seconds=61)):
        assert cache.get("app-1") is None

    assert cache.size() == 0


@pytest.mark.unit
def test_invalidate_and_clear() -> None:
    cache = TokenCache()
    cache.set("app-1", "a")
    cache.set("app-2", "b")

    cache.invalidate("app-1")
    cache.invalidate("missing")
    assert cache.get("app-1") is None
    assert cache.size() == 1

    cache.clear()
    assert cache.size() == 0
