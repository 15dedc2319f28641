"""
Unit tests for gateway/auth.py token management.
"""

from __future__ import annotations

from unittest.mock import Mock, patch

import pytest
import requests

from rental_reservations.cache import token_cache
from rental_reservations.errors import GatewayError
from rental_reservations.gateway.auth import (
    create_access_token,
    get_access_token,
    refresh_access_token,
)

BASE_URL = "https://gateway.test/"


@pytest.mark.unit
@patch("rental_reservations.gateway.auth.requests.post")
def test_create_access_token_success(mock_post: Mock) -> None:
    """Test that create_access_token returns the token from the response envelope."""
    mock_response = Mock()
    mock_response.status_code = 200
    mock_response.json.return_value = {"status": 200, "code": 0, "data": {"token": "tok-123"}}
    mock_post.return_value = mock_response

    token = create_access_token("app-1", "secret", BASE_URL)

    assert token == "tok-123"
    mock_post.assert_called_once()
    call_args = mock_post.call_args
    assert call_args[0][0] == "https://gateway.test/request/token"
    assert call_args[1]["json"] == {"application_id": "app-1", "private_key": "secret"}


@pytest.mark.unit
@patch("rental_reservations.gateway.auth.requests.post")
def test_create_access_token_raises_on_http_error(mock_post: Mock) -> None:
    """Test that an HTTP failure surfaces as GatewayError with the status code."""
    error_response = Mock()
    error_response.status_code = 401
    mock_response = Mock()
    mock_response.status_code = 401
    mock_response.text = "Unauthorized"
    mock_response.raise_for_status.side_effect = requests.HTTPError(
        "401 Error", response=error_response
    )
    mock_post.return_value = mock_response

    with pytest.raises(GatewayError) as exc_info:
        create_access_token("app-1", "bad-secret", BASE_URL)

    assert exc_info.value.status_code == 401


@pytest.mark.unit
@patch("rental_reservations.gateway.auth.requests.post")
def test_create_access_token_raises_on_connection_error(mock_post: Mock) -> None:
    mock_post.side_effect = requests.ConnectionError("connection refused")

    with pytest.raises(GatewayError):
        create_access_token("app-1", "secret", BASE_URL)


@pytest.mark.unit
@patch("rental_reservations.gateway.auth.requests.post")
def test_create_access_token_raises_on_missing_token(mock_post: Mock) -> None:
    """Test that a response without data.token raises GatewayError."""
    mock_response = Mock()
    mock_response.status_code = 200
    mock_response.json.return_value = {"status": 200, "code": 0, "data": {}}
    mock_response.text = '{"data": {}}'
    mock_post.return_value = mock_response

    with pytest.raises(GatewayError, match="No token in payment gateway response"):
        create_access_token("app-1", "secret", BASE_URL)


@pytest.mark.unit
@patch("rental_reservations.gateway.auth.create_access_token")
def test_get_access_token_uses_cache(mock_create: Mock) -> None:
    """Test that a second lookup is served from the cache."""
    mock_create.return_value = "tok-cached"

    first = get_access_token("app-1", "secret", BASE_URL)
    second = get_access_token("app-1", "secret", BASE_URL)

    assert first == second == "tok-cached"
    mock_create.assert_called_once_with("app-1", "secret", BASE_URL)


@pytest.mark.unit
@patch("rental_reservations.gateway.auth.create_access_token")
def test_refresh_access_token_replaces_cached_token(mock_create: Mock) -> None:
    """Test that refresh ignores the cached token and stores the new one."""
    token_cache.set("app-1", "tok-old")
    mock_create.return_value = "tok-new"

    token = refresh_access_token("app-1", "secret", BASE_URL)

    assert token == "tok-new"
    assert token_cache.get("app-1") == "tok-new"


@pytest.mark.unit
@patch("rental_reservations.gateway.auth.create_access_token")
def test_refresh_access_token_failure_leaves_cache_empty(mock_create: Mock) -> None:
    token_cache.set("app-1", "tok-old")
    mock_create.side_effect = GatewayError("down")

    with pytest.raises(GatewayError):
        refresh_access_token("app-1", "secret", BASE_URL)

    assert token_cache.get("app-1") is None
