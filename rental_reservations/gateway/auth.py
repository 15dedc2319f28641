from urllib.parse import urljoin

import requests
import structlog

from rental_reservations.cache import token_cache
from rental_reservations.config import PAYMENT_GATEWAY_URL, PAYMENT_TIMEOUT_SECONDS
from rental_reservations.errors import GatewayError
from rental_reservations.metrics import gateway_requests, token_refreshes

logger = structlog.get_logger(__name__)
TOKEN_PATH = "request/token"


def create_access_token(
    application_id: str, private_key: str, base_url: str = PAYMENT_GATEWAY_URL
) -> str:
    """
    Exchange the application ID and private key for a gateway access token.

    Args:
        application_id (str): Gateway REST application ID.
        private_key (str): Gateway private key.
        base_url (str): Gateway API root.

    Returns:
        str: Access token.

    Raises:
        GatewayError: If the request fails or the response carries no token.
    """
    logger.info("gateway_token_requested", application_id=application_id)

    payload = {"application_id": application_id, "private_key": private_key}

    try:
        response = requests.post(
            urljoin(base_url, TOKEN_PATH),
            json=payload,
            headers={"Content-Type": "application/json"},
            timeout=PAYMENT_TIMEOUT_SECONDS,
        )
        gateway_requests.labels(operation="token", status_code=str(response.status_code)).inc()
        response.raise_for_status()
    except requests.RequestException as e:
        status_code = getattr(getattr(e, "response", None), "status_code", None)
        logger.error("gateway_token_request_failed", error=str(e), status_code=status_code)
        if status_code is None:
            gateway_requests.labels(operation="token", status_code="error").inc()
        raise GatewayError(f"Access token request failed: {e}", status_code=status_code) from e

    body = response.json()
    token = (body.get("data") or {}).get("token")
    if not isinstance(token, str):
        logger.error("gateway_token_missing", response=response.text)
        raise GatewayError("No token in payment gateway response.", status_code=response.status_code)

    token_refreshes.inc()
    return token


def refresh_access_token(
    application_id: str, private_key: str, base_url: str = PAYMENT_GATEWAY_URL
) -> str:
    """
    Request a new token, replacing any cached one.

    Returns:
        str: New access token.
    """
    token_cache.invalidate(application_id)
    token = create_access_token(application_id, private_key, base_url)
    token_cache.set(application_id, token)

    logger.info("gateway_token_refreshed", application_id=application_id, cached=True)
    return token


def get_access_token(
    application_id: str, private_key: str, base_url: str = PAYMENT_GATEWAY_URL
) -> str:
    """
    Get a valid gateway access token, from cache when possible.

    Returns:
        str: Access token.
    """
    cached_token = token_cache.get(application_id)
    if cached_token:
        logger.debug("gateway_token_cache_hit", application_id=application_id)
        return cached_token

    logger.debug("gateway_token_cache_miss", application_id=application_id)
    return refresh_access_token(application_id, private_key, base_url)
