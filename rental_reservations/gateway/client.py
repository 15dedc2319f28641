"""
Client for the payment gateway's receipt API: verify, confirm and cancel.

Every call is a single blocking HTTP request with no retry. Transport errors,
non-2xx statuses and envelopes with a non-zero code all raise GatewayError so
the calling lifecycle operation fails instead of continuing on a guess.
"""

import time
from typing import Any, Dict, Optional, cast
from urllib.parse import urljoin

import requests
import structlog

from rental_reservations.config import (
    PAYMENT_APPLICATION_ID,
    PAYMENT_GATEWAY_URL,
    PAYMENT_PRIVATE_KEY,
    PAYMENT_TIMEOUT_SECONDS,
)
from rental_reservations.errors import GatewayError, PaymentVerificationFailed
from rental_reservations.gateway.auth import get_access_token, refresh_access_token
from rental_reservations.metrics import gateway_latency, gateway_requests
from rental_reservations.schemas.reservations import CancelRequest

logger = structlog.get_logger(__name__)

# Receipt states that represent money the gateway actually holds:
# 1 = charge completed, 2 = authorised and waiting for our confirm call
VERIFIABLE_RECEIPT_STATUSES = frozenset({1, 2})

# Amounts are compared in the currency's minor unit
AMOUNT_TOLERANCE = 0.005


class PaymentGateway:
    """
    Payment gateway client bound to one application's credentials.

    Example:
        >>> gateway = PaymentGateway()
        >>> token = gateway.get_access_token()
        >>> gateway.verify(token, "receipt-123", 55000.0)
        >>> gateway.confirm(token, "receipt-123")
    """

    def __init__(
        self,
        base_url: str = PAYMENT_GATEWAY_URL,
        application_id: str = PAYMENT_APPLICATION_ID,
        private_key: str = PAYMENT_PRIVATE_KEY,
        timeout: float = PAYMENT_TIMEOUT_SECONDS,
    ):
        self.base_url = base_url
        self.application_id = application_id
        self.private_key = private_key
        self.timeout = timeout

    def get_access_token(self, fresh: bool = False) -> str:
        """
        Get an access token for subsequent calls.

        Args:
            fresh (bool): Skip the cache and request a new token.
        """
        if fresh:
            return refresh_access_token(self.application_id, self.private_key, self.base_url)
        return get_access_token(self.application_id, self.private_key, self.base_url)

    def _request(
        self,
        operation: str,
        method: str,
        path: str,
        token: str,
        payload: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Send one authenticated request and unwrap the response envelope.

        Args:
            operation (str): Metric label (verify, confirm, cancel).
            method (str): HTTP method.
            path (str): Path relative to the gateway root.
            token (str): Access token.
            payload (Optional[Dict[str, Any]]): JSON body.

        Returns:
            Dict[str, Any]: The envelope's "data" object.

        Raises:
            GatewayError: On transport failure, HTTP error or non-zero envelope code.
        """
        url = urljoin(self.base_url, path)
        headers = {"Authorization": token, "Content-Type": "application/json"}

        start_time = time.time()
        try:
            res = requests.request(method, url, headers=headers, json=payload, timeout=self.timeout)
        except requests.RequestException as err:
            gateway_requests.labels(operation=operation, status_code="error").inc()
            logger.error("gateway_request_failed", operation=operation, error=str(err))
            raise GatewayError(f"Payment gateway {operation} request failed: {err}") from err
        finally:
            gateway_latency.labels(operation=operation).observe(time.time() - start_time)

        gateway_requests.labels(operation=operation, status_code=str(res.status_code)).inc()

        if res.status_code >= 400:
            logger.error(
                "gateway_http_error",
                operation=operation,
                status_code=res.status_code,
                response=res.text,
            )
            raise GatewayError(
                f"Payment gateway {operation} returned HTTP {res.status_code}",
                status_code=res.status_code,
            )

        body = cast(Dict[str, Any], res.json())
        if body.get("code", 0) != 0:
            logger.error(
                "gateway_rejected_request",
                operation=operation,
                code=body.get("code"),
                message=body.get("message"),
            )
            raise GatewayError(
                f"Payment gateway {operation} failed: {body.get('message')}",
                status_code=res.status_code,
            )

        return cast(Dict[str, Any], body.get("data") or {})

    def verify(self, token: str, receipt_id: str, expected_cost: float) -> Dict[str, Any]:
        """
        Check that a receipt is paid and matches the expected amount.

        The gateway's receipt is the source of truth for what the guest paid.

        Args:
            token (str): Access token.
            receipt_id (str): Receipt reported by the client after checkout.
            expected_cost (float): Amount the reservation should cost.

        Returns:
            Dict[str, Any]: Receipt data from the gateway.

        Raises:
            PaymentVerificationFailed: Unknown status or amount mismatch.
            GatewayError: Transport or protocol failure.
        """
        receipt = self._request("verify", "GET", f"receipt/{receipt_id}", token)

        status = receipt.get("status")
        price = receipt.get("price")
        if status not in VERIFIABLE_RECEIPT_STATUSES:
            logger.warning("payment_receipt_not_paid", receipt_id=receipt_id, status=status)
            raise PaymentVerificationFailed(f"Receipt {receipt_id} is not paid (status={status})")

        if price is None or abs(float(price) - expected_cost) > AMOUNT_TOLERANCE:
            logger.warning(
                "payment_amount_mismatch",
                receipt_id=receipt_id,
                paid=price,
                expected=expected_cost,
            )
            raise PaymentVerificationFailed(
                f"Receipt {receipt_id} paid {price}, expected {expected_cost:.2f}"
            )

        logger.info("payment_verified", receipt_id=receipt_id, price=price)
        return receipt

    def confirm(self, token: str, receipt_id: str) -> Dict[str, Any]:
        """
        Capture an authorised receipt.

        Raises:
            GatewayError: If the gateway did not confirm the receipt.
        """
        result = self._request("confirm", "POST", "submit", token, {"receipt_id": receipt_id})
        logger.info("payment_confirmed", receipt_id=receipt_id)
        return result

    def cancel(self, cancel_request: CancelRequest, token: str) -> Dict[str, Any]:
        """
        Cancel (refund) a receipt, fully or partially when price is set.

        Raises:
            GatewayError: If the gateway did not accept the cancellation.
        """
        if not cancel_request.receipt_id:
            raise ValueError("CancelRequest.receipt_id must be set before cancelling")

        payload = cancel_request.model_dump(exclude_none=True)
        result = self._request("cancel", "POST", "cancel", token, payload)
        logger.info(
            "payment_cancelled",
            receipt_id=cancel_request.receipt_id,
            partial=cancel_request.price is not None,
        )
        return result
