"""Payment provider adapter: signed payment creation and callback verification."""

from __future__ import annotations

import hashlib
import hmac
import logging
import time
from dataclasses import dataclass
from typing import Any

import requests

from restohub.core.config import settings

logger = logging.getLogger(__name__)

MOMO = "momo"
VIETCOMBANK = "vietcombank"
PROVIDERS: tuple[str, ...] = (MOMO, VIETCOMBANK)

MOMO_REQUEST_TYPE = "captureWallet"
MOMO_CALLBACK_FIELDS: tuple[str, ...] = (
    "accessKey",
    "amount",
    "extraData",
    "message",
    "orderId",
    "orderInfo",
    "orderType",
    "partnerCode",
    "payType",
    "requestId",
    "responseTime",
    "resultCode",
    "transId",
)


class PaymentGatewayError(Exception):
    """Raised when a provider call fails or returns no redirect URL."""


class UnknownProviderError(ValueError):
    """Raised for payment methods that have no gateway."""


@dataclass(frozen=True)
class CallbackResult:
    order_id: str | None
    paid: bool
    transaction_id: str | None


def sign(secret: str, message: str) -> str:
    return hmac.new(secret.encode("utf-8"), message.encode("utf-8"), hashlib.sha256).hexdigest()


def _field(value: Any) -> str:
    return "" if value is None else str(value)


def momo_create_signature_string(body: dict[str, Any]) -> str:
    keys = ("accessKey", "amount", "extraData", "ipnUrl", "orderId", "orderInfo", "partnerCode", "redirectUrl", "requestId", "requestType")
    return "&".join(f"{key}={_field(body.get(key))}" for key in keys)


def momo_callback_signature_string(payload: dict[str, Any]) -> str:
    return "&".join(f"{key}={_field(payload.get(key))}" for key in MOMO_CALLBACK_FIELDS)


def vietcombank_signature_string(payload: dict[str, Any]) -> str:
    return f"{_field(payload.get('orderId'))}{_field(payload.get('amount'))}{_field(payload.get('timestamp'))}"


def _post_json(url: str, body: dict[str, Any], provider: str) -> dict[str, Any]:
    try:
        response = requests.post(url, json=body, timeout=settings.payment_timeout_seconds)
        response.raise_for_status()
        return response.json()
    except (requests.RequestException, ValueError) as exc:
        logger.error("[PAYMENTS] %s payment creation failed: %s", provider, exc)
        raise PaymentGatewayError(f"Failed to create {provider} payment") from exc


def _create_momo_payment(order_id: int, amount: int, info: str) -> dict[str, Any]:
    body: dict[str, Any] = {
        "partnerCode": settings.momo_partner_code,
        "accessKey": settings.momo_access_key,
        "requestId": str(int(time.time() * 1000)),
        "amount": str(amount),
        "orderId": str(order_id),
        "orderInfo": info,
        "redirectUrl": settings.momo_return_url,
        "ipnUrl": settings.momo_ipn_url,
        "extraData": "",
        "requestType": MOMO_REQUEST_TYPE,
    }
    body["signature"] = sign(settings.momo_secret_key, momo_create_signature_string(body))
    return _post_json(settings.momo_endpoint, body, MOMO)


def _create_vietcombank_payment(order_id: int, amount: int, info: str) -> dict[str, Any]:
    body: dict[str, Any] = {
        "merchantId": settings.vcb_merchant_id,
        "orderId": str(order_id),
        "amount": str(amount),
        "orderInfo": info,
        "timestamp": int(time.time() * 1000),
        "returnUrl": settings.vcb_return_url,
        "cancelUrl": settings.vcb_cancel_url,
    }
    body["signature"] = sign(settings.vcb_api_key, vietcombank_signature_string(body))
    return _post_json(f"{settings.vcb_endpoint.rstrip('/')}/create", body, VIETCOMBANK)


def create_payment(provider: str, order_id: int, amount: int, info: str) -> str:
    """Open a payment with ``provider`` and return the URL to redirect the payer to."""
    if provider == MOMO:
        data = _create_momo_payment(order_id, amount, info)
    elif provider == VIETCOMBANK:
        data = _create_vietcombank_payment(order_id, amount, info)
    else:
        raise UnknownProviderError(f"Invalid payment method: {provider}")

    redirect_url = data.get("payUrl") or data.get("redirectUrl")
    if not redirect_url:
        logger.error("[PAYMENTS] %s response for order %s has no redirect URL", provider, order_id)
        raise PaymentGatewayError(f"Failed to create {provider} payment")
    return str(redirect_url)


def verify_callback(provider: str, payload: dict[str, Any]) -> bool:
    """Check the HMAC signature of an inbound provider notification."""
    signature = payload.get("signature")
    if not isinstance(signature, str) or not signature:
        return False
    if provider == MOMO:
        expected = sign(settings.momo_secret_key, momo_callback_signature_string(payload))
    elif provider == VIETCOMBANK:
        expected = sign(settings.vcb_api_key, vietcombank_signature_string(payload))
    else:
        raise UnknownProviderError(f"Invalid payment method: {provider}")
    return hmac.compare_digest(signature.encode("utf-8"), expected.encode("utf-8"))


def parse_callback(provider: str, payload: dict[str, Any]) -> CallbackResult:
    """Extract order id, outcome and transaction id from a verified payload."""
    if provider == MOMO:
        return CallbackResult(
            order_id=_field(payload.get("orderId")) or None,
            paid=_field(payload.get("resultCode")) == "0",
            transaction_id=_field(payload.get("transId")) or None,
        )
    if provider == VIETCOMBANK:
        return CallbackResult(
            order_id=_field(payload.get("orderId")) or None,
            paid=payload.get("status") == "success",
            transaction_id=_field(payload.get("transactionId")) or None,
        )
    raise UnknownProviderError(f"Invalid payment method: {provider}")
