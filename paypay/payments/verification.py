"""
Response verification.

A gateway payload is trusted only after its own ``sign`` field verifies
against every other field. biz_content is then resolved to a dict, either
as-is or by decrypting it, depending on the BizContentMode in force.
"""

import json
from typing import Any

import structlog
from Crypto.PublicKey import RSA
from pydantic import ValidationError

from paypay.core.logging import BusinessEvents
from paypay.errors import DecryptionError, GatewayResponseError, InvalidSignatureError
from paypay.models import BizContentMode
from paypay.payments import cipher, signer
from paypay.schemas import PaymentResponse

log = structlog.get_logger(__name__)

BIZ_CONTENT_KEYS = ("biz_content", "bizContent")


def check_signature(payload: Any, public_key: RSA.RsaKey) -> dict[str, Any]:
    """Return ``payload`` if its signature verifies, else raise InvalidSignatureError."""
    if not isinstance(payload, dict):
        raise GatewayResponseError(
            f"expected a JSON object from the gateway, got {type(payload).__name__}"
        )
    signature = payload.get("sign")
    if not signature:
        log.warning(BusinessEvents.SIGNATURE_INVALID, reason="missing sign")
        raise InvalidSignatureError("gateway payload carries no signature")
    if not signer.verify(payload, signature, public_key):
        log.warning(BusinessEvents.SIGNATURE_INVALID, reason="mismatch")
        raise InvalidSignatureError("gateway payload signature is invalid")
    return payload


def resolve_biz_content(
    value: Any, private_key: RSA.RsaKey, mode: BizContentMode = BizContentMode.auto
) -> dict[str, Any] | None:
    if value is None or value == "":
        return None

    if isinstance(value, dict):
        if mode is BizContentMode.encrypted:
            raise DecryptionError("expected encrypted biz_content, got a JSON object")
        return value

    if not isinstance(value, str):
        raise DecryptionError(f"unsupported biz_content type {type(value).__name__}")

    looks_like_json = value.lstrip().startswith("{")
    if mode is BizContentMode.plain or (mode is BizContentMode.auto and looks_like_json):
        try:
            content = json.loads(value)
        except json.JSONDecodeError as e:
            raise DecryptionError(f"biz_content is not valid JSON: {e}") from e
        if not isinstance(content, dict):
            raise DecryptionError("biz_content is not a JSON object")
        return content

    return cipher.decrypt(value, private_key)


def verify_response(
    payload: Any,
    public_key: RSA.RsaKey,
    private_key: RSA.RsaKey,
    mode: BizContentMode = BizContentMode.auto,
) -> PaymentResponse:
    """Verify a raw gateway response and build the typed PaymentResponse."""
    payload = check_signature(payload, public_key)

    fields = {k: v for k, v in payload.items() if k not in BIZ_CONTENT_KEYS}
    raw_content = next(
        (payload[k] for k in BIZ_CONTENT_KEYS if payload.get(k) is not None), None
    )
    try:
        biz_content = resolve_biz_content(raw_content, private_key, mode)
    except DecryptionError as e:
        log.error(BusinessEvents.DECRYPTION_FAILED, error=str(e))
        raise

    try:
        return PaymentResponse(**fields, biz_content=biz_content)
    except (ValidationError, TypeError) as e:
        raise GatewayResponseError(f"malformed gateway response: {e}") from e
