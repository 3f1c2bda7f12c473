"""
Trade notification verification.

The gateway POSTs trade status changes to the merchant notify_url. The
payload is signed the same way as a gateway response, so it goes through the
Canonical Signer before any field is looked at. Hosting the endpoint is left
to the application.
"""

from typing import Any

import structlog
from Crypto.PublicKey import RSA
from pydantic import ValidationError

from paypay.core.logging import BusinessEvents
from paypay.errors import GatewayResponseError
from paypay.models import BizContentMode
from paypay.payments.verification import BIZ_CONTENT_KEYS, check_signature, resolve_biz_content
from paypay.schemas import TradeNotification

log = structlog.get_logger(__name__)


def parse_notification(
    payload: Any,
    public_key: RSA.RsaKey,
    private_key: RSA.RsaKey,
    mode: BizContentMode = BizContentMode.auto,
) -> TradeNotification:
    """Verify a notification and return it as a TradeNotification.

    Raises InvalidSignatureError when the signature does not verify, and
    DecryptionError when an encrypted biz_content cannot be read. Trade
    fields found inside biz_content are lifted to the top level when the
    outer payload does not carry them.
    """
    payload = check_signature(payload, public_key)

    fields = {k: v for k, v in payload.items() if k not in BIZ_CONTENT_KEYS}
    raw_content = next(
        (payload[k] for k in BIZ_CONTENT_KEYS if payload.get(k) is not None), None
    )
    biz_content = resolve_biz_content(raw_content, private_key, mode)
    if biz_content:
        for key in ("out_trade_no", "trade_no", "trade_status", "total_amount"):
            if key in biz_content and fields.get(key) is None:
                fields[key] = biz_content[key]

    try:
        notification = TradeNotification(**fields, biz_content=biz_content)
    except (ValidationError, TypeError) as e:
        raise GatewayResponseError(f"malformed notification: {e}") from e

    log.info(
        BusinessEvents.NOTIFICATION,
        out_trade_no=notification.out_trade_no,
        trade_status=notification.trade_status.value,
    )
    return notification
