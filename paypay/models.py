"""
Gateway Constants Module

This module defines the enumerations shared across the SDK:
- Gateway service names
- Trade statuses reported by queries and notifications
- Payee account types for transfers
- How a response biz_content block is encoded
"""

from enum import Enum as PyEnum

SUCCESS_CODE = "10000"
SIGN_TYPE = "RSA"


class Service(str, PyEnum):
    trade_app_pay = "alipay.trade.app.pay"
    trade_precreate = "alipay.trade.precreate"
    trade_query = "alipay.trade.query"
    trade_refund = "alipay.trade.refund"
    trade_close = "alipay.trade.close"
    fund_transfer = "alipay.fund.trans.toaccount.transfer"


class ProductCode(str, PyEnum):
    quick_msecurity_pay = "QUICK_MSECURITY_PAY"
    multicaixa_express = "MULTICAIXA_EXPRESS"
    reference_pay = "REFERENCE_PAY"


class PaymentMethod(str, PyEnum):
    multicaixa_express = "MULTICAIXA_EXPRESS"
    reference = "REFERENCE"


class PayeeType(str, PyEnum):
    """Account identifier kinds accepted by fund transfers."""

    paypay_userid = "PAYPAY_USERID"
    alipay_logonid = "ALIPAY_LOGONID"
    alipay_userid = "ALIPAY_USERID"


class TradeStatus(str, PyEnum):
    wait_buyer_pay = "WAIT_BUYER_PAY"
    trade_success = "TRADE_SUCCESS"
    trade_finished = "TRADE_FINISHED"
    trade_closed = "TRADE_CLOSED"
    unknown = "UNKNOWN"


class BizContentMode(str, PyEnum):
    """How biz_content arrives in a gateway response.

    ``auto`` treats a JSON object (or a string starting with ``{``) as plain
    content and any other string as base64 ciphertext.
    """

    auto = "auto"
    plain = "plain"
    encrypted = "encrypted"


def map_status(raw_status: str | None) -> TradeStatus:
    """Map a gateway trade_status string to TradeStatus."""
    try:
        return TradeStatus(raw_status)
    except ValueError:
        return TradeStatus.unknown
