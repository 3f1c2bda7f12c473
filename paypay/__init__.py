"""
PayPay Africa SDK

Client for the PayPay Africa payment gateway (Alipay protocol compatible).
Requests are signed with the merchant RSA key, business content is encrypted
with the gateway public key, and every response is verified before use.
"""

from paypay.errors import (
    BusinessError,
    ConfigurationError,
    DecryptionError,
    GatewayResponseError,
    InvalidSignatureError,
    PayPayError,
    TransportError,
)
from paypay.models import BizContentMode, PayeeType, Service, TradeStatus
from paypay.payments.paypay_service import PayPayClient
from paypay.schemas import (
    AccountTransferRequest,
    BankTransferRequest,
    PaymentRequest,
    PaymentResponse,
    QueryRequest,
    RefundRequest,
    TradeNotification,
)

__version__ = "1.0.0"

__all__ = [
    "AccountTransferRequest",
    "BankTransferRequest",
    "BizContentMode",
    "BusinessError",
    "ConfigurationError",
    "DecryptionError",
    "GatewayResponseError",
    "InvalidSignatureError",
    "PayPayClient",
    "PayPayError",
    "PayeeType",
    "PaymentRequest",
    "PaymentResponse",
    "QueryRequest",
    "RefundRequest",
    "Service",
    "TradeNotification",
    "TradeStatus",
    "TransportError",
]
