"""Exception hierarchy raised by the PayPay SDK."""

from typing import Any


class PayPayError(Exception):
    pass


class ConfigurationError(PayPayError):
    """Missing or malformed partner id / key material."""


class TransportError(PayPayError):
    """Network failure, timeout or non-2xx HTTP status from the gateway."""

    def __init__(self, message: str, status_code: int | None = None, body: Any = None):
        self.message = message
        self.status_code = status_code
        self.body = body
        super().__init__(self.message)


class InvalidSignatureError(PayPayError):
    """Signature of a gateway response or notification did not verify."""


class DecryptionError(PayPayError):
    """biz_content could not be decrypted or parsed."""


class GatewayResponseError(PayPayError):
    """Gateway answered with something that is not a usable response envelope."""


class BusinessError(PayPayError):
    """Gateway processed the request but returned a failure code."""

    def __init__(self, code: str, msg: str, sub_code: str | None = None, sub_msg: str | None = None):
        self.code = code
        self.msg = msg
        self.sub_code = sub_code
        self.sub_msg = sub_msg
        detail = f"{code} {msg}"
        if sub_code:
            detail += f" ({sub_code}: {sub_msg or ''})"
        super().__init__(detail)
