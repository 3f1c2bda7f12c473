"""Test configuration and fixtures."""

import os
from datetime import UTC, datetime

import pytest
from Crypto.PublicKey import RSA

from paypay.core.settings import Settings
from paypay.payments import cipher, signer
from paypay.payments.paypay_service import PayPayClient

FIXED_NOW = datetime(2024, 5, 1, 10, 20, 30, 123456, tzinfo=UTC)


@pytest.fixture(scope="session")
def merchant_key():
    """Merchant key pair: signs requests, decrypts gateway content."""
    return RSA.generate(2048)


@pytest.fixture(scope="session")
def gateway_key():
    """Gateway key pair: verifies requests, signs responses."""
    return RSA.generate(2048)


@pytest.fixture
def merchant_private_pem(merchant_key):
    return merchant_key.export_key(format="PEM", pkcs=8).decode()


@pytest.fixture
def gateway_public_pem(gateway_key):
    return gateway_key.public_key().export_key(format="PEM").decode()


@pytest.fixture(autouse=True)
def setup_test_environment():
    """Isolate tests from PAYPAY_* variables of the developer machine."""
    original_env = dict(os.environ)
    for key in list(os.environ):
        if key.startswith("PAYPAY_"):
            del os.environ[key]
    os.environ["ENVIRONMENT"] = "test"

    yield

    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture
def mock_settings(merchant_private_pem, gateway_public_pem):
    return Settings(
        PAYPAY_PARTNER_ID="200002000000",
        PAYPAY_PRIVATE_KEY=merchant_private_pem,
        PAYPAY_PUBLIC_KEY=gateway_public_pem,
        PAYPAY_BASE_URL="https://gateway.test/recv.do",
        ENVIRONMENT="test",
    )


class FakeGateway:
    """Stands in for the transport and the gateway behind it.

    Records every request and answers with a queued payload, or with a
    signed success response echoing the request's out_trade_no.
    """

    def __init__(self, gateway_key, merchant_key):
        self.gateway_key = gateway_key
        self.merchant_public = merchant_key.public_key()
        self.requests = []
        self.replies = []

    def send(self, url, body):
        self.requests.append((url, body))
        if self.replies:
            reply = self.replies.pop(0)
            if isinstance(reply, Exception):
                raise reply
            return reply
        content = self.decrypt_request(body)
        return self.signed_response(
            {
                "out_trade_no": content.get("out_trade_no", ""),
                "trade_no": "2024050122001",
                "total_amount": content.get("total_amount", ""),
            }
        )

    @property
    def last_body(self):
        return self.requests[-1][1]

    def decrypt_request(self, body):
        return cipher.decrypt(body["biz_content"], self.gateway_key)

    def signed_response(self, biz_content=None, code="10000", msg="Success", encrypt=False, **extra):
        payload = {"code": code, "msg": msg, **extra}
        if biz_content is not None:
            if encrypt:
                payload["biz_content"] = cipher.encrypt(biz_content, self.merchant_public)
            else:
                payload["biz_content"] = biz_content
        payload["sign"] = signer.sign(payload, self.gateway_key)
        payload["sign_type"] = "RSA"
        return payload


@pytest.fixture
def gateway(gateway_key, merchant_key):
    return FakeGateway(gateway_key, merchant_key)


@pytest.fixture
def client(mock_settings, gateway):
    counter = iter(range(1, 1000))
    return PayPayClient(
        settings=mock_settings,
        transport=gateway,
        clock=lambda: FIXED_NOW,
        request_no_factory=lambda prefix: f"{prefix}_{next(counter)}",
    )
