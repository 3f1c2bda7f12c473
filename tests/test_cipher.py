"""Tests for business content encryption."""

import base64

import pytest

from paypay.errors import DecryptionError
from paypay.payments import cipher

CONTENT = {
    "out_trade_no": "PAY_1",
    "total_amount": "1000",
    "subject": "Compra de produto",
    "body": "",
    "timeout_express": "30m",
    "product_code": "QUICK_MSECURITY_PAY",
}


def test_encrypt_decrypt_round_trip(merchant_key):
    encoded = cipher.encrypt(CONTENT, merchant_key.public_key())
    assert cipher.decrypt(encoded, merchant_key) == CONTENT


def test_single_block_payload_is_one_rsa_block(merchant_key):
    encoded = cipher.encrypt(CONTENT, merchant_key.public_key())
    assert len(base64.b64decode(encoded)) == merchant_key.size_in_bytes()


def test_encryption_is_randomised(merchant_key):
    public = merchant_key.public_key()
    assert cipher.encrypt(CONTENT, public) != cipher.encrypt(CONTENT, public)


def test_large_payload_is_chunked(merchant_key):
    content = {"remark": "x" * 1000, "payee_real_name": "João Silva"}
    encoded = cipher.encrypt(content, merchant_key.public_key())
    raw = base64.b64decode(encoded)
    assert len(raw) > merchant_key.size_in_bytes()
    assert len(raw) % merchant_key.size_in_bytes() == 0
    assert cipher.decrypt(encoded, merchant_key) == content


def test_nested_content_round_trip(merchant_key):
    content = {**CONTENT, "payment_method": {"type": "REFERENCE"}}
    encoded = cipher.encrypt(content, merchant_key.public_key())
    assert cipher.decrypt(encoded, merchant_key) == content


def test_decrypt_with_wrong_key_fails(merchant_key, gateway_key):
    encoded = cipher.encrypt(CONTENT, merchant_key.public_key())
    with pytest.raises(DecryptionError):
        cipher.decrypt(encoded, gateway_key)


def test_decrypt_rejects_bad_base64(merchant_key):
    with pytest.raises(DecryptionError, match="base64"):
        cipher.decrypt("%%%not-base64%%%", merchant_key)


def test_decrypt_rejects_truncated_ciphertext(merchant_key):
    encoded = cipher.encrypt(CONTENT, merchant_key.public_key())
    truncated = base64.b64encode(base64.b64decode(encoded)[:-1]).decode()
    with pytest.raises(DecryptionError, match="multiple"):
        cipher.decrypt(truncated, merchant_key)


def test_decrypt_rejects_non_object_payload(merchant_key):
    encoded = cipher.encrypt(["not", "an", "object"], merchant_key.public_key())
    with pytest.raises(DecryptionError, match="JSON object"):
        cipher.decrypt(encoded, merchant_key)


def test_decrypt_accepts_line_wrapped_ciphertext(merchant_key):
    encoded = cipher.encrypt(CONTENT, merchant_key.public_key())
    wrapped = "\n".join(encoded[i:i + 76] for i in range(0, len(encoded), 76))
    assert cipher.decrypt(wrapped, merchant_key) == CONTENT
    assert cipher.decrypt(wrapped.replace("\n", "\r\n"), merchant_key) == CONTENT


def test_decrypt_rejects_non_string(merchant_key):
    with pytest.raises(DecryptionError, match="string"):
        cipher.decrypt(12345, merchant_key)
