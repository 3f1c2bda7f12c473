"""Tests for the canonical signer."""

import base64
import random

from paypay.payments import signer

PARAMS = {
    "service": "alipay.trade.app.pay",
    "partner_id": "200002000000",
    "timestamp": "2024-05-01T10:20:30.123Z",
    "charset": "UTF-8",
    "format": "JSON",
    "version": "1.0",
    "language": "pt",
    "request_no": "PAY_1",
    "biz_content": "c2VjcmV0",
}


def test_canonicalize_sorts_keys_and_joins():
    assert signer.canonicalize({"b": "2", "a": "1", "c": "x=y&z"}) == "a=1&b=2&c=x=y&z"


def test_canonicalize_is_insertion_order_independent():
    items = list(PARAMS.items())
    expected = signer.canonicalize(PARAMS)
    for seed in range(5):
        random.Random(seed).shuffle(items)
        assert signer.canonicalize(dict(items)) == expected


def test_canonicalize_uses_codepoint_order():
    # Upper case sorts before lower case, underscore between them
    assert signer.canonicalize({"a": "1", "B": "2", "_c": "3"}) == "B=2&_c=3&a=1"


def test_canonicalize_excludes_sign_fields():
    with_sign = {**PARAMS, "sign": "abc", "sign_type": "RSA"}
    assert signer.canonicalize(with_sign) == signer.canonicalize(PARAMS)


def test_stringify_scalars_and_nested():
    assert signer.stringify("x") == "x"
    assert signer.stringify(1000) == "1000"
    assert signer.stringify(10.0) == "10"
    assert signer.stringify(12.5) == "12.5"
    assert signer.stringify(True) == "true"
    assert signer.stringify(None) == "null"
    assert signer.stringify({"a": "é", "b": [1, 2]}) == '{"a":"é","b":[1,2]}'


def test_sign_verify_round_trip(merchant_key):
    signature = signer.sign(PARAMS, merchant_key)
    assert base64.b64decode(signature)
    assert signer.verify(PARAMS, signature, merchant_key.public_key()) is True


def test_sign_is_deterministic(merchant_key):
    assert signer.sign(PARAMS, merchant_key) == signer.sign(dict(reversed(list(PARAMS.items()))), merchant_key)


def test_verify_rejects_tampered_fields(merchant_key):
    signature = signer.sign(PARAMS, merchant_key)
    public = merchant_key.public_key()
    for key in PARAMS:
        tampered = {**PARAMS, key: PARAMS[key] + "0"}
        assert signer.verify(tampered, signature, public) is False
    assert signer.verify({**PARAMS, "extra": "1"}, signature, public) is False


def test_sign_fields_do_not_affect_signature(merchant_key):
    base = signer.sign(PARAMS, merchant_key)
    assert signer.sign({**PARAMS, "sign": "old"}, merchant_key) == base
    assert signer.sign({**PARAMS, "sign": "x", "sign_type": "RSA2"}, merchant_key) == base


def test_verify_with_wrong_key_returns_false(merchant_key, gateway_key):
    signature = signer.sign(PARAMS, merchant_key)
    assert signer.verify(PARAMS, signature, gateway_key.public_key()) is False


def test_verify_does_not_raise_on_garbage(merchant_key):
    public = merchant_key.public_key()
    assert signer.verify(PARAMS, "not base64!!", public) is False
    assert signer.verify(PARAMS, "", public) is False
    assert signer.verify(PARAMS, None, public) is False
    assert signer.verify(PARAMS, base64.b64encode(b"short").decode(), public) is False


def test_non_ascii_values_sign_as_utf8(merchant_key):
    params = {**PARAMS, "subject": "Pagamento de serviço"}
    signature = signer.sign(params, merchant_key)
    assert signer.verify(params, signature, merchant_key.public_key())


def _wrap(text, width=76, sep="\r\n"):
    return sep.join(text[i:i + width] for i in range(0, len(text), width))


def test_verify_accepts_line_wrapped_signature(merchant_key):
    signature = signer.sign(PARAMS, merchant_key)
    public = merchant_key.public_key()
    assert signer.verify(PARAMS, _wrap(signature), public) is True
    assert signer.verify(PARAMS, _wrap(signature, sep="\n") + "\n", public) is True


def test_verify_still_rejects_non_base64_characters(merchant_key):
    signature = signer.sign(PARAMS, merchant_key)
    assert signer.verify(PARAMS, signature[:10] + "*" + signature[10:], merchant_key.public_key()) is False


def test_nested_integral_floats_follow_top_level_rule():
    assert (
        signer.canonicalize({"biz_content": {"total_amount": 10.0, "items": [2.0, 2.5]}, "x": 10.0})
        == 'biz_content={"total_amount":10,"items":[2,2.5]}&x=10'
    )
