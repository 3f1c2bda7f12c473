"""
Canonical Signer

Parameter sets are signed over a canonical string: every field except
``sign``/``sign_type``, sorted by key (codepoint order), joined as
``k1=v1&k2=v2`` without any escaping. The signature is RSA PKCS#1 v1.5 over
SHA-1 of the UTF-8 bytes, base64 encoded (gateway ``sign_type`` "RSA").
"""

import base64
import binascii
import json
from typing import Any, Mapping

from Crypto.Hash import SHA1
from Crypto.PublicKey import RSA
from Crypto.Signature import pkcs1_15

EXCLUDED_KEYS = frozenset({"sign", "sign_type"})


def _integral_floats(value: Any) -> Any:
    """Apply the top-level number rule inside nested containers too."""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, dict):
        return {k: _integral_floats(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_integral_floats(v) for v in value]
    return value


def stringify(value: Any) -> str:
    """Render one parameter value the way it appears in the canonical string."""
    if isinstance(value, str):
        return value
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (dict, list)):
        return json.dumps(_integral_floats(value), separators=(",", ":"), ensure_ascii=False)
    return str(value)


def canonicalize(params: Mapping[str, Any]) -> str:
    keys = sorted(k for k in params if k not in EXCLUDED_KEYS)
    return "&".join(f"{k}={stringify(params[k])}" for k in keys)


def sign(params: Mapping[str, Any], private_key: RSA.RsaKey) -> str:
    digest = SHA1.new(canonicalize(params).encode("utf-8"))
    signature = pkcs1_15.new(private_key).sign(digest)
    return base64.b64encode(signature).decode("ascii")


def verify(params: Mapping[str, Any], signature: str, public_key: RSA.RsaKey) -> bool:
    """Check ``signature`` against the canonical form of ``params``.

    Returns False for a wrong or undecodable signature instead of raising.
    """
    if not isinstance(signature, str) or not signature:
        return False
    try:
        # MIME-wrapped base64 (CRLF every 76 chars) is accepted
        raw = base64.b64decode("".join(signature.split()), validate=True)
    except (binascii.Error, ValueError):
        return False
    digest = SHA1.new(canonicalize(params).encode("utf-8"))
    try:
        pkcs1_15.new(public_key).verify(digest, raw)
        return True
    except (ValueError, TypeError):
        return False
