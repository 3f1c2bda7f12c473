"""
Business Content Cipher

biz_content is serialised to compact JSON and encrypted with the gateway
public key (RSA PKCS#1 v1.5). Content longer than one RSA block is split
into ``k - 11`` byte chunks whose ciphertexts are concatenated; a payload that
fits one block produces the plain single-block ciphertext.
"""

import base64
import binascii
import json
from typing import Any

from Crypto.Cipher import PKCS1_v1_5
from Crypto.PublicKey import RSA

from paypay.errors import DecryptionError

PKCS1_V1_5_OVERHEAD = 11


def _block_size(key: RSA.RsaKey) -> int:
    return key.size_in_bytes()


def encrypt(content: dict[str, Any], public_key: RSA.RsaKey) -> str:
    data = json.dumps(content, separators=(",", ":"), ensure_ascii=False).encode("utf-8")
    cipher = PKCS1_v1_5.new(public_key)
    chunk = _block_size(public_key) - PKCS1_V1_5_OVERHEAD

    out = bytearray()
    for offset in range(0, len(data), chunk):
        out.extend(cipher.encrypt(data[offset:offset + chunk]))
    return base64.b64encode(bytes(out)).decode("ascii")


def decrypt(encoded: str, private_key: RSA.RsaKey) -> dict[str, Any]:
    if not isinstance(encoded, str):
        raise DecryptionError(f"biz_content must be a string, got {type(encoded).__name__}")
    try:
        raw = base64.b64decode("".join(encoded.split()), validate=True)
    except (binascii.Error, ValueError) as e:
        raise DecryptionError(f"biz_content is not valid base64: {e}") from e

    block = _block_size(private_key)
    if not raw or len(raw) % block:
        raise DecryptionError(
            f"ciphertext length {len(raw)} is not a multiple of the {block}-byte key size"
        )

    cipher = PKCS1_v1_5.new(private_key)
    sentinel = object()
    out = bytearray()
    for offset in range(0, len(raw), block):
        try:
            plain = cipher.decrypt(raw[offset:offset + block], sentinel)
        except ValueError as e:
            raise DecryptionError(f"biz_content block rejected: {e}") from e
        if plain is sentinel:
            raise DecryptionError("biz_content could not be decrypted with the configured key")
        out.extend(plain)

    try:
        content = json.loads(out.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise DecryptionError(f"decrypted biz_content is not valid JSON: {e}") from e
    if not isinstance(content, dict):
        raise DecryptionError("decrypted biz_content is not a JSON object")
    return content
