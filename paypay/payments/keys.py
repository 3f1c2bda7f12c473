"""Loading of RSA key material supplied as PEM or bare base64 DER."""

import binascii

from Crypto.PublicKey import RSA

from paypay.errors import ConfigurationError


def _as_pem(key_str: str, label: str) -> str:
    key_str = key_str.strip()
    if key_str.startswith("-----"):
        return key_str
    # Bare base64 body as copied from the merchant portal
    return f"-----BEGIN {label}-----\n{key_str}\n-----END {label}-----"


def load_private_key(key_str: str) -> RSA.RsaKey:
    """Import the merchant private key (PKCS#1 or PKCS#8)."""
    if not key_str or not key_str.strip():
        raise ConfigurationError("private key is empty")
    try:
        key = RSA.import_key(_as_pem(key_str, "PRIVATE KEY"))
    except (ValueError, IndexError, TypeError, binascii.Error) as e:
        raise ConfigurationError(f"could not load private key: {e}") from e
    if not key.has_private():
        raise ConfigurationError("private key expected, got a public key")
    return key


def load_public_key(key_str: str) -> RSA.RsaKey:
    """Import the gateway public key (SubjectPublicKeyInfo or PKCS#1)."""
    if not key_str or not key_str.strip():
        raise ConfigurationError("public key is empty")
    try:
        key = RSA.import_key(_as_pem(key_str, "PUBLIC KEY"))
    except (ValueError, IndexError, TypeError, binascii.Error) as e:
        raise ConfigurationError(f"could not load public key: {e}") from e
    return key.public_key()
