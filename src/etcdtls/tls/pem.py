"""PEM encoding and decoding of keys and certificates."""

from __future__ import annotations

import re

from cryptography import x509
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

_PEM_BLOCK_RE = re.compile(rb"-----BEGIN ([A-Z0-9 ]+)-----")


def encode_private_key_pem(key: rsa.RSAPrivateKey) -> bytes:
    """Encode an RSA key as an unencrypted PKCS#1 ``RSA PRIVATE KEY`` block."""
    return key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.TraditionalOpenSSL,
        encryption_algorithm=serialization.NoEncryption(),
    )


def encode_certificate_pem(cert: x509.Certificate) -> bytes:
    """Encode a certificate as a ``CERTIFICATE`` block."""
    return cert.public_bytes(serialization.Encoding.PEM)


def decode_certificate_pem(data: bytes) -> x509.Certificate:
    """Parse the first certificate in ``data``.

    Raises:
        ValueError: If ``data`` holds no valid PEM certificate.
    """
    return x509.load_pem_x509_certificate(data)


def decode_private_key_pem(data: bytes, password: bytes | None = None) -> rsa.RSAPrivateKey:
    """Parse an RSA private key from PEM.

    Raises:
        ValueError: If ``data`` is not a PEM private key.
        TypeError: If the key is not RSA.
    """
    key = serialization.load_pem_private_key(data, password=password)
    if not isinstance(key, rsa.RSAPrivateKey):
        raise TypeError(f"expected an RSA private key, got {type(key).__name__}")
    return key


def pem_block_types(data: bytes) -> list[str]:
    """List the PEM block types (e.g. ``CERTIFICATE``) found in ``data``."""
    return [m.decode("ascii") for m in _PEM_BLOCK_RE.findall(data)]
