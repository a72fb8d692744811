"""
TLS primitives

RSA key generation, the self-signed or imported root of trust, leaf
certificate issuance and PEM encoding.
"""

from .keys import KeyPairGenerator
from .certs import (
    AltNames,
    CertConfig,
    alt_names_of,
    common_name_of,
    is_ca,
    organization_of,
    verify_signed_by,
)
from .ca import (
    CertificateAuthority,
    ExternalTrustRoot,
    SelfSignedTrustRoot,
    TrustRoot,
    TrustRootProvider,
)
from .issuer import CertificateIssuer
from .pem import (
    decode_certificate_pem,
    decode_private_key_pem,
    encode_certificate_pem,
    encode_private_key_pem,
    pem_block_types,
)

__all__ = [
    "KeyPairGenerator",
    "AltNames",
    "CertConfig",
    "alt_names_of",
    "common_name_of",
    "is_ca",
    "organization_of",
    "verify_signed_by",
    "CertificateAuthority",
    "ExternalTrustRoot",
    "SelfSignedTrustRoot",
    "TrustRoot",
    "TrustRootProvider",
    "CertificateIssuer",
    "decode_certificate_pem",
    "decode_private_key_pem",
    "encode_certificate_pem",
    "encode_private_key_pem",
    "pem_block_types",
]
