"""
Certificate Authority

Creates the root of trust for one provisioning run: an RSA key and a
self-signed CA certificate that signs every leaf certificate of the run.

Trust roots are obtained through a TrustRootProvider so a user-supplied CA
can stand in for the generated one:
- SelfSignedTrustRoot generates a new CA on every call
- ExternalTrustRoot imports an existing CA key and certificate from PEM
"""

from __future__ import annotations

import abc
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional, Sequence

from cryptography import x509
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import rsa

from ..constants import DEFAULT_CA_COMMON_NAME, DEFAULT_CA_VALIDITY_DAYS, DEFAULT_ORGANIZATION
from ..exceptions import CAInitializationError, KeyGenerationError
from .certs import CertConfig, is_ca
from .keys import KeyPairGenerator
from .pem import (
    decode_certificate_pem,
    decode_private_key_pem,
    encode_certificate_pem,
    encode_private_key_pem,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TrustRoot:
    """A CA private key and its certificate. The key never leaves memory."""

    key: rsa.RSAPrivateKey
    certificate: x509.Certificate

    def __repr__(self) -> str:
        return f"TrustRoot(subject={self.certificate.subject.rfc4514_string()!r})"


class CertificateAuthority:
    """Builds self-signed RSA root certificates.

    Args:
        key_generator: Source of the CA private key.
        common_name: Subject CN of the CA certificate.
        validity_days: Lifetime of the CA certificate.
    """

    def __init__(
        self,
        key_generator: Optional[KeyPairGenerator] = None,
        common_name: str = DEFAULT_CA_COMMON_NAME,
        validity_days: int = DEFAULT_CA_VALIDITY_DAYS,
    ) -> None:
        self.key_generator = key_generator or KeyPairGenerator()
        self.common_name = common_name
        self.validity_days = validity_days

    def create_root(
        self, organization: Sequence[str] = DEFAULT_ORGANIZATION
    ) -> tuple[rsa.RSAPrivateKey, x509.Certificate]:
        """Generate a CA key and a self-signed CA certificate.

        Args:
            organization: Subject ``O`` entries of the CA.

        Returns:
            Tuple of (ca_key, ca_certificate).

        Raises:
            CAInitializationError: If key generation or signing fails.
        """
        try:
            key = self.key_generator.generate()
        except KeyGenerationError as exc:
            raise CAInitializationError(f"create CA key failed: {exc}") from exc

        config = CertConfig(common_name=self.common_name, organization=tuple(organization))
        try:
            cert = self._self_sign(config, key)
        except Exception as exc:
            raise CAInitializationError(f"self-sign CA certificate failed: {exc}") from exc

        logger.info(
            "Created self-signed CA %r (serial %x)", self.common_name, cert.serial_number
        )
        return key, cert

    def _self_sign(self, config: CertConfig, key: rsa.RSAPrivateKey) -> x509.Certificate:
        subject = issuer = config.subject()
        now = datetime.now(timezone.utc)
        public_key = key.public_key()
        return (
            x509.CertificateBuilder()
            .subject_name(subject)
            .issuer_name(issuer)
            .public_key(public_key)
            .serial_number(x509.random_serial_number())
            .not_valid_before(now)
            .not_valid_after(now + timedelta(days=self.validity_days))
            .add_extension(
                x509.BasicConstraints(ca=True, path_length=None),
                critical=True,
            )
            .add_extension(
                x509.KeyUsage(
                    digital_signature=True,
                    key_encipherment=True,
                    key_cert_sign=True,
                    crl_sign=False,
                    content_commitment=False,
                    data_encipherment=False,
                    key_agreement=False,
                    encipher_only=False,
                    decipher_only=False,
                ),
                critical=True,
            )
            .add_extension(
                x509.SubjectKeyIdentifier.from_public_key(public_key),
                critical=False,
            )
            .sign(key, hashes.SHA256())
        )


class TrustRootProvider(abc.ABC):
    """Supplies the CA that signs a provisioning run's leaf certificates."""

    @abc.abstractmethod
    def provide(self) -> TrustRoot:
        """Return the trust root for one provisioning run.

        Raises:
            CAInitializationError: If no usable CA can be produced.
        """


class SelfSignedTrustRoot(TrustRootProvider):
    """Generates a fresh self-signed CA on every call. Nothing is cached."""

    def __init__(
        self,
        authority: Optional[CertificateAuthority] = None,
        organization: Sequence[str] = DEFAULT_ORGANIZATION,
    ) -> None:
        self.authority = authority or CertificateAuthority()
        self.organization = tuple(organization)

    def provide(self) -> TrustRoot:
        key, cert = self.authority.create_root(self.organization)
        return TrustRoot(key=key, certificate=cert)


class ExternalTrustRoot(TrustRootProvider):
    """Uses a user-supplied CA key and certificate.

    The PEM inputs are validated when ``provide`` is called: the key must be
    RSA, the certificate must be a CA and both must belong together.
    """

    def __init__(
        self,
        key_pem: bytes,
        cert_pem: bytes,
        password: Optional[bytes] = None,
    ) -> None:
        self._key_pem = key_pem
        self._cert_pem = cert_pem
        self._password = password

    def provide(self) -> TrustRoot:
        try:
            key = decode_private_key_pem(self._key_pem, self._password)
        except (ValueError, TypeError) as exc:
            raise CAInitializationError(f"load CA key failed: {exc}") from exc
        try:
            cert = decode_certificate_pem(self._cert_pem)
        except ValueError as exc:
            raise CAInitializationError(f"load CA certificate failed: {exc}") from exc

        if not is_ca(cert):
            raise CAInitializationError(
                f"certificate {cert.subject.rfc4514_string()} is not a CA certificate"
            )
        if cert.public_key().public_numbers() != key.public_key().public_numbers():
            raise CAInitializationError("CA key does not match CA certificate")

        logger.info("Imported external CA %s", cert.subject.rfc4514_string())
        return TrustRoot(key=key, certificate=cert)

    @classmethod
    def from_trust_root(cls, root: TrustRoot) -> "ExternalTrustRoot":
        """Wrap an in-memory trust root, e.g. one kept from an earlier run."""
        return cls(encode_private_key_pem(root.key), encode_certificate_pem(root.certificate))
