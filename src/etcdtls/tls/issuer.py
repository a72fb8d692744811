"""
Leaf certificate issuance.

Every leaf gets a fresh RSA key and a certificate signed by the run's CA.
Leaves are usable for both client and server authentication regardless of
role; etcd members present the same certificate in both directions.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from cryptography import x509
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.x509.oid import ExtendedKeyUsageOID

from ..constants import DEFAULT_CERT_VALIDITY_DAYS
from ..exceptions import CertificateIssuanceError, KeyGenerationError
from .certs import CertConfig
from .keys import KeyPairGenerator

logger = logging.getLogger(__name__)


class CertificateIssuer:
    """Signs leaf certificates with a CA key.

    Args:
        key_generator: Source of leaf private keys.
        validity_days: Lifetime of each issued certificate.
    """

    def __init__(
        self,
        key_generator: Optional[KeyPairGenerator] = None,
        validity_days: int = DEFAULT_CERT_VALIDITY_DAYS,
    ) -> None:
        self.key_generator = key_generator or KeyPairGenerator()
        self.validity_days = validity_days

    def issue(
        self,
        ca_key: rsa.RSAPrivateKey,
        ca_cert: x509.Certificate,
        config: CertConfig,
    ) -> tuple[rsa.RSAPrivateKey, x509.Certificate]:
        """Generate a key and a CA-signed certificate for ``config``.

        Args:
            ca_key: The CA private key used to sign.
            ca_cert: The CA certificate; its subject becomes the issuer.
            config: Identity to encode (CN, O, SANs).

        Returns:
            Tuple of (leaf_key, leaf_certificate).

        Raises:
            CertificateIssuanceError: If key generation or signing fails.
        """
        try:
            key = self.key_generator.generate()
        except KeyGenerationError as exc:
            raise CertificateIssuanceError(
                f"create key for {config.common_name!r} failed: {exc}"
            ) from exc

        try:
            cert = self._sign(config, key, ca_key, ca_cert)
        except Exception as exc:
            raise CertificateIssuanceError(
                f"sign certificate for {config.common_name!r} failed: {exc}"
            ) from exc

        logger.debug(
            "Issued certificate %r (serial %x, %d SANs)",
            config.common_name,
            cert.serial_number,
            len(config.alt_names.dns_names) + len(config.alt_names.ips),
        )
        return key, cert

    def _sign(
        self,
        config: CertConfig,
        key: rsa.RSAPrivateKey,
        ca_key: rsa.RSAPrivateKey,
        ca_cert: x509.Certificate,
    ) -> x509.Certificate:
        now = datetime.now(timezone.utc)
        builder = (
            x509.CertificateBuilder()
            .subject_name(config.subject())
            .issuer_name(ca_cert.subject)
            .public_key(key.public_key())
            .serial_number(x509.random_serial_number())
            .not_valid_before(now)
            .not_valid_after(now + timedelta(days=self.validity_days))
            .add_extension(
                x509.BasicConstraints(ca=False, path_length=None),
                critical=True,
            )
            .add_extension(
                x509.KeyUsage(
                    digital_signature=True,
                    key_encipherment=True,
                    key_cert_sign=False,
                    crl_sign=False,
                    content_commitment=False,
                    data_encipherment=False,
                    key_agreement=False,
                    encipher_only=False,
                    decipher_only=False,
                ),
                critical=True,
            )
            # TODO: scope server certs to serverAuth and client certs to clientAuth
            # once the etcd peers are confirmed not to reuse them in both directions.
            .add_extension(
                x509.ExtendedKeyUsage([
                    ExtendedKeyUsageOID.SERVER_AUTH,
                    ExtendedKeyUsageOID.CLIENT_AUTH,
                ]),
                critical=False,
            )
            .add_extension(
                x509.AuthorityKeyIdentifier.from_issuer_public_key(ca_key.public_key()),
                critical=False,
            )
        )
        if config.alt_names:
            builder = builder.add_extension(
                x509.SubjectAlternativeName(config.alt_names.to_general_names()),
                critical=False,
            )
        return builder.sign(ca_key, hashes.SHA256())
