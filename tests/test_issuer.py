"""Tests for leaf certificate issuance."""

import ipaddress
from unittest.mock import MagicMock

import pytest
from cryptography import x509
from cryptography.x509.oid import ExtendedKeyUsageOID

from etcdtls.exceptions import CertificateIssuanceError, KeyGenerationError
from etcdtls.tls.ca import CertificateAuthority
from etcdtls.tls.certs import (
    AltNames,
    CertConfig,
    alt_names_of,
    common_name_of,
    organization_of,
    verify_signed_by,
)
from etcdtls.tls.issuer import CertificateIssuer
from etcdtls.tls.keys import KeyPairGenerator


@pytest.fixture(scope="module")
def ca() -> tuple:
    return CertificateAuthority().create_root()


@pytest.fixture(scope="module")
def server_leaf(ca) -> tuple:
    ca_key, ca_cert = ca
    config = CertConfig(
        common_name="etcd server",
        alt_names=AltNames.from_addresses(["localhost", "*.c-etcd.ns.svc.cluster.local", "10.0.0.1"]),
    )
    return CertificateIssuer().issue(ca_key, ca_cert, config)


class TestAltNames:
    """Tests for AltNames parsing."""

    def test_splits_dns_and_ip(self):
        names = AltNames.from_addresses(["localhost", "127.0.0.1", "::1", "a.example"])
        assert names.dns_names == ("localhost", "a.example")
        assert names.ips == (ipaddress.ip_address("127.0.0.1"), ipaddress.ip_address("::1"))

    def test_drops_duplicates(self):
        names = AltNames.from_addresses(["a", "a", "10.0.0.1", "10.0.0.1"])
        assert names.dns_names == ("a",)
        assert len(names.ips) == 1

    def test_empty(self):
        assert not AltNames.from_addresses(None)
        assert not AltNames.from_addresses([])
        assert AltNames().as_set() == set()


class TestCertificateIssuer:
    """Tests for CertificateIssuer.issue."""

    def test_signed_by_ca(self, ca, server_leaf):
        _, ca_cert = ca
        _, cert = server_leaf
        assert cert.issuer == ca_cert.subject
        assert verify_signed_by(cert, ca_cert)

    def test_not_verified_by_other_ca(self, server_leaf):
        _, other_ca = CertificateAuthority().create_root()
        _, cert = server_leaf
        assert not verify_signed_by(cert, other_ca)

    def test_subject(self, server_leaf):
        _, cert = server_leaf
        assert common_name_of(cert) == "etcd server"
        assert organization_of(cert) == ["coreos.com"]

    def test_alt_names(self, server_leaf):
        _, cert = server_leaf
        assert alt_names_of(cert) == {"localhost", "*.c-etcd.ns.svc.cluster.local", "10.0.0.1"}

    def test_not_a_ca(self, server_leaf):
        _, cert = server_leaf
        bc = cert.extensions.get_extension_for_class(x509.BasicConstraints).value
        assert bc.ca is False

    def test_usable_for_client_and_server_auth(self, server_leaf):
        _, cert = server_leaf
        eku = cert.extensions.get_extension_for_class(x509.ExtendedKeyUsage).value
        assert ExtendedKeyUsageOID.SERVER_AUTH in eku
        assert ExtendedKeyUsageOID.CLIENT_AUTH in eku

    def test_key_matches_certificate(self, server_leaf):
        key, cert = server_leaf
        assert cert.public_key().public_numbers() == key.public_key().public_numbers()

    def test_no_san_extension_without_alt_names(self, ca):
        ca_key, ca_cert = ca
        _, cert = CertificateIssuer().issue(ca_key, ca_cert, CertConfig(common_name="etcd client"))
        with pytest.raises(x509.ExtensionNotFound):
            cert.extensions.get_extension_for_class(x509.SubjectAlternativeName)

    def test_each_issue_is_unique(self, ca):
        ca_key, ca_cert = ca
        issuer = CertificateIssuer()
        config = CertConfig(common_name="etcd peer")
        key_a, cert_a = issuer.issue(ca_key, ca_cert, config)
        key_b, cert_b = issuer.issue(ca_key, ca_cert, config)
        assert cert_a.serial_number != cert_b.serial_number
        assert cert_a.signature != cert_b.signature
        assert key_a.private_numbers() != key_b.private_numbers()

    def test_validity_days(self, ca):
        ca_key, ca_cert = ca
        _, cert = CertificateIssuer(validity_days=7).issue(
            ca_key, ca_cert, CertConfig(common_name="etcd client")
        )
        assert (cert.not_valid_after_utc - cert.not_valid_before_utc).days == 7

    def test_key_failure_wrapped(self, ca):
        ca_key, ca_cert = ca
        gen = MagicMock(spec=KeyPairGenerator)
        gen.generate.side_effect = KeyGenerationError("boom")
        with pytest.raises(CertificateIssuanceError, match="boom") as exc_info:
            CertificateIssuer(key_generator=gen).issue(
                ca_key, ca_cert, CertConfig(common_name="etcd client")
            )
        assert isinstance(exc_info.value.__cause__, KeyGenerationError)

    def test_signing_failure_wrapped(self, ca):
        _, ca_cert = ca
        with pytest.raises(CertificateIssuanceError, match="sign certificate"):
            CertificateIssuer().issue(object(), ca_cert, CertConfig(common_name="etcd client"))
