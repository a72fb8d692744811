"""Tests for the certificate authority and trust root providers."""

from unittest.mock import MagicMock

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec

from etcdtls.exceptions import CAInitializationError, KeyGenerationError
from etcdtls.tls.ca import (
    CertificateAuthority,
    ExternalTrustRoot,
    SelfSignedTrustRoot,
    TrustRoot,
)
from etcdtls.tls.certs import CertConfig, common_name_of, is_ca, organization_of, verify_signed_by
from etcdtls.tls.issuer import CertificateIssuer
from etcdtls.tls.keys import KeyPairGenerator
from etcdtls.tls.pem import encode_certificate_pem, encode_private_key_pem


@pytest.fixture(scope="module")
def root() -> tuple:
    return CertificateAuthority().create_root(["coreos.com"])


class TestCertificateAuthority:
    """Tests for self-signed root creation."""

    def test_issuer_equals_subject(self, root):
        _, cert = root
        assert cert.issuer == cert.subject

    def test_verifies_against_own_key(self, root):
        _, cert = root
        assert verify_signed_by(cert, cert)

    def test_subject_identity(self, root):
        _, cert = root
        assert common_name_of(cert) == "vault operator CA"
        assert organization_of(cert) == ["coreos.com"]

    def test_marked_as_ca(self, root):
        _, cert = root
        bc = cert.extensions.get_extension_for_class(x509.BasicConstraints)
        assert bc.critical
        assert bc.value.ca is True
        assert is_ca(cert)

    def test_key_usage_allows_cert_signing(self, root):
        _, cert = root
        ku = cert.extensions.get_extension_for_class(x509.KeyUsage).value
        assert ku.key_cert_sign is True
        assert ku.digital_signature is True

    def test_no_alt_names(self, root):
        _, cert = root
        with pytest.raises(x509.ExtensionNotFound):
            cert.extensions.get_extension_for_class(x509.SubjectAlternativeName)

    def test_key_matches_certificate(self, root):
        key, cert = root
        assert cert.public_key().public_numbers() == key.public_key().public_numbers()

    def test_validity_window(self):
        _, cert = CertificateAuthority(validity_days=30).create_root()
        lifetime = cert.not_valid_after_utc - cert.not_valid_before_utc
        assert lifetime.days == 30

    def test_custom_common_name_and_org(self):
        _, cert = CertificateAuthority(common_name="test CA").create_root(["a.org", "b.org"])
        assert common_name_of(cert) == "test CA"
        assert organization_of(cert) == ["a.org", "b.org"]

    def test_key_failure_wrapped(self):
        gen = MagicMock(spec=KeyPairGenerator)
        gen.generate.side_effect = KeyGenerationError("no entropy")
        with pytest.raises(CAInitializationError, match="no entropy") as exc_info:
            CertificateAuthority(key_generator=gen).create_root()
        assert isinstance(exc_info.value.__cause__, KeyGenerationError)


class TestSelfSignedTrustRoot:
    """Tests for the generating trust root provider."""

    def test_each_call_generates_new_ca(self):
        provider = SelfSignedTrustRoot()
        a, b = provider.provide(), provider.provide()
        assert a.certificate.serial_number != b.certificate.serial_number
        assert a.key.private_numbers() != b.key.private_numbers()

    def test_repr_hides_key(self):
        root = SelfSignedTrustRoot().provide()
        assert "PRIVATE" not in repr(root)
        assert "vault operator CA" in repr(root)


class TestExternalTrustRoot:
    """Tests for importing a user-supplied CA."""

    def test_imports_valid_ca(self, root):
        key, cert = root
        imported = ExternalTrustRoot(
            encode_private_key_pem(key), encode_certificate_pem(cert)
        ).provide()
        assert imported.certificate == cert
        assert imported.key.private_numbers() == key.private_numbers()

    def test_imported_ca_signs_leaves(self, root):
        key, cert = root
        imported = ExternalTrustRoot.from_trust_root(TrustRoot(key=key, certificate=cert)).provide()
        _, leaf = CertificateIssuer().issue(
            imported.key, imported.certificate, CertConfig(common_name="etcd client")
        )
        assert verify_signed_by(leaf, cert)

    def test_rejects_garbage_key(self, root):
        _, cert = root
        with pytest.raises(CAInitializationError, match="load CA key"):
            ExternalTrustRoot(b"not a key", encode_certificate_pem(cert)).provide()

    def test_rejects_garbage_certificate(self, root):
        key, _ = root
        with pytest.raises(CAInitializationError, match="load CA certificate"):
            ExternalTrustRoot(encode_private_key_pem(key), b"not a cert").provide()

    def test_rejects_non_rsa_key(self, root):
        _, cert = root
        ec_pem = ec.generate_private_key(ec.SECP256R1()).private_bytes(
            serialization.Encoding.PEM,
            serialization.PrivateFormat.PKCS8,
            serialization.NoEncryption(),
        )
        with pytest.raises(CAInitializationError, match="RSA"):
            ExternalTrustRoot(ec_pem, encode_certificate_pem(cert)).provide()

    def test_rejects_leaf_certificate(self, root):
        ca_key, ca_cert = root
        leaf_key, leaf = CertificateIssuer().issue(
            ca_key, ca_cert, CertConfig(common_name="etcd peer")
        )
        with pytest.raises(CAInitializationError, match="not a CA"):
            ExternalTrustRoot(
                encode_private_key_pem(leaf_key), encode_certificate_pem(leaf)
            ).provide()

    def test_rejects_mismatched_key(self, root):
        _, cert = root
        other = KeyPairGenerator().generate()
        with pytest.raises(CAInitializationError, match="does not match"):
            ExternalTrustRoot(encode_private_key_pem(other), encode_certificate_pem(cert)).provide()
