"""
Credential bundles

A CredentialBundle is what the secret store receives for one role: the
leaf key, the leaf certificate and the CA certificate, PEM-encoded and keyed
by the role's output field names.
"""

from __future__ import annotations

from typing import Mapping, Union

from cryptography import x509
from cryptography.hazmat.primitives.asymmetric import rsa
from pydantic import BaseModel, ConfigDict, Field

from ..config import FieldMap
from ..tls.pem import encode_certificate_pem, encode_private_key_pem


class CredentialBundle(BaseModel):
    """A named, labelled set of PEM payloads ready for the secret store.

    ``data`` is excluded from ``repr`` so bundles can be logged safely.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Secret name in the store")
    role: str = Field(..., description="TLS role the bundle was issued for")
    labels: dict[str, str] = Field(default_factory=dict)
    data: dict[str, bytes] = Field(default_factory=dict, repr=False)

    def field_names(self) -> list[str]:
        return sorted(self.data)


class CredentialBundleAssembler:
    """Encodes a (key, certificate, CA certificate) triple into a bundle."""

    def assemble(
        self,
        role: str,
        secret_name: str,
        labels: Mapping[str, str],
        key: rsa.RSAPrivateKey,
        cert: x509.Certificate,
        ca_cert: x509.Certificate,
        field_map: Union[FieldMap, Mapping[str, str]],
    ) -> CredentialBundle:
        """Build the bundle for one role.

        Args:
            role: Role name, recorded on the bundle.
            secret_name: Opaque name the store will create.
            labels: Labels attached to the stored record.
            key: The leaf private key.
            cert: The leaf certificate.
            ca_cert: The CA certificate. The CA key is never part of a bundle.
            field_map: Output field names for ``key``, ``cert`` and ``ca``.

        Returns:
            A new CredentialBundle.

        Raises:
            pydantic.ValidationError: If ``field_map`` lacks one of the three keys.
        """
        if not isinstance(field_map, FieldMap):
            field_map = FieldMap.model_validate(dict(field_map))
        return CredentialBundle(
            name=secret_name,
            role=role,
            labels=dict(labels),
            data={
                field_map.key: encode_private_key_pem(key),
                field_map.cert: encode_certificate_pem(cert),
                field_map.ca: encode_certificate_pem(ca_cert),
            },
        )
