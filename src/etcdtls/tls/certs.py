"""
Certificate identity value objects and inspection helpers.

CertConfig describes who a certificate is for: its Common Name, its
Organization list and the Subject Alternative Names it is valid for.
"""

from __future__ import annotations

import ipaddress
from dataclasses import dataclass, field
from typing import Iterable, Union

from cryptography import x509
from cryptography.exceptions import InvalidSignature
from cryptography.x509.oid import NameOID

from ..constants import DEFAULT_ORGANIZATION

IPAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]


@dataclass(frozen=True)
class AltNames:
    """Subject Alternative Names split into DNS names and IP addresses."""

    dns_names: tuple[str, ...] = ()
    ips: tuple[IPAddress, ...] = ()

    @classmethod
    def from_addresses(cls, addresses: Iterable[str] | None) -> "AltNames":
        """Build AltNames from plain address strings.

        Strings that parse as an IP address become IP SANs, everything else
        is kept verbatim as a DNS name. Duplicates are dropped.
        """
        dns_names: list[str] = []
        ips: list[IPAddress] = []
        for addr in addresses or ():
            try:
                ip = ipaddress.ip_address(addr)
            except ValueError:
                if addr not in dns_names:
                    dns_names.append(addr)
                continue
            if ip not in ips:
                ips.append(ip)
        return cls(dns_names=tuple(dns_names), ips=tuple(ips))

    def __bool__(self) -> bool:
        return bool(self.dns_names or self.ips)

    def as_set(self) -> set[str]:
        """All names as strings, IPs in their canonical text form."""
        return set(self.dns_names) | {str(ip) for ip in self.ips}

    def to_general_names(self) -> list[x509.GeneralName]:
        names: list[x509.GeneralName] = [x509.DNSName(n) for n in self.dns_names]
        names.extend(x509.IPAddress(ip) for ip in self.ips)
        return names


@dataclass(frozen=True)
class CertConfig:
    """Identity encoded into a certificate subject and SAN extension."""

    common_name: str
    organization: tuple[str, ...] = DEFAULT_ORGANIZATION
    alt_names: AltNames = field(default_factory=AltNames)

    def subject(self) -> x509.Name:
        attrs = [x509.NameAttribute(NameOID.ORGANIZATION_NAME, org) for org in self.organization]
        attrs.append(x509.NameAttribute(NameOID.COMMON_NAME, self.common_name))
        return x509.Name(attrs)


def common_name_of(cert: x509.Certificate) -> str:
    """Return the subject Common Name, or an empty string if absent."""
    attrs = cert.subject.get_attributes_for_oid(NameOID.COMMON_NAME)
    return str(attrs[0].value) if attrs else ""


def organization_of(cert: x509.Certificate) -> list[str]:
    """Return the subject Organization entries in order."""
    return [str(a.value) for a in cert.subject.get_attributes_for_oid(NameOID.ORGANIZATION_NAME)]


def alt_names_of(cert: x509.Certificate) -> set[str]:
    """Return every DNS and IP SAN of ``cert`` as strings."""
    try:
        san = cert.extensions.get_extension_for_class(x509.SubjectAlternativeName).value
    except x509.ExtensionNotFound:
        return set()
    names = set(san.get_values_for_type(x509.DNSName))
    names.update(str(ip) for ip in san.get_values_for_type(x509.IPAddress))
    return names


def is_ca(cert: x509.Certificate) -> bool:
    """True if ``cert`` carries BasicConstraints with CA=true."""
    try:
        return cert.extensions.get_extension_for_class(x509.BasicConstraints).value.ca
    except x509.ExtensionNotFound:
        return False


def verify_signed_by(cert: x509.Certificate, ca_cert: x509.Certificate) -> bool:
    """Check that ``cert`` was issued and signed by ``ca_cert``.

    Verifies the issuer name and the signature against the CA public key.
    A self-signed certificate verifies against itself.
    """
    try:
        cert.verify_directly_issued_by(ca_cert)
    except (ValueError, TypeError, InvalidSignature):
        return False
    return True
