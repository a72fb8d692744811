"""
Role profiles

Each TLS role (client, server, peer) is described by a RoleProfile: its
Common Name, the SAN templates it must be valid for, where its PEM payloads
go in the bundle and how its secret is named. The orchestrator walks the
profiles in order, so a new role is added by appending a profile.

SAN templates are ``str.format`` strings over ``member`` (the etcd member
service name), ``namespace`` and ``domain``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Sequence

from ..config import FieldMap
from ..constants import DEFAULT_ORGANIZATION
from ..naming import (
    etcd_client_tls_secret_name,
    etcd_name_for_cluster,
    etcd_peer_tls_secret_name,
    etcd_server_tls_secret_name,
)
from ..tls.certs import AltNames, CertConfig

MEMBER_WILDCARD_SAN = "*.{member}.{namespace}.svc.{domain}"
CLIENT_SERVICE_SAN = "{member}-client.{namespace}.svc.{domain}"


class Role(str, Enum):
    CLIENT = "client"
    SERVER = "server"
    PEER = "peer"


@dataclass(frozen=True)
class RoleProfile:
    """Declarative description of one TLS role."""

    role: str
    common_name: str
    field_map: FieldMap
    secret_name: Callable[[str], str]
    san_templates: tuple[str, ...] = ()

    def alt_names(self, cluster_name: str, namespace: str, cluster_domain: str) -> list[str]:
        member = etcd_name_for_cluster(cluster_name)
        return [
            tpl.format(member=member, namespace=namespace, domain=cluster_domain)
            for tpl in self.san_templates
        ]


CLIENT_PROFILE = RoleProfile(
    role=Role.CLIENT.value,
    common_name="etcd client",
    field_map=FieldMap(key="etcd-client.key", cert="etcd-client.crt", ca="etcd-client-ca.crt"),
    secret_name=etcd_client_tls_secret_name,
)

# Server certs answer on member addresses and on the client-facing service.
SERVER_PROFILE = RoleProfile(
    role=Role.SERVER.value,
    common_name="etcd server",
    field_map=FieldMap(key="server.key", cert="server.crt", ca="server-ca.crt"),
    secret_name=etcd_server_tls_secret_name,
    san_templates=("localhost", MEMBER_WILDCARD_SAN, CLIENT_SERVICE_SAN),
)

PEER_PROFILE = RoleProfile(
    role=Role.PEER.value,
    common_name="etcd peer",
    field_map=FieldMap(key="peer.key", cert="peer.crt", ca="peer-ca.crt"),
    secret_name=etcd_peer_tls_secret_name,
    san_templates=(MEMBER_WILDCARD_SAN,),
)

DEFAULT_ROLE_PROFILES: tuple[RoleProfile, ...] = (CLIENT_PROFILE, SERVER_PROFILE, PEER_PROFILE)


class RoleProfileBuilder:
    """Derives the CertConfig of each role from cluster naming conventions.

    Pure and deterministic. Inputs are not validated.

    Example:
        >>> builder = RoleProfileBuilder()
        >>> builder.build("peer", "vault1", "ns1", "cluster.local").alt_names.dns_names
        ('*.vault1-etcd.ns1.svc.cluster.local',)
    """

    def __init__(
        self,
        profiles: Optional[Sequence[RoleProfile]] = None,
        organization: Sequence[str] = DEFAULT_ORGANIZATION,
    ) -> None:
        self.profiles: tuple[RoleProfile, ...] = tuple(profiles or DEFAULT_ROLE_PROFILES)
        self.organization = tuple(organization)
        self._by_role = {p.role: p for p in self.profiles}

    def profile(self, role: str | Role) -> RoleProfile:
        """Look up a profile by role name.

        Raises:
            KeyError: If no profile is declared for ``role``.
        """
        key = role.value if isinstance(role, Role) else role
        return self._by_role[key]

    def build(
        self,
        role: str | Role,
        cluster_name: str,
        namespace: str,
        cluster_domain: str,
    ) -> CertConfig:
        """Return the certificate identity for ``role`` in the given cluster."""
        profile = self.profile(role)
        return CertConfig(
            common_name=profile.common_name,
            organization=self.organization,
            alt_names=AltNames.from_addresses(
                profile.alt_names(cluster_name, namespace, cluster_domain)
            ),
        )
