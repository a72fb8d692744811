"""
Provisioning

Role profiles, credential bundles and the orchestrator that turns a cluster
descriptor into three persisted TLS secrets.
"""

from .profiles import (
    CLIENT_PROFILE,
    DEFAULT_ROLE_PROFILES,
    PEER_PROFILE,
    SERVER_PROFILE,
    Role,
    RoleProfile,
    RoleProfileBuilder,
)
from .bundle import CredentialBundle, CredentialBundleAssembler
from .orchestrator import (
    ProvisioningOrchestrator,
    ProvisioningResult,
    ProvisioningState,
)

__all__ = [
    "CLIENT_PROFILE",
    "DEFAULT_ROLE_PROFILES",
    "PEER_PROFILE",
    "SERVER_PROFILE",
    "Role",
    "RoleProfile",
    "RoleProfileBuilder",
    "CredentialBundle",
    "CredentialBundleAssembler",
    "ProvisioningOrchestrator",
    "ProvisioningResult",
    "ProvisioningState",
]
