"""
etcdtls - TLS bootstrap for Vault's etcd storage cluster

Bootstraps a private CA and mints the client, server and peer certificates
that etcd members and their clients use for mutual TLS, then hands each one
to a secret store as a named bundle.

Version: 0.1.0
"""

__version__ = "0.1.0"

from .config import ClusterDescriptor, FieldMap, ProvisioningConfig
from .exceptions import (
    CAInitializationError,
    CertificateIssuanceError,
    EtcdTLSError,
    KeyGenerationError,
    PersistenceError,
)
from .provisioning import (
    CredentialBundle,
    CredentialBundleAssembler,
    ProvisioningOrchestrator,
    ProvisioningResult,
    ProvisioningState,
    Role,
    RoleProfile,
    RoleProfileBuilder,
)
from .storage import (
    DirectorySecretStore,
    MemorySecretStore,
    RedisSecretStore,
    SecretRecord,
    SecretStore,
)
from .tls import (
    AltNames,
    CertConfig,
    CertificateAuthority,
    CertificateIssuer,
    ExternalTrustRoot,
    KeyPairGenerator,
    SelfSignedTrustRoot,
    TrustRoot,
    TrustRootProvider,
)

__all__ = [
    "__version__",
    # Configuration
    "ClusterDescriptor",
    "FieldMap",
    "ProvisioningConfig",
    # Errors
    "CAInitializationError",
    "CertificateIssuanceError",
    "EtcdTLSError",
    "KeyGenerationError",
    "PersistenceError",
    # Provisioning
    "CredentialBundle",
    "CredentialBundleAssembler",
    "ProvisioningOrchestrator",
    "ProvisioningResult",
    "ProvisioningState",
    "Role",
    "RoleProfile",
    "RoleProfileBuilder",
    # Storage
    "DirectorySecretStore",
    "MemorySecretStore",
    "RedisSecretStore",
    "SecretRecord",
    "SecretStore",
    # TLS
    "AltNames",
    "CertConfig",
    "CertificateAuthority",
    "CertificateIssuer",
    "ExternalTrustRoot",
    "KeyPairGenerator",
    "SelfSignedTrustRoot",
    "TrustRoot",
    "TrustRootProvider",
]
