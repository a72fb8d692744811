"""
Provisioning orchestrator

Produces the TLS secrets of one cluster: obtains a trust root, then for each
role profile in order issues a leaf certificate, assembles its bundle and
creates it in the secret store.

The run is linear and fail-fast. The first failing stage aborts the run with
its error annotated by stage; secrets persisted before the failure are left
in place for the caller's next reconciliation pass. Nothing is retried.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Optional, Sequence

from pydantic import BaseModel, Field

from ..config import ClusterDescriptor, ProvisioningConfig
from ..constants import PROVISIONING_ERROR_PREFIX
from ..exceptions import EtcdTLSError, PersistenceError
from ..naming import labels_for_cluster
from ..storage.base import SecretStore
from ..tls.ca import CertificateAuthority, SelfSignedTrustRoot, TrustRoot, TrustRootProvider
from ..tls.issuer import CertificateIssuer
from ..tls.keys import KeyPairGenerator
from ..tls.pem import encode_certificate_pem
from .bundle import CredentialBundle, CredentialBundleAssembler
from .profiles import DEFAULT_ROLE_PROFILES, RoleProfile, RoleProfileBuilder

logger = logging.getLogger(__name__)

STAGE_CREATE_CA = "create_ca"


def issue_stage(role: str) -> str:
    return f"issue_{role}"


def persist_stage(role: str) -> str:
    return f"persist_{role}"


class ProvisioningState(str, Enum):
    INITIAL = "initial"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


class ProvisioningResult(BaseModel):
    """Outcome of a successful provisioning run."""

    cluster: str
    namespace: str
    state: ProvisioningState = ProvisioningState.COMPLETED
    secrets: list[str] = Field(default_factory=list, description="Persisted secret names, in order")
    stages: list[str] = Field(default_factory=list, description="Completed stages, in order")
    ca_certificate: bytes = Field(b"", repr=False, description="PEM of the run's CA certificate")


class ProvisioningOrchestrator:
    """
    Creates the client, server and peer TLS secrets for a cluster.

    Args:
        store: Create-only secret store receiving the bundles.
        config: Organization, domain, key size and lifetimes.
        trust_root: CA provider; defaults to a fresh self-signed CA per run.
        profiles: Ordered role profiles; defaults to client, server, peer.
        issuer: Leaf certificate issuer.
        assembler: Bundle assembler.
        labels: Maps a cluster name to the labels put on every secret.
    """

    def __init__(
        self,
        store: SecretStore,
        config: Optional[ProvisioningConfig] = None,
        trust_root: Optional[TrustRootProvider] = None,
        profiles: Optional[Sequence[RoleProfile]] = None,
        issuer: Optional[CertificateIssuer] = None,
        assembler: Optional[CredentialBundleAssembler] = None,
        labels: Callable[[str], dict[str, str]] = labels_for_cluster,
    ) -> None:
        self.store = store
        self.config = config or ProvisioningConfig()
        key_generator = KeyPairGenerator(self.config.key_size)
        self.trust_root = trust_root or SelfSignedTrustRoot(
            CertificateAuthority(
                key_generator=key_generator,
                common_name=self.config.ca_common_name,
                validity_days=self.config.ca_validity_days,
            ),
            organization=self.config.organization,
        )
        self.profile_builder = RoleProfileBuilder(
            profiles or DEFAULT_ROLE_PROFILES,
            organization=self.config.organization,
        )
        self.issuer = issuer or CertificateIssuer(
            key_generator=key_generator,
            validity_days=self.config.cert_validity_days,
        )
        self.assembler = assembler or CredentialBundleAssembler()
        self.labels = labels
        self.state = ProvisioningState.INITIAL

    @property
    def profiles(self) -> tuple[RoleProfile, ...]:
        return self.profile_builder.profiles

    def issue_bundle(
        self,
        root: TrustRoot,
        profile: RoleProfile,
        cluster: ClusterDescriptor,
    ) -> CredentialBundle:
        """Issue the leaf certificate for one role and package it.

        Raises:
            CertificateIssuanceError: If the key or certificate cannot be produced.
        """
        cert_config = self.profile_builder.build(
            profile.role, cluster.name, cluster.namespace, cluster.domain(self.config)
        )
        key, cert = self.issuer.issue(root.key, root.certificate, cert_config)
        return self.assembler.assemble(
            role=profile.role,
            secret_name=profile.secret_name(cluster.name),
            labels=self.labels(cluster.name),
            key=key,
            cert=cert,
            ca_cert=root.certificate,
            field_map=profile.field_map,
        )

    def build_bundles(self, cluster: ClusterDescriptor) -> list[CredentialBundle]:
        """Issue every role's bundle under one new trust root without persisting.

        Each call yields different keys and signatures.

        Raises:
            EtcdTLSError: Annotated with the failing stage.
        """
        root = self._run_stage(STAGE_CREATE_CA, self.trust_root.provide)
        return [
            self._run_stage(issue_stage(p.role), self.issue_bundle, root, p, cluster)
            for p in self.profiles
        ]

    def provision(self, cluster: ClusterDescriptor) -> ProvisioningResult:
        """Create the TLS secrets of ``cluster`` in the secret store.

        Returns:
            A ProvisioningResult listing the created secrets.

        Raises:
            CAInitializationError: If the trust root cannot be obtained.
            CertificateIssuanceError: If a leaf cannot be issued.
            PersistenceError: If the store rejects a bundle.
        """
        logger.info("Preparing TLS secrets for cluster %s/%s", cluster.namespace, cluster.name)
        self.state = ProvisioningState.RUNNING
        result = ProvisioningResult(
            cluster=cluster.name,
            namespace=cluster.namespace,
            state=ProvisioningState.RUNNING,
        )
        try:
            root = self._run_stage(STAGE_CREATE_CA, self.trust_root.provide)
            result.stages.append(STAGE_CREATE_CA)
            for profile in self.profiles:
                bundle = self._run_stage(
                    issue_stage(profile.role), self.issue_bundle, root, profile, cluster
                )
                result.stages.append(issue_stage(profile.role))
                self._run_stage(persist_stage(profile.role), self._persist, bundle)
                result.stages.append(persist_stage(profile.role))
                result.secrets.append(bundle.name)
        except Exception:
            self.state = ProvisioningState.FAILED
            raise

        self.state = ProvisioningState.COMPLETED
        result.state = ProvisioningState.COMPLETED
        result.ca_certificate = encode_certificate_pem(root.certificate)
        logger.info(
            "Prepared %d TLS secrets for cluster %s/%s",
            len(result.secrets),
            cluster.namespace,
            cluster.name,
        )
        return result

    def _persist(self, bundle: CredentialBundle) -> None:
        try:
            self.store.create_named_record(bundle.name, bundle.labels, bundle.data)
        except PersistenceError:
            raise
        except Exception as exc:
            raise PersistenceError(f"create secret {bundle.name!r} failed: {exc}") from exc
        logger.info("Created TLS secret %s (%s)", bundle.name, bundle.role)

    def _run_stage(self, stage: str, fn, *args):
        try:
            return fn(*args)
        except EtcdTLSError as exc:
            logger.error("TLS provisioning stage %s failed: %s", stage, exc)
            raise type(exc)(f"{PROVISIONING_ERROR_PREFIX}: {exc}", stage=stage) from exc
