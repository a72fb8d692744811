"""
Provisioning configuration.

Organization, cluster domain and certificate lifetimes are passed into the
orchestrator explicitly so that callers and tests can vary them.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .constants import (
    DEFAULT_CA_COMMON_NAME,
    DEFAULT_CA_VALIDITY_DAYS,
    DEFAULT_CERT_VALIDITY_DAYS,
    DEFAULT_CLUSTER_DOMAIN,
    DEFAULT_ORGANIZATION,
    DEFAULT_RSA_KEY_SIZE,
    MIN_RSA_KEY_SIZE,
)


class ProvisioningConfig(BaseModel):
    """Configuration shared by every stage of a provisioning run.

    Attributes:
        organization: Subject ``O`` entries for the CA and every leaf.
        cluster_domain: DNS domain used when a cluster does not set its own.
        ca_common_name: Subject CN of the self-signed CA.
        key_size: RSA modulus size in bits for every generated key.
        ca_validity_days: Lifetime of the self-signed CA certificate.
        cert_validity_days: Lifetime of each leaf certificate.
    """

    model_config = ConfigDict(frozen=True)

    organization: list[str] = Field(
        default_factory=lambda: list(DEFAULT_ORGANIZATION),
        min_length=1,
        description="Certificate subject organization",
    )
    cluster_domain: str = Field(default=DEFAULT_CLUSTER_DOMAIN, min_length=1)
    ca_common_name: str = Field(default=DEFAULT_CA_COMMON_NAME, min_length=1)
    key_size: int = Field(default=DEFAULT_RSA_KEY_SIZE, ge=MIN_RSA_KEY_SIZE)
    ca_validity_days: int = Field(default=DEFAULT_CA_VALIDITY_DAYS, ge=1)
    cert_validity_days: int = Field(default=DEFAULT_CERT_VALIDITY_DAYS, ge=1)


class ClusterDescriptor(BaseModel):
    """The cluster a provisioning run produces credentials for."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Cluster name")
    namespace: str = Field(..., min_length=1, description="Namespace the cluster lives in")
    cluster_domain: Optional[str] = Field(
        default=None, description="Cluster DNS domain; falls back to ProvisioningConfig"
    )

    def domain(self, config: ProvisioningConfig) -> str:
        """Return the effective cluster domain."""
        return self.cluster_domain or config.cluster_domain


class FieldMap(BaseModel):
    """Output field names for the three PEM payloads of a bundle."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    key: str = Field(..., description="Field holding the leaf private key")
    cert: str = Field(..., description="Field holding the leaf certificate")
    ca: str = Field(..., description="Field holding the CA certificate")

    @field_validator("key", "cert", "ca")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("field name must not be blank")
        return value

    @model_validator(mode="after")
    def _distinct(self) -> "FieldMap":
        if len({self.key, self.cert, self.ca}) != 3:
            raise ValueError("key, cert and ca field names must be distinct")
        return self
