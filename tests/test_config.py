"""Tests for configuration models."""

import pytest
from pydantic import ValidationError

from etcdtls.config import ClusterDescriptor, FieldMap, ProvisioningConfig


class TestProvisioningConfig:
    """Tests for ProvisioningConfig defaults and validation."""

    def test_defaults(self):
        cfg = ProvisioningConfig()
        assert cfg.organization == ["coreos.com"]
        assert cfg.cluster_domain == "cluster.local"
        assert cfg.ca_common_name == "vault operator CA"
        assert cfg.key_size == 2048
        assert cfg.ca_validity_days == 3650
        assert cfg.cert_validity_days == 365

    def test_rejects_small_keys(self):
        with pytest.raises(ValidationError):
            ProvisioningConfig(key_size=1024)

    def test_rejects_empty_organization(self):
        with pytest.raises(ValidationError):
            ProvisioningConfig(organization=[])

    def test_defaults_are_not_shared(self):
        a, b = ProvisioningConfig(), ProvisioningConfig()
        assert a.organization is not b.organization


class TestClusterDescriptor:
    """Tests for ClusterDescriptor."""

    def test_domain_falls_back_to_config(self):
        cluster = ClusterDescriptor(name="v", namespace="ns")
        assert cluster.domain(ProvisioningConfig()) == "cluster.local"
        assert cluster.domain(ProvisioningConfig(cluster_domain="x.local")) == "x.local"

    def test_own_domain_wins(self):
        cluster = ClusterDescriptor(name="v", namespace="ns", cluster_domain="edge.local")
        assert cluster.domain(ProvisioningConfig()) == "edge.local"

    def test_requires_name_and_namespace(self):
        with pytest.raises(ValidationError):
            ClusterDescriptor(name="", namespace="ns")
        with pytest.raises(ValidationError):
            ClusterDescriptor(name="v", namespace="")


class TestFieldMap:
    """Tests for FieldMap."""

    def test_rejects_blank_field(self):
        with pytest.raises(ValidationError):
            FieldMap(key=" ", cert="c", ca="a")

    def test_rejects_unknown_keys(self):
        with pytest.raises(ValidationError):
            FieldMap(key="k", cert="c", ca="a", extra="x")

    @pytest.mark.parametrize(
        "names",
        [
            {"key": "a", "cert": "a", "ca": "c"},
            {"key": "a", "cert": "b", "ca": "a"},
            {"key": "a", "cert": "b", "ca": "b"},
        ],
    )
    def test_rejects_duplicate_field_names(self, names):
        with pytest.raises(ValidationError, match="distinct"):
            FieldMap(**names)
