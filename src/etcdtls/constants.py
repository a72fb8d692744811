"""
etcdtls constants.

Defaults for certificate identity and validity. Everything here can be
overridden through ProvisioningConfig.
"""

# Certificate subject
DEFAULT_ORGANIZATION = ("coreos.com",)
DEFAULT_CA_COMMON_NAME = "vault operator CA"

# Cluster addressing
DEFAULT_CLUSTER_DOMAIN = "cluster.local"

# Key material
RSA_PUBLIC_EXPONENT = 65537
DEFAULT_RSA_KEY_SIZE = 2048
MIN_RSA_KEY_SIZE = 2048

# Validity windows (days)
DEFAULT_CA_VALIDITY_DAYS = 3650
DEFAULT_CERT_VALIDITY_DAYS = 365

# Error prefix for a failed provisioning run
PROVISIONING_ERROR_PREFIX = "prepare TLS secrets failed"
