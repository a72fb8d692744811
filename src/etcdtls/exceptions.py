# Copyright (c) etcdtls Contributors. All rights reserved.
# Licensed under the MIT License.
"""Centralized exception hierarchy for etcdtls.

All etcdtls exceptions inherit from EtcdTLSError. Errors raised while
provisioning carry the name of the stage that failed in ``stage``.
"""

from __future__ import annotations

from typing import Optional


class EtcdTLSError(Exception):
    """Base exception for all etcdtls errors."""

    def __init__(self, message: str = "", stage: Optional[str] = None) -> None:
        super().__init__(message)
        self.stage = stage


class KeyGenerationError(EtcdTLSError):
    """RSA key generation failed."""


class CAInitializationError(EtcdTLSError):
    """The trust root (CA key and certificate) could not be created or imported."""


class CertificateIssuanceError(EtcdTLSError):
    """A leaf certificate could not be generated or signed."""


class PersistenceError(EtcdTLSError):
    """The secret store rejected a credential bundle."""


__all__ = [
    "EtcdTLSError",
    "KeyGenerationError",
    "CAInitializationError",
    "CertificateIssuanceError",
    "PersistenceError",
]
