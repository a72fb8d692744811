"""
Secret stores for etcdtls.

Provides the create-only SecretStore contract and reference backends.
"""

from .base import SecretRecord, SecretStore
from .memory_store import MemorySecretStore
from .directory_store import DirectorySecretStore
from .redis_store import RedisSecretStore

__all__ = [
    "SecretRecord",
    "SecretStore",
    "MemorySecretStore",
    "DirectorySecretStore",
    "RedisSecretStore",
]
