"""
Redis Secret Store.

Stores each secret as a Redis hash (field name -> PEM bytes) plus a labels
key. The labels key is written with ``SET NX`` first and doubles as the
existence marker, so two writers can never create the same secret. If the
data write fails the marker is deleted again, leaving no record behind.
"""

from __future__ import annotations

import json
import logging
from typing import Mapping, Optional

from ..exceptions import PersistenceError
from .base import SecretRecord, SecretStore

try:
    import redis

    _REDIS_AVAILABLE = True
except ImportError:
    _REDIS_AVAILABLE = False

logger = logging.getLogger(__name__)


def _require_redis() -> None:
    """Raise ImportError if redis package is not installed."""
    if not _REDIS_AVAILABLE:
        raise ImportError(
            "redis package is required for RedisSecretStore. "
            "Install with: pip install etcdtls[storage] "
            "or pip install redis>=4.0"
        )


class RedisSecretStore(SecretStore):
    """
    Redis-backed secret store.

    Args:
        redis_url: Redis connection URL.
        prefix: Key prefix for all stored data.
        client: An existing Redis client; ``redis_url`` is ignored when given.
    """

    DATA_SUFFIX = "secret"
    LABELS_SUFFIX = "labels"

    def __init__(
        self,
        redis_url: str = "redis://localhost:6379",
        prefix: str = "etcdtls:",
        client: Optional["redis.Redis"] = None,
    ) -> None:
        self._prefix = prefix
        if client is None:
            _require_redis()
            client = redis.Redis.from_url(redis_url)
        self._client = client

    def _key(self, name: str, suffix: str) -> str:
        return f"{self._prefix}{suffix}:{name}"

    def create_named_record(
        self,
        name: str,
        labels: Mapping[str, str],
        fields: Mapping[str, bytes],
    ) -> None:
        labels_key = self._key(name, self.LABELS_SUFFIX)
        data_key = self._key(name, self.DATA_SUFFIX)
        try:
            created = self._client.set(labels_key, json.dumps(dict(labels)), nx=True)
        except Exception as exc:
            raise PersistenceError(f"create secret {name!r} failed: {exc}") from exc
        if not created:
            raise PersistenceError(f"secret {name!r} already exists")
        try:
            if fields:
                self._client.hset(data_key, mapping=dict(fields))
        except Exception as exc:
            self._release(labels_key, data_key)
            raise PersistenceError(f"write secret {name!r} failed: {exc}") from exc
        logger.debug("Stored secret %s under %s", name, data_key)

    def _release(self, labels_key: str, data_key: str) -> None:
        """Drop a half-written secret so the name can be created again."""
        try:
            self._client.delete(data_key, labels_key)
        except Exception:
            logger.warning("Could not release marker %s after failed write", labels_key, exc_info=True)

    def get_record(self, name: str) -> Optional[SecretRecord]:
        raw_labels = self._client.get(self._key(name, self.LABELS_SUFFIX))
        if raw_labels is None:
            return None
        raw_data = self._client.hgetall(self._key(name, self.DATA_SUFFIX))
        data = {
            (k.decode() if isinstance(k, bytes) else k): (v if isinstance(v, bytes) else v.encode())
            for k, v in raw_data.items()
        }
        return SecretRecord(name=name, labels=json.loads(raw_labels), data=data)
