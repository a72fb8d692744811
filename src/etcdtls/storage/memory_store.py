"""
In-Memory Secret Store.

Dictionary-backed store for development and testing. Data is lost on exit.
"""

from __future__ import annotations

import threading
from typing import Mapping, Optional

from ..exceptions import PersistenceError
from .base import SecretRecord, SecretStore


class MemorySecretStore(SecretStore):
    """
    In-memory secret store.

    ``create_calls`` lists every name passed to ``create_named_record``, in
    order, including rejected ones.
    """

    def __init__(self) -> None:
        self._records: dict[str, SecretRecord] = {}
        self._lock = threading.Lock()
        self.create_calls: list[str] = []

    def create_named_record(
        self,
        name: str,
        labels: Mapping[str, str],
        fields: Mapping[str, bytes],
    ) -> None:
        with self._lock:
            self.create_calls.append(name)
            if name in self._records:
                raise PersistenceError(f"secret {name!r} already exists")
            self._records[name] = SecretRecord(name=name, labels=dict(labels), data=dict(fields))

    def get_record(self, name: str) -> Optional[SecretRecord]:
        return self._records.get(name)

    def names(self) -> list[str]:
        """Names of all stored records in creation order."""
        return list(self._records)
