# Copyright (c) etcdtls Contributors. All rights reserved.
# Licensed under the MIT License.
"""
Abstract Secret Store Interface.

Defines the create-only contract every secret store backend implements.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field


class SecretRecord(BaseModel):
    """A stored secret as read back from a store."""

    model_config = ConfigDict(frozen=True)

    name: str
    labels: dict[str, str] = Field(default_factory=dict)
    data: dict[str, bytes] = Field(default_factory=dict, repr=False)


class SecretStore(ABC):
    """
    Abstract secret store.

    Records are created once and never overwritten: creating a name that
    already exists is a failure.
    """

    @abstractmethod
    def create_named_record(
        self,
        name: str,
        labels: Mapping[str, str],
        fields: Mapping[str, bytes],
    ) -> None:
        """Create a new record.

        Raises:
            PersistenceError: If ``name`` already exists or the backend fails.
        """

    @abstractmethod
    def get_record(self, name: str) -> Optional[SecretRecord]:
        """Return the record called ``name``, or None."""

    def exists(self, name: str) -> bool:
        """Check if a record exists."""
        return self.get_record(name) is not None
