"""
Directory Secret Store.

Writes each secret to its own directory: one file per field plus a
``labels.json``. Private key files are created with mode 0600.
"""

from __future__ import annotations

import errno
import json
import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Mapping, Optional, Union

from ..exceptions import PersistenceError
from ..tls.pem import pem_block_types
from .base import SecretRecord, SecretStore

logger = logging.getLogger(__name__)

LABELS_FILE = "labels.json"


def _is_private_key(payload: bytes) -> bool:
    return any(t.endswith("PRIVATE KEY") for t in pem_block_types(payload))


class DirectorySecretStore(SecretStore):
    """
    Filesystem-backed secret store.

    Args:
        root: Directory under which one subdirectory per secret is created.
    """

    def __init__(self, root: Union[str, Path]) -> None:
        self.root = Path(root)

    def _secret_dir(self, name: str) -> Path:
        if not name or "/" in name or os.sep in name or name in (".", ".."):
            raise PersistenceError(f"invalid secret name {name!r}")
        return self.root / name

    def create_named_record(
        self,
        name: str,
        labels: Mapping[str, str],
        fields: Mapping[str, bytes],
    ) -> None:
        target = self._secret_dir(name)
        for field_name in fields:
            if "/" in field_name or field_name in ("", ".", "..", LABELS_FILE):
                raise PersistenceError(f"invalid field name {field_name!r} in secret {name!r}")
        if target.exists():
            raise PersistenceError(f"secret {name!r} already exists")

        # Files are written into a private staging directory that is renamed
        # into place only once complete.
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            staging = Path(tempfile.mkdtemp(prefix=f".{name}.", dir=self.root))
        except OSError as exc:
            raise PersistenceError(f"create secret {name!r} failed: {exc}") from exc

        try:
            for field_name, payload in fields.items():
                mode = 0o600 if _is_private_key(payload) else 0o644
                fd = os.open(staging / field_name, os.O_WRONLY | os.O_CREAT | os.O_EXCL, mode)
                with os.fdopen(fd, "wb") as fh:
                    fh.write(payload)
            (staging / LABELS_FILE).write_text(json.dumps(dict(labels), sort_keys=True))
            os.rename(staging, target)
        except OSError as exc:
            shutil.rmtree(staging, ignore_errors=True)
            if exc.errno in (errno.EEXIST, errno.ENOTEMPTY):
                raise PersistenceError(f"secret {name!r} already exists") from exc
            raise PersistenceError(f"write secret {name!r} failed: {exc}") from exc

        logger.debug("Wrote secret %s to %s", name, target)

    def get_record(self, name: str) -> Optional[SecretRecord]:
        target = self._secret_dir(name)
        if not target.is_dir():
            return None
        labels: dict[str, str] = {}
        data: dict[str, bytes] = {}
        for path in sorted(target.iterdir()):
            if path.name == LABELS_FILE:
                labels = json.loads(path.read_text())
            elif path.is_file():
                data[path.name] = path.read_bytes()
        return SecretRecord(name=name, labels=labels, data=data)
