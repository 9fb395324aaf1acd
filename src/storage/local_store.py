# src/storage/local_store.py — v1
"""Local filesystem object store (default backend)."""

from __future__ import annotations

import logging
from pathlib import Path

from examingest.core.errors import DownloadFailure
from examingest.storage.base_object_store import BaseObjectStore

logger = logging.getLogger(__name__)


class LocalObjectStore(BaseObjectStore):
    """Store documents under a root directory."""

    def __init__(self, root: str | Path) -> None:
        self._root = Path(root).expanduser().resolve()

    def _resolve(self, path: str) -> Path:
        """Resolve a relative path, refusing anything outside the root."""
        resolved = (self._root / path).resolve()
        if not path or not resolved.is_relative_to(self._root):
            raise DownloadFailure(path, "path escapes the object store root")
        return resolved

    async def upload(self, path: str, data: bytes) -> str:
        p = self._resolve(path)
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_bytes(data)
        logger.debug("Stored %s (%d bytes)", p, len(data))
        return path

    async def download(self, path: str) -> bytes:
        p = self._resolve(path)
        try:
            return p.read_bytes()
        except FileNotFoundError as e:
            raise DownloadFailure(path, "object not found") from e
        except OSError as e:
            raise DownloadFailure(path, str(e)) from e

    async def exists(self, path: str) -> bool:
        try:
            return self._resolve(path).is_file()
        except DownloadFailure:
            return False
