# src/storage/base_object_store.py — v1
"""Abstract binary object store interface.

Documents are addressed by opaque relative paths recorded on the job.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class BaseObjectStore(ABC):
    """Unified interface for document storage backends."""

    @abstractmethod
    async def upload(self, path: str, data: bytes) -> str:
        """Store bytes under path; returns the path to record on the job."""

    @abstractmethod
    async def download(self, path: str) -> bytes:
        """Fetch bytes; raises DownloadFailure when missing or unreachable."""

    @abstractmethod
    async def exists(self, path: str) -> bool:
        """Check if an object exists."""
