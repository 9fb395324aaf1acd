# src/storage/store_factory.py — v1
"""Factories: instantiate the object store and the relational repository
from configuration."""

from __future__ import annotations

from examingest.config.settings import ConfigurationError, Settings
from examingest.storage.base_object_store import BaseObjectStore
from examingest.storage.base_repository import BaseRepository
from examingest.storage.local_store import LocalObjectStore


def create_object_store(settings: Settings) -> BaseObjectStore:
    """Create the object store selected by OBJECT_STORE.

    Raises:
        ConfigurationError: If the backend is not supported.
    """
    if settings.object_store == "local":
        return LocalObjectStore(settings.object_store_root)

    if settings.object_store == "s3":
        from examingest.storage.s3_store import S3ObjectStore

        return S3ObjectStore(
            bucket=settings.s3_bucket,
            prefix=settings.s3_prefix,
            region=settings.s3_region or None,
            endpoint_url=settings.s3_endpoint_url or None,
        )

    raise ConfigurationError(f"Unsupported object store: {settings.object_store!r}")


def create_repository(settings: Settings) -> BaseRepository:
    """Create the relational repository (SQLite)."""
    from examingest.storage.sqlite_repository import SqliteRepository

    return SqliteRepository(settings.database_path)
