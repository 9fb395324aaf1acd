# tests/integration/conftest.py — v1
"""Shared fixtures for integration tests.

Job runs use the root conftest's fake extraction client against a real
SQLite file and local object store. The S3 store is exercised against a
MinIO container started with testcontainers (session scope).

Container access uses the bridge network IP + internal port, which also
works from a devcontainer with docker-outside-of-docker, where the
mapped localhost port is unreachable.
"""

from __future__ import annotations

import logging
import time
import uuid

import pytest

from examingest.extraction.adapter import ExtractionAdapter
from examingest.jobs.controller import IngestionJobController
from examingest.storage.sqlite_repository import SqliteRepository

logger = logging.getLogger(__name__)


# ── Pytest markers ──────────────────────────────────────────────

def pytest_configure(config):
    config.addinivalue_line("markers", "minio: marks tests requiring a MinIO container")


# =====================================================================
#  DEVCONTAINER NETWORKING HELPERS
# =====================================================================

def _get_container_bridge_ip(container, max_attempts: int = 10) -> str:
    """Get container bridge network IP with retries."""
    for attempt in range(max_attempts):
        wrapped = container.get_wrapped_container()
        wrapped.reload()
        networks = wrapped.attrs.get("NetworkSettings", {}).get("Networks", {})
        for net_name, net_info in networks.items():
            ip = net_info.get("IPAddress", "")
            if ip:
                logger.info(
                    "Container %s IP: %s (network: %s, attempt %d)",
                    wrapped.short_id, ip, net_name, attempt + 1,
                )
                return ip
        logger.debug("Container IP empty, attempt %d/%d", attempt + 1, max_attempts)
        time.sleep(0.5)

    raise RuntimeError(
        f"Could not obtain container bridge IP after {max_attempts} attempts"
    )


def _docker_available() -> bool:
    """Check if Docker daemon is reachable."""
    try:
        import docker
        client = docker.from_env()
        client.ping()
        return True
    except Exception:
        return False


# =====================================================================
#  JOB RUNS — no Docker required
# =====================================================================


@pytest.fixture
def file_repository(tmp_path):
    repo = SqliteRepository(tmp_path / "db" / "examingest.db")
    yield repo
    repo.close()


@pytest.fixture
def make_controller(file_repository, object_store, fake_client, settings):
    """Build a controller over the file repository (fresh adapter per call)."""

    def _make() -> IngestionJobController:
        return IngestionJobController(
            file_repository, object_store, ExtractionAdapter(fake_client, settings), settings,
        )

    return _make


# =====================================================================
#  MINIO CONTAINER — session scope (bridge IP)
# =====================================================================

MINIO_IMAGE = "minio/minio:RELEASE.2024-10-13T13-34-11Z"
MINIO_INTERNAL_PORT = 9000
MINIO_ACCESS_KEY = "minioadmin"
MINIO_SECRET_KEY = "minioadmin"


@pytest.fixture(scope="session")
def minio_container():
    if not _docker_available():
        pytest.skip("Docker not available")

    from testcontainers.core.container import DockerContainer
    from testcontainers.core.waiting_utils import wait_for_logs

    container = (
        DockerContainer(MINIO_IMAGE)
        .with_exposed_ports(MINIO_INTERNAL_PORT)
        .with_env("MINIO_ROOT_USER", MINIO_ACCESS_KEY)
        .with_env("MINIO_ROOT_PASSWORD", MINIO_SECRET_KEY)
        .with_command("server /data")
    )
    container.start()
    wait_for_logs(container, predicate=r"API:", timeout=60)

    ip = _get_container_bridge_ip(container)
    logger.info("MinIO ready at %s:%d", ip, MINIO_INTERNAL_PORT)
    yield f"http://{ip}:{MINIO_INTERNAL_PORT}"
    container.stop()


@pytest.fixture
def s3_client(minio_container):
    import boto3

    return boto3.client(
        "s3",
        endpoint_url=minio_container,
        aws_access_key_id=MINIO_ACCESS_KEY,
        aws_secret_access_key=MINIO_SECRET_KEY,
        region_name="us-east-1",
    )


@pytest.fixture
def s3_bucket(s3_client) -> str:
    """Fresh bucket per test."""
    name = f"examingest-{uuid.uuid4().hex[:8]}"
    s3_client.create_bucket(Bucket=name)
    return name
