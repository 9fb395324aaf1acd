# src/llm/encoding.py — v1
"""Chunked base64 encoding for large binary documents.

Documents can be tens of megabytes; encoding works on fixed-size slices
of a memoryview so no intermediate buffer grows with the input beyond
the output string itself.
"""

from __future__ import annotations

import base64
from collections.abc import Iterator

DEFAULT_CHUNK_SIZE = 32768


def _aligned(chunk_size: int) -> int:
    """Round down to a multiple of 3 so chunks concatenate without padding."""
    if chunk_size < 3:
        raise ValueError(f"chunk_size must be >= 3, got {chunk_size}")
    return chunk_size - (chunk_size % 3)


def iter_base64_chunks(data: bytes, chunk_size: int = DEFAULT_CHUNK_SIZE) -> Iterator[str]:
    """Yield base64 text for consecutive slices of ``data``.

    Only the final slice may carry '=' padding, so the joined output is
    identical to ``base64.b64encode(data)``.
    """
    step = _aligned(chunk_size)
    view = memoryview(data)
    for offset in range(0, len(view), step):
        yield base64.b64encode(view[offset:offset + step]).decode("ascii")


def encode_base64_chunked(data: bytes, chunk_size: int = DEFAULT_CHUNK_SIZE) -> str:
    return "".join(iter_base64_chunks(data, chunk_size))
