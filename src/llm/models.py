# src/llm/models.py — v1
"""Extraction-client types: DocumentInput, LLMResponse."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, PrivateAttr

from examingest.llm.encoding import DEFAULT_CHUNK_SIZE, encode_base64_chunked


class DocumentInput(BaseModel):
    """Binary document handed to the extraction service."""

    model_config = ConfigDict(frozen=True)

    data: bytes
    mime_type: str
    filename: str | None = None
    chunk_size: int = DEFAULT_CHUNK_SIZE

    _encoded: str | None = PrivateAttr(default=None)

    @property
    def size_bytes(self) -> int:
        return len(self.data)

    def base64(self) -> str:
        """Transport encoding, computed once in bounded chunks."""
        if self._encoded is None:
            self._encoded = encode_base64_chunked(self.data, self.chunk_size)
        return self._encoded


class LLMResponse(BaseModel):
    """Normalized response from any extraction provider."""

    content: str
    input_tokens: int = 0
    output_tokens: int = 0
    model: str
    provider: str
    latency_ms: int
    raw_response: Any = None
