# src/llm/base_client.py — v1
"""Abstract extraction client interface.

Alternate backends (and test fakes returning canned payloads) implement
this narrow capability; the pipeline never sees provider request formats.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from examingest.llm.models import DocumentInput, LLMResponse


class BaseExtractionClient(ABC):
    """Unified interface for schema-constrained document extraction."""

    @abstractmethod
    async def extract_structured(
        self,
        document: DocumentInput,
        instructions: str,
        schema_name: str,
        schema: dict[str, Any],
        temperature: float = 0.2,
        max_tokens: int = 16384,
    ) -> LLMResponse:
        """Send one document with an explicit output schema.

        The response content must be a JSON document conforming to
        ``schema``. Provider errors propagate unchanged; the caller
        classifies them.
        """

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Provider identifier (google, anthropic)."""
