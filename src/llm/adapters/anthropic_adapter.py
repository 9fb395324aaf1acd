# src/llm/adapters/anthropic_adapter.py — v1
"""Anthropic Claude adapter implementing BaseExtractionClient.

Uses the official anthropic SDK. PDFs are sent as base64 document blocks,
images as image blocks; the schema is declared as a single tool and
tool_choice forces the model to answer through it.
"""

from __future__ import annotations

import json
import logging
import time
from typing import Any

from examingest.llm.base_client import BaseExtractionClient
from examingest.llm.models import DocumentInput, LLMResponse

logger = logging.getLogger(__name__)


class AnthropicAdapter(BaseExtractionClient):
    """Adapter for Anthropic Claude models."""

    def __init__(
        self,
        model: str = "claude-sonnet-4-20250514",
        api_key: str | None = None,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self.__client = None  # Lazy initialization

    @property
    def _client(self):
        """Lazy-init Anthropic client (only on first API call)."""
        if self.__client is None:
            import anthropic

            self.__client = anthropic.AsyncAnthropic(api_key=self._api_key or "")
        return self.__client

    async def extract_structured(
        self,
        document: DocumentInput,
        instructions: str,
        schema_name: str,
        schema: dict[str, Any],
        temperature: float = 0.2,
        max_tokens: int = 16384,
    ) -> LLMResponse:
        """Structured extraction via a forced tool call."""
        kwargs: dict[str, Any] = {
            "model": self._model,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "messages": [{
                "role": "user",
                "content": [
                    self._document_block(document),
                    {"type": "text", "text": instructions},
                ],
            }],
            "tools": [{
                "name": schema_name,
                "description": schema.get("description", "Return structured data matching the schema"),
                "input_schema": schema,
            }],
            "tool_choice": {"type": "tool", "name": schema_name},
        }

        start = time.monotonic()
        response = await self._client.messages.create(**kwargs)
        latency_ms = int((time.monotonic() - start) * 1000)

        return LLMResponse(
            content=self._extract_content(response),
            input_tokens=response.usage.input_tokens,
            output_tokens=response.usage.output_tokens,
            model=response.model,
            provider="anthropic",
            latency_ms=latency_ms,
            raw_response=response,
        )

    @property
    def provider_name(self) -> str:
        return "anthropic"

    # --- Internal helpers ---

    @staticmethod
    def _document_block(document: DocumentInput) -> dict[str, Any]:
        block_type = "image" if document.mime_type.startswith("image/") else "document"
        return {
            "type": block_type,
            "source": {
                "type": "base64",
                "media_type": document.mime_type,
                "data": document.base64(),
            },
        }

    @staticmethod
    def _extract_content(response: Any) -> str:
        """Return the tool_use input as JSON ("" when the model answered in prose)."""
        for block in response.content:
            if getattr(block, "type", None) == "tool_use":
                return json.dumps(block.input)
        logger.warning("Anthropic response carried no tool_use block")
        return ""
