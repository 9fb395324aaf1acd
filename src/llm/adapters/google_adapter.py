# src/llm/adapters/google_adapter.py — v1
"""Google Gemini adapter implementing BaseExtractionClient.

Uses google-generativeai SDK. Structured output is enforced with a single
function declaration and function-calling mode ANY, so the only accepted
answer is a call carrying schema-shaped arguments.
"""

from __future__ import annotations

import json
import logging
import time
from typing import Any

from examingest.llm.base_client import BaseExtractionClient
from examingest.llm.models import DocumentInput, LLMResponse

logger = logging.getLogger(__name__)


class GoogleAdapter(BaseExtractionClient):
    """Google Gemini adapter."""

    def __init__(self, model: str = "gemini-2.0-flash", api_key: str = "", **kwargs: Any):
        self._model = model
        self._api_key = api_key

    async def extract_structured(
        self,
        document: DocumentInput,
        instructions: str,
        schema_name: str,
        schema: dict[str, Any],
        temperature: float = 0.2,
        max_tokens: int = 16384,
    ) -> LLMResponse:
        import google.generativeai as genai

        genai.configure(api_key=self._api_key)
        model = genai.GenerativeModel(self._model)

        tools = [{
            "function_declarations": [{
                "name": schema_name,
                "description": schema.get("description", schema_name),
                "parameters": _strip_unsupported(schema),
            }],
        }]
        tool_config = {
            "function_calling_config": {
                "mode": "ANY",
                "allowed_function_names": [schema_name],
            },
        }
        contents = [{
            "role": "user",
            "parts": [
                {"text": instructions},
                # Base64 text; the SDK decodes str payloads for bytes fields.
                {"inline_data": {"mime_type": document.mime_type, "data": document.base64()}},
            ],
        }]

        t0 = time.monotonic()
        resp = await model.generate_content_async(
            contents,
            tools=tools,
            tool_config=tool_config,
            generation_config={"temperature": temperature, "max_output_tokens": max_tokens},
        )
        latency = int((time.monotonic() - t0) * 1000)

        usage = getattr(resp, "usage_metadata", None)
        return LLMResponse(
            content=_function_call_json(resp, schema_name),
            input_tokens=getattr(usage, "prompt_token_count", 0) if usage else 0,
            output_tokens=getattr(usage, "candidates_token_count", 0) if usage else 0,
            model=self._model,
            provider="google",
            latency_ms=latency,
            raw_response=resp,
        )

    @property
    def provider_name(self) -> str:
        return "google"


def _function_call_json(resp: Any, schema_name: str) -> str:
    """Return the forced function call's arguments as JSON ("" if absent)."""
    for candidate in getattr(resp, "candidates", None) or []:
        content = getattr(candidate, "content", None)
        for part in getattr(content, "parts", None) or []:
            call = getattr(part, "function_call", None)
            if call is None or getattr(call, "name", "") != schema_name:
                continue
            as_dict = type(call).to_dict(call)
            return json.dumps(as_dict.get("args", {}))
    logger.warning("Gemini response carried no %s function call", schema_name)
    return ""


def _strip_unsupported(schema: dict[str, Any]) -> dict[str, Any]:
    """Drop JSON-schema keys the Gemini function schema does not accept.

    Keys directly under "properties" are field names and are kept.
    """
    cleaned: dict[str, Any] = {}
    for key, value in schema.items():
        if key in ("additionalProperties", "$schema", "title"):
            continue
        if key == "properties" and isinstance(value, dict):
            cleaned[key] = {name: _strip_unsupported(sub) for name, sub in value.items()}
        elif isinstance(value, dict):
            cleaned[key] = _strip_unsupported(value)
        else:
            cleaned[key] = value
    return cleaned
