# src/llm/client_factory.py — v1
"""Factory: instantiate an extraction client from a provider name.

Adapters are imported lazily so only the selected provider's SDK has to
be installed at runtime.
"""

from __future__ import annotations

import importlib
import logging

from examingest.config.settings import ConfigurationError, Settings
from examingest.llm.base_client import BaseExtractionClient

logger = logging.getLogger(__name__)

# Registry of provider name → adapter class path (lazy import).
_PROVIDER_REGISTRY: dict[str, str] = {
    "anthropic": "examingest.llm.adapters.anthropic_adapter.AnthropicAdapter",
    "google": "examingest.llm.adapters.google_adapter.GoogleAdapter",
}


class UnsupportedProviderError(ValueError):
    """Raised when a provider is not registered."""


def create_extraction_client(
    provider: str,
    model: str,
    settings: Settings | None = None,
    **kwargs: object,
) -> BaseExtractionClient:
    """Instantiate the correct adapter from provider name.

    Args:
        provider: Provider identifier (google, anthropic).
        model: Model name (e.g. gemini-2.0-flash).
        settings: Application settings (for API keys).
        **kwargs: Additional provider-specific arguments.

    Raises:
        UnsupportedProviderError: If provider is not registered.
        ConfigurationError: If the provider's API key is not configured.
    """
    if provider not in _PROVIDER_REGISTRY:
        raise UnsupportedProviderError(
            f"Unsupported extraction provider: {provider!r}. "
            f"Available: {', '.join(sorted(_PROVIDER_REGISTRY))}"
        )

    init_kwargs = dict(kwargs)
    init_kwargs["model"] = model

    if settings is not None and provider in ("anthropic", "google"):
        init_kwargs.setdefault("api_key", settings.api_key_for(provider))

    if provider in ("anthropic", "google") and not init_kwargs.get("api_key"):
        raise ConfigurationError(f"{provider.upper()}_API_KEY is required for provider {provider!r}")

    adapter_cls = _import_class(_PROVIDER_REGISTRY[provider])
    logger.debug("Creating extraction client: provider=%s, model=%s", provider, model)
    return adapter_cls(**init_kwargs)


def client_from_settings(settings: Settings) -> BaseExtractionClient:
    """Client for the provider and model named in settings."""
    return create_extraction_client(
        settings.extraction_provider, settings.extraction_model, settings,
    )


def register_provider(name: str, class_path: str) -> None:
    """Register a custom provider adapter.

    Args:
        name: Provider identifier.
        class_path: Fully qualified class path implementing BaseExtractionClient.
    """
    _PROVIDER_REGISTRY[name] = class_path
    logger.info("Registered extraction provider: %s → %s", name, class_path)


def _import_class(class_path: str) -> type:
    """Dynamically import a class from its fully qualified path."""
    module_path, class_name = class_path.rsplit(".", 1)
    module = importlib.import_module(module_path)
    return getattr(module, class_name)
