"""
Vendor adapter registry.

The only place that maps a vendor name to an adapter. Adapter instances are
cached per (vendor, API key) so their connection pools are reused across
calls while a rotated key still gets a fresh client.
"""

import hashlib
from typing import Callable, Dict, List, Tuple

import structlog

from email_intelligence.config import Settings
from email_intelligence.llm.anthropic_client import AnthropicClient
from email_intelligence.llm.base_client import BaseLLMClient
from email_intelligence.llm.exceptions import UnsupportedProviderError
from email_intelligence.llm.gemini_client import GeminiClient
from email_intelligence.llm.openai_client import OpenAIClient
from email_intelligence.models.enums import Vendor
from email_intelligence.models.llm_models import TierProfile


logger = structlog.get_logger(__name__)

ClientFactory = Callable[[TierProfile, Settings], BaseLLMClient]


def _anthropic(profile: TierProfile, settings: Settings) -> BaseLLMClient:
    return AnthropicClient(
        api_key=profile.api_key.get_secret_value(),
        base_url=settings.ANTHROPIC_BASE_URL,
        timeout=settings.LLM_TIMEOUT_SECONDS,
    )


def _openai(profile: TierProfile, settings: Settings) -> BaseLLMClient:
    return OpenAIClient(
        api_key=profile.api_key.get_secret_value(),
        base_url=settings.OPENAI_BASE_URL,
        timeout=settings.LLM_TIMEOUT_SECONDS,
    )


def _gemini(profile: TierProfile, settings: Settings) -> BaseLLMClient:
    return GeminiClient(
        api_key=profile.api_key.get_secret_value(),
        base_url=settings.GEMINI_BASE_URL,
        timeout=settings.LLM_TIMEOUT_SECONDS,
    )


DEFAULT_FACTORIES: Dict[str, ClientFactory] = {
    Vendor.ANTHROPIC.value: _anthropic,
    Vendor.OPENAI.value: _openai,
    Vendor.GOOGLE.value: _gemini,
}


class ClientRegistry:
    """
    Creates and caches vendor adapters.

    Example:
        >>> registry = ClientRegistry(settings)
        >>> client = registry.get_client(tiers.economy)
    """

    def __init__(self, settings: Settings, factories: Dict[str, ClientFactory] | None = None):
        self.settings = settings
        self._factories: Dict[str, ClientFactory] = dict(
            DEFAULT_FACTORIES if factories is None else factories
        )
        self._instances: Dict[Tuple[str, str], BaseLLMClient] = {}

    def register(self, vendor: str, factory: ClientFactory) -> None:
        """Register (or replace) the factory for a vendor."""
        self._factories[vendor] = factory
        logger.debug("Registered LLM client factory", vendor=vendor)

    def list_vendors(self) -> List[str]:
        return list(self._factories.keys())

    def get_client(self, profile: TierProfile) -> BaseLLMClient:
        """
        Return the adapter for a tier profile, creating it on first use.

        Raises:
            UnsupportedProviderError: No factory is registered for the vendor
        """
        factory = self._factories.get(profile.vendor)
        if factory is None:
            raise UnsupportedProviderError(
                f"Unknown LLM provider: {profile.vendor}",
                details={"provider": profile.vendor, "supported": self.list_vendors()},
            )

        key_digest = hashlib.sha256(profile.api_key.get_secret_value().encode()).hexdigest()
        cache_key = (profile.vendor, key_digest)
        client = self._instances.get(cache_key)
        if client is None:
            client = factory(profile, self.settings)
            self._instances[cache_key] = client
            logger.info("Created LLM client", vendor=profile.vendor, client_class=type(client).__name__)
        return client

    async def aclose(self) -> None:
        """Close every cached adapter."""
        for client in self._instances.values():
            await client.close()
        self._instances.clear()
