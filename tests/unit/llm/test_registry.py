"""
Unit tests for the vendor adapter registry.
"""

import pytest
from pydantic import SecretStr

from email_intelligence.llm.anthropic_client import AnthropicClient
from email_intelligence.llm.exceptions import UnsupportedProviderError
from email_intelligence.llm.gemini_client import GeminiClient
from email_intelligence.llm.openai_client import OpenAIClient
from email_intelligence.llm.registry import ClientRegistry
from email_intelligence.models.enums import ModelTier
from email_intelligence.models.llm_models import TierProfile


def _profile(vendor: str, key: str = "k-1") -> TierProfile:
    return TierProfile(tier=ModelTier.DEFAULT, vendor=vendor, model_id="m", api_key=SecretStr(key))


class TestClientRegistry:
    """Test suite for ClientRegistry."""

    @pytest.mark.parametrize(
        "vendor,client_class",
        [("anthropic", AnthropicClient), ("openai", OpenAIClient), ("google", GeminiClient)],
    )
    def test_builtin_factories(self, test_settings, vendor, client_class):
        client = ClientRegistry(test_settings).get_client(_profile(vendor))

        assert isinstance(client, client_class)

    def test_base_urls_come_from_settings(self, test_settings):
        settings = test_settings.model_copy(update={"OPENAI_BASE_URL": "http://proxy.local/v1/"})

        client = ClientRegistry(settings).get_client(_profile("openai"))

        assert client.base_url == "http://proxy.local/v1"

    def test_unknown_vendor_raises(self, test_settings):
        with pytest.raises(UnsupportedProviderError) as exc_info:
            ClientRegistry(test_settings).get_client(_profile("mistral"))

        assert exc_info.value.details["provider"] == "mistral"

    def test_clients_reused_per_vendor_and_key(self, test_settings):
        registry = ClientRegistry(test_settings)

        first = registry.get_client(_profile("anthropic"))
        second = registry.get_client(_profile("anthropic"))
        rotated = registry.get_client(_profile("anthropic", key="k-2"))

        assert first is second
        assert rotated is not first

    def test_register_custom_factory(self, test_settings, scripted_client):
        registry = ClientRegistry(test_settings, factories={})
        assert registry.list_vendors() == []

        registry.register("anthropic", lambda profile, settings: scripted_client)

        assert registry.list_vendors() == ["anthropic"]
        assert registry.get_client(_profile("anthropic")) is scripted_client

    @pytest.mark.asyncio
    async def test_aclose_drops_cached_clients(self, test_settings):
        registry = ClientRegistry(test_settings)
        first = registry.get_client(_profile("openai"))

        await registry.aclose()

        assert registry.get_client(_profile("openai")) is not first
