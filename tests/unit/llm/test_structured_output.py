"""
Unit tests for StructuredOutputInvoker.
"""

import json

import pytest

from email_intelligence.llm.exceptions import ConfigurationError, ProviderRateLimitError
from email_intelligence.llm.registry import ClientRegistry
from email_intelligence.llm.structured_output import StructuredOutputInvoker
from email_intelligence.llm.tiers import TierConfigResolver
from email_intelligence.models.enums import ColdEmailType, ModelTier, Vendor
from email_intelligence.models.output_models import Categorization, ColdDetection
from email_intelligence.monitoring.usage_tracker import TokenUsageTracker
from email_intelligence.validation.exceptions import SchemaValidationError
from email_intelligence.validation.pipeline import StructuredOutputValidator


@pytest.fixture
def usage_tracker():
    return TokenUsageTracker(capacity=10)


@pytest.fixture
def make_invoker(test_settings, scripted_client, usage_tracker):
    def _make(settings=None):
        settings = settings or test_settings
        registry = ClientRegistry(
            settings, factories={v: (lambda p, s: scripted_client) for v in Vendor.values()}
        )
        return StructuredOutputInvoker(
            settings=settings,
            resolver=TierConfigResolver(settings),
            registry=registry,
            validator=StructuredOutputValidator(),
            usage_tracker=usage_tracker,
        )

    return _make


class TestStructuredOutputInvoker:
    """Test suite for the structured call path."""

    @pytest.mark.asyncio
    async def test_returns_validated_model(self, make_invoker, scripted_client):
        result = await make_invoker().invoke(
            "prompt", ColdDetection, ModelTier.ECONOMY, operation="cold_detection",
            system_instruction="system",
        )

        assert isinstance(result, ColdDetection)
        assert result.is_cold_email is True
        assert result.cold_email_type == ColdEmailType.SALES

        request = scripted_client.requests[0]
        assert request.prompt == "prompt"
        assert request.system_instruction == "system"
        assert request.schema_name == "ColdDetection"
        assert "isColdEmail" in request.format_schema["properties"]
        assert request.temperature == 0.1
        assert request.max_tokens == 2048

    @pytest.mark.asyncio
    async def test_tier_selects_model(self, make_invoker, scripted_client):
        invoker = make_invoker()

        await invoker.invoke("p", Categorization, ModelTier.ECONOMY, operation="categorize")
        await invoker.invoke("p", Categorization, ModelTier.DEFAULT, operation="categorize")

        assert scripted_client.requests[0].model == "claude-haiku-4-5-20250929"
        assert scripted_client.requests[1].model == "claude-sonnet-4-5-20250929"

    @pytest.mark.asyncio
    async def test_usage_recorded_on_success(self, make_invoker, usage_tracker):
        await make_invoker().invoke("p", Categorization, ModelTier.ECONOMY, operation="categorize")

        [record] = usage_tracker.get_usage()
        assert record.vendor == "anthropic"
        assert record.model_id == "claude-haiku-4-5-20250929"
        assert record.operation == "categorize"
        assert (record.input_tokens, record.output_tokens) == (120, 40)

    @pytest.mark.asyncio
    async def test_no_usage_when_vendor_omits_counts(self, make_invoker, scripted_client, usage_tracker):
        scripted_client.completion_tokens = None

        await make_invoker().invoke("p", Categorization, ModelTier.ECONOMY, operation="categorize")

        assert len(usage_tracker) == 0

    @pytest.mark.asyncio
    async def test_usage_failure_does_not_fail_call(self, make_invoker, usage_tracker, monkeypatch):
        def broken_track(record):
            raise RuntimeError("tracker unavailable")

        monkeypatch.setattr(usage_tracker, "track", broken_track)

        result = await make_invoker().invoke("p", Categorization, ModelTier.ECONOMY, operation="categorize")

        assert isinstance(result, Categorization)

    @pytest.mark.asyncio
    async def test_provider_error_propagates(self, make_invoker, scripted_client, usage_tracker):
        scripted_client.error = ProviderRateLimitError("anthropic rate limit exceeded")

        with pytest.raises(ProviderRateLimitError):
            await make_invoker().invoke("p", Categorization, ModelTier.ECONOMY, operation="categorize")

        assert len(scripted_client.requests) == 1
        assert len(usage_tracker) == 0

    @pytest.mark.asyncio
    async def test_invalid_output_raises_schema_error(self, make_invoker, scripted_client, usage_tracker):
        scripted_client.contents["Categorization"] = json.dumps(
            {"category": "SPAM", "confidence": 0.5, "reasoning": "x"}
        )

        with pytest.raises(SchemaValidationError) as exc_info:
            await make_invoker().invoke("p", Categorization, ModelTier.ECONOMY, operation="categorize")

        assert exc_info.value.details["schema_name"] == "Categorization"
        assert len(usage_tracker) == 0

    @pytest.mark.asyncio
    async def test_missing_key_fails_before_vendor_call(self, make_invoker, test_settings, scripted_client):
        settings = test_settings.model_copy(update={"ANTHROPIC_API_KEY": None})

        with pytest.raises(ConfigurationError):
            await make_invoker(settings).invoke("p", Categorization, ModelTier.ECONOMY, operation="categorize")

        assert scripted_client.requests == []
