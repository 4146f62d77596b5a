"""
Unit tests for EmailAnalysisService.

The vendor is the scripted client from conftest and the mailbox is an
in-memory source, so every test can count vendor calls and fetches.
"""

import pytest

from email_intelligence.llm.exceptions import ConfigurationError, ProviderTimeoutError
from email_intelligence.models.enums import EmailCategory
from email_intelligence.models.input_models import EmailFacts, ThreadMessage, UserProfile
from email_intelligence.persistence.result_cache import ResultCache
from email_intelligence.sources.exceptions import UpstreamFetchError
from email_intelligence.validation.exceptions import SchemaValidationError


class TestCategorize:

    @pytest.mark.asyncio
    async def test_categorize_uses_economy_tier(self, container, scripted_client):
        result = await container.analysis.categorize_email("msg-1")

        assert result.category == EmailCategory.NEWSLETTER
        assert scripted_client.requests[0].model == "claude-haiku-4-5-20250929"
        assert scripted_client.requests[0].schema_name == "Categorization"

    @pytest.mark.asyncio
    async def test_second_call_served_from_cache(self, container, scripted_client, email_source):
        first = await container.analysis.categorize_email("msg-1")
        second = await container.analysis.categorize_email("msg-1")

        assert second is first
        assert scripted_client.calls_for("Categorization") == 1
        # The cache is consulted before the message is fetched
        assert email_source.fetched == ["msg-1"]

    @pytest.mark.asyncio
    async def test_cache_is_per_message(self, container, scripted_client):
        await container.analysis.categorize_email("msg-1")
        await container.analysis.categorize_email("msg-2")

        assert scripted_client.calls_for("Categorization") == 2
        assert "categorize:msg-2" in container.cache._entries

    @pytest.mark.asyncio
    async def test_custom_categories_reach_prompt(self, container, scripted_client):
        await container.analysis.categorize_email("msg-1", ["WORK", "RECEIPT"])

        assert "Available categories: WORK, RECEIPT" in scripted_client.requests[0].system_instruction

    @pytest.mark.asyncio
    async def test_ttl_zero_always_calls_vendor(self, make_container, scripted_client):
        container = make_container(cache=ResultCache(ttl_seconds=0))

        await container.analysis.categorize_email("msg-1")
        await container.analysis.categorize_email("msg-1")

        assert scripted_client.calls_for("Categorization") == 2

    @pytest.mark.asyncio
    async def test_invalid_output_is_not_cached(self, container, scripted_client):
        scripted_client.contents["Categorization"] = '{"category": "SPAM"}'

        with pytest.raises(SchemaValidationError):
            await container.analysis.categorize_email("msg-1")

        assert len(container.cache) == 0

    @pytest.mark.asyncio
    async def test_missing_message(self, container, scripted_client):
        with pytest.raises(UpstreamFetchError) as exc_info:
            await container.analysis.categorize_email("nope")

        assert exc_info.value.not_found is True
        assert scripted_client.requests == []

    @pytest.mark.asyncio
    async def test_source_failure_wrapped(self, container, email_source):
        email_source.broken.add("msg-1")

        with pytest.raises(UpstreamFetchError) as exc_info:
            await container.analysis.categorize_email("msg-1")

        assert exc_info.value.not_found is False
        assert exc_info.value.details["error_type"] == "RuntimeError"


class TestColdDetection:

    @pytest.mark.asyncio
    async def test_verdict_cached_per_sender(self, container, scripted_client, email_source, cold_email):
        """Two messages from one sender cost a single vendor call."""
        email_source.emails["msg-9"] = EmailFacts(
            from_="SAM@growthleads.example",
            subject="Following up",
            body="Just bumping this to the top of your inbox.",
        )

        first = await container.analysis.detect_cold_email("msg-2")
        second = await container.analysis.detect_cold_email("msg-9")

        assert first.is_cold_email is True
        assert second is first
        assert scripted_client.calls_for("ColdDetection") == 1
        assert container.cache.get("cold:sam@growthleads.example") is first

    @pytest.mark.asyncio
    async def test_profile_in_prompt(self, container, scripted_client):
        profile = UserProfile(company="Acme", role="CTO", interests=["security"])

        await container.analysis.detect_cold_email("msg-2", profile)

        assert "- Company: Acme" in scripted_client.requests[0].prompt

    @pytest.mark.asyncio
    async def test_uses_economy_tier(self, container, scripted_client):
        await container.analysis.detect_cold_email("msg-2")

        assert scripted_client.requests[0].model == "claude-haiku-4-5-20250929"

    @pytest.mark.asyncio
    async def test_vendor_timeout_propagates(self, container, scripted_client):
        scripted_client.error = ProviderTimeoutError("anthropic request timed out after 60s")

        with pytest.raises(ProviderTimeoutError):
            await container.analysis.detect_cold_email("msg-2")

        assert len(container.cache) == 0


class TestContextExtraction:

    @pytest.mark.asyncio
    async def test_uses_default_tier_and_never_caches(self, container, scripted_client):
        first = await container.analysis.extract_email_context("msg-1")
        second = await container.analysis.extract_email_context("msg-1")

        assert first.summary.startswith("Dana asks")
        assert second is not first
        assert scripted_client.calls_for("ContextExtraction") == 2
        assert scripted_client.requests[0].model == "claude-sonnet-4-5-20250929"
        assert len(container.cache) == 0

    @pytest.mark.asyncio
    async def test_thread_history_default_limit(self, container, scripted_client, email_source):
        email_source.threads["t-1"] = [
            ThreadMessage(from_="ops@acme.io", subject=f"Update {i}", body=f"Note number {i}")
            for i in range(15)
        ]

        await container.analysis.extract_email_context("msg-1", thread_id="t-1")

        prompt = scripted_client.requests[0].prompt
        assert "Thread History (10 previous messages):" in prompt
        assert "Update 4\n" not in prompt
        assert "Update 5\n" in prompt
        assert "Update 14\n" in prompt

    @pytest.mark.asyncio
    async def test_thread_history_explicit_limit(self, container, scripted_client, email_source):
        email_source.threads["t-1"] = [
            ThreadMessage(from_="ops@acme.io", subject=f"Update {i}", body="b") for i in range(5)
        ]

        await container.analysis.extract_email_context("msg-1", thread_id="t-1", max_history_messages=2)

        assert "Thread History (2 previous messages):" in scripted_client.requests[0].prompt

    @pytest.mark.asyncio
    async def test_zero_history_skips_thread(self, container, scripted_client, email_source):
        email_source.threads["t-1"] = [ThreadMessage(from_="ops@acme.io", subject="s", body="b")]

        await container.analysis.extract_email_context("msg-1", thread_id="t-1", max_history_messages=0)

        assert "Thread History" not in scripted_client.requests[0].prompt

    @pytest.mark.asyncio
    async def test_missing_key_propagates(self, make_container, test_settings, scripted_client):
        container = make_container(settings=test_settings.model_copy(update={"ANTHROPIC_API_KEY": None}))

        with pytest.raises(ConfigurationError):
            await container.analysis.extract_email_context("msg-1")

        assert scripted_client.requests == []
