"""Shared test fixtures and configuration for all tests.

Provides settings, sample emails, a scripted vendor adapter and an in-memory
email source, plus a factory that wires them into a ServiceContainer.
"""

import json
from typing import Any, Callable, Dict, Optional

import pytest

from email_intelligence.config import Settings
from email_intelligence.container import ServiceContainer, build_container
from email_intelligence.llm.base_client import BaseLLMClient
from email_intelligence.llm.registry import ClientRegistry
from email_intelligence.models.enums import Vendor
from email_intelligence.models.input_models import EmailFacts, ThreadMessage
from email_intelligence.models.llm_models import LLMGenerationRequest, LLMGenerationResponse
from email_intelligence.persistence.result_cache import ResultCache
from email_intelligence.sources.base import EmailDataProvider, ThreadDataProvider
from email_intelligence.sources.exceptions import UpstreamFetchError


CATEGORIZATION_PAYLOAD: Dict[str, Any] = {
    "category": "NEWSLETTER",
    "confidence": 0.92,
    "reasoning": "Weekly digest with an unsubscribe footer",
    "suggestedLabels": ["Newsletters"],
}

COLD_DETECTION_PAYLOAD: Dict[str, Any] = {
    "isColdEmail": True,
    "coldEmailType": "SALES",
    "confidence": 0.88,
    "reasoning": "Unknown vendor asking for a 15 minute demo call",
    "suggestedAction": "LABEL_COLD",
}

CONTEXT_PAYLOAD: Dict[str, Any] = {
    "summary": "Dana asks to move the Q3 planning review to Thursday.",
    "keyPoints": ["Q3 planning review moves", "Budget draft attached"],
    "actionItems": ["Confirm Thursday 10:00 works"],
    "people": [{"name": "Dana Reyes", "email": "dana@acme.io", "role": "Finance lead"}],
    "dates": [{"date": "2026-10-22", "context": "Rescheduled Q3 planning review"}],
    "relevantContext": "Q3 planning review rescheduled to Thursday; budget draft attached.",
    "confidence": 0.81,
}


class ScriptedLLMClient(BaseLLMClient):
    """Vendor adapter that answers from a table keyed by output schema name."""

    vendor = "anthropic"

    def __init__(self, contents: Optional[Dict[str, str]] = None):
        super().__init__(api_key="test-key", base_url="http://scripted-llm")
        self.contents = contents or {
            "Categorization": json.dumps(CATEGORIZATION_PAYLOAD),
            "ColdDetection": json.dumps(COLD_DETECTION_PAYLOAD),
            "ContextExtraction": json.dumps(CONTEXT_PAYLOAD),
        }
        self.requests: list[LLMGenerationRequest] = []
        self.error: Optional[Exception] = None
        self.prompt_tokens: Optional[int] = 120
        self.completion_tokens: Optional[int] = 40

    def _auth_headers(self) -> Dict[str, str]:
        return {}

    async def generate(self, request: LLMGenerationRequest) -> LLMGenerationResponse:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return LLMGenerationResponse(
            content=self.contents[request.schema_name],
            model_version=request.model,
            finish_reason="stop",
            prompt_tokens=self.prompt_tokens,
            completion_tokens=self.completion_tokens,
            latency_ms=3,
        )

    async def health_check(self) -> bool:
        return True

    def calls_for(self, schema_name: str) -> int:
        return sum(1 for r in self.requests if r.schema_name == schema_name)


class InMemoryEmailSource(EmailDataProvider, ThreadDataProvider):
    """Email and thread source backed by dicts."""

    def __init__(self, emails: Dict[str, EmailFacts], threads: Optional[Dict[str, list]] = None):
        self.emails = dict(emails)
        self.threads = dict(threads or {})
        self.broken: set[str] = set()
        self.fetched: list[str] = []

    async def fetch_email(self, message_id: str) -> EmailFacts:
        self.fetched.append(message_id)
        if message_id in self.broken:
            raise RuntimeError("mailbox connection reset")
        if message_id not in self.emails:
            raise UpstreamFetchError(
                f"Message {message_id} not found", resource_id=message_id, not_found=True
            )
        return self.emails[message_id]

    async def fetch_thread(self, thread_id: str, max_messages: int) -> list[ThreadMessage]:
        return self.threads.get(thread_id, [])[-max_messages:]


@pytest.fixture
def test_settings() -> Settings:
    """Test settings with every vendor key set and metrics disabled.

    Override specific settings in individual tests with model_copy:
        settings = test_settings.model_copy(update={"CACHE_TTL_SECONDS": 0})
    """
    return Settings(
        _env_file=None,
        APP_NAME="Email Intelligence Service (Test)",
        APP_VERSION="0.1.0",
        LOG_LEVEL="DEBUG",
        ENVIRONMENT="development",
        LLM_PROVIDER="anthropic",
        ECONOMY_LLM_PROVIDER=None,
        LLM_MODEL=None,
        ECONOMY_LLM_MODEL=None,
        ANTHROPIC_API_KEY="test-anthropic-key",
        OPENAI_API_KEY="test-openai-key",
        GOOGLE_AI_API_KEY="test-google-key",
        CACHE_TTL_SECONDS=3600,
        USAGE_HISTORY_LIMIT=1000,
        BATCH_MAX_SIZE=50,
        PROMETHEUS_ENABLED=False,
    )


@pytest.fixture
def newsletter_email() -> EmailFacts:
    return EmailFacts(
        from_="The Weekly Byte <digest@weeklybyte.example>",
        subject="This week in tooling",
        snippet="Five things we learned shipping...",
        body="Five things we learned shipping our CLI. Read more online. Unsubscribe here.",
    )


@pytest.fixture
def cold_email() -> EmailFacts:
    return EmailFacts(
        from_="Sam Seller <sam@growthleads.example>",
        subject="Quick chat?",
        snippet="I hope this email finds you well...",
        body=(
            "Hi there, I hope this email finds you well. I came across your profile "
            "on LinkedIn and wanted to offer a 15 minute demo of our lead generation "
            "platform. Are you free for a quick chat this week?"
        ),
    )


@pytest.fixture
def sample_emails(newsletter_email, cold_email) -> Dict[str, EmailFacts]:
    return {
        "msg-1": newsletter_email,
        "msg-2": cold_email,
        "msg-3": EmailFacts(
            from_="alerts@status.example",
            subject="Service restored",
            snippet="All systems operational",
            body=None,
        ),
    }


@pytest.fixture
def scripted_client() -> ScriptedLLMClient:
    return ScriptedLLMClient()


@pytest.fixture
def email_source(sample_emails) -> InMemoryEmailSource:
    return InMemoryEmailSource(sample_emails)


@pytest.fixture
def make_container(
    test_settings, scripted_client, email_source
) -> Callable[..., ServiceContainer]:
    """Factory building a ServiceContainer on top of the scripted vendor.

    Every vendor name resolves to the same scripted client.
    """

    def _make(
        settings: Optional[Settings] = None,
        cache: Optional[ResultCache] = None,
        client: Optional[BaseLLMClient] = None,
        source: Optional[InMemoryEmailSource] = None,
    ) -> ServiceContainer:
        settings = settings or test_settings
        adapter = client or scripted_client
        registry = ClientRegistry(
            settings,
            factories={vendor: (lambda profile, s: adapter) for vendor in Vendor.values()},
        )
        src = source or email_source
        return build_container(
            settings,
            email_provider=src,
            thread_provider=src,
            registry=registry,
            cache=cache,
        )

    return _make


@pytest.fixture
def container(make_container) -> ServiceContainer:
    return make_container()
