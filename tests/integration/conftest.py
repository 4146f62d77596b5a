"""Integration test fixtures.

Integration tests run the real vendor adapters and the HTTP gateway provider;
only the network is replaced, by httpx.MockTransport handlers that mimic the
vendor APIs and the mail gateway.
"""

import json

import httpx
import pytest

from email_intelligence.container import build_container
from email_intelligence.llm.anthropic_client import AnthropicClient
from email_intelligence.llm.openai_client import OpenAIClient
from email_intelligence.llm.registry import ClientRegistry
from email_intelligence.sources.http_provider import HttpEmailDataProvider


GATEWAY_MESSAGES = {
    "m-100": {
        "from": "Priya Nair <priya@talentbridge.example>",
        "subject": "Exciting Staff Engineer role",
        "snippet": "I came across your profile...",
        "body": "Hi! I came across your profile on LinkedIn and have an exciting role. Open to a quick chat?",
    },
    "m-101": {
        "from": "priya@TalentBridge.example",
        "subject": "Re: Exciting Staff Engineer role",
        "snippet": "Just following up...",
        "body": "Just following up on my last note. Would Tuesday work?",
    },
    "m-200": {
        "from": "billing@cloudhost.example",
        "subject": "Your October invoice",
        "snippet": "Invoice #5521 for $42.00",
        "body": "Thanks for your payment. Invoice #5521 for $42.00 is attached.",
    },
}

GATEWAY_THREADS = {
    "t-100": [
        {"from": "me@acme.io", "subject": "Intro", "body": "Happy to hear more."},
    ],
}

VENDOR_OUTPUTS = {
    "Categorization": {
        "category": "COLD_EMAIL",
        "confidence": 0.86,
        "reasoning": "Recruiter reaching out without prior contact",
        "suggestedLabels": ["Recruiting"],
    },
    "ColdDetection": {
        "isColdEmail": True,
        "coldEmailType": "RECRUITMENT",
        "confidence": 0.91,
        "reasoning": "Unknown recruiter, found profile on LinkedIn, asks for a quick chat",
        "suggestedAction": "ARCHIVE",
    },
    "ContextExtraction": {
        "summary": "A recruiter pitches a Staff Engineer role and asks for a call.",
        "keyPoints": ["Staff Engineer role"],
        "actionItems": ["Decide whether to reply"],
        "people": [{"name": "Priya Nair", "email": "priya@talentbridge.example", "role": "Recruiter"}],
        "dates": [],
        "relevantContext": "Unsolicited recruiter outreach for a Staff Engineer role.",
        "confidence": 0.77,
    },
}


class MailGateway:
    """Mail gateway handler for httpx.MockTransport."""

    def __init__(self):
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        kind, _, resource_id = request.url.path.strip("/").partition("/")
        if kind == "messages" and resource_id in GATEWAY_MESSAGES:
            return httpx.Response(200, json=GATEWAY_MESSAGES[resource_id])
        if kind == "threads" and resource_id in GATEWAY_THREADS:
            return httpx.Response(200, json={"messages": GATEWAY_THREADS[resource_id]})
        return httpx.Response(404, json={"error": "not found"})


class AnthropicAPI:
    """Anthropic Messages API handler answering with the forced tool call."""

    def __init__(self):
        self.payloads: list[dict] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        payload = json.loads(request.content)
        self.payloads.append(payload)
        tool_name = payload["tool_choice"]["name"]
        return httpx.Response(
            200,
            json={
                "id": f"msg_{len(self.payloads)}",
                "model": payload["model"],
                "stop_reason": "tool_use",
                "content": [{"type": "tool_use", "name": tool_name, "input": VENDOR_OUTPUTS[tool_name]}],
                "usage": {"input_tokens": 300, "output_tokens": 60},
            },
        )

    def tool_calls(self, name: str) -> int:
        return sum(1 for p in self.payloads if p["tool_choice"]["name"] == name)


class OpenAIAPI:
    """OpenAI Chat Completions handler answering with JSON content."""

    def __init__(self):
        self.payloads: list[dict] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        payload = json.loads(request.content)
        self.payloads.append(payload)
        name = payload["response_format"]["json_schema"]["name"]
        return httpx.Response(
            200,
            json={
                "model": payload["model"],
                "choices": [{"message": {"content": json.dumps(VENDOR_OUTPUTS[name])}, "finish_reason": "stop"}],
                "usage": {"prompt_tokens": 200, "completion_tokens": 50},
            },
        )


@pytest.fixture
def mail_gateway():
    return MailGateway()


@pytest.fixture
def anthropic_api():
    return AnthropicAPI()


@pytest.fixture
def openai_api():
    return OpenAIAPI()


@pytest.fixture
def make_wired_container(test_settings, mail_gateway, anthropic_api, openai_api):
    """Container with real adapters and gateway provider on mocked transports."""
    registry = ClientRegistry(test_settings)
    registry.register(
        "anthropic",
        lambda profile, settings: AnthropicClient(
            api_key=profile.api_key.get_secret_value(),
            base_url=settings.ANTHROPIC_BASE_URL,
            transport=httpx.MockTransport(anthropic_api),
        ),
    )
    registry.register(
        "openai",
        lambda profile, settings: OpenAIClient(
            api_key=profile.api_key.get_secret_value(),
            base_url=settings.OPENAI_BASE_URL,
            transport=httpx.MockTransport(openai_api),
        ),
    )
    gateway = HttpEmailDataProvider(
        base_url=test_settings.EMAIL_SOURCE_BASE_URL,
        transport=httpx.MockTransport(mail_gateway),
    )

    def _build(settings=None):
        settings = settings or test_settings
        registry.settings = settings
        return build_container(settings, email_provider=gateway, thread_provider=gateway, registry=registry)

    return _build
