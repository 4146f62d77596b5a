"""
Wiring of the service components.

Everything stateful (result cache, usage tracker, adapter registry) lives on
one ServiceContainer built at startup and closed at shutdown. Tests build
their own container with fakes instead of patching module globals.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import structlog

from email_intelligence.analysis.batch import BatchOrchestrator
from email_intelligence.analysis.service import EmailAnalysisService
from email_intelligence.config import Settings
from email_intelligence.llm.prompt_builder import PromptBuilder
from email_intelligence.llm.registry import ClientRegistry
from email_intelligence.llm.structured_output import StructuredOutputInvoker
from email_intelligence.llm.tiers import TierConfigResolver
from email_intelligence.monitoring.usage_tracker import TokenUsageTracker
from email_intelligence.persistence.result_cache import ResultCache
from email_intelligence.sources.base import EmailDataProvider, ThreadDataProvider
from email_intelligence.validation.pipeline import StructuredOutputValidator


logger = structlog.get_logger(__name__)


@dataclass
class ServiceContainer:
    """All long-lived components of one service process."""

    settings: Settings
    resolver: TierConfigResolver
    registry: ClientRegistry
    cache: ResultCache
    usage_tracker: TokenUsageTracker
    invoker: StructuredOutputInvoker
    analysis: EmailAnalysisService
    batch: BatchOrchestrator
    email_provider: EmailDataProvider
    thread_provider: Optional[ThreadDataProvider] = None

    async def aclose(self) -> None:
        """Close vendor adapters and email providers."""
        await self.registry.aclose()
        await self.email_provider.close()
        if self.thread_provider is not None and self.thread_provider is not self.email_provider:
            await self.thread_provider.close()
        logger.info("Service container closed")


def build_container(
    settings: Settings,
    email_provider: EmailDataProvider,
    thread_provider: Optional[ThreadDataProvider] = None,
    registry: Optional[ClientRegistry] = None,
    cache: Optional[ResultCache] = None,
) -> ServiceContainer:
    """
    Assemble a ServiceContainer from settings and the email collaborators.

    Args:
        settings: Application settings
        email_provider: Source of message facts
        thread_provider: Optional source of thread history
        registry: Adapter registry override (tests register fake vendors here)
        cache: Result cache override (tests inject a controllable clock)
    """
    resolver = TierConfigResolver(settings)
    if registry is None:
        registry = ClientRegistry(settings)
    if cache is None:
        cache = ResultCache(ttl_seconds=settings.CACHE_TTL_SECONDS)
    usage_tracker = TokenUsageTracker(capacity=settings.USAGE_HISTORY_LIMIT)

    invoker = StructuredOutputInvoker(
        settings=settings,
        resolver=resolver,
        registry=registry,
        validator=StructuredOutputValidator(),
        usage_tracker=usage_tracker,
    )
    prompt_builder = PromptBuilder(
        templates_dir=Path(settings.PROMPT_TEMPLATES_DIR),
        body_truncation_limit=settings.BODY_TRUNCATION_LIMIT,
        thread_preview_chars=settings.THREAD_PREVIEW_CHARS,
    )
    analysis = EmailAnalysisService(
        invoker=invoker,
        cache=cache,
        prompt_builder=prompt_builder,
        email_provider=email_provider,
        thread_provider=thread_provider,
        default_max_history_messages=settings.DEFAULT_MAX_HISTORY_MESSAGES,
    )
    batch = BatchOrchestrator(analysis, max_batch_size=settings.BATCH_MAX_SIZE)

    logger.info(
        "Service container built",
        cache_ttl_seconds=settings.CACHE_TTL_SECONDS,
        usage_history_limit=settings.USAGE_HISTORY_LIMIT,
        batch_max_size=settings.BATCH_MAX_SIZE,
        vendors=registry.list_vendors(),
    )
    return ServiceContainer(
        settings=settings,
        resolver=resolver,
        registry=registry,
        cache=cache,
        usage_tracker=usage_tracker,
        invoker=invoker,
        analysis=analysis,
        batch=batch,
        email_provider=email_provider,
        thread_provider=thread_provider,
    )
