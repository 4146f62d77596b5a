"""
Single-email analysis operations.

Each operation reads email facts, checks the result cache where one applies,
and otherwise asks the structured output invoker for a fresh result.

| Operation          | Cache key               | Tier    |
|--------------------|-------------------------|---------|
| categorize         | categorize:<messageId>  | economy |
| cold detection     | cold:<senderAddress>    | economy |
| context extraction | (never cached)          | default |

Errors are not caught here: vendor, validation, configuration and upstream
failures reach the caller unchanged.
"""

from typing import Optional, Sequence

import structlog

from email_intelligence.llm.prompt_builder import PromptBuilder
from email_intelligence.llm.structured_output import StructuredOutputInvoker
from email_intelligence.models.enums import AnalysisType, ModelTier
from email_intelligence.models.input_models import EmailFacts, ThreadMessage, UserProfile
from email_intelligence.models.output_models import (
    Categorization,
    ColdDetection,
    ContextExtraction,
)
from email_intelligence.persistence.result_cache import (
    ResultCache,
    categorize_cache_key,
    cold_email_cache_key,
)
from email_intelligence.sources.base import EmailDataProvider, ThreadDataProvider
from email_intelligence.sources.exceptions import UpstreamFetchError


logger = structlog.get_logger(__name__)


class EmailAnalysisService:
    """
    Categorize, detect cold outreach and extract context for single emails.

    The ``*_facts`` variants take already-fetched facts so a batch fetches
    each message once.
    """

    def __init__(
        self,
        invoker: StructuredOutputInvoker,
        cache: ResultCache,
        prompt_builder: PromptBuilder,
        email_provider: EmailDataProvider,
        thread_provider: Optional[ThreadDataProvider] = None,
        default_max_history_messages: int = 10,
    ):
        self.invoker = invoker
        self.cache = cache
        self.prompt_builder = prompt_builder
        self.email_provider = email_provider
        self.thread_provider = thread_provider
        self.default_max_history_messages = default_max_history_messages

    # === Categorization ===

    async def categorize_email(
        self,
        message_id: str,
        categories: Optional[Sequence[str]] = None,
    ) -> Categorization:
        """
        Categorize a message, serving a cached result when one is live.

        The cache is checked before the message is fetched.
        """
        cached = self._cached(categorize_cache_key(message_id), message_id)
        if cached is not None:
            return cached
        facts = await self.fetch_email(message_id)
        return await self._categorize(message_id, facts, categories)

    async def categorize_facts(
        self,
        message_id: str,
        facts: EmailFacts,
        categories: Optional[Sequence[str]] = None,
    ) -> Categorization:
        cached = self._cached(categorize_cache_key(message_id), message_id)
        if cached is not None:
            return cached
        return await self._categorize(message_id, facts, categories)

    async def _categorize(
        self,
        message_id: str,
        facts: EmailFacts,
        categories: Optional[Sequence[str]],
    ) -> Categorization:
        prompt = self.prompt_builder.build_categorization_prompt(facts, categories)
        result = await self.invoker.invoke(
            prompt.user_prompt,
            Categorization,
            ModelTier.ECONOMY,
            operation=AnalysisType.CATEGORIZE.value,
            system_instruction=prompt.system_instruction,
        )
        self.cache.set(categorize_cache_key(message_id), result)
        logger.info(
            "Email categorized",
            message_id=message_id,
            category=result.category.value,
            confidence=result.confidence,
        )
        return result

    # === Cold detection ===

    async def detect_cold_email(
        self,
        message_id: str,
        user_profile: Optional[UserProfile] = None,
    ) -> ColdDetection:
        """
        Decide whether a message is cold outreach.

        Verdicts are cached per sender, so the message is always fetched
        first to learn the sender.
        """
        facts = await self.fetch_email(message_id)
        return await self.detect_cold_email_facts(message_id, facts, user_profile)

    async def detect_cold_email_facts(
        self,
        message_id: str,
        facts: EmailFacts,
        user_profile: Optional[UserProfile] = None,
    ) -> ColdDetection:
        key = cold_email_cache_key(facts.from_)
        cached = self._cached(key, message_id)
        if cached is not None:
            return cached

        prompt = self.prompt_builder.build_cold_email_prompt(facts, user_profile)
        result = await self.invoker.invoke(
            prompt.user_prompt,
            ColdDetection,
            ModelTier.ECONOMY,
            operation=AnalysisType.COLD_DETECTION.value,
            system_instruction=prompt.system_instruction,
        )
        self.cache.set(key, result)
        logger.info(
            "Cold email detection completed",
            message_id=message_id,
            is_cold_email=result.is_cold_email,
            cold_email_type=result.cold_email_type.value,
            suggested_action=result.suggested_action.value,
        )
        return result

    # === Context extraction ===

    async def extract_email_context(
        self,
        message_id: str,
        thread_id: Optional[str] = None,
        max_history_messages: Optional[int] = None,
    ) -> ContextExtraction:
        """
        Extract context from a message and, optionally, its thread.

        Always recomputed; never cached.
        """
        facts = await self.fetch_email(message_id)
        history: list[ThreadMessage] = []
        if thread_id:
            limit = (
                self.default_max_history_messages
                if max_history_messages is None
                else max_history_messages
            )
            history = await self.fetch_thread(thread_id, limit)
        return await self.extract_context_facts(message_id, facts, history)

    async def extract_context_facts(
        self,
        message_id: str,
        facts: EmailFacts,
        thread_history: Optional[Sequence[ThreadMessage]] = None,
    ) -> ContextExtraction:
        prompt = self.prompt_builder.build_context_extraction_prompt(facts, thread_history)
        result = await self.invoker.invoke(
            prompt.user_prompt,
            ContextExtraction,
            ModelTier.DEFAULT,
            operation=AnalysisType.CONTEXT.value,
            system_instruction=prompt.system_instruction,
        )
        logger.info(
            "Email context extracted",
            message_id=message_id,
            history_messages=len(thread_history or []),
            action_items=len(result.action_items),
        )
        return result

    # === Upstream access ===

    async def fetch_email(self, message_id: str) -> EmailFacts:
        """Fetch facts, surfacing any provider failure as UpstreamFetchError."""
        try:
            return await self.email_provider.fetch_email(message_id)
        except UpstreamFetchError:
            raise
        except Exception as e:
            raise UpstreamFetchError(
                f"Failed to fetch email {message_id}: {e}",
                resource_id=message_id,
                details={"error_type": type(e).__name__},
            ) from e

    async def fetch_thread(self, thread_id: str, max_messages: int) -> list[ThreadMessage]:
        if self.thread_provider is None:
            logger.debug("No thread provider configured, skipping history", thread_id=thread_id)
            return []
        if max_messages <= 0:
            return []
        try:
            return await self.thread_provider.fetch_thread(thread_id, max_messages)
        except UpstreamFetchError:
            raise
        except Exception as e:
            raise UpstreamFetchError(
                f"Failed to fetch thread {thread_id}: {e}",
                resource_id=thread_id,
                details={"error_type": type(e).__name__},
            ) from e

    def _cached(self, key: str, message_id: str):
        cached = self.cache.get(key)
        if cached is not None:
            logger.debug("Serving cached analysis", message_id=message_id, cache_key=key)
        return cached
