"""
Structured output invocation.

One call = resolve tiers, pick the vendor adapter, generate against the
output model's JSON Schema, validate, record usage. There is no retry and no
fallback: every failure reaches the caller.
"""

import time
from typing import Optional, TypeVar

import structlog
from pydantic import BaseModel

from email_intelligence.config import Settings
from email_intelligence.llm.exceptions import ProviderCallError
from email_intelligence.llm.registry import ClientRegistry
from email_intelligence.llm.tiers import TierConfigResolver
from email_intelligence.models.enums import ModelTier
from email_intelligence.models.llm_models import LLMGenerationRequest, UsageRecord
from email_intelligence.monitoring.metrics import llm_requests_total
from email_intelligence.monitoring.usage_tracker import TokenUsageTracker
from email_intelligence.validation.exceptions import SchemaValidationError
from email_intelligence.validation.pipeline import StructuredOutputValidator


logger = structlog.get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class StructuredOutputInvoker:
    """
    Produce a validated output model instance from a prompt.

    Args:
        settings: Generation parameters (temperature, max tokens)
        resolver: Tier resolver, consulted on every call
        registry: Vendor adapter registry
        validator: Structured output validator
        usage_tracker: Receives one record per successful call with usage
    """

    def __init__(
        self,
        settings: Settings,
        resolver: TierConfigResolver,
        registry: ClientRegistry,
        validator: StructuredOutputValidator,
        usage_tracker: TokenUsageTracker,
    ):
        self.settings = settings
        self.resolver = resolver
        self.registry = registry
        self.validator = validator
        self.usage_tracker = usage_tracker

    async def invoke(
        self,
        prompt_text: str,
        output_model: type[ModelT],
        tier: ModelTier,
        operation: str,
        system_instruction: Optional[str] = None,
    ) -> ModelT:
        """
        Generate and validate one structured result.

        Args:
            prompt_text: User prompt
            output_model: Pydantic model the response must match
            tier: Model tier to use
            operation: Tag for usage records and metrics (e.g. "categorize")
            system_instruction: Optional system prompt

        Returns:
            Validated instance of output_model

        Raises:
            ConfigurationError: Missing API key for the tier's vendor
            UnsupportedProviderError: Vendor has no adapter
            ProviderCallError: Network or vendor failure
            SchemaValidationError: Response does not match output_model
        """
        profile = self.resolver.resolve_tier(tier)
        client = self.registry.get_client(profile)

        request = LLMGenerationRequest(
            prompt=prompt_text,
            system_instruction=system_instruction,
            model=profile.model_id,
            temperature=self.settings.LLM_TEMPERATURE,
            max_tokens=self.settings.LLM_MAX_TOKENS,
            format_schema=self.validator.schema_for(output_model),
            schema_name=output_model.__name__,
        )

        log = logger.bind(
            operation=operation,
            tier=tier.value,
            vendor=profile.vendor,
            model=profile.model_id,
        )
        start_time = time.perf_counter()

        try:
            response = await client.generate(request)
        except ProviderCallError as e:
            self._count(profile.vendor, profile.model_id, operation, "provider_error")
            log.warning("Structured call failed at vendor", error=e.message, error_type=type(e).__name__)
            raise

        try:
            result = self.validator.validate(response.content, output_model)
        except SchemaValidationError as e:
            self._count(profile.vendor, profile.model_id, operation, "schema_error")
            log.warning("Structured output rejected", error=e.message, details=e.details)
            raise

        self._count(profile.vendor, profile.model_id, operation, "success")
        if response.has_usage:
            self._track_usage(profile.vendor, profile.model_id, operation, response)

        log.info(
            "Structured call completed",
            duration_ms=int((time.perf_counter() - start_time) * 1000),
            prompt_tokens=response.prompt_tokens,
            completion_tokens=response.completion_tokens,
        )
        return result

    def _track_usage(self, vendor, model_id, operation, response) -> None:
        # Usage accounting must never fail the call it describes
        try:
            self.usage_tracker.track(
                UsageRecord(
                    vendor=vendor,
                    model_id=model_id,
                    input_tokens=response.prompt_tokens,
                    output_tokens=response.completion_tokens,
                    operation=operation,
                )
            )
        except Exception as e:
            logger.warning("Failed to record token usage", operation=operation, error=str(e))

    @staticmethod
    def _count(vendor: str, model: str, operation: str, outcome: str) -> None:
        llm_requests_total.labels(
            vendor=vendor, model=model, operation=operation, outcome=outcome
        ).inc()
