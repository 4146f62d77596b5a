"""
HTTP routes for the analysis operations.

Each route is a thin shell over EmailAnalysisService / BatchOrchestrator;
errors are turned into responses by the handlers in error_handlers.
"""

from datetime import datetime
from typing import Optional

import structlog
from fastapi import APIRouter, Depends, Query, status

from email_intelligence.analysis.batch import BatchOrchestrator
from email_intelligence.analysis.service import EmailAnalysisService
from email_intelligence.api.dependencies import (
    get_analysis_service,
    get_batch_orchestrator,
    get_container,
    get_result_cache,
    get_usage_tracker,
)
from email_intelligence.api.models import (
    CacheClearResponse,
    HealthResponse,
    TierStatus,
    TokenTotalsResponse,
    UsageResponse,
)
from email_intelligence.container import ServiceContainer
from email_intelligence.llm.exceptions import LLMClientError
from email_intelligence.models.input_models import (
    BatchAnalyzeRequest,
    CategorizeRequest,
    DetectColdEmailRequest,
    ExtractContextRequest,
)
from email_intelligence.models.llm_models import TokenTotals
from email_intelligence.models.output_models import (
    BatchOutcome,
    Categorization,
    ColdDetection,
    ContextExtraction,
)
from email_intelligence.monitoring.usage_tracker import TokenUsageTracker
from email_intelligence.persistence.result_cache import ResultCache

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.post(
    "/emails/batch-analyze",
    response_model=BatchOutcome,
    summary="Analyze up to BATCH_MAX_SIZE emails",
    responses={400: {"description": "Too many message IDs"}},
    tags=["analysis"],
)
async def batch_analyze_emails(
    request: BatchAnalyzeRequest,
    orchestrator: BatchOrchestrator = Depends(get_batch_orchestrator),
) -> BatchOutcome:
    """
    Run the requested analyses over each message in order.

    Messages that fail are left out of ``results`` and listed in ``failures``.
    """
    return await orchestrator.run(request)


@router.post(
    "/emails/{message_id}/categorize",
    response_model=Categorization,
    summary="Categorize one email",
    tags=["analysis"],
)
async def categorize_email(
    message_id: str,
    request: Optional[CategorizeRequest] = None,
    service: EmailAnalysisService = Depends(get_analysis_service),
) -> Categorization:
    request = request or CategorizeRequest()
    return await service.categorize_email(message_id, request.categories)


@router.post(
    "/emails/{message_id}/context",
    response_model=ContextExtraction,
    summary="Extract context from an email and its thread",
    tags=["analysis"],
)
async def extract_email_context(
    message_id: str,
    request: Optional[ExtractContextRequest] = None,
    service: EmailAnalysisService = Depends(get_analysis_service),
) -> ContextExtraction:
    request = request or ExtractContextRequest()
    return await service.extract_email_context(
        message_id,
        thread_id=request.thread_id,
        max_history_messages=request.max_history_messages,
    )


@router.post(
    "/emails/{message_id}/cold-detection",
    response_model=ColdDetection,
    summary="Detect unsolicited outreach",
    tags=["analysis"],
)
async def detect_cold_email(
    message_id: str,
    request: Optional[DetectColdEmailRequest] = None,
    service: EmailAnalysisService = Depends(get_analysis_service),
) -> ColdDetection:
    request = request or DetectColdEmailRequest()
    return await service.detect_cold_email(message_id, request.user_profile)


def _totals(totals: TokenTotals) -> TokenTotalsResponse:
    return TokenTotalsResponse(input=totals.input, output=totals.output, total=totals.total)


@router.get("/usage", response_model=UsageResponse, tags=["operations"])
async def get_usage(
    since: Optional[datetime] = Query(default=None, description="Only count records at or after this time"),
    tracker: TokenUsageTracker = Depends(get_usage_tracker),
) -> UsageResponse:
    """Token usage over the retained history."""
    return UsageResponse(
        since=since,
        records=len(tracker.get_usage(since)),
        totals=_totals(tracker.get_total_tokens(since)),
        by_operation={
            operation: _totals(totals)
            for operation, totals in tracker.totals_by_operation(since).items()
        },
    )


@router.delete("/cache", response_model=CacheClearResponse, tags=["operations"])
async def clear_cache(cache: ResultCache = Depends(get_result_cache)) -> CacheClearResponse:
    cleared = len(cache)
    cache.clear()
    return CacheClearResponse(cleared=cleared)


@router.get(
    "/health",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    tags=["operations"],
)
async def health(container: ServiceContainer = Depends(get_container)) -> HealthResponse:
    """
    Report tier configuration and in-process state.

    Tier resolution is attempted without calling any vendor, so a missing
    key shows up here before the first analysis fails.
    """
    tiers: dict[str, TierStatus] = {}
    configuration_error = None
    try:
        resolved = container.resolver.resolve()
        tiers = {
            "default": TierStatus(vendor=resolved.default.vendor, model_id=resolved.default.model_id),
            "economy": TierStatus(vendor=resolved.economy.vendor, model_id=resolved.economy.model_id),
        }
    except LLMClientError as e:
        configuration_error = e.message
        logger.warning("Health check: tiers unresolved", error=e.message)

    return HealthResponse(
        status="degraded" if configuration_error else "ok",
        version=container.settings.APP_VERSION,
        tiers=tiers,
        configuration_error=configuration_error,
        cache_entries=len(container.cache),
        usage_records=len(container.usage_tracker),
    )
