"""
Batch analysis orchestration.

Messages are processed one at a time in request order. A failing message is
logged, left out of the results and listed under ``failures``; the rest of
the batch carries on. The batch itself only fails when it is over the size
ceiling, which is checked before any work starts.
"""

from collections import Counter
from typing import Sequence

import structlog

from email_intelligence.analysis.exceptions import BatchSizeExceededError
from email_intelligence.analysis.service import EmailAnalysisService
from email_intelligence.models.enums import AnalysisType, SuggestedAction
from email_intelligence.models.input_models import BatchAnalyzeRequest
from email_intelligence.models.output_models import (
    BatchItemFailure,
    BatchItemResult,
    BatchOutcome,
    RecommendedAction,
)
from email_intelligence.monitoring.metrics import batch_items_total


logger = structlog.get_logger(__name__)


def summarize_results(results: Sequence[BatchItemResult]) -> str:
    """
    Human-readable digest of a batch.

    Example:
        Analyzed 3 emails:
        - NEWSLETTER: 2
        - WORK: 1

        1 cold emails detected
    """
    category_counts = Counter(
        r.category.category.value for r in results if r.category is not None
    )
    cold_count = sum(
        1 for r in results if r.cold_detection is not None and r.cold_detection.is_cold_email
    )

    summary = f"Analyzed {len(results)} emails:\n"
    for category, count in category_counts.items():
        summary += f"- {category}: {count}\n"
    if cold_count > 0:
        summary += f"\n{cold_count} cold emails detected"
    return summary


def recommend_actions(results: Sequence[BatchItemResult]) -> list[RecommendedAction]:
    """One recommendation per cold email whose suggested action is not ALLOW."""
    actions = []
    for r in results:
        verdict = r.cold_detection
        if verdict is None or not verdict.is_cold_email:
            continue
        if verdict.suggested_action == SuggestedAction.ALLOW:
            continue
        actions.append(
            RecommendedAction(
                message_id=r.message_id,
                action=verdict.suggested_action,
                reasoning=f"Cold {verdict.cold_email_type.value} email: {verdict.reasoning}",
            )
        )
    return actions


class BatchOrchestrator:
    """
    Run the requested analyses over a list of messages.

    Args:
        service: Single-email analysis operations
        max_batch_size: Largest accepted number of message IDs
    """

    def __init__(self, service: EmailAnalysisService, max_batch_size: int = 50):
        self.service = service
        self.max_batch_size = max_batch_size

    async def run(self, request: BatchAnalyzeRequest) -> BatchOutcome:
        """
        Analyze every message of the request.

        Raises:
            BatchSizeExceededError: More message IDs than max_batch_size
        """
        if len(request.message_ids) > self.max_batch_size:
            raise BatchSizeExceededError(len(request.message_ids), self.max_batch_size)

        requested = set(request.analysis_types)
        log = logger.bind(
            batch_size=len(request.message_ids),
            analysis_types=sorted(a.value for a in requested),
        )
        log.info("Batch analysis started")

        results: list[BatchItemResult] = []
        failures: list[BatchItemFailure] = []

        for message_id in request.message_ids:
            try:
                item = await self._analyze_item(message_id, requested)
            except Exception as e:
                log.warning(
                    "Batch item failed, skipping",
                    message_id=message_id,
                    error_type=type(e).__name__,
                    error=getattr(e, "message", str(e)),
                )
                batch_items_total.labels(outcome="failed").inc()
                failures.append(
                    BatchItemFailure(
                        message_id=message_id,
                        error_type=type(e).__name__,
                        message=getattr(e, "message", str(e)),
                    )
                )
                continue

            batch_items_total.labels(outcome="analyzed").inc()
            results.append(item)

        if request.options.auto_apply_labels:
            # Labels are written by the mail store, not by this service
            log.info("Label application requested", analyzed=len(results))

        summary = ""
        recommended: list[RecommendedAction] = []
        if request.options.generate_summary:
            summary = summarize_results(results)
            recommended = recommend_actions(results)

        log.info(
            "Batch analysis completed",
            analyzed=len(results),
            failed=len(failures),
            recommended_actions=len(recommended),
        )
        return BatchOutcome(
            results=results,
            summary=summary,
            recommended_actions=recommended,
            failures=failures,
        )

    async def _analyze_item(self, message_id: str, requested: set[AnalysisType]) -> BatchItemResult:
        facts = await self.service.fetch_email(message_id)
        item = BatchItemResult(message_id=message_id)

        if AnalysisType.CATEGORIZE in requested:
            item.category = await self.service.categorize_facts(message_id, facts)

        # Context and cold detection need the full body
        if AnalysisType.CONTEXT in requested and facts.has_body:
            item.context = await self.service.extract_context_facts(message_id, facts)

        if AnalysisType.COLD_DETECTION in requested and facts.has_body:
            item.cold_detection = await self.service.detect_cold_email_facts(message_id, facts)

        return item
