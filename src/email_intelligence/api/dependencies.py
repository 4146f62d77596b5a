"""
FastAPI dependency injection.

Components are built once per application (see main.create_app) and stored
on ``app.state.container``; these helpers hand them to route functions.
"""

from fastapi import Depends, Request

from email_intelligence.analysis.batch import BatchOrchestrator
from email_intelligence.analysis.service import EmailAnalysisService
from email_intelligence.config import Settings
from email_intelligence.container import ServiceContainer
from email_intelligence.monitoring.usage_tracker import TokenUsageTracker
from email_intelligence.persistence.result_cache import ResultCache


def get_container(request: Request) -> ServiceContainer:
    """Service container of the running application."""
    return request.app.state.container


def get_settings(container: ServiceContainer = Depends(get_container)) -> Settings:
    return container.settings


def get_analysis_service(
    container: ServiceContainer = Depends(get_container),
) -> EmailAnalysisService:
    return container.analysis


def get_batch_orchestrator(
    container: ServiceContainer = Depends(get_container),
) -> BatchOrchestrator:
    return container.batch


def get_usage_tracker(
    container: ServiceContainer = Depends(get_container),
) -> TokenUsageTracker:
    return container.usage_tracker


def get_result_cache(container: ServiceContainer = Depends(get_container)) -> ResultCache:
    return container.cache
