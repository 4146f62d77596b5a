"""
Email analysis operations.

Components:
- EmailAnalysisService: categorize, detect cold email, extract context
- BatchOrchestrator: sequential batch analysis with per-item isolation
"""

from email_intelligence.analysis.batch import (
    BatchOrchestrator,
    recommend_actions,
    summarize_results,
)
from email_intelligence.analysis.exceptions import BatchSizeExceededError
from email_intelligence.analysis.service import EmailAnalysisService

__all__ = [
    "BatchOrchestrator",
    "BatchSizeExceededError",
    "EmailAnalysisService",
    "recommend_actions",
    "summarize_results",
]
