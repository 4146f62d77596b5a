"""
Data models for the Email Intelligence Service.

Modules:
- enums: Closed taxonomies (categories, cold email types, actions, vendors, tiers)
- input_models: Email facts from the data provider and operation requests
- output_models: LLM-produced analysis results and batch outcomes
- llm_models: Vendor-neutral generation request/response, tier profiles, usage
"""

from email_intelligence.models.enums import (
    AnalysisType,
    ColdEmailType,
    EmailCategory,
    ModelTier,
    SuggestedAction,
    Vendor,
)
from email_intelligence.models.input_models import (
    BatchAnalyzeRequest,
    BatchOptions,
    CategorizeRequest,
    DetectColdEmailRequest,
    EmailFacts,
    ExtractContextRequest,
    ThreadMessage,
    UserProfile,
)
from email_intelligence.models.llm_models import (
    LLMGenerationRequest,
    LLMGenerationResponse,
    ModelTiers,
    TierProfile,
    TokenTotals,
    UsageRecord,
)
from email_intelligence.models.output_models import (
    BatchItemFailure,
    BatchItemResult,
    BatchOutcome,
    Categorization,
    ColdDetection,
    ContextExtraction,
    KeyDate,
    Person,
    RecommendedAction,
)

__all__ = [
    # Enums
    "AnalysisType",
    "ColdEmailType",
    "EmailCategory",
    "ModelTier",
    "SuggestedAction",
    "Vendor",
    # Input models
    "BatchAnalyzeRequest",
    "BatchOptions",
    "CategorizeRequest",
    "DetectColdEmailRequest",
    "EmailFacts",
    "ExtractContextRequest",
    "ThreadMessage",
    "UserProfile",
    # LLM models
    "LLMGenerationRequest",
    "LLMGenerationResponse",
    "ModelTiers",
    "TierProfile",
    "TokenTotals",
    "UsageRecord",
    # Output models
    "BatchItemFailure",
    "BatchItemResult",
    "BatchOutcome",
    "Categorization",
    "ColdDetection",
    "ContextExtraction",
    "KeyDate",
    "Person",
    "RecommendedAction",
]
