"""
Output data models for the Email Intelligence Service.

The three analysis results are what the LLM must produce. Their JSON Schema
(camelCase, closed enums, extra fields forbidden) is sent to the vendor and
used again to validate the response. They are frozen so a cached instance
can be handed out repeatedly.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from email_intelligence.models.enums import (
    ColdEmailType,
    EmailCategory,
    SuggestedAction,
)


class AnalysisModel(BaseModel):
    """Base for LLM-produced structures: strict, immutable, camelCase on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
        frozen=True,
    )


class Categorization(AnalysisModel):
    """Category assigned to a single email."""

    category: EmailCategory = Field(..., description="Exactly one category from the closed set")
    confidence: float = Field(..., ge=0.0, le=1.0, description="Confidence score (0.0-1.0)")
    reasoning: str = Field(..., description="Brief explanation of the categorization")
    suggested_labels: Optional[list[str]] = Field(
        default=None,
        description="Mailbox labels worth applying to this email",
    )


class ColdDetection(AnalysisModel):
    """Verdict on whether an email is unsolicited outreach."""

    is_cold_email: bool = Field(..., description="True when the email is unsolicited outreach")
    cold_email_type: ColdEmailType = Field(..., description="Kind of outreach, LEGITIMATE if not cold")
    confidence: float = Field(..., ge=0.0, le=1.0, description="Confidence score (0.0-1.0)")
    reasoning: str = Field(..., description="Indicators behind the verdict")
    suggested_action: SuggestedAction = Field(..., description="Recommended handling")


class Person(AnalysisModel):
    """Someone relevant to the email."""

    name: str
    email: str = Field(..., description="Email address, empty when unknown")
    role: Optional[str] = Field(default=None, description="Role or relationship to the recipient")


class KeyDate(AnalysisModel):
    """A date mentioned in the email together with what happens then."""

    date: str = Field(..., description="Date as written or in ISO format")
    context: str = Field(..., description="What the date refers to")


class ContextExtraction(AnalysisModel):
    """Condensed context of an email (and its thread) for downstream agents."""

    summary: str = Field(..., max_length=500, description="1-2 sentence summary, at most 500 characters")
    key_points: list[str] = Field(...)
    action_items: list[str] = Field(...)
    people: list[Person] = Field(...)
    dates: list[KeyDate] = Field(...)
    relevant_context: str = Field(..., description="Combined context optimized for agent consumption")
    confidence: float = Field(..., ge=0.0, le=1.0, description="Confidence score (0.0-1.0)")


class ResponseModel(BaseModel):
    """Base for service-built responses (not produced by the LLM)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class BatchItemResult(ResponseModel):
    """
    Analyses computed for one message of a batch.

    A field stays None when its analysis was not requested or its
    prerequisites (a non-empty body) did not hold.
    """

    message_id: str
    category: Optional[Categorization] = None
    context: Optional[ContextExtraction] = None
    cold_detection: Optional[ColdDetection] = None


class RecommendedAction(ResponseModel):
    """Follow-up suggested for a cold email found in a batch."""

    message_id: str
    action: SuggestedAction
    reasoning: str


class BatchItemFailure(ResponseModel):
    """A batch item that was dropped from the results and why."""

    message_id: str
    error_type: str
    message: str


class BatchOutcome(ResponseModel):
    """Result of a batch analysis call."""

    results: list[BatchItemResult] = Field(default_factory=list)
    summary: str = ""
    recommended_actions: list[RecommendedAction] = Field(default_factory=list)
    failures: list[BatchItemFailure] = Field(default_factory=list)
