"""
Input data models for the Email Intelligence Service.

EmailFacts and ThreadMessage are read-only views handed over by the email
data provider. The request models describe the four exposed operations.
Wire names are camelCase; Python attributes are snake_case.
"""

from email.utils import parseaddr
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from email_intelligence.models.enums import AnalysisType


class EmailFacts(BaseModel):
    """
    Facts about a single message, as returned by the email data provider.

    The core never mutates these.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    from_: str = Field(..., alias="from", description="Raw From header")
    subject: str = Field(default="", description="Subject line")
    snippet: str = Field(default="", description="Short preview of the body")
    body: Optional[str] = Field(default=None, description="Plain-text body, when available")

    @property
    def sender_address(self) -> str:
        """Bare, lower-cased address from the From header."""
        _, address = parseaddr(self.from_)
        return (address or self.from_).strip().lower()

    @property
    def has_body(self) -> bool:
        return bool(self.body and self.body.strip())


class ThreadMessage(BaseModel):
    """One earlier message of a thread, used as context history."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    from_: str = Field(..., alias="from")
    subject: str = Field(default="")
    body: str = Field(default="")


class UserProfile(BaseModel):
    """Optional description of the mailbox owner for cold detection."""

    model_config = ConfigDict(frozen=True)

    company: Optional[str] = None
    role: Optional[str] = None
    interests: list[str] = Field(default_factory=list)


class CamelModel(BaseModel):
    """Request model base: accepts camelCase on the wire and snake_case in code."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CategorizeRequest(CamelModel):
    """Body of the categorize operation."""

    categories: Optional[list[str]] = Field(
        default=None,
        description="Custom category names to offer the model instead of the built-in list",
    )


class ExtractContextRequest(CamelModel):
    """Body of the context extraction operation."""

    thread_id: Optional[str] = Field(default=None, description="Thread to pull history from")
    max_history_messages: Optional[int] = Field(
        default=None, ge=0, le=100, description="Defaults to DEFAULT_MAX_HISTORY_MESSAGES (10)"
    )


class DetectColdEmailRequest(CamelModel):
    """Body of the cold detection operation."""

    user_profile: Optional[UserProfile] = None


class BatchOptions(CamelModel):
    """Options for a batch analysis."""

    auto_apply_labels: bool = False
    generate_summary: bool = True


class BatchAnalyzeRequest(CamelModel):
    """
    Batch analysis request.

    The size ceiling is enforced by the orchestrator against
    ``Settings.BATCH_MAX_SIZE`` so it stays configurable.
    """

    message_ids: list[str] = Field(..., description="Message IDs, processed in this order")
    analysis_types: list[AnalysisType] = Field(
        ..., description="Analyses to run for each message"
    )
    options: BatchOptions = Field(default_factory=BatchOptions)
