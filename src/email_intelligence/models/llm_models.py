"""
LLM-specific data models for the request/response cycle.

These are internal to the LLM layer. Vendor adapters translate them to and
from each vendor's HTTP API, so nothing above the adapters depends on
vendor payload shapes.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, SecretStr

from email_intelligence.models.enums import ModelTier


class TierProfile(BaseModel):
    """
    Vendor, model and credential chosen for one tier.

    Built at resolution time and never persisted.
    """
    model_config = ConfigDict(frozen=True)

    tier: ModelTier
    vendor: str = Field(..., description="Vendor name (anthropic, openai, google)")
    model_id: str = Field(..., description="Vendor model identifier")
    api_key: SecretStr = Field(..., repr=False)


class ModelTiers(BaseModel):
    """Both resolved tiers."""
    model_config = ConfigDict(frozen=True)

    default: TierProfile
    economy: TierProfile

    def for_tier(self, tier: ModelTier) -> TierProfile:
        return self.default if tier == ModelTier.DEFAULT else self.economy


class LLMGenerationRequest(BaseModel):
    """
    Vendor-neutral request for one structured generation.
    """
    model_config = ConfigDict(frozen=True)

    prompt: str = Field(..., description="User prompt")
    system_instruction: Optional[str] = Field(default=None, description="System prompt")
    model: str = Field(..., description="Vendor model identifier")
    temperature: float = Field(default=0.1, ge=0.0, le=2.0, description="Sampling temperature")
    max_tokens: int = Field(default=2048, ge=1, le=32768, description="Maximum tokens to generate")
    format_schema: Optional[Dict[str, Any]] = Field(
        default=None,
        description="JSON Schema the output must conform to",
    )
    schema_name: str = Field(default="structured_output", description="Name for the schema/tool")


class LLMGenerationResponse(BaseModel):
    """
    Raw generated content plus call metadata.

    Token counts are None when the vendor did not report them.
    """
    model_config = ConfigDict(frozen=True)

    content: str = Field(..., description="Generated text (a JSON document)")
    model_version: str = Field(..., description="Model that actually served the request")
    finish_reason: str = Field(..., description="Why generation stopped, as reported by the vendor")
    prompt_tokens: Optional[int] = Field(default=None, ge=0)
    completion_tokens: Optional[int] = Field(default=None, ge=0)
    latency_ms: int = Field(..., ge=0, description="Call latency in milliseconds")
    raw_metadata: Dict[str, Any] = Field(default_factory=dict)

    @property
    def has_usage(self) -> bool:
        return self.prompt_tokens is not None and self.completion_tokens is not None


class UsageRecord(BaseModel):
    """Token consumption of one successful structured call."""
    model_config = ConfigDict(frozen=True)

    vendor: str
    model_id: str
    input_tokens: int = Field(..., ge=0)
    output_tokens: int = Field(..., ge=0)
    operation: str = Field(..., description="Operation that spent the tokens, e.g. categorize")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class TokenTotals(BaseModel):
    """Summed token counts."""

    input: int = 0
    output: int = 0

    @property
    def total(self) -> int:
        return self.input + self.output
