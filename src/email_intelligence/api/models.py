"""
API response models that are not analysis results.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TierStatus(ApiModel):
    """Resolved tier, without its credential."""

    vendor: str
    model_id: str


class HealthResponse(ApiModel):
    """
    Health check response.

    ``status`` is "degraded" when the tiers cannot be resolved (missing key,
    unknown vendor). No vendor is called.
    """

    status: str = Field(..., description="ok or degraded")
    version: str
    tiers: dict[str, TierStatus] = Field(default_factory=dict)
    configuration_error: Optional[str] = None
    cache_entries: int
    usage_records: int


class TokenTotalsResponse(ApiModel):
    input: int
    output: int
    total: int


class UsageResponse(ApiModel):
    """Token usage over the retained window (optionally since a timestamp)."""

    since: Optional[datetime] = None
    records: int
    totals: TokenTotalsResponse
    by_operation: dict[str, TokenTotalsResponse] = Field(default_factory=dict)


class CacheClearResponse(ApiModel):
    cleared: int
