"""
Stage 1: JSON Parse Validation.

Parse the raw vendor content (string) into a dict. Markdown code fences
around the document are tolerated; anything else that is not a JSON object
is a hard failure.
"""

import json
import re

import structlog

from email_intelligence.monitoring.metrics import validation_failures_total
from .exceptions import JSONParseError

logger = structlog.get_logger(__name__)

_CODE_FENCE = re.compile(r"^```(?:json)?\s*\n?(.*?)\n?```$", re.DOTALL | re.IGNORECASE)


def strip_code_fence(content: str) -> str:
    """Remove a single surrounding ```json ... ``` fence, if present."""
    stripped = content.strip()
    match = _CODE_FENCE.match(stripped)
    return match.group(1).strip() if match else stripped


class Stage1JSONParse:
    """
    Stage 1 validator: Parse JSON string to dict.

    Raises JSONParseError on malformed JSON (hard fail).
    """

    def validate(self, content: str) -> dict:
        """
        Parse JSON content from a vendor response.

        Raises:
            JSONParseError: If content is empty, not JSON, or not a JSON object
        """
        if not content or not content.strip():
            validation_failures_total.labels(
                stage="stage1", error_type="empty_content"
            ).inc()
            raise JSONParseError(
                "LLM response content is empty or whitespace-only",
                raw_content=content,
                parse_error="Empty content"
            )

        try:
            parsed = json.loads(strip_code_fence(content))
        except json.JSONDecodeError as e:
            validation_failures_total.labels(
                stage="stage1", error_type="json_decode_error"
            ).inc()
            raise JSONParseError(
                f"Failed to parse LLM response as JSON: {e.msg}",
                raw_content=content,
                parse_error=f"{e.msg} at line {e.lineno} col {e.colno}"
            ) from e

        if not isinstance(parsed, dict):
            validation_failures_total.labels(
                stage="stage1", error_type="not_json_object"
            ).inc()
            raise JSONParseError(
                f"LLM response is not a JSON object (got {type(parsed).__name__})",
                raw_content=content,
                parse_error=f"Expected dict, got {type(parsed).__name__}"
            )

        logger.debug("Stage 1: parsed JSON", top_level_keys=len(parsed))
        return parsed
