"""
Exceptions raised while validating structured model output.

Every failure of the validation pipeline surfaces as SchemaValidationError
(JSONParseError is the stage 1 flavour of it) so callers only need to catch
one type to detect a malformed vendor response.
"""

from typing import Any


class ValidationError(Exception):
    """Base exception for all validation errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        """
        Initialize validation error.

        Args:
            message: Human-readable error description
            details: Structured error data for logging/metrics
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class SchemaValidationError(ValidationError):
    """
    The vendor response does not match the requested output schema.

    Raised by the JSON Schema stage and by the pydantic model stage.
    """

    def __init__(
        self,
        message: str,
        validation_errors: list[str] | None = None,
        schema_name: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        """
        Args:
            message: Error description
            validation_errors: "path: message" strings, at most 10
            schema_name: Name of the output model the content was checked against
            details: Extra structured data merged into the error details
        """
        merged = dict(details or {})
        if validation_errors:
            merged["validation_errors"] = validation_errors
        if schema_name:
            merged["schema_name"] = schema_name

        super().__init__(message, merged)
        self.validation_errors = validation_errors or []


class JSONParseError(SchemaValidationError):
    """
    Stage 1: the vendor response content is not a JSON object.
    """

    def __init__(self, message: str, raw_content: str | None = None, parse_error: str | None = None):
        details = {}
        if raw_content:
            # First 500 chars are enough to debug without flooding logs
            details["content_snippet"] = raw_content[:500]
        if parse_error:
            details["parse_error"] = parse_error

        super().__init__(message, details=details)
