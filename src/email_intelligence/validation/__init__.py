"""
Validation of structured vendor output.

Components:
- Stage1JSONParse: content string to dict
- Stage2SchemaValidation: dict against the output model's JSON Schema
- StructuredOutputValidator: runs both stages plus pydantic model validation
- exceptions: SchemaValidationError and JSONParseError
"""

from email_intelligence.validation.exceptions import (
    JSONParseError,
    SchemaValidationError,
    ValidationError,
)
from email_intelligence.validation.pipeline import StructuredOutputValidator
from email_intelligence.validation.stage1_json_parse import Stage1JSONParse
from email_intelligence.validation.stage2_schema import (
    Stage2SchemaValidation,
    inline_schema_refs,
    output_schema,
)

__all__ = [
    "JSONParseError",
    "SchemaValidationError",
    "ValidationError",
    "StructuredOutputValidator",
    "Stage1JSONParse",
    "Stage2SchemaValidation",
    "inline_schema_refs",
    "output_schema",
]
