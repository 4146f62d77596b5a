"""
Structured output validation pipeline.

Three hard-fail stages, all surfacing as SchemaValidationError:
- Stage 1: JSON parse
- Stage 2: JSON Schema of the output model
- Stage 3: pydantic model validation (enums, ranges, lengths)
"""

import logging
from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from email_intelligence.monitoring.metrics import validation_failures_total
from .exceptions import SchemaValidationError
from .stage1_json_parse import Stage1JSONParse
from .stage2_schema import MAX_REPORTED_ERRORS, Stage2SchemaValidation

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class StructuredOutputValidator:
    """
    Validates vendor content against an output model.

    Example:
        >>> validator = StructuredOutputValidator()
        >>> result = validator.validate(response.content, Categorization)
    """

    def __init__(self):
        self.stage1 = Stage1JSONParse()
        self.stage2 = Stage2SchemaValidation()

    def schema_for(self, model: type[BaseModel]) -> dict[str, Any]:
        """JSON Schema to send to the vendor for this output model."""
        return self.stage2.schema_for(model)

    def validate(self, content: str, model: type[ModelT]) -> ModelT:
        """
        Run all stages and return the validated model instance.

        Raises:
            SchemaValidationError: Content fails any stage
        """
        parsed = self.stage1.validate(content)
        self.stage2.validate(parsed, model)

        try:
            result = model.model_validate(parsed)
        except PydanticValidationError as e:
            error_messages = [
                f"{'.'.join(str(loc) for loc in err['loc']) or 'root'}: {err['msg']}"
                for err in e.errors()[:MAX_REPORTED_ERRORS]
            ]
            validation_failures_total.labels(
                stage="stage3", error_type="model_validation"
            ).inc()
            raise SchemaValidationError(
                f"Model validation failed: {e.error_count()} error(s)",
                validation_errors=error_messages,
                schema_name=model.__name__,
            ) from e

        logger.debug("Structured output validated as %s", model.__name__)
        return result
