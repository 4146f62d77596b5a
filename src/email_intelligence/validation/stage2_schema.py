"""
Stage 2: JSON Schema Validation.

Validate the parsed dict against the JSON Schema of the expected output
model. No coercion happens here: a string where a number is expected fails,
even though pydantic alone would accept it.
"""

import copy
import logging
from typing import Any

from jsonschema import Draft202012Validator
from pydantic import BaseModel

from email_intelligence.monitoring.metrics import validation_failures_total
from .exceptions import SchemaValidationError

logger = logging.getLogger(__name__)

MAX_REPORTED_ERRORS = 10


def inline_schema_refs(schema: dict[str, Any]) -> dict[str, Any]:
    """
    Return a copy of a pydantic JSON Schema with local $refs expanded.

    Some vendors reject $defs/$ref in tool or response schemas. The output
    models are not recursive, so full expansion terminates.
    """
    definitions = schema.get("$defs", {})

    def expand(node: Any) -> Any:
        if isinstance(node, dict):
            ref = node.get("$ref")
            if isinstance(ref, str) and ref.startswith("#/$defs/"):
                target = copy.deepcopy(definitions[ref.split("/")[-1]])
                siblings = {k: v for k, v in node.items() if k != "$ref"}
                return expand({**target, **siblings})
            return {k: expand(v) for k, v in node.items() if k != "$defs"}
        if isinstance(node, list):
            return [expand(item) for item in node]
        return node

    return expand(schema)


def output_schema(model: type[BaseModel]) -> dict[str, Any]:
    """Self-contained JSON Schema (camelCase aliases) for an output model."""
    return inline_schema_refs(model.model_json_schema(by_alias=True))


class Stage2SchemaValidation:
    """
    Stage 2 validator: Validate against an output model's JSON Schema.

    Validators are built once per model and cached.
    """

    def __init__(self):
        self._validators: dict[type[BaseModel], Draft202012Validator] = {}

    def schema_for(self, model: type[BaseModel]) -> dict[str, Any]:
        return self._get_validator(model).schema

    def _get_validator(self, model: type[BaseModel]) -> Draft202012Validator:
        validator = self._validators.get(model)
        if validator is None:
            schema = output_schema(model)
            Draft202012Validator.check_schema(schema)
            validator = Draft202012Validator(schema)
            self._validators[model] = validator
            logger.info("Built JSON Schema validator for %s", model.__name__)
        return validator

    def validate(self, data: dict, model: type[BaseModel]) -> None:
        """
        Validate data against the model's JSON Schema.

        Raises:
            SchemaValidationError: If data doesn't conform to the schema
        """
        validator = self._get_validator(model)
        errors = sorted(validator.iter_errors(data), key=lambda e: [str(p) for p in e.path])

        if errors:
            error_messages = []
            for error in errors[:MAX_REPORTED_ERRORS]:
                path = ".".join(str(p) for p in error.path) if error.path else "root"
                error_messages.append(f"{path}: {error.message}")

            validation_failures_total.labels(
                stage="stage2", error_type="schema_violation"
            ).inc()
            raise SchemaValidationError(
                f"JSON Schema validation failed with {len(errors)} error(s)",
                validation_errors=error_messages,
                schema_name=model.__name__,
            )

        logger.debug("Stage 2: validated against %s schema", model.__name__)
