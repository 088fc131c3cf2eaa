"""
Helpers for turning inbound payloads into validated schema instances.
"""

from typing import Any, Type, TypeVar

from pydantic import BaseModel, ValidationError

from ..exceptions import SchemaValidationException, format_validation_errors

SchemaT = TypeVar("SchemaT", bound=BaseModel)


def validate_payload(schema: Type[SchemaT], payload: Any) -> SchemaT:
    """
    Validate ``payload`` against ``schema``.

    Accepts an instance of the schema (returned as is), another pydantic
    model (its explicitly set fields are re-validated) or a mapping.

    Raises:
        SchemaValidationException: If the payload does not validate
    """
    if isinstance(payload, schema):
        return payload
    if isinstance(payload, BaseModel):
        payload = payload.model_dump(exclude_unset=True)

    try:
        return schema.model_validate(payload)
    except ValidationError as e:
        errors = format_validation_errors(e.errors())
        raise SchemaValidationException(
            f"Invalid {schema.__name__} payload: {', '.join(sorted(errors))}",
            schema_name=schema.__name__,
            validation_errors=errors,
        )
