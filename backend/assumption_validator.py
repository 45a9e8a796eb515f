"""
Assumption Validator

Turns an untyped form payload into a BusinessAssumptions record.
Numeric-looking strings are coerced; the first violation is reported with
the offending field so the caller can point at it.
"""

from typing import Any, Dict, Mapping
import logging

from pydantic import ValidationError as PydanticValidationError

from projection_models import BusinessAssumptions, wire_name

logger = logging.getLogger(__name__)


ROOT_FIELD = "__root__"


class AssumptionValidationError(ValueError):
    """Raised when a payload cannot become a BusinessAssumptions record."""

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": "validation_error",
            "field": self.field,
            "message": self.message,
        }


def _field_from_loc(loc) -> str:
    if not loc:
        return ROOT_FIELD
    name = str(loc[0])
    # loc carries the alias when validated by alias, the attribute name otherwise
    return wire_name(name)


def validate_assumptions(payload: Any) -> BusinessAssumptions:
    """
    Validate a raw payload.

    Args:
        payload: Mapping of form fields (camelCase or snake_case keys), or an
            already validated BusinessAssumptions

    Returns:
        BusinessAssumptions satisfying all field constraints

    Raises:
        AssumptionValidationError: on the first schema violation
    """
    if isinstance(payload, BusinessAssumptions):
        return payload

    if not isinstance(payload, Mapping):
        raise AssumptionValidationError(ROOT_FIELD, "Payload must be an object")

    try:
        return BusinessAssumptions.model_validate(dict(payload))
    except PydanticValidationError as e:
        first = e.errors()[0]
        field = _field_from_loc(first.get("loc"))
        message = first.get("msg", "Invalid value")
        logger.info(f"Rejected assumptions: {field}: {message}")
        raise AssumptionValidationError(field, message) from None
