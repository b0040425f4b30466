from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from .models import MAX_PRICE, MAX_RATING, MIN_NAME_LENGTH, ProductIn

# Field rules shared by create, replace, patch and the data file loader.

REQUIRED_FIELDS = ("name", "price")
PRODUCT_FIELDS = ("name", "category", "description", "price", "stock", "rating", "image")

FIELD_MESSAGES = {
    "name": f"name must be at least {MIN_NAME_LENGTH} characters",
    "category": "category must be a non-empty string",
    "description": "description must be a string",
    "stock": "stock must be a non-negative integer",
    "rating": f"rating must be between 0 and {MAX_RATING}",
    "image": "image must be a string",
}

PRICE_MESSAGES = {
    "greater_than": "price must be greater than 0",
    "less_than_equal": f"price must not exceed {MAX_PRICE}",
}


class ValidationMode(str, Enum):
    CREATE = "create"
    FULL_UPDATE = "full-update"
    PARTIAL_UPDATE = "partial-update"


def _message(field: Optional[str], error_type: str) -> str:
    if field == "price":
        return PRICE_MESSAGES.get(error_type, "price must be a number")
    return FIELD_MESSAGES.get(field, "product fields must be a JSON object")


def validate(fields: Dict[str, Any], mode: ValidationMode) -> List[str]:
    """
    Check candidate product fields and return every violation found.

    In create and full-update mode the required fields must be present;
    in partial-update mode only the fields supplied are checked. An empty
    list means the candidate is valid. Never raises.
    """
    if not isinstance(fields, dict):
        return ["product fields must be a JSON object"]

    errors: List[str] = []
    for name in REQUIRED_FIELDS:
        if fields.get(name) is not None:
            continue
        if mode != ValidationMode.PARTIAL_UPDATE:
            errors.append(f"required field missing: {name}")
        elif name in fields:
            errors.append(f"{name} cannot be null")

    try:
        ProductIn.model_validate(fields)
    except ValidationError as e:
        for err in e.errors():
            field = err["loc"][0] if err["loc"] else None
            msg = _message(field, err["type"])
            if msg not in errors:
                errors.append(msg)
    return errors


def normalize(fields: Dict[str, Any]) -> Dict[str, Any]:
    """
    Return the supplied fields trimmed and coerced to their stored types.
    Call only after validate() passed. Unknown keys are dropped, and so are
    nulls except for image, where null clears it.
    """
    model = ProductIn.model_validate(fields)
    out: Dict[str, Any] = {}
    for name in PRODUCT_FIELDS:
        if name not in model.model_fields_set:
            continue
        value = getattr(model, name)
        if value is None and name != "image":
            continue
        out[name] = value
    return out
