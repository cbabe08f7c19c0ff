"""
Entity validation.

Pure functions: validate a payload for an entity kind and translate
Pydantic errors into the application's ``ValidationError``. Nothing here
touches the database, so the rules can be tested without one.
"""

from typing import Any, Dict, Iterable, List, Mapping
from pydantic import BaseModel, ValidationError as PydanticValidationError
from mclp_backend.app.core.exceptions import ValidationError
from mclp_backend.app.schemas.common import MOBILE_MESSAGE
from mclp_backend.app.schemas.document import DocumentRecordCreate
from mclp_backend.app.schemas.land_file import LandFileRecord
from mclp_backend.app.schemas.ledger import LedgerEntryCreate


class EntityKind:
    """Entity kinds known to the validator."""
    LEDGER_ENTRY = "ledger_entry"
    LAND_FILE = "land_file"
    DOCUMENT = "document"


ENTITY_SCHEMAS: Dict[str, type] = {
    EntityKind.LEDGER_ENTRY: LedgerEntryCreate,
    EntityKind.LAND_FILE: LandFileRecord,
    EntityKind.DOCUMENT: DocumentRecordCreate,
}

# Pydantic error type -> reason reported to clients
_REASONS = {
    "missing": "required",
    "enum": "enum",
    "literal_error": "enum",
    "greater_than_equal": "range",
    "greater_than": "range",
    "less_than_equal": "range",
    "less_than": "range",
    "string_too_short": "empty",
    "string_too_long": "too_long",
    "string_pattern_mismatch": "format",
    "credit_xor_debit": "credit_xor_debit",
}

_LOCATION_PREFIXES = ("body", "query", "path", "form", "header")


def validate(entity_kind: str, payload: Mapping[str, Any]) -> BaseModel:
    """
    Validate ``payload`` as a complete entity of ``entity_kind``.

    Per-field checks run first; cross-field rules (credit xor debit) only
    run once every field is valid.

    Returns:
        The validated schema instance

    Raises:
        ValidationError: describing the first failing field
        KeyError: for an unknown entity kind
    """
    schema = ENTITY_SCHEMAS[entity_kind]
    try:
        return schema.model_validate(dict(payload))
    except PydanticValidationError as exc:
        raise translate_errors(exc.errors()) from None


def _reason(error: Mapping[str, Any]) -> str:
    error_type = error.get("type", "")
    return _REASONS.get(error_type, "type")


def _field(error: Mapping[str, Any], location: List[Any]) -> str:
    ctx = error.get("ctx") or {}
    if ctx.get("field"):
        return ctx["field"]
    names = [part for part in location if isinstance(part, str)]
    if not names:
        return "body"
    name = names[-1]
    if error.get("type") == "string_pattern_mismatch" and name.lower().endswith("mobile"):
        return "mobile"
    return name


def translate_errors(errors: Iterable[Mapping[str, Any]], body_prefixed: bool = False) -> ValidationError:
    """
    Convert Pydantic error dicts into a single ``ValidationError``.

    The first error decides field/reason/message; all errors are listed
    under ``details["errors"]``.

    Args:
        errors: ``exc.errors()`` from Pydantic or FastAPI
        body_prefixed: strip FastAPI's leading "body"/"query"/... location
    """
    translated = []
    for error in errors:
        location = list(error.get("loc", ()))
        if body_prefixed and location and location[0] in _LOCATION_PREFIXES:
            location = location[1:]
        field = _field(error, location)
        reason = _reason(error)
        translated.append({
            "field": field,
            "reason": reason,
            "location": ".".join(str(part) for part in location) or field,
            "message": MOBILE_MESSAGE if field == "mobile" and reason == "format" else error.get("msg", "Invalid value"),
        })

    if not translated:
        return ValidationError(field="body", reason="invalid", message="Invalid request")

    first = translated[0]
    if first["reason"] == "credit_xor_debit":
        message = first["message"]
    else:
        message = f"{first['location']}: {first['message']}"

    return ValidationError(
        field=first["field"],
        reason=first["reason"],
        message=message,
        details={"errors": translated}
    )
