from dataclasses import dataclass, field
from typing import Any, Mapping

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError


@dataclass(slots=True)
class ValidationResult:
    passed: bool
    messages: list[str] = field(default_factory=list)


def _format_error(error: dict[str, Any]) -> str:
    location = ".".join(str(part) for part in error.get("loc", ())) or "data"
    if error.get("type") == "missing":
        return f"The {location} field is required."
    return f"The {location} field is invalid: {error.get('msg', 'invalid value')}."


def validate(data: Mapping[str, Any], rules: type[BaseModel]) -> ValidationResult:
    """Check ``data`` against a rules model, keeping pydantic's error order."""

    try:
        rules.model_validate(dict(data))
    except PydanticValidationError as exc:
        return ValidationResult(passed=False, messages=[_format_error(err) for err in exc.errors()])
    return ValidationResult(passed=True)
