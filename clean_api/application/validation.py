"""
Command validation on top of pydantic.

Each command has a rules model carrying its field constraints. Handlers run
the command through its rules model and turn any ``ValidationError`` into a
``BadRequestError`` whose errors are keyed by the field's wire name (camelCase)
and phrased with the field's title::

    {"price": ["Price must be greater than 0"]}
"""

from typing import Dict, List, Type

from pydantic import BaseModel, ValidationError
from pydantic.alias_generators import to_camel

from ..domain.exceptions import BadRequestError

# pydantic error type -> message template, formatted with the field title and the error context
MESSAGE_TEMPLATES: Dict[str, str] = {
    "missing": "{title} is required",
    "string_too_short": "{title} is required",
    "string_too_long": "{title} must not exceed {max_length} characters",
    "greater_than": "{title} must be greater than {gt}",
    "greater_than_equal": "{title} must be greater than or equal to {ge}",
}


def display_name(field_name: str) -> str:
    """Turn ``stock_quantity`` into ``Stock Quantity``."""
    return " ".join(part.capitalize() for part in field_name.split("_"))


def _field_title(model: Type[BaseModel], field_name: str) -> str:
    field = model.model_fields.get(field_name)
    if field is not None and field.title:
        return field.title
    return display_name(field_name)


def collect_errors(model: Type[BaseModel], exc: ValidationError) -> Dict[str, List[str]]:
    """
    Group a pydantic ``ValidationError`` by camelCase field name.

    Args:
        model: Rules model that raised the error
        exc: The validation error

    Returns:
        Mapping of wire field name to its messages
    """
    errors: Dict[str, List[str]] = {}
    for error in exc.errors():
        field_name = str(error["loc"][0]) if error["loc"] else "request"
        title = _field_title(model, field_name)
        template = MESSAGE_TEMPLATES.get(error["type"])
        if template is None:
            message = f"{title}: {error['msg']}"
        else:
            message = template.format(title=title, **error.get("ctx", {}))
        errors.setdefault(to_camel(field_name), []).append(message)
    return errors


def validate_command(model: Type[BaseModel], command: BaseModel, message: str) -> None:
    """
    Check a command against its rules model.

    Raises:
        BadRequestError: With ``message`` and the per-field errors when a rule fails
    """
    try:
        model.model_validate(command.model_dump())
    except ValidationError as e:
        raise BadRequestError(message, collect_errors(model, e)) from e
