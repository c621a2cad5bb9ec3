from collections.abc import Sequence
from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from taskboard.core.exceptions.domain import ValidationError

SchemaType = TypeVar("SchemaType", bound=BaseModel)


def format_errors(errors: Sequence[Any]) -> str:
    """Flatten pydantic error dicts into one readable message."""
    messages = []
    for item in errors:
        location = ".".join(str(part) for part in item["loc"] if part != "body")
        message = item["msg"].removeprefix("Value error, ")
        messages.append(f"{location}: {message}" if location else message)
    return "; ".join(messages)


def validate_payload(schema: type[SchemaType], data: Any) -> SchemaType:
    """Build a schema from raw input, raising the domain ValidationError on failure."""
    try:
        return schema.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError(format_errors(e.errors())) from e
