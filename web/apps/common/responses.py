"""Response envelope helpers.

Every endpoint answers ``{success, data?, error?, message?}``. Views build
successful bodies with :func:`ok`; failures are rendered by the exception
handler through :func:`fail`. :func:`validate` runs a Pydantic schema over
a request body and converts its errors into our ``ValidationError``.
"""

from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from .errors import ValidationError

M = TypeVar("M", bound=BaseModel)


def ok(data: Any = None, message: str | None = None) -> dict:
    body: dict[str, Any] = {"success": True}
    if data is not None:
        body["data"] = data
    if message:
        body["message"] = message
    return body


def fail(error: str) -> dict:
    return {"success": False, "error": error}


def _describe(exc: PydanticValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()))
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return "; ".join(parts) or "Invalid request"


def validate(schema: type[M], data: Any) -> M:
    """Validate ``data`` against ``schema``.

    Args:
        schema: Pydantic model class describing the payload.
        data: Parsed request body or query mapping.

    Returns:
        The validated model instance.

    Raises:
        ValidationError: When the payload does not satisfy the schema.
    """
    try:
        return schema.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError(_describe(e)) from e
