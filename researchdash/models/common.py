"""
Shared Pydantic building blocks for request and response bodies.

Every API model derives from `ApiModel`: fields are declared in snake_case and
serialized in camelCase (`pdf_link` -> `pdfLink`), and request bodies are
accepted in either spelling.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


def blank_to_none(value: Any) -> Any:
    """Select fields sent as "" (an unset form control) mean "no value"."""
    if isinstance(value, str) and not value.strip():
        return None
    return value


class WriteResponse(ApiModel):
    """Result of a create, update or delete. `id` and `message` are omitted when unset."""

    success: bool = True
    id: Optional[str] = None
    message: Optional[str] = None


class ClearResponse(ApiModel):
    """Outcome of archiving every saved paper."""

    success: bool = True
    archived: int = 0
    failed: int = 0


class ErrorResponse(BaseModel):
    error: str
    details: Optional[List[Dict[str, Any]]] = None
