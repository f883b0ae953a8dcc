"""Shared schema building blocks."""

import math
from decimal import Decimal
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, PlainSerializer
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

# Decimal amounts are emitted as JSON numbers
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class APIModel(BaseModel):
    """Response model with camelCase field aliases on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class RequestModel(BaseModel):
    """Request model: camelCase or snake_case input, unknown fields rejected."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )


class Pagination(APIModel):
    """Schema for pagination metadata."""

    page: int
    limit: int
    total: int
    total_pages: int
    has_next: bool
    has_prev: bool

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "Pagination":
        total_pages = math.ceil(total / limit) if limit else 0
        return cls(
            page=page,
            limit=limit,
            total=total,
            total_pages=total_pages,
            has_next=page < total_pages,
            has_prev=page > 1,
        )


def blank_to_none(value: Any) -> Any:
    """Treat empty form strings as absent values."""
    if isinstance(value, str) and not value.strip():
        return None
    return value


def format_validation_error(exc: PydanticValidationError) -> str:
    """Flatten a pydantic error into a single human-readable message."""
    messages = []
    for error in exc.errors():
        field = ".".join(str(part) for part in error["loc"] if part != "body")
        message = error["msg"].removeprefix("Value error, ")
        messages.append(f"{field}: {message}" if field else message)
    return "; ".join(messages)
