"""Shared pydantic building blocks for the HTTP layer.

Responses are camelCase on the wire (``nextCursor``, ``imageUrl``); request
bodies accept either camelCase or snake_case field names.
"""

from __future__ import annotations

from typing import Annotated, Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, PlainSerializer
from pydantic.alias_generators import to_camel

T = TypeVar("T")

# Two decimal places on the wire
Money = Annotated[float, PlainSerializer(lambda value: round(value, 2), return_type=float)]


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class PageResponse(CamelModel, Generic[T]):
    data: list[T]
    next_cursor: Any = None


class MessageResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    message: str
    error: str
    statusCode: int
    issues: list[dict] | None = None


def page_response(model: type[BaseModel], page) -> PageResponse:
    """Build a ``{data, nextCursor}`` response from a ``shared.pagination.Page``."""
    return PageResponse[model](
        data=[model.model_validate(item) for item in page.items],
        next_cursor=page.next_cursor,
    )
