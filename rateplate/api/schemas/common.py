from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    """Serializes with camelCase keys and accepts either casing on input."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ListResponse(CamelModel, Generic[T]):
    items: list[T]
    total_count: int = Field(..., description="Number of items across all pages")
    has_more: bool = Field(..., description="True when another page follows this one")


class ProblemDetails(BaseModel):
    """RFC 7807 error body returned for infrastructure failures."""

    type: str = "about:blank"
    title: str
    status: int
    detail: str | None = None
    instance: str | None = None
