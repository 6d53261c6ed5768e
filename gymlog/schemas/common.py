"""Response envelope and pagination schemas shared by all endpoints."""

from __future__ import annotations

import math
from typing import Any, Generic, TypeVar

from pydantic import BaseModel

DataT = TypeVar("DataT")


class Envelope(BaseModel, Generic[DataT]):
    """{success, message?, data?, details?} wrapper used for every response."""

    success: bool = True
    message: str | None = None
    data: DataT | None = None
    details: list[str] | None = None


class Pagination(BaseModel):
    total: int
    page: int
    limit: int
    total_pages: int

    @classmethod
    def build(cls, total: int, page: int, limit: int) -> Pagination:
        return cls(total=total, page=page, limit=limit, total_pages=math.ceil(total / limit) if limit else 0)


class PaginatedEnvelope(Envelope[list[DataT]], Generic[DataT]):
    pagination: Pagination


class AuthEnvelope(Envelope[DataT], Generic[DataT]):
    token: str


def reject_null(value: Any) -> Any:
    """For partial updates: a field may be omitted but not explicitly set to null."""
    if value is None:
        raise ValueError("may not be null")
    return value


def page_offset(page: int, limit: int) -> int:
    return (page - 1) * limit
