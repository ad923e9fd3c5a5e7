"""Reusable pagination and sorting for list endpoints."""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from fastapi import Query
from pydantic import BaseModel
from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from renobid.config import settings

T = TypeVar("T")


class PaginationParams:
    """Inject as a FastAPI dependency for any list endpoint."""

    def __init__(
        self,
        page: int = Query(1, ge=1, description="Page number"),
        page_size: int = Query(20, ge=1, le=settings.BID_PAGE_SIZE_MAX, description="Items per page"),
        sort_by: str | None = Query(None, description="Column to sort by"),
        sort_order: str = Query("desc", pattern="^(asc|desc)$", description="asc or desc"),
    ):
        self.page = page
        self.page_size = page_size
        self.sort_by = sort_by
        self.sort_order = sort_order

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size

    def total_pages(self, total: int) -> int:
        return (total + self.page_size - 1) // self.page_size


class PaginatedResponse(BaseModel, Generic[T]):
    items: list[T]
    total: int
    page: int
    page_size: int
    total_pages: int


async def paginate(
    db: AsyncSession,
    query: Select,
    params: PaginationParams,
    model: Any = None,
    sortable: set[str] | None = None,
    default_sort: str = "created_at",
) -> tuple[list[Any], int]:
    """Apply sorting and pagination to a query and return (items, total_count).

    ``sortable`` whitelists the columns a client may sort on; anything else
    falls back to ``default_sort``.
    """
    count_q = select(func.count()).select_from(query.order_by(None).subquery())
    total = (await db.execute(count_q)).scalar() or 0

    if model is not None:
        sort_by = params.sort_by or default_sort
        if sortable is not None and sort_by not in sortable:
            sort_by = default_sort
        col = getattr(model, sort_by, None)
        if col is not None:
            query = query.order_by(col.asc() if params.sort_order == "asc" else col.desc())
            # tiebreak so pages never overlap
            if sort_by != "id":
                query = query.order_by(model.id.asc())

    query = query.offset(params.offset).limit(params.page_size)

    result = await db.execute(query)
    items = list(result.scalars().all())
    return items, total
