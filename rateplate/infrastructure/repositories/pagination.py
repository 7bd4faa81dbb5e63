from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any, TypeVar

from rateplate.domain.models import ListResult
from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.interfaces import ORMOption

T = TypeVar("T")


async def fetch_page(
    session: AsyncSession,
    query: Select[Any],
    *,
    page_index: int,
    items_per_page: int,
    order_by: Sequence[Any],
    mapper: Callable[[Any], T],
    options: Sequence[ORMOption] = (),
) -> ListResult[T]:
    """Run a filtered query as one page plus an exact total count.

    One row beyond the page is fetched so ``has_more`` needs no extra query.
    The total still costs its own count query: clients render page controls
    from it. Callers validate the page bounds.

    A page starting at or past the total is empty without a page query, so
    offsets beyond what the database can bind never reach it.
    """
    count_stmt = select(func.count()).select_from(query.subquery())
    total_count = await session.scalar(count_stmt) or 0

    offset = page_index * items_per_page
    if offset >= total_count:
        return ListResult(items=[], total_count=total_count, has_more=False)

    page_stmt = (
        query.options(*options)
        .order_by(*order_by)
        .offset(offset)
        .limit(items_per_page + 1)
    )
    rows = (await session.execute(page_stmt)).scalars().all()

    has_more = len(rows) > items_per_page
    return ListResult(
        items=[mapper(row) for row in rows[:items_per_page]],
        total_count=total_count,
        has_more=has_more,
    )
