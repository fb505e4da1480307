"""
Query Collections

Count-and-slice access to a SQLAlchemy select, for paginators backed by the
database. The statement is owned by the domain code; this module only adds
the count query and the offset/limit window.
"""

from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.exceptions import InvalidPageError
from src.dashboards.pagination import clamp_page, get_total_pages

T = TypeVar("T")


@dataclass
class PaginatedResult(Generic[T]):
    """One page of results plus collection totals."""

    items: list[T] = field(default_factory=list)
    page: int = 0
    total_pages: int = 0
    total_count: int = 0
    requested: int = 0

    @property
    def stale(self) -> bool:
        """The requested page no longer exists and was clamped."""
        return self.requested != self.page


class QueryCollection(Generic[T]):
    """
    A paginatable view over a select statement.

    Example:
        rounds = QueryCollection(
            session,
            select(FundingRound).where(FundingRound.active.is_(True)).order_by(FundingRound.id),
        )
        total = await rounds.count()
        first_page = await rounds.page(0, 25)
    """

    def __init__(self, session: AsyncSession, statement: Select[Any]):
        """Initialize with database session and the base statement."""
        self.session = session
        self.statement = statement

    async def count(self) -> int:
        """Number of rows the statement returns."""
        stmt = select(func.count()).select_from(self.statement.order_by(None).subquery())
        result = await self.session.execute(stmt)
        return result.scalar() or 0

    async def page(self, page: int, page_size: int) -> list[T]:
        """Rows of one page, in the statement's order."""
        if page < 0:
            raise InvalidPageError(str(page))
        stmt = self.statement.offset(page * page_size).limit(page_size)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def paginate(self, page: int, page_size: int) -> PaginatedResult[T]:
        """
        Totals plus one page. A page past the end is clamped to the last
        page; the result reports both the requested and the served page.

        Raises:
            InvalidPageError: page is negative
        """
        if page < 0:
            raise InvalidPageError(str(page))
        total_count = await self.count()
        total_pages = get_total_pages(total_count, page_size)
        served = clamp_page(page, total_pages)
        items = await self.page(served, page_size) if total_pages else []
        return PaginatedResult(
            items=items,
            page=served,
            requested=page,
            total_pages=total_pages,
            total_count=total_count,
        )
