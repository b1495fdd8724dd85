"""Data access helpers for listings."""
from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from sqlalchemy import ColumnElement, Select, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..db.errors import translate_errors
from ..models.base import utcnow
from ..models.listing import Listing, ListingStatus
from ..services.validators import ListingQuery, NumericRange, Pagination, SortSpec


async def get_by_id(session: AsyncSession, listing_id: str) -> Listing | None:
    """Fetch a listing with its owning agent loaded."""

    stmt = select(Listing).options(selectinload(Listing.agent)).where(Listing.id == listing_id)
    with translate_errors():
        result = await session.execute(stmt)
        return result.scalar_one_or_none()


async def create_listing(session: AsyncSession, *, created_by: str | None, **fields: Any) -> Listing:
    """Persist a new listing owned by ``created_by``."""

    listing = Listing(created_by=created_by, **fields)
    with translate_errors():
        session.add(listing)
        await session.flush()
    return listing


async def update_listing(session: AsyncSession, listing: Listing, changes: dict[str, Any]) -> Listing:
    """Apply already-validated field changes."""

    for key, value in changes.items():
        setattr(listing, key, value)
    listing.updated_at = utcnow()
    with translate_errors():
        session.add(listing)
        await session.flush()
    return listing


async def delete_listing(session: AsyncSession, listing: Listing) -> None:
    with translate_errors():
        await session.delete(listing)
        await session.flush()


async def list_ids_owned_by(session: AsyncSession, agent_id: str) -> list[str]:
    """Identifiers of every listing created by the agent."""

    stmt = select(Listing.id).where(Listing.created_by == agent_id)
    with translate_errors():
        result = await session.execute(stmt)
        return list(result.scalars().all())


async def search_listings(
    session: AsyncSession,
    *,
    filters: ListingQuery,
    sort: SortSpec,
    pagination: Pagination,
) -> tuple[list[Listing], int]:
    """Return one page of listings matching ``filters`` and the total match count."""

    conditions = _conditions(filters)

    count_stmt = select(func.count(Listing.id)).where(*conditions)
    column = getattr(Listing, sort.column)
    ordering = column.asc() if sort.direction == "asc" else column.desc()
    page_stmt: Select[tuple[Listing]] = (
        select(Listing)
        .where(*conditions)
        .order_by(ordering, Listing.id.asc())
        .offset(pagination.offset)
        .limit(pagination.limit)
    )

    with translate_errors():
        total = (await session.execute(count_stmt)).scalar_one()
        rows: Sequence[Listing] = (await session.execute(page_stmt)).scalars().all()
    return list(rows), int(total)


def _conditions(filters: ListingQuery) -> list[ColumnElement[bool]]:
    conditions: list[ColumnElement[bool]] = []
    conditions.extend(_range(Listing.price, filters.price))
    conditions.extend(_range(Listing.square_feet, filters.square_feet))

    if filters.zip_code:
        conditions.append(Listing.zip_code == filters.zip_code)
    if filters.status is not None:
        conditions.append(Listing.status == filters.status)

    if filters.keyword:
        needle = filters.keyword.lower()
        matches: list[ColumnElement[bool]] = [
            Listing.address.icontains(needle, autoescape=True),
            Listing.zip_code.contains(needle, autoescape=True),
        ]
        statuses = [item for item in ListingStatus if needle in item.value]
        if statuses:
            matches.append(Listing.status.in_(statuses))
        conditions.append(or_(*matches))

    return conditions


def _range(column: Any, bounds: NumericRange) -> list[ColumnElement[bool]]:
    conditions: list[ColumnElement[bool]] = []
    if bounds.minimum is not None:
        conditions.append(column >= bounds.minimum)
    if bounds.maximum is not None:
        conditions.append(column <= bounds.maximum)
    return conditions
