"""Showing persistence helpers."""
from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..db.errors import translate_errors
from ..models.listing import Listing
from ..models.showing import Showing, ShowingStatus
from ..services.validators import Pagination


def _populated() -> Select[tuple[Showing]]:
    return select(Showing).options(selectinload(Showing.listing).selectinload(Listing.agent))


async def get_by_id(session: AsyncSession, showing_id: str) -> Showing | None:
    """Fetch a showing with its listing and the listing's agent loaded."""

    stmt = _populated().where(Showing.id == showing_id)
    with translate_errors():
        result = await session.execute(stmt)
        return result.scalar_one_or_none()


async def create_showing(
    session: AsyncSession,
    *,
    listing: Listing,
    name: str,
    email: str,
    phone: str,
    preferred_date: datetime,
    message: str = "",
) -> Showing:
    """Persist a new pending showing against ``listing``."""

    showing = Showing(
        listing_id=listing.id,
        name=name,
        email=email,
        phone=phone,
        preferred_date=preferred_date,
        message=message,
        status=ShowingStatus.PENDING,
        feedback="",
        scheduled_at=None,
    )
    showing.listing = listing
    with translate_errors():
        session.add(showing)
        await session.flush()
    return showing


async def save(session: AsyncSession, showing: Showing) -> Showing:
    with translate_errors():
        session.add(showing)
        await session.flush()
    return showing


async def delete_showing(session: AsyncSession, showing: Showing) -> None:
    with translate_errors():
        await session.delete(showing)
        await session.flush()


async def search_showings(
    session: AsyncSession,
    *,
    listing_ids: Sequence[str],
    status: ShowingStatus | None,
    pagination: Pagination,
) -> tuple[list[Showing], int]:
    """Return one page of showings for the listings, newest first, and the total."""

    conditions = [Showing.listing_id.in_(list(listing_ids))]
    if status is not None:
        conditions.append(Showing.status == status)

    count_stmt = select(func.count(Showing.id)).where(*conditions)
    page_stmt = (
        _populated()
        .where(*conditions)
        .order_by(Showing.created_at.desc(), Showing.id.desc())
        .offset(pagination.offset)
        .limit(pagination.limit)
    )

    with translate_errors():
        total = (await session.execute(count_stmt)).scalar_one()
        rows = (await session.execute(page_stmt)).scalars().all()
    return list(rows), int(total)


async def count_pending(session: AsyncSession, listing_ids: Sequence[str]) -> int:
    stmt = select(func.count(Showing.id)).where(
        Showing.listing_id.in_(list(listing_ids)),
        Showing.status == ShowingStatus.PENDING,
    )
    with translate_errors():
        return int((await session.execute(stmt)).scalar_one())
