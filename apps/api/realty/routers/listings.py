"""Listing endpoints."""
from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..db.session import get_session
from ..dependencies import get_current_agent
from ..schemas import listings as schemas
from ..services import listings as listings_service
from ..services.ownership import AuthenticatedAgent

router = APIRouter(prefix="/listings", tags=["listings"])


@router.post("", response_model=schemas.ListingEnvelope, status_code=status.HTTP_201_CREATED)
async def create_listing(
    payload: dict[str, Any] = Body(...),
    agent: AuthenticatedAgent = Depends(get_current_agent),
    session: AsyncSession = Depends(get_session),
) -> schemas.ListingEnvelope:
    """Create a listing owned by the caller."""

    return await listings_service.create_listing(payload, agent, session)


@router.get("", response_model=schemas.ListingListResponse)
async def search_listings(
    min_price: str | None = Query(default=None, alias="minPrice"),
    max_price: str | None = Query(default=None, alias="maxPrice"),
    min_square_feet: str | None = Query(default=None, alias="minSquareFeet"),
    max_square_feet: str | None = Query(default=None, alias="maxSquareFeet"),
    zip_code: str | None = Query(default=None, alias="zipCode"),
    status: str | None = None,
    keyword: str | None = None,
    page: str | None = None,
    limit: str | None = None,
    sort_by: str | None = Query(default=None, alias="sortBy"),
    order: str | None = None,
    session: AsyncSession = Depends(get_session),
) -> schemas.ListingListResponse:
    """Return a filtered, sorted page of listings."""

    return await listings_service.search_listings(
        min_price=min_price,
        max_price=max_price,
        min_square_feet=min_square_feet,
        max_square_feet=max_square_feet,
        zip_code=zip_code,
        status=status,
        keyword=keyword,
        page=page,
        limit=limit,
        sort_by=sort_by,
        order=order,
        session=session,
    )


@router.get("/{listing_id}", response_model=schemas.ListingEnvelope)
async def get_listing(
    listing_id: str,
    session: AsyncSession = Depends(get_session),
) -> schemas.ListingEnvelope:
    return await listings_service.get_listing(listing_id, session)


@router.api_route("/{listing_id}", methods=["PUT", "PATCH"], response_model=schemas.ListingEnvelope)
async def update_listing(
    listing_id: str,
    payload: dict[str, Any] | None = Body(default=None),
    agent: AuthenticatedAgent = Depends(get_current_agent),
    session: AsyncSession = Depends(get_session),
) -> schemas.ListingEnvelope:
    """Partially update a listing the caller owns."""

    return await listings_service.update_listing(listing_id, payload or {}, agent, session)


@router.delete("/{listing_id}", response_model=schemas.ListingEnvelope)
async def delete_listing(
    listing_id: str,
    agent: AuthenticatedAgent = Depends(get_current_agent),
    session: AsyncSession = Depends(get_session),
) -> schemas.ListingEnvelope:
    return await listings_service.delete_listing(listing_id, agent, session)
