"""Showing request endpoints."""
from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..db.session import get_session
from ..dependencies import get_current_agent
from ..schemas import showings as schemas
from ..services import showings as showings_service
from ..services.ownership import AuthenticatedAgent

router = APIRouter(prefix="/showings", tags=["showings"])


@router.post("", response_model=schemas.ShowingEnvelope, status_code=status.HTTP_201_CREATED)
async def create_showing(
    payload: dict[str, Any] = Body(...),
    session: AsyncSession = Depends(get_session),
) -> schemas.ShowingEnvelope:
    """Submit a tour request; no authentication required."""

    return await showings_service.create_showing(payload, session)


@router.get("", response_model=schemas.ShowingListResponse)
async def list_showings(
    listing_id: str | None = Query(default=None, alias="listingId"),
    status: str | None = None,
    page: str | None = None,
    limit: str | None = None,
    agent: AuthenticatedAgent = Depends(get_current_agent),
    session: AsyncSession = Depends(get_session),
) -> schemas.ShowingListResponse:
    """List showings on the caller's listings."""

    return await showings_service.list_showings(
        agent,
        listing_id=listing_id,
        status=status,
        page=page,
        limit=limit,
        session=session,
    )


@router.get("/count/pending", response_model=schemas.PendingCountResponse)
async def pending_count(
    agent: AuthenticatedAgent = Depends(get_current_agent),
    session: AsyncSession = Depends(get_session),
) -> schemas.PendingCountResponse:
    return await showings_service.pending_count(agent, session)


@router.get("/{showing_id}", response_model=schemas.ShowingEnvelope)
async def get_showing(
    showing_id: str,
    session: AsyncSession = Depends(get_session),
) -> schemas.ShowingEnvelope:
    return await showings_service.get_showing(showing_id, session)


@router.patch("/{showing_id}", response_model=schemas.ShowingEnvelope)
@router.patch("/{showing_id}/status", response_model=schemas.ShowingEnvelope, include_in_schema=False)
async def update_status(
    showing_id: str,
    payload: dict[str, Any] | None = Body(default=None),
    agent: AuthenticatedAgent = Depends(get_current_agent),
    session: AsyncSession = Depends(get_session),
) -> schemas.ShowingEnvelope:
    """Change status; confirming requires a future ``scheduledDate``."""

    return await showings_service.update_status(showing_id, payload or {}, agent, session)


@router.patch("/{showing_id}/feedback", response_model=schemas.ShowingEnvelope)
async def update_feedback(
    showing_id: str,
    payload: dict[str, Any] | None = Body(default=None),
    agent: AuthenticatedAgent = Depends(get_current_agent),
    session: AsyncSession = Depends(get_session),
) -> schemas.ShowingEnvelope:
    return await showings_service.update_feedback(showing_id, payload or {}, agent, session)


@router.delete("/{showing_id}", response_model=schemas.DeletedShowingEnvelope)
async def delete_showing(
    showing_id: str,
    agent: AuthenticatedAgent = Depends(get_current_agent),
    session: AsyncSession = Depends(get_session),
) -> schemas.DeletedShowingEnvelope:
    return await showings_service.delete_showing(showing_id, agent, session)
