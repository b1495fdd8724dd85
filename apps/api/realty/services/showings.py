"""Showing request lifecycle and ownership enforcement.

Visitors create showings without authenticating. Everything else is reserved
for the agent whose listing the showing refers to: the owning agent is derived
from ``showing.listing.created_by`` and compared as an :class:`EntityId`.

Status values are ``pending``, ``confirmed``, ``completed`` and ``cancelled``.
Any status may be set from any other; confirming requires a future
``scheduledDate`` which becomes ``scheduled_at``, and every other status clears it.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from pydantic import TypeAdapter, ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.config import settings
from ..db.session import commit
from ..errors import (
    EntityValidationError,
    classify_failures,
    invalid_input,
    invalid_status,
    not_found,
)
from ..models.base import utcnow
from ..models.listing import Listing
from ..models.showing import Showing, ShowingStatus
from ..repositories import listings as listings_repo
from ..repositories import showings as showings_repo
from ..schemas import showings as schemas
from ..schemas.showings import as_utc
from . import validators
from .ownership import AuthenticatedAgent, ensure_owner

logger = logging.getLogger(__name__)

STATUS_ALIASES: dict[str, ShowingStatus] = {
    "approved": ShowingStatus.CONFIRMED,
    "rejected": ShowingStatus.CANCELLED,
}
MAX_FEEDBACK_LENGTH = 2000

_datetime_adapter = TypeAdapter(datetime)


def _listing_out(listing: Listing | None) -> schemas.ShowingListing | None:
    if listing is None:
        return None
    agent = listing.agent
    contact = (
        schemas.AgentContact(id=agent.id, name=agent.name, email=agent.email, phone=agent.phone)
        if agent is not None
        else None
    )
    return schemas.ShowingListing(
        id=listing.id,
        address=listing.address,
        zip_code=listing.zip_code,
        price=listing.price,
        images=list(listing.images or []),
        created_by=contact,
    )


def to_out(showing: Showing) -> schemas.ShowingOut:
    return schemas.ShowingOut(
        id=showing.id,
        listing=_listing_out(showing.listing),
        name=showing.name,
        email=showing.email,
        phone=showing.phone,
        preferred_date=showing.preferred_date,
        message=showing.message or "",
        status=showing.status,
        feedback=showing.feedback or "",
        scheduled_at=showing.scheduled_at,
        created_at=showing.created_at,
        updated_at=showing.updated_at,
    )


def canonical_statuses() -> list[str]:
    return [item.value for item in ShowingStatus]


def resolve_status(raw: object, *, allow_aliases: bool | None = None) -> ShowingStatus:
    """Map a caller-supplied status onto the stored value."""

    if allow_aliases is None:
        allow_aliases = settings.showing_status_aliases
    if isinstance(raw, str):
        candidate = raw.strip().lower()
        if allow_aliases and candidate in STATUS_ALIASES:
            return STATUS_ALIASES[candidate]
        try:
            return ShowingStatus(candidate)
        except ValueError:
            pass
    raise invalid_status(canonical_statuses())


def parse_scheduled_date(raw: object, *, now: datetime | None = None) -> datetime:
    """Validate the confirmation date supplied with a ``confirmed`` status."""

    if raw is None or (isinstance(raw, str) and not raw.strip()):
        raise invalid_input("scheduledDate is required when confirming a showing")
    try:
        scheduled = as_utc(_datetime_adapter.validate_python(raw))
    except ValidationError as exc:
        raise invalid_input("scheduledDate must be a valid date and time") from exc
    if scheduled <= (now or datetime.now(timezone.utc)):
        raise invalid_input("scheduledDate must be in the future")
    return scheduled


async def _load(showing_id: str, session: AsyncSession, action: str) -> Showing:
    entity_id = validators.unwrap(validators.validate_object_id(showing_id, "Showing"))
    with classify_failures(action):
        showing = await showings_repo.get_by_id(session, entity_id.value)
    if showing is None:
        raise not_found("Showing", showing_id)
    return showing


async def create_showing(payload: dict[str, Any], session: AsyncSession) -> schemas.ShowingEnvelope:
    """Record a visitor's tour request against an existing listing."""

    listing_id = validators.unwrap(validators.validate_object_id(payload.get("listing"), "Listing"))

    with classify_failures("creating showing request"):
        listing = await listings_repo.get_by_id(session, listing_id.value)
        if listing is None:
            raise not_found("Listing", listing_id.value)

        try:
            request = schemas.ShowingRequest.model_validate(payload)
        except ValidationError as exc:
            raise EntityValidationError.from_pydantic(exc) from exc

        showing = await showings_repo.create_showing(
            session,
            listing=listing,
            name=request.name,
            email=request.email,
            phone=request.phone,
            preferred_date=request.preferred_date,
            message=request.message,
        )
        await commit(session)

    logger.info("Showing %s requested for listing %s", showing.id, listing.id)
    return schemas.ShowingEnvelope(
        message="Showing request submitted successfully",
        showing=to_out(showing),
    )


async def list_showings(
    agent: AuthenticatedAgent,
    *,
    listing_id: str | None = None,
    status: str | None = None,
    page: str | None = None,
    limit: str | None = None,
    session: AsyncSession,
) -> schemas.ShowingListResponse:
    """Page through showings on the caller's own listings."""

    scoped_id = None
    if listing_id:
        scoped_id = validators.unwrap(validators.validate_object_id(listing_id, "Listing"))

    with classify_failures("fetching showings"):
        if scoped_id is not None:
            listing = await listings_repo.get_by_id(session, scoped_id.value)
            if listing is None:
                raise not_found("Listing", scoped_id.value)
            ensure_owner(agent, listing, "You can only view showings for your own listings")
            listing_ids = [listing.id]
        else:
            listing_ids = await listings_repo.list_ids_owned_by(session, agent.id.value)
            if not listing_ids:
                return schemas.ShowingListResponse(
                    showings=[],
                    count=0,
                    page=1,
                    total_pages=0,
                    message="No listings found for this agent",
                )

        status_filter: ShowingStatus | None = None
        if status:
            status_filter = resolve_status(status, allow_aliases=False)
        pagination = validators.unwrap(validators.validate_pagination(page, limit))

        rows, total = await showings_repo.search_showings(
            session,
            listing_ids=listing_ids,
            status=status_filter,
            pagination=pagination,
        )

    metadata = validators.page_metadata(pagination, total)
    return schemas.ShowingListResponse(
        showings=[to_out(row) for row in rows],
        count=total,
        page=pagination.page,
        total_pages=metadata["totalPages"],
        message="No showing requests found" if not rows else None,
    )


async def pending_count(agent: AuthenticatedAgent, session: AsyncSession) -> schemas.PendingCountResponse:
    """Number of pending showings across every listing the caller owns."""

    with classify_failures("fetching pending showings count"):
        listing_ids = await listings_repo.list_ids_owned_by(session, agent.id.value)
        if not listing_ids:
            return schemas.PendingCountResponse(count=0)
        count = await showings_repo.count_pending(session, listing_ids)
    return schemas.PendingCountResponse(count=count)


async def get_showing(showing_id: str, session: AsyncSession) -> schemas.ShowingEnvelope:
    showing = await _load(showing_id, session, "fetching showing")
    return schemas.ShowingEnvelope(showing=to_out(showing))


async def update_status(
    showing_id: str,
    payload: dict[str, Any],
    agent: AuthenticatedAgent,
    session: AsyncSession,
) -> schemas.ShowingEnvelope:
    """Move a showing to a new status on behalf of the listing's owner."""

    validators.unwrap(validators.validate_object_id(showing_id, "Showing"))
    new_status = resolve_status(payload.get("status"))

    showing = await _load(showing_id, session, "updating showing status")
    ensure_owner(agent, showing.listing, "You can only update showings for your own listings")

    if new_status is ShowingStatus.CONFIRMED:
        scheduled_at = parse_scheduled_date(payload.get("scheduledDate"))
    else:
        scheduled_at = None

    previous = showing.status
    showing.status = new_status
    showing.scheduled_at = scheduled_at
    showing.updated_at = utcnow()

    with classify_failures("updating showing status"):
        await showings_repo.save(session, showing)
        await commit(session)

    logger.info("Showing %s moved from %s to %s", showing.id, previous.value, new_status.value)
    return schemas.ShowingEnvelope(
        message="Showing status updated successfully",
        showing=to_out(showing),
    )


async def update_feedback(
    showing_id: str,
    payload: dict[str, Any],
    agent: AuthenticatedAgent,
    session: AsyncSession,
) -> schemas.ShowingEnvelope:
    """Store the owning agent's notes about a showing."""

    validators.unwrap(validators.validate_object_id(showing_id, "Showing"))

    if "feedback" not in payload or payload["feedback"] is None:
        raise invalid_input("Feedback field is required")
    feedback = payload["feedback"]
    if not isinstance(feedback, str):
        raise invalid_input("Feedback must be a string")
    if len(feedback) > MAX_FEEDBACK_LENGTH:
        raise invalid_input(f"Feedback must not exceed {MAX_FEEDBACK_LENGTH} characters")

    showing = await _load(showing_id, session, "updating showing feedback")
    ensure_owner(agent, showing.listing, "You can only add feedback to showings for your own listings")

    showing.feedback = feedback.strip()
    showing.updated_at = utcnow()

    with classify_failures("updating showing feedback"):
        await showings_repo.save(session, showing)
        await commit(session)

    return schemas.ShowingEnvelope(
        message="Showing feedback updated successfully",
        showing=to_out(showing),
    )


async def delete_showing(
    showing_id: str,
    agent: AuthenticatedAgent,
    session: AsyncSession,
) -> schemas.DeletedShowingEnvelope:
    """Permanently remove a showing owned through the caller's listing."""

    showing = await _load(showing_id, session, "deleting showing")
    ensure_owner(agent, showing.listing, "You can only delete showings for your own listings")

    deleted = schemas.DeletedShowing(
        id=showing.id,
        listing=showing.listing_id,
        name=showing.name,
        email=showing.email,
    )
    with classify_failures("deleting showing"):
        await showings_repo.delete_showing(session, showing)
        await commit(session)

    return schemas.DeletedShowingEnvelope(message="Showing deleted successfully", showing=deleted)
