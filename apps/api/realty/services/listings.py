"""Listing CRUD and search orchestration."""
from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError
from pydantic.alias_generators import to_camel
from sqlalchemy.ext.asyncio import AsyncSession

from ..db.session import commit
from ..errors import EntityValidationError, classify_failures, invalid_input, not_found
from ..models.listing import Listing
from ..repositories import listings as listings_repo
from ..schemas import listings as schemas
from ..schemas.common import PageInfo
from . import validators
from .ownership import AuthenticatedAgent, ensure_owner

logger = logging.getLogger(__name__)

EMPTY_RESULT_MESSAGE = "No listings found matching the specified criteria"
ENTITY_FIELDS = ("price", "address", "square_feet", "zip_code", "status", "images")


def to_out(listing: Listing) -> schemas.ListingOut:
    return schemas.ListingOut(
        id=listing.id,
        price=listing.price,
        address=listing.address,
        square_feet=listing.square_feet,
        zip_code=listing.zip_code,
        status=listing.status,
        images=list(listing.images or []),
        created_by=listing.created_by,
        created_at=listing.created_at,
        updated_at=listing.updated_at,
    )


def _entity_fields(payload: Any) -> schemas.ListingFields:
    try:
        return schemas.ListingFields.model_validate(payload)
    except ValidationError as exc:
        raise EntityValidationError.from_pydantic(exc) from exc


async def create_listing(
    payload: dict[str, Any],
    agent: AuthenticatedAgent,
    session: AsyncSession,
) -> schemas.ListingEnvelope:
    """Validate and persist a listing owned by the calling agent."""

    with classify_failures("creating listing"):
        fields = _entity_fields(payload)
        listing = await listings_repo.create_listing(
            session,
            created_by=agent.id.value,
            **fields.model_dump(),
        )
        await commit(session)

    logger.info("Agent %s created listing %s", agent.id, listing.id)
    return schemas.ListingEnvelope(message="Listing created successfully", listing=to_out(listing))


async def search_listings(
    *,
    min_price: str | None = None,
    max_price: str | None = None,
    min_square_feet: str | None = None,
    max_square_feet: str | None = None,
    zip_code: str | None = None,
    status: str | None = None,
    keyword: str | None = None,
    page: str | None = None,
    limit: str | None = None,
    sort_by: str | None = None,
    order: str | None = None,
    session: AsyncSession,
) -> schemas.ListingListResponse:
    """Filter, sort and paginate listings.

    Every parameter is validated before the database is queried.
    """

    price = validators.unwrap(validators.validate_range("minPrice", min_price, "maxPrice", max_price))
    square_feet = validators.unwrap(
        validators.validate_range("minSquareFeet", min_square_feet, "maxSquareFeet", max_square_feet)
    )
    filters = validators.ListingQuery(
        price=price,
        square_feet=square_feet,
        zip_code=validators.unwrap(validators.validate_zip_code(zip_code)),
        status=validators.unwrap(validators.validate_listing_status(status)),
        keyword=validators.unwrap(validators.validate_keyword(keyword)),
    )
    pagination = validators.unwrap(validators.validate_pagination(page, limit))
    sort = validators.unwrap(validators.validate_sort(sort_by, order))

    with classify_failures("fetching listings"):
        rows, total = await listings_repo.search_listings(
            session, filters=filters, sort=sort, pagination=pagination
        )

    return schemas.ListingListResponse(
        listings=[to_out(row) for row in rows],
        count=len(rows),
        pagination=PageInfo.model_validate(validators.page_metadata(pagination, total)),
        message=EMPTY_RESULT_MESSAGE if not rows else None,
    )


async def _load(listing_id: str, session: AsyncSession, action: str) -> Listing:
    entity_id = validators.unwrap(validators.validate_object_id(listing_id, "Listing"))
    with classify_failures(action):
        listing = await listings_repo.get_by_id(session, entity_id.value)
    if listing is None:
        raise not_found("Listing", listing_id)
    return listing


async def get_listing(listing_id: str, session: AsyncSession) -> schemas.ListingEnvelope:
    listing = await _load(listing_id, session, "fetching listing")
    return schemas.ListingEnvelope(listing=to_out(listing))


async def update_listing(
    listing_id: str,
    payload: dict[str, Any],
    agent: AuthenticatedAgent,
    session: AsyncSession,
) -> schemas.ListingEnvelope:
    """Apply a partial update, re-validating the merged listing."""

    entity_id = validators.unwrap(validators.validate_object_id(listing_id, "Listing"))
    if not payload:
        raise invalid_input("No update data provided")

    listing = await _load(entity_id.value, session, "updating listing")
    ensure_owner(agent, listing, "You can only update your own listings")

    with classify_failures("updating listing"):
        try:
            patch = schemas.ListingPatch.model_validate(payload)
        except ValidationError as exc:
            raise EntityValidationError.from_pydantic(exc) from exc

        changes = patch.model_dump(exclude_unset=True)
        if not changes:
            raise invalid_input("No update data provided")

        merged = {name: getattr(listing, name) for name in ENTITY_FIELDS}
        merged.update(changes)
        fields = _entity_fields({to_camel(name): value for name, value in merged.items()})

        await listings_repo.update_listing(
            session,
            listing,
            {name: value for name, value in fields.model_dump().items() if name in changes},
        )
        await commit(session)

    return schemas.ListingEnvelope(message="Listing updated successfully", listing=to_out(listing))


async def delete_listing(
    listing_id: str,
    agent: AuthenticatedAgent,
    session: AsyncSession,
) -> schemas.ListingEnvelope:
    """Permanently remove a listing and echo what was deleted."""

    listing = await _load(listing_id, session, "deleting listing")
    ensure_owner(agent, listing, "You can only delete your own listings")

    deleted = to_out(listing)
    with classify_failures("deleting listing"):
        await listings_repo.delete_listing(session, listing)
        await commit(session)

    logger.info("Agent %s deleted listing %s", agent.id, listing_id)
    return schemas.ListingEnvelope(message="Listing deleted successfully", listing=deleted)
