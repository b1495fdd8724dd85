"""Schemas for showing (tour) requests."""
from __future__ import annotations

from datetime import datetime, timezone
import re

from pydantic import EmailStr, Field, field_validator

from ..models.showing import ShowingStatus
from .common import CamelModel

PHONE_PATTERN = re.compile(r"^[\d\s\-()+]+$")


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC."""

    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class ShowingRequest(CamelModel):
    """Visitor-submitted tour request.

    ``preferred_date`` is checked against the clock only here, when the
    request is first submitted.
    """

    name: str
    email: EmailStr
    phone: str
    preferred_date: datetime
    message: str = Field(default="", max_length=1000)

    @field_validator("name")
    @classmethod
    def _name_length(cls, value: str) -> str:
        value = value.strip()
        if len(value) < 2:
            raise ValueError("Name must be at least 2 characters")
        if len(value) > 100:
            raise ValueError("Name must not exceed 100 characters")
        return value

    @field_validator("email")
    @classmethod
    def _lower_email(cls, value: str) -> str:
        return value.strip().lower()

    @field_validator("phone")
    @classmethod
    def _phone_characters(cls, value: str) -> str:
        value = value.strip()
        if not PHONE_PATTERN.match(value):
            raise ValueError("Please provide a valid phone number")
        return value

    @field_validator("preferred_date")
    @classmethod
    def _in_future(cls, value: datetime) -> datetime:
        value = as_utc(value)
        if value <= datetime.now(timezone.utc):
            raise ValueError("Preferred date must be in the future")
        return value


class AgentContact(CamelModel):
    id: str
    name: str
    email: str
    phone: str | None = None


class ShowingListing(CamelModel):
    id: str
    address: str
    zip_code: str
    price: float
    images: list[str] = Field(default_factory=list)
    created_by: AgentContact | None = None


class ShowingOut(CamelModel):
    id: str
    listing: ShowingListing | None = None
    name: str
    email: str
    phone: str
    preferred_date: datetime
    message: str = ""
    status: ShowingStatus
    feedback: str = ""
    scheduled_at: datetime | None = None
    created_at: datetime
    updated_at: datetime


class ShowingEnvelope(CamelModel):
    message: str | None = None
    showing: ShowingOut


class ShowingListResponse(CamelModel):
    showings: list[ShowingOut]
    count: int
    page: int
    total_pages: int
    message: str | None = None


class PendingCountResponse(CamelModel):
    count: int


class DeletedShowing(CamelModel):
    id: str
    listing: str
    name: str
    email: str


class DeletedShowingEnvelope(CamelModel):
    message: str
    showing: DeletedShowing
