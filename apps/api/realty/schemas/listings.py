"""Schemas for listings."""
from __future__ import annotations

from datetime import datetime
import re

from pydantic import Field, field_validator

from ..models.listing import ListingStatus
from .common import CamelModel, PageInfo

ZIP_CODE_PATTERN = re.compile(r"^\d{5}(-\d{4})?$")


class ListingFields(CamelModel):
    """Invariants every stored listing satisfies."""

    price: float = Field(allow_inf_nan=False)
    address: str
    square_feet: float = Field(allow_inf_nan=False)
    zip_code: str
    status: ListingStatus = ListingStatus.ACTIVE
    images: list[str] = Field(default_factory=list)

    @field_validator("price")
    @classmethod
    def _price_not_negative(cls, value: float) -> float:
        if value < 0:
            raise ValueError("Price must be a positive number")
        return value

    @field_validator("square_feet")
    @classmethod
    def _square_feet_not_negative(cls, value: float) -> float:
        if value < 0:
            raise ValueError("Square footage must be a positive number")
        return value

    @field_validator("address")
    @classmethod
    def _address_present(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Address is required")
        return value

    @field_validator("zip_code")
    @classmethod
    def _zip_code_format(cls, value: str) -> str:
        value = value.strip()
        if not ZIP_CODE_PATTERN.match(value):
            raise ValueError("ZIP code must be a valid US ZIP code format (e.g., 35801 or 35801-1234)")
        return value


class ListingPatch(CamelModel):
    """Partial update; only fields present in the payload are applied."""

    price: float | None = None
    address: str | None = None
    square_feet: float | None = None
    zip_code: str | None = None
    status: ListingStatus | None = None
    images: list[str] | None = None


class ListingOut(CamelModel):
    id: str
    price: float
    address: str
    square_feet: float
    zip_code: str
    status: ListingStatus
    images: list[str] = Field(default_factory=list)
    created_by: str | None = None
    created_at: datetime
    updated_at: datetime


class ListingEnvelope(CamelModel):
    message: str | None = None
    listing: ListingOut


class ListingListResponse(CamelModel):
    listings: list[ListingOut]
    count: int
    pagination: PageInfo
    message: str | None = None
