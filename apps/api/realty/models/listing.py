"""Listing model."""
from __future__ import annotations

from datetime import datetime
import enum
from typing import TYPE_CHECKING

from sqlalchemy import JSON, DateTime, Enum, Float, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..core.ids import new_id
from .base import Base, enum_values, utcnow

if TYPE_CHECKING:
    from .agent import Agent
    from .showing import Showing


class ListingStatus(str, enum.Enum):
    ACTIVE = "active"
    PENDING = "pending"
    SOLD = "sold"
    INACTIVE = "inactive"


class Listing(Base):
    """Property offered by an agent."""

    __tablename__ = "listings"

    id: Mapped[str] = mapped_column(String(24), primary_key=True, default=new_id)
    price: Mapped[float] = mapped_column(Float, index=True, nullable=False)
    address: Mapped[str] = mapped_column(String, nullable=False)
    square_feet: Mapped[float] = mapped_column(Float, nullable=False)
    zip_code: Mapped[str] = mapped_column(String(10), index=True, nullable=False)
    status: Mapped[ListingStatus] = mapped_column(
        Enum(ListingStatus, name="listing_status", values_callable=enum_values),
        default=ListingStatus.ACTIVE,
        index=True,
        nullable=False,
    )
    images: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    created_by: Mapped[str | None] = mapped_column(ForeignKey("agents.id", ondelete="SET NULL"), index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )

    agent: Mapped["Agent | None"] = relationship("Agent", back_populates="listings")
    showings: Mapped[list["Showing"]] = relationship(
        "Showing", back_populates="listing", cascade="all, delete-orphan", passive_deletes=True
    )
