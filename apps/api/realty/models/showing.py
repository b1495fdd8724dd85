"""Showing (tour request) model."""
from __future__ import annotations

from datetime import datetime
import enum
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, Enum, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..core.ids import new_id
from .base import Base, enum_values, utcnow

if TYPE_CHECKING:
    from .listing import Listing


class ShowingStatus(str, enum.Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Showing(Base):
    """Tour request submitted by a prospective visitor."""

    __tablename__ = "showings"
    __table_args__ = (Index("ix_showings_listing_created", "listing_id", "created_at"),)

    id: Mapped[str] = mapped_column(String(24), primary_key=True, default=new_id)
    listing_id: Mapped[str] = mapped_column(ForeignKey("listings.id", ondelete="CASCADE"), nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String, nullable=False)
    phone: Mapped[str] = mapped_column(String, nullable=False)
    preferred_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    message: Mapped[str] = mapped_column(Text, default="", nullable=False)
    status: Mapped[ShowingStatus] = mapped_column(
        Enum(ShowingStatus, name="showing_status", values_callable=enum_values),
        default=ShowingStatus.PENDING,
        index=True,
        nullable=False,
    )
    feedback: Mapped[str] = mapped_column(Text, default="", nullable=False)
    scheduled_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)

    listing: Mapped["Listing"] = relationship("Listing", back_populates="showings")
