"""Expose ORM models."""
from .agent import Agent
from .listing import Listing, ListingStatus
from .showing import Showing, ShowingStatus

__all__ = [
    "Agent",
    "Listing",
    "ListingStatus",
    "Showing",
    "ShowingStatus",
]
