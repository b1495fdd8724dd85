"""Agent-to-listing ownership checks."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from ..core.ids import EntityId
from ..errors import access_denied
from ..models.agent import Agent
from ..models.listing import Listing


@dataclass(frozen=True, slots=True)
class AuthenticatedAgent:
    """Caller identity resolved from a bearer token; never carries the password hash."""

    id: EntityId
    name: str
    email: str
    phone: str | None
    license_number: str | None
    is_active: bool
    created_at: datetime

    @classmethod
    def from_model(cls, agent: Agent) -> AuthenticatedAgent:
        agent_id = EntityId.of(agent.id)
        if agent_id is None:
            raise ValueError(f"stored agent id {agent.id!r} is malformed")
        return cls(
            id=agent_id,
            name=agent.name,
            email=agent.email,
            phone=agent.phone,
            license_number=agent.license_number,
            is_active=agent.is_active,
            created_at=agent.created_at,
        )


def owner_of(listing: Listing | None) -> EntityId | None:
    if listing is None:
        return None
    return EntityId.of(listing.created_by)


def owns(agent: AuthenticatedAgent, listing: Listing | None) -> bool:
    """Listings with no recorded owner belong to nobody."""

    owner = owner_of(listing)
    return owner is not None and owner == agent.id


def ensure_owner(agent: AuthenticatedAgent, listing: Listing | None, reason: str) -> None:
    if not owns(agent, listing):
        raise access_denied(reason)
