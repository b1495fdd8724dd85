"""Request-scoped dependencies."""
from __future__ import annotations

import logging

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from .core.security import TokenExpired, TokenInvalid, decode_access_token
from .db.session import get_session
from .errors import classify_failures, forbidden, unauthorized
from .repositories import agents as agents_repo
from .services.ownership import AuthenticatedAgent

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False, description="Agent bearer token")


async def get_current_agent(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    session: AsyncSession = Depends(get_session),
) -> AuthenticatedAgent:
    """Resolve the calling agent from the Authorization header."""

    if credentials is None or not credentials.credentials:
        raise unauthorized(
            "Not authorized",
            "No token provided. Please include a valid token in the Authorization header.",
        )

    try:
        agent_id = decode_access_token(credentials.credentials)
    except TokenExpired as exc:
        raise unauthorized("Token expired", "Your session has expired. Please log in again.") from exc
    except TokenInvalid as exc:
        logger.info("Rejected bearer token: %s", exc)
        raise unauthorized("Not authorized", "Invalid token") from exc

    with classify_failures("authenticating agent"):
        agent = await agents_repo.get_by_id(session, agent_id)

    if agent is None:
        raise unauthorized("Not authorized", "Agent not found")
    if not agent.is_active:
        raise forbidden("Account disabled", "This agent account has been deactivated")

    return AuthenticatedAgent.from_model(agent)
