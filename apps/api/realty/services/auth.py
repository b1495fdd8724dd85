"""Agent registration, login and profile lookup."""
from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from ..core.security import create_access_token, dummy_verify, hash_password, verify_password
from ..db.session import commit
from ..errors import classify_failures, conflict, forbidden, invalid_input, not_found, unauthorized
from ..models.agent import Agent
from ..repositories import agents as agents_repo
from ..schemas import agents as schemas
from .ownership import AuthenticatedAgent

logger = logging.getLogger(__name__)


def to_public(agent: Agent | AuthenticatedAgent) -> schemas.AgentPublic:
    return schemas.AgentPublic(
        id=str(agent.id),
        name=agent.name,
        email=agent.email,
        phone=agent.phone,
        license_number=agent.license_number,
        is_active=agent.is_active,
        created_at=agent.created_at,
    )


async def register(payload: schemas.RegisterRequest, session: AsyncSession) -> schemas.AuthResponse:
    """Create an agent account and return a token for it."""

    with classify_failures("registering agent"):
        existing = await agents_repo.get_by_email(session, payload.email)
        if existing is not None:
            raise conflict(
                "Agent already exists",
                "An agent with this email address is already registered",
                {"email": payload.email},
            )

        password_hash = await run_in_threadpool(hash_password, payload.password)
        agent = await agents_repo.create_agent(
            session,
            name=payload.name,
            email=payload.email,
            password_hash=password_hash,
            phone=payload.phone,
            license_number=payload.license_number,
        )
        await commit(session)

    logger.info("Registered agent %s", agent.id)
    return schemas.AuthResponse(
        message="Agent registered successfully",
        token=create_access_token(agent.id),
        agent=to_public(agent),
    )


async def login(payload: schemas.LoginRequest, session: AsyncSession) -> schemas.AuthResponse:
    """Exchange credentials for a bearer token.

    Unknown emails and wrong passwords produce the same response so callers
    cannot discover which addresses are registered.
    """

    if not payload.email or not payload.password:
        raise invalid_input("Please provide both email and password", message="Missing credentials")

    with classify_failures("logging in"):
        agent = await agents_repo.get_by_email(session, payload.email)

    if agent is None:
        await run_in_threadpool(dummy_verify)
        verified = False
    else:
        verified = await run_in_threadpool(verify_password, payload.password, agent.password_hash)

    if agent is None or not verified:
        logger.info("Failed login attempt")
        raise unauthorized("Invalid credentials", "The email or password you entered is incorrect")

    if not agent.is_active:
        raise forbidden(
            "Account disabled",
            "This agent account has been deactivated. Please contact support.",
        )

    return schemas.AuthResponse(
        message="Login successful",
        token=create_access_token(agent.id),
        agent=to_public(agent),
    )


async def current_profile(agent: AuthenticatedAgent, session: AsyncSession) -> schemas.AgentEnvelope:
    """Re-read the caller's profile from the database."""

    with classify_failures("fetching agent profile"):
        stored = await agents_repo.get_by_id(session, agent.id.value)
    if stored is None:
        raise not_found("Agent", agent.id.value)
    return schemas.AgentEnvelope(agent=to_public(stored))
