"""Agent authentication endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..db.session import get_session
from ..dependencies import get_current_agent
from ..schemas import agents as schemas
from ..services import auth as auth_service
from ..services.ownership import AuthenticatedAgent

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=schemas.AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    payload: schemas.RegisterRequest,
    session: AsyncSession = Depends(get_session),
) -> schemas.AuthResponse:
    """Create an agent account."""

    return await auth_service.register(payload, session)


@router.post("/login", response_model=schemas.AuthResponse)
async def login(
    payload: schemas.LoginRequest,
    session: AsyncSession = Depends(get_session),
) -> schemas.AuthResponse:
    """Exchange email and password for a bearer token."""

    return await auth_service.login(payload, session)


@router.get("/me", response_model=schemas.AgentEnvelope)
async def me(
    agent: AuthenticatedAgent = Depends(get_current_agent),
    session: AsyncSession = Depends(get_session),
) -> schemas.AgentEnvelope:
    return await auth_service.current_profile(agent, session)
