"""Agent persistence helpers."""
from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..db.errors import translate_errors
from ..models.agent import Agent


async def get_by_id(session: AsyncSession, agent_id: str) -> Agent | None:
    """Return an agent by identifier."""

    with translate_errors():
        return await session.get(Agent, agent_id)


async def get_by_email(session: AsyncSession, email: str) -> Agent | None:
    """Case-insensitive lookup by email address."""

    stmt = select(Agent).where(func.lower(Agent.email) == email.strip().lower())
    with translate_errors():
        result = await session.execute(stmt)
        return result.scalar_one_or_none()


async def create_agent(
    session: AsyncSession,
    *,
    name: str,
    email: str,
    password_hash: str,
    phone: str | None = None,
    license_number: str | None = None,
) -> Agent:
    """Persist a new agent; the password must already be hashed."""

    agent = Agent(
        name=name,
        email=email.strip().lower(),
        password_hash=password_hash,
        phone=phone,
        license_number=license_number,
        is_active=True,
    )
    unique: dict[str, object] = {"email": agent.email}
    if license_number:
        unique = {"licenseNumber": license_number, **unique}
    with translate_errors(unique):
        session.add(agent)
        await session.flush()
    return agent
