"""Shared fixtures: an in-memory database wired into the app."""
from __future__ import annotations

import itertools
import os

os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["SHOWING_STATUS_ALIASES"] = "false"

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from realty.db.session import get_session
from realty.main import app
from realty.models.base import Base


@pytest_asyncio.fixture
async def session_factory():
    engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)

    @event.listens_for(engine.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, _record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, expire_on_commit=False)
    await engine.dispose()


@pytest_asyncio.fixture
async def client(session_factory):
    async def override_session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_session] = override_session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as http:
        yield http
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def register_agent(client):
    """Register a fresh agent and return the auth response body."""

    counter = itertools.count(1)

    async def _register(**overrides):
        n = next(counter)
        payload = {
            "name": f"Agent Number{n}",
            "email": f"agent{n}@example.com",
            "password": "secret123",
            "phone": "(205) 555-0100",
            "licenseNumber": f"AL-RE-{n:05d}",
        }
        payload.update(overrides)
        response = await client.post("/api/auth/register", json=payload)
        assert response.status_code == 201, response.text
        return response.json()

    return _register


@pytest_asyncio.fixture
async def create_listing(client):
    """Create a listing as the agent holding ``token``."""

    async def _create(token: str, **overrides):
        payload = {
            "price": 250000,
            "address": "505 Maple St, Huntsville, AL 35802",
            "squareFeet": 1200,
            "zipCode": "35802",
            "images": ["https://example.com/img1.jpg"],
        }
        payload.update(overrides)
        response = await client.post(
            "/api/listings",
            json=payload,
            headers={"Authorization": f"Bearer {token}"},
        )
        assert response.status_code == 201, response.text
        return response.json()["listing"]

    return _create
