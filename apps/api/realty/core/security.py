"""Password hashing and bearer tokens."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext

from .config import settings

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.bcrypt_rounds,
)


class TokenError(Exception):
    """Bearer token could not be accepted."""


class TokenExpired(TokenError):
    pass


class TokenInvalid(TokenError):
    pass


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    try:
        return pwd_context.verify(plain, hashed)
    except ValueError:
        # Unrecognised or corrupt hash.
        return False


def dummy_verify() -> None:
    """Spend the same time as a real check when the account is unknown."""

    pwd_context.dummy_verify()


def create_access_token(agent_id: str, *, expires_delta: timedelta | None = None) -> str:
    expires = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=settings.jwt_expire_minutes))
    claims: dict[str, Any] = {"sub": agent_id, "id": agent_id, "exp": expires}
    return jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> str:
    """Return the agent id carried by ``token``."""

    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except ExpiredSignatureError as exc:
        raise TokenExpired("token expired") from exc
    except JWTError as exc:
        raise TokenInvalid(str(exc)) from exc

    subject = payload.get("sub") or payload.get("id")
    if not isinstance(subject, str) or not subject:
        raise TokenInvalid("token has no subject")
    return subject
