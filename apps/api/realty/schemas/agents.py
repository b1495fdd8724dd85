"""Schemas for agent registration and authentication."""
from __future__ import annotations

from datetime import datetime
import re

from pydantic import EmailStr, Field, field_validator

from .common import CamelModel

NON_DIGITS = re.compile(r"\D")


class RegisterRequest(CamelModel):
    name: str
    email: EmailStr
    password: str = Field(min_length=6)
    phone: str | None = None
    license_number: str | None = None

    @field_validator("name")
    @classmethod
    def _name_length(cls, value: str) -> str:
        value = value.strip()
        if len(value) < 2:
            raise ValueError("Name must be at least 2 characters")
        if len(value) > 100:
            raise ValueError("Name must not exceed 100 characters")
        return value

    @field_validator("email")
    @classmethod
    def _lower_email(cls, value: str) -> str:
        return value.strip().lower()

    @field_validator("phone")
    @classmethod
    def _ten_digit_phone(cls, value: str | None) -> str | None:
        if value is None or not value.strip():
            return None
        digits = NON_DIGITS.sub("", value)
        if len(digits) != 10:
            raise ValueError("Please provide a valid 10-digit phone number")
        return digits

    @field_validator("license_number")
    @classmethod
    def _blank_license(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.strip() or None


class LoginRequest(CamelModel):
    email: str | None = None
    password: str | None = None


class AgentPublic(CamelModel):
    id: str
    name: str
    email: str
    phone: str | None = None
    license_number: str | None = None
    is_active: bool
    created_at: datetime


class AuthResponse(CamelModel):
    message: str
    token: str
    agent: AgentPublic


class AgentEnvelope(CamelModel):
    agent: AgentPublic
