"""Error taxonomy shared by every controller.

Each failure a caller can see is an :class:`ApiError` whose body has the shape
``{"message": ..., "error": ..., "details": ...}``. Controllers build errors
only through the constructors below and translate lower-level failures with
:func:`classify_failures`.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping, Sequence
from contextlib import contextmanager
from typing import Any

from fastapi import HTTPException, status
from pydantic import ValidationError

from .core.ids import ID_FORMAT
from .db.errors import DatabaseUnavailableError, DuplicateKeyError

logger = logging.getLogger(__name__)


class ApiError(HTTPException):
    """HTTP error carrying the uniform error payload."""

    def __init__(
        self,
        status_code: int,
        message: str,
        error: str,
        details: Mapping[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        self.message = message
        self.error = error
        self.details = dict(details) if details else None
        super().__init__(status_code=status_code, detail=self.payload(), headers=headers)

    def payload(self) -> dict[str, Any]:
        body: dict[str, Any] = {"message": self.message, "error": self.error}
        if self.details:
            body["details"] = self.details
        return body


class EntityValidationError(Exception):
    """Entity invariants rejected a value; maps field name to message."""

    def __init__(self, fields: Mapping[str, str]) -> None:
        super().__init__(", ".join(f"{key}: {value}" for key, value in fields.items()))
        self.fields = dict(fields)

    @classmethod
    def from_pydantic(cls, exc: ValidationError) -> EntityValidationError:
        return cls(field_messages(exc.errors()))


def field_messages(errors: Iterable[Mapping[str, Any]]) -> dict[str, str]:
    """Flatten pydantic error entries into a field -> message mapping."""

    fields: dict[str, str] = {}
    for entry in errors:
        loc = [str(part) for part in entry.get("loc", ()) if part != "body"]
        key = ".".join(loc) or "body"
        message = str(entry.get("msg", "Invalid value"))
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        fields.setdefault(key, message)
    return fields


def validation_failed(fields: Mapping[str, str]) -> ApiError:
    return ApiError(
        status.HTTP_400_BAD_REQUEST,
        "Validation failed",
        "One or more fields failed validation",
        fields,
    )


def invalid_input(error: str, message: str = "Invalid input") -> ApiError:
    return ApiError(status.HTTP_400_BAD_REQUEST, message, error)


def invalid_id(resource: str, value: object) -> ApiError:
    return ApiError(
        status.HTTP_400_BAD_REQUEST,
        f"Invalid {resource.lower()} ID format",
        "The provided ID is not a valid identifier",
        {"id": value, "expectedFormat": ID_FORMAT},
    )


def invalid_query_param(parameter: str, value: object, expected: str) -> ApiError:
    return ApiError(
        status.HTTP_400_BAD_REQUEST,
        "Invalid query parameter",
        expected,
        {"parameter": parameter, "value": value},
    )


def invalid_range(lower_name: str, lower: float, upper_name: str, upper: float) -> ApiError:
    return ApiError(
        status.HTTP_400_BAD_REQUEST,
        "Invalid query parameters",
        f"{lower_name} cannot be greater than {upper_name}",
        {lower_name: lower, upper_name: upper},
    )


def invalid_status(valid: Sequence[str]) -> ApiError:
    return ApiError(
        status.HTTP_400_BAD_REQUEST,
        "Invalid status",
        f"Status must be one of: {', '.join(valid)}",
        {"validStatuses": list(valid)},
    )


def not_found(resource: str, value: object) -> ApiError:
    return ApiError(
        status.HTTP_404_NOT_FOUND,
        f"{resource} not found",
        f"No {resource.lower()} exists with ID: {value}",
        {"id": value},
    )


def unauthorized(message: str, error: str) -> ApiError:
    return ApiError(status.HTTP_401_UNAUTHORIZED, message, error, headers={"WWW-Authenticate": "Bearer"})


def forbidden(message: str, error: str) -> ApiError:
    return ApiError(status.HTTP_403_FORBIDDEN, message, error)


def access_denied(reason: str) -> ApiError:
    """Ownership failure; ``reason`` is shown to the caller as the message."""

    return ApiError(status.HTTP_403_FORBIDDEN, reason, "Access denied")


def conflict(message: str, error: str, details: Mapping[str, Any] | None = None) -> ApiError:
    return ApiError(status.HTTP_409_CONFLICT, message, error, details)


def duplicate_entry(field: str, value: object) -> ApiError:
    return conflict(
        "Duplicate entry",
        f"A record with {field} '{value}' already exists",
        {"field": field, "value": value},
    )


def database_unavailable() -> ApiError:
    return ApiError(
        status.HTTP_503_SERVICE_UNAVAILABLE,
        "Database connection error",
        "Unable to connect to the database. Please try again later.",
        {"type": "DATABASE_CONNECTION_ERROR"},
    )


def internal_error(action: str) -> ApiError:
    return ApiError(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        f"Error {action}",
        "An unexpected error occurred",
    )


@contextmanager
def classify_failures(action: str) -> Iterator[None]:
    """Translate anything raised inside the block into exactly one ApiError."""

    try:
        yield
    except ApiError:
        raise
    except EntityValidationError as exc:
        raise validation_failed(exc.fields) from exc
    except DuplicateKeyError as exc:
        raise duplicate_entry(exc.field, exc.value) from exc
    except DatabaseUnavailableError as exc:
        logger.error("Database unavailable while %s: %s", action, exc)
        raise database_unavailable() from exc
    except Exception as exc:  # noqa: BLE001 - single 500 path at the controller boundary
        logger.exception("Unexpected failure while %s", action)
        raise internal_error(action) from exc
