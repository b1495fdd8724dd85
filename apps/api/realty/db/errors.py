"""Persistence failures raised by the repository layer.

Repositories never let driver exceptions escape; callers only ever see the
exceptions defined here.
"""
from __future__ import annotations

from collections.abc import Iterator, Mapping
from contextlib import contextmanager

from sqlalchemy.exc import DBAPIError, IntegrityError, InterfaceError, OperationalError


class PersistenceError(Exception):
    """Base class for repository failures."""


class DatabaseUnavailableError(PersistenceError):
    """The database could not be reached."""


class DuplicateKeyError(PersistenceError):
    """A unique constraint rejected the write."""

    def __init__(self, field: str, value: object) -> None:
        super().__init__(f"duplicate value for {field}")
        self.field = field
        self.value = value


@contextmanager
def translate_errors(unique: Mapping[str, object] | None = None) -> Iterator[None]:
    """Convert SQLAlchemy and socket errors into persistence errors.

    ``unique`` maps the wire name of each unique column touched by the write to
    the value being written, so a constraint violation can name the field.
    """

    try:
        yield
    except IntegrityError as exc:
        field, value = _match_unique(exc, unique or {})
        raise DuplicateKeyError(field, value) from exc
    except (OperationalError, InterfaceError) as exc:
        raise DatabaseUnavailableError(str(exc.orig or exc)) from exc
    except DBAPIError as exc:
        if exc.connection_invalidated:
            raise DatabaseUnavailableError(str(exc)) from exc
        raise
    except (ConnectionError, TimeoutError) as exc:
        raise DatabaseUnavailableError(str(exc)) from exc


def _match_unique(exc: IntegrityError, unique: Mapping[str, object]) -> tuple[str, object]:
    text = str(exc.orig or exc).lower()
    for field, value in unique.items():
        column = "".join("_" + ch.lower() if ch.isupper() else ch for ch in field)
        if column in text or field.lower() in text:
            return field, value
    if unique:
        return next(iter(unique.items()))
    return "unknown", None
