"""Entity identifiers."""
from __future__ import annotations

import re
import secrets
from dataclasses import dataclass

ID_PATTERN = re.compile(r"^[0-9a-f]{24}$")
ID_FORMAT = "24 hexadecimal characters"


def new_id() -> str:
    """Return a fresh 24-character hexadecimal identifier."""

    return secrets.token_hex(12)


@dataclass(frozen=True, slots=True)
class EntityId:
    """Validated identifier of a stored entity.

    Two ids are equal when they name the same row, regardless of the case the
    caller used when sending them.
    """

    value: str

    @classmethod
    def parse(cls, raw: object) -> EntityId | None:
        if not isinstance(raw, str):
            return None
        candidate = raw.strip().lower()
        if not ID_PATTERN.match(candidate):
            return None
        return cls(candidate)

    @classmethod
    def of(cls, stored: str | None) -> EntityId | None:
        """Wrap a value read back from the database."""

        if stored is None:
            return None
        return cls.parse(stored)

    def __str__(self) -> str:
        return self.value
