"""Query parameter validation.

Every validator takes the raw query text and returns either ``Accepted`` with
the parsed value or a ``Rejection`` describing what was wrong. An empty string
is treated the same as an absent parameter.
"""
from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from typing import Any, Generic, Literal, TypeVar

from ..core.ids import EntityId
from ..errors import ApiError, invalid_id, invalid_query_param, invalid_range
from ..models.listing import ListingStatus

T = TypeVar("T")

ZIP_PATTERN = re.compile(r"^\d{5}(-\d{4})?$")
SORT_FIELDS: dict[str, str] = {
    "price": "price",
    "squareFeet": "square_feet",
    "createdAt": "created_at",
    "updatedAt": "updated_at",
}
SORT_ORDERS = ("asc", "desc", "1", "-1")
DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_PAGE = 10_000
MAX_LIMIT = 100
MAX_KEYWORD_LENGTH = 100


@dataclass(frozen=True, slots=True)
class Accepted(Generic[T]):
    value: T


@dataclass(frozen=True, slots=True)
class Rejection:
    error: ApiError


def unwrap(result: Accepted[T] | Rejection) -> T:
    """Return the accepted value or raise the rejection's error."""

    if isinstance(result, Rejection):
        raise result.error
    return result.value


@dataclass(frozen=True, slots=True)
class NumericRange:
    minimum: float | None = None
    maximum: float | None = None


@dataclass(frozen=True, slots=True)
class Pagination:
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass(frozen=True, slots=True)
class SortSpec:
    column: str = "created_at"
    direction: Literal["asc", "desc"] = "desc"


@dataclass(frozen=True, slots=True)
class ListingQuery:
    """Validated listing search filters."""

    price: NumericRange = field(default_factory=NumericRange)
    square_feet: NumericRange = field(default_factory=NumericRange)
    zip_code: str | None = None
    status: ListingStatus | None = None
    keyword: str | None = None


def _blank(raw: str | None) -> bool:
    return raw is None or raw.strip() == ""


def _parse_number(raw: str) -> float | None:
    try:
        value = float(raw.strip())
    except ValueError:
        return None
    if math.isnan(value) or math.isinf(value):
        return None
    return value


def validate_numeric(
    name: str,
    raw: str | None,
    *,
    minimum: float = 0,
    maximum: float = math.inf,
    allow_zero: bool = False,
) -> Accepted[float | None] | Rejection:
    """Parse an optional numeric parameter within bounds."""

    if _blank(raw):
        return Accepted(None)

    value = _parse_number(raw)
    if value is None:
        return Rejection(invalid_query_param(name, raw, f"{name} must be a valid number"))
    if not allow_zero and value == 0:
        return Rejection(invalid_query_param(name, raw, f"{name} must be greater than 0"))
    if value < minimum:
        return Rejection(invalid_query_param(name, raw, f"{name} must be at least {_fmt(minimum)}"))
    if value > maximum:
        return Rejection(invalid_query_param(name, raw, f"{name} must not exceed {_fmt(maximum)}"))
    return Accepted(value)


def validate_range(
    lower_name: str,
    lower_raw: str | None,
    upper_name: str,
    upper_raw: str | None,
) -> Accepted[NumericRange] | Rejection:
    """Validate a min/max pair of non-negative numbers."""

    lower_result = validate_numeric(lower_name, lower_raw, minimum=0, allow_zero=True)
    if isinstance(lower_result, Rejection):
        return lower_result
    upper_result = validate_numeric(upper_name, upper_raw, minimum=0, allow_zero=True)
    if isinstance(upper_result, Rejection):
        return upper_result

    lower, upper = lower_result.value, upper_result.value
    if lower is not None and upper is not None and lower > upper:
        return Rejection(invalid_range(lower_name, _num(lower), upper_name, _num(upper)))
    return Accepted(NumericRange(minimum=lower, maximum=upper))


def validate_zip_code(raw: str | None) -> Accepted[str | None] | Rejection:
    if _blank(raw):
        return Accepted(None)
    candidate = raw.strip()
    if not ZIP_PATTERN.match(candidate):
        return Rejection(
            invalid_query_param("zipCode", raw, "zipCode must be a 5-digit ZIP or ZIP+4 code")
        )
    return Accepted(candidate)


def validate_listing_status(raw: str | None) -> Accepted[ListingStatus | None] | Rejection:
    if _blank(raw):
        return Accepted(None)
    try:
        return Accepted(ListingStatus(raw.strip()))
    except ValueError:
        valid = ", ".join(item.value for item in ListingStatus)
        return Rejection(invalid_query_param("status", raw, f"status must be one of: {valid}"))


def validate_keyword(raw: str | None) -> Accepted[str | None] | Rejection:
    if _blank(raw):
        return Accepted(None)
    keyword = raw.strip()
    if len(keyword) > MAX_KEYWORD_LENGTH:
        return Rejection(
            invalid_query_param(
                "keyword", raw, f"keyword must not exceed {MAX_KEYWORD_LENGTH} characters"
            )
        )
    return Accepted(keyword)


def validate_pagination(page: str | None, limit: str | None) -> Accepted[Pagination] | Rejection:
    """Validate page/limit, falling back to page 1 of 10."""

    page_result = validate_numeric("page", page, minimum=1, maximum=MAX_PAGE)
    if isinstance(page_result, Rejection):
        return page_result
    limit_result = validate_numeric("limit", limit, minimum=1, maximum=MAX_LIMIT)
    if isinstance(limit_result, Rejection):
        return limit_result

    for name, raw, value in (("page", page, page_result.value), ("limit", limit, limit_result.value)):
        if value is not None and not value.is_integer():
            return Rejection(invalid_query_param(name, raw, f"{name} must be a whole number"))

    return Accepted(
        Pagination(
            page=int(page_result.value) if page_result.value is not None else DEFAULT_PAGE,
            limit=int(limit_result.value) if limit_result.value is not None else DEFAULT_LIMIT,
        )
    )


def validate_sort(sort_by: str | None, order: str | None) -> Accepted[SortSpec] | Rejection:
    """Validate sort field and direction; newest first when unspecified."""

    if _blank(sort_by):
        return Accepted(SortSpec())

    sort_by = sort_by.strip()
    if sort_by not in SORT_FIELDS:
        return Rejection(
            invalid_query_param("sortBy", sort_by, f"sortBy must be one of: {', '.join(SORT_FIELDS)}")
        )

    sort_order = "asc" if _blank(order) else order.strip().lower()
    if sort_order not in SORT_ORDERS:
        return Rejection(
            invalid_query_param("order", order, f"order must be one of: {', '.join(SORT_ORDERS)}")
        )

    direction: Literal["asc", "desc"] = "asc" if sort_order in ("asc", "1") else "desc"
    return Accepted(SortSpec(column=SORT_FIELDS[sort_by], direction=direction))


def validate_object_id(raw: object, resource: str) -> Accepted[EntityId] | Rejection:
    """Check identifier shape before any lookup is attempted."""

    entity_id = EntityId.parse(raw)
    if entity_id is None:
        return Rejection(invalid_id(resource, raw))
    return Accepted(entity_id)


def page_metadata(pagination: Pagination, total: int) -> dict[str, Any]:
    """Pagination block returned alongside a page of results."""

    total_pages = math.ceil(total / pagination.limit) if total else 0
    return {
        "currentPage": pagination.page,
        "pageLimit": pagination.limit,
        "totalCount": total,
        "totalPages": total_pages,
        "hasNextPage": pagination.page < total_pages,
        "hasPrevPage": pagination.page > 1,
    }


def _num(value: float) -> float | int:
    if isinstance(value, int):
        return value
    return int(value) if value.is_integer() else value


def _fmt(value: float) -> str:
    return str(_num(value)) if not math.isinf(value) else "infinity"
