"""
Query identity normalisation and cache key derivation.
"""

import math
import re
from dataclasses import dataclass
from typing import Any, Optional

CACHE_KEY_PREFIX = "products"
DEFAULT_PAGE_LIMIT = 50

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


@dataclass(frozen=True)
class QueryIdentity:
    """One unit of cacheable work: a 0-based page and a page size."""

    page: int
    limit: int

    def __post_init__(self):
        if self.page < 0:
            raise ValueError(f"page must be non-negative, got {self.page}")
        if self.limit < 1:
            raise ValueError(f"limit must be positive, got {self.limit}")

    @property
    def offset(self) -> int:
        return self.page * self.limit


def derive_key(identity: QueryIdentity) -> str:
    """Map a query identity to its cache key.

    The key embeds page and limit verbatim so it is stable across restarts
    and readable from redis-cli.
    """
    return f"{CACHE_KEY_PREFIX}:page:{identity.page}:limit:{identity.limit}"


def _parse_int(value: Any) -> Optional[int]:
    """Parse the leading integer of a query-string value."""
    if value is None:
        return None
    if isinstance(value, int):
        return value
    match = _LEADING_INT.match(str(value))
    if not match:
        return None
    return int(match.group(1))


def _parse_number(value: Any) -> Optional[int]:
    """Parse a wholly numeric value, truncated toward zero; ``"10abc"`` is not a number."""
    if value is None:
        return None
    if isinstance(value, int):
        return value
    try:
        number = float(str(value).strip())
    except ValueError:
        return None
    if not math.isfinite(number):
        return None
    return int(number)


def normalize_query(page: Any = None, limit: Any = None, default_limit: int = DEFAULT_PAGE_LIMIT) -> QueryIdentity:
    """Build a QueryIdentity from raw request values.

    ``page`` is 1-based on the wire and must be numeric as a whole; anything
    absent, non-numeric or below 1 selects the first page. ``limit`` takes
    its leading integer and falls back to ``default_limit`` when absent,
    non-numeric or below 1.
    """
    parsed_page = _parse_number(page)
    if parsed_page is None or parsed_page < 1:
        parsed_page = 1

    parsed_limit = _parse_int(limit)
    if parsed_limit is None or parsed_limit < 1:
        parsed_limit = default_limit

    return QueryIdentity(page=parsed_page - 1, limit=parsed_limit)
