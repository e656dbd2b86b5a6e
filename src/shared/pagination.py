"""Keyset (cursor) pagination over a Protean queryset.

The cursor is *inclusive*: it is the key of the first row of the next page
and is fed back verbatim by the client. ``limit + 1`` rows are fetched; when
the extra row exists it is dropped from the page and its key becomes the
next cursor.
"""

from dataclasses import dataclass, field
from typing import Any

from protean.exceptions import ValidationError

MAX_PAGE_SIZE = 100


@dataclass
class Page:
    items: list = field(default_factory=list)
    next_cursor: Any = None


def paginate(queryset, limit: int, cursor: Any = None, key: str = "id") -> Page:
    if limit is None or limit < 1:
        raise ValidationError({"limit": ["limit must be a positive integer"]})

    if cursor is not None:
        queryset = queryset.filter(**{f"{key}__gte": cursor})

    rows = list(queryset.order_by(key).limit(limit + 1).all().items)
    next_cursor = None
    if len(rows) > limit:
        next_cursor = getattr(rows.pop(), key)

    return Page(items=rows, next_cursor=next_cursor)
