"""Cursor-based traversal over paged GitHub GraphQL connections."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Generic, Iterator, List, Optional, Tuple, TypeVar

T = TypeVar("T")

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class Page(Generic[T]):
    """One page of a connection: its items plus GraphQL ``pageInfo``."""

    items: List[T] = field(default_factory=list)
    has_next_page: bool = False
    end_cursor: Optional[str] = None


def page_info(connection: Dict[str, Any]) -> Tuple[bool, Optional[str]]:
    """Read ``hasNextPage``/``endCursor`` from a connection, tolerating a missing ``pageInfo``."""
    info = connection.get("pageInfo") or {}
    return bool(info.get("hasNextPage")), info.get("endCursor")


def iter_pages(
    fetch_page: Callable[[Optional[str]], Optional[Page[T]]],
    max_items: Optional[int] = None,
) -> Iterator[T]:
    """Yield items from successive pages until the connection is exhausted.

    ``fetch_page`` receives the cursor of the previous page (``None`` first) and
    returns a ``Page``, or ``None`` when the upstream payload is null, which is
    treated as an empty final page.

    The walk stops when ``has_next_page`` is false, the end cursor is absent, or
    ``max_items`` items have been yielded.
    """
    cursor: Optional[str] = None
    yielded = 0

    while True:
        page = fetch_page(cursor)
        if page is None:
            logger.debug("Stopping pagination on null payload", extra={"items": yielded})
            return

        for item in page.items:
            if max_items is not None and yielded >= max_items:
                return
            yield item
            yielded += 1

        if max_items is not None and yielded >= max_items:
            logger.debug("Stopping pagination at item cap", extra={"max_items": max_items})
            return

        if not page.has_next_page or not page.end_cursor:
            return

        cursor = page.end_cursor


def walk_pages(
    fetch_page: Callable[[Optional[str]], Optional[Page[T]]],
    max_items: Optional[int] = None,
) -> List[T]:
    """Collect every item of a paged connection into a list. See :func:`iter_pages`."""
    return list(iter_pages(fetch_page, max_items=max_items))
