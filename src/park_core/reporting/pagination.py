"""Pagination Helper: slice a sorted collection into fixed-size pages."""

from __future__ import annotations

import logging
import math
from typing import Any, Sequence

from park_core.config import DEFAULT_PAGE_SIZE
from park_core.exceptions import ConfigError
from park_core.reporting.types import Page

logger = logging.getLogger(__name__)


def page_count(total_items: int, page_size: int = DEFAULT_PAGE_SIZE) -> int:
    """Number of pages needed for total_items; an empty collection has one page."""
    if page_size < 1:
        raise ConfigError(f"page_size must be at least 1, got {page_size}")
    return max(1, math.ceil(total_items / page_size))


def paginate(items: Sequence[Any], page_size: int = DEFAULT_PAGE_SIZE, page_number: int = 1) -> Page:
    """Return one page of items.

    Out-of-range page numbers are clamped to the nearest valid page.

    Args:
        items: Already sorted collection.
        page_size: Maximum number of items per page.
        page_number: Requested 1-based page number.

    Returns:
        Page with the served page number and the page's items.

    Raises:
        ConfigError: If page_size is not positive.

    Examples:
        >>> page = paginate(list(range(25)), page_size=10, page_number=5)
        >>> page.page_number, page.total_pages, len(page.items)
        (3, 3, 5)
    """
    items = list(items)
    total_pages = page_count(len(items), page_size)
    served = min(max(page_number, 1), total_pages)
    if served != page_number:
        logger.debug("Clamped page %d to %d of %d", page_number, served, total_pages)

    start = (served - 1) * page_size
    return Page(
        items=tuple(items[start : start + page_size]),
        page_number=served,
        total_pages=total_pages,
        total_items=len(items),
        page_size=page_size,
    )
