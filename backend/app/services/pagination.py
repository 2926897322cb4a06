"""Page/page-size arithmetic for list endpoints.

Bounds are enforced by request validation before these helpers run; here 0
only ever means "not supplied".
"""

from __future__ import annotations

import math

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100
# Keeps the row offset within a signed 32-bit integer.
MAX_PAGE = (2**31 - 1) // MAX_PAGE_SIZE + 1


def normalize(page: int | None, page_size: int | None) -> tuple[int, int]:
    return (page or DEFAULT_PAGE, page_size or DEFAULT_PAGE_SIZE)


def page_offset(page: int, page_size: int) -> int:
    return (page - 1) * page_size


def total_pages(total_rows: int, page_size: int) -> int:
    """ceil(total_rows / page_size); 0 rows gives 0 pages."""

    return math.ceil(total_rows / page_size)
