from __future__ import annotations

MAX_PAGE_SIZE = 100


class InvalidArgumentError(ValueError):
    """Raised when a caller passes arguments outside an operation's preconditions."""


def check_page_bounds(page_index: int, items_per_page: int) -> None:
    if page_index < 0:
        raise InvalidArgumentError("Page index must be zero or greater")
    if items_per_page <= 0:
        raise InvalidArgumentError("Page size must be greater than zero")
    if items_per_page > MAX_PAGE_SIZE:
        raise InvalidArgumentError(f"Page size must not exceed {MAX_PAGE_SIZE}")
