"""Offset pagination for asset enumeration."""

from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass, field
from typing import Generic, TypeVar

T = TypeVar("T")

# Page size used by every job that walks the asset library
JOBS_ASSET_PAGINATION_SIZE = 1000


@dataclass(frozen=True)
class PaginationOptions:
    """Offset cursor for a single page request."""

    skip: int = 0
    take: int = JOBS_ASSET_PAGINATION_SIZE

    def __post_init__(self) -> None:
        if self.skip < 0:
            raise ValueError(f"skip must be non-negative, got {self.skip}")
        if self.take <= 0:
            raise ValueError(f"take must be positive, got {self.take}")


@dataclass
class Paginated(Generic[T]):
    """One page of results."""

    items: list[T] = field(default_factory=list)
    has_next_page: bool = False


def paginate_rows(rows: Sequence[T], options: PaginationOptions) -> Paginated[T]:
    """Build a page from a query that fetched ``take + 1`` rows.

    The extra row only signals that another page exists and is dropped.
    """
    items = list(rows)
    has_next_page = len(items) > options.take
    return Paginated(items=items[: options.take], has_next_page=has_next_page)


def paginate(
    fetch: Callable[[PaginationOptions], Paginated[T]],
    take: int = JOBS_ASSET_PAGINATION_SIZE,
) -> Iterator[list[T]]:
    """Walk every page returned by ``fetch``.

    Requests are issued with a fixed ``take`` and a ``skip`` that advances by
    ``take``; no request is made after a page reports ``has_next_page=False``.

    Args:
        fetch: Callable returning the page for a cursor
        take: Page size

    Yields:
        The items of each page, in order
    """
    skip = 0
    while True:
        page = fetch(PaginationOptions(skip=skip, take=take))
        yield page.items
        if not page.has_next_page:
            break
        skip += take
