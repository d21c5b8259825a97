"""
Paginated envelope for list endpoints.
"""

from dataclasses import dataclass, field
from typing import Callable, Generic, Iterator, TypeVar

T = TypeVar("T")


def _int_or(value: object, default: int) -> int:
    """Pagination field as int; null or missing falls back to the default."""
    return default if value is None else int(value)  # type: ignore[arg-type]


@dataclass
class PageResults(Generic[T]):
    """One page of results from a list endpoint.

    Endpoints that return everything at once (categories, webhooks) omit the
    pagination fields; they then describe a single complete page.
    """

    results: list[T] = field(default_factory=list)
    total: int = 0
    page: int = 1
    total_pages: int = 1

    @classmethod
    def from_dict(cls, data: dict, item_parser: Callable[[dict], T]) -> "PageResults[T]":
        results = [item_parser(r) for r in data.get("results") or []]
        return cls(
            results=results,
            total=_int_or(data.get("total"), len(results)),
            page=_int_or(data.get("page"), 1),
            total_pages=_int_or(data.get("totalPages"), 1),
        )

    @classmethod
    def parser(cls, item_parser: Callable[[dict], T]) -> Callable[[dict], "PageResults[T]"]:
        """Bind an item parser, for use as a response parser."""
        return lambda data: cls.from_dict(data, item_parser)

    @property
    def has_next_page(self) -> bool:
        return self.page < self.total_pages

    def __iter__(self) -> Iterator[T]:
        return iter(self.results)

    def __len__(self) -> int:
        return len(self.results)
