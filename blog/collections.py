from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence

from .content import Page
from .listing import ListingEntry, listing_entries, order_pages, titled


class PageCollection(Sequence[Page]):
    """Lightweight helper for working with lists of Pages in templates and code."""

    def __init__(self, pages: Iterable[Page], reverse_ties: bool = True):
        self._pages = list(pages)
        self.reverse_ties = reverse_ties

    def __iter__(self) -> Iterator[Page]:
        return iter(self._pages)

    def __len__(self) -> int:
        return len(self._pages)

    def __getitem__(self, item):
        return self._pages[item]

    def _derive(self, pages: Iterable[Page]) -> PageCollection:
        return PageCollection(pages, reverse_ties=self.reverse_ties)

    def group(self, name: str) -> PageCollection:
        """Pages whose top-level folder is `name`."""
        return self._derive(
            p for p in self._pages if p.folder.split("/")[0] == name
        )

    def drafts(self) -> PageCollection:
        return self._derive(p for p in self._pages if p.draft)

    def published(self) -> PageCollection:
        return self._derive(p for p in self._pages if not p.draft)

    def titled(self) -> PageCollection:
        return self._derive(titled(self._pages))

    def sorted(self) -> PageCollection:
        """Pages in listing order, newest first."""
        return self._derive(order_pages(self._pages, reverse_ties=self.reverse_ties))

    def latest(self, count: int = 5) -> PageCollection:
        return self._derive(self.sorted().titled()[:count])

    def listing(self) -> list[ListingEntry]:
        return listing_entries(self._pages, reverse_ties=self.reverse_ties)

    def __repr__(self) -> str:  # pragma: no cover - for debugging
        return f"PageCollection({len(self._pages)} pages)"
