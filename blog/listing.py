"""Page listing for the blog index.

Turns a collection of page records into the index listing: newest first,
untitled pages dropped, one entry per page with a separator between
consecutive entries.

Records may be Page objects, any object with `title`, `description`,
`date` and `url` attributes, or mappings with those keys. Every field is
optional; an absent field only omits its part of the entry.

Ordering is a stable ascending sort on date followed by a reversal, so
pages sharing a date come out in reverse of their input order. Passing
`reverse_ties=False` keeps input order for ties instead. Undated pages
sort as the oldest.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from markupsafe import Markup, escape

from .utils import coerce_date, format_date

SEPARATOR = Markup('<div class="spacer"></div>\n')


def _field(record: Any, name: str) -> Any:
    if isinstance(record, Mapping):
        return record.get(name)
    return getattr(record, name, None)


def _present(value: Any) -> bool:
    return value is not None and str(value).strip() != ""


def _date_key(record: Any) -> datetime:
    return coerce_date(_field(record, "date")) or datetime.min


def order_pages(pages: Iterable[Any], reverse_ties: bool = True) -> list[Any]:
    """Order page records by date, newest first.

    Args:
        pages: Page records in input order.
        reverse_ties: If True, pages with equal dates appear in reverse of
            their input order; otherwise input order is kept.

    Returns:
        A new list; the input is not modified.
    """
    if reverse_ties:
        ordered = sorted(pages, key=_date_key)
        ordered.reverse()
        return ordered
    return sorted(pages, key=_date_key, reverse=True)


def titled(pages: Iterable[Any]) -> list[Any]:
    """Keep only the records that have a non-blank title."""
    return [page for page in pages if _present(_field(page, "title"))]


@dataclass(frozen=True)
class ListingEntry:
    """One rendered row of the index listing.

    Attributes:
        title: Page title.
        url: Link target, or None to render the title as plain text.
        description: Sub-heading text, or None.
        date: Page date, or None.
        last: True for the final entry, which has no separator after it.
    """

    title: str
    url: str | None
    description: str | None
    date: datetime | None
    last: bool = False

    @classmethod
    def from_record(cls, record: Any, last: bool = False) -> ListingEntry:
        url = _field(record, "url")
        description = _field(record, "description")
        return cls(
            title=str(_field(record, "title")).strip(),
            url=str(url) if _present(url) else None,
            description=str(description) if _present(description) else None,
            date=coerce_date(_field(record, "date")),
            last=last,
        )


def listing_entries(pages: Iterable[Any], reverse_ties: bool = True) -> list[ListingEntry]:
    """Build the ordered listing entries for a collection of pages.

    Args:
        pages: Page records, possibly empty.
        reverse_ties: See order_pages.

    Returns:
        Entries newest first; only the final entry has `last` set.
    """
    kept = titled(order_pages(pages, reverse_ties=reverse_ties))
    return [
        ListingEntry.from_record(page, last=index == len(kept) - 1)
        for index, page in enumerate(kept)
    ]


def render_entry(entry: ListingEntry, date_format: str | None = None) -> Markup:
    """Render a single listing entry as HTML.

    Args:
        entry: Entry to render.
        date_format: Optional strftime format for the date.

    Returns:
        Markup for an `<article>` holding the title heading, the optional
        description sub-heading and the optional date.
    """
    if entry.url is not None:
        heading = Markup('<a href="{}">{}</a>').format(entry.url, entry.title)
    else:
        heading = escape(entry.title)
    parts = [Markup('<article class="post-entry">\n'), Markup("<h2>{}</h2>\n").format(heading)]
    if entry.description is not None:
        parts.append(Markup("<h3>{}</h3>\n").format(entry.description))
    if entry.date is not None:
        parts.append(
            Markup('<time datetime="{}">{}</time>\n').format(
                entry.date.date().isoformat(), format_date(entry.date, date_format)
            )
        )
    parts.append(Markup("</article>\n"))
    return Markup("").join(parts)


def render_listing(
    pages: Iterable[Any],
    date_format: str | None = None,
    reverse_ties: bool = True,
    separator: Markup = SEPARATOR,
) -> Markup:
    """Render the full index listing.

    Args:
        pages: Page records, possibly empty.
        date_format: Optional strftime format for dates.
        reverse_ties: See order_pages.
        separator: Markup emitted between consecutive entries.

    Returns:
        Concatenated entry fragments; empty Markup for no titled pages.
    """
    fragments: list[Markup] = []
    for entry in listing_entries(pages, reverse_ties=reverse_ties):
        fragments.append(render_entry(entry, date_format))
        if not entry.last:
            fragments.append(separator)
    return Markup("").join(fragments)
