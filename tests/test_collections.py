from datetime import datetime
from pathlib import Path

from blog.collections import PageCollection
from blog.content import Page


def make_page(title, date, folder="posts", draft=False):
    return Page(
        title=title,
        description=None,
        date=date,
        url=f"/{folder}/{(title or 'untitled').lower()}/",
        folder=folder,
        path=Path(f"{folder}/{title}.md"),
        draft=draft,
    )


def test_page_collection_filters_and_latest():
    pages = PageCollection(
        [
            make_page("A", datetime(2024, 1, 2)),
            make_page("B", datetime(2024, 1, 3), draft=True),
            make_page("C", datetime(2024, 1, 1), folder="notes/deep"),
            make_page(None, datetime(2024, 1, 4), folder=""),
        ]
    )
    assert len(pages) == 4
    assert [p.title for p in pages.group("posts")] == ["A", "B"]
    assert [p.title for p in pages.group("notes")] == ["C"]
    assert [p.title for p in pages.published()] == ["A", "C", None]
    assert [p.title for p in pages.drafts()] == ["B"]
    assert [p.title for p in pages.titled()] == ["A", "B", "C"]
    assert [p.title for p in pages.sorted()] == [None, "B", "A", "C"]
    assert [p.title for p in pages.latest(2)] == ["B", "A"]
    assert pages[0].title == "A"


def test_page_collection_tie_order_follows_setting():
    same_day = datetime(2024, 1, 1)
    pages = [make_page("X", same_day), make_page("Y", same_day)]
    assert [p.title for p in PageCollection(pages).sorted()] == ["Y", "X"]
    keep = PageCollection(pages, reverse_ties=False)
    assert [p.title for p in keep.sorted()] == ["X", "Y"]
    # derived collections inherit the setting
    assert [e.title for e in keep.group("posts").listing()] == ["X", "Y"]


def test_listing_marks_last_entry():
    pages = PageCollection(
        [make_page("Old", datetime(2020, 1, 1)), make_page("New", datetime(2021, 1, 1))]
    )
    entries = pages.listing()
    assert [(e.title, e.last) for e in entries] == [("New", False), ("Old", True)]
