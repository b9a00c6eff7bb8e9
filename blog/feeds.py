"""Feed generation for the blog.

Feeds list the same pages as the index, in the same order: titled pages,
newest first.

Classes:
    FeedGenerator: Base class for feed generators.
    SitemapGenerator: Generates sitemap.xml.
    RSSGenerator: Generates an RSS 2.0 feed.
    FeedRegistry: Runs every registered generator.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Any

from markupsafe import escape

from .html_utils import join_root_url
from .listing import ListingEntry, listing_entries

if TYPE_CHECKING:
    from .content import Page

logger = logging.getLogger(__name__)

RFC822 = "%a, %d %b %Y %H:%M:%S +0000"


class FeedGenerator(ABC):
    """Base class for feed generators."""

    @property
    @abstractmethod
    def filename(self) -> str:
        """Output filename such as 'rss.xml'."""
        ...

    @abstractmethod
    def generate(self, entries: list[ListingEntry], config: dict[str, Any]) -> str | None:
        """Generate feed content.

        Args:
            entries: Listing entries, newest first.
            config: Site configuration; `url` is the site base URL.

        Returns:
            Feed content, or None when the feed cannot be generated.
        """
        ...

    def write(
        self, output_dir: Path, entries: list[ListingEntry], config: dict[str, Any]
    ) -> bool:
        """Generate the feed and write it into output_dir.

        Returns:
            True if the feed was written, False if skipped.
        """
        content = self.generate(entries, config)
        if content is None:
            logger.info("Skipping %s: no site url configured", self.filename)
            return False
        (output_dir / self.filename).write_text(content, encoding="utf-8")
        return True


def _base_url(config: dict[str, Any]) -> str:
    return str(config.get("url") or "").rstrip("/")


def _link(base_url: str, entry: ListingEntry) -> str | None:
    if entry.url is None:
        return None
    if entry.url.startswith(("http://", "https://")):
        return entry.url
    return join_root_url(base_url, entry.url)


class SitemapGenerator(FeedGenerator):
    """Generates sitemap.xml following the sitemaps.org protocol."""

    @property
    def filename(self) -> str:
        return "sitemap.xml"

    def generate(self, entries: list[ListingEntry], config: dict[str, Any]) -> str | None:
        base_url = _base_url(config)
        if not base_url:
            return None
        lines = [
            '<?xml version="1.0" encoding="UTF-8"?>',
            '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">',
            f"  <url><loc>{escape(base_url + '/')}</loc></url>",
        ]
        for entry in entries:
            link = _link(base_url, entry)
            if link is None:
                continue
            lastmod = (
                f"<lastmod>{entry.date:%Y-%m-%d}</lastmod>" if entry.date else ""
            )
            lines.append(f"  <url><loc>{escape(link)}</loc>{lastmod}</url>")
        lines.append("</urlset>")
        return "\n".join(lines)


class RSSGenerator(FeedGenerator):
    """Generates an RSS 2.0 feed of the listed pages."""

    @property
    def filename(self) -> str:
        return "rss.xml"

    def generate(self, entries: list[ListingEntry], config: dict[str, Any]) -> str | None:
        base_url = _base_url(config)
        if not base_url:
            return None
        title = config.get("title") or "Blog"

        items = []
        for entry in entries:
            parts = [f"<title>{escape(entry.title)}</title>"]
            link = _link(base_url, entry)
            if link is not None:
                parts.append(f"<link>{escape(link)}</link>")
            parts.append(
                f"<description>{escape(entry.description or entry.title)}</description>"
            )
            if entry.date is not None:
                parts.append(f"<pubDate>{entry.date.strftime(RFC822)}</pubDate>")
            items.append(f"<item>{''.join(parts)}</item>")

        build_date = datetime.now(timezone.utc).strftime(RFC822)
        rss = [
            '<?xml version="1.0" encoding="UTF-8"?>',
            '<rss version="2.0"><channel>',
            f"<title>{escape(title)}</title>",
            f"<link>{escape(base_url)}</link>",
            f"<description>{escape(config.get('description') or title)}</description>",
            f"<lastBuildDate>{build_date}</lastBuildDate>",
        ]
        rss.extend(items)
        rss.append("</channel></rss>")
        return "\n".join(rss)


class FeedRegistry:
    """Registry of feed generators run at the end of a build."""

    def __init__(self) -> None:
        self._generators: list[FeedGenerator] = []

    def register(self, generator: FeedGenerator) -> None:
        self._generators.append(generator)

    def generate_all(
        self,
        output_dir: Path,
        pages: Iterable[Page],
        config: dict[str, Any],
    ) -> list[str]:
        """Generate all registered feeds.

        Args:
            output_dir: Directory to write feed files to.
            pages: All pages of the site.
            config: Site configuration.

        Returns:
            Filenames that were written.
        """
        entries = listing_entries(pages, reverse_ties=bool(config.get("reverse_ties", True)))
        return [
            generator.filename
            for generator in self._generators
            if generator.write(output_dir, entries, config)
        ]


def create_default_feed_registry() -> FeedRegistry:
    """Create a registry with the sitemap and RSS generators."""
    registry = FeedRegistry()
    registry.register(SitemapGenerator())
    registry.register(RSSGenerator())
    return registry
