"""Content processing for the blog.

This module loads content files (Markdown and Jinja templates), extracts
their metadata and turns each into a Page.

Key classes:
- Page: Dataclass representing a site page and its metadata.
- FileContentLoader: Discovers content files under the site directory.
- LayoutResolver: Picks the layout template for a page.
- UrlDeriver: Derives the URL path for a page.
- DefaultPageBuilder: Builds Page objects from source files.
- ContentProcessor: Facade that loads every page of the site.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any

from .extractors import CompositeMetadataExtractor, default_metadata_extractor
from .protocols import ContentLoader, PageBuilder
from .renderers import RendererRegistry, default_renderer_registry
from .utils import is_internal_path, is_markdown, is_template, slugify

logger = logging.getLogger(__name__)


@dataclass
class Page:
    """Represents a site page with its metadata and content.

    Only `title`, `description`, `date` and `url` are read by the index
    listing; each may be absent.

    Attributes:
        title: Title from front matter, or None.
        description: Short description from front matter, or None.
        date: Publication date, or None when undated.
        url: URL path for the page; front matter `url` overrides it.
        route: URL path derived from the file location; used for the output
            path when `url` points off-site.
        body: Source text after the front matter.
        content: Rendered HTML (or Jinja source for templates).
        slug: URL-friendly slug.
        path: Path to the source file.
        folder: Folder path relative to the site directory.
        filename: Name of the source file.
        source_type: "markdown" or "jinja".
        layout: Layout template to use.
        draft: Whether this is a draft page.
        frontmatter: Raw front matter mapping.
    """

    title: str | None
    description: str | None
    date: datetime | None
    url: str | None
    route: str = ""
    body: str = ""
    content: str = ""
    slug: str = ""
    path: Path = field(default_factory=Path)
    folder: str = ""
    filename: str = ""
    source_type: str = "markdown"
    layout: str = "default"
    draft: bool = False
    frontmatter: dict[str, Any] = field(default_factory=dict)


class FileContentLoader:
    """Discovers content files in a site directory.

    Attributes:
        site_dir: Directory containing site content.
    """

    def __init__(self, site_dir: Path):
        self.site_dir = site_dir

    def iter_files(self, include_drafts: bool = False) -> list[Path]:
        """List all content files, sorted by path.

        Args:
            include_drafts: Whether to include draft files.

        Returns:
            List of paths to content files.
        """
        files: list[Path] = []
        for path in sorted(self.site_dir.rglob("*")):
            if path.is_dir():
                continue
            rel = path.relative_to(self.site_dir)
            # Skip internal directories (_layouts, _partials, ...)
            if is_internal_path(rel.parent):
                continue
            if rel.name.startswith("_") and not include_drafts:
                continue
            if is_markdown(path) or is_template(path):
                files.append(path)
        return files


class LayoutResolver:
    """Resolves layout templates for pages.

    Attributes:
        site_dir: Directory containing site content and layouts.
    """

    def __init__(self, site_dir: Path):
        self.site_dir = site_dir
        self.layout_dir = site_dir / "_layouts"

    def resolve(self, path: Path, folder: str, requested: str | None = None) -> str:
        """Resolve the layout for a page.

        Searches in order: the front matter `layout`, the folder's group
        layout (e.g. `posts`), then `default`.

        Args:
            path: Path to the source file.
            folder: Folder containing the page.
            requested: Layout named in front matter, if any.

        Returns:
            Layout name to use.
        """
        candidates: list[str] = []
        if requested:
            candidates.append(str(requested))
        if folder:
            candidates.append(Path(folder).parts[0])
        candidates.append("default")

        for candidate in candidates:
            for suffix in (".html.jinja", ".jinja"):
                if (self.layout_dir / f"{candidate}{suffix}").exists():
                    return candidate
        return "default"


class UrlDeriver:
    """Derives URL paths for pages from their location."""

    def derive(self, rel: Path, slug: str) -> str:
        """Derive the URL for a page.

        Args:
            rel: Relative path from site directory.
            slug: URL-friendly slug.

        Returns:
            URL path such as `/posts/extension-traits/`, or `/` for the
            root index.
        """
        segments = [p for p in rel.parent.parts if p]
        url_parts = segments if slug == "index" else segments + [slug]
        path = "/".join(url_parts)
        return f"/{path}/" if path else "/"


class DefaultPageBuilder:
    """Builds Page objects from source files.

    Attributes:
        site_dir: Directory containing site content.
        renderer_registry: Registry of content renderers.
        metadata_extractor: Composite metadata extractor.
        layout_resolver: Layout resolver instance.
        url_deriver: URL deriver instance.
    """

    def __init__(
        self,
        site_dir: Path,
        renderer_registry: RendererRegistry | None = None,
        metadata_extractor: CompositeMetadataExtractor | None = None,
    ):
        self.site_dir = site_dir
        self.renderer_registry = renderer_registry or default_renderer_registry
        self.metadata_extractor = metadata_extractor or default_metadata_extractor
        self.layout_resolver = LayoutResolver(site_dir)
        self.url_deriver = UrlDeriver()

    def build(self, path: Path, draft: bool = False) -> Page:
        """Build a Page object from a source file.

        Args:
            path: Path to the source file.
            draft: Whether this is a draft page.

        Returns:
            Page object.
        """
        rel = path.relative_to(self.site_dir)
        folder = rel.parent.as_posix() if rel.parent != Path(".") else ""
        raw = path.read_text(encoding="utf-8")

        metadata = self.metadata_extractor.extract(raw, path)
        frontmatter = metadata.get("frontmatter", {})
        body = metadata.get("body", raw)

        renderer = self.renderer_registry.get_renderer(path)
        if renderer is None:
            raise ValueError(f"No renderer for {path}")
        content = renderer.render(body)

        stem = path.stem.removesuffix(".html")
        slug = slugify(stem.lstrip("_"))
        route = self.url_deriver.derive(rel, slug)
        url = metadata.get("url") or route
        logger.debug("Loaded %s as %s", rel, url)

        return Page(
            title=metadata.get("title"),
            description=metadata.get("description"),
            date=metadata.get("date"),
            url=url,
            route=route,
            body=body,
            content=content,
            slug=slug,
            path=path,
            folder=folder,
            filename=path.name,
            source_type=renderer.source_type,
            layout=self.layout_resolver.resolve(
                path, folder, frontmatter.get("layout")
            ),
            draft=draft,
            frontmatter=frontmatter,
        )


class ContentProcessor:
    """Facade that loads all pages of a site.

    Attributes:
        site_dir: Directory containing site content.
    """

    def __init__(
        self,
        site_dir: Path,
        content_loader: ContentLoader | None = None,
        page_builder: PageBuilder | None = None,
    ):
        self.site_dir = site_dir
        self._content_loader = content_loader or FileContentLoader(site_dir)
        self._page_builder = page_builder or DefaultPageBuilder(site_dir)

    def load(self, include_drafts: bool = False) -> list[Page]:
        """Load all content files and create Page objects.

        Args:
            include_drafts: Whether to include draft pages.

        Returns:
            List of Page objects in discovery order.
        """
        pages: list[Page] = []
        for path in self._content_loader.iter_files(include_drafts):
            draft = path.name.startswith("_")
            pages.append(self._page_builder.build(path, draft=draft))
        return pages
