"""Template rendering engine for the blog.

This module uses Jinja2 to render Jinja pages and wrap every page in its
layout.

Key class:
- TemplateEngine: Handles template rendering and provides context to templates.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, TemplateNotFound, select_autoescape
from markupsafe import Markup
from pygments.formatters import HtmlFormatter

from .collections import PageCollection
from .content import Page
from .html_utils import join_root_url
from .listing import render_listing
from .utils import format_date

logger = logging.getLogger(__name__)


class TemplateEngine:
    """Template rendering engine using Jinja2.

    Attributes:
        site_dir: Directory containing templates.
        config: Site configuration, exposed to templates as `data`.
        env: Jinja2 environment.
        pages: Collection of all pages.
    """

    def __init__(self, site_dir: Path, config: dict[str, Any]):
        """Initialize the template engine.

        Args:
            site_dir: Directory with templates.
            config: Site configuration.
        """
        self.site_dir = site_dir
        self.config = config
        self.root_url = str(config.get("root_url") or config.get("url") or "")
        self.reverse_ties = bool(config.get("reverse_ties", True))
        self.date_format = config.get("date_format") or None
        self.env = Environment(
            loader=FileSystemLoader(
                [
                    site_dir / "_layouts",
                    site_dir / "_partials",
                    site_dir,
                ]
            ),
            autoescape=select_autoescape(["html", "xml", "jinja"]),
        )
        self.pages = PageCollection([], reverse_ties=self.reverse_ties)
        self._install_globals()

    def _install_globals(self) -> None:
        """Install global variables, functions and filters."""
        self.env.globals["data"] = self.config
        self.env.globals["pages"] = self.pages
        self.env.globals["url_for"] = self._url_for
        self.env.globals["render_listing"] = self._render_listing
        self.env.globals["pygments_css"] = self._pygments_css
        self.env.filters["format_date"] = self._format_date

    @staticmethod
    def _pygments_css() -> Markup:
        """Return Pygments CSS rules for the .highlight class."""
        return Markup(HtmlFormatter().get_style_defs(".highlight"))

    def _format_date(self, value, fmt: str | None = None) -> str:
        return format_date(value, fmt or self.date_format)

    def _render_listing(self, pages: Iterable[Page] | None = None) -> Markup:
        """Render the index listing with the configured date format and tie order."""
        return render_listing(
            self.pages if pages is None else pages,
            date_format=self.date_format,
            reverse_ties=self.reverse_ties,
        )

    def update_collections(self, pages: Iterable[Page]) -> None:
        """Replace the page collection visible to templates."""
        self.pages = PageCollection(pages, reverse_ties=self.reverse_ties)
        self.env.globals["pages"] = self.pages

    def _url_for(self, path: str) -> str:
        """Generate a URL for a path, applying root_url if configured."""
        if path.startswith(("http://", "https://", "//")):
            return path
        return join_root_url(self.root_url, path)

    def render_page(self, page: Page) -> str:
        """Render a page with its layout.

        Args:
            page: Page object to render.

        Returns:
            Rendered HTML string.
        """
        context = {
            "data": self.config,
            "current_page": page,
            "frontmatter": page.frontmatter,
            "pages": self.pages,
        }
        body_html = self._render_body(page, context)
        layout_template = self._resolve_layout_template(page.layout)
        if layout_template is None:
            logger.warning("No layout %r for %s; rendering body only", page.layout, page.path)
            return body_html
        return layout_template.render(page_content=Markup(body_html), **context)

    def _render_body(self, page: Page, context: dict[str, Any]) -> str:
        if page.source_type == "jinja":
            return self.env.from_string(page.content).render(**context)
        return page.content

    def _resolve_layout_template(self, layout: str):
        """Find the layout template, falling back to `default`.

        Returns:
            Jinja2 Template object, or None when no layout exists.
        """
        names = [layout] if layout == "default" else [layout, "default"]
        for name in names:
            for candidate in (f"{name}.html.jinja", f"{name}.jinja"):
                try:
                    return self.env.get_template(candidate)
                except TemplateNotFound:
                    continue
        return None

    def render_string(self, template: str, context: dict[str, Any]) -> str:
        return self.env.from_string(template).render(**context)
