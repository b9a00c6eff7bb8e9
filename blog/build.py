"""Site building for the blog.

This module loads configuration, processes content, renders templates and
writes the output files.

Key functions:
- build_site: Build the entire site.
- load_config: Load site configuration from blog.yaml.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from jinja2 import TemplateSyntaxError

from .content import ContentProcessor, Page
from .feeds import create_default_feed_registry
from .html_utils import absolutize_html_urls
from .templates import TemplateEngine
from .utils import ensure_clean_dir

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "blog.yaml"

_SCHEME_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*:")

DEFAULT_CONFIG: dict[str, Any] = {
    "title": "Blog",
    "description": "",
    "url": "",
    "root_url": "",
    "output_dir": "output",
    "date_format": None,
    "reverse_ties": True,
}


class BuildError(Exception):
    """Error during site build with file context.

    Attributes:
        source_path: Path to the source file that caused the error.
        message: Human-readable error message.
        original_error: The original exception that was caught.
    """

    def __init__(
        self,
        source_path: Path,
        message: str,
        original_error: Exception | None = None,
    ):
        self.source_path = source_path
        self.message = message
        self.original_error = original_error
        super().__init__(f"{source_path}: {message}")


@dataclass
class BuildResult:
    """Result of a site build.

    Attributes:
        pages: All pages in the site.
        output_dir: Directory where the site was built.
        config: Configuration used for the build.
        feeds: Feed filenames that were written.
    """

    pages: list[Page]
    output_dir: Path
    config: dict[str, Any]
    feeds: list[str] = field(default_factory=list)


def load_config(project_root: Path) -> dict[str, Any]:
    """Load site configuration from blog.yaml.

    Args:
        project_root: Root directory of the project.

    Returns:
        Configuration values with defaults applied.
    """
    config = DEFAULT_CONFIG.copy()
    config_path = project_root / CONFIG_FILENAME
    if config_path.exists():
        with open(config_path, encoding="utf-8") as f:
            loaded = yaml.safe_load(f) or {}
        if isinstance(loaded, dict):
            config.update(loaded)
        else:
            logger.warning("%s is not a mapping; using defaults", config_path)
    return config


def load_pages(project_root: Path, include_drafts: bool = False) -> list[Page]:
    """Load every page under the project's site/ directory.

    Raises:
        FileNotFoundError: If there is no site/ directory.
    """
    site_dir = project_root / "site"
    if not site_dir.exists():
        raise FileNotFoundError(f"Expected site directory at {site_dir}")
    return ContentProcessor(site_dir).load(include_drafts=include_drafts)


def build_site(
    project_root: Path,
    include_drafts: bool = False,
    output_dir_override: Path | None = None,
) -> BuildResult:
    """Build the entire static site.

    Args:
        project_root: Root directory of the project.
        include_drafts: Whether to include draft pages (starting with _).
        output_dir_override: Optional path to write the build output to
            instead of the configured output_dir.

    Returns:
        BuildResult with all pages, the output directory and configuration.

    Raises:
        BuildError: If a page fails to render.
    """
    config = load_config(project_root)
    output_dir = output_dir_override or (project_root / config["output_dir"])
    pages = load_pages(project_root, include_drafts=include_drafts)
    ensure_clean_dir(output_dir)

    engine = TemplateEngine(project_root / "site", config)
    engine.update_collections(pages)
    root_url = str(config.get("root_url") or "")
    written: set[Path] = set()
    for page in pages:
        try:
            rendered = engine.render_page(page)
        except TemplateSyntaxError as exc:
            raise BuildError(
                page.path,
                f"Template syntax error on line {exc.lineno}: {exc.message}",
                exc,
            ) from exc
        except Exception as exc:
            raise BuildError(page.path, _format_error_message(exc), exc) from exc
        if root_url:
            rendered = absolutize_html_urls(rendered, root_url)
        _write_page(output_dir, page, rendered, written)

    feeds = create_default_feed_registry().generate_all(output_dir, pages, config)
    logger.info("Built %d pages into %s", len(pages), output_dir)
    return BuildResult(pages=pages, output_dir=output_dir, config=config, feeds=feeds)


def _format_error_message(exc: Exception) -> str:
    """Format a template exception into a user-friendly message."""
    error_type = type(exc).__name__
    if error_type == "UndefinedError":
        return f"Undefined variable: {exc}"
    if error_type in ("TypeError", "AttributeError"):
        return f"{error_type.replace('Error', ' error')}: {exc}"
    return f"{error_type}: {exc}"


def _is_external(url: str) -> bool:
    return url.startswith("//") or bool(_SCHEME_RE.match(url))


def _output_path(output_dir: Path, page: Page) -> Path:
    """Return the index.html path for a page inside output_dir.

    Off-site urls (with a scheme or starting with //) are written at the
    page's location-derived route instead.

    Raises:
        BuildError: If the path would land outside output_dir.
    """
    url = page.url or "/"
    if _is_external(url):
        url = page.route or "/"
    target_dir = (output_dir / url.strip("/")).resolve()
    if not target_dir.is_relative_to(output_dir.resolve()):
        raise BuildError(page.path, f"URL {page.url!r} points outside the output directory")
    return target_dir / "index.html"


def _write_page(output_dir: Path, page: Page, rendered: str, written: set[Path]) -> None:
    """Write a rendered page to <output_dir>/<url>/index.html.

    Raises:
        BuildError: If the target escapes output_dir or another page
            already wrote to it.
    """
    target = _output_path(output_dir, page)
    if target in written:
        raise BuildError(page.path, f"URL {page.url!r} is already used by another page")
    written.add(target)
    target.parent.mkdir(parents=True, exist_ok=True)
    with open(target, "w", encoding="utf-8") as f:
        f.write(rendered)
