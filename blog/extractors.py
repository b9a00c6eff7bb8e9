"""Metadata extractors for the blog.

Each extractor pulls one kind of metadata out of a content file. A page's
title, description and url come from YAML front matter only, so a file
without a `title:` key produces an untitled page that the index listing
skips.

Key classes:
- FrontmatterExtractor: Splits YAML front matter from the body.
- FieldExtractor: Copies optional text fields out of the front matter.
- DateExtractor: Reads the date from front matter or the filename.
- CompositeMetadataExtractor: Runs extractors in order and merges results.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any

import yaml

from .utils import coerce_date, extract_date_from_name

logger = logging.getLogger(__name__)

FRONTMATTER_RE = re.compile(r"^---\s*\n(.*?)\n---\s*(?:\n|$)", re.DOTALL)


def extract_frontmatter(text: str) -> tuple[dict[str, Any], str]:
    """Extract YAML frontmatter from content.

    Args:
        text: Raw file content.

    Returns:
        Tuple of (frontmatter dict, remaining content). Malformed YAML or
        YAML that is not a mapping yields an empty dict and the text as-is.
    """
    match = FRONTMATTER_RE.match(text)
    if not match:
        return {}, text
    try:
        data = yaml.safe_load(match.group(1)) or {}
    except yaml.YAMLError as exc:
        logger.warning("Ignoring malformed front matter: %s", exc)
        return {}, text
    if not isinstance(data, dict):
        return {}, text
    return data, text[match.end() :]


def _text_field(value) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


class FrontmatterExtractor:
    """Extracts YAML frontmatter from content."""

    def extract(self, content: str, path: Path) -> dict[str, Any]:
        """Return the parsed front matter and the body that follows it."""
        frontmatter, body = extract_frontmatter(content)
        return {"frontmatter": frontmatter, "body": body}


class FieldExtractor:
    """Copies optional text fields from front matter.

    Blank values count as absent.
    """

    fields = ("title", "description", "url")

    def extract(self, content: str, path: Path) -> dict[str, Any]:
        frontmatter, _ = extract_frontmatter(content)
        return {name: _text_field(frontmatter.get(name)) for name in self.fields}


class DateExtractor:
    """Extracts the page date.

    Looks at the front matter `date` key first, then a YYYY-MM-DD prefix
    in the filename. Pages with neither are undated.
    """

    def extract(self, content: str, path: Path) -> dict[str, Any]:
        frontmatter, _ = extract_frontmatter(content)
        raw = frontmatter.get("date")
        date = coerce_date(raw)
        if raw is not None and date is None:
            logger.warning("%s: unparseable date %r", path, raw)
        if date is None:
            date = extract_date_from_name(path.stem.split(".")[0])
        return {"date": date}


class CompositeMetadataExtractor:
    """Combines multiple metadata extractors.

    Runs all extractors on the content and merges their results; later
    extractors override earlier ones.
    """

    def __init__(self, extractors: list | None = None):
        """Initialize with a list of extractors.

        Args:
            extractors: MetadataExtractor implementations. If None, uses
                the default extractors.
        """
        if extractors is None:
            self._extractors = [
                FrontmatterExtractor(),
                FieldExtractor(),
                DateExtractor(),
            ]
        else:
            self._extractors = list(extractors)

    def add_extractor(self, extractor) -> None:
        self._extractors.append(extractor)

    def extract(self, content: str, path: Path) -> dict[str, Any]:
        result: dict[str, Any] = {}
        for extractor in self._extractors:
            result.update(extractor.extract(content, path))
        return result


default_metadata_extractor = CompositeMetadataExtractor()
