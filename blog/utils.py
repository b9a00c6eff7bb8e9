"""Utility functions for the blog.

This module contains small helpers used throughout the package.
These include string processing, path handling and date handling.

Key functions:
    slugify: Convert filenames to URL slugs.
    extract_date_from_name: Extract date from filename prefix.
    coerce_date: Normalise date-like values to naive datetimes.
    format_date: Format a date for display.
    is_markdown: Check if a path is a Markdown file.
    is_template: Check if a path is a Jinja template.
    ensure_clean_dir: Ensure a directory exists and is empty.
"""

from __future__ import annotations

import re
import shutil
from datetime import date, datetime, timezone
from pathlib import Path


def _split_date_prefix(name: str) -> tuple[list[str], list[str]] | None:
    parts = name.split("-")
    if len(parts) >= 3 and all(p.isdigit() for p in parts[:3]):
        return parts[:3], parts[3:]
    return None


def slugify(name: str) -> str:
    """Convert filename (without extension) to slug, dropping date prefix.

    Args:
        name: Filename stem.

    Returns:
        URL-friendly slug.
    """
    cleaned = name
    split = _split_date_prefix(cleaned)
    if split and split[1]:
        cleaned = "-".join(split[1])
    cleaned = re.sub(r"[^a-zA-Z0-9]+", "-", cleaned)
    cleaned = cleaned.strip("-").lower()
    return cleaned or "index"


def extract_date_from_name(name: str) -> datetime | None:
    """Extract a date from a filename with YYYY-MM-DD prefix.

    Args:
        name: Filename stem (without extension).

    Returns:
        datetime object if a valid date prefix is found, None otherwise.
    """
    split = _split_date_prefix(name)
    if split is None:
        return None
    year, month, day = split[0]
    try:
        return datetime(int(year), int(month), int(day))
    except ValueError:
        return None


def coerce_date(value) -> datetime | None:
    """Normalise a date-like value to a naive datetime.

    Accepts datetimes, dates and ISO 8601 strings. Timezone-aware values
    are converted to UTC before the tzinfo is dropped so that every result
    compares with every other.

    Args:
        value: Value from front matter or a page record.

    Returns:
        A naive datetime, or None when the value is absent or unparseable.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        result = value
    elif isinstance(value, date):
        result = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            result = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None
    if result.tzinfo is not None:
        result = result.astimezone(timezone.utc).replace(tzinfo=None)
    return result


def format_date(value, fmt: str | None = None) -> str:
    """Format a date-like value as a human-readable string.

    Without a format the result reads like "June 14, 2021".

    Args:
        value: Date-like value accepted by coerce_date.
        fmt: Optional strftime format.

    Returns:
        Formatted date, or an empty string when there is no date.
    """
    moment = coerce_date(value)
    if moment is None:
        return ""
    if fmt:
        return moment.strftime(fmt)
    return f"{moment:%B} {moment.day}, {moment.year}"


def ensure_clean_dir(path: Path) -> None:
    """Ensure a directory exists and is empty.

    Args:
        path: Directory path to clean or create.
    """
    if path.exists():
        shutil.rmtree(str(path))
    path.mkdir(parents=True, exist_ok=True)


def is_internal_path(path: Path) -> bool:
    """Check if a path is internal (contains components starting with _).

    Internal paths include layouts, partials, and draft files.
    """
    return any(part.startswith("_") for part in path.parts)


def is_markdown(path: Path) -> bool:
    """Check if a path is a Markdown file."""
    return path.suffix.lower() == ".md"


def is_template(path: Path) -> bool:
    """Check if a path is a Jinja template file.

    Matches both .jinja and .html.jinja extensions.
    """
    return path.suffix == ".jinja"
