"""Protocol definitions for the blog.

These protocols describe the seams between content discovery, metadata
extraction and rendering so each piece can be swapped in tests.
"""

from __future__ import annotations

from abc import abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from .content import Page


@runtime_checkable
class ContentRenderer(Protocol):
    """Protocol for rendering the body of a content file."""

    @abstractmethod
    def can_render(self, path: Path) -> bool:
        """Check if this renderer can handle the given file.

        Args:
            path: Path to the source file.

        Returns:
            True if this renderer can process the file.
        """
        ...

    @abstractmethod
    def render(self, content: str) -> str:
        """Render content to HTML (or template source for Jinja files).

        Args:
            content: Source content to render.

        Returns:
            Rendered HTML.
        """
        ...

    @property
    @abstractmethod
    def source_type(self) -> str:
        """Return the source type identifier ('markdown' or 'jinja')."""
        ...


@runtime_checkable
class MetadataExtractor(Protocol):
    """Protocol for extracting metadata from content."""

    @abstractmethod
    def extract(self, content: str, path: Path) -> dict[str, Any]:
        """Extract metadata from content.

        Args:
            content: Source content.
            path: Path to the source file.

        Returns:
            Dictionary of extracted metadata.
        """
        ...


@runtime_checkable
class ContentLoader(Protocol):
    """Protocol for discovering content files."""

    @abstractmethod
    def iter_files(self, include_drafts: bool = False) -> list[Path]:
        """Return all content files.

        Args:
            include_drafts: Whether to include draft files.
        """
        ...


@runtime_checkable
class PageBuilder(Protocol):
    """Protocol for building Page objects from source files."""

    @abstractmethod
    def build(self, path: Path, draft: bool = False) -> Page:
        """Build a Page object from a source file."""
        ...
