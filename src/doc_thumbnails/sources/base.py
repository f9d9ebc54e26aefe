# SPDX-License-Identifier: Apache-2.0
"""Page source protocol and extension registry."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Protocol, runtime_checkable

from doc_thumbnails.core.errors import UnsupportedFormatError
from doc_thumbnails.core.models import PageSet

logger = logging.getLogger(__name__)


@runtime_checkable
class PageSource(Protocol):
    """Protocol for per-format page extraction.

    Implementations decode a file into an ordered, non-empty PageSet and
    release any decoder resources before returning.
    """

    @property
    def name(self) -> str:
        """Source name ("pdf", "tiff", "image")."""
        ...

    @property
    def extensions(self) -> tuple[str, ...]:
        """Lowercased extensions handled, including the dot."""
        ...

    def extract_pages(self, path: Path) -> PageSet:
        """Decode every page of ``path``.

        Raises:
            FileNotFoundError: If ``path`` does not exist.
            DecodeError: If the file cannot be decoded.
            NoPagesError: If the file decodes to zero pages.
            RenderError: If a page fails to rasterize.
        """
        ...


def normalize_extension(path: Path | str) -> str:
    return Path(path).suffix.lower()


class SourceRegistry:
    """Maps lowercased file extensions to page sources."""

    def __init__(self, sources: Iterable[PageSource] = ()) -> None:
        self._by_extension: dict[str, PageSource] = {}
        for source in sources:
            self.register(source)

    def register(self, source: PageSource) -> None:
        for ext in source.extensions:
            self._by_extension[ext.lower()] = source

    def extensions(self) -> tuple[str, ...]:
        return tuple(sorted(self._by_extension))

    def get(self, path: Path | str) -> PageSource:
        """Return the source for ``path``'s extension.

        Raises:
            UnsupportedFormatError: If no source handles the extension.
        """
        ext = normalize_extension(path)
        source = self._by_extension.get(ext)
        if source is None:
            raise UnsupportedFormatError(Path(path).suffix)
        return source

    def extract_pages(self, path: Path | str) -> PageSet:
        path = Path(path)
        source = self.get(path)
        pages = source.extract_pages(path)
        logger.info("Extracted %d page(s) from %s via %s", len(pages), path.name, source.name)
        return pages


def require_file(path: Path) -> None:
    """Raise FileNotFoundError unless ``path`` is an existing file."""
    if not path.is_file():
        raise FileNotFoundError(f"Source file does not exist: {path}")
