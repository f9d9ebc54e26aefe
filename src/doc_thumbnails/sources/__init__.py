# SPDX-License-Identifier: Apache-2.0
"""Page sources.

One source per supported format, selected by lowercased file extension:

    .pdf          -> PdfPageSource (pypdfium2)
    .tif, .tiff   -> TiffPageSource (Pillow, every frame)
    .jpg, .jpeg,
    .png          -> ImagePageSource (Pillow, single page)

Usage:
    from doc_thumbnails.sources import extract_pages
    pages = extract_pages(Path("report.pdf"))
"""

from __future__ import annotations

from pathlib import Path

from doc_thumbnails.core.models import PageSet
from doc_thumbnails.sources.base import PageSource, SourceRegistry, normalize_extension
from doc_thumbnails.sources.image import ImagePageSource
from doc_thumbnails.sources.pdf import (
    DEFAULT_DPI,
    PdfiumRasterizer,
    PdfPageSource,
    RasterizerPool,
    default_pool,
)
from doc_thumbnails.sources.tiff import TiffPageSource

__all__ = [
    "DEFAULT_DPI",
    "ImagePageSource",
    "PageSource",
    "PdfPageSource",
    "PdfiumRasterizer",
    "RasterizerPool",
    "SourceRegistry",
    "TiffPageSource",
    "default_pool",
    "default_registry",
    "extract_pages",
    "get_page_source",
    "normalize_extension",
    "supported_extensions",
]


def default_registry(
    dpi: int = DEFAULT_DPI,
    repair_alpha: bool = True,
    pdf_password: str | None = None,
    tiff_first_frame_only: bool = False,
    pool: RasterizerPool | None = None,
) -> SourceRegistry:
    """Build a registry with the built-in sources."""
    return SourceRegistry(
        [
            PdfPageSource(dpi=dpi, repair_alpha=repair_alpha, password=pdf_password, pool=pool),
            TiffPageSource(first_frame_only=tiff_first_frame_only),
            ImagePageSource(),
        ]
    )


def supported_extensions() -> tuple[str, ...]:
    return default_registry().extensions()


def get_page_source(path: Path | str) -> PageSource:
    """Return the built-in source for ``path``.

    Raises:
        UnsupportedFormatError: If the extension is not supported.
    """
    return default_registry().get(path)


def extract_pages(path: Path | str) -> PageSet:
    """Decode every page of ``path`` with the built-in sources."""
    return default_registry().extract_pages(path)
