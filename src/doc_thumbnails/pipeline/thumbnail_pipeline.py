# SPDX-License-Identifier: Apache-2.0
"""Thumbnail pipeline implementation."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from doc_thumbnails.core.compositor import layout_pages
from doc_thumbnails.core.corruption import check_page_corruption, check_thumbnail_corruption
from doc_thumbnails.core.errors import CorruptPageError
from doc_thumbnails.core.models import CorruptionResult, PageSet, Style, Thumbnail
from doc_thumbnails.core.placeholder import placeholder_for_error
from doc_thumbnails.sources import DEFAULT_DPI, default_registry
from doc_thumbnails.sources.base import SourceRegistry

logger = logging.getLogger(__name__)

DEFAULT_WIDTH = 64


class CorruptionPolicy(str, Enum):
    """What to do when a corruption check fails."""

    WARN = "warn"  # Log and keep going
    RAISE = "raise"  # Raise CorruptPageError


@dataclass
class PipelineConfig:
    """Thumbnail pipeline configuration."""

    width: int = DEFAULT_WIDTH
    style: Style = Style.COMPOSITE

    # PDF rendering
    dpi: int = DEFAULT_DPI
    repair_alpha: bool = True
    pdf_password: str | None = None

    tiff_first_frame_only: bool = False

    # Corruption checks (off by default)
    check_pages: bool = False
    check_thumbnail: bool = False
    corruption_policy: CorruptionPolicy = CorruptionPolicy.WARN


def _validate_width(width: int) -> None:
    if isinstance(width, bool) or not isinstance(width, int) or width <= 0:
        raise ValueError(f"Width must be a positive integer: {width!r}")


class ThumbnailPipeline:
    """Page extraction, corruption checks and layout for one file per call.

    Calls share no state apart from the PDF rasterizer pool.
    """

    def __init__(
        self,
        config: PipelineConfig | None = None,
        sources: SourceRegistry | None = None,
    ) -> None:
        """Initialize ThumbnailPipeline.

        Args:
            config: Pipeline configuration.
            sources: Page source registry. Built from ``config`` when None.
        """
        self._config = config or PipelineConfig()
        self._sources = sources or default_registry(
            dpi=self._config.dpi,
            repair_alpha=self._config.repair_alpha,
            pdf_password=self._config.pdf_password,
            tiff_first_frame_only=self._config.tiff_first_frame_only,
        )

    @property
    def config(self) -> PipelineConfig:
        return self._config

    def extract(self, path: Path | str) -> PageSet:
        """Decode every page of ``path`` and run the page checks."""
        pages = self._sources.extract_pages(path)
        if self._config.check_pages:
            for index, page in enumerate(pages):
                self._handle_corruption(check_page_corruption(page), Path(path), index)
        return pages

    def generate(
        self,
        path: Path | str,
        width: int | None = None,
        style: Style | None = None,
    ) -> Thumbnail:
        """Generate a thumbnail.

        Args:
            path: Source file.
            width: Page tile width. Defaults to the configured width.
            style: Layout style. Defaults to the configured style.

        Returns:
            Thumbnail.

        Raises:
            ValueError: If ``width`` is not a positive integer.
            FileNotFoundError: If ``path`` does not exist.
            ThumbnailError: If extraction, rendering or a corruption check
                (under the raise policy) fails.
        """
        width = self._config.width if width is None else width
        style = self._config.style if style is None else Style(style)
        _validate_width(width)

        path = Path(path)
        pages = self.extract(path)
        thumbnail = layout_pages(pages, width, style)

        if self._config.check_thumbnail:
            self._handle_corruption(check_thumbnail_corruption(thumbnail), path, None)

        logger.info(
            "Generated %s thumbnail %dx%d for %s (%d pages)",
            style.value,
            thumbnail.width,
            thumbnail.height,
            path.name,
            len(pages),
        )
        return thumbnail

    def generate_or_placeholder(
        self,
        path: Path | str,
        width: int | None = None,
        style: Style | None = None,
    ) -> Thumbnail:
        """Generate a thumbnail, or a labelled placeholder on any failure.

        The placeholder has the same size a successful thumbnail of a
        one-page document would have. Only an invalid ``width`` raises.
        """
        width = self._config.width if width is None else width
        style = self._config.style if style is None else Style(style)
        _validate_width(width)

        try:
            return self.generate(path, width, style)
        except Exception as e:
            logger.warning("Thumbnail failed for %s, using placeholder: %s", path, e)
            return placeholder_for_error(e, width, style)

    def _handle_corruption(
        self,
        result: CorruptionResult,
        path: Path,
        page_index: int | None,
    ) -> None:
        target = "thumbnail" if page_index is None else f"page {page_index}"
        if not result.corrupt:
            if result.corrupt_row_fraction > 0:
                logger.debug(
                    "%s %s: %.1f%% non-opaque rows (below threshold)",
                    path.name,
                    target,
                    result.corrupt_row_fraction * 100,
                )
            return

        message = (
            f"Corrupt {target} in {path.name}: {result.reason.value} "
            f"({result.corrupt_row_fraction:.1%} rows)"
        )
        if self._config.corruption_policy == CorruptionPolicy.RAISE:
            raise CorruptPageError(message, result=result, page_index=page_index)
        logger.warning(message)


def generate_thumbnail(
    path: Path | str,
    width: int = DEFAULT_WIDTH,
    style: Style = Style.COMPOSITE,
) -> Thumbnail:
    """Generate a thumbnail with the default pipeline."""
    return ThumbnailPipeline().generate(path, width, style)


def generate_or_placeholder(
    path: Path | str,
    width: int = DEFAULT_WIDTH,
    style: Style = Style.COMPOSITE,
) -> Thumbnail:
    """Generate a thumbnail with the default pipeline, never raising for bad input files."""
    return ThumbnailPipeline().generate_or_placeholder(path, width, style)
