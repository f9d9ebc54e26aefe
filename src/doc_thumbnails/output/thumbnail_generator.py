# SPDX-License-Identifier: Apache-2.0
"""Encode thumbnails to PNG and place them next to their documents."""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from pathlib import Path

from doc_thumbnails.core.models import Style, Thumbnail
from doc_thumbnails.pipeline.thumbnail_pipeline import (
    DEFAULT_WIDTH,
    PipelineConfig,
    ThumbnailPipeline,
)

logger = logging.getLogger(__name__)


def default_thumbnail_path(doc_path: Path | str, width: int, ext: str = "png") -> Path:
    """Return the conventional thumbnail path for a document.

    The document's extension is replaced with ``.tn_<width>.<ext>``,
    e.g. ``doc.pdf`` at width 64 -> ``doc.tn_64.png``.
    """
    doc_path = Path(doc_path)
    return doc_path.with_name(f"{doc_path.stem}.tn_{width}.{ext}")


def encode_png(thumbnail: Thumbnail) -> bytes:
    """Encode a thumbnail as PNG bytes."""
    buffer = io.BytesIO()
    thumbnail.to_image().save(buffer, format="PNG")
    return buffer.getvalue()


@dataclass
class ThumbnailConfig:
    """Configuration for thumbnail generation.

    Attributes:
        width: Page tile width in pixels. Height follows from the style.
        style: Layout style.
        placeholder_on_error: Produce a labelled placeholder instead of
            raising when a document cannot be thumbnailed.

    Note:
        Output format is fixed to PNG.
    """

    width: int = DEFAULT_WIDTH
    style: Style = Style.COMPOSITE
    placeholder_on_error: bool = False


class ThumbnailGenerator:
    """Generate PNG thumbnails for documents and images."""

    def __init__(
        self,
        config: ThumbnailConfig | None = None,
        pipeline: ThumbnailPipeline | None = None,
    ) -> None:
        """Initialize ThumbnailGenerator.

        Args:
            config: Thumbnail generation configuration.
            pipeline: Pipeline to render with. Defaults to one built from
                ``config``.
        """
        self._config = config or ThumbnailConfig()
        self._pipeline = pipeline or ThumbnailPipeline(
            PipelineConfig(width=self._config.width, style=self._config.style)
        )

    def render(self, path: Path) -> Thumbnail:
        """Render the thumbnail without encoding it."""
        if self._config.placeholder_on_error:
            return self._pipeline.generate_or_placeholder(
                path, self._config.width, self._config.style
            )
        return self._pipeline.generate(path, self._config.width, self._config.style)

    def generate(self, path: Path) -> tuple[bytes, int, int]:
        """Generate a thumbnail.

        Args:
            path: Path to the source file.

        Returns:
            Tuple of (png_bytes, width, height).

        Raises:
            FileNotFoundError: If the file is not found (unless
                placeholder_on_error is set).
            ThumbnailError: If the file cannot be thumbnailed (unless
                placeholder_on_error is set).
        """
        thumbnail = self.render(path)
        return encode_png(thumbnail), thumbnail.width, thumbnail.height

    def generate_to_file(
        self,
        path: Path,
        output_path: Path | None = None,
    ) -> tuple[int, int]:
        """Generate a thumbnail and save it to a file.

        Args:
            path: Path to the source file.
            output_path: Path to save the thumbnail. Defaults to
                :func:`default_thumbnail_path` next to the source.

        Returns:
            Tuple of (width, height).
        """
        if output_path is None:
            output_path = default_thumbnail_path(path, self._config.width)

        image_bytes, width, height = self.generate(path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_bytes(image_bytes)
        logger.debug("Wrote %s (%dx%d)", output_path, width, height)
        return width, height
