# SPDX-License-Identifier: Apache-2.0
"""Single-frame JPEG and PNG pages, decoded with Pillow."""

from __future__ import annotations

import logging
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from doc_thumbnails.core.errors import DecodeError
from doc_thumbnails.core.models import PageBitmap, PageSet
from doc_thumbnails.sources.base import require_file

logger = logging.getLogger(__name__)


def decode_error(path: Path, exc: Exception) -> DecodeError:
    return DecodeError(f"Failed to decode {path.name}: {exc}", stage="extract", cause=exc)


class ImagePageSource:
    """JPEG/PNG source producing exactly one page."""

    name = "image"
    extensions = (".jpg", ".jpeg", ".png")

    def extract_pages(self, path: Path) -> PageSet:
        require_file(path)
        try:
            with Image.open(path) as image:
                image.load()
                page = PageBitmap.from_image(image)
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as e:
            raise decode_error(path, e) from e

        logger.debug("Decoded %s: %dx%d", path.name, page.width, page.height)
        return PageSet([page])
