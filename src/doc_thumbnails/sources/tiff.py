# SPDX-License-Identifier: Apache-2.0
"""Multi-page TIFF pages, decoded with Pillow."""

from __future__ import annotations

import logging
from pathlib import Path

from PIL import Image, ImageSequence, UnidentifiedImageError

from doc_thumbnails.core.models import PageBitmap, PageSet
from doc_thumbnails.sources.base import require_file
from doc_thumbnails.sources.image import decode_error

logger = logging.getLogger(__name__)


class TiffPageSource:
    """TIFF source returning one page per frame (IFD).

    Args:
        first_frame_only: Decode only the first frame, ignoring the rest.
    """

    name = "tiff"
    extensions = (".tif", ".tiff")

    def __init__(self, first_frame_only: bool = False) -> None:
        self._first_frame_only = first_frame_only

    def extract_pages(self, path: Path) -> PageSet:
        require_file(path)
        pages: list[PageBitmap] = []
        try:
            with Image.open(path) as image:
                for frame in ImageSequence.Iterator(image):
                    pages.append(PageBitmap.from_image(frame))
                    if self._first_frame_only:
                        break
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as e:
            raise decode_error(path, e) from e

        logger.debug("Decoded %d TIFF frame(s) from %s", len(pages), path.name)
        return PageSet(pages)
