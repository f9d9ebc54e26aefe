# SPDX-License-Identifier: Apache-2.0
"""Rasterizer corruption detection.

pdfium can hand back RGBA buffers in which some rows are filled with garbage
bytes. Rendered document content is always fully opaque, so rows with many
non-opaque pixels are a cheap signal that the buffer was corrupted, without
needing a reference render to compare against.
"""

from __future__ import annotations

import logging
from typing import Callable, Union

from PIL import Image

from doc_thumbnails.core.models import (
    BYTES_PER_PIXEL,
    OPAQUE,
    CorruptionReason,
    CorruptionResult,
    PageBitmap,
)

logger = logging.getLogger(__name__)

# Sampling bounds
MAX_SAMPLED_ROWS = 500
MAX_SAMPLED_COLUMNS = 100

# A row is corrupt when more than this fraction of its samples is non-opaque
ROW_NON_OPAQUE_THRESHOLD = 0.10
# A bitmap is corrupt when more than this fraction of sampled rows is corrupt
CORRUPT_ROW_THRESHOLD = 0.05

Raster = Union[PageBitmap, Image.Image]


def _steps(width: int, height: int) -> tuple[int, int]:
    row_step = height // MAX_SAMPLED_ROWS if height > MAX_SAMPLED_ROWS else 1
    col_step = width // MAX_SAMPLED_COLUMNS if width > MAX_SAMPLED_COLUMNS else 1
    return row_step, col_step


def _result(corrupt_rows: int, rows_sampled: int) -> CorruptionResult:
    if rows_sampled == 0:
        return CorruptionResult()

    fraction = corrupt_rows / rows_sampled
    if fraction > CORRUPT_ROW_THRESHOLD:
        return CorruptionResult(
            corrupt=True,
            reason=CorruptionReason.NON_OPAQUE_ROWS,
            corrupt_row_fraction=fraction,
            non_opaque_row_fraction=fraction,
        )
    return CorruptionResult(
        corrupt_row_fraction=fraction,
        non_opaque_row_fraction=fraction,
    )


def _row_is_corrupt(non_opaque: int, sampled: int) -> bool:
    return sampled > 0 and non_opaque / sampled > ROW_NON_OPAQUE_THRESHOLD


def _detect_packed(pixels: bytes, width: int, height: int, stride: int) -> CorruptionResult:
    """Sample alpha bytes straight out of a packed RGBA buffer."""
    row_step, col_step = _steps(width, height)
    view = memoryview(pixels)
    alpha_step = col_step * BYTES_PER_PIXEL

    corrupt_rows = 0
    rows_sampled = 0
    for y in range(0, height, row_step):
        rows_sampled += 1
        row_start = y * stride
        alphas = bytes(view[row_start + 3 : row_start + width * BYTES_PER_PIXEL : alpha_step])
        non_opaque = len(alphas) - alphas.count(OPAQUE)
        if _row_is_corrupt(non_opaque, len(alphas)):
            corrupt_rows += 1

    return _result(corrupt_rows, rows_sampled)


def _alpha_accessor(image: Image.Image) -> Callable[[tuple[int, int]], int]:
    """Return a per-pixel alpha lookup for any image mode."""
    bands = image.getbands()
    if "A" in bands:
        return image.getchannel("A").getpixel  # type: ignore[return-value]
    if "a" in bands:
        return image.getchannel("a").getpixel  # type: ignore[return-value]
    if image.mode == "P" and "transparency" in image.info:
        return image.convert("RGBA").getchannel("A").getpixel  # type: ignore[return-value]
    return lambda xy: OPAQUE


def _detect_generic(image: Image.Image) -> CorruptionResult:
    """Per-pixel path for images that are not packed RGBA."""
    width, height = image.size
    row_step, col_step = _steps(width, height)
    alpha_at = _alpha_accessor(image)

    corrupt_rows = 0
    rows_sampled = 0
    for y in range(0, height, row_step):
        rows_sampled += 1
        non_opaque = 0
        sampled = 0
        for x in range(0, width, col_step):
            if alpha_at((x, y)) != OPAQUE:
                non_opaque += 1
            sampled += 1
        if _row_is_corrupt(non_opaque, sampled):
            corrupt_rows += 1

    return _result(corrupt_rows, rows_sampled)


def detect_corruption(raster: Raster) -> CorruptionResult:
    """Check a raster for rasterizer corruption.

    Samples at most ~500 rows and ~100 pixels per row. A row counts as
    corrupt when more than 10% of its sampled pixels are not fully opaque;
    the raster is corrupt when more than 5% of sampled rows are corrupt.
    Fractions are reported even when the verdict is clean so callers can log
    near misses.

    Args:
        raster: PageBitmap or Pillow image. Packed RGBA takes the fast
            path; other image modes go through a per-pixel alpha query with
            the same thresholds.

    Returns:
        CorruptionResult for the raster.
    """
    width, height = raster.size
    if width == 0 or height == 0:
        return CorruptionResult(corrupt=True, reason=CorruptionReason.ZERO_DIMENSIONS)

    if isinstance(raster, PageBitmap):
        return _detect_packed(raster.pixels, width, height, raster.stride)
    if raster.mode == "RGBA":
        return _detect_packed(raster.tobytes(), width, height, width * BYTES_PER_PIXEL)
    return _detect_generic(raster)


def check_page_corruption(raster: Raster) -> CorruptionResult:
    """Check a single rendered page."""
    return detect_corruption(raster)


def check_thumbnail_corruption(raster: Raster) -> CorruptionResult:
    """Check a final thumbnail; corruption can survive resizing and cropping."""
    result = detect_corruption(raster)
    if result.corrupt:
        logger.debug(
            "Thumbnail flagged corrupt: %s (%.1f%% rows)",
            result.reason.value,
            result.corrupt_row_fraction * 100,
        )
    return result
