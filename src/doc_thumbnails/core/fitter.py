# SPDX-License-Identifier: Apache-2.0
"""Fit a single page onto a fixed-size canvas."""

from __future__ import annotations

import logging

from PIL import Image

from doc_thumbnails.core.models import RGB, PageBitmap, page_height, round_half_up

logger = logging.getLogger(__name__)

# Fill below pages that are shorter than the canvas. Not white, so padding
# stays distinguishable from page content.
PAD_COLOUR: RGB = (240, 240, 240)


def scaled_height(src_width: int, src_height: int, target_width: int) -> int:
    """Height of a page scaled proportionally to ``target_width`` (>= 1)."""
    return max(1, round_half_up(src_height * target_width / src_width))


def fit_image(
    image: Image.Image,
    target_width: int,
    target_height: int | None = None,
) -> Image.Image:
    """Scale ``image`` to ``target_width`` and crop/pad to the canvas height.

    Pages taller than the canvas keep their top rows (documents read
    top-down). Shorter pages sit flush at the top with grey padding below.

    Args:
        image: Source page.
        target_width: Canvas width in pixels.
        target_height: Canvas height in pixels. Defaults to
            ``page_height(target_width)``.

    Returns:
        New RGBA image of exactly ``target_width x target_height``.
    """
    if target_width <= 0:
        raise ValueError(f"Target width must be positive: {target_width}")
    if target_height is None:
        target_height = page_height(target_width)

    canvas = Image.new("RGBA", (target_width, target_height), PAD_COLOUR + (255,))

    src_width, src_height = image.size
    if src_width == 0 or src_height == 0:
        logger.debug("Degenerate page %dx%d, leaving canvas blank", src_width, src_height)
        return canvas

    new_height = scaled_height(src_width, src_height, target_width)
    source = image if image.mode == "RGBA" else image.convert("RGBA")
    scaled = source.resize((target_width, new_height), Image.Resampling.LANCZOS)

    if new_height >= target_height:
        return scaled.crop((0, 0, target_width, target_height))

    canvas.paste(scaled, (0, 0))
    return canvas


def fit_page(
    page: PageBitmap,
    target_width: int,
    target_height: int | None = None,
) -> PageBitmap:
    """Fit a page bitmap to ``target_width x target_height``.

    See :func:`fit_image`. Never fails for valid widths; a page with zero
    width or height yields a blank grey canvas.
    """
    return PageBitmap.from_image(fit_image(page.to_image(), target_width, target_height))
