# SPDX-License-Identifier: Apache-2.0
"""Thumbnail layout.

Two layouts are supported:

* composite: up to four pages side by side, plus a "+" tile when the
  document has more pages than that;
* uniform: the first page only, on a fixed canvas, with a page-count badge
  in the bottom-right corner for multi-page documents.
"""

from __future__ import annotations

import logging
from typing import Sequence

from PIL import Image, ImageDraw

from doc_thumbnails.core.drawing import font_ascent, label_font, text_width
from doc_thumbnails.core.fitter import fit_image
from doc_thumbnails.core.models import (
    MAX_COMPOSITE_PAGES,
    RGB,
    PageBitmap,
    Style,
    Thumbnail,
    page_height,
    uniform_height,
)

logger = logging.getLogger(__name__)

INDICATOR_BACKGROUND: RGB = (240, 240, 240)
INDICATOR_FOREGROUND: RGB = (100, 100, 100)
MIN_PLUS_THICKNESS = 2

# Badge geometry in pixels
BADGE_PADDING = 3
BADGE_MARGIN = 2
# Badge background keeps this fraction of the underlying RGB
BADGE_DARKEN = 0.3
BADGE_TEXT_COLOUR: RGB = (255, 255, 255)
MAX_BADGE_COUNT = 9


def _check_layout_args(pages: Sequence[PageBitmap], width: int) -> None:
    if not pages:
        raise ValueError("Cannot lay out an empty page set")
    if width <= 0:
        raise ValueError(f"Width must be positive: {width}")


def draw_plus_indicator(canvas: Image.Image, start_x: int, width: int, height: int) -> None:
    """Draw the overflow tile: grey background with a centred "+".

    The vertical bar covers the middle half of the tile's height and the
    horizontal bar the middle half of its width.
    """
    draw = ImageDraw.Draw(canvas)
    draw.rectangle(
        (start_x, 0, start_x + width - 1, height - 1),
        fill=INDICATOR_BACKGROUND,
    )

    thickness = max(MIN_PLUS_THICKNESS, width // 8)
    half = thickness // 2

    center_x = start_x + width // 2
    draw.rectangle(
        (center_x - half, height // 4, center_x - half + thickness - 1, 3 * height // 4 - 1),
        fill=INDICATOR_FOREGROUND,
    )

    center_y = height // 2
    draw.rectangle(
        (start_x + width // 4, center_y - half, start_x + 3 * width // 4 - 1, center_y - half + thickness - 1),
        fill=INDICATOR_FOREGROUND,
    )


def composite_pages(pages: Sequence[PageBitmap], width: int) -> Thumbnail:
    """Lay out up to four pages side by side.

    Each page is fitted to ``width x page_height(width)`` and placed left to
    right in document order. Documents with more than four pages get an
    extra ``width``-wide "+" tile.

    Args:
        pages: Pages in document order. Must not be empty.
        width: Width of one page tile.

    Returns:
        Thumbnail of ``n * width`` (``5 * width`` on overflow) by
        ``page_height(width)``.
    """
    _check_layout_args(pages, width)

    shown = min(len(pages), MAX_COMPOSITE_PAGES)
    overflow = len(pages) > MAX_COMPOSITE_PAGES
    height = page_height(width)

    total_width = shown * width + (width if overflow else 0)
    canvas = Image.new("RGBA", (total_width, height), (255, 255, 255, 255))

    for i in range(shown):
        tile = fit_image(pages[i].to_image(), width, height)
        canvas.paste(tile, (i * width, 0))

    if overflow:
        draw_plus_indicator(canvas, shown * width, width, height)

    logger.debug(
        "Composited %d of %d pages into %dx%d", shown, len(pages), total_width, height
    )
    return Thumbnail.from_canvas(canvas, Style.COMPOSITE)


def badge_label(page_count: int) -> str:
    """Badge text: the count for 2..9 pages, "9+" above that."""
    if page_count > MAX_BADGE_COUNT:
        return f"{MAX_BADGE_COUNT}+"
    return str(page_count)


def draw_page_count_badge(canvas: Image.Image, page_count: int) -> None:
    """Draw a page-count badge in the bottom-right corner of ``canvas``.

    The badge background is the existing pixels darkened to 30% of their
    RGB value; the label is drawn on top in white.
    """
    label = badge_label(page_count)
    font = label_font()
    ascent = font_ascent(font)

    badge_width = text_width(label, font) + BADGE_PADDING * 2
    badge_height = ascent + BADGE_PADDING * 2
    canvas_width, canvas_height = canvas.size

    badge_x = canvas_width - badge_width - BADGE_MARGIN
    badge_y = canvas_height - badge_height - BADGE_MARGIN

    box = (
        max(badge_x, 0),
        max(badge_y, 0),
        min(badge_x + badge_width, canvas_width),
        min(badge_y + badge_height, canvas_height),
    )
    if box[2] > box[0] and box[3] > box[1]:
        region = canvas.crop(box).convert("RGB")
        darkened = region.point(lambda value: int(value * BADGE_DARKEN))
        canvas.paste(darkened.convert("RGBA"), box[:2])

    draw = ImageDraw.Draw(canvas)
    draw.text(
        (badge_x + BADGE_PADDING, badge_y + BADGE_PADDING),
        label,
        fill=BADGE_TEXT_COLOUR,
        font=font,
    )


def uniform_page(pages: Sequence[PageBitmap], width: int) -> Thumbnail:
    """Render the first page on a fixed ``width x uniform_height(width)`` canvas.

    Multi-page documents get a page-count badge. The canvas size does not
    depend on the number of pages.
    """
    _check_layout_args(pages, width)

    height = uniform_height(width)
    canvas = fit_image(pages[0].to_image(), width, height)

    if len(pages) > 1:
        draw_page_count_badge(canvas, len(pages))

    return Thumbnail.from_canvas(canvas, Style.UNIFORM)


def layout_pages(pages: Sequence[PageBitmap], width: int, style: Style) -> Thumbnail:
    """Lay out ``pages`` with the given style."""
    if style == Style.UNIFORM:
        return uniform_page(pages, width)
    return composite_pages(pages, width)
