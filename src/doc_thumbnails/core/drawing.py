# SPDX-License-Identifier: Apache-2.0
"""Text helpers shared by badges and placeholders."""

from __future__ import annotations

from functools import lru_cache
from typing import Union

from PIL import ImageFont

Font = Union[ImageFont.ImageFont, ImageFont.FreeTypeFont]


@lru_cache(maxsize=1)
def label_font() -> Font:
    """Pillow's built-in font (bitmap, or FreeType when available)."""
    return ImageFont.load_default()


def text_width(text: str, font: Font | None = None) -> int:
    """Advance width of ``text`` in pixels."""
    font = font or label_font()
    left, _, right, _ = font.getbbox(text)
    return int(right - left)


def font_ascent(font: Font | None = None) -> int:
    """Distance from the top of a line to the baseline."""
    font = font or label_font()
    return int(font.getbbox("A")[3])
