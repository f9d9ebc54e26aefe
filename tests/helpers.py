# SPDX-License-Identifier: Apache-2.0
"""Plain test helpers."""

from __future__ import annotations

from doc_thumbnails.core.models import PageBitmap


def solid_page(width: int, height: int, rgba: tuple[int, int, int, int] = (255, 255, 255, 255)) -> PageBitmap:
    """Uniformly coloured page bitmap."""
    return PageBitmap(width=width, height=height, pixels=bytes(rgba) * (width * height))
