# SPDX-License-Identifier: Apache-2.0
"""Data models for thumbnail generation.

Pages travel through the pipeline as immutable RGBA buffers
(:class:`PageBitmap`) rather than live Pillow images, so every stage that
changes pixels has to produce a new buffer.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Sequence

from PIL import Image

from doc_thumbnails.core.errors import NoPagesError

BYTES_PER_PIXEL = 4
OPAQUE = 255

# Height/width ratio of ISO 216 paper (A4)
A4_RATIO = math.sqrt(2)
UNIFORM_RATIO = 1.42

# Pages shown side by side before the "+" tile
MAX_COMPOSITE_PAGES = 4

RGB = tuple[int, int, int]


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero (for positives)."""
    return int(math.floor(value + 0.5))


def page_height(width: int) -> int:
    """Height of a composite-style page tile: round(width * sqrt(2))."""
    return round_half_up(width * A4_RATIO)


def uniform_height(width: int) -> int:
    """Height of a uniform-style thumbnail: round(width * 1.42)."""
    return round_half_up(width * UNIFORM_RATIO)


class Style(str, Enum):
    """Thumbnail layout style."""

    COMPOSITE = "composite"  # Up to 4 pages side by side, "+" tile on overflow
    UNIFORM = "uniform"  # First page only, page-count badge


def canvas_size(width: int, style: Style, page_count: int = 1) -> tuple[int, int]:
    """Return the (width, height) of a thumbnail for the given layout.

    Args:
        width: Requested width of a single page tile.
        style: Layout style.
        page_count: Number of pages in the source document. Only the
            composite style depends on it.

    Returns:
        Canvas size in pixels.
    """
    if style == Style.UNIFORM:
        return width, uniform_height(width)

    tiles = min(max(page_count, 1), MAX_COMPOSITE_PAGES)
    if page_count > MAX_COMPOSITE_PAGES:
        tiles += 1
    return tiles * width, page_height(width)


@dataclass(frozen=True)
class PageBitmap:
    """Immutable row-major RGBA raster.

    Attributes:
        width: Width in pixels.
        height: Height in pixels.
        pixels: Packed R,G,B,A bytes, ``stride`` bytes per row.
        stride: Bytes per row. Defaults to ``width * 4``.
    """

    width: int
    height: int
    pixels: bytes = field(repr=False)
    stride: int = 0

    def __post_init__(self) -> None:
        if self.width < 0 or self.height < 0:
            raise ValueError(f"Negative dimensions: {self.width}x{self.height}")
        if self.stride == 0:
            object.__setattr__(self, "stride", self.width * BYTES_PER_PIXEL)
        if self.stride < self.width * BYTES_PER_PIXEL:
            raise ValueError(
                f"Stride {self.stride} too small for width {self.width}"
            )
        if len(self.pixels) != self.stride * self.height:
            raise ValueError(
                f"Buffer length {len(self.pixels)} != stride {self.stride} "
                f"x height {self.height}"
            )

    @property
    def size(self) -> tuple[int, int]:
        return self.width, self.height

    @classmethod
    def from_image(cls, image: Image.Image, opaque: bool = False) -> PageBitmap:
        """Copy pixel data out of a Pillow image.

        The returned bitmap never shares memory with ``image``, so it stays
        valid after the image (or the native buffer behind it) is released.

        Args:
            image: Source image in any mode.
            opaque: Force every alpha byte to 255.

        Returns:
            New PageBitmap.
        """
        rgba = image if image.mode == "RGBA" else image.convert("RGBA")
        if opaque:
            rgba = rgba.copy() if rgba is image else rgba
            rgba.putalpha(OPAQUE)
        width, height = rgba.size
        return cls(width=width, height=height, pixels=rgba.tobytes())

    def to_image(self) -> Image.Image:
        """Return a new Pillow RGBA image with this bitmap's pixels."""
        if self.width == 0 or self.height == 0:
            return Image.new("RGBA", self.size)
        return Image.frombytes(
            "RGBA", self.size, self.pixels, "raw", "RGBA", self.stride
        )


@dataclass(frozen=True)
class Thumbnail(PageBitmap):
    """Final pipeline output.

    Attributes:
        style: Layout style that produced the canvas.
        placeholder_label: Label of the placeholder, or None for a real
            thumbnail.
    """

    style: Style = Style.COMPOSITE
    placeholder_label: str | None = None

    @property
    def is_placeholder(self) -> bool:
        return self.placeholder_label is not None

    @classmethod
    def from_canvas(
        cls,
        canvas: Image.Image,
        style: Style,
        placeholder_label: str | None = None,
    ) -> Thumbnail:
        bitmap = PageBitmap.from_image(canvas)
        return cls(
            width=bitmap.width,
            height=bitmap.height,
            pixels=bitmap.pixels,
            style=style,
            placeholder_label=placeholder_label,
        )


class PageSet(Sequence[PageBitmap]):
    """Ordered, non-empty sequence of pages in document order."""

    def __init__(self, pages: Sequence[PageBitmap]) -> None:
        if not pages:
            raise NoPagesError("Document has no pages")
        self._pages = tuple(pages)

    def __len__(self) -> int:
        return len(self._pages)

    def __getitem__(self, index):  # type: ignore[override]
        return self._pages[index]

    def __iter__(self) -> Iterator[PageBitmap]:
        return iter(self._pages)

    def __repr__(self) -> str:
        return f"PageSet({len(self._pages)} pages)"

    @property
    def first(self) -> PageBitmap:
        return self._pages[0]


class CorruptionReason(str, Enum):
    """Why a bitmap was flagged."""

    NONE = ""
    ZERO_DIMENSIONS = "zero dimensions"
    NON_OPAQUE_ROWS = "non-opaque alpha rows indicating corrupt pixel buffer"


@dataclass(frozen=True)
class CorruptionResult:
    """Corruption verdict for one bitmap.

    Attributes:
        corrupt: True if the bitmap appears corrupted.
        reason: Kind of corruption detected.
        corrupt_row_fraction: Fraction of sampled rows classified corrupt.
        non_opaque_row_fraction: Fraction of sampled rows with too many
            non-opaque pixels. Equal to ``corrupt_row_fraction`` since alpha
            is the only signal.
    """

    corrupt: bool = False
    reason: CorruptionReason = CorruptionReason.NONE
    corrupt_row_fraction: float = 0.0
    non_opaque_row_fraction: float = 0.0


class PlaceholderLabel(str, Enum):
    """Labels shown on placeholder thumbnails."""

    PASSWORD_PROTECTED = "Password Protected"
    UNSUPPORTED_FORMAT = "Unsupported Format"
    FILE_NOT_FOUND = "File Not Found"
    ERROR = "Error"


@dataclass(frozen=True)
class PlaceholderSpec:
    """Label and background colour of a placeholder thumbnail."""

    label: PlaceholderLabel
    background: RGB
