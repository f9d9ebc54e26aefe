# SPDX-License-Identifier: Apache-2.0
"""Core thumbnail modules: models, fitting, layout, corruption, placeholders."""

from .compositor import composite_pages, layout_pages, uniform_page
from .corruption import check_page_corruption, check_thumbnail_corruption, detect_corruption
from .errors import (
    CorruptPageError,
    DecodeError,
    NoPagesError,
    PasswordProtectedError,
    RenderError,
    ThumbnailError,
    UnsupportedFormatError,
)
from .fitter import PAD_COLOUR, fit_page
from .models import (
    CorruptionReason,
    CorruptionResult,
    PageBitmap,
    PageSet,
    PlaceholderLabel,
    PlaceholderSpec,
    Style,
    Thumbnail,
    canvas_size,
    page_height,
    uniform_height,
)
from .placeholder import classify_error, placeholder_for_label, render_placeholder

__all__ = [
    "CorruptPageError",
    "CorruptionReason",
    "CorruptionResult",
    "DecodeError",
    "NoPagesError",
    "PAD_COLOUR",
    "PageBitmap",
    "PageSet",
    "PasswordProtectedError",
    "PlaceholderLabel",
    "PlaceholderSpec",
    "RenderError",
    "Style",
    "Thumbnail",
    "ThumbnailError",
    "UnsupportedFormatError",
    "canvas_size",
    "check_page_corruption",
    "check_thumbnail_corruption",
    "classify_error",
    "composite_pages",
    "detect_corruption",
    "fit_page",
    "layout_pages",
    "page_height",
    "placeholder_for_label",
    "render_placeholder",
    "uniform_height",
    "uniform_page",
]
