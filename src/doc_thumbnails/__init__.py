# SPDX-License-Identifier: Apache-2.0
"""doc-thumbnails: fixed-size thumbnails for PDF, TIFF, JPEG and PNG files.

Usage:
    from doc_thumbnails import Style, generate_or_placeholder, generate_thumbnail

    thumb = generate_thumbnail("report.pdf", width=64)
    badge = generate_thumbnail("scan.tiff", width=64, style=Style.UNIFORM)
    always = generate_or_placeholder("missing.pdf", width=64)
"""

from doc_thumbnails.core import (
    CorruptionResult,
    CorruptPageError,
    DecodeError,
    NoPagesError,
    PageBitmap,
    PageSet,
    PasswordProtectedError,
    RenderError,
    Style,
    Thumbnail,
    ThumbnailError,
    UnsupportedFormatError,
    check_page_corruption,
    check_thumbnail_corruption,
    page_height,
    uniform_height,
)
from doc_thumbnails.output import ThumbnailGenerator, default_thumbnail_path, encode_png
from doc_thumbnails.pipeline import (
    PipelineConfig,
    ThumbnailPipeline,
    generate_or_placeholder,
    generate_thumbnail,
)
from doc_thumbnails.sources import extract_pages

__version__ = "0.1.0"

__all__ = [
    "CorruptPageError",
    "CorruptionResult",
    "DecodeError",
    "NoPagesError",
    "PageBitmap",
    "PageSet",
    "PasswordProtectedError",
    "PipelineConfig",
    "RenderError",
    "Style",
    "Thumbnail",
    "ThumbnailError",
    "ThumbnailGenerator",
    "ThumbnailPipeline",
    "UnsupportedFormatError",
    "check_page_corruption",
    "check_thumbnail_corruption",
    "default_thumbnail_path",
    "encode_png",
    "extract_pages",
    "generate_or_placeholder",
    "generate_thumbnail",
    "page_height",
    "uniform_height",
]
