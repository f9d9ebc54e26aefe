# SPDX-License-Identifier: Apache-2.0
"""Output helpers: PNG encoding and thumbnail file placement."""

from doc_thumbnails.output.thumbnail_generator import (
    ThumbnailConfig,
    ThumbnailGenerator,
    default_thumbnail_path,
    encode_png,
)

__all__ = [
    "ThumbnailConfig",
    "ThumbnailGenerator",
    "default_thumbnail_path",
    "encode_png",
]
