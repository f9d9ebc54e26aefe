# SPDX-License-Identifier: Apache-2.0
"""Thumbnail pipeline package."""

from .thumbnail_pipeline import (
    DEFAULT_WIDTH,
    CorruptionPolicy,
    PipelineConfig,
    ThumbnailPipeline,
    generate_or_placeholder,
    generate_thumbnail,
)

__all__ = [
    "CorruptionPolicy",
    "DEFAULT_WIDTH",
    "PipelineConfig",
    "ThumbnailPipeline",
    "generate_or_placeholder",
    "generate_thumbnail",
]
