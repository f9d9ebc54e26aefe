# SPDX-License-Identifier: Apache-2.0
"""Thumbnail pipeline error definitions.

Messages are part of the contract: placeholder classification matches on
them (see :mod:`doc_thumbnails.core.placeholder`).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from doc_thumbnails.core.models import CorruptionResult


class ThumbnailError(Exception):
    """Base exception for thumbnail pipeline errors."""

    def __init__(
        self,
        message: str,
        stage: str = "extract",
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.stage = stage
        self.cause = cause


class UnsupportedFormatError(ThumbnailError):
    """File extension has no page source."""

    def __init__(self, extension: str) -> None:
        super().__init__(f"unsupported file format: {extension}", stage="extract")
        self.extension = extension


class DecodeError(ThumbnailError):
    """Source is malformed or unreadable. Not retryable."""


class PasswordProtectedError(DecodeError):
    """Document is encrypted and no valid password was supplied."""


class NoPagesError(ThumbnailError):
    """Document decoded but contains no pages."""


class RenderError(ThumbnailError):
    """A page failed to rasterize; the whole document is abandoned."""

    def __init__(
        self,
        message: str,
        page_index: int | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message, stage="render", cause=cause)
        self.page_index = page_index


class CorruptPageError(RenderError):
    """Rasterizer output failed the corruption check."""

    def __init__(
        self,
        message: str,
        result: CorruptionResult,
        page_index: int | None = None,
    ) -> None:
        super().__init__(message, page_index=page_index)
        self.result = result
