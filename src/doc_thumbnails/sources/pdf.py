# SPDX-License-Identifier: Apache-2.0
"""PDF pages rendered with pypdfium2.

pdfium keeps process-wide state and is not thread-safe, so rendering goes
through a :class:`RasterizerPool`. The default pool holds a single
rasterizer: concurrent callers queue for it instead of rendering in
parallel.
"""

from __future__ import annotations

import logging
import queue
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Iterator

import pypdfium2 as pdfium  # type: ignore[import-untyped]
import pypdfium2.raw as pdfium_c  # type: ignore[import-untyped]

from doc_thumbnails.core.errors import (
    DecodeError,
    NoPagesError,
    PasswordProtectedError,
    RenderError,
)
from doc_thumbnails.core.models import PageBitmap, PageSet
from doc_thumbnails.sources.base import require_file

logger = logging.getLogger(__name__)

DEFAULT_DPI = 150
POINTS_PER_INCH = 72.0
DEFAULT_ACQUIRE_TIMEOUT = 30.0


def _is_password_error(exc: Exception) -> bool:
    if getattr(exc, "err_code", None) == pdfium_c.FPDF_ERR_PASSWORD:
        return True
    return "password" in str(exc).lower()


class PdfiumRasterizer:
    """Renders PDF documents to RGBA page bitmaps.

    Not thread-safe; obtain instances from a :class:`RasterizerPool`.
    """

    def __init__(self) -> None:
        self._closed = False
        self.documents_rendered = 0

    @property
    def closed(self) -> bool:
        return self._closed

    def render_document(
        self,
        path: Path,
        dpi: int = DEFAULT_DPI,
        repair_alpha: bool = True,
        password: str | None = None,
    ) -> list[PageBitmap]:
        """Render every page of a PDF.

        Each page is copied out of pdfium's buffer before the buffer is
        released. A failure on any page aborts the whole document.

        Args:
            path: PDF file.
            dpi: Render resolution.
            repair_alpha: Force the copied alpha channel to fully opaque.
            password: Password for encrypted documents.

        Returns:
            Page bitmaps in document order.

        Raises:
            PasswordProtectedError: Missing or wrong password.
            DecodeError: Document could not be opened.
            NoPagesError: Document has no pages.
            RenderError: A page failed to render.
        """
        if self._closed:
            raise RenderError("PDF rasterizer is closed")

        try:
            doc = pdfium.PdfDocument(str(path), password=password)
        except pdfium.PdfiumError as e:
            if _is_password_error(e):
                raise PasswordProtectedError(
                    f"invalid password for {path.name}: {e}", stage="extract", cause=e
                ) from e
            raise DecodeError(
                f"Unable to open PDF document {path.name}: {e}", stage="extract", cause=e
            ) from e

        try:
            page_count = len(doc)
            if page_count == 0:
                raise NoPagesError(f"PDF has no pages: {path.name}")

            scale = dpi / POINTS_PER_INCH
            pages = [
                self._render_page(doc, index, scale, repair_alpha)
                for index in range(page_count)
            ]
        finally:
            doc.close()

        self.documents_rendered += 1
        return pages

    def _render_page(
        self,
        doc: pdfium.PdfDocument,
        index: int,
        scale: float,
        repair_alpha: bool,
    ) -> PageBitmap:
        try:
            page = doc[index]
        except pdfium.PdfiumError as e:
            raise RenderError(f"Unable to load page {index}: {e}", page_index=index, cause=e) from e

        try:
            try:
                bitmap = page.render(
                    scale=scale,
                    force_bitmap_format=pdfium_c.FPDFBitmap_BGRA,
                    rev_byteorder=True,
                )
            except pdfium.PdfiumError as e:
                raise RenderError(
                    f"Unable to render page {index}: {e}", page_index=index, cause=e
                ) from e

            try:
                # to_pil() is a view of pdfium memory; from_image copies it.
                bitmap_page = PageBitmap.from_image(bitmap.to_pil(), opaque=repair_alpha)
            finally:
                bitmap.close()
        finally:
            page.close()

        logger.debug("Rendered page %d: %dx%d", index, bitmap_page.width, bitmap_page.height)
        return bitmap_page

    def close(self) -> None:
        self._closed = True


class RasterizerPool:
    """Bounded pool of PDF rasterizers.

    Args:
        factory: Creates a new rasterizer when none is idle.
        max_size: Maximum number of rasterizers checked out at once.
        acquire_timeout: Seconds to wait for a free rasterizer.
    """

    def __init__(
        self,
        factory: Callable[[], PdfiumRasterizer] = PdfiumRasterizer,
        max_size: int = 1,
        acquire_timeout: float = DEFAULT_ACQUIRE_TIMEOUT,
    ) -> None:
        if max_size < 1:
            raise ValueError(f"max_size must be >= 1: {max_size}")
        self._factory = factory
        self._acquire_timeout = acquire_timeout
        self._slots = threading.BoundedSemaphore(max_size)
        self._idle: queue.LifoQueue[PdfiumRasterizer] = queue.LifoQueue()

    @contextmanager
    def acquire(self) -> Iterator[PdfiumRasterizer]:
        """Check out a rasterizer for the duration of a ``with`` block.

        The rasterizer goes back to the pool on every exit path.

        Raises:
            RenderError: If no rasterizer frees up within the timeout.
        """
        if not self._slots.acquire(timeout=self._acquire_timeout):
            raise RenderError(
                f"Timed out after {self._acquire_timeout:.0f}s waiting for a PDF rasterizer"
            )
        try:
            try:
                rasterizer = self._idle.get_nowait()
            except queue.Empty:
                rasterizer = self._factory()

            try:
                yield rasterizer
            finally:
                self._idle.put(rasterizer)
        finally:
            self._slots.release()

    def idle_count(self) -> int:
        return self._idle.qsize()

    def close(self) -> None:
        """Close every idle rasterizer."""
        while True:
            try:
                rasterizer = self._idle.get_nowait()
            except queue.Empty:
                break
            rasterizer.close()


_default_pool: RasterizerPool | None = None
_default_pool_lock = threading.Lock()


def default_pool() -> RasterizerPool:
    """Process-wide pool shared by every PdfPageSource without its own pool."""
    global _default_pool
    with _default_pool_lock:
        if _default_pool is None:
            _default_pool = RasterizerPool()
        return _default_pool


class PdfPageSource:
    """PDF source rendering every page at a fixed DPI.

    Args:
        dpi: Render resolution.
        repair_alpha: Force rendered pages fully opaque. Disable to keep
            pdfium's raw alpha for corruption diagnostics.
        password: Password for encrypted documents.
        pool: Rasterizer pool. Defaults to the process-wide pool.
    """

    name = "pdf"
    extensions = (".pdf",)

    def __init__(
        self,
        dpi: int = DEFAULT_DPI,
        repair_alpha: bool = True,
        password: str | None = None,
        pool: RasterizerPool | None = None,
    ) -> None:
        self._dpi = dpi
        self._repair_alpha = repair_alpha
        self._password = password
        self._pool = pool

    def extract_pages(self, path: Path) -> PageSet:
        require_file(path)
        pool = self._pool or default_pool()
        with pool.acquire() as rasterizer:
            pages = rasterizer.render_document(
                path,
                dpi=self._dpi,
                repair_alpha=self._repair_alpha,
                password=self._password,
            )
        return PageSet(pages)
