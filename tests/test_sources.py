# SPDX-License-Identifier: Apache-2.0
"""Tests for page sources, the registry and the rasterizer pool."""

from __future__ import annotations

import struct
import zlib
from pathlib import Path
from unittest.mock import MagicMock

import pypdfium2 as pdfium  # type: ignore[import-untyped]
import pytest
from PIL import Image

from doc_thumbnails.core.corruption import detect_corruption
from doc_thumbnails.core.errors import (
    DecodeError,
    NoPagesError,
    PasswordProtectedError,
    RenderError,
    UnsupportedFormatError,
)
from doc_thumbnails.sources import (
    ImagePageSource,
    PdfiumRasterizer,
    PdfPageSource,
    RasterizerPool,
    SourceRegistry,
    TiffPageSource,
    default_registry,
    extract_pages,
    get_page_source,
    supported_extensions,
)
from doc_thumbnails.sources import pdf as pdf_module

from helpers import solid_page


def png_chunk(kind: bytes, data: bytes) -> bytes:
    return struct.pack(">I", len(data)) + kind + data + struct.pack(">I", zlib.crc32(kind + data))


class TestImagePageSource:
    """Tests for PNG/JPEG decoding."""

    def test_png_single_page(self, make_image_file) -> None:
        """Test a PNG decodes to one opaque RGBA page."""
        path = make_image_file("page.png", (100, 80), (10, 20, 30))

        pages = ImagePageSource().extract_pages(path)

        assert len(pages) == 1
        assert pages.first.size == (100, 80)
        assert pages.first.to_image().getpixel((50, 40)) == (10, 20, 30, 255)

    def test_jpeg(self, make_image_file) -> None:
        """Test JPEG decoding."""
        path = make_image_file("photo.jpg", (40, 30))
        assert ImagePageSource().extract_pages(path).first.size == (40, 30)

    def test_missing_file(self, tmp_path: Path) -> None:
        """Test missing files raise FileNotFoundError."""
        with pytest.raises(FileNotFoundError, match="does not exist"):
            ImagePageSource().extract_pages(tmp_path / "missing.png")

    def test_garbage_is_decode_error(self, tmp_path: Path) -> None:
        """Test unreadable bytes raise DecodeError."""
        path = tmp_path / "broken.png"
        path.write_bytes(b"this is not a png")

        with pytest.raises(DecodeError) as exc_info:
            ImagePageSource().extract_pages(path)

        assert exc_info.value.stage == "extract"
        assert exc_info.value.cause is not None

    def test_oversized_header_is_decode_error(self, tmp_path: Path) -> None:
        """Test a decompression bomb surfaces as DecodeError."""
        ihdr = struct.pack(">IIBBBBB", 20000, 20000, 8, 2, 0, 0, 0)
        path = tmp_path / "bomb.png"
        path.write_bytes(
            b"\x89PNG\r\n\x1a\n"
            + png_chunk(b"IHDR", ihdr)
            + png_chunk(b"IDAT", b"")
            + png_chunk(b"IEND", b"")
        )

        with pytest.raises(DecodeError) as exc_info:
            ImagePageSource().extract_pages(path)

        assert isinstance(exc_info.value.cause, Image.DecompressionBombError)


class TestTiffPageSource:
    """Tests for multi-frame TIFF decoding."""

    def test_every_frame(self, make_tiff) -> None:
        """Test each frame becomes a page, in order."""
        colours = [(255, 0, 0), (0, 255, 0), (0, 0, 255)]
        path = make_tiff(colours)

        pages = TiffPageSource().extract_pages(path)

        assert len(pages) == 3
        for page, colour in zip(pages, colours):
            assert page.to_image().getpixel((5, 5)) == colour + (255,)

    def test_first_frame_only(self, make_tiff) -> None:
        """Test first_frame_only stops after one frame."""
        path = make_tiff([(255, 0, 0), (0, 255, 0)])

        pages = TiffPageSource(first_frame_only=True).extract_pages(path)

        assert len(pages) == 1
        assert pages.first.to_image().getpixel((0, 0)) == (255, 0, 0, 255)

    def test_oversized_frames_are_decode_error(
        self, make_tiff, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test frames over the pixel limit surface as DecodeError."""
        path = make_tiff([(255, 0, 0)], size=(60, 85))
        monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 100)

        with pytest.raises(DecodeError):
            TiffPageSource().extract_pages(path)


class TestPdfPageSource:
    """Tests for pdfium rendering."""

    def test_renders_every_page(self, make_pdf) -> None:
        """Test a two-page PDF renders two opaque pages."""
        path = make_pdf(2)

        pages = PdfPageSource(pool=RasterizerPool()).extract_pages(path)

        assert len(pages) == 2
        for page in pages:
            assert page.width > 200
            assert page.height > page.width
            assert detect_corruption(page).corrupt is False

    def test_dpi_controls_size(self, make_pdf) -> None:
        """Test 72 DPI renders one pixel per point."""
        path = make_pdf(1, size=(144, 216))

        page = PdfPageSource(dpi=72, pool=RasterizerPool()).extract_pages(path).first

        assert page.size == (144, 216)

    def test_encrypted_without_password(self, encrypted_pdf: Path) -> None:
        """Test missing passwords raise PasswordProtectedError."""
        with pytest.raises(PasswordProtectedError, match="invalid password"):
            PdfPageSource(pool=RasterizerPool()).extract_pages(encrypted_pdf)

    def test_encrypted_with_password(self, encrypted_pdf: Path) -> None:
        """Test the right password opens the document."""
        source = PdfPageSource(dpi=72, password="secret", pool=RasterizerPool())
        assert len(source.extract_pages(encrypted_pdf)) == 1

    def test_garbage_is_decode_error(self, tmp_path: Path) -> None:
        """Test a non-PDF file raises DecodeError."""
        path = tmp_path / "fake.pdf"
        path.write_bytes(b"%PDF-1.4 not really")

        with pytest.raises(DecodeError):
            PdfPageSource(pool=RasterizerPool()).extract_pages(path)

    def test_zero_pages(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test an empty document raises NoPagesError and is closed."""
        path = tmp_path / "empty.pdf"
        path.write_bytes(b"%PDF")
        doc = MagicMock()
        doc.__len__.return_value = 0
        monkeypatch.setattr(pdf_module.pdfium, "PdfDocument", MagicMock(return_value=doc))

        with pytest.raises(NoPagesError):
            PdfiumRasterizer().render_document(path)

        doc.close.assert_called_once()

    def test_page_failure_aborts_document(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test a render failure raises RenderError and releases resources."""
        path = tmp_path / "bad.pdf"
        path.write_bytes(b"%PDF")
        page = MagicMock()
        page.render.side_effect = pdfium.PdfiumError("render failed")
        doc = MagicMock()
        doc.__len__.return_value = 2
        doc.__getitem__.return_value = page
        monkeypatch.setattr(pdf_module.pdfium, "PdfDocument", MagicMock(return_value=doc))

        rasterizer = PdfiumRasterizer()
        with pytest.raises(RenderError) as exc_info:
            rasterizer.render_document(path)

        assert exc_info.value.page_index == 0
        assert exc_info.value.stage == "render"
        page.close.assert_called_once()
        doc.close.assert_called_once()
        assert rasterizer.documents_rendered == 0

    def test_pixels_copied_before_bitmap_close(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test the page keeps its pixels after pdfium releases the bitmap."""
        path = tmp_path / "one.pdf"
        path.write_bytes(b"%PDF")
        native = Image.new("RGBA", (3, 2), (10, 20, 30, 255))
        bitmap = MagicMock()
        bitmap.to_pil.return_value = native
        # Releasing the bitmap invalidates the memory behind to_pil().
        bitmap.close.side_effect = lambda: native.paste((0, 0, 0, 0), (0, 0, 3, 2))
        page = MagicMock()
        page.render.return_value = bitmap
        doc = MagicMock()
        doc.__len__.return_value = 1
        doc.__getitem__.return_value = page
        monkeypatch.setattr(pdf_module.pdfium, "PdfDocument", MagicMock(return_value=doc))

        pages = PdfiumRasterizer().render_document(path, repair_alpha=False)

        bitmap.close.assert_called_once()
        page.close.assert_called_once()
        assert pages[0].size == (3, 2)
        assert pages[0].pixels == bytes([10, 20, 30, 255]) * 6

    def test_closed_rasterizer(self, tmp_path: Path) -> None:
        """Test closed rasterizers refuse work."""
        rasterizer = PdfiumRasterizer()
        rasterizer.close()

        assert rasterizer.closed is True
        with pytest.raises(RenderError):
            rasterizer.render_document(tmp_path / "a.pdf")

    def test_uses_pool(self, tmp_path: Path) -> None:
        """Test extraction goes through the given pool's rasterizer."""
        path = tmp_path / "doc.pdf"
        path.write_bytes(b"%PDF")
        rasterizer = MagicMock()
        rasterizer.render_document.return_value = [solid_page(4, 4)]
        pool = RasterizerPool(factory=lambda: rasterizer)

        pages = PdfPageSource(dpi=96, password="pw", pool=pool).extract_pages(path)

        assert len(pages) == 1
        rasterizer.render_document.assert_called_once_with(
            path, dpi=96, repair_alpha=True, password="pw"
        )
        assert pool.idle_count() == 1


class TestRasterizerPool:
    """Tests for RasterizerPool."""

    def test_reuses_instances(self) -> None:
        """Test sequential acquisitions share one rasterizer."""
        pool = RasterizerPool()

        with pool.acquire() as first:
            pass
        with pool.acquire() as second:
            pass

        assert first is second
        assert pool.idle_count() == 1

    def test_returned_on_exception(self) -> None:
        """Test a failing caller still returns the rasterizer."""
        pool = RasterizerPool()

        with pytest.raises(RuntimeError):
            with pool.acquire():
                raise RuntimeError("boom")

        assert pool.idle_count() == 1
        with pool.acquire():
            pass

    def test_acquire_timeout(self) -> None:
        """Test waiting past the timeout raises RenderError."""
        pool = RasterizerPool(max_size=1, acquire_timeout=0.05)

        with pool.acquire():
            with pytest.raises(RenderError, match="Timed out"):
                with pool.acquire():
                    pass

    def test_bounded_size(self) -> None:
        """Test at most max_size instances are created."""
        created = []

        def factory() -> PdfiumRasterizer:
            created.append(PdfiumRasterizer())
            return created[-1]

        pool = RasterizerPool(factory=factory, max_size=2)
        with pool.acquire(), pool.acquire():
            pass
        with pool.acquire(), pool.acquire():
            pass

        assert len(created) == 2

    def test_close(self) -> None:
        """Test close() closes idle rasterizers."""
        pool = RasterizerPool()
        with pool.acquire() as rasterizer:
            pass

        pool.close()

        assert rasterizer.closed is True
        assert pool.idle_count() == 0

    def test_rejects_zero_size(self) -> None:
        """Test max_size must be positive."""
        with pytest.raises(ValueError):
            RasterizerPool(max_size=0)


class TestRegistry:
    """Tests for extension lookup."""

    def test_supported_extensions(self) -> None:
        """Test the built-in extension set."""
        assert supported_extensions() == (".jpeg", ".jpg", ".pdf", ".png", ".tif", ".tiff")

    @pytest.mark.parametrize(
        "name, source_name",
        [("a.pdf", "pdf"), ("a.PDF", "pdf"), ("a.tif", "tiff"), ("a.Tiff", "tiff"),
         ("a.jpg", "image"), ("a.JPEG", "image"), ("a.png", "image")],
    )
    def test_lookup_is_case_insensitive(self, name: str, source_name: str) -> None:
        """Test extensions match regardless of case."""
        assert get_page_source(name).name == source_name

    def test_unsupported(self) -> None:
        """Test unknown extensions raise UnsupportedFormatError."""
        with pytest.raises(UnsupportedFormatError) as exc_info:
            get_page_source("notes.xyz")

        assert exc_info.value.extension == ".xyz"
        assert str(exc_info.value) == "unsupported file format: .xyz"

    def test_no_extension(self) -> None:
        """Test files without an extension are unsupported."""
        with pytest.raises(UnsupportedFormatError):
            get_page_source("README")

    def test_uppercase_file_extracts(self, make_image_file) -> None:
        """Test end-to-end extraction of an uppercase-extension file."""
        path = make_image_file("SCAN.PNG", (20, 10))
        assert extract_pages(path).first.size == (20, 10)

    def test_custom_registry(self, tmp_path: Path) -> None:
        """Test registering an extra source."""
        fake = MagicMock()
        fake.name = "fake"
        fake.extensions = (".FAKE",)
        fake.extract_pages.return_value = [solid_page(1, 1)]
        registry = SourceRegistry([fake])

        assert registry.extensions() == (".fake",)
        assert registry.get(tmp_path / "x.fake") is fake

    def test_default_registry_options(self) -> None:
        """Test default_registry wires options into the sources."""
        pool = RasterizerPool()
        registry = default_registry(dpi=96, pdf_password="pw", pool=pool)

        pdf_source = registry.get("a.pdf")
        assert isinstance(pdf_source, PdfPageSource)
