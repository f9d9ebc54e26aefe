# SPDX-License-Identifier: Apache-2.0
"""Shared fixtures: synthetic pages and source files."""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import pypdfium2 as pdfium  # type: ignore[import-untyped]
import pytest
from PIL import Image


@pytest.fixture
def make_image_file(tmp_path: Path) -> Callable[..., Path]:
    """Save a solid-colour image under tmp_path and return its path."""

    def _make(name: str, size: tuple[int, int] = (100, 80), colour=(255, 255, 255)) -> Path:
        path = tmp_path / name
        Image.new("RGB", size, colour).save(path)
        return path

    return _make


@pytest.fixture
def make_tiff(tmp_path: Path) -> Callable[..., Path]:
    """Save a multi-frame TIFF, one solid frame per colour."""

    def _make(colours: list[tuple[int, int, int]], size: tuple[int, int] = (60, 85)) -> Path:
        path = tmp_path / f"frames_{len(colours)}.tiff"
        frames = [Image.new("RGB", size, colour) for colour in colours]
        frames[0].save(path, save_all=True, append_images=frames[1:])
        return path

    return _make


@pytest.fixture
def make_pdf(tmp_path: Path) -> Callable[..., Path]:
    """Save a PDF of blank pages."""

    def _make(page_count: int, size: tuple[float, float] = (200, 283), name: str | None = None) -> Path:
        path = tmp_path / (name or f"blank_{page_count}.pdf")
        pdf = pdfium.PdfDocument.new()
        for _ in range(page_count):
            pdf.new_page(*size)
        pdf.save(path)
        pdf.close()
        return path

    return _make


@pytest.fixture
def encrypted_pdf(tmp_path: Path) -> Path:
    """One-page PDF encrypted with user password "secret"."""
    pikepdf = pytest.importorskip("pikepdf")

    path = tmp_path / "locked.pdf"
    pdf = pikepdf.new()
    pdf.add_blank_page(page_size=(200, 283))
    pdf.save(path, encryption=pikepdf.Encryption(owner="owner", user="secret", R=4))
    pdf.close()
    return path
