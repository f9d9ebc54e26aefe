#!/usr/bin/env python3
# SPDX-License-Identifier: Apache-2.0
"""Write sample thumbnails for visual inspection.

Covers synthetic PNG/JPEG/TIFF/PDF sources in both layout styles, plus every
placeholder label.

Usage:
    python scripts/showcase.py [--width 64] [--output /tmp/thumbnails]
"""

from __future__ import annotations

import argparse
import sys
import tempfile
from pathlib import Path

import pypdfium2 as pdfium  # type: ignore[import-untyped]
from PIL import Image

from doc_thumbnails.core.errors import ThumbnailError
from doc_thumbnails.core.models import PlaceholderLabel, Style
from doc_thumbnails.core.placeholder import placeholder_for_label
from doc_thumbnails.output.thumbnail_generator import (
    ThumbnailConfig,
    ThumbnailGenerator,
    encode_png,
)


def gradient(width: int, height: int) -> Image.Image:
    image = Image.new("RGB", (width, height))
    image.putdata(
        [(255 * x // width, 255 * y // height, 128) for y in range(height) for x in range(width)]
    )
    return image


def make_sources(source_dir: Path) -> list[Path]:
    """Create synthetic source files and return their paths."""
    source_dir.mkdir(parents=True, exist_ok=True)
    paths: list[Path] = []

    solids = {
        "red_200x100.png": ((200, 100), (220, 40, 40)),
        "green_80x120.png": ((80, 120), (40, 180, 40)),
        "blue_500x500.png": ((500, 500), (40, 40, 220)),
        "tiny_10x10.png": ((10, 10), (255, 165, 0)),
        "small_50x50.jpg": ((50, 50), (200, 50, 50)),
    }
    for name, (size, colour) in solids.items():
        path = source_dir / name
        Image.new("RGB", size, colour).save(path)
        paths.append(path)

    path = source_dir / "gradient_300x200.png"
    gradient(300, 200).save(path)
    paths.append(path)

    path = source_dir / "three_frames.tiff"
    frames = [Image.new("RGB", (120, 170), c) for c in ((200, 0, 0), (0, 200, 0), (0, 0, 200))]
    frames[0].save(path, save_all=True, append_images=frames[1:])
    paths.append(path)

    for page_count in (1, 2, 6, 12):
        path = source_dir / f"blank_{page_count}p.pdf"
        pdf = pdfium.PdfDocument.new()
        for _ in range(page_count):
            pdf.new_page(595, 842)
        pdf.save(path)
        pdf.close()
        paths.append(path)

    return paths


def main() -> int:
    parser = argparse.ArgumentParser(description="Generate showcase thumbnails")
    parser.add_argument("--width", type=int, default=64, help="Thumbnail width in pixels")
    parser.add_argument("--output", type=Path, help="Output directory (default: temp dir)")
    args = parser.parse_args()

    out_dir = args.output or Path(tempfile.mkdtemp(prefix="doc-thumbnails-showcase-"))
    out_dir.mkdir(parents=True, exist_ok=True)
    print(f"Showcase output: {out_dir}  (width={args.width})\n")

    sources = make_sources(out_dir / "_sources")

    for style in Style:
        print(f"=== {style.value} ===")
        generator = ThumbnailGenerator(ThumbnailConfig(width=args.width, style=style))
        for source in sources:
            out_path = out_dir / f"{source.stem}_{style.value}.png"
            try:
                width, height = generator.generate_to_file(source, out_path)
            except (ThumbnailError, OSError) as e:
                print(f"  {source.name:<30} ERROR: {e}")
                continue
            print(f"  {source.name:<30} -> {out_path.name} ({width}x{height})")
        print()

    print("=== placeholders ===")
    for label in PlaceholderLabel:
        out_path = out_dir / f"placeholder_{label.name.lower()}.png"
        out_path.write_bytes(encode_png(placeholder_for_label(label, args.width)))
        print(f"  {label.value:<30} -> {out_path.name}")

    print(f"\nDone. View results in:\n  {out_dir}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
