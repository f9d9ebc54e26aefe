#!/usr/bin/env python3
# SPDX-License-Identifier: Apache-2.0
"""Per-page corruption diagnostics for a PDF.

Renders every page without repairing the alpha channel, prints the
corruption statistics for each page, dumps the first bytes of the first
non-opaque row, and saves the raw renders as PNG for inspection.

Usage:
    python scripts/diagnose_pdf.py <pdf_path> <output_dir> [--dpi 150]
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from doc_thumbnails.core.corruption import check_page_corruption
from doc_thumbnails.core.errors import ThumbnailError
from doc_thumbnails.core.models import BYTES_PER_PIXEL, OPAQUE, PageBitmap
from doc_thumbnails.sources.pdf import DEFAULT_DPI, PdfPageSource

DUMP_BYTES = 40


def first_non_opaque_row(page: PageBitmap) -> int | None:
    for y in range(page.height):
        start = y * page.stride
        alphas = page.pixels[start + 3 : start + page.width * BYTES_PER_PIXEL : BYTES_PER_PIXEL]
        if alphas.count(OPAQUE) != len(alphas):
            return y
    return None


def hex_dump(page: PageBitmap, y: int) -> str:
    start = y * page.stride
    return " ".join(f"{b:02x}" for b in page.pixels[start : start + DUMP_BYTES])


def main() -> int:
    parser = argparse.ArgumentParser(description="Diagnose PDF render corruption")
    parser.add_argument("pdf", type=Path, help="PDF file")
    parser.add_argument("output_dir", type=Path, help="Directory for raw page renders")
    parser.add_argument("--dpi", type=int, default=DEFAULT_DPI, help="Render resolution")
    args = parser.parse_args()

    source = PdfPageSource(dpi=args.dpi, repair_alpha=False)
    try:
        pages = source.extract_pages(args.pdf)
    except (ThumbnailError, FileNotFoundError) as e:
        print(f"render error: {e}", file=sys.stderr)
        return 1

    args.output_dir.mkdir(parents=True, exist_ok=True)
    print(f"Pages: {len(pages)}")

    for i, page in enumerate(pages):
        result = check_page_corruption(page)
        print(f"\nPage {i}: {page.width}x{page.height} stride={page.stride}")
        print(
            f"  corrupt={result.corrupt} "
            f"corrupt_rows={result.corrupt_row_fraction:.1%} "
            f"non_opaque_rows={result.non_opaque_row_fraction:.1%}"
        )
        if result.reason.value:
            print(f"  reason: {result.reason.value}")

        y = first_non_opaque_row(page)
        if y is not None:
            print(f"  First non-opaque row: y={y}")
            print(f"  Raw bytes[0:{DUMP_BYTES}]: {hex_dump(page, y)}")
            if y > 0:
                print(f"  Row y={y - 1} bytes[0:{DUMP_BYTES}]: {hex_dump(page, y - 1)}")

        page.to_image().save(args.output_dir / f"page_{i}_raw.png")

    return 0


if __name__ == "__main__":
    sys.exit(main())
