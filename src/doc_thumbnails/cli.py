# SPDX-License-Identifier: Apache-2.0
"""
doc-thumbnails - CLI Tool

Generates fixed-size PNG thumbnails for PDF, TIFF, JPEG and PNG files.

Usage:
    doc-thumbnail <input>... [options]

Examples:
    doc-thumbnail report.pdf                      # report.tn_64.png next to it
    doc-thumbnail scans/ -o thumbs/ -w 128        # Every supported file in scans/
    doc-thumbnail report.pdf --style uniform      # Page-count badge layout
    doc-thumbnail docs/ --check --report out.json # Batch run with JSON report
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import time
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, NoReturn

from doc_thumbnails.core.corruption import check_thumbnail_corruption
from doc_thumbnails.core.models import Style
from doc_thumbnails.output.thumbnail_generator import default_thumbnail_path, encode_png
from doc_thumbnails.pipeline.thumbnail_pipeline import (
    DEFAULT_WIDTH,
    PipelineConfig,
    ThumbnailPipeline,
)
from doc_thumbnails.sources import supported_extensions

logger = logging.getLogger(__name__)

STATUS_OK = "ok"
STATUS_CORRUPT = "corrupt"
STATUS_ERROR = "error"


@dataclass
class FileResult:
    """Outcome for one input file, as written to the JSON report."""

    file: str
    status: str
    elapsed_ms: float
    error: str | None = None
    width: int | None = None
    height: int | None = None
    file_size_bytes: int | None = None
    out_path: str | None = None
    placeholder: str | None = None
    corrupt_row_pct: float | None = None
    non_opaque_row_pct: float | None = None


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments.

    Returns:
        Parsed argument Namespace.
    """
    parser = argparse.ArgumentParser(
        prog="doc-thumbnail",
        description="Generate fixed-size PNG thumbnails for documents and images",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s report.pdf                           # Writes report.tn_64.png
  %(prog)s scans/ -o thumbs/ -w 128             # Whole directory
  %(prog)s report.pdf --style uniform           # Fixed size with page badge
  %(prog)s docs/ --placeholder                  # Placeholder image on failure
  %(prog)s docs/ --check --report report.json   # Corruption check + report
""",
    )

    parser.add_argument(
        "inputs",
        type=Path,
        nargs="+",
        help="Files or directories to thumbnail",
    )

    parser.add_argument(
        "-o",
        "--output-dir",
        type=Path,
        help="Directory for thumbnails (default: next to each input)",
    )

    parser.add_argument(
        "-w",
        "--width",
        type=int,
        default=DEFAULT_WIDTH,
        help=f"Page tile width in pixels (default: {DEFAULT_WIDTH})",
    )

    parser.add_argument(
        "--style",
        default=Style.COMPOSITE.value,
        choices=[style.value for style in Style],
        help="Layout style (default: composite)",
    )

    parser.add_argument(
        "--placeholder",
        action="store_true",
        help="Write a labelled placeholder instead of failing",
    )

    # PDF options
    pdf_group = parser.add_argument_group("PDF options")
    pdf_group.add_argument(
        "--dpi",
        type=int,
        default=150,
        help="PDF render resolution (default: 150)",
    )
    pdf_group.add_argument(
        "--password",
        help="Password for encrypted PDFs",
    )

    # Corruption options
    check_group = parser.add_argument_group("Corruption check options")
    check_group.add_argument(
        "--check",
        action="store_true",
        help="Check each finished thumbnail for rasterizer corruption",
    )
    check_group.add_argument(
        "--report",
        type=Path,
        help="Write a JSON report of every file to this path",
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose output",
    )

    args = parser.parse_args(argv)
    if args.width <= 0:
        parser.error(f"--width must be positive: {args.width}")
    return args


def collect_inputs(inputs: list[Path]) -> list[Path]:
    """Expand directories into their supported files (sorted).

    Explicit file arguments are kept as given, supported or not.
    """
    extensions = set(supported_extensions())
    files: list[Path] = []
    for item in inputs:
        if item.is_dir():
            files.extend(
                sorted(p for p in item.iterdir() if p.is_file() and p.suffix.lower() in extensions)
            )
        else:
            files.append(item)
    return files


def output_path_for(path: Path, width: int, output_dir: Path | None) -> Path:
    target = default_thumbnail_path(path, width)
    if output_dir is not None:
        return output_dir / target.name
    return target


def process_file(
    pipeline: ThumbnailPipeline,
    path: Path,
    args: argparse.Namespace,
) -> FileResult:
    """Thumbnail one file and write the PNG."""
    file_size = path.stat().st_size if path.is_file() else None
    start = time.perf_counter()
    try:
        if args.placeholder:
            thumbnail = pipeline.generate_or_placeholder(path)
        else:
            thumbnail = pipeline.generate(path)
    except Exception as e:
        logger.debug("Failed on %s", path, exc_info=True)
        return FileResult(
            file=path.name,
            status=STATUS_ERROR,
            error=str(e),
            elapsed_ms=(time.perf_counter() - start) * 1000,
            file_size_bytes=file_size,
        )
    elapsed_ms = (time.perf_counter() - start) * 1000

    result = FileResult(
        file=path.name,
        status=STATUS_OK,
        elapsed_ms=elapsed_ms,
        width=thumbnail.width,
        height=thumbnail.height,
        file_size_bytes=file_size,
        placeholder=thumbnail.placeholder_label,
    )

    if args.check:
        check = check_thumbnail_corruption(thumbnail)
        result.corrupt_row_pct = check.corrupt_row_fraction * 100
        result.non_opaque_row_pct = check.non_opaque_row_fraction * 100
        if check.corrupt:
            result.status = STATUS_CORRUPT
            result.error = f"{check.reason.value} ({result.corrupt_row_pct:.1f}% corrupt rows)"

    # Saved even when corrupt so it can be inspected
    out_path = output_path_for(path, args.width, args.output_dir)
    try:
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_bytes(encode_png(thumbnail))
    except OSError as e:
        logger.warning("Failed to save %s: %s", out_path, e)
        result.status = STATUS_ERROR
        result.error = f"failed to save {out_path}: {e}"
        return result
    result.out_path = str(out_path)
    return result


def write_report(results: list[FileResult], report_path: Path) -> None:
    data: list[dict[str, Any]] = [
        {key: value for key, value in asdict(r).items() if value is not None} for r in results
    ]
    report_path.parent.mkdir(parents=True, exist_ok=True)
    report_path.write_text(json.dumps(data, indent=2), encoding="utf-8")


def run(args: argparse.Namespace) -> int:
    """Thumbnail every input.

    Args:
        args: Command line arguments.

    Returns:
        Exit code (0: no file errored, 1: otherwise).
    """
    files = collect_inputs(args.inputs)
    if not files:
        print("Error: No supported files found", file=sys.stderr)
        return 1

    config = PipelineConfig(
        width=args.width,
        style=Style(args.style),
        dpi=args.dpi,
        pdf_password=args.password,
    )
    pipeline = ThumbnailPipeline(config)

    print(f"Processing {len(files)} file(s), width={args.width}, style={args.style}", file=sys.stderr)

    results: list[FileResult] = []
    outputs: dict[Path, Path] = {}
    for i, path in enumerate(files, start=1):
        out_path = output_path_for(path, args.width, args.output_dir)
        if out_path in outputs:
            logger.warning(
                "%s and %s share output %s; the later one overwrites it",
                outputs[out_path],
                path,
                out_path,
            )
        outputs[out_path] = path

        result = process_file(pipeline, path, args)
        results.append(result)

        prefix = f"[{i:3d}/{len(files)}]"
        if result.status == STATUS_ERROR:
            print(f"{prefix} ERROR   {result.file}: {result.error} ({result.elapsed_ms:.0f}ms)", file=sys.stderr)
        elif result.status == STATUS_CORRUPT:
            print(
                f"{prefix} CORRUPT {result.file}: {result.corrupt_row_pct:.1f}% corrupt rows "
                f"({result.width}x{result.height}, {result.elapsed_ms:.0f}ms)",
                file=sys.stderr,
            )
        else:
            label = f" [{result.placeholder}]" if result.placeholder else ""
            print(
                f"{prefix} OK      {result.file}{label} "
                f"({result.width}x{result.height}, {result.elapsed_ms:.0f}ms)",
                file=sys.stderr,
            )

    counts = {status: 0 for status in (STATUS_OK, STATUS_ERROR, STATUS_CORRUPT)}
    for result in results:
        counts[result.status] += 1
    print(
        f"Total: {len(results)}  OK: {counts[STATUS_OK]}  "
        f"Error: {counts[STATUS_ERROR]}  Corrupt: {counts[STATUS_CORRUPT]}",
        file=sys.stderr,
    )

    if args.report:
        write_report(results, args.report)
        print(f"Report written to {args.report}", file=sys.stderr)

    return 1 if counts[STATUS_ERROR] else 0


def main() -> NoReturn:
    """Main entry point."""
    args = parse_args()

    # Configure logging
    log_level = logging.DEBUG if args.verbose else logging.WARNING
    logging.basicConfig(level=log_level, format="%(levelname)s: %(message)s")

    sys.exit(run(args))


if __name__ == "__main__":
    main()
