# SPDX-License-Identifier: Apache-2.0
"""Placeholder thumbnails for documents that could not be rendered."""

from __future__ import annotations

import logging

from PIL import Image, ImageDraw

from doc_thumbnails.core.drawing import font_ascent, label_font, text_width
from doc_thumbnails.core.models import (
    PlaceholderLabel,
    PlaceholderSpec,
    Style,
    Thumbnail,
    canvas_size,
)

logger = logging.getLogger(__name__)

LABEL_COLOUR = (255, 255, 255)
MIN_LABEL_X = 2

PLACEHOLDER_BACKGROUNDS = {
    PlaceholderLabel.PASSWORD_PROTECTED: (200, 150, 0),  # amber
    PlaceholderLabel.UNSUPPORTED_FORMAT: (130, 130, 130),  # grey
    PlaceholderLabel.FILE_NOT_FOUND: (80, 80, 80),  # dark grey
    PlaceholderLabel.ERROR: (180, 40, 40),  # red
}

# Checked in order against the lowercased error text.
# NOTE: this matches message wording, not error types. Errors raised by this
# package are worded to match; third-party wording changes will silently
# fall through to the generic label.
_CLASSIFICATION_RULES: list[tuple[tuple[str, ...], PlaceholderLabel]] = [
    (("invalid password",), PlaceholderLabel.PASSWORD_PROTECTED),
    (("unsupported file format",), PlaceholderLabel.UNSUPPORTED_FORMAT),
    (("no such file", "not exist"), PlaceholderLabel.FILE_NOT_FOUND),
]


def placeholder_spec(label: PlaceholderLabel) -> PlaceholderSpec:
    return PlaceholderSpec(label=label, background=PLACEHOLDER_BACKGROUNDS[label])


def classify_error(error: BaseException) -> PlaceholderSpec:
    """Pick a placeholder label and colour for an error.

    Args:
        error: Any exception raised while generating a thumbnail.

    Returns:
        PlaceholderSpec; the generic "Error" spec when nothing matches.
    """
    message = str(error).lower()
    for needles, label in _CLASSIFICATION_RULES:
        if any(needle in message for needle in needles):
            return placeholder_spec(label)
    return placeholder_spec(PlaceholderLabel.ERROR)


def render_placeholder(
    spec: PlaceholderSpec,
    width: int,
    style: Style = Style.COMPOSITE,
) -> Thumbnail:
    """Render a labelled placeholder with the canonical size for ``style``.

    The label is centred horizontally, with its baseline half an ascent
    below the vertical centre. Labels wider than the canvas are clipped.

    Args:
        spec: Label and background colour.
        width: Requested thumbnail width.
        style: Style whose canvas size the placeholder must match.

    Returns:
        Placeholder Thumbnail.
    """
    if width <= 0:
        raise ValueError(f"Width must be positive: {width}")

    size = canvas_size(width, style)
    canvas = Image.new("RGBA", size, spec.background + (255,))

    label = spec.label.value
    font = label_font()
    ascent = font_ascent(font)
    canvas_width, canvas_height = size

    x = max((canvas_width - text_width(label, font)) // 2, MIN_LABEL_X)
    baseline = canvas_height // 2 + ascent // 2

    draw = ImageDraw.Draw(canvas)
    draw.text((x, baseline - ascent), label, fill=LABEL_COLOUR, font=font)

    return Thumbnail.from_canvas(canvas, style, placeholder_label=label)


def placeholder_for_label(
    label: PlaceholderLabel,
    width: int,
    style: Style = Style.COMPOSITE,
) -> Thumbnail:
    """Render the placeholder for ``label`` with its standard colour."""
    return render_placeholder(placeholder_spec(label), width, style)


def placeholder_for_error(
    error: BaseException,
    width: int,
    style: Style = Style.COMPOSITE,
) -> Thumbnail:
    """Classify ``error`` and render the matching placeholder."""
    spec = classify_error(error)
    logger.debug("Placeholder %r for %s: %s", spec.label.value, type(error).__name__, error)
    return render_placeholder(spec, width, style)
