"""Text measurement and value formatting."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol

from reportlab.pdfbase import pdfmetrics

if TYPE_CHECKING:
    from chartgen.fonts import Font

logger = logging.getLogger(__name__)


class TextMeasurer(Protocol):
    """Returns the rendered extent of a string in device units."""

    def measure(self, font: Font, text: str) -> tuple[float, float]:
        """
        Measure text.

        Args:
            font: Font the text is drawn with.
            text: Text to measure. The empty string measures the line height
                  with zero width.

        Returns:
            (width, height) in device units.
        """
        ...


class ReportLabTextMeasurer:
    """
    Measures text with ReportLab font metrics.

    Widths come from the face's advance widths; the height is the full line
    box (ascent minus descent), so every string of a font measures the same
    height, including the empty string.
    """

    def measure(self, font: Font, text: str) -> tuple[float, float]:
        face = font.face_name
        width = pdfmetrics.stringWidth(text, face, font.size) if text else 0.0
        return (width, line_height(font))


def line_height(font: Font) -> float:
    """Height of one line of text in the font (ascent + descent)."""
    ascent, descent = pdfmetrics.getAscentDescent(font.face_name, font.size)
    return ascent - descent


def ascent(font: Font) -> float:
    """Distance from the top of the line box to the baseline."""
    return pdfmetrics.getAscentDescent(font.face_name, font.size)[0]


# ============================================================================
# Stat value formatting
# ============================================================================

_MULTIPLIERS = (
    (1e12, "T"),
    (1e9, "G"),
    (1e6, "M"),
    (1e3, "K"),
)


def round_decimal_value(value: float, max_precision: int = 3) -> str:
    """
    Format a value with at most `max_precision` fraction digits.

    Trailing zeros are dropped and thousands are grouped, e.g. 1234.5 → "1,234.5".
    """
    text = f"{value:,.{max_precision}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return "0" if text in ("-0", "") else text


def format_stat_value(value: float, use_multipliers: bool = True) -> str:
    """
    Format a series statistic for the extended legend columns.

    With multipliers the value is scaled to K/M/G/T and rounded to three
    decimals ("1.235 K"); without them the plain float text is used.
    """
    if not use_multipliers:
        return repr(float(value))

    magnitude = abs(value)
    for threshold, suffix in _MULTIPLIERS:
        if magnitude >= threshold:
            return f"{round_decimal_value(value / threshold)} {suffix}"
    return round_decimal_value(value)
