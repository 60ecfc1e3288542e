"""Utility modules."""

from chartgen.utils.dimensions import (
    EMPTY_BOX,
    PAGE_SIZES,
    ZERO_SIZE,
    LayoutBox,
    Size,
    get_page_size,
    inches_to_points,
)
from chartgen.utils.text import ReportLabTextMeasurer, TextMeasurer, format_stat_value

__all__ = [
    "EMPTY_BOX",
    "PAGE_SIZES",
    "ZERO_SIZE",
    "LayoutBox",
    "ReportLabTextMeasurer",
    "Size",
    "TextMeasurer",
    "format_stat_value",
    "get_page_size",
    "inches_to_points",
]
