"""Chart title region."""

import logging

from chartgen.config import ChartTheme
from chartgen.design.base import ChangeCallback, ChartRegion
from chartgen.errors import InvalidArgumentError
from chartgen.fonts import Font
from chartgen.render.context import DrawingContext
from chartgen.types import RGBColor
from chartgen.utils.dimensions import ZERO_SIZE, Size
from chartgen.utils.text import TextMeasurer

logger = logging.getLogger(__name__)

DEFAULT_TEXT = ""


def validate_color(color: RGBColor) -> RGBColor:
    """
    Check an RGB color given as three 0-1 floats.

    Raises:
        InvalidArgumentError: If the color is malformed.
    """
    try:
        r, g, b = color
    except (TypeError, ValueError):
        raise InvalidArgumentError(f"Color must be an (r, g, b) tuple, got {color!r}") from None
    for channel in (r, g, b):
        if not isinstance(channel, (int, float)) or not 0.0 <= channel <= 1.0:
            raise InvalidArgumentError(f"Color channels must be in 0..1, got {color!r}")
    return (float(r), float(g), float(b))


def validate_font(font: Font) -> Font:
    """Reject fonts their owner has already disposed."""
    if font.is_disposed:
        raise InvalidArgumentError(f"Font {font.family} {font.size} has been disposed")
    return font


class TitleRegion(ChartRegion):
    """
    Single line of text above the chart, or rotated along its left edge.

    The footprint is the measured text extent, swapped when vertical, and
    (0, 0) when hidden or when the text is blank.
    """

    def __init__(
        self,
        measurer: TextMeasurer,
        theme: ChartTheme,
        text: str = DEFAULT_TEXT,
        on_change: ChangeCallback | None = None,
    ) -> None:
        super().__init__("title", on_change)
        self.measurer = measurer
        self.theme = theme
        self._text = text
        self._font = theme.title_font.to_font()
        self._foreground = theme.title_foreground
        self._visible = True
        self._vertical = False

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def text(self) -> str:
        return self._text

    @text.setter
    def text(self, value: str | None) -> None:
        self._text = DEFAULT_TEXT if value is None else value
        self.changed()

    @property
    def font(self) -> Font:
        return self._font

    @font.setter
    def font(self, value: Font | None) -> None:
        self._font = self.theme.title_font.to_font() if value is None else validate_font(value)
        self.changed()

    @property
    def foreground(self) -> RGBColor:
        return self._foreground

    @foreground.setter
    def foreground(self, value: RGBColor | None) -> None:
        self._foreground = self.theme.title_foreground if value is None else validate_color(value)

    @property
    def visible(self) -> bool:
        return self._visible

    @visible.setter
    def visible(self, value: bool) -> None:
        if self._visible == value:
            return
        self._visible = value
        self.changed()

    @property
    def vertical(self) -> bool:
        return self._vertical

    @vertical.setter
    def vertical(self, value: bool) -> None:
        if self._vertical == value:
            return
        self._vertical = value
        self.changed()

    def _has_content(self) -> bool:
        return self._visible and bool(self._text.strip())

    # ------------------------------------------------------------------
    # Layout and painting
    # ------------------------------------------------------------------

    def compute_footprint(self, available: Size) -> Size:
        if not self._has_content():
            self.footprint = ZERO_SIZE
            return self.footprint

        width, height = self.measurer.measure(self._font, self._text)
        self.footprint = Size(height, width) if self._vertical else Size(width, height)
        return self.footprint

    def paint(self, gc: DrawingContext) -> None:
        if not self._has_content():
            return

        with gc.saved_state():
            gc.set_font(self._font)
            gc.set_fill_color(self._foreground)
            if not self._vertical:
                gc.draw_string(self._text, 0, 0)
                return
            # Baseline runs bottom-to-top along the left edge
            gc.translate(0, self.bounds.height)
            gc.rotate(270)
            gc.draw_string(self._text, 0, 0)
