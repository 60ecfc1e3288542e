"""Drawing context abstraction shared by the PDF and raster backends."""

from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Iterator, Sequence

from chartgen.fonts import Font
from chartgen.types import LineStyle, RGBColor
from chartgen.utils.dimensions import LayoutBox

# Dash patterns in device units
DASH_PATTERNS: dict[str, tuple[float, ...]] = {
    "solid": (),
    "dash": (6, 3),
    "dot": (1, 2),
    "dashdot": (6, 3, 1, 3),
}


class DrawingContext(ABC):
    """
    The drawing operations regions paint with.

    Coordinates are device units with the origin at the top-left and y
    growing downwards. Transform, clip, font, colors and line settings are
    part of the graphics state saved by save_state() and restored by
    restore_state().
    """

    supports_print: bool = True
    """Whether a whole chart can be composed into this context."""

    @contextmanager
    def saved_state(self) -> Iterator["DrawingContext"]:
        """Scope in which state changes are undone on exit, including on errors."""
        self.save_state()
        try:
            yield self
        finally:
            self.restore_state()

    # ------------------------------------------------------------------
    # Graphics state
    # ------------------------------------------------------------------

    @abstractmethod
    def save_state(self) -> None:
        pass

    @abstractmethod
    def restore_state(self) -> None:
        pass

    @abstractmethod
    def translate(self, dx: float, dy: float) -> None:
        pass

    @abstractmethod
    def rotate(self, degrees: float) -> None:
        """Rotate the user space; positive angles turn clockwise on screen."""

    @abstractmethod
    def clip_rect(self, box: LayoutBox) -> None:
        """Intersect the clip region with a rectangle in user space."""

    @abstractmethod
    def set_font(self, font: Font) -> None:
        pass

    @abstractmethod
    def set_fill_color(self, color: RGBColor) -> None:
        pass

    @abstractmethod
    def set_stroke_color(self, color: RGBColor) -> None:
        pass

    @abstractmethod
    def set_line_width(self, width: float) -> None:
        pass

    @abstractmethod
    def set_line_style(self, style: LineStyle) -> None:
        pass

    # ------------------------------------------------------------------
    # Primitives
    # ------------------------------------------------------------------

    @abstractmethod
    def fill_rect(self, x: float, y: float, width: float, height: float) -> None:
        pass

    @abstractmethod
    def stroke_rect(self, x: float, y: float, width: float, height: float) -> None:
        pass

    @abstractmethod
    def draw_line(self, x1: float, y1: float, x2: float, y2: float) -> None:
        pass

    @abstractmethod
    def fill_oval(self, x: float, y: float, width: float, height: float) -> None:
        """Fill the ellipse inscribed in the rectangle."""

    @abstractmethod
    def fill_polygon(self, points: Sequence[tuple[float, float]]) -> None:
        pass

    @abstractmethod
    def draw_string(self, text: str, x: float, y: float) -> None:
        """Draw text with the top-left of its line box at (x, y)."""
