"""Pytest fixtures and fakes shared across chartgen tests."""

from __future__ import annotations

from typing import Sequence

import pytest

from chartgen.config import ChartConfig
from chartgen.design.chart import ChartComposer
from chartgen.fonts import Font
from chartgen.render.context import DrawingContext
from chartgen.types import LineStyle, RGBColor
from chartgen.utils.dimensions import LayoutBox

CHAR_WIDTH = 6
LINE_HEIGHT = 10


class FixedWidthMeasurer:
    """Every character is CHAR_WIDTH wide; every line is LINE_HEIGHT tall."""

    def __init__(self) -> None:
        self.calls: list[str] = []

    def measure(self, font: Font, text: str) -> tuple[float, float]:
        self.calls.append(text)
        return (float(len(text) * CHAR_WIDTH), float(LINE_HEIGHT))


class RecordingContext(DrawingContext):
    """Records every call as (name, args) and tracks state depth and transform."""

    def __init__(self, supports_print: bool = True, fail_on_text: str | None = None) -> None:
        self.supports_print = supports_print
        self.fail_on_text = fail_on_text
        self.calls: list[tuple] = []
        self.depth = 0
        self.offset = (0.0, 0.0)
        self.rotation = 0.0
        self._stack: list[tuple] = []

    def names(self) -> list[str]:
        return [call[0] for call in self.calls]

    def strings(self) -> list[str]:
        return [call[1] for call in self.calls if call[0] == "draw_string"]

    def save_state(self) -> None:
        self.calls.append(("save_state",))
        self._stack.append((self.offset, self.rotation))
        self.depth += 1

    def restore_state(self) -> None:
        self.calls.append(("restore_state",))
        self.offset, self.rotation = self._stack.pop()
        self.depth -= 1

    def translate(self, dx: float, dy: float) -> None:
        self.calls.append(("translate", dx, dy))
        self.offset = (self.offset[0] + dx, self.offset[1] + dy)

    def rotate(self, degrees: float) -> None:
        self.calls.append(("rotate", degrees))
        self.rotation += degrees

    def clip_rect(self, box: LayoutBox) -> None:
        self.calls.append(("clip_rect", box))

    def set_font(self, font: Font) -> None:
        self.calls.append(("set_font", font))

    def set_fill_color(self, color: RGBColor) -> None:
        self.calls.append(("set_fill_color", color))

    def set_stroke_color(self, color: RGBColor) -> None:
        self.calls.append(("set_stroke_color", color))

    def set_line_width(self, width: float) -> None:
        self.calls.append(("set_line_width", width))

    def set_line_style(self, style: LineStyle) -> None:
        self.calls.append(("set_line_style", style))

    def fill_rect(self, x: float, y: float, width: float, height: float) -> None:
        self.calls.append(("fill_rect", x, y, width, height))

    def stroke_rect(self, x: float, y: float, width: float, height: float) -> None:
        self.calls.append(("stroke_rect", x, y, width, height))

    def draw_line(self, x1: float, y1: float, x2: float, y2: float) -> None:
        self.calls.append(("draw_line", x1, y1, x2, y2))

    def fill_oval(self, x: float, y: float, width: float, height: float) -> None:
        self.calls.append(("fill_oval", x, y, width, height))

    def fill_polygon(self, points: Sequence[tuple[float, float]]) -> None:
        self.calls.append(("fill_polygon", list(points)))

    def draw_string(self, text: str, x: float, y: float) -> None:
        if self.fail_on_text is not None and text == self.fail_on_text:
            raise RuntimeError(f"cannot draw {text!r}")
        self.calls.append(("draw_string", text, x, y))


@pytest.fixture
def measurer() -> FixedWidthMeasurer:
    """Return a fresh fixed-width text measurer."""

    return FixedWidthMeasurer()


@pytest.fixture
def gc() -> RecordingContext:
    """Return a recording drawing context."""

    return RecordingContext()


@pytest.fixture
def composer(measurer) -> ChartComposer:
    """Return a 400x300 composer with category axis 0, measured at fixed width."""

    return ChartComposer(ChartConfig(width=400, height=300), measurer, category_axes={0: True})
