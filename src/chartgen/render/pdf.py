"""PDF generation using ReportLab."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Sequence

from reportlab.pdfgen import canvas

from chartgen.fonts import Font
from chartgen.render.context import DASH_PATTERNS, DrawingContext
from chartgen.render.printing import PrintCompositor
from chartgen.types import LineStyle, RGBColor
from chartgen.utils.dimensions import LayoutBox, get_page_size, inches_to_points
from chartgen.utils.text import ascent

if TYPE_CHECKING:
    from chartgen.design.chart import ChartComposer

logger = logging.getLogger(__name__)


class PDFDrawingContext(DrawingContext):
    """
    DrawingContext over a ReportLab canvas.

    The canvas is flipped on construction so user space has its origin at the
    top-left of the page and y grows downwards, like every other context.
    Text is flipped back locally when drawn.
    """

    def __init__(self, c: canvas.Canvas, page_height: float) -> None:
        self.canvas = c
        c.translate(0, page_height)
        c.scale(1, -1)
        self._font = Font()
        self._fonts: list[Font] = []

    def save_state(self) -> None:
        self.canvas.saveState()
        self._fonts.append(self._font)

    def restore_state(self) -> None:
        self.canvas.restoreState()
        self._font = self._fonts.pop()

    def translate(self, dx: float, dy: float) -> None:
        self.canvas.translate(dx, dy)

    def rotate(self, degrees: float) -> None:
        # In the flipped user space a positive ReportLab angle turns clockwise
        self.canvas.rotate(degrees)

    def clip_rect(self, box: LayoutBox) -> None:
        path = self.canvas.beginPath()
        path.rect(box.x, box.y, box.width, box.height)
        self.canvas.clipPath(path, stroke=0, fill=0)

    def set_font(self, font: Font) -> None:
        self._font = font
        self.canvas.setFont(font.face_name, font.size)

    def set_fill_color(self, color: RGBColor) -> None:
        self.canvas.setFillColorRGB(*color)

    def set_stroke_color(self, color: RGBColor) -> None:
        self.canvas.setStrokeColorRGB(*color)

    def set_line_width(self, width: float) -> None:
        self.canvas.setLineWidth(width)

    def set_line_style(self, style: LineStyle) -> None:
        pattern = DASH_PATTERNS.get(style, ())
        if pattern:
            self.canvas.setDash(list(pattern))
        else:
            self.canvas.setDash()

    def fill_rect(self, x: float, y: float, width: float, height: float) -> None:
        self.canvas.rect(x, y, width, height, stroke=0, fill=1)

    def stroke_rect(self, x: float, y: float, width: float, height: float) -> None:
        self.canvas.rect(x, y, width, height, stroke=1, fill=0)

    def draw_line(self, x1: float, y1: float, x2: float, y2: float) -> None:
        self.canvas.line(x1, y1, x2, y2)

    def fill_oval(self, x: float, y: float, width: float, height: float) -> None:
        self.canvas.ellipse(x, y, x + width, y + height, stroke=0, fill=1)

    def fill_polygon(self, points: Sequence[tuple[float, float]]) -> None:
        if len(points) < 3:
            return
        path = self.canvas.beginPath()
        path.moveTo(*points[0])
        for point in points[1:]:
            path.lineTo(*point)
        path.close()
        self.canvas.drawPath(path, stroke=0, fill=1)

    def draw_string(self, text: str, x: float, y: float) -> None:
        c = self.canvas
        c.saveState()
        c.translate(x, y + ascent(self._font))
        c.scale(1, -1)
        c.setFont(self._font.face_name, self._font.size)
        c.drawString(0, 0, text)
        c.restoreState()


class PDFRenderer:
    """Renders composed charts to PDF using ReportLab."""

    def __init__(self, page_size: str | None = None, margin: float = 0.5) -> None:
        """
        Initialize PDF renderer.

        Args:
            page_size: Page size name (e.g., "letter", "a4"). If None, each
                       page is exactly the size of its chart.
            margin: Page margin in inches when a page size is given.
        """
        self.page_size = page_size
        self.margin = margin

    def _page_layout(self, composer: "ChartComposer") -> tuple[float, float, LayoutBox]:
        """Page width/height in points and the box the chart is printed into."""
        width, height = composer.size.width, composer.size.height
        if self.page_size is None:
            return width, height, LayoutBox(0, 0, width, height)

        ps = get_page_size(self.page_size)
        page_w, page_h = inches_to_points(ps.width), inches_to_points(ps.height)
        margin = inches_to_points(self.margin)
        target_w = min(width, page_w - 2 * margin)
        target_h = min(height, page_h - 2 * margin)
        # Centered horizontally, top-aligned
        return page_w, page_h, LayoutBox((page_w - target_w) / 2, margin, target_w, target_h)

    def render_chart(self, composer: "ChartComposer", output_path: Path) -> None:
        """
        Render a chart to a PDF file.

        Args:
            composer: Chart to render.
            output_path: Path to output PDF file.
        """
        self.render_charts([composer], output_path)

    def render_charts(self, composers: list["ChartComposer"], output_path: Path) -> None:
        """
        Render several charts to one PDF file, one chart per page.

        Args:
            composers: Charts to render.
            output_path: Path to output PDF file.
        """
        c = canvas.Canvas(str(output_path))
        for index, composer in enumerate(composers):
            page_w, page_h, target = self._page_layout(composer)
            c.setPageSize((page_w, page_h))
            gc = PDFDrawingContext(c, page_h)
            PrintCompositor(composer).print_chart(gc, target)
            if index + 1 < len(composers):
                c.showPage()
        c.save()
        logger.info(f"Wrote {len(composers)} chart(s) to {output_path}")
