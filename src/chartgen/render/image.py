"""Offscreen raster rendering using Pillow."""

from __future__ import annotations

import math
from functools import lru_cache
from io import BytesIO
from typing import Callable, Sequence

from PIL import Image, ImageDraw, ImageFont

from chartgen.errors import InvalidArgumentError
from chartgen.fonts import Font, get_font_path
from chartgen.render.context import DrawingContext
from chartgen.types import LineStyle, RGBColor
from chartgen.utils.dimensions import LayoutBox

# Affine transform (a, b, c, d, e, f): x' = a*x + c*y + e, y' = b*x + d*y + f
Matrix = tuple[float, float, float, float, float, float]
IDENTITY: Matrix = (1.0, 0.0, 0.0, 1.0, 0.0, 0.0)

# Device-space clip as (x0, y0, x1, y1), integer pixels
ClipBox = tuple[int, int, int, int]


def _to_rgba(color: RGBColor) -> tuple[int, int, int, int]:
    r, g, b = (max(0, min(255, int(round(channel * 255)))) for channel in color)
    return (r, g, b, 255)


@lru_cache(maxsize=64)
def _load_font(face_name: str, size: float) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    pixel_size = max(1, int(round(size)))
    font_path = get_font_path(face_name)
    if font_path is not None:
        return ImageFont.truetype(str(font_path), size=pixel_size)
    return ImageFont.load_default(size=pixel_size)


def _line_metrics(font: ImageFont.FreeTypeFont | ImageFont.ImageFont) -> tuple[int, int]:
    """Ascent and descent of the font in pixels."""
    if isinstance(font, ImageFont.FreeTypeFont):
        return font.getmetrics()
    _, top, _, bottom = font.getbbox("Ag")
    return (max(1, int(-top) if top < 0 else int(bottom)), 0)


class ImageDrawingContext(DrawingContext):
    """
    DrawingContext over an RGBA Pillow image.

    Transforms are full affine matrices. Every primitive is drawn onto a
    transparent layer the size of the current clip and then composited, so
    clipping is exact for axis-aligned clips (which is all the chart uses).
    Dash patterns are not reproduced; lines are drawn solid.
    """

    def __init__(self, image: Image.Image) -> None:
        if image.mode != "RGBA":
            raise InvalidArgumentError(f"ImageDrawingContext needs an RGBA image, got {image.mode}")
        self.image = image
        self._matrix: Matrix = IDENTITY
        self._clip: ClipBox = (0, 0, image.width, image.height)
        self._font = Font()
        self._fill = (0, 0, 0, 255)
        self._stroke = (0, 0, 0, 255)
        self._line_width = 1.0
        self._stack: list[tuple] = []

    # ------------------------------------------------------------------
    # Graphics state
    # ------------------------------------------------------------------

    def save_state(self) -> None:
        self._stack.append(
            (self._matrix, self._clip, self._font, self._fill, self._stroke, self._line_width)
        )

    def restore_state(self) -> None:
        (self._matrix, self._clip, self._font, self._fill, self._stroke, self._line_width) = self._stack.pop()

    def translate(self, dx: float, dy: float) -> None:
        a, b, c, d, e, f = self._matrix
        self._matrix = (a, b, c, d, e + a * dx + c * dy, f + b * dx + d * dy)

    def rotate(self, degrees: float) -> None:
        rad = math.radians(degrees)
        cos, sin = math.cos(rad), math.sin(rad)
        a, b, c, d, e, f = self._matrix
        self._matrix = (a * cos + c * sin, b * cos + d * sin, c * cos - a * sin, d * cos - b * sin, e, f)

    def clip_rect(self, box: LayoutBox) -> None:
        xs, ys = zip(*self._corners(box.x, box.y, box.width, box.height))
        x0, y0, x1, y1 = self._clip
        self._clip = (
            max(x0, int(math.floor(min(xs)))),
            max(y0, int(math.floor(min(ys)))),
            min(x1, int(math.ceil(max(xs)))),
            min(y1, int(math.ceil(max(ys)))),
        )

    def set_font(self, font: Font) -> None:
        self._font = font

    def set_fill_color(self, color: RGBColor) -> None:
        self._fill = _to_rgba(color)

    def set_stroke_color(self, color: RGBColor) -> None:
        self._stroke = _to_rgba(color)

    def set_line_width(self, width: float) -> None:
        self._line_width = width

    def set_line_style(self, style: LineStyle) -> None:
        pass

    # ------------------------------------------------------------------
    # Primitives
    # ------------------------------------------------------------------

    def fill_rect(self, x: float, y: float, width: float, height: float) -> None:
        corners = self._corners(x, y, width, height)
        self._paint(lambda draw, shift: draw.polygon(shift(corners), fill=self._fill))

    def stroke_rect(self, x: float, y: float, width: float, height: float) -> None:
        corners = self._corners(x, y, width, height)
        self._paint(
            lambda draw, shift: draw.line(shift(corners + [corners[0]]), fill=self._stroke, width=self._pixel_width())
        )

    def draw_line(self, x1: float, y1: float, x2: float, y2: float) -> None:
        points = [self._apply(x1, y1), self._apply(x2, y2)]
        self._paint(lambda draw, shift: draw.line(shift(points), fill=self._stroke, width=self._pixel_width()))

    def fill_oval(self, x: float, y: float, width: float, height: float) -> None:
        xs, ys = zip(*self._corners(x, y, width, height))
        bbox = [(min(xs), min(ys)), (max(xs), max(ys))]
        self._paint(lambda draw, shift: draw.ellipse(shift(bbox), fill=self._fill))

    def fill_polygon(self, points: Sequence[tuple[float, float]]) -> None:
        if len(points) < 3:
            return
        device = [self._apply(px, py) for px, py in points]
        self._paint(lambda draw, shift: draw.polygon(shift(device), fill=self._fill))

    def draw_string(self, text: str, x: float, y: float) -> None:
        if not text:
            return
        font = _load_font(self._font.face_name, self._font.size)
        ascent, descent = _line_metrics(font)
        width = max(1, int(math.ceil(font.getlength(text))))
        mask = Image.new("L", (width, max(1, ascent + descent)), 0)
        ImageDraw.Draw(mask).text((0, 0), text, font=font, fill=255)

        a, b = self._matrix[0], self._matrix[1]
        angle = math.degrees(math.atan2(b, a))
        if abs(angle) > 1e-6:
            # Pillow turns counter-clockwise, user space turns clockwise
            mask = mask.rotate(-angle, expand=True, resample=Image.Resampling.BICUBIC)
        xs, ys = zip(*self._corners(x, y, width, ascent + descent))
        origin = (int(round(min(xs))), int(round(min(ys))))
        solid = Image.new("RGBA", mask.size, self._fill)

        x0, y0, x1, y1 = self._clip
        if x1 <= x0 or y1 <= y0:
            return
        layer = Image.new("RGBA", (x1 - x0, y1 - y0), (0, 0, 0, 0))
        layer.paste(solid, (origin[0] - x0, origin[1] - y0), mask)
        self.image.alpha_composite(layer, dest=(x0, y0))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _apply(self, x: float, y: float) -> tuple[float, float]:
        a, b, c, d, e, f = self._matrix
        return (a * x + c * y + e, b * x + d * y + f)

    def _corners(self, x: float, y: float, width: float, height: float) -> list[tuple[float, float]]:
        return [
            self._apply(x, y),
            self._apply(x + width, y),
            self._apply(x + width, y + height),
            self._apply(x, y + height),
        ]

    def _pixel_width(self) -> int:
        return max(1, int(round(self._line_width)))

    def _paint(self, draw_fn: Callable[[ImageDraw.ImageDraw, Callable], None]) -> None:
        """Run draw_fn on a clip-sized layer and composite it onto the image."""
        x0, y0, x1, y1 = self._clip
        if x1 <= x0 or y1 <= y0:
            return
        layer = Image.new("RGBA", (x1 - x0, y1 - y0), (0, 0, 0, 0))

        def shift(points: Sequence[tuple[float, float]]) -> list[tuple[float, float]]:
            return [(px - x0, py - y0) for px, py in points]

        draw_fn(ImageDraw.Draw(layer), shift)
        self.image.alpha_composite(layer, dest=(x0, y0))


def new_canvas_image(width: float, height: float, background: RGBColor = (1.0, 1.0, 1.0)) -> Image.Image:
    """Create an RGBA image for offscreen rendering."""
    return Image.new("RGBA", (max(1, int(round(width))), max(1, int(round(height)))), _to_rgba(background))


def save_image_to_bytes(img: Image.Image, format: str = "PNG") -> bytes:
    """
    Save PIL Image to bytes.

    Args:
        img: PIL Image object.
        format: Image format (PNG, JPEG, etc.).

    Returns:
        Image as bytes.
    """
    if format.upper() in ("JPEG", "JPG") and img.mode != "RGB":
        img = img.convert("RGB")
    buffer = BytesIO()
    img.save(buffer, format=format)
    return buffer.getvalue()
