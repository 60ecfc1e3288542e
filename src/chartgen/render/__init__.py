"""Drawing contexts and output rendering (PDF and offscreen images)."""

from chartgen.render.context import DrawingContext
from chartgen.render.image import ImageDrawingContext, new_canvas_image, save_image_to_bytes
from chartgen.render.pdf import PDFDrawingContext, PDFRenderer
from chartgen.render.printing import PrintCompositor

__all__ = [
    "DrawingContext",
    "ImageDrawingContext",
    "PDFDrawingContext",
    "PDFRenderer",
    "PrintCompositor",
    "new_canvas_image",
    "save_image_to_bytes",
]
