"""Compose a whole chart into an arbitrary drawing context."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from PIL import Image

from chartgen.design.base import paint_region
from chartgen.errors import UnsupportedOperationError
from chartgen.render.context import DrawingContext
from chartgen.render.image import ImageDrawingContext, new_canvas_image
from chartgen.utils.dimensions import LayoutBox

if TYPE_CHECKING:
    from chartgen.design.chart import ChartComposer

logger = logging.getLogger(__name__)

# Targets without a printing or offscreen pipeline
UNSUPPORTED_TARGETS = frozenset({"web"})

_IMAGE_FORMATS = {".png": "PNG", ".jpg": "JPEG", ".jpeg": "JPEG", ".bmp": "BMP", ".gif": "GIF", ".tif": "TIFF", ".tiff": "TIFF"}


class PrintCompositor:
    """
    Renders a composed chart at a target size.

    The chart is temporarily resized to the target, each visible region is
    painted clipped to its bounds with the origin moved to its top-left, and
    the paint listeners are replayed. The original size is restored even if
    a region fails to paint.
    """

    def __init__(self, composer: "ChartComposer", target: str | None = None) -> None:
        """
        Args:
            composer: Chart to render.
            target: Deployment target; defaults to the chart config's target.
        """
        self.composer = composer
        self.target = target if target is not None else composer.config.target

    def _check_supported(self, operation: str, gc: DrawingContext | None = None) -> None:
        if self.target in UNSUPPORTED_TARGETS:
            raise UnsupportedOperationError(f"{operation} is not supported on the '{self.target}' target")
        if gc is not None and not gc.supports_print:
            raise UnsupportedOperationError(f"{operation} is not supported by {type(gc).__name__}")

    def print_chart(self, gc: DrawingContext, target: LayoutBox | None = None) -> None:
        """
        Paint the full chart into gc.

        Args:
            gc: Destination context.
            target: Rectangle to print into; defaults to the chart's current size.

        Raises:
            UnsupportedOperationError: On a target that cannot print. Nothing
                is resized or drawn in that case.
        """
        self._check_supported("Printing", gc)
        composer = self.composer
        original = composer.size
        if target is None:
            target = LayoutBox(0, 0, original.width, original.height)

        with gc.saved_state():
            gc.translate(target.x, target.y)
            try:
                composer.set_size(target.width, target.height)
                gc.set_fill_color(composer.theme.chart_background)
                gc.fill_rect(0, 0, target.width, target.height)
                for region in composer.regions:
                    if region.visible:
                        paint_region(gc, region)
                composer.notify_paint_listeners(gc)
            finally:
                composer.set_size(original.width, original.height)
        logger.debug(f"Printed chart at {target.width}x{target.height}")

    def render_offscreen_image(self, image: Image.Image) -> Image.Image:
        """
        Render the chart into a Pillow image, scaled to the image's size.

        Non-RGBA images are rendered through an RGBA copy and pasted back.

        Raises:
            UnsupportedOperationError: On a target without offscreen rendering.
        """
        self._check_supported("Offscreen rendering")
        box = LayoutBox(0, 0, image.width, image.height)
        if image.mode == "RGBA":
            self.print_chart(ImageDrawingContext(image), box)
            return image

        work = image.convert("RGBA")
        self.print_chart(ImageDrawingContext(work), box)
        image.paste(work.convert(image.mode))
        return image

    def save(self, path: Path, format: str | None = None) -> Path:
        """
        Save the chart to a file.

        Args:
            path: Output path.
            format: "PDF" or a Pillow image format; guessed from the suffix if None.

        Returns:
            The path written.

        Raises:
            UnsupportedOperationError: On a target that cannot print.
        """
        self._check_supported("Saving")
        path = Path(path)
        if format is None:
            suffix = path.suffix.lower()
            format = "PDF" if suffix == ".pdf" else _IMAGE_FORMATS.get(suffix, "PNG")
        format = format.upper()

        if format == "PDF":
            # pdf imports this module
            from chartgen.render.pdf import PDFRenderer

            PDFRenderer().render_chart(self.composer, path)
            return path

        size = self.composer.size
        image = new_canvas_image(size.width, size.height, self.composer.theme.chart_background)
        self.render_offscreen_image(image)
        if format in ("JPEG", "JPG", "BMP"):
            image = image.convert("RGB")
        image.save(path, format=format)
        logger.info(f"Wrote {format} image to {path}")
        return path
