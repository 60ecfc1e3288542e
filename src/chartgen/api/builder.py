"""High-level API for programmatic chart creation."""

import logging
from pathlib import Path

from chartgen.api.models import Series
from chartgen.config import ChartDocument, ChartTheme, SeriesConfig
from chartgen.design.chart import ChartComposer
from chartgen.render.pdf import PDFRenderer
from chartgen.render.printing import PrintCompositor
from chartgen.utils.text import TextMeasurer

logger = logging.getLogger(__name__)


def series_from_config(config: SeriesConfig, index: int, theme: ChartTheme) -> Series:
    """
    Turn a series from a chart document into a Series.

    Missing colors are taken from the theme palette: the series color by
    registration index, circular sub-label colors by sub-label index.
    """
    colors = None
    if config.labels is not None:
        given = config.colors or []
        colors = [given[i] if i < len(given) else theme.palette_color(i) for i in range(len(config.labels))]

    return Series(
        id=config.id,
        description=config.description,
        kind=config.kind,
        x_axis_id=config.x_axis,
        visible_in_legend=config.visible_in_legend,
        stack_enabled=config.stack,
        y_values=list(config.values),
        color=config.color or theme.palette_color(index),
        line_style=config.line_style,
        symbol_type=config.symbol,
        labels=list(config.labels) if config.labels is not None else None,
        colors=colors,
    )


def build_chart(document: ChartDocument, measurer: TextMeasurer | None = None) -> ChartComposer:
    """
    Create a composed chart from a chart document.

    All series are added in one batch, so the chart is laid out once.

    Args:
        document: Chart settings, axes and series (from load_document()).
        measurer: Optional text measurer; ReportLab font metrics by default.

    Returns:
        ChartComposer ready to be painted, printed or saved.

    Raises:
        InvalidArgumentError: If two series share an id or an id is blank.

    Example:
        ```python
        from chartgen import build_chart, load_document

        composer = build_chart(load_document(Path("sales.toml")))
        composer.legend.get_bounds("revenue")
        ```
    """
    composer = ChartComposer(document.chart, measurer, category_axes=document.axes)
    composer.suspend_updates(True)
    try:
        for index, series_config in enumerate(document.series):
            composer.add_series(series_from_config(series_config, index, composer.theme))
    finally:
        composer.suspend_updates(False)
    logger.info(f"Built chart with {len(composer.series)} series")
    return composer


def render_charts_to_pdf(
    composers: list[ChartComposer],
    output_path: Path,
    page_size: str | None = None,
) -> None:
    """
    Render charts to a PDF file, one chart per page.

    Args:
        composers: Charts to render.
        output_path: Path to output PDF file.
        page_size: Page size name ("letter", "a4", ...). If None, each page
                   is the size of its chart.
    """
    renderer = PDFRenderer(page_size=page_size)
    renderer.render_charts(composers, output_path)


def render_chart_to_image(composer: ChartComposer, output_path: Path, format: str | None = None) -> Path:
    """
    Render a chart to an image file (format from the suffix unless given).

    Raises:
        UnsupportedOperationError: If the chart's target cannot render offscreen.
    """
    return PrintCompositor(composer).save(output_path, format)


def legend_layout(composer: ChartComposer) -> dict:
    """Legend footprint and packed cells as plain data."""
    layout = composer.legend.layout
    return {
        "position": composer.legend.position,
        "footprint": {"width": layout.footprint.width, "height": layout.footprint.height},
        "bounds": {
            "x": composer.legend.bounds.x,
            "y": composer.legend.bounds.y,
            "width": composer.legend.bounds.width,
            "height": composer.legend.bounds.height,
        },
        "cells": {
            key: {"x": box.x, "y": box.y, "width": box.width, "height": box.height}
            for key, box in layout.cells.items()
        },
    }
