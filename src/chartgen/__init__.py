"""Chart composition and layout: title, legend packing and printing."""

__version__ = "0.1.0"

# High-level Python API
from chartgen.api import (
    Series,
    build_chart,
    render_chart_to_image,
    render_charts_to_pdf,
)
from chartgen.config import ChartConfig, ChartDocument, ChartTheme, load_config, load_document
from chartgen.design.chart import ChartComposer
from chartgen.errors import (
    CellNotFoundError,
    ChartError,
    InvalidArgumentError,
    UnsupportedOperationError,
)
from chartgen.render.printing import PrintCompositor

__all__ = [
    "CellNotFoundError",
    "ChartComposer",
    "ChartConfig",
    "ChartDocument",
    "ChartError",
    "ChartTheme",
    "InvalidArgumentError",
    "PrintCompositor",
    "Series",
    "UnsupportedOperationError",
    "build_chart",
    "load_config",
    "load_document",
    "render_chart_to_image",
    "render_charts_to_pdf",
]
