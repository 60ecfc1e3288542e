"""Series models and the high-level chart API."""

from chartgen.api.models import Series, SeriesSet
from chartgen.api.builder import (
    build_chart,
    legend_layout,
    render_chart_to_image,
    render_charts_to_pdf,
    series_from_config,
)

__all__ = [
    "Series",
    "SeriesSet",
    "build_chart",
    "legend_layout",
    "render_chart_to_image",
    "render_charts_to_pdf",
    "series_from_config",
]
