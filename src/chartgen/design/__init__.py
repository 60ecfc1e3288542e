"""Chart regions, their layout and the composer."""

from chartgen.design.base import ChartRegion
from chartgen.design.chart import ChartComposer
from chartgen.design.regions.legend import LegendPacker, LegendRegion, sort_series
from chartgen.design.regions.title import TitleRegion

__all__ = [
    "ChartComposer",
    "ChartRegion",
    "LegendPacker",
    "LegendRegion",
    "TitleRegion",
    "sort_series",
]
