"""Plot area placeholder and the x axes the legend and stacking consult."""

import logging
from dataclasses import dataclass
from typing import Iterable, Iterator

from chartgen.api.models import Series
from chartgen.config import ChartTheme
from chartgen.design.base import ChangeCallback, ChartRegion
from chartgen.render.context import DrawingContext
from chartgen.utils.dimensions import Size

logger = logging.getLogger(__name__)


@dataclass
class Axis:
    """An x axis: its id, whether it holds category values, and its data range."""

    id: int
    category_enabled: bool = False
    lower: float = 0.0
    upper: float = 0.0

    def refresh(self, series: Iterable[Series]) -> None:
        """Recompute the value range from the series plotted against this axis."""
        values = [v for s in series if s.x_axis_id == self.id for v in (s.stack_data or s.y_values)]
        if values:
            self.lower, self.upper = min(values), max(values)
        else:
            self.lower = self.upper = 0.0


class AxisSet:
    """X axes by id. Unknown ids get a continuous axis on first use."""

    def __init__(self, category_axes: dict[int, bool] | None = None) -> None:
        self._axes: dict[int, Axis] = {}
        for axis_id, category in (category_axes or {}).items():
            self._axes[axis_id] = Axis(axis_id, category)

    def __iter__(self) -> Iterator[Axis]:
        return iter(self._axes[k] for k in sorted(self._axes))

    def get_x_axis(self, axis_id: int) -> Axis:
        if axis_id not in self._axes:
            self._axes[axis_id] = Axis(axis_id)
        return self._axes[axis_id]

    def is_category_axis(self, axis_id: int) -> bool:
        return self.get_x_axis(axis_id).category_enabled

    def refresh(self, series: Iterable[Series]) -> None:
        series = list(series)
        for s in series:
            self.get_x_axis(s.x_axis_id)
        for axis in self:
            axis.refresh(series)
        logger.debug(f"Refreshed {len(self._axes)} axis(es)")


class PlotAreaRegion(ChartRegion):
    """
    The area series are plotted in.

    Takes whatever space the title and legend leave; draws its background
    and border only.
    """

    def __init__(self, theme: ChartTheme, on_change: ChangeCallback | None = None) -> None:
        super().__init__("plot_area", on_change)
        self.theme = theme

    def compute_footprint(self, available: Size) -> Size:
        self.footprint = available
        return available

    def paint(self, gc: DrawingContext) -> None:
        width, height = self.bounds.width, self.bounds.height
        gc.set_fill_color(self.theme.plot_background)
        gc.fill_rect(0, 0, width, height)
        gc.set_line_width(1)
        gc.set_line_style("solid")
        gc.set_stroke_color(self.theme.legend_frame)
        gc.stroke_rect(0, 0, width, height)
