"""Data models for plottable series."""

import logging
from dataclasses import dataclass, field
from typing import Callable, Iterator

from chartgen.errors import InvalidArgumentError
from chartgen.types import LineStyle, RGBColor, SeriesKind, SymbolType

logger = logging.getLogger(__name__)


@dataclass
class Series:
    """
    A plottable series, as seen by the legend and layout code.

    Series are owned by the data layer; layout only reads them.
    """

    id: str
    description: str | None = None
    kind: SeriesKind = "line"
    x_axis_id: int = 0
    visible_in_legend: bool = True
    stack_enabled: bool = False
    y_values: list[float] = field(default_factory=list)
    color: RGBColor = (0.0, 0.0, 1.0)  # line color or bar color
    line_style: LineStyle = "solid"
    symbol_type: SymbolType = "circle"
    symbol_color: RGBColor | None = None
    symbol_size: float = 4.0
    labels: list[str] | None = None  # circular series sub-labels
    colors: list[RGBColor] | None = None  # circular series sub-label colors
    stack_data: list[float] | None = field(default=None, repr=False)

    @property
    def legend_label(self) -> str:
        """Label shown in the legend; falls back to the id."""
        return self.description if self.description is not None else self.id

    @property
    def is_circular(self) -> bool:
        return self.kind == "circular"

    def is_valid_stack_series(self) -> bool:
        """Whether the series takes part in stacking (enabled, has data, not circular)."""
        return self.stack_enabled and not self.is_circular and bool(self.y_values)

    # ------------------------------------------------------------------
    # Statistics shown by the extended legend
    # ------------------------------------------------------------------

    @property
    def cur_y(self) -> float:
        return self.y_values[-1] if self.y_values else 0.0

    @property
    def min_y(self) -> float:
        return min(self.y_values) if self.y_values else 0.0

    @property
    def max_y(self) -> float:
        return max(self.y_values) if self.y_values else 0.0

    @property
    def avg_y(self) -> float:
        return sum(self.y_values) / len(self.y_values) if self.y_values else 0.0


class SeriesSet:
    """Registered series in registration order, keyed by unique id."""

    def __init__(self) -> None:
        self._series: dict[str, Series] = {}

    def __iter__(self) -> Iterator[Series]:
        return iter(self._series.values())

    def __len__(self) -> int:
        return len(self._series)

    def __contains__(self, series_id: object) -> bool:
        return series_id in self._series

    @property
    def series(self) -> list[Series]:
        return list(self._series.values())

    def get(self, series_id: str) -> Series | None:
        return self._series.get(series_id)

    def add(self, series: Series) -> Series:
        """
        Register a series.

        Raises:
            InvalidArgumentError: If the id is blank or already registered.
        """
        if not series.id or not series.id.strip():
            raise InvalidArgumentError("Series id must not be blank")
        if series.id in self._series:
            raise InvalidArgumentError(f"Series '{series.id}' is already registered")
        self._series[series.id] = series
        return series

    def remove(self, series_id: str) -> Series:
        """
        Unregister a series.

        Raises:
            InvalidArgumentError: If no series has the id.
        """
        try:
            return self._series.pop(series_id)
        except KeyError:
            raise InvalidArgumentError(f"Series '{series_id}' is not registered") from None

    def update_stack_data(self, is_category_axis: Callable[[int], bool]) -> None:
        """
        Recompute cumulative stack data.

        For every x axis with categorical values, valid stacked series are
        accumulated in registration order; each gets the running totals as its
        stack_data. Everything else has its stack_data cleared.
        """
        totals: dict[int, list[float]] = {}
        for series in self._series.values():
            if not (series.is_valid_stack_series() and is_category_axis(series.x_axis_id)):
                series.stack_data = None
                continue
            running = totals.setdefault(series.x_axis_id, [])
            if len(running) < len(series.y_values):
                running.extend([0.0] * (len(series.y_values) - len(running)))
            for i, value in enumerate(series.y_values):
                running[i] += value
            series.stack_data = running[: len(series.y_values)]
        logger.debug(f"Stack data updated for {len(totals)} axis(es)")
