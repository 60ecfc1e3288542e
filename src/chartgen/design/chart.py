"""Chart composer: owns the regions and drives layout passes."""

import logging
from typing import Callable

from chartgen.api.models import Series, SeriesSet
from chartgen.config import ORIENTATIONS, ChartConfig, ChartTheme
from chartgen.design.base import ChartRegion, paint_region
from chartgen.design.layout import ArrangeFunc, arrange_regions
from chartgen.design.regions.legend import LegendRegion
from chartgen.design.regions.plot_area import AxisSet, PlotAreaRegion
from chartgen.design.regions.title import TitleRegion
from chartgen.errors import InvalidArgumentError
from chartgen.render.context import DrawingContext
from chartgen.types import Orientation
from chartgen.utils.dimensions import LayoutBox, Size
from chartgen.utils.text import ReportLabTextMeasurer, TextMeasurer

logger = logging.getLogger(__name__)

# Called after the regions are painted, with the context and the client area
PaintListener = Callable[[DrawingContext, LayoutBox], None]


class ChartComposer:
    """
    A chart: title, legend and plot area laid out inside a client area.

    Any change that affects layout calls update_layout(), which measures the
    title, packs the legend into what the title leaves, arranges the regions
    and refreshes the axes. Batches of changes can be wrapped in
    suspend_updates(True) / suspend_updates(False): work requested while
    suspended is only recorded, and resuming performs one layout pass and
    one stack data recompute.

    Example:
        composer = ChartComposer(ChartConfig(width=400, height=300))
        composer.suspend_updates(True)
        for s in series:
            composer.add_series(s)
        composer.suspend_updates(False)
    """

    def __init__(
        self,
        config: ChartConfig | None = None,
        measurer: TextMeasurer | None = None,
        arrange: ArrangeFunc = arrange_regions,
        category_axes: dict[int, bool] | None = None,
    ) -> None:
        """
        Initialize the composer.

        Args:
            config: Chart settings; defaults apply when None.
            measurer: Text measurer; ReportLab font metrics when None.
            arrange: Routine placing the sized regions in the client area.
            category_axes: X axis id -> whether the axis has category values.
        """
        self.config = config or ChartConfig()
        self.measurer = measurer or ReportLabTextMeasurer()
        self.arrange = arrange
        self.series = SeriesSet()
        self.axes = AxisSet(category_axes)
        self.on_redraw: Callable[[], None] | None = None

        self._orientation: Orientation = self.config.orientation
        self._use_multipliers = self.config.use_multipliers
        self._size = Size(self.config.width, self.config.height)
        self._suspended = False
        self._pending_layout = False
        self._pending_stack = False
        self._in_layout = False
        self._paint_listeners: list[PaintListener] = []

        theme = self.config.theme
        self.suspend_updates(True)
        self.title = TitleRegion(self.measurer, theme, self.config.title.text, on_change=self.update_layout)
        self.title.visible = self.config.title.visible
        self.title.vertical = self.config.title.vertical
        self.legend = LegendRegion(self, self.measurer, theme, on_change=self.update_layout)
        self.legend.visible = self.config.legend.visible
        self.legend.position = self.config.legend.position
        self.legend.extended = self.config.legend.extended
        self.plot_area = PlotAreaRegion(theme, on_change=self.update_layout)
        self.suspend_updates(False)

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def theme(self) -> ChartTheme:
        return self.config.theme

    @property
    def regions(self) -> list[ChartRegion]:
        """Regions in paint order."""
        return [self.plot_area, self.title, self.legend]

    @property
    def orientation(self) -> Orientation:
        return self._orientation

    @orientation.setter
    def orientation(self, value: str) -> None:
        if value in ORIENTATIONS:
            self._orientation = value  # type: ignore[assignment]
        else:
            logger.warning(f"Ignoring unknown orientation {value!r}")
        self.update_layout()

    @property
    def use_multipliers(self) -> bool:
        return self._use_multipliers

    @use_multipliers.setter
    def use_multipliers(self, value: bool) -> None:
        self._use_multipliers = value
        self.redraw()

    @property
    def size(self) -> Size:
        return self._size

    @property
    def client_area(self) -> LayoutBox:
        return LayoutBox(0, 0, self._size.width, self._size.height)

    @property
    def is_suspended(self) -> bool:
        return self._suspended

    @property
    def has_pending_updates(self) -> bool:
        """Whether work was requested while suspended and not yet performed."""
        return self._pending_layout or self._pending_stack

    def is_category_axis(self, axis_id: int) -> bool:
        return self.axes.is_category_axis(axis_id)

    # ------------------------------------------------------------------
    # Series
    # ------------------------------------------------------------------

    def add_series(self, series: Series) -> Series:
        """
        Register a series and relayout.

        Raises:
            InvalidArgumentError: If the id is blank or already registered.
        """
        self.series.add(series)
        self.axes.get_x_axis(series.x_axis_id)
        self.update_stack_data()
        self.update_layout()
        return series

    def remove_series(self, series_id: str) -> Series:
        series = self.series.remove(series_id)
        self.update_stack_data()
        self.update_layout()
        return series

    def enable_stack(self, series_id: str, enabled: bool = True) -> None:
        series = self.series.get(series_id)
        if series is None:
            raise InvalidArgumentError(f"Series '{series_id}' is not registered")
        series.stack_enabled = enabled
        self.update_stack_data()
        self.update_layout()

    # ------------------------------------------------------------------
    # Layout
    # ------------------------------------------------------------------

    def suspend_updates(self, suspend: bool) -> None:
        """
        Suspend or resume layout work.

        Repeating the current state does nothing. Resuming performs exactly
        one layout pass and one stack data recompute.
        """
        if self._suspended == suspend:
            return
        self._suspended = suspend
        if suspend:
            logger.debug("Chart updates suspended")
            return
        self.update_layout()
        self.update_stack_data()

    def update_layout(self) -> None:
        """Recompute region footprints, arrange them and refresh the axes."""
        if self._suspended:
            self._pending_layout = True
            return
        if self._in_layout:
            logger.debug("Skipping nested layout pass")
            return

        self._in_layout = True
        try:
            client = self.client_area
            title = self.title.compute_footprint(client.size)
            if self.title.vertical:
                available = Size(max(0.0, client.width - title.width), client.height)
            else:
                available = Size(client.width, max(0.0, client.height - title.height))
            self.legend.compute_footprint(available)
            self.arrange(client, self.title, self.legend, self.plot_area)
            self.axes.refresh(self.series)
            self._pending_layout = False
        finally:
            self._in_layout = False
        logger.debug(f"Layout pass: title={self.title.footprint} legend={self.legend.footprint}")

    def update_stack_data(self) -> None:
        """Recompute cumulative data of stacked series."""
        if self._suspended:
            self._pending_stack = True
            return
        self.series.update_stack_data(self.axes.is_category_axis)
        self._pending_stack = False

    def set_size(self, width: float, height: float) -> None:
        """Resize the client area and relayout."""
        self._size = Size(width, height)
        self.update_layout()

    def handle_resize(self, width: float, height: float) -> None:
        """Entry point for the host's resize events: relayout and redraw."""
        self.set_size(width, height)
        self.redraw()

    # ------------------------------------------------------------------
    # Painting
    # ------------------------------------------------------------------

    def redraw(self) -> None:
        """Ask the host to repaint, if it registered a hook."""
        if self.on_redraw is not None:
            self.on_redraw()

    def add_paint_listener(self, listener: PaintListener) -> None:
        self._paint_listeners.append(listener)

    def remove_paint_listener(self, listener: PaintListener) -> None:
        if listener in self._paint_listeners:
            self._paint_listeners.remove(listener)

    def notify_paint_listeners(self, gc: DrawingContext) -> None:
        for listener in list(self._paint_listeners):
            with gc.saved_state():
                listener(gc, self.client_area)

    def paint(self, gc: DrawingContext) -> None:
        """Paint the chart at its current size; entry point for host paint events."""
        with gc.saved_state():
            gc.set_fill_color(self.theme.chart_background)
            gc.fill_rect(0, 0, self._size.width, self._size.height)
        for region in self.regions:
            if region.visible:
                paint_region(gc, region)
        self.notify_paint_listeners(gc)
