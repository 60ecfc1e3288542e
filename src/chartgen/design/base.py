"""Base abstractions for chart regions."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Callable

from chartgen.utils.dimensions import EMPTY_BOX, ZERO_SIZE, LayoutBox, Size

if TYPE_CHECKING:
    from chartgen.render.context import DrawingContext

# Called by a region when one of its properties changed and layout is stale
ChangeCallback = Callable[[], None]


def _noop() -> None:
    pass


class ChartRegion(ABC):
    """
    A rectangular part of the chart (title, legend, plot area).

    A region reports the footprint it wants for a given available size and
    paints itself in local coordinates: (0, 0) is the top-left of its bounds.
    The composer decides the bounds.
    """

    def __init__(self, name: str, on_change: ChangeCallback | None = None) -> None:
        """
        Initialize chart region.

        Args:
            name: Region name (e.g., "title", "legend", "plot_area").
            on_change: Called when a setter changed something layout depends on.
        """
        self.name = name
        self.bounds: LayoutBox = EMPTY_BOX
        self.footprint: Size = ZERO_SIZE
        self._on_change = on_change or _noop

    @property
    def visible(self) -> bool:
        return True

    def changed(self) -> None:
        self._on_change()

    @abstractmethod
    def compute_footprint(self, available: Size) -> Size:
        """
        Recompute layout against the available size.

        Args:
            available: Space the composer can offer.

        Returns:
            The (width, height) this region asks for. Also stored in `footprint`.
        """
        pass

    @abstractmethod
    def paint(self, gc: DrawingContext) -> None:
        """
        Paint the region.

        Args:
            gc: Context whose origin is the region's top-left, clipped to its bounds.
        """
        pass


def paint_region(gc: DrawingContext, region: ChartRegion) -> None:
    """Paint one region clipped to its bounds with the origin at its top-left."""
    with gc.saved_state():
        gc.clip_rect(region.bounds)
        gc.translate(region.bounds.x, region.bounds.y)
        region.paint(gc)
