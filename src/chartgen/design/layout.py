"""Default arrangement of sized regions inside the chart's client area."""

import logging
from typing import Callable

from chartgen.design.regions.legend import LegendRegion
from chartgen.design.regions.plot_area import PlotAreaRegion
from chartgen.design.regions.title import TitleRegion
from chartgen.utils.dimensions import EMPTY_BOX, LayoutBox, Size

logger = logging.getLogger(__name__)

# (client, title, legend, plot_area) -> None; sets each region's bounds
ArrangeFunc = Callable[[LayoutBox, TitleRegion, LegendRegion, PlotAreaRegion], None]


def _box(x: float, y: float, width: float, height: float) -> LayoutBox:
    return LayoutBox(x, y, max(0.0, width), max(0.0, height))


def arrange_regions(
    client: LayoutBox,
    title: TitleRegion,
    legend: LegendRegion,
    plot_area: PlotAreaRegion,
) -> None:
    """
    Dock title and legend to the client edges and give the rest to the plot area.

    A horizontal title is centred along the top edge, a vertical one runs
    along the left edge. The legend is docked to its position's edge of what
    is left, centred along that edge. Sizes are clamped to the space left,
    so a too-small client area produces empty boxes rather than errors.
    """
    x, y, width, height = client.x, client.y, client.width, client.height

    tw, th = title.footprint.width, title.footprint.height
    if tw == 0 or th == 0:
        title.bounds = EMPTY_BOX
    elif title.vertical:
        tw = min(tw, width)
        title.bounds = _box(x, y, tw, height)
        x, width = x + tw, width - tw
    else:
        th = min(th, height)
        title.bounds = _box(x + max(0.0, (width - tw) / 2), y, min(tw, width), th)
        y, height = y + th, height - th

    lw, lh = min(legend.footprint.width, max(0.0, width)), min(legend.footprint.height, max(0.0, height))
    if lw == 0 or lh == 0:
        legend.bounds = EMPTY_BOX
    elif legend.position == "left":
        legend.bounds = _box(x, y + (height - lh) / 2, lw, lh)
        x, width = x + lw, width - lw
    elif legend.position == "right":
        legend.bounds = _box(x + width - lw, y + (height - lh) / 2, lw, lh)
        width -= lw
    elif legend.position == "top":
        legend.bounds = _box(x + (width - lw) / 2, y, lw, lh)
        y, height = y + lh, height - lh
    else:
        legend.bounds = _box(x + (width - lw) / 2, y + height - lh, lw, lh)
        height -= lh

    plot_area.bounds = _box(x, y, width, height)
    plot_area.compute_footprint(Size(plot_area.bounds.width, plot_area.bounds.height))
    logger.debug(f"Arranged regions: title={title.bounds} legend={legend.bounds} plot={plot_area.bounds}")
