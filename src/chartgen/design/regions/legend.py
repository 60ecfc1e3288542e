"""Legend region: series ordering, cell packing and painting."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Iterable, Protocol

from chartgen.api.models import Series
from chartgen.config import ChartTheme, normalize_legend_position
from chartgen.design.base import ChangeCallback, ChartRegion
from chartgen.design.regions.title import validate_color, validate_font
from chartgen.errors import CellNotFoundError, InvalidArgumentError
from chartgen.fonts import Font
from chartgen.render.context import DrawingContext
from chartgen.types import LegendPosition, Orientation, RGBColor, SymbolType
from chartgen.utils.dimensions import ZERO_SIZE, LayoutBox, Size
from chartgen.utils.text import TextMeasurer, format_stat_value

logger = logging.getLogger(__name__)

# Layout constants, in device units
MARGIN = 5
EXT_COL_MARGIN = 7
SYMBOL_WIDTH = 20
LINE_WIDTH = 2

HEADER_ID = "$$header$$"
VALUE_PLACEHOLDER = "000.000 M"
EXTENDED_HEADERS = ("Curr", "Min", "Avg", "Max")


class LegendHost(Protocol):
    """What the legend reads from the chart it belongs to."""

    orientation: Orientation
    use_multipliers: bool

    @property
    def series(self) -> Iterable[Series]: ...

    def is_category_axis(self, axis_id: int) -> bool: ...


# ============================================================================
# Ordering
# ============================================================================


def sort_series(
    series: Iterable[Series],
    is_category_axis: Callable[[int], bool],
    vertical: bool = False,
) -> list[Series]:
    """
    Order series the way the legend lists them.

    Series are grouped by x axis, groups taken in axis id order. Within a
    group on a category axis, valid stacked series are inserted at the
    position of the first one, so later stacked series come first (the top
    of the visual stack is listed first). Everything else keeps
    registration order. A vertical chart reverses each group.

    Args:
        series: Series in registration order.
        is_category_axis: Whether an x axis id has category values.
        vertical: Whether the chart orientation is vertical.

    Returns:
        Ordered list of series.
    """
    groups: dict[int, list[Series]] = {}
    for s in series:
        groups.setdefault(s.x_axis_id, []).append(s)

    ordered: list[Series] = []
    for axis_id in sorted(groups):
        category = is_category_axis(axis_id)
        group: list[Series] = []
        insert_index = -1
        for s in groups[axis_id]:
            if category and s.is_valid_stack_series():
                if insert_index == -1:
                    insert_index = len(group)
                    group.append(s)
                else:
                    group.insert(insert_index, s)
            else:
                group.append(s)
        if vertical:
            group.reverse()
        ordered.extend(group)
    return ordered


@dataclass(frozen=True)
class LegendEntry:
    """One legend cell to pack: a series, or one sub-label of a circular series."""

    key: str
    label: str
    series: Series
    color: RGBColor | None = None  # sub-label color


def legend_entries(ordered: Iterable[Series]) -> list[LegendEntry]:
    """Expand ordered series into legend entries, skipping hidden ones."""
    entries: list[LegendEntry] = []
    for s in ordered:
        if not s.visible_in_legend:
            continue
        if s.is_circular and s.labels is not None:
            colors = s.colors or []
            for i, label in enumerate(s.labels):
                entries.append(LegendEntry(label, label, s, colors[i] if i < len(colors) else None))
            continue
        entries.append(LegendEntry(s.id, s.legend_label, s))
    return entries


# ============================================================================
# Packing
# ============================================================================


@dataclass
class LegendLayout:
    """Result of one packing pass."""

    footprint: Size = ZERO_SIZE
    cells: dict[str, LayoutBox] = field(default_factory=dict)
    extended_info_offset: float = 0.0
    """Distance from a cell's left edge to the stat columns."""
    extended: bool = False
    """Whether the pass laid out the stat table and its header cell."""


class LegendPacker:
    """
    Packs legend entries into non-overlapping cells.

    Left/right legends stack entries down a column and start a new column to
    the right when the next entry would run past the available height. Top
    and bottom legends lay entries out along a row and wrap to a new row
    when the next entry would run past the available width. An entry whose
    far edge lands exactly on the limit still fits; an empty row or column
    always takes its first entry.

    In extended mode entries form a table, one per row, below a header cell
    spanning the four stat columns, and every entry cell is widened to the
    full legend width. The table ignores the available height; rows past
    it are clipped when the legend is arranged.
    """

    def __init__(self, measurer: TextMeasurer) -> None:
        self.measurer = measurer

    def pack(
        self,
        entries: list[LegendEntry],
        available: Size,
        font: Font,
        position: LegendPosition = "bottom",
        extended: bool = False,
    ) -> LegendLayout:
        """
        Lay out entries against the available size.

        Args:
            entries: Entries in display order.
            available: Space the legend may use.
            font: Legend font, for measuring labels and line height.
            position: Edge the legend is docked to.
            extended: Whether stat columns are shown.

        Returns:
            Footprint and cell bounds keyed by entry key (plus HEADER_ID in
            extended mode).
        """
        if not entries:
            return LegendLayout()

        cell_height = self.measurer.measure(font, "")[1]
        widths: list[tuple[LegendEntry, float]] = []
        seen: set[str] = set()
        for entry in entries:
            if entry.key == HEADER_ID:
                logger.warning(f"Legend entry key '{HEADER_ID}' is reserved, skipping it")
                continue
            if entry.key in seen:
                logger.warning(f"Duplicate legend entry '{entry.key}', skipping it")
                continue
            seen.add(entry.key)
            text_width = self.measurer.measure(font, entry.label)[0]
            widths.append((entry, text_width + SYMBOL_WIDTH + MARGIN * 3))

        if extended:
            layout = self._pack_table(widths, cell_height, font, available.height)
        elif position in ("left", "right"):
            layout = self._pack_columns(widths, cell_height, available.height - MARGIN)
        else:
            layout = self._pack_rows(widths, cell_height, available.width)

        logger.debug(
            f"Packed {len(layout.cells)} legend cell(s) at {position}: "
            f"{layout.footprint.width}x{layout.footprint.height}"
        )
        return layout

    def _pack_columns(
        self, widths: list[tuple[LegendEntry, float]], cell_height: float, limit: float
    ) -> LegendLayout:
        cells: dict[str, LayoutBox] = {}
        column_x = 0.0
        column_width = 0.0
        y = float(MARGIN)
        height = 0.0
        for entry, width in widths:
            if y + cell_height > limit and y != MARGIN:
                column_x += column_width
                column_width = 0.0
                y = float(MARGIN)
            column_width = max(column_width, width)
            cells[entry.key] = LayoutBox(column_x, y, width, cell_height)
            y += cell_height + MARGIN
            height = max(height, y)
        return LegendLayout(Size(column_x + column_width, height), cells)

    def _pack_rows(
        self, widths: list[tuple[LegendEntry, float]], cell_height: float, limit: float
    ) -> LegendLayout:
        cells: dict[str, LayoutBox] = {}
        rows = 1
        x = 0.0
        width = 0.0
        for entry, cell_width in widths:
            if x + cell_width > limit and x != 0:
                rows += 1
                x = 0.0
            y = (cell_height + MARGIN) * (rows - 1) + MARGIN
            cells[entry.key] = LayoutBox(x, y, cell_width, cell_height)
            x += cell_width
            width = max(width, x)
        return LegendLayout(Size(width, (cell_height + MARGIN) * rows + MARGIN), cells)

    def _pack_table(
        self, widths: list[tuple[LegendEntry, float]], cell_height: float, font: Font, limit: float
    ) -> LegendLayout:
        if not widths:
            return LegendLayout()
        value_column = self.measurer.measure(font, VALUE_PLACEHOLDER)[0] + EXT_COL_MARGIN
        extra = value_column * len(EXTENDED_HEADERS)
        offset = max(width for _, width in widths) + EXT_COL_MARGIN
        total_width = offset + extra

        cells: dict[str, LayoutBox] = {HEADER_ID: LayoutBox(offset, MARGIN, extra, cell_height)}
        y = cell_height + MARGIN * 2
        for entry, _ in widths:
            cells[entry.key] = LayoutBox(0, y, total_width, cell_height)
            y += cell_height + MARGIN
        if y > limit:
            logger.debug(f"Legend table is {y} tall, {y - limit} past the available height")
        return LegendLayout(Size(total_width, y), cells, offset, extended=True)


# ============================================================================
# Symbols
# ============================================================================


def draw_symbol(gc: DrawingContext, symbol: SymbolType, cx: float, cy: float, size: float, color: RGBColor) -> None:
    """Draw a plot symbol centred on (cx, cy)."""
    if symbol == "none" or size <= 0:
        return
    h = size / 2
    gc.set_fill_color(color)
    gc.set_stroke_color(color)
    if symbol == "circle":
        gc.fill_oval(cx - h, cy - h, size, size)
    elif symbol == "square":
        gc.fill_rect(cx - h, cy - h, size, size)
    elif symbol == "diamond":
        gc.fill_polygon([(cx, cy - h), (cx + h, cy), (cx, cy + h), (cx - h, cy)])
    elif symbol == "triangle":
        gc.fill_polygon([(cx, cy - h), (cx + h, cy + h), (cx - h, cy + h)])
    elif symbol == "inverted_triangle":
        gc.fill_polygon([(cx - h, cy - h), (cx + h, cy - h), (cx, cy + h)])
    elif symbol == "cross":
        gc.set_line_width(1)
        gc.draw_line(cx - h, cy - h, cx + h, cy + h)
        gc.draw_line(cx - h, cy + h, cx + h, cy - h)
    elif symbol == "plus":
        gc.set_line_width(1)
        gc.draw_line(cx - h, cy, cx + h, cy)
        gc.draw_line(cx, cy - h, cx, cy + h)


# ============================================================================
# Region
# ============================================================================


class LegendRegion(ChartRegion):
    """The legend: one cell per visible series (or circular sub-label)."""

    def __init__(
        self,
        host: LegendHost,
        measurer: TextMeasurer,
        theme: ChartTheme,
        on_change: ChangeCallback | None = None,
    ) -> None:
        super().__init__("legend", on_change)
        self.host = host
        self.theme = theme
        self.packer = LegendPacker(measurer)
        self.layout = LegendLayout()
        self._visible = True
        self._position: LegendPosition = "bottom"
        self._extended = False
        self._font = theme.legend_font.to_font()
        self._header_font = self._font.derive(bold=True)
        self._foreground = theme.legend_foreground
        self._background = theme.legend_background

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def visible(self) -> bool:
        return self._visible

    @visible.setter
    def visible(self, value: bool) -> None:
        if self._visible == value:
            return
        self._visible = value
        self.changed()

    @property
    def position(self) -> LegendPosition:
        return self._position

    @position.setter
    def position(self, value: str) -> None:
        self._position = normalize_legend_position(value)
        self.changed()

    @property
    def extended(self) -> bool:
        return self._extended

    @extended.setter
    def extended(self, value: bool) -> None:
        self._extended = value
        self.changed()

    @property
    def font(self) -> Font:
        return self._font

    @font.setter
    def font(self, value: Font | None) -> None:
        self._font = self.theme.legend_font.to_font() if value is None else validate_font(value)
        self._header_font = self._font.derive(bold=True)
        self.changed()

    @property
    def foreground(self) -> RGBColor:
        return self._foreground

    @foreground.setter
    def foreground(self, value: RGBColor | None) -> None:
        self._foreground = self.theme.legend_foreground if value is None else validate_color(value)

    @property
    def background(self) -> RGBColor:
        return self._background

    @background.setter
    def background(self, value: RGBColor | None) -> None:
        self._background = self.theme.legend_background if value is None else validate_color(value)

    # ------------------------------------------------------------------
    # Layout
    # ------------------------------------------------------------------

    def compute_footprint(self, available: Size) -> Size:
        if not self._visible:
            self.layout = LegendLayout()
        else:
            ordered = sort_series(
                self.host.series, self.host.is_category_axis, self.host.orientation == "vertical"
            )
            self.layout = self.packer.pack(
                legend_entries(ordered), available, self._font, self._position, self._extended
            )
        self.footprint = self.layout.footprint
        return self.footprint

    def get_bounds(self, key: str | None) -> LayoutBox:
        """
        Bounds of a legend cell from the last packing pass.

        Args:
            key: Series id, circular sub-label, or HEADER_ID.

        Raises:
            InvalidArgumentError: If the key is None or blank.
            CellNotFoundError: If the last pass produced no such cell.
        """
        if key is None or not key.strip():
            raise InvalidArgumentError("Legend cell key must not be blank")
        key = key.strip()
        try:
            return self.layout.cells[key]
        except KeyError:
            raise CellNotFoundError(f"No legend cell for '{key}'") from None

    # ------------------------------------------------------------------
    # Painting
    # ------------------------------------------------------------------

    def paint(self, gc: DrawingContext) -> None:
        if not self._visible or not self.layout.cells:
            return

        width, height = self.bounds.width, self.bounds.height
        gc.set_fill_color(self._background)
        gc.fill_rect(0, 0, max(0, width - 1), max(0, height - 1))
        gc.set_line_width(1)
        gc.set_line_style("solid")
        gc.set_stroke_color(self.theme.legend_frame)
        gc.stroke_rect(0, 0, max(0, width - 1), max(0, height - 1))

        value_column = 0.0
        if self.layout.extended:
            value_column = self.packer.measurer.measure(self._font, VALUE_PLACEHOLDER)[0] + EXT_COL_MARGIN
            self._paint_headers(gc, value_column)

        ordered = sort_series(self.host.series, self.host.is_category_axis, self.host.orientation == "vertical")
        for index, entry in enumerate(legend_entries(ordered)):
            cell = self.layout.cells.get(entry.key)
            if cell is None or entry.key == HEADER_ID:
                continue
            self._paint_symbol(gc, entry, cell, index)
            gc.set_font(self._font)
            gc.set_fill_color(self._foreground)
            gc.draw_string(entry.label, cell.x + SYMBOL_WIDTH + MARGIN * 2, cell.y)
            if self.layout.extended and not entry.series.is_circular:
                self._paint_stats(gc, entry.series, cell, value_column)

    def _paint_headers(self, gc: DrawingContext, value_column: float) -> None:
        header = self.layout.cells[HEADER_ID]
        gc.set_font(self._header_font)
        gc.set_fill_color(self._foreground)
        x = header.x + MARGIN
        for title in EXTENDED_HEADERS:
            gc.draw_string(title, x, header.y)
            x += value_column

    def _paint_stats(self, gc: DrawingContext, series: Series, cell: LayoutBox, value_column: float) -> None:
        multipliers = self.host.use_multipliers
        x = cell.x + self.layout.extended_info_offset + MARGIN
        for value in (series.cur_y, series.min_y, series.avg_y, series.max_y):
            gc.draw_string(format_stat_value(value, multipliers), x, cell.y)
            x += value_column

    def _paint_symbol(self, gc: DrawingContext, entry: LegendEntry, cell: LayoutBox, index: int) -> None:
        series = entry.series
        x = cell.x + MARGIN
        mid = cell.y + cell.height / 2
        half = SYMBOL_WIDTH / 2

        with gc.saved_state():
            if series.is_circular:
                gc.set_fill_color(entry.color or self.theme.palette_color(index))
                gc.fill_oval(x + half / 2, mid - half / 2, half, half)
            elif series.kind == "bar":
                gc.set_fill_color(series.color)
                gc.fill_rect(x + half / 2, mid - half / 2, half, half)
            else:
                if series.line_style != "none":
                    gc.set_stroke_color(series.color)
                    gc.set_line_width(LINE_WIDTH)
                    gc.set_line_style(series.line_style)
                    gc.draw_line(x, mid, x + SYMBOL_WIDTH, mid)
                draw_symbol(
                    gc, series.symbol_type, x + half, mid, series.symbol_size,
                    series.symbol_color or series.color,
                )
