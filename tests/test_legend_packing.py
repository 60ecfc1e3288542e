"""Tests for legend cell packing and bounds lookup."""

from __future__ import annotations

import itertools
import logging

import pytest
from conftest import CHAR_WIDTH, LINE_HEIGHT

from chartgen.api.models import Series
from chartgen.design.regions.legend import (
    EXT_COL_MARGIN,
    HEADER_ID,
    MARGIN,
    SYMBOL_WIDTH,
    VALUE_PLACEHOLDER,
    LegendEntry,
    LegendPacker,
    legend_entries,
)
from chartgen.errors import CellNotFoundError, InvalidArgumentError
from chartgen.fonts import Font
from chartgen.utils.dimensions import Size

FONT = Font()
CELL_WIDTH = 5 * CHAR_WIDTH + SYMBOL_WIDTH + 3 * MARGIN  # for five-character labels


def _entries(*labels: str) -> list[LegendEntry]:
    return legend_entries([Series(label) for label in labels])


def _assert_disjoint(cells: dict) -> None:
    for (ka, a), (kb, b) in itertools.combinations(cells.items(), 2):
        assert not a.intersects(b), f"{ka} {a} overlaps {kb} {b}"


@pytest.fixture
def packer(measurer) -> LegendPacker:
    return LegendPacker(measurer)


def test_no_entries_gives_empty_layout(packer) -> None:
    layout = packer.pack([], Size(100, 100), FONT, "bottom")

    assert layout.footprint == Size(0, 0)
    assert layout.cells == {}


def test_cell_width_is_label_plus_symbol_gutter(packer) -> None:
    layout = packer.pack(_entries("abc"), Size(500, 500), FONT, "bottom")

    box = layout.cells["abc"]
    assert box.width == 3 * CHAR_WIDTH + SYMBOL_WIDTH + 3 * MARGIN
    assert box.height == LINE_HEIGHT


def test_row_exactly_filled_does_not_wrap(packer) -> None:
    layout = packer.pack(_entries("aaaaa", "bbbbb"), Size(2 * CELL_WIDTH, 100), FONT, "bottom")

    assert layout.cells["aaaaa"].y == layout.cells["bbbbb"].y == MARGIN
    assert layout.cells["bbbbb"].x == CELL_WIDTH
    assert layout.footprint == Size(2 * CELL_WIDTH, LINE_HEIGHT + 2 * MARGIN)


def test_row_one_unit_over_wraps(packer) -> None:
    layout = packer.pack(_entries("aaaaa", "bbbbb"), Size(2 * CELL_WIDTH - 1, 100), FONT, "top")

    second = layout.cells["bbbbb"]
    assert (second.x, second.y) == (0, LINE_HEIGHT + 2 * MARGIN)
    assert layout.footprint == Size(CELL_WIDTH, 2 * (LINE_HEIGHT + MARGIN) + MARGIN)


def test_first_entry_accepted_even_when_too_wide(packer) -> None:
    layout = packer.pack(_entries("aaaaa", "bbbbb"), Size(10, 100), FONT, "bottom")

    assert layout.cells["aaaaa"].x == 0
    assert layout.cells["bbbbb"].x == 0
    assert layout.cells["bbbbb"].y > layout.cells["aaaaa"].y


def test_column_exactly_filled_does_not_wrap(packer) -> None:
    # Second entry ends at 2*MARGIN + 2*LINE_HEIGHT; the limit is height - MARGIN
    height = 3 * MARGIN + 2 * LINE_HEIGHT
    layout = packer.pack(_entries("aaaaa", "bbbbb"), Size(500, height), FONT, "right")

    assert layout.cells["aaaaa"].x == layout.cells["bbbbb"].x == 0
    assert layout.cells["bbbbb"].y == LINE_HEIGHT + 2 * MARGIN
    assert layout.footprint == Size(CELL_WIDTH, 2 * (LINE_HEIGHT + MARGIN) + MARGIN)


def test_column_one_unit_over_wraps(packer) -> None:
    height = 3 * MARGIN + 2 * LINE_HEIGHT - 1
    layout = packer.pack(_entries("aaaaa", "bbbbb"), Size(500, height), FONT, "left")

    second = layout.cells["bbbbb"]
    assert (second.x, second.y) == (CELL_WIDTH, MARGIN)
    assert layout.footprint == Size(2 * CELL_WIDTH, LINE_HEIGHT + MARGIN + MARGIN)


def test_new_column_starts_after_widest_cell(packer) -> None:
    entries = _entries("a", "aaaaaaaaaa", "b")
    layout = packer.pack(entries, Size(500, 2 * LINE_HEIGHT + 3 * MARGIN), FONT, "right")

    widest = 10 * CHAR_WIDTH + SYMBOL_WIDTH + 3 * MARGIN
    assert layout.cells["b"].x == widest
    assert layout.cells["a"].width < widest


@pytest.mark.parametrize("position", ["top", "bottom", "left", "right"])
@pytest.mark.parametrize("extended", [False, True])
def test_cells_pairwise_disjoint(packer, position, extended) -> None:
    labels = [f"s{'x' * (i % 7)}{i}" for i in range(23)]
    layout = packer.pack(_entries(*labels), Size(300, 120), FONT, position, extended)

    assert len(layout.cells) == len(labels) + (1 if extended else 0)
    _assert_disjoint(layout.cells)
    for box in layout.cells.values():
        assert box.right <= layout.footprint.width
        assert box.bottom <= layout.footprint.height


def test_circular_sub_labels_get_their_own_cells(packer) -> None:
    pie = Series("pie", kind="circular", y_values=[1.0, 2.0, 3.0], labels=["red", "green", "blue"])
    layout = packer.pack(legend_entries([pie, Series("line")]), Size(500, 500), FONT, "bottom")

    assert set(layout.cells) == {"red", "green", "blue", "line"}
    assert layout.cells["green"].width == 5 * CHAR_WIDTH + SYMBOL_WIDTH + 3 * MARGIN


def test_duplicate_keys_are_skipped_with_warning(packer, caplog) -> None:
    pie = Series("pie", kind="circular", labels=["same", "same"])

    with caplog.at_level(logging.WARNING):
        layout = packer.pack(legend_entries([pie]), Size(500, 500), FONT, "bottom")

    assert list(layout.cells) == ["same"]
    assert "Duplicate legend entry 'same'" in caplog.text


@pytest.mark.parametrize("extended", [False, True])
def test_header_key_is_reserved(packer, caplog, extended) -> None:
    with caplog.at_level(logging.WARNING):
        layout = packer.pack(_entries(HEADER_ID, "aaaaa"), Size(500, 500), FONT, "bottom", extended)

    assert "is reserved" in caplog.text
    assert "aaaaa" in layout.cells
    if extended:
        assert layout.cells[HEADER_ID].x == layout.extended_info_offset
    else:
        assert HEADER_ID not in layout.cells


def test_header_series_does_not_replace_header_cell(composer) -> None:
    composer.legend.extended = True
    composer.add_series(Series(HEADER_ID))
    composer.add_series(Series("revenue"))

    header = composer.legend.get_bounds(HEADER_ID)

    assert header.x == composer.legend.layout.extended_info_offset
    assert header.y == MARGIN


def test_extended_table_overflow_logged(packer, caplog) -> None:
    labels = [f"s{i}" for i in range(10)]

    with caplog.at_level(logging.DEBUG, logger="chartgen.design.regions.legend"):
        layout = packer.pack(_entries(*labels), Size(500, 50), FONT, "right", extended=True)

    assert layout.footprint.height > 50
    assert "past the available height" in caplog.text


def test_extended_cells_span_full_width(packer) -> None:
    layout = packer.pack(_entries("aaaaa", "bb", "cccccccc"), Size(500, 500), FONT, "right", extended=True)

    for key, box in layout.cells.items():
        if key != HEADER_ID:
            assert box.width == layout.footprint.width


def test_extended_header_spans_stat_columns(packer) -> None:
    layout = packer.pack(_entries("aaaaa", "bbbbb"), Size(500, 500), FONT, "bottom", extended=True)

    value_column = len(VALUE_PLACEHOLDER) * CHAR_WIDTH + EXT_COL_MARGIN
    offset = CELL_WIDTH + EXT_COL_MARGIN
    header = layout.cells[HEADER_ID]
    assert layout.extended_info_offset == offset
    assert (header.x, header.y, header.width, header.height) == (offset, MARGIN, 4 * value_column, LINE_HEIGHT)
    assert layout.footprint.width == offset + 4 * value_column
    assert layout.cells["aaaaa"].y == LINE_HEIGHT + 2 * MARGIN
    assert layout.cells["bbbbb"].y == 2 * LINE_HEIGHT + 3 * MARGIN


def test_packing_is_deterministic(packer) -> None:
    entries = _entries("one", "two", "three", "four", "five")
    first = packer.pack(entries, Size(150, 80), FONT, "left")
    second = packer.pack(entries, Size(150, 80), FONT, "left")

    assert first == second


# ============================================================================
# Bounds lookup on the region
# ============================================================================


def test_get_bounds_returns_packed_cell(composer) -> None:
    composer.add_series(Series("revenue", y_values=[1.0]))

    box = composer.legend.get_bounds("revenue")

    assert box == composer.legend.layout.cells["revenue"]
    assert composer.legend.get_bounds("  revenue ") == box


@pytest.mark.parametrize("key", [None, "", "   "])
def test_get_bounds_rejects_blank_keys(composer, key) -> None:
    composer.add_series(Series("revenue"))

    with pytest.raises(InvalidArgumentError):
        composer.legend.get_bounds(key)


def test_get_bounds_unknown_key(composer) -> None:
    composer.add_series(Series("revenue"))

    with pytest.raises(CellNotFoundError) as excinfo:
        composer.legend.get_bounds("costs")
    assert isinstance(excinfo.value, KeyError)
    assert str(excinfo.value) == "No legend cell for 'costs'"


def test_get_bounds_after_series_removed(composer) -> None:
    composer.add_series(Series("revenue"))
    composer.add_series(Series("costs"))
    composer.remove_series("costs")

    with pytest.raises(CellNotFoundError):
        composer.legend.get_bounds("costs")


def test_hidden_legend_has_no_cells(composer) -> None:
    composer.add_series(Series("revenue"))
    composer.legend.visible = False

    assert composer.legend.footprint == Size(0, 0)
    with pytest.raises(CellNotFoundError):
        composer.legend.get_bounds("revenue")
