"""Tests for the chart composer: layout passes, suspension and setters."""

from __future__ import annotations

import logging

import pytest
from conftest import LINE_HEIGHT, FixedWidthMeasurer

from chartgen.api.models import Series
from chartgen.config import ChartConfig
from chartgen.design.chart import ChartComposer
from chartgen.design.layout import arrange_regions
from chartgen.errors import InvalidArgumentError
from chartgen.utils.dimensions import LayoutBox, Size


class CountingArrange:
    """Arrangement routine that counts layout passes."""

    def __init__(self) -> None:
        self.calls = 0

    def __call__(self, client, title, legend, plot_area) -> None:
        self.calls += 1
        arrange_regions(client, title, legend, plot_area)


@pytest.fixture
def arrange() -> CountingArrange:
    return CountingArrange()


@pytest.fixture
def counted(arrange, monkeypatch) -> tuple[ChartComposer, CountingArrange, list[int]]:
    """Composer whose layout passes and stack recomputes are counted."""

    composer = ChartComposer(ChartConfig(width=400, height=300), FixedWidthMeasurer(), arrange, {0: True})
    stack_calls: list[int] = []
    original = composer.series.update_stack_data

    def counting(is_category_axis) -> None:
        stack_calls.append(1)
        original(is_category_axis)

    monkeypatch.setattr(composer.series, "update_stack_data", counting)
    arrange.calls = 0
    return composer, arrange, stack_calls


def test_construction_lays_out_once(arrange) -> None:
    ChartComposer(ChartConfig(), FixedWidthMeasurer(), arrange)

    assert arrange.calls == 1


def test_each_mutation_lays_out_when_active(counted) -> None:
    composer, arrange, _ = counted

    composer.add_series(Series("a"))
    composer.add_series(Series("b"))

    assert arrange.calls == 2


def test_resume_performs_exactly_one_pass(counted) -> None:
    composer, arrange, stack_calls = counted

    composer.suspend_updates(True)
    for i in range(10):
        composer.add_series(Series(f"s{i}", stack_enabled=True, y_values=[1.0]))
    composer.legend.position = "left"
    composer.title.text = "Batch"
    assert arrange.calls == 0
    assert stack_calls == []
    assert composer.has_pending_updates

    composer.suspend_updates(False)

    assert arrange.calls == 1
    assert len(stack_calls) == 1
    assert not composer.has_pending_updates


def test_suspend_twice_is_idempotent(counted) -> None:
    composer, arrange, stack_calls = counted

    composer.suspend_updates(True)
    composer.suspend_updates(True)
    composer.suspend_updates(False)

    assert arrange.calls == 1
    assert len(stack_calls) == 1


def test_resume_when_active_does_nothing(counted) -> None:
    composer, arrange, stack_calls = counted

    composer.suspend_updates(False)

    assert arrange.calls == 0
    assert stack_calls == []


def test_update_layout_while_suspended_is_deferred(counted) -> None:
    composer, arrange, _ = counted

    composer.suspend_updates(True)
    composer.update_layout()

    assert arrange.calls == 0
    assert composer.has_pending_updates


def test_nested_layout_pass_is_skipped(measurer) -> None:
    calls: list[int] = []
    holder: dict[str, ChartComposer] = {}

    def reentrant(client, title, legend, plot_area) -> None:
        calls.append(1)
        holder["composer"].update_layout()
        arrange_regions(client, title, legend, plot_area)

    composer = ChartComposer(ChartConfig(), measurer, lambda *args: None)
    holder["composer"] = composer
    composer.arrange = reentrant

    composer.update_layout()

    assert calls == [1]


def test_legend_packed_against_space_left_by_title(composer) -> None:
    composer.set_size(400, 2 * LINE_HEIGHT + 4 * 5)
    composer.legend.position = "right"
    composer.add_series(Series("aaaaa"))
    composer.add_series(Series("bbbbb"))

    assert composer.legend.get_bounds("bbbbb").x == 0

    composer.title.text = "Title"

    assert composer.legend.get_bounds("bbbbb").x > 0


def test_regions_do_not_overlap(composer) -> None:
    composer.title.text = "Quarterly"
    for i in range(5):
        composer.add_series(Series(f"series-{i}"))

    for position in ("top", "bottom", "left", "right"):
        composer.legend.position = position
        title, legend, plot = composer.title.bounds, composer.legend.bounds, composer.plot_area.bounds
        assert not title.intersects(legend)
        assert not title.intersects(plot)
        assert not legend.intersects(plot)
        for box in (title, legend, plot):
            assert box.right <= 400 and box.bottom <= 300


def test_tiny_client_area_clamps_sizes(composer) -> None:
    composer.title.text = "A long chart title"
    composer.add_series(Series("revenue"))

    composer.set_size(10, 4)

    for region in composer.regions:
        assert region.bounds.width >= 0 and region.bounds.height >= 0


def test_stack_data_recomputed_on_add(composer) -> None:
    composer.add_series(Series("a", stack_enabled=True, y_values=[1.0, 2.0]))
    composer.add_series(Series("b", stack_enabled=True, y_values=[3.0, 4.0]))

    assert composer.series.get("a").stack_data == [1.0, 2.0]
    assert composer.series.get("b").stack_data == [4.0, 6.0]


def test_enable_stack_changes_legend_order(composer) -> None:
    composer.add_series(Series("a", y_values=[1.0]))
    composer.add_series(Series("b", y_values=[1.0]))
    assert composer.legend.get_bounds("a").x < composer.legend.get_bounds("b").x

    composer.suspend_updates(True)
    composer.enable_stack("a")
    composer.enable_stack("b")
    composer.suspend_updates(False)

    assert composer.legend.get_bounds("b").x < composer.legend.get_bounds("a").x


def test_enable_stack_unknown_series(composer) -> None:
    with pytest.raises(InvalidArgumentError):
        composer.enable_stack("missing")


def test_duplicate_series_rejected(composer) -> None:
    composer.add_series(Series("a"))

    with pytest.raises(InvalidArgumentError):
        composer.add_series(Series("a"))


def test_orientation_reverses_legend_order(composer) -> None:
    composer.add_series(Series("a"))
    composer.add_series(Series("b"))

    composer.orientation = "vertical"

    assert composer.legend.get_bounds("b").x < composer.legend.get_bounds("a").x


def test_unknown_orientation_keeps_current(composer, caplog) -> None:
    composer.orientation = "vertical"

    with caplog.at_level(logging.WARNING):
        composer.orientation = "diagonal"

    assert composer.orientation == "vertical"
    assert "diagonal" in caplog.text


def test_unknown_legend_position_falls_back_to_bottom(composer, caplog) -> None:
    composer.legend.position = "left"

    with caplog.at_level(logging.WARNING):
        composer.legend.position = "middle"

    assert composer.legend.position == "bottom"
    assert "middle" in caplog.text


def test_handle_resize_relayouts_and_redraws(composer) -> None:
    redraws: list[int] = []
    composer.on_redraw = lambda: redraws.append(1)
    composer.add_series(Series("revenue"))

    composer.handle_resize(200, 100)

    assert composer.size == Size(200, 100)
    assert composer.plot_area.bounds.right <= 200
    assert redraws == [1]


def test_paint_replays_listeners_after_regions(composer, gc) -> None:
    seen: list[LayoutBox] = []
    composer.add_series(Series("revenue"))
    composer.add_paint_listener(lambda context, area: seen.append(area))

    composer.paint(gc)

    assert seen == [LayoutBox(0, 0, 400, 300)]
    assert "revenue" in gc.strings()
    assert gc.depth == 0


def test_removed_listener_not_called(composer, gc) -> None:
    seen: list[int] = []

    def listener(context, area) -> None:
        seen.append(1)

    composer.add_paint_listener(listener)
    composer.remove_paint_listener(listener)
    composer.paint(gc)

    assert seen == []
