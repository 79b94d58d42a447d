"""End-to-end tests: chart context, render surface and main window."""
import time

import pytest
from PySide6.QtCore import QPoint
from PySide6.QtTest import QTest
from PySide6.QtWidgets import QLabel, QWidget

from scatterheat.controller import workers
from scatterheat.controller.chart import ChartContext
from scatterheat.model.io import LoadError, parse_scatter
from scatterheat.model.records import ChartVariant
from scatterheat.view.chart_widget import ROLE_CLASS, ROLE_ID, item_attribute
from scatterheat.view.main_window import MainWindow
from scatterheat.view.renderers import PLACEHOLDERS, TooltipRenderer


def _wait_until(predicate, timeout_ms=3000):
    deadline = time.monotonic() + timeout_ms / 1000
    while not predicate() and time.monotonic() < deadline:
        QTest.qWait(20)
    return predicate()


@pytest.fixture
def scatter_window(qapp, scatter_dataset):
    chart = ChartContext(ChartVariant.SCATTER, url="https://example.test/cyclists.json")
    window = MainWindow(chart)
    chart.regenerate(1000, 600)
    chart.set_dataset(scatter_dataset)
    yield window
    window.close()


@pytest.fixture
def heatmap_window(qapp, heatmap_dataset):
    chart = ChartContext(ChartVariant.HEATMAP, url="https://example.test/temperature.json")
    window = MainWindow(chart)
    chart.regenerate(1000, 600)
    chart.set_dataset(heatmap_dataset)
    yield window
    window.close()


def test_scatter_end_to_end(scatter_window):
    window = scatter_window
    assert window.lbl_total.text() == "2"
    assert window.lbl_min.text() == "35:12"
    assert window.lbl_max.text() == "36:15"

    items = window.chart_widget.shape_items
    assert len(items) == 2
    assert items[1].data(ROLE_CLASS) == "doping"
    assert items[0].data(ROLE_CLASS) == "clean"
    assert item_attribute(items[1], "data-xvalue") == "1998-01-01"
    assert item_attribute(items[1], "data-yvalue") == "35:12"


def test_scene_has_axis_groups(scatter_window):
    ids = {item.data(ROLE_ID) for item in scatter_window.chart_widget.scene().items()}
    assert {"x-axis", "y-axis", "dot"} <= ids


def test_heatmap_tooltip_end_to_end(heatmap_window):
    window = heatmap_window
    chart = window.chart
    record = chart.dataset.records[0]

    chart.controller.on_hover(record)
    tooltip = window.chart_widget.tooltip
    assert not tooltip.isHidden()
    assert "Temperature: 5.5°C" in tooltip.text()
    assert "Variance: -2.5°C" in tooltip.text()
    assert tooltip.property("data-year") == "1900"
    assert window.chart_widget.shape_items[0].data(ROLE_CLASS) == "coolest"
    assert item_attribute(window.chart_widget.shape_items[0], "data-temp") == "5.5"
    assert item_attribute(window.chart_widget.shape_items[0], "data-month") == "0"
    assert item_attribute(window.chart_widget.shape_items[0], "data-xvalue") is None

    chart.controller.on_hover_end()
    assert tooltip.isHidden()


def test_click_pins_details_and_hover_compares(scatter_window):
    window = scatter_window
    chart = window.chart
    first, second = chart.dataset.records

    assert window.lbl_blocked.text() == PLACEHOLDERS[ChartVariant.SCATTER]

    chart.controller.on_click(first)
    assert "Name: X, Y" in window.lbl_blocked.text()

    chart.controller.on_hover(second)
    assert "4 years and 0 months" in window.lbl_comparison.text()

    chart.controller.on_hover_end()
    assert window.lbl_comparison.text() == ""
    assert "Name: X, Y" in window.lbl_blocked.text()


def test_regeneration_is_idempotent(scatter_window):
    chart = scatter_window.chart
    before = chart.elements
    chart.regenerate(1000, 600)
    assert chart.elements == before


def test_pinned_survives_relayout(scatter_window):
    chart = scatter_window.chart
    chart.controller.on_click(chart.dataset.records[1])
    chart.regenerate(700, 600)
    assert [a.active for a in chart.controller.attributes()] == [False, True]


def test_reload_without_pinned_record_shows_placeholder(scatter_window, scatter_payload):
    chart = scatter_window.chart
    chart.controller.on_click(chart.dataset.records[1])

    chart.set_dataset(parse_scatter(scatter_payload[:1]))
    assert chart.store.pinned is None
    assert scatter_window.lbl_blocked.text() == PLACEHOLDERS[ChartVariant.SCATTER]


def test_resize_burst_regenerates_once(qapp, scatter_dataset):
    chart = ChartContext(ChartVariant.SCATTER, debounce_ms=100)
    chart.set_dataset(scatter_dataset)
    count = chart.regeneration_count

    for width in (700, 720, 740, 760, 780):
        chart.resize(width, 600)
        QTest.qWait(10)

    assert _wait_until(lambda: chart.regeneration_count > count)
    QTest.qWait(200)
    assert chart.regeneration_count == count + 1
    assert chart.size == (780, 600)


def test_background_load_publishes_dataset(qapp, monkeypatch, scatter_dataset):
    monkeypatch.setattr(workers, "load_dataset", lambda variant, url, timeout=None: scatter_dataset)
    chart = ChartContext(ChartVariant.SCATTER)
    chart.regenerate(900, 600)

    chart.load()
    assert _wait_until(lambda: chart.dataset is scatter_dataset)
    assert len(chart.elements) == 2
    chart.close()


def test_latest_load_wins(qapp, monkeypatch, scatter_payload):
    slow = parse_scatter(scatter_payload)
    fast = parse_scatter(scatter_payload[:1])
    results = iter([slow, fast])

    def fake_load(variant, url, timeout=None):
        dataset = next(results)
        if dataset is slow:
            time.sleep(0.3)
        return dataset

    monkeypatch.setattr(workers, "load_dataset", fake_load)
    chart = ChartContext(ChartVariant.SCATTER)

    chart.load()
    QTest.qWait(50)
    chart.load()

    assert _wait_until(lambda: chart.dataset is fast)
    # Give the slow request time to land; it must be ignored
    QTest.qWait(500)
    assert chart.dataset is fast
    chart.close()


def test_load_error_keeps_previous_chart(qapp, monkeypatch, scatter_dataset):
    def failing_load(variant, url, timeout=None):
        raise LoadError("Server responded with 500")

    chart = ChartContext(ChartVariant.SCATTER)
    chart.regenerate(900, 600)
    chart.set_dataset(scatter_dataset)
    elements = chart.elements

    errors = []
    chart.load_failed.connect(errors.append)
    monkeypatch.setattr(workers, "load_dataset", failing_load)
    chart.load()

    assert _wait_until(lambda: bool(errors))
    assert "500" in errors[0]
    assert chart.dataset is scatter_dataset
    assert chart.elements is elements
    chart.close()


def test_set_dataset_rejects_other_variant(qapp, heatmap_dataset):
    chart = ChartContext(ChartVariant.SCATTER)
    with pytest.raises(ValueError):
        chart.set_dataset(heatmap_dataset)


def test_unexpected_load_failure_is_reported(qapp, monkeypatch, scatter_dataset):
    def broken_load(variant, url, timeout=None):
        raise OverflowError("cannot convert float infinity to integer")

    chart = ChartContext(ChartVariant.SCATTER)
    window = MainWindow(chart)
    chart.regenerate(900, 600)
    chart.set_dataset(scatter_dataset)

    errors = []
    chart.load_failed.connect(errors.append)
    monkeypatch.setattr(workers, "load_dataset", broken_load)
    chart.load()

    assert _wait_until(lambda: bool(errors))
    assert "infinity" in errors[0]
    assert window.lbl_status.text().startswith("Could not load data:")
    assert chart.dataset is scatter_dataset
    window.close()


def test_close_waits_for_running_load(qapp, monkeypatch, scatter_dataset):
    def slow_load(variant, url, timeout=None):
        time.sleep(0.3)
        return scatter_dataset

    monkeypatch.setattr(workers, "load_dataset", slow_load)
    chart = ChartContext(ChartVariant.SCATTER)
    chart.load()
    QTest.qWait(20)
    assert chart.is_loading

    chart.close()
    assert not chart.is_loading
    # The queued result of the finished thread lands after close and is ignored
    QTest.qWait(100)
    assert chart.dataset is None


def test_heatmap_placeholder_before_first_load(qapp):
    chart = ChartContext(ChartVariant.HEATMAP, url="https://example.test/temperature.json")
    window = MainWindow(chart)
    assert window.lbl_blocked.text() == PLACEHOLDERS[ChartVariant.HEATMAP]
    window.close()


def test_tooltip_follows_relayout(qapp, heatmap_dataset):
    chart = ChartContext(ChartVariant.HEATMAP)
    chart.regenerate(1000, 600)
    chart.set_dataset(heatmap_dataset)

    anchored = []

    def anchor(element):
        anchored.append(element)
        return QPoint(int(element.x), int(element.y))

    host = QWidget()
    label = QLabel(host)
    TooltipRenderer(label, chart, anchor=anchor)
    record = chart.dataset.records[2]
    chart.controller.on_hover(record)
    before = anchored[-1]

    chart.regenerate(600, 600)
    after = anchored[-1]
    assert after.record is record
    assert after is chart.elements[2]
    assert after.x != before.x
    assert label.pos() == QPoint(int(after.x), int(after.y))
    assert not label.isHidden()
