"""
Record Renderers
================
Formatting of records for the hover tooltip, the pinned detail panel, the
pinned-vs-hovered comparison line and the summary stats bar.

The `format_*` functions are pure and return plain text. The renderer classes
subscribe to the SelectionStore and push that text into their Qt targets.
"""
from __future__ import annotations

import calendar
import logging
from dataclasses import dataclass
from datetime import date
from typing import Callable, Optional, TYPE_CHECKING

from PySide6.QtCore import QPoint
from PySide6.QtWidgets import QLabel

from scatterheat.model.records import ChartVariant, Dataset, HeatmapRecord, Record, ScatterRecord, format_duration

if TYPE_CHECKING:
    from scatterheat.controller.chart import ChartContext
    from scatterheat.controller.geometry import VisualElement

logger = logging.getLogger(__name__)

PLACEHOLDERS: dict[ChartVariant, str] = {
    ChartVariant.SCATTER: "Click a dot to block details",
    ChartVariant.HEATMAP: "Click a cell to view details",
}

EMPTY_VALUE = "-"


# ------------------------------------------------------------------------------
# Pure formatting
# ------------------------------------------------------------------------------

def format_temperature(value: float, signed: bool = False) -> str:
    return f"{value:+.1f}°C" if signed else f"{value:.1f}°C"


def format_scatter(record: ScatterRecord) -> str:
    lines = [
        f"Name: {record.name}, {record.nationality}",
        f"Year: {record.year}  Time: {record.time}",
    ]
    if record.doping:
        lines.append(f"Doping: {record.doping}")
    return "\n".join(lines)


def format_heatmap(record: HeatmapRecord, base_temperature: float) -> str:
    return "\n".join([
        f"Year: {record.year}",
        f"Month: {calendar.month_name[record.month]}",
        f"Temperature: {format_temperature(base_temperature + record.variance)}",
        f"Variance: {format_temperature(record.variance, signed=True)}",
    ])


def format_record(
    record: Optional[Record],
    dataset: Optional[Dataset],
    variant: ChartVariant = ChartVariant.SCATTER,
) -> str:
    """
    Text block for `record`, or the placeholder when nothing (or a record
    that is no longer part of `dataset`) is selected. `variant` picks the
    placeholder while no dataset has been loaded yet.
    """
    if dataset is None:
        return PLACEHOLDERS[variant]
    if record is None or not dataset.contains(record):
        return PLACEHOLDERS[dataset.variant]
    if isinstance(record, ScatterRecord):
        return format_scatter(record)
    return format_heatmap(record, dataset.base_temperature)


def date_difference(first: date, second: date) -> str:
    """Calendar distance in whole months, e.g. '4 years and 3 months'."""
    months = abs((first.year - second.year) * 12 + (first.month - second.month))
    return f"{months // 12} years and {months % 12} months"


def format_comparison(pinned: Optional[Record], hovered: Optional[Record], dataset: Optional[Dataset]) -> str:
    """Empty unless a pinned record and a different hovered record are both present."""
    if dataset is None or pinned is None or hovered is None or pinned is hovered:
        return ""
    if not (dataset.contains(pinned) and dataset.contains(hovered)):
        return ""

    lines = [f"Apart from pinned: {date_difference(hovered.date, pinned.date)}"]
    if isinstance(hovered, ScatterRecord):
        delta = hovered.seconds - pinned.seconds
        sign = "+" if delta >= 0 else ""
        lines.append(f"Time difference: {sign}{format_duration(delta)}")
    else:
        lines.append(f"Temperature difference: {format_temperature(hovered.variance - pinned.variance, signed=True)}")
    return "\n".join(lines)


@dataclass(frozen=True)
class SummaryStats:
    total: str
    max_value: str
    min_value: str


def summary_stats(dataset: Dataset) -> SummaryStats:
    if not dataset.records:
        return SummaryStats(total="0", max_value=EMPTY_VALUE, min_value=EMPTY_VALUE)

    if dataset.variant == ChartVariant.SCATTER:
        seconds = [r.seconds for r in dataset]
        return SummaryStats(
            total=str(len(dataset)),
            max_value=format_duration(max(seconds)),
            min_value=format_duration(min(seconds)),
        )

    temps = [dataset.absolute_temperature(r) for r in dataset]
    return SummaryStats(
        total=str(len(dataset)),
        max_value=format_temperature(max(temps)),
        min_value=format_temperature(min(temps)),
    )


# ------------------------------------------------------------------------------
# Store observers
# ------------------------------------------------------------------------------

class DetailPanelRenderer:
    """Keeps a persistent panel in sync with the pinned record."""

    def __init__(self, target: QLabel, chart: ChartContext) -> None:
        self.target = target
        self.chart = chart
        chart.store.pinned_changed.connect(self.update)
        chart.dataset_changed.connect(lambda _: self.update(chart.store.pinned))
        self.update(chart.store.pinned)

    def render(self, record: Optional[Record]) -> str:
        return format_record(record, self.chart.dataset, self.chart.variant)

    def update(self, record: Optional[Record]) -> None:
        self.target.setText(self.render(record))


class TooltipRenderer:
    """
    Transient overlay for the hovered record. Hidden whenever nothing is
    hovered. `anchor` maps the hovered element to a position on the overlay's
    parent widget.
    """

    def __init__(
        self,
        target: QLabel,
        chart: ChartContext,
        anchor: Optional[Callable[[VisualElement], QPoint]] = None,
    ) -> None:
        self.target = target
        self.chart = chart
        self.anchor = anchor
        chart.store.hovered_changed.connect(self.update)
        # A relayout replaces the shapes under the pointer without a hover-leave
        chart.geometry_changed.connect(lambda *_: self.update(chart.store.hovered))
        self.target.hide()

    def render(self, record: Optional[Record]) -> str:
        return format_record(record, self.chart.dataset, self.chart.variant)

    def _element_for(self, record: Record) -> Optional[VisualElement]:
        for element in self.chart.elements:
            if element.record is record:
                return element
        return None

    def update(self, record: Optional[Record]) -> None:
        element = self._element_for(record) if record is not None else None
        if element is None:
            self.target.hide()
            self.target.setProperty("data-year", None)
            return

        self.target.setText(self.render(record))
        self.target.setProperty("data-year", element.x_value)
        self.target.adjustSize()
        if self.anchor is not None:
            self.target.move(self.anchor(element))
        self.target.show()
        self.target.raise_()


class ComparisonRenderer:
    """Shows how the hovered record differs from the pinned one."""

    def __init__(self, target: QLabel, chart: ChartContext) -> None:
        self.target = target
        self.chart = chart
        chart.store.hovered_changed.connect(lambda _: self.update())
        chart.store.pinned_changed.connect(lambda _: self.update())
        self.update()

    def update(self) -> None:
        store = self.chart.store
        self.target.setText(format_comparison(store.pinned, store.hovered, self.chart.dataset))
