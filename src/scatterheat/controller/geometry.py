"""
Geometry Binder
===============
Turns records into renderable shapes for one render pass, and derives the
visual attributes of every shape from the current selection.

Both functions are pure: identical inputs always give identical outputs, and
nothing here touches Qt. The widget layer only paints what it is handed.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Optional, Sequence, TYPE_CHECKING

import numpy as np

from scatterheat import config
from scatterheat.controller.scales import ScaleSet
from scatterheat.model.records import ChartVariant, Dataset, HeatmapRecord, Record, ScatterRecord

if TYPE_CHECKING:
    from scatterheat.model.state import SelectionState


class ShapeKind(StrEnum):
    CIRCLE = "circle"
    CELL = "cell"


# Heatmap colour buckets, coolest first
COOLEST = "coolest"
COOL = "cool"
WARM = "warm"
WARMEST = "warmest"

DOPING = "doping"
CLEAN = "clean"


def variance_bucket(variance: float) -> str:
    """Lower bounds are exclusive, upper bounds inclusive: (-1, 0] is 'cool'."""
    if variance <= -1.0:
        return COOLEST
    if variance <= 0.0:
        return COOL
    if variance <= 1.0:
        return WARM
    return WARMEST


@dataclass(frozen=True)
class VisualElement:
    """
    One shape per record. For circles `x`, `y` is the centre and `width`,
    `height` the diameter; for cells `x`, `y` is the top-left corner.
    """
    index: int
    record: Record
    shape: ShapeKind
    x: float
    y: float
    width: float
    height: float
    color_class: str
    # Exposed on the rendered item for inspection (data-xvalue / data-yvalue)
    x_value: str
    y_value: str
    # Absolute temperature of a heatmap cell (data-temp)
    temperature: Optional[float] = None

    @property
    def size(self) -> float:
        return self.width


@dataclass(frozen=True)
class VisualAttributes:
    fill: str
    active: bool = False
    hovered: bool = False


def _bind_scatter(dataset: Dataset, scales: ScaleSet) -> tuple[VisualElement, ...]:
    records: Sequence[ScatterRecord] = dataset.records
    xs = np.atleast_1d(scales.x([r.date for r in records]))
    ys = np.atleast_1d(scales.y(np.array([r.seconds for r in records], dtype=np.float64))) + scales.y_offset
    diameter = 2 * config.DOT_RADIUS

    return tuple(
        VisualElement(
            index=i,
            record=r,
            shape=ShapeKind.CIRCLE,
            x=float(xs[i]),
            y=float(ys[i]),
            width=diameter,
            height=diameter,
            color_class=DOPING if r.has_doping else CLEAN,
            x_value=r.date.isoformat(),
            y_value=r.time,
        )
        for i, r in enumerate(records)
    )


def _bind_heatmap(dataset: Dataset, scales: ScaleSet) -> tuple[VisualElement, ...]:
    records: Sequence[HeatmapRecord] = dataset.records
    years = {r.year for r in records}
    year_count = max(years) - min(years) + 1
    cell_w = scales.plot_width / year_count
    cell_h = scales.plot_height / 12

    xs = np.atleast_1d(scales.x(np.array([r.year for r in records], dtype=np.float64)))
    ys = np.atleast_1d(scales.y(np.array([r.month - 1 for r in records], dtype=np.float64)))

    return tuple(
        VisualElement(
            index=i,
            record=r,
            shape=ShapeKind.CELL,
            x=float(xs[i]),
            y=float(ys[i]),
            width=cell_w,
            height=cell_h,
            color_class=variance_bucket(r.variance),
            x_value=str(r.year),
            y_value=str(r.month - 1),
            temperature=round(dataset.absolute_temperature(r), 3),
        )
        for i, r in enumerate(records)
    )


def bind(dataset: Dataset, scales: ScaleSet) -> tuple[VisualElement, ...]:
    """Map each record to a VisualElement, preserving dataset order."""
    if not dataset.records:
        return ()
    match dataset.variant:
        case ChartVariant.SCATTER:
            return _bind_scatter(dataset, scales)
        case ChartVariant.HEATMAP:
            return _bind_heatmap(dataset, scales)
    raise ValueError(f"Unsupported chart variant: {dataset.variant}")


def visual_attributes(
    elements: Sequence[VisualElement],
    selection: SelectionState,
) -> tuple[VisualAttributes, ...]:
    """
    Derive the attributes of every element from scratch. Matching is by
    identity, so at most one element can be active for a pinned record.
    """
    pinned = selection.pinned
    hovered = selection.hovered
    result = []
    for element in elements:
        active = pinned is not None and element.record is pinned
        is_hovered = hovered is not None and element.record is hovered
        if active:
            fill = config.ACTIVE_COLOR
        elif is_hovered:
            fill = config.HOVER_COLOR
        else:
            fill = config.COLORS[element.color_class]
        result.append(VisualAttributes(fill=fill, active=active, hovered=is_hovered))
    return tuple(result)
