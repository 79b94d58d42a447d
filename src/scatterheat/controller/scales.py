"""
Scale Builder
=============
Maps dataset values (years, dates, durations, month slots) to pixel space.

Every scale is an immutable value object. A resize never mutates a scale; the
chart builds a brand new ScaleSet for the new container box instead.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from datetime import date
from typing import Sequence

import numpy as np

from scatterheat.model.records import ChartVariant, Dataset

logger = logging.getLogger(__name__)

# Widening applied to a domain whose extrema coincide
MIN_YEAR_SPAN: int = 1
MIN_DURATION_SPAN: float = 60.0
MIN_PIXEL_SPAN: float = 1.0

# Fallback extents for a dataset without records
EMPTY_YEARS: tuple[int, int] = (2000, 2001)
EMPTY_SECONDS: tuple[float, float] = (0.0, 60.0)

# Candidate tick steps for a duration axis, in seconds
DURATION_STEPS: tuple[int, ...] = (1, 2, 5, 10, 15, 30, 60, 120, 300, 600, 900, 1800, 3600)

MONTH_SLOTS: int = 12


def tick_step(start: float, stop: float, count: int = 10) -> float:
    """
    Return a 1, 2 or 5 times power-of-ten step that splits [start, stop]
    into roughly `count` intervals.
    """
    span = abs(stop - start)
    if span == 0 or count <= 0:
        return 1.0
    step0 = span / count
    step1 = 10 ** math.floor(math.log10(step0))
    error = step0 / step1
    if error >= math.sqrt(50):
        step1 *= 10
    elif error >= math.sqrt(10):
        step1 *= 5
    elif error >= math.sqrt(2):
        step1 *= 2
    return float(step1)


def duration_step(start: float, stop: float, count: int = 10) -> float:
    """Pick the smallest clock-friendly step (seconds) covering span/count."""
    target = abs(stop - start) / max(count, 1)
    for step in DURATION_STEPS:
        if step >= target:
            return float(step)
    return float(DURATION_STEPS[-1])


def _widen(lo: float, hi: float, minimum: float) -> tuple[float, float]:
    """Guarantee a non-zero span by growing symmetrically around the midpoint."""
    if hi - lo >= minimum:
        return lo, hi
    mid = (lo + hi) / 2
    return mid - minimum / 2, mid + minimum / 2


def _pixel_range(r0: float, r1: float) -> tuple[float, float]:
    if r1 - r0 < MIN_PIXEL_SPAN:
        return r0, r0 + MIN_PIXEL_SPAN
    return r0, r1


@dataclass(frozen=True)
class LinearScale:
    """Continuous mapping `domain -> range`; accepts scalars or arrays."""
    domain: tuple[float, float]
    range: tuple[float, float]

    def __post_init__(self) -> None:
        d0, d1 = self.domain
        if d0 == d1:
            raise ValueError(f"Degenerate domain {self.domain}.")

    def __call__(self, value):
        d0, d1 = self.domain
        r0, r1 = self.range
        t = (np.asarray(value, dtype=np.float64) - d0) / (d1 - d0)
        out = r0 + t * (r1 - r0)
        return float(out) if out.ndim == 0 else out

    def invert(self, px):
        d0, d1 = self.domain
        r0, r1 = self.range
        t = (np.asarray(px, dtype=np.float64) - r0) / (r1 - r0)
        out = d0 + t * (d1 - d0)
        return float(out) if out.ndim == 0 else out

    def nice(self, count: int = 10, step_fn=tick_step) -> LinearScale:
        """Extend the domain outwards to multiples of a round step."""
        d0, d1 = self.domain
        lo, hi = min(d0, d1), max(d0, d1)
        # Re-evaluate: the step can grow once the domain has been extended
        for _ in range(10):
            step = step_fn(lo, hi, count)
            new_lo = math.floor(lo / step) * step
            new_hi = math.ceil(hi / step) * step
            if (new_lo, new_hi) == (lo, hi):
                break
            lo, hi = new_lo, new_hi
        domain = (lo, hi) if d0 <= d1 else (hi, lo)
        return replace(self, domain=domain)

    def ticks(self, count: int = 10, step_fn=tick_step) -> list[float]:
        d0, d1 = self.domain
        lo, hi = min(d0, d1), max(d0, d1)
        step = step_fn(lo, hi, count)
        first = math.ceil(lo / step)
        last = math.floor(hi / step)
        return [round(i * step, 10) for i in range(first, last + 1)]


@dataclass(frozen=True)
class TimeScale:
    """
    Calendar-date axis. Dates are mapped through their proleptic ordinal, so
    the axis is continuous (leap years are slightly wider than others).
    """
    domain: tuple[date, date]
    range: tuple[float, float]

    @property
    def _linear(self) -> LinearScale:
        return LinearScale((self.domain[0].toordinal(), self.domain[1].toordinal()), self.range)

    def __call__(self, value):
        if isinstance(value, date):
            return self._linear(value.toordinal())
        return self._linear(np.array([d.toordinal() for d in value], dtype=np.float64))

    def invert(self, px: float) -> date:
        return date.fromordinal(int(round(self._linear.invert(px))))

    def _year_step(self, count: int) -> int:
        y0, y1 = self.domain[0].year, self.domain[1].year
        return max(1, int(tick_step(y0, y1, count)))

    def nice(self, count: int = 10) -> TimeScale:
        """Extend the domain to Jan 1 boundaries on a multiple-of-step year."""
        step = self._year_step(count)
        start, end = self.domain
        y0 = (start.year // step) * step
        last_year = end.year if (end.month, end.day) == (1, 1) else end.year + 1
        y1 = -(-last_year // step) * step
        if y1 <= y0:
            y1 = y0 + step
        # Coarse steps near either end of the calendar must not leave it
        y0, y1 = max(y0, date.min.year), min(y1, date.max.year)
        return replace(self, domain=(date(y0, 1, 1), date(y1, 1, 1)))

    def ticks(self, count: int = 10) -> list[date]:
        step = self._year_step(count)
        start, end = self.domain
        first = -(-start.year // step) * step
        if first > end.year:
            return []
        if date(first, 1, 1) < start:
            first += step
        return [date(y, 1, 1) for y in range(first, end.year + 1, step) if date(y, 1, 1) <= end]


@dataclass(frozen=True)
class ScaleSet:
    """Both axes of one render pass plus the box they were built for."""
    variant: ChartVariant
    x: LinearScale | TimeScale
    y: LinearScale
    width: float
    height: float
    padding: float
    plot_width: float
    plot_height: float
    # Vertical translation applied to shapes and the y-axis group
    y_offset: float = 0.0


def _year_extent(years: Sequence[int]) -> tuple[int, int]:
    if not years:
        return EMPTY_YEARS
    return min(years), max(years)


def build_scatter_scales(dataset: Dataset, width: float, height: float, padding: float) -> ScaleSet:
    y_lo, y_hi = _year_extent([r.year for r in dataset])
    if y_hi - y_lo < MIN_YEAR_SPAN:
        y_lo, y_hi = y_lo - MIN_YEAR_SPAN, y_hi + MIN_YEAR_SPAN

    seconds = [r.seconds for r in dataset]
    s_lo, s_hi = (min(seconds), max(seconds)) if seconds else EMPTY_SECONDS
    s_lo, s_hi = _widen(float(s_lo), float(s_hi), MIN_DURATION_SPAN)

    plot_height = height - 2 * padding
    x = TimeScale(
        domain=(date(y_lo, 1, 1), date(y_hi, 1, 1)),
        range=_pixel_range(padding, width - padding / 2),
    ).nice()
    y = LinearScale(
        domain=(s_lo, s_hi),
        range=_pixel_range(0.0, plot_height),
    ).nice(step_fn=duration_step)

    return ScaleSet(
        variant=ChartVariant.SCATTER,
        x=x,
        y=y,
        width=width,
        height=height,
        padding=padding,
        plot_width=x.range[1] - x.range[0],
        plot_height=y.range[1] - y.range[0],
        y_offset=padding,
    )


def build_heatmap_scales(dataset: Dataset, width: float, height: float, padding: float) -> ScaleSet:
    y_lo, y_hi = _year_extent([r.year for r in dataset])
    # Half-open, one slot per year; never degenerate
    x = LinearScale(domain=(y_lo, y_hi + 1), range=_pixel_range(padding, width - padding))
    y = LinearScale(domain=(0, MONTH_SLOTS), range=_pixel_range(padding, height - padding))

    return ScaleSet(
        variant=ChartVariant.HEATMAP,
        x=x,
        y=y,
        width=width,
        height=height,
        padding=padding,
        plot_width=x.range[1] - x.range[0],
        plot_height=y.range[1] - y.range[0],
    )


def build_scales(dataset: Dataset, width: float, height: float, padding: float) -> ScaleSet:
    """Build the x/y scales of one render pass. Pure; safe to call on every resize."""
    match dataset.variant:
        case ChartVariant.SCATTER:
            scales = build_scatter_scales(dataset, width, height, padding)
        case ChartVariant.HEATMAP:
            scales = build_heatmap_scales(dataset, width, height, padding)
        case _:
            raise ValueError(f"Unsupported chart variant: {dataset.variant}")
    logger.debug(f"Built {dataset.variant} scales for {width}x{height}: x={scales.x.domain}, y={scales.y.domain}")
    return scales
