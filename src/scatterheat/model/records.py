"""Typed dataset records for both chart variants."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import StrEnum
from typing import Optional, Union


class ChartVariant(StrEnum):
    SCATTER = "scatter"
    HEATMAP = "heatmap"


# Calendar years a record may carry; one spare year on each side of
# `datetime.date`'s range for the widened date axis
MIN_YEAR = 2
MAX_YEAR = 9998


def _check_year(year: int) -> None:
    if not MIN_YEAR <= year <= MAX_YEAR:
        raise ValueError(f"Year must be within {MIN_YEAR}..{MAX_YEAR}, got {year}.")


def parse_duration(text: str) -> int:
    """
    Parse a 'M:SS' performance time into whole seconds.

    Raises:
        ValueError: If the text is not of the form 'M:SS'.
    """
    minutes, sep, seconds = text.strip().partition(":")
    if not sep or not minutes.isdigit() or not seconds.isdigit() or len(seconds) != 2:
        raise ValueError(f"Expected a 'M:SS' duration, got {text!r}.")
    if int(seconds) >= 60:
        raise ValueError(f"Seconds out of range in {text!r}.")
    return int(minutes) * 60 + int(seconds)


def format_duration(seconds: float) -> str:
    """Format whole seconds as 'M:SS'. Negative values keep their sign."""
    total = int(round(seconds))
    sign = "-" if total < 0 else ""
    minutes, secs = divmod(abs(total), 60)
    return f"{sign}{minutes}:{secs:02d}"


@dataclass(frozen=True)
class ScatterRecord:
    """One race result: a rider's time on the climb in a given year."""
    year: int
    seconds: int
    name: str
    nationality: str
    doping: str = ""

    def __post_init__(self) -> None:
        _check_year(self.year)

    @property
    def time(self) -> str:
        return format_duration(self.seconds)

    @property
    def date(self) -> date:
        """The record placed on the continuous date axis (Jan 1 of its year)."""
        return date(self.year, 1, 1)

    @property
    def has_doping(self) -> bool:
        return bool(self.doping)


@dataclass(frozen=True)
class HeatmapRecord:
    """Monthly deviation from the dataset's base temperature."""
    year: int
    month: int  # 1..12
    variance: float

    def __post_init__(self) -> None:
        _check_year(self.year)
        if not 1 <= self.month <= 12:
            raise ValueError(f"Month must be within 1..12, got {self.month}.")

    @property
    def date(self) -> date:
        return date(self.year, self.month, 1)


Record = Union[ScatterRecord, HeatmapRecord]

_RECORD_TYPES: dict[ChartVariant, type] = {
    ChartVariant.SCATTER: ScatterRecord,
    ChartVariant.HEATMAP: HeatmapRecord,
}


@dataclass(frozen=True)
class Dataset:
    """
    Immutable, ordered collection of records of a single variant.

    An empty dataset is permitted; the scale builder widens its domains so
    that rendering one does not fail.
    """
    variant: ChartVariant
    records: tuple[Record, ...] = ()
    base_temperature: Optional[float] = None

    def __post_init__(self) -> None:
        expected = _RECORD_TYPES[self.variant]
        for i, record in enumerate(self.records):
            if not isinstance(record, expected):
                raise ValueError(
                    f"Record {i} is a {type(record).__name__}, expected {expected.__name__} "
                    f"for a {self.variant} dataset."
                )
        if self.variant == ChartVariant.HEATMAP and self.base_temperature is None:
            raise ValueError("A heatmap dataset requires a base temperature.")

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self):
        return iter(self.records)

    def contains(self, record: Optional[Record]) -> bool:
        """Identity membership, so a stale record equal by value is not matched."""
        return record is not None and any(r is record for r in self.records)

    def find_equal(self, record: Record) -> Optional[Record]:
        """Return the record of this dataset that equals `record` by value."""
        for r in self.records:
            if r == record:
                return r
        return None

    def absolute_temperature(self, record: HeatmapRecord) -> float:
        return (self.base_temperature or 0.0) + record.variance
