"""Data models for topology time series metrics."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, Mapping, Tuple, Union

TimeSeries = Dict[int, float]

RawPoints = Union[Mapping[int, float], Iterable[Tuple[int, float]]]


def to_time_series(points: RawPoints) -> TimeSeries:
    """Merge raw query results into an ascending time series.

    Accepts a mapping or an iterable of ``(timestamp, value)`` pairs. When a
    timestamp repeats, the last value written wins.
    """
    items = points.items() if isinstance(points, Mapping) else points

    merged: Dict[int, float] = {}
    for ts, value in items:
        merged[int(ts)] = float(value)

    return dict(sorted(merged.items()))


@dataclass(frozen=True)
class TimeSeriesComponentMetric:
    """Composite metric report for a topology or one of its components."""

    component_name: str

    input_records: TimeSeries
    output_records: TimeSeries
    failed_records: TimeSeries
    processed_time: TimeSeries
    records_in_wait_queue: TimeSeries

    # Auxiliary metrics (always contains "ackedRecords")
    misc: Dict[str, TimeSeries] = field(default_factory=dict)

    def to_dict(self) -> dict:
        """Serialize with the keys used by report consumers."""
        return {
            "componentName": self.component_name,
            "inputRecords": dict(self.input_records),
            "outputRecords": dict(self.output_records),
            "failedRecords": dict(self.failed_records),
            "processedTime": dict(self.processed_time),
            "recordsInWaitQueue": dict(self.records_in_wait_queue),
            "misc": {name: dict(series) for name, series in self.misc.items()},
        }
