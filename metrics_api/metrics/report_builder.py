"""Assembly of composite metric reports from per-metric series."""

from __future__ import annotations

from typing import Mapping

from .mapped_metric import MappedMetric
from .models import TimeSeries, TimeSeriesComponentMetric


def build_time_series_component_metric(
    name: str,
    stats: Mapping[str, TimeSeries],
) -> TimeSeriesComponentMetric:
    """Build the report for ``name`` from series keyed by metric identifier.

    ackedRecords is exposed through ``misc`` for older report consumers.

    Raises:
        KeyError: if one of the stats metrics is missing from ``stats``
    """
    misc = {
        MappedMetric.ACKED_RECORDS.value: stats[MappedMetric.ACKED_RECORDS.value],
    }

    return TimeSeriesComponentMetric(
        component_name=name,
        input_records=stats[MappedMetric.INPUT_RECORDS.value],
        output_records=stats[MappedMetric.OUTPUT_RECORDS.value],
        failed_records=stats[MappedMetric.FAILED_RECORDS.value],
        processed_time=stats[MappedMetric.PROCESSED_TIME.value],
        records_in_wait_queue=stats[MappedMetric.RECORDS_IN_WAIT_QUEUE.value],
        misc=misc,
    )
