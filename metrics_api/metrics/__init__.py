"""Metrics module: metric mapping, time series models and aggregation."""

from .mapped_metric import KAFKA_OFFSET_METRICS, STATS_METRICS, MappedMetric
from .models import TimeSeries, TimeSeriesComponentMetric, to_time_series
from .report_builder import build_time_series_component_metric
from .aggregator import TopologyTimeSeriesMetrics, get_component_name

__all__ = [
    "KAFKA_OFFSET_METRICS",
    "STATS_METRICS",
    "MappedMetric",
    "TimeSeries",
    "TimeSeriesComponentMetric",
    "to_time_series",
    "build_time_series_component_metric",
    "TopologyTimeSeriesMetrics",
    "get_component_name",
]
