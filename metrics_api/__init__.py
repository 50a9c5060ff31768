"""Topology time series metrics aggregation.

Modules:
- metrics.mapped_metric: abstract metric -> Storm metric name + aggregation
- metrics.aggregator: concurrent fan-out and report assembly
- topology.topic_resolver: Kafka topic lookup from topology config
- backends: Ambari Metrics querier and Storm name resolver
- factory: wiring from settings
- cli: command line entry point
"""

from .core.exceptions import (
    DataSourceTypeMismatchError,
    EntityNotDeployedError,
    InvalidTimeRangeError,
    MetricQueryError,
    QuerierNotConfiguredError,
    TopicNotConfiguredError,
    TopologyConfigMalformedError,
    TopologyMetricsError,
)
from .metrics.aggregator import TopologyTimeSeriesMetrics
from .metrics.mapped_metric import MappedMetric
from .metrics.models import TimeSeriesComponentMetric
from .topology.layout import Component, TopologyLayout

__all__ = [
    "Component",
    "DataSourceTypeMismatchError",
    "EntityNotDeployedError",
    "InvalidTimeRangeError",
    "MappedMetric",
    "MetricQueryError",
    "QuerierNotConfiguredError",
    "TimeSeriesComponentMetric",
    "TopicNotConfiguredError",
    "TopologyConfigMalformedError",
    "TopologyLayout",
    "TopologyMetricsError",
    "TopologyTimeSeriesMetrics",
]
