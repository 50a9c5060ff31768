"""Mapping from abstract topology metrics to Storm metric names."""

from __future__ import annotations

from enum import Enum
from typing import Optional, Union

from ..core.domain.querier_interface import AggregateFunction


class MappedMetric(str, Enum):
    """Abstract metric identifier with its backend name and aggregation.

    The value is the identifier exposed to report consumers. Kafka offset
    templates carry a ``{topic}`` placeholder.
    """

    COMPLETE_LATENCY = ("completeLatency", "__complete-latency", AggregateFunction.AVG)
    INPUT_RECORDS = ("inputRecords", "__execute-count", AggregateFunction.SUM)
    OUTPUT_RECORDS = ("outputRecords", "__emit-count", AggregateFunction.SUM)
    ACKED_RECORDS = ("ackedRecords", "__ack-count", AggregateFunction.SUM)
    FAILED_RECORDS = ("failedRecords", "__fail-count", AggregateFunction.SUM)
    PROCESSED_TIME = ("processedTime", "__process-latency", AggregateFunction.AVG)
    RECORDS_IN_WAIT_QUEUE = ("recordsInWaitQueue", "__receive.population", AggregateFunction.AVG)
    LOGSIZE = ("logsize", "kafkaOffset.{topic}/totalLatestTimeOffset", AggregateFunction.SUM)
    OFFSET = ("offset", "kafkaOffset.{topic}/totalLatestCompletedOffset", AggregateFunction.SUM)
    LAG = ("lag", "kafkaOffset.{topic}/totalSpoutLag", AggregateFunction.SUM)

    def __new__(cls, key: str, storm_metric_name: str, aggregate_function: AggregateFunction):
        obj = str.__new__(cls, key)
        obj._value_ = key
        obj.storm_metric_name = storm_metric_name
        obj.aggregate_function = aggregate_function
        return obj

    @property
    def requires_topic(self) -> bool:
        return "{topic}" in self.storm_metric_name

    def backend_name(self, topic: Optional[str] = None) -> str:
        """Render the backend metric name, substituting the Kafka topic."""
        if not self.requires_topic:
            return self.storm_metric_name
        if not topic:
            raise ValueError(f"Metric {self.value} requires a Kafka topic name")
        return self.storm_metric_name.format(topic=topic)

    @classmethod
    def resolve(cls, metric: Union["MappedMetric", str]) -> "MappedMetric":
        """Look up a metric by member or identifier (``"inputRecords"``).

        Raises:
            KeyError: if the identifier has no mapping
        """
        if isinstance(metric, cls):
            return metric
        try:
            return cls(metric)
        except ValueError:
            raise KeyError(f"No mapped metric for {metric!r}") from None


STATS_METRICS = (
    MappedMetric.INPUT_RECORDS,
    MappedMetric.OUTPUT_RECORDS,
    MappedMetric.ACKED_RECORDS,
    MappedMetric.FAILED_RECORDS,
    MappedMetric.PROCESSED_TIME,
    MappedMetric.RECORDS_IN_WAIT_QUEUE,
)

KAFKA_OFFSET_METRICS = (
    MappedMetric.LOGSIZE,
    MappedMetric.OFFSET,
    MappedMetric.LAG,
)
