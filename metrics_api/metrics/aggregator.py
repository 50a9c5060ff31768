"""Topology time series metrics backed by a pluggable querier.

Fans out one query per stats metric over a thread pool, joins all of them
and assembles a composite report. A single failed query fails the whole
request.
"""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Dict, Optional, Sequence

from ..core.domain.querier_interface import TimeSeriesQuerier, TopologyNameResolver
from ..core.exceptions import (
    InvalidTimeRangeError,
    QuerierNotConfiguredError,
    TopicNotConfiguredError,
)
from ..topology.layout import Component, TopologyLayout
from ..topology.topic_resolver import MATCH_FIRST, find_kafka_topic_name
from .mapped_metric import KAFKA_OFFSET_METRICS, STATS_METRICS, MappedMetric
from .models import TimeSeries, TimeSeriesComponentMetric, to_time_series
from .report_builder import build_time_series_component_metric

logger = logging.getLogger(__name__)

_DEFAULT_PARALLEL_WORKERS = len(STATS_METRICS)


def get_component_name(component: Component) -> str:
    """Name under which the runtime reports metrics for ``component``."""
    return f"{component.id}-{component.name}"


class TopologyTimeSeriesMetrics:
    """Time series metrics for topologies and their components.

    Uso:
        metrics = TopologyTimeSeriesMetrics(resolver)
        metrics.set_time_series_querier(querier)
        report = metrics.get_topology_stats(topology, from_ms, to_ms)
    """

    def __init__(
        self,
        name_resolver: TopologyNameResolver,
        max_workers: int = _DEFAULT_PARALLEL_WORKERS,
        topic_match_policy: str = MATCH_FIRST,
    ):
        self._name_resolver = name_resolver
        self._querier: Optional[TimeSeriesQuerier] = None
        self._max_workers = max(1, max_workers)
        self._topic_match_policy = topic_match_policy

    def set_time_series_querier(self, querier: TimeSeriesQuerier) -> None:
        self._querier = querier

    @property
    def time_series_querier(self) -> Optional[TimeSeriesQuerier]:
        return self._querier

    def get_complete_latency(
        self,
        topology: TopologyLayout,
        component: Component,
        from_ms: int,
        to_ms: int,
    ) -> TimeSeries:
        querier = self._check_request(from_ms, to_ms)

        topology_name = self._name_resolver.resolve_backend_name(topology.id, topology.name)
        component_name = get_component_name(component)

        return self._query_component_metric(
            querier, topology_name, component_name, MappedMetric.COMPLETE_LATENCY, from_ms, to_ms
        )

    def get_kafka_topic_offsets(
        self,
        topology: TopologyLayout,
        component: Component,
        from_ms: int,
        to_ms: int,
    ) -> Dict[str, TimeSeries]:
        """Kafka log size, committed offset and lag for a Kafka source.

        Raises:
            TopicNotConfiguredError: if no Kafka data source matches the component
        """
        querier = self._check_request(from_ms, to_ms)

        topology_name = self._name_resolver.resolve_backend_name(topology.id, topology.name)
        component_name = get_component_name(component)

        topic = find_kafka_topic_name(topology, component, policy=self._topic_match_policy)
        if topic is None:
            raise TopicNotConfiguredError(topology.name, component.name)

        offsets: Dict[str, TimeSeries] = {}
        for metric in KAFKA_OFFSET_METRICS:
            offsets[metric.value] = self._query_component_metric(
                querier, topology_name, component_name, metric, from_ms, to_ms, topic=topic
            )
        return offsets

    def get_topology_stats(
        self,
        topology: TopologyLayout,
        from_ms: int,
        to_ms: int,
    ) -> TimeSeriesComponentMetric:
        querier = self._check_request(from_ms, to_ms)

        topology_name = self._name_resolver.resolve_backend_name(topology.id, topology.name)

        stats = self._fan_out(
            STATS_METRICS,
            lambda m: self._query_topology_metric(querier, topology_name, m, from_ms, to_ms),
            topology.name,
        )
        return build_time_series_component_metric(topology.name, stats)

    def get_component_stats(
        self,
        topology: TopologyLayout,
        component: Component,
        from_ms: int,
        to_ms: int,
    ) -> TimeSeriesComponentMetric:
        querier = self._check_request(from_ms, to_ms)

        topology_name = self._name_resolver.resolve_backend_name(topology.id, topology.name)
        component_name = get_component_name(component)

        stats = self._fan_out(
            STATS_METRICS,
            lambda m: self._query_component_metric(
                querier, topology_name, component_name, m, from_ms, to_ms
            ),
            component_name,
        )
        return build_time_series_component_metric(component.name, stats)

    def _check_request(self, from_ms: int, to_ms: int) -> TimeSeriesQuerier:
        if self._querier is None:
            raise QuerierNotConfiguredError()
        if from_ms < 0 or from_ms >= to_ms:
            raise InvalidTimeRangeError(from_ms, to_ms)
        return self._querier

    def _fan_out(self, metrics: Sequence[MappedMetric], query, entity_name: str) -> Dict[str, TimeSeries]:
        """Run ``query`` for every metric and wait for all of them.

        The first failure is re-raised once every query has finished.
        """
        t0 = time.monotonic()
        stats: Dict[str, TimeSeries] = {}
        first_error: Optional[BaseException] = None

        with ThreadPoolExecutor(max_workers=min(self._max_workers, len(metrics))) as pool:
            futures = {pool.submit(query, m): m for m in metrics}
            for fut in as_completed(futures):
                metric = futures[fut]
                try:
                    stats[metric.value] = fut.result()
                except Exception as exc:
                    logger.error(
                        "metric_query_failed entity=%s metric=%s err=%s",
                        entity_name, metric.value, exc,
                    )
                    if first_error is None:
                        first_error = exc

        if first_error is not None:
            raise first_error

        logger.info(
            "stats_fan_out entity=%s metrics=%d ms=%.1f",
            entity_name, len(stats), (time.monotonic() - t0) * 1000,
        )
        return stats

    @staticmethod
    def _query_topology_metric(
        querier: TimeSeriesQuerier,
        topology_name: str,
        metric: MappedMetric,
        from_ms: int,
        to_ms: int,
    ) -> TimeSeries:
        points = querier.get_topology_level_metrics(
            topology_name, metric.backend_name(), metric.aggregate_function, from_ms, to_ms
        )
        return to_time_series(points)

    @staticmethod
    def _query_component_metric(
        querier: TimeSeriesQuerier,
        topology_name: str,
        component_name: str,
        metric: MappedMetric,
        from_ms: int,
        to_ms: int,
        topic: Optional[str] = None,
    ) -> TimeSeries:
        points = querier.get_metrics(
            topology_name,
            component_name,
            metric.backend_name(topic),
            metric.aggregate_function,
            from_ms,
            to_ms,
        )
        return to_time_series(points)
