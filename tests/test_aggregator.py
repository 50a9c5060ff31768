"""Tests del agregador de métricas de topologías.

Ejecutar:
    pytest tests/test_aggregator.py -v
"""

import threading

import pytest

from metrics_api.core.domain.querier_interface import AggregateFunction
from metrics_api.core.exceptions import (
    EntityNotDeployedError,
    InvalidTimeRangeError,
    MetricQueryError,
    QuerierNotConfiguredError,
    TopicNotConfiguredError,
    TopologyConfigMalformedError,
)
from metrics_api.metrics.aggregator import TopologyTimeSeriesMetrics, get_component_name
from metrics_api.topology.layout import Component, TopologyLayout

from .conftest import FROM_MS, TO_MS, FakeNameResolver, FakeQuerier


@pytest.fixture
def metrics(name_resolver):
    return TopologyTimeSeriesMetrics(name_resolver)


# =============================================================================
# PRECONDICIONES
# =============================================================================

class TestPreconditions:

    def test_querier_not_set(self, metrics, topology, kafka_component):
        with pytest.raises(QuerierNotConfiguredError):
            metrics.get_topology_stats(topology, FROM_MS, TO_MS)
        with pytest.raises(QuerierNotConfiguredError):
            metrics.get_component_stats(topology, kafka_component, FROM_MS, TO_MS)
        with pytest.raises(QuerierNotConfiguredError):
            metrics.get_complete_latency(topology, kafka_component, FROM_MS, TO_MS)
        with pytest.raises(QuerierNotConfiguredError):
            metrics.get_kafka_topic_offsets(topology, kafka_component, FROM_MS, TO_MS)

    def test_querier_not_set_checked_before_resolution(self, topology):
        metrics = TopologyTimeSeriesMetrics(FakeNameResolver({}))

        with pytest.raises(QuerierNotConfiguredError):
            metrics.get_topology_stats(topology, FROM_MS, TO_MS)

    def test_querier_accessor(self, metrics):
        querier = FakeQuerier()
        assert metrics.time_series_querier is None

        metrics.set_time_series_querier(querier)

        assert metrics.time_series_querier is querier

    @pytest.mark.parametrize("from_ms, to_ms", [(TO_MS, FROM_MS), (FROM_MS, FROM_MS), (-1, TO_MS)])
    def test_invalid_time_range(self, metrics, topology, from_ms, to_ms):
        metrics.set_time_series_querier(FakeQuerier())

        with pytest.raises(InvalidTimeRangeError):
            metrics.get_topology_stats(topology, from_ms, to_ms)

    def test_topology_not_deployed(self, topology):
        querier = FakeQuerier()
        metrics = TopologyTimeSeriesMetrics(FakeNameResolver({}))
        metrics.set_time_series_querier(querier)

        with pytest.raises(EntityNotDeployedError):
            metrics.get_topology_stats(topology, FROM_MS, TO_MS)
        assert querier.calls == []


# =============================================================================
# STATS (FAN-OUT)
# =============================================================================

class TestTopologyStats:

    def test_series_match_querier_output(self, metrics, topology, stats_series):
        metrics.set_time_series_querier(FakeQuerier(stats_series))

        report = metrics.get_topology_stats(topology, FROM_MS, TO_MS)

        assert report.component_name == "orders"
        assert report.input_records == {FROM_MS: 5.0, FROM_MS + 60_000: 10.0}
        assert report.output_records == stats_series["__emit-count"]
        assert report.failed_records == stats_series["__fail-count"]
        assert report.processed_time == stats_series["__process-latency"]
        assert report.records_in_wait_queue == stats_series["__receive.population"]
        assert report.misc == {"ackedRecords": stats_series["__ack-count"]}

    def test_series_are_ordered(self, metrics, topology, stats_series):
        metrics.set_time_series_querier(FakeQuerier(stats_series))

        report = metrics.get_topology_stats(topology, FROM_MS, TO_MS)

        assert list(report.input_records) == sorted(report.input_records)

    def test_one_query_per_stats_metric(self, metrics, topology, stats_series):
        querier = FakeQuerier(stats_series)
        metrics.set_time_series_querier(querier)

        metrics.get_topology_stats(topology, FROM_MS, TO_MS)

        assert len(querier.calls) == 6
        assert {c[2] for c in querier.calls} == set(stats_series)
        assert all(c[0] == "topology" and c[1] == "streamline-7-orders" for c in querier.calls)

    def test_aggregate_functions_forwarded(self, metrics, topology, stats_series):
        querier = FakeQuerier(stats_series)
        metrics.set_time_series_querier(querier)

        metrics.get_topology_stats(topology, FROM_MS, TO_MS)

        functions = {c[2]: c[3] for c in querier.calls}
        assert functions["__execute-count"] is AggregateFunction.SUM
        assert functions["__process-latency"] is AggregateFunction.AVG
        assert functions["__receive.population"] is AggregateFunction.AVG

    def test_queries_run_concurrently(self, metrics, topology, stats_series):
        # Solo pasa si las 6 consultas están en vuelo a la vez.
        barrier = threading.Barrier(6, timeout=5)
        metrics.set_time_series_querier(FakeQuerier(stats_series, barrier=barrier))

        report = metrics.get_topology_stats(topology, FROM_MS, TO_MS)

        assert report.misc["ackedRecords"] == stats_series["__ack-count"]

    def test_one_failure_fails_whole_request(self, metrics, topology, stats_series):
        querier = FakeQuerier(stats_series, fail_on="__fail-count")
        metrics.set_time_series_querier(querier)

        with pytest.raises(MetricQueryError) as exc_info:
            metrics.get_topology_stats(topology, FROM_MS, TO_MS)

        assert exc_info.value.metric_name == "__fail-count"
        # Barrera: todas las consultas terminan antes de propagar el error
        assert len(querier.calls) == 6

    def test_empty_results_are_valid(self, metrics, topology):
        metrics.set_time_series_querier(FakeQuerier({}))

        report = metrics.get_topology_stats(topology, FROM_MS, TO_MS)

        assert report.input_records == {}
        assert report.misc == {"ackedRecords": {}}


class TestComponentStats:

    def test_component_granularity(self, metrics, topology, kafka_component, stats_series):
        querier = FakeQuerier(stats_series)
        metrics.set_time_series_querier(querier)

        report = metrics.get_component_stats(topology, kafka_component, FROM_MS, TO_MS)

        assert report.component_name == "kafkaSpout"
        assert len(querier.calls) == 6
        assert all(c[0] == "component" and c[2] == "3-kafkaSpout" for c in querier.calls)
        assert report.output_records == stats_series["__emit-count"]

    def test_single_worker_still_completes(self, name_resolver, topology, kafka_component, stats_series):
        metrics = TopologyTimeSeriesMetrics(name_resolver, max_workers=1)
        metrics.set_time_series_querier(FakeQuerier(stats_series))

        report = metrics.get_component_stats(topology, kafka_component, FROM_MS, TO_MS)

        assert report.failed_records == stats_series["__fail-count"]

    def test_failure_propagates(self, metrics, topology, kafka_component, stats_series):
        metrics.set_time_series_querier(FakeQuerier(stats_series, fail_on="__ack-count"))

        with pytest.raises(MetricQueryError):
            metrics.get_component_stats(topology, kafka_component, FROM_MS, TO_MS)


# =============================================================================
# MÉTRICAS INDIVIDUALES
# =============================================================================

class TestCompleteLatency:

    def test_queries_complete_latency(self, metrics, topology, kafka_component):
        querier = FakeQuerier({"__complete-latency": {FROM_MS + 1: 2.0, FROM_MS: 1.0}})
        metrics.set_time_series_querier(querier)

        series = metrics.get_complete_latency(topology, kafka_component, FROM_MS, TO_MS)

        assert list(series.items()) == [(FROM_MS, 1.0), (FROM_MS + 1, 2.0)]
        assert querier.calls == [(
            "component", "streamline-7-orders", "3-kafkaSpout", "__complete-latency",
            AggregateFunction.AVG, FROM_MS, TO_MS,
        )]


class TestKafkaTopicOffsets:

    def test_offsets_keyed_by_metric(self, metrics, topology, kafka_component):
        querier = FakeQuerier({
            "kafkaOffset.t1/totalLatestTimeOffset": {FROM_MS: 100.0},
            "kafkaOffset.t1/totalLatestCompletedOffset": {FROM_MS: 90.0},
            "kafkaOffset.t1/totalSpoutLag": {FROM_MS: 10.0},
        })
        metrics.set_time_series_querier(querier)

        offsets = metrics.get_kafka_topic_offsets(topology, kafka_component, FROM_MS, TO_MS)

        assert offsets == {
            "logsize": {FROM_MS: 100.0},
            "offset": {FROM_MS: 90.0},
            "lag": {FROM_MS: 10.0},
        }
        assert len(querier.calls) == 3

    def test_no_topic_fails_without_querying(self, metrics, topology):
        querier = FakeQuerier()
        metrics.set_time_series_querier(querier)

        with pytest.raises(TopicNotConfiguredError):
            metrics.get_kafka_topic_offsets(topology, Component(9, "unknown"), FROM_MS, TO_MS)
        assert querier.calls == []

    def test_non_kafka_source_is_config_error(self, metrics, topology):
        querier = FakeQuerier()
        metrics.set_time_series_querier(querier)

        with pytest.raises(TopologyConfigMalformedError):
            metrics.get_kafka_topic_offsets(topology, Component(2, "hdfsSource"), FROM_MS, TO_MS)
        assert querier.calls == []

    def test_topic_policy_applied(self, name_resolver):
        topology = TopologyLayout(id=7, name="orders", config={"dataSources": [
            {"uiname": "spout", "type": "KAFKA", "config": {"topic": "a"}},
            {"uiname": "spout", "type": "KAFKA", "config": {"topic": "b"}},
        ]})
        querier = FakeQuerier()
        metrics = TopologyTimeSeriesMetrics(name_resolver, topic_match_policy="last")
        metrics.set_time_series_querier(querier)

        metrics.get_kafka_topic_offsets(topology, Component(1, "spout"), FROM_MS, TO_MS)

        assert {c[3] for c in querier.calls} == {
            "kafkaOffset.b/totalLatestTimeOffset",
            "kafkaOffset.b/totalLatestCompletedOffset",
            "kafkaOffset.b/totalSpoutLag",
        }


def test_component_name():
    assert get_component_name(Component(id=12, name="parser")) == "12-parser"
