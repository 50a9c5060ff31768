"""Fixtures compartidos para los tests del agregador de métricas."""

from __future__ import annotations

import threading
from typing import Dict, List, Mapping, Optional, Tuple

import pytest

from metrics_api.core.domain.querier_interface import (
    TimeSeriesQuerier,
    TopologyNameResolver,
)
from metrics_api.core.exceptions import EntityNotDeployedError, MetricQueryError
from metrics_api.topology.layout import Component, TopologyLayout

FROM_MS = 1_700_000_000_000
TO_MS = 1_700_000_600_000


class FakeQuerier(TimeSeriesQuerier):
    """Querier en memoria: devuelve series fijas por nombre de métrica."""

    def __init__(
        self,
        series: Optional[Dict[str, Mapping[int, float]]] = None,
        fail_on: Optional[str] = None,
        barrier: Optional[threading.Barrier] = None,
    ):
        self.series = series or {}
        self.fail_on = fail_on
        self.barrier = barrier
        self.calls: List[Tuple] = []
        self._lock = threading.Lock()

    def _respond(self, call: Tuple, metric_name: str) -> Mapping[int, float]:
        with self._lock:
            self.calls.append(call)
        if self.barrier is not None:
            self.barrier.wait()
        if metric_name == self.fail_on:
            raise MetricQueryError(metric_name, "backend unavailable")
        return self.series.get(metric_name, {})

    def get_topology_level_metrics(self, topology_name, metric_name, aggr_function, from_ms, to_ms):
        call = ("topology", topology_name, metric_name, aggr_function, from_ms, to_ms)
        return self._respond(call, metric_name)

    def get_metrics(self, topology_name, component_id, metric_name, aggr_function, from_ms, to_ms):
        call = ("component", topology_name, component_id, metric_name, aggr_function, from_ms, to_ms)
        return self._respond(call, metric_name)


class FakeNameResolver(TopologyNameResolver):
    """Resolver con topologías desplegadas conocidas."""

    def __init__(self, deployed: Optional[Dict[object, str]] = None):
        self.deployed = deployed if deployed is not None else {}

    def resolve_backend_name(self, topology_id, topology_name):
        try:
            return self.deployed[topology_id]
        except KeyError:
            raise EntityNotDeployedError(topology_id, topology_name) from None


@pytest.fixture
def topology() -> TopologyLayout:
    """Topología con dos data sources: uno Kafka y uno HDFS."""
    return TopologyLayout(
        id=7,
        name="orders",
        config={
            "dataSources": [
                {"uiname": "hdfsSource", "type": "HDFS", "config": {"path": "/data/orders"}},
                {"uiname": "kafkaSpout", "type": "KAFKA", "config": {"topic": "t1", "zkUrl": "zk:2181"}},
            ],
            "processors": [],
        },
    )


@pytest.fixture
def kafka_component() -> Component:
    return Component(id=3, name="kafkaSpout")


@pytest.fixture
def name_resolver() -> FakeNameResolver:
    return FakeNameResolver({7: "streamline-7-orders"})


@pytest.fixture
def stats_series() -> Dict[str, Dict[int, float]]:
    """Una serie distinta por cada nombre de métrica Storm de STATS."""
    return {
        "__execute-count": {FROM_MS + 60_000: 10.0, FROM_MS: 5.0},
        "__emit-count": {FROM_MS: 4.0, FROM_MS + 60_000: 9.0},
        "__ack-count": {FROM_MS: 3.0},
        "__fail-count": {FROM_MS: 1.0},
        "__process-latency": {FROM_MS: 2.5},
        "__receive.population": {FROM_MS: 0.0},
    }


