"""Abstract interfaces consumed by the metrics aggregator.

This decouples the aggregator from the metrics store and from the
streaming runtime. Any backend (Ambari Metrics, OpenTSDB, in-memory) can
implement these interfaces.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, Mapping, Optional


class AggregateFunction(str, Enum):
    """How raw samples are combined per time bucket."""
    SUM = "sum"
    AVG = "avg"
    MIN = "min"
    MAX = "max"


class TimeSeriesQuerier(ABC):
    """Abstract interface for time series metrics stores.

    Implementations:
    - AmbariMetricsQuerier: Ambari Metrics Service collector API
    - Test fakes returning canned series

    Implementations must be safe for concurrent use: the aggregator calls
    them from several worker threads at once.
    """

    def init(self, conf: Optional[Dict[str, Any]] = None) -> None:
        """Configure the querier from a flat property map."""

    @abstractmethod
    def get_topology_level_metrics(
        self,
        topology_name: str,
        metric_name: str,
        aggr_function: AggregateFunction,
        from_ms: int,
        to_ms: int,
    ) -> Mapping[int, float]:
        """Query a metric aggregated over the whole topology.

        Returns:
            Mapping from epoch-millisecond timestamp to value. Empty when
            the store has no data points in the range.
        """
        pass

    @abstractmethod
    def get_metrics(
        self,
        topology_name: str,
        component_id: str,
        metric_name: str,
        aggr_function: AggregateFunction,
        from_ms: int,
        to_ms: int,
    ) -> Mapping[int, float]:
        """Query a metric for a single component of a topology."""
        pass


class TopologyNameResolver(ABC):
    """Maps a logical topology to the name the runtime knows it by."""

    @abstractmethod
    def resolve_backend_name(self, topology_id: Any, topology_name: str) -> str:
        """Return the runtime topology name.

        Raises:
            EntityNotDeployedError: if the topology is not running
        """
        pass
