"""Errores del agregador de métricas de topologías.

Todos los errores se propagan al llamador; ninguno se convierte en un
valor por defecto.
"""

from __future__ import annotations

from typing import Optional


class TopologyMetricsError(Exception):
    """Base error for the metrics aggregation core."""


class QuerierNotConfiguredError(TopologyMetricsError, RuntimeError):
    """Raised when an operation runs before a time series querier is set."""

    def __init__(self) -> None:
        super().__init__("Time series querier is not set!")


class InvalidTimeRangeError(TopologyMetricsError, ValueError):
    """Raised when the requested range is not ``0 <= from < to``."""

    def __init__(self, from_ms: int, to_ms: int):
        self.from_ms = from_ms
        self.to_ms = to_ms
        super().__init__(f"Invalid time range: from={from_ms} to={to_ms}")


class EntityNotDeployedError(TopologyMetricsError):
    """Raised when a topology has no counterpart in the backend runtime."""

    def __init__(self, topology_id: object, topology_name: str):
        self.topology_id = topology_id
        self.topology_name = topology_name
        super().__init__(
            f"Topology not deployed: id={topology_id} name={topology_name}"
        )


class TopologyConfigMalformedError(TopologyMetricsError):
    """Raised when the topology configuration has an unexpected structure."""

    def __init__(self, topology_name: str, component_name: str, reason: Optional[str] = None):
        self.topology_name = topology_name
        self.component_name = component_name
        self.reason = reason
        message = (
            f"Failed to parse topology configuration - topology name: "
            f"{topology_name} / source : {component_name}"
        )
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class DataSourceTypeMismatchError(TopologyConfigMalformedError):
    """Raised when the matching data source is not a Kafka source."""

    def __init__(self, topology_name: str, component_name: str, actual_type: str):
        self.actual_type = actual_type
        super().__init__(
            topology_name,
            component_name,
            f"type of datasource should be KAFKA, got {actual_type!r}",
        )


class TopicNotConfiguredError(TopologyMetricsError):
    """Raised when no Kafka topic is bound to the component.

    The Kafka metrics do not apply to the component in that case.
    """

    def __init__(self, topology_name: str, component_name: str):
        self.topology_name = topology_name
        self.component_name = component_name
        super().__init__(
            f"Cannot find Kafka topic name from source config - topology name: "
            f"{topology_name} / source : {component_name}"
        )


class MetricQueryError(TopologyMetricsError):
    """Raised by querier implementations when the backend call fails."""

    def __init__(self, metric_name: str, message: str):
        self.metric_name = metric_name
        super().__init__(f"Metric query failed metric={metric_name}: {message}")
