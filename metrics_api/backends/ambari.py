"""Time series querier for the Ambari Metrics Service (AMS) collector.

Storm publishes one metric per task to AMS, named
``topology.<topology>.<component>.<task>...--<metric>``. A query selects
every task with a ``%`` wildcard and the returned series are combined
per timestamp with the requested aggregate function.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from statistics import mean
from typing import Any, Dict, List, Mapping, Optional

import requests

from ..core.domain.querier_interface import AggregateFunction, TimeSeriesQuerier
from ..core.exceptions import MetricQueryError

logger = logging.getLogger(__name__)

CONF_COLLECTOR_API_URL = "collectorApiUrl"
CONF_APP_ID = "appId"
CONF_TIMEOUT_SECONDS = "timeoutSeconds"

DEFAULT_APP_ID = "nimbus"
DEFAULT_TIMEOUT_SECONDS = 10.0

_COMBINERS = {
    AggregateFunction.SUM: sum,
    AggregateFunction.AVG: mean,
    AggregateFunction.MIN: min,
    AggregateFunction.MAX: max,
}


def combine_series(series: List[Mapping[Any, Any]], aggr_function: AggregateFunction) -> Dict[int, float]:
    """Combine several task-level series into one, bucket by bucket."""
    buckets: Dict[int, List[float]] = defaultdict(list)
    for points in series:
        for ts, value in points.items():
            if value is None:
                continue
            buckets[int(ts)].append(float(value))

    combiner = _COMBINERS[AggregateFunction(aggr_function)]
    return {ts: float(combiner(values)) for ts, values in sorted(buckets.items())}


class AmbariMetricsQuerier(TimeSeriesQuerier):
    """Queries the AMS collector REST API (``/ws/v1/timeline/metrics``)."""

    def __init__(
        self,
        collector_api_url: Optional[str] = None,
        app_id: str = DEFAULT_APP_ID,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None,
    ):
        self._collector_api_url = collector_api_url
        self._app_id = app_id
        self._timeout_seconds = timeout_seconds
        self._session = session or requests.Session()

    def init(self, conf: Optional[Dict[str, Any]] = None) -> None:
        conf = conf or {}
        url = conf.get(CONF_COLLECTOR_API_URL, self._collector_api_url)
        if not url:
            raise ValueError(f"'{CONF_COLLECTOR_API_URL}' must be provided")
        self._collector_api_url = url
        self._app_id = conf.get(CONF_APP_ID, self._app_id)
        self._timeout_seconds = float(conf.get(CONF_TIMEOUT_SECONDS, self._timeout_seconds))
        logger.info(
            "[AMS] Querier initialized url=%s app_id=%s timeout=%.1fs",
            self._collector_api_url, self._app_id, self._timeout_seconds,
        )

    def get_topology_level_metrics(
        self,
        topology_name: str,
        metric_name: str,
        aggr_function: AggregateFunction,
        from_ms: int,
        to_ms: int,
    ) -> Dict[int, float]:
        pattern = f"topology.{topology_name}.%.--{metric_name}"
        return self._query(pattern, metric_name, aggr_function, from_ms, to_ms)

    def get_metrics(
        self,
        topology_name: str,
        component_id: str,
        metric_name: str,
        aggr_function: AggregateFunction,
        from_ms: int,
        to_ms: int,
    ) -> Dict[int, float]:
        pattern = f"topology.{topology_name}.{component_id}.%.--{metric_name}"
        return self._query(pattern, metric_name, aggr_function, from_ms, to_ms)

    def _query(
        self,
        pattern: str,
        metric_name: str,
        aggr_function: AggregateFunction,
        from_ms: int,
        to_ms: int,
    ) -> Dict[int, float]:
        if not self._collector_api_url:
            raise MetricQueryError(metric_name, "collector API URL is not configured")

        params = {
            "appId": self._app_id,
            "metricNames": pattern,
            "startTime": from_ms,
            "endTime": to_ms,
        }
        try:
            response = self._session.get(
                self._collector_api_url, params=params, timeout=self._timeout_seconds
            )
            response.raise_for_status()
            body = response.json()
        except requests.RequestException as e:
            raise MetricQueryError(metric_name, str(e)) from e
        except ValueError as e:
            raise MetricQueryError(metric_name, f"invalid JSON response: {e}") from e

        entries = body.get("metrics") if isinstance(body, dict) else None
        if not isinstance(entries, list):
            raise MetricQueryError(metric_name, "response has no 'metrics' list")

        series = [
            entry["metrics"]
            for entry in entries
            if isinstance(entry, dict) and isinstance(entry.get("metrics"), dict)
        ]
        logger.debug(
            "[AMS] query pattern=%s series=%d from=%d to=%d",
            pattern, len(series), from_ms, to_ms,
        )
        try:
            return combine_series(series, aggr_function)
        except (TypeError, ValueError) as e:
            raise MetricQueryError(metric_name, f"malformed data points: {e}") from e
