"""Resolves catalog topologies to running Storm topology names.

Topologies are submitted to Storm as ``streamline-<id>-<name>``; the
suffix may differ from the catalog name after a rename, so the running
topology is matched on the ``streamline-<id>-`` prefix.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import requests

from ..core.domain.querier_interface import TopologyNameResolver
from ..core.exceptions import EntityNotDeployedError, MetricQueryError

logger = logging.getLogger(__name__)

TOPOLOGY_NAME_PREFIX = "streamline-"


def generate_topology_name(topology_id: Any, topology_name: str) -> str:
    return f"{TOPOLOGY_NAME_PREFIX}{topology_id}-{topology_name}"


class StormTopologyNameResolver(TopologyNameResolver):
    """Looks up running topologies through the Storm UI REST API."""

    def __init__(
        self,
        api_root_url: str,
        timeout_seconds: float = 10.0,
        session: Optional[requests.Session] = None,
    ):
        self._api_root_url = api_root_url.rstrip("/")
        self._timeout_seconds = timeout_seconds
        self._session = session or requests.Session()

    def resolve_backend_name(self, topology_id: Any, topology_name: str) -> str:
        prefix = f"{TOPOLOGY_NAME_PREFIX}{topology_id}-"
        url = f"{self._api_root_url}/topology/summary"

        try:
            response = self._session.get(url, timeout=self._timeout_seconds)
            response.raise_for_status()
            summary = response.json()
        except requests.RequestException as e:
            raise MetricQueryError("topology/summary", str(e)) from e
        except ValueError as e:
            raise MetricQueryError("topology/summary", f"invalid JSON response: {e}") from e

        topologies = summary.get("topologies") if isinstance(summary, dict) else None
        for topology in topologies or []:
            name = topology.get("name") if isinstance(topology, dict) else None
            if isinstance(name, str) and name.startswith(prefix):
                logger.debug(
                    "[STORM] Resolved topology id=%s name=%s storm_name=%s",
                    topology_id, topology_name, name,
                )
                return name

        logger.warning(
            "[STORM] Topology not running id=%s expected=%s",
            topology_id, generate_topology_name(topology_id, topology_name),
        )
        raise EntityNotDeployedError(topology_id, topology_name)
