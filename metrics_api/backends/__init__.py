"""Backend implementations of the querier and name resolver interfaces."""

from .ambari import AmbariMetricsQuerier
from .storm import StormTopologyNameResolver

__all__ = ["AmbariMetricsQuerier", "StormTopologyNameResolver"]
