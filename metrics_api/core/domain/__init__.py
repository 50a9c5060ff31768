from .querier_interface import AggregateFunction, TimeSeriesQuerier, TopologyNameResolver

__all__ = ["AggregateFunction", "TimeSeriesQuerier", "TopologyNameResolver"]
