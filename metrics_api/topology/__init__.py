from .layout import Component, DataSourceConfig, TopologyConfig, TopologyLayout
from .topic_resolver import find_kafka_topic_name, parse_topology_config

__all__ = [
    "Component",
    "DataSourceConfig",
    "TopologyConfig",
    "TopologyLayout",
    "find_kafka_topic_name",
    "parse_topology_config",
]
