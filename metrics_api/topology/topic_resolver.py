"""Kafka topic lookup from a topology's data source configuration."""

from __future__ import annotations

import logging
from typing import List, Optional

from pydantic import ValidationError

from ..core.exceptions import DataSourceTypeMismatchError, TopologyConfigMalformedError
from .layout import JSON_KEY_TOPIC, Component, DataSourceConfig, TopologyConfig, TopologyLayout

logger = logging.getLogger(__name__)

KAFKA_SOURCE_TYPE = "KAFKA"

MATCH_FIRST = "first"
MATCH_LAST = "last"


def parse_topology_config(topology: TopologyLayout, component: Component) -> TopologyConfig:
    """Parse the raw configuration document into a ``TopologyConfig``.

    Raises:
        TopologyConfigMalformedError: if the document has an unexpected shape
    """
    if not isinstance(topology.config, dict):
        raise TopologyConfigMalformedError(
            topology.name, component.name, "configuration is not a mapping"
        )
    try:
        return TopologyConfig.model_validate(topology.config)
    except ValidationError as e:
        raise TopologyConfigMalformedError(
            topology.name, component.name, f"{e.error_count()} validation error(s)"
        ) from e


def find_kafka_topic_name(
    topology: TopologyLayout,
    component: Component,
    policy: str = MATCH_FIRST,
) -> Optional[str]:
    """Find the Kafka topic bound to the data source named like ``component``.

    Every data source whose display name matches must be a Kafka source.
    When several match, ``policy`` selects the first or the last one.

    Returns:
        The topic name, or None when no data source matches.

    Raises:
        TopologyConfigMalformedError: malformed document or missing topic
        DataSourceTypeMismatchError: a matching data source is not Kafka
    """
    if policy not in (MATCH_FIRST, MATCH_LAST):
        raise ValueError(f"Unknown topic match policy: {policy!r}")

    topology_config = parse_topology_config(topology, component)

    matches: List[DataSourceConfig] = []
    for data_source in topology_config.data_sources:
        if data_source.uiname != component.name:
            continue
        if data_source.type.upper() != KAFKA_SOURCE_TYPE:
            raise DataSourceTypeMismatchError(topology.name, component.name, data_source.type)
        matches.append(data_source)

    if not matches:
        logger.debug(
            "KAFKA_SOURCE_NOT_FOUND topology=%s component=%s", topology.name, component.name
        )
        return None

    if len(matches) > 1:
        logger.warning(
            "DUPLICATE_DATA_SOURCE topology=%s component=%s matches=%d policy=%s",
            topology.name, component.name, len(matches), policy,
        )

    chosen = matches[0] if policy == MATCH_FIRST else matches[-1]
    topic = chosen.config.get(JSON_KEY_TOPIC)
    if not isinstance(topic, str) or not topic:
        raise TopologyConfigMalformedError(
            topology.name, component.name, "kafka data source has no topic"
        )
    return topic
