"""Topology layout and typed view of its persisted configuration.

The configuration document is owned by the topology catalog; here it is
only parsed and read, never modified.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field, StrictStr

JSON_KEY_DATA_SOURCES = "dataSources"
JSON_KEY_UINAME = "uiname"
JSON_KEY_TYPE = "type"
JSON_KEY_CONFIG = "config"
JSON_KEY_TOPIC = "topic"


@dataclass
class Component:
    """A named stage within a topology (source, processor or sink)."""
    id: Any
    name: str


@dataclass
class TopologyLayout:
    """A topology as stored in the catalog."""
    id: Any
    name: str
    config: Dict[str, Any] = field(default_factory=dict)


class DataSourceConfig(BaseModel):
    """Data source record of the topology configuration.

    Formato esperado:
    {
        "uiname": "kafkaSpout",
        "type": "KAFKA",
        "config": {"topic": "events", ...}
    }
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    uiname: StrictStr
    type: StrictStr
    config: Dict[str, Any]


class TopologyConfig(BaseModel):
    """Typed view of ``TopologyLayout.config``."""

    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    data_sources: List[DataSourceConfig] = Field(..., alias=JSON_KEY_DATA_SOURCES)
