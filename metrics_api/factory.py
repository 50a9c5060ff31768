"""Factory para crear el servicio de métricas de topologías.

Centraliza la configuración: el querier se carga por ruta
(``paquete.modulo.Clase``) y se inicializa con sus propiedades.
"""

from __future__ import annotations

import importlib
import logging
from typing import Any, Dict, Optional

from common.config import Settings, get_settings

from .backends.ambari import CONF_APP_ID, CONF_COLLECTOR_API_URL, CONF_TIMEOUT_SECONDS
from .backends.storm import StormTopologyNameResolver
from .core.domain.querier_interface import TimeSeriesQuerier, TopologyNameResolver
from .metrics.aggregator import TopologyTimeSeriesMetrics

logger = logging.getLogger(__name__)


def load_querier(class_path: str, conf: Optional[Dict[str, Any]] = None) -> TimeSeriesQuerier:
    """Instantiate and initialize a querier from its dotted class path."""
    module_name, _, class_name = class_path.rpartition(".")
    if not module_name:
        raise ValueError(f"Querier class path must be 'module.ClassName', got {class_path!r}")

    querier_cls = getattr(importlib.import_module(module_name), class_name)
    if not (isinstance(querier_cls, type) and issubclass(querier_cls, TimeSeriesQuerier)):
        raise TypeError(f"{class_path} is not a TimeSeriesQuerier")

    querier = querier_cls()
    querier.init(conf or {})
    return querier


def querier_conf_from_settings(settings: Settings) -> Dict[str, Any]:
    return {
        CONF_COLLECTOR_API_URL: settings.ams_collector_url,
        CONF_APP_ID: settings.ams_app_id,
        CONF_TIMEOUT_SECONDS: settings.http_timeout_seconds,
    }


def create_topology_metrics(
    settings: Optional[Settings] = None,
    name_resolver: Optional[TopologyNameResolver] = None,
) -> TopologyTimeSeriesMetrics:
    """Crea el servicio con su querier ya configurado."""
    if settings is None:
        settings = get_settings()

    if name_resolver is None:
        name_resolver = StormTopologyNameResolver(
            settings.storm_api_root_url, timeout_seconds=settings.http_timeout_seconds
        )

    metrics = TopologyTimeSeriesMetrics(
        name_resolver,
        max_workers=settings.query_parallel_workers,
        topic_match_policy=settings.topic_match_policy,
    )
    metrics.set_time_series_querier(
        load_querier(settings.time_series_querier_class, querier_conf_from_settings(settings))
    )

    logger.info(
        "[METRICS_FACTORY] querier=%s workers=%d topic_policy=%s",
        settings.time_series_querier_class,
        settings.query_parallel_workers,
        settings.topic_match_policy,
    )
    return metrics
