from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv


def _default_env_file() -> str:
    repo_root = Path(__file__).resolve().parents[1]
    return str(repo_root / ".env")


@dataclass(frozen=True)
class Settings:
    ams_collector_url: str
    ams_app_id: str
    storm_api_root_url: str
    http_timeout_seconds: float

    query_parallel_workers: int
    topic_match_policy: str

    time_series_querier_class: str


def get_settings() -> Settings:
    # Load env file (if present) but still allow overriding via real environment variables.
    env_file = os.getenv("METRICS_ENV_FILE", _default_env_file())
    if env_file and Path(env_file).exists():
        load_dotenv(env_file, override=False)

    ams_collector_url = os.getenv(
        "AMS_COLLECTOR_URL", "http://localhost:6188/ws/v1/timeline/metrics"
    )
    ams_app_id = os.getenv("AMS_APP_ID", "nimbus")
    storm_api_root_url = os.getenv("STORM_API_ROOT_URL", "http://localhost:8080/api/v1")
    http_timeout_seconds = float(os.getenv("METRICS_HTTP_TIMEOUT_SECONDS", "10"))

    # One worker per stats metric by default.
    query_parallel_workers = max(1, int(os.getenv("METRICS_QUERY_PARALLEL_WORKERS", "6")))

    # "first" or "last": which data source wins when display names collide.
    topic_match_policy = os.getenv("TOPIC_MATCH_POLICY", "first").strip().lower()
    if topic_match_policy not in ("first", "last"):
        raise ValueError(
            f"TOPIC_MATCH_POLICY must be 'first' or 'last', got {topic_match_policy!r}"
        )

    time_series_querier_class = os.getenv(
        "TIME_SERIES_QUERIER_CLASS",
        "metrics_api.backends.ambari.AmbariMetricsQuerier",
    )

    return Settings(
        ams_collector_url=ams_collector_url,
        ams_app_id=ams_app_id,
        storm_api_root_url=storm_api_root_url,
        http_timeout_seconds=http_timeout_seconds,
        query_parallel_workers=query_parallel_workers,
        topic_match_policy=topic_match_policy,
        time_series_querier_class=time_series_querier_class,
    )
