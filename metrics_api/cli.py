"""CLI entry point for querying topology metrics."""

from __future__ import annotations

import argparse
import json
import logging
import sys
import time
from pathlib import Path
from typing import List, Optional

from .core.exceptions import TopologyMetricsError
from .factory import create_topology_metrics
from .topology.layout import Component, TopologyLayout

logger = logging.getLogger(__name__)

COMMANDS = ("topology-stats", "component-stats", "complete-latency", "kafka-offsets")


def load_topology(path: str) -> TopologyLayout:
    """Load ``{"id": ..., "name": ..., "config": {...}}`` from a JSON file."""
    doc = json.loads(Path(path).read_text(encoding="utf-8"))
    return TopologyLayout(id=doc["id"], name=doc["name"], config=doc.get("config") or {})


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Query time series metrics of a deployed topology")
    p.add_argument("command", choices=COMMANDS)
    p.add_argument("--topology-file", required=True, help="JSON file with id, name and config")
    p.add_argument("--component-id", help="required for component-level commands")
    p.add_argument("--component-name", help="required for component-level commands")
    p.add_argument("--from", dest="from_ms", type=int, help="epoch ms (default: now - 1h)")
    p.add_argument("--to", dest="to_ms", type=int, help="epoch ms (default: now)")
    return p


def main(argv: Optional[List[str]] = None) -> int:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )

    parser = build_parser()
    args = parser.parse_args(argv)

    now_ms = int(time.time() * 1000)
    to_ms = args.to_ms if args.to_ms is not None else now_ms
    from_ms = args.from_ms if args.from_ms is not None else to_ms - 3600 * 1000

    topology = load_topology(args.topology_file)
    component = None
    if args.command != "topology-stats":
        if args.component_id is None or args.component_name is None:
            parser.error(f"{args.command} requires --component-id and --component-name")
        component = Component(id=args.component_id, name=args.component_name)

    metrics = create_topology_metrics()

    try:
        if args.command == "topology-stats":
            result = metrics.get_topology_stats(topology, from_ms, to_ms).to_dict()
        elif args.command == "component-stats":
            result = metrics.get_component_stats(topology, component, from_ms, to_ms).to_dict()
        elif args.command == "complete-latency":
            result = metrics.get_complete_latency(topology, component, from_ms, to_ms)
        else:
            result = metrics.get_kafka_topic_offsets(topology, component, from_ms, to_ms)
    except TopologyMetricsError as e:
        logger.error("Query failed: %s", e)
        return 1

    print(json.dumps(result, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
