"""Performance monitoring utilities using Prometheus metrics."""

from __future__ import annotations

from typing import Mapping

import psutil
from prometheus_client import Gauge


collection_size = Gauge(
    "portal_collection_size",
    "Number of entities held per store collection",
    labelnames=("collection",),
)
process_memory = Gauge("portal_process_memory_rss_bytes", "Resident memory of the portal process")


class PerformanceMonitor:
    def __init__(self) -> None:
        self.metrics = {
            "collection_size": collection_size,
            "process_memory": process_memory,
        }

    def record_collection_sizes(self, stats: Mapping[str, int]) -> None:
        for name, count in stats.items():
            collection_size.labels(collection=name).set(count)

    def gather_host_metrics(self) -> dict:
        process = psutil.Process()
        memory_info = process.memory_info()
        process_memory.set(memory_info.rss)
        return {
            "memory_rss": memory_info.rss,
            "cpu_percent": process.cpu_percent(interval=None),
        }
