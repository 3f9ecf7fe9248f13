"""Snapshot-to-metrics core of the exporter.

A producer publishes FleetSnapshot objects into a SnapshotStore; the
SnapshotCollector expands whatever snapshot is current into Prometheus
metric families on every scrape.
"""

from .catalog import MetricCatalog, MetricDescriptor, MetricKind, build_catalog
from .collector import SnapshotCollector, samples
from .models import (
    DiskModel,
    FleetSnapshot,
    HostRecord,
    MemoryModel,
    NetworkInterfaceModel,
    SwapModel,
)
from .store import SnapshotStore

__all__ = [
    "MetricCatalog",
    "MetricDescriptor",
    "MetricKind",
    "build_catalog",
    "SnapshotCollector",
    "samples",
    "SnapshotStore",
    "FleetSnapshot",
    "HostRecord",
    "MemoryModel",
    "SwapModel",
    "NetworkInterfaceModel",
    "DiskModel",
]
