"""SnapshotCollector - prometheus_client custom collector for fleet snapshots.

The collector owns no state besides the catalog; every scrape re-expands the
snapshot currently held by the SnapshotStore into metric families.
"""

from typing import Dict, Iterable, List, Optional, Sequence

from prometheus_client.core import Metric
from prometheus_client.registry import Collector
from prometheus_client.samples import Sample

from . import catalog as cat
from .catalog import MetricCatalog, MetricDescriptor, build_catalog
from .models import FleetSnapshot, HostRecord
from .store import SnapshotStore


class SnapshotCollector(Collector):
    """Expands the current FleetSnapshot into Prometheus metric families.

    describe() always reports the full catalog, so the registry knows every
    metric name before the first snapshot arrives. collect() reads the store
    once and walks that single snapshot to the end.
    """

    def __init__(self, store: SnapshotStore):
        self.store = store
        self.catalog: MetricCatalog = build_catalog()

    def describe(self) -> List[Metric]:
        """Return one empty family per catalog descriptor."""
        return [descriptor.family() for descriptor in self.catalog]

    def collect(self) -> List[Metric]:
        """Return the catalog families filled from the current snapshot."""
        return self.expand(self.store.current())

    def expand(self, snapshot: Optional[FleetSnapshot]) -> List[Metric]:
        """Build the metric families for ``snapshot``.

        Families come back in catalog order. Inside a family, samples follow
        host order and then component order (cpu index, nic, disk).
        """
        families: Dict[str, Metric] = {d.name: d.family() for d in self.catalog}
        if snapshot is not None:
            for host in snapshot.hosts:
                self._expand_host(families, host)
        return [families[name] for name in self.catalog.names()]

    def _emit(self, families: Dict[str, Metric], descriptor: MetricDescriptor,
              labels: Sequence[str], value: float) -> None:
        descriptor.check_labels(labels)
        families[descriptor.name].add_metric(list(labels), float(value))

    def _expand_host(self, families: Dict[str, Metric], host: HostRecord) -> None:
        ident = (host.hostname, host.remote_ip)

        self._emit(families, cat.UPTIME, ident, host.uptime_seconds)

        for index, usage in enumerate(host.cpu_usage_percent):
            self._emit(families, cat.CPU_USAGE, ident + (str(index),), usage)

        for index, load in enumerate(host.load_average):
            self._emit(families, cat.LOAD_AVERAGE, ident + (str(index),), load)

        self._emit(families, cat.CPU_TEMPERATURE, ident, host.cpu_temperature_average)

        self._emit(families, cat.MEMORY_TOTAL, ident, host.memory.total_bytes)
        self._emit(families, cat.MEMORY_USED, ident, host.memory.used_bytes)
        self._emit(families, cat.SWAP_TOTAL, ident, host.swap.total_bytes)
        self._emit(families, cat.SWAP_FREE, ident, host.swap.free_bytes)

        for nic in host.network_interfaces:
            nic_labels = ident + (nic.name, nic.ip)
            self._emit(families, cat.NETWORK_SENT, nic_labels, nic.tx_bytes)
            self._emit(families, cat.NETWORK_RECEIVED, nic_labels, nic.rx_bytes)

        for disk in host.disks:
            disk_labels = ident + (disk.name,)
            self._emit(families, cat.DISK_READ, disk_labels, disk.bytes_read)
            self._emit(families, cat.DISK_WRITE, disk_labels, disk.bytes_written)


def samples(families: Iterable[Metric]) -> List[Sample]:
    """Flatten metric families into their samples."""
    return [sample for family in families for sample in family.samples]
