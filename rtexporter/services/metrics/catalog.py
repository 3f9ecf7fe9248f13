"""MetricCatalog - Fixed set of metric descriptors served by the exporter.

This module declares every metric identity the exporter can emit. The catalog
is pure data: it is built once and never mutated, so scrape threads can read
it without any locking.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterator, Sequence, Tuple, Union

from prometheus_client.core import CounterMetricFamily, GaugeMetricFamily

HOST_LABELS: Tuple[str, ...] = ("hostname", "remoteIP")


class MetricKind(str, Enum):
    """Prometheus metric type of a descriptor.

    Counters are monotonic by convention only; the value reported by the
    host is exported as-is.
    """
    COUNTER = "counter"
    GAUGE = "gauge"


@dataclass(frozen=True)
class MetricDescriptor:
    """Static identity of one kind of measurement."""
    name: str
    documentation: str
    labelnames: Tuple[str, ...]
    kind: MetricKind

    def check_labels(self, values: Sequence[str]) -> None:
        """Raise ValueError if ``values`` does not line up with ``labelnames``."""
        if len(values) != len(self.labelnames):
            raise ValueError(
                f"{self.name}: expected {len(self.labelnames)} label values "
                f"{self.labelnames}, got {len(values)}"
            )

    def family(self) -> Union[CounterMetricFamily, GaugeMetricFamily]:
        """Build an empty prometheus_client metric family for this descriptor."""
        if self.kind is MetricKind.COUNTER:
            return CounterMetricFamily(self.name, self.documentation, labels=self.labelnames)
        return GaugeMetricFamily(self.name, self.documentation, labels=self.labelnames)


def _descriptor(name: str, documentation: str, extra_labels: Tuple[str, ...], kind: MetricKind) -> MetricDescriptor:
    return MetricDescriptor(
        name=name,
        documentation=documentation,
        labelnames=HOST_LABELS + extra_labels,
        kind=kind,
    )


UPTIME = _descriptor("system_uptime_second", "Uptime of the system", (), MetricKind.COUNTER)
CPU_USAGE = _descriptor("cpu_usage_percent", "Percentage of the cpu used", ("cpu",), MetricKind.GAUGE)
CPU_TEMPERATURE = _descriptor("cpu_temperature_celcius", "Average temperature of the cpu", (), MetricKind.GAUGE)
LOAD_AVERAGE = _descriptor("load_average_unit", "Average load of each cpu", ("cpu",), MetricKind.GAUGE)
MEMORY_TOTAL = _descriptor("memory_total_byte", "Total memory available of the system", (), MetricKind.GAUGE)
MEMORY_USED = _descriptor("memory_used_byte", "Memory used of the system", (), MetricKind.GAUGE)
SWAP_TOTAL = _descriptor("swap_total_byte", "Total amount of swap", (), MetricKind.GAUGE)
SWAP_FREE = _descriptor("swap_free_byte", "Free swap of the system", (), MetricKind.GAUGE)
NETWORK_RECEIVED = _descriptor("network_received_byte", "Data received on network interface", ("nic", "ip"), MetricKind.COUNTER)
NETWORK_SENT = _descriptor("network_sent_byte", "Data sent on network interface", ("nic", "ip"), MetricKind.COUNTER)
DISK_READ = _descriptor("disk_read_byte", "Data read on disk", ("disk",), MetricKind.COUNTER)
DISK_WRITE = _descriptor("disk_write_byte", "Data written on disk", ("disk",), MetricKind.COUNTER)


class MetricCatalog:
    """Ordered, read-only collection of MetricDescriptor.

    Descriptors are indexed by name; iteration follows declaration order.
    """

    def __init__(self, descriptors: Sequence[MetricDescriptor]):
        self._descriptors: Tuple[MetricDescriptor, ...] = tuple(descriptors)
        self._by_name: Dict[str, MetricDescriptor] = {d.name: d for d in self._descriptors}
        if len(self._by_name) != len(self._descriptors):
            raise ValueError("duplicate metric name in catalog")

    def __iter__(self) -> Iterator[MetricDescriptor]:
        return iter(self._descriptors)

    def __len__(self) -> int:
        return len(self._descriptors)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def __getitem__(self, name: str) -> MetricDescriptor:
        return self._by_name[name]

    def names(self) -> Tuple[str, ...]:
        return tuple(d.name for d in self._descriptors)


def build_catalog() -> MetricCatalog:
    """Return the catalog of every metric exported for a host."""
    return MetricCatalog([
        UPTIME,
        CPU_USAGE,
        CPU_TEMPERATURE,
        LOAD_AVERAGE,
        MEMORY_TOTAL,
        MEMORY_USED,
        SWAP_TOTAL,
        SWAP_FREE,
        NETWORK_RECEIVED,
        NETWORK_SENT,
        DISK_READ,
        DISK_WRITE,
    ])
