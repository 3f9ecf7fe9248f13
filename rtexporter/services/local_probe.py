"""Local host probe built on psutil.

Samples the machine the exporter runs on into a HostRecord, so a single
exporter can report itself next to the rtinfo hosts it polls.
"""

import os
import socket
import time
from typing import Dict, Optional, Tuple

import psutil

from rtexporter.core.logging_config import get_logger
from rtexporter.services.metrics.models import (
    DiskModel,
    HostRecord,
    MemoryModel,
    NetworkInterfaceModel,
    SwapModel,
)

logger = get_logger(__name__)

_TEMPERATURE_SENSORS = ("coretemp", "k10temp", "cpu_thermal", "acpitz")


def _cpu_temperature() -> float:
    """Average of the first CPU temperature sensor found, 0.0 without one."""
    try:
        temps = psutil.sensors_temperatures()
    except (AttributeError, OSError):
        return 0.0
    if not temps:
        return 0.0

    entries = next((temps[name] for name in _TEMPERATURE_SENSORS if temps.get(name)), None)
    if entries is None:
        entries = next((e for e in temps.values() if e), None)
    if not entries:
        return 0.0

    readings = [e.current for e in entries if e.current is not None]
    return float(sum(readings) / len(readings)) if readings else 0.0


def _ipv4_addresses() -> Dict[str, str]:
    addresses: Dict[str, str] = {}
    for name, addrs in psutil.net_if_addrs().items():
        for addr in addrs:
            if addr.family == socket.AF_INET:
                addresses[name] = addr.address
                break
    return addresses


def _load_average() -> Tuple[float, ...]:
    try:
        return tuple(float(v) for v in os.getloadavg())
    except (AttributeError, OSError):
        return tuple(float(v) for v in psutil.getloadavg())


class LocalProbe:
    """Produces a HostRecord describing the local machine."""

    def __init__(self, remote_ip: str = "127.0.0.1", hostname: Optional[str] = None):
        self.remote_ip = remote_ip
        self.hostname = hostname or socket.gethostname()
        self._boot_time = psutil.boot_time()
        # Prime the per-cpu counters so the first sample is not all zeros.
        psutil.cpu_percent(interval=None, percpu=True)

    def sample(self) -> HostRecord:
        vm = psutil.virtual_memory()
        swap = psutil.swap_memory()
        addresses = _ipv4_addresses()
        nics = psutil.net_io_counters(pernic=True) or {}
        disks = psutil.disk_io_counters(perdisk=True) or {}

        record = HostRecord(
            hostname=self.hostname,
            remote_ip=self.remote_ip,
            uptime_seconds=max(0.0, time.time() - self._boot_time),
            cpu_usage_percent=tuple(float(p) for p in psutil.cpu_percent(interval=None, percpu=True)),
            load_average=_load_average(),
            cpu_temperature_average=_cpu_temperature(),
            memory=MemoryModel(total_bytes=vm.total, used_bytes=vm.used),
            swap=SwapModel(total_bytes=swap.total, free_bytes=swap.free),
            network_interfaces=tuple(
                NetworkInterfaceModel(
                    name=name,
                    ip=addresses.get(name, ""),
                    rx_bytes=counters.bytes_recv,
                    tx_bytes=counters.bytes_sent,
                )
                for name, counters in sorted(nics.items())
            ),
            disks=tuple(
                DiskModel(name=name, bytes_read=counters.read_bytes, bytes_written=counters.write_bytes)
                for name, counters in sorted(disks.items())
            ),
        )
        logger.debug(
            f"Local probe: {len(record.cpu_usage_percent)} cpus, "
            f"{len(record.network_interfaces)} nics, {len(record.disks)} disks"
        )
        return record
