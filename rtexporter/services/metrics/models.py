"""Pydantic V2 models for fleet snapshots.

A FleetSnapshot is the unit handed to the SnapshotStore. All models are
frozen and hold tuples rather than lists, so a snapshot that has been
published can be walked by scrape threads without copying.
"""

from typing import Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class MemoryModel(BaseModel):
    """Physical memory of a host, in bytes."""
    model_config = ConfigDict(frozen=True)

    total_bytes: float
    used_bytes: float


class SwapModel(BaseModel):
    """Swap space of a host, in bytes."""
    model_config = ConfigDict(frozen=True)

    total_bytes: float
    free_bytes: float


class NetworkInterfaceModel(BaseModel):
    """Byte counters of one network interface."""
    model_config = ConfigDict(frozen=True)

    name: str
    ip: str
    rx_bytes: float
    tx_bytes: float


class DiskModel(BaseModel):
    """Byte counters of one block device."""
    model_config = ConfigDict(frozen=True)

    name: str
    bytes_read: float
    bytes_written: float


class HostRecord(BaseModel):
    """Runtime health of one monitored host at one point in time."""
    model_config = ConfigDict(frozen=True)

    hostname: str
    remote_ip: str
    uptime_seconds: float
    cpu_usage_percent: Tuple[float, ...] = ()
    load_average: Tuple[float, ...] = ()
    cpu_temperature_average: float = 0.0
    memory: MemoryModel
    swap: SwapModel
    network_interfaces: Tuple[NetworkInterfaceModel, ...] = ()
    disks: Tuple[DiskModel, ...] = ()


class FleetSnapshot(BaseModel):
    """Complete set of host records published at once."""
    model_config = ConfigDict(frozen=True)

    hosts: Tuple[HostRecord, ...] = ()


class SnapshotAcceptedModel(BaseModel):
    """Response of a successful snapshot push."""
    hosts: int
    generation: int


class PollerStatusModel(BaseModel):
    """State of the background snapshot poller."""
    model_config = ConfigDict(from_attributes=True)

    running: bool
    endpoints: Tuple[str, ...]
    local_probe: bool
    rounds_total: int
    last_success_ts: Optional[float]
    last_error: Optional[str]
    last_host_count: int
    endpoint_errors: Dict[str, str] = Field(default_factory=dict)


class ExporterHealthModel(BaseModel):
    """Lightweight health check response."""
    version: str
    snapshot_present: bool
    generation: int
    host_count: int
    push_enabled: bool
    poller: Optional[PollerStatusModel]
