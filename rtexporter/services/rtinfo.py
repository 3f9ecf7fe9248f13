"""Parser for the JSON document served by rtinfo daemons.

rtinfo reports every host it tracks under a top-level ``rtinfo`` list. Only
the fields the exporter publishes are modelled; anything else in the
document is ignored.
"""

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, ValidationError

from rtexporter.services.metrics.models import (
    DiskModel,
    FleetSnapshot,
    HostRecord,
    MemoryModel,
    NetworkInterfaceModel,
    SwapModel,
)


class RtinfoFormatError(ValueError):
    """Raised when a document does not follow the rtinfo layout."""


class _CpuSensor(BaseModel):
    model_config = ConfigDict(extra="ignore")

    average: float = 0.0


class _Sensors(BaseModel):
    model_config = ConfigDict(extra="ignore")

    cpu: Optional[_CpuSensor] = None


class _Memory(BaseModel):
    model_config = ConfigDict(extra="ignore")

    ram_total: float
    ram_used: float
    swap_total: float
    swap_free: float


class _Network(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str
    ip: str = ""
    rx_data: float
    tx_data: float


class _Disk(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str
    bytes_read: float
    bytes_written: float


class _Host(BaseModel):
    model_config = ConfigDict(extra="ignore")

    hostname: str
    remoteip: str
    uptime: float
    cpu_usage: Optional[List[float]] = None
    loadavg: Optional[List[float]] = None
    sensors: Optional[_Sensors] = None
    memory: _Memory
    network: Optional[List[_Network]] = None
    disks: Optional[List[_Disk]] = None

    def to_record(self) -> HostRecord:
        temperature = 0.0
        if self.sensors is not None and self.sensors.cpu is not None:
            temperature = self.sensors.cpu.average

        return HostRecord(
            hostname=self.hostname,
            remote_ip=self.remoteip,
            uptime_seconds=self.uptime,
            cpu_usage_percent=tuple(self.cpu_usage or ()),
            load_average=tuple(self.loadavg or ()),
            cpu_temperature_average=temperature,
            memory=MemoryModel(total_bytes=self.memory.ram_total, used_bytes=self.memory.ram_used),
            swap=SwapModel(total_bytes=self.memory.swap_total, free_bytes=self.memory.swap_free),
            network_interfaces=tuple(
                NetworkInterfaceModel(name=n.name, ip=n.ip, rx_bytes=n.rx_data, tx_bytes=n.tx_data)
                for n in self.network or ()
            ),
            disks=tuple(
                DiskModel(name=d.name, bytes_read=d.bytes_read, bytes_written=d.bytes_written)
                for d in self.disks or ()
            ),
        )


class _Document(BaseModel):
    model_config = ConfigDict(extra="ignore")

    rtinfo: Optional[List[_Host]] = None


def parse_hosts(payload: Any) -> List[HostRecord]:
    """Convert a decoded rtinfo document into host records.

    Raises:
        RtinfoFormatError: if the document misses a required field or holds
            a value of the wrong type.
    """
    try:
        document = _Document.model_validate(payload)
    except ValidationError as e:
        raise RtinfoFormatError(f"invalid rtinfo document: {e}") from e
    return [host.to_record() for host in document.rtinfo or ()]


def parse_snapshot(payload: Any) -> FleetSnapshot:
    """Convert a decoded rtinfo document into a FleetSnapshot."""
    return FleetSnapshot(hosts=tuple(parse_hosts(payload)))
