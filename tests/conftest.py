import pytest
from fastapi.testclient import TestClient

from rtexporter.core.config import Settings
from rtexporter.services.metrics.models import (
    DiskModel,
    FleetSnapshot,
    HostRecord,
    MemoryModel,
    NetworkInterfaceModel,
    SwapModel,
)


def build_host(
    hostname="h1",
    remote_ip="10.0.0.1",
    cpus=(12.5, 33.0),
    loads=(0.5,),
    nics=(("eth0", "10.0.0.1", 100, 50),),
    disks=(),
    uptime=3600,
    temperature=42.0,
):
    """Build a HostRecord with small, recognisable values."""
    return HostRecord(
        hostname=hostname,
        remote_ip=remote_ip,
        uptime_seconds=uptime,
        cpu_usage_percent=cpus,
        load_average=loads,
        cpu_temperature_average=temperature,
        memory=MemoryModel(total_bytes=8_000, used_bytes=3_000),
        swap=SwapModel(total_bytes=2_000, free_bytes=1_500),
        network_interfaces=tuple(
            NetworkInterfaceModel(name=name, ip=ip, rx_bytes=rx, tx_bytes=tx)
            for name, ip, rx, tx in nics
        ),
        disks=tuple(
            DiskModel(name=name, bytes_read=read, bytes_written=written)
            for name, read, written in disks
        ),
    )


def rtinfo_host(hostname="web01", remoteip="10.0.0.5", **overrides):
    """One host entry as served by an rtinfo daemon, including unused fields."""
    host = {
        "hostname": hostname,
        "remoteip": remoteip,
        "uptime": 86400,
        "cpu_usage": [20, 10, 30],
        "loadavg": [0.25, 0.5, 0.75],
        "sensors": {"cpu": {"average": 51.5, "critical": 95}, "hdd": {"peak": 38}},
        "memory": {"ram_total": 16_000_000, "ram_used": 4_000_000, "swap_total": 1_000_000, "swap_free": 900_000},
        "network": [{"name": "eth0", "ip": "10.0.0.5", "rx_data": 1234, "tx_data": 4321, "rx_rate": 10, "speed": 1000}],
        "disks": [{"name": "sda", "bytes_read": 555, "bytes_written": 777, "iops": 3}],
        "battery": {"load": -1},
        "time": 1700000000,
    }
    host.update(overrides)
    return host


@pytest.fixture
def example_host():
    return build_host()


@pytest.fixture
def example_snapshot(example_host):
    return FleetSnapshot(hosts=(example_host,))


@pytest.fixture
def test_settings():
    """Settings with polling off and push on, independent of the environment."""
    s = Settings()
    s.RTINFO_ENDPOINTS = ()
    s.EXPORTER_LOCAL_PROBE = False
    s.EXPORTER_ENABLE_PUSH = True
    return s


@pytest.fixture
def client(test_settings):
    from rtexporter.app import create_app

    app = create_app(settings=test_settings)
    with TestClient(app) as test_client:
        yield test_client
