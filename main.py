"""
rtinfo Prometheus Exporter

Serves the latest runtime-health snapshot of a fleet of rtinfo hosts on
/metrics for Prometheus to scrape.

Environment Variables:
    RTINFO_ENDPOINTS: Comma-separated rtinfo JSON URLs to poll (default: none)
    RTINFO_POLL_INTERVAL: Seconds between poll rounds (default: 1.0)
    RTINFO_POLL_TIMEOUT: Per-request timeout in seconds (default: 2.0)
    EXPORTER_LOCAL_PROBE: Also export this machine via psutil (default: false)
    EXPORTER_LOCAL_IP: remoteIP label of the local machine (default: 127.0.0.1)
    EXPORTER_ENABLE_PUSH: Accept snapshots on PUT /api/v1/snapshot (default: false)
    HOST: Server host address (default: 0.0.0.0)
    PORT: Server port (default: 8089)
    DEBUG: Enable debug mode with auto-reload (default: false)

Counter series:
    The five counters are exposed with a _total suffix on /metrics:
    system_uptime_second_total, network_received_byte_total,
    network_sent_byte_total, disk_read_byte_total and disk_write_byte_total.
    Queries written against the bare names must add the suffix.

CLI Usage:
    python main.py

    # Poll two rtinfo daemons every 2 seconds
    RTINFO_ENDPOINTS=http://10.0.0.1:8089/json,http://10.0.0.2:8089/json RTINFO_POLL_INTERVAL=2 python main.py

    # Let another process push snapshots
    EXPORTER_ENABLE_PUSH=true python main.py
"""

import uvicorn

from rtexporter.core.config import settings

if __name__ == "__main__":
    port = settings.PORT
    host = settings.HOST

    print(f"Starting {settings.PROJECT_NAME} on {host}:{port}")
    print(f"Polling: {', '.join(settings.RTINFO_ENDPOINTS) or 'none'}"
          f"{' + local probe' if settings.EXPORTER_LOCAL_PROBE else ''}")

    # If reload is enabled, restrict watch scope to the exporter package.
    reload_enabled = bool(settings.DEBUG)
    reload_dirs = None
    if reload_enabled:
        from pathlib import Path

        reload_dirs = [str(Path(__file__).resolve().parent / "rtexporter")]

    uvicorn.run(
        "rtexporter.app:app",
        host=host,
        port=port,
        reload=reload_enabled,
        reload_dirs=reload_dirs,
    )
