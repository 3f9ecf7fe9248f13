"""SnapshotPoller - Background task that feeds the SnapshotStore.

Every round fetches the rtinfo document of each configured endpoint, adds the
local probe's record when enabled, and publishes the result as one
FleetSnapshot. The loop follows the same start/stop-event pattern as the
other background services of the exporter.
"""

import asyncio
import time
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

import httpx

from rtexporter.core.logging_config import get_logger
from rtexporter.services.local_probe import LocalProbe
from rtexporter.services.metrics.models import FleetSnapshot, HostRecord, PollerStatusModel
from rtexporter.services.metrics.store import SnapshotStore
from rtexporter.services.rtinfo import parse_hosts

logger = get_logger("snapshot_poller")

# Failures that only cost one endpoint its hosts for the round.
# InvalidURL is not an HTTPError subclass.
ENDPOINT_ERRORS = (httpx.HTTPError, httpx.InvalidURL, ValueError)


@dataclass
class PollerStatus:
    """Mutable bookkeeping of the poll rounds."""
    rounds_total: int = 0
    last_success_ts: Optional[float] = None
    last_error: Optional[str] = None
    last_host_count: int = 0
    endpoint_errors: Dict[str, str] = field(default_factory=dict)


class SnapshotPoller:
    """Periodically rebuilds the fleet snapshot from rtinfo endpoints.

    An endpoint that fails contributes no hosts to the round it failed in.
    When every source fails the previous snapshot stays published.
    """

    def __init__(
        self,
        store: SnapshotStore,
        endpoints: Sequence[str] = (),
        interval: float = 1.0,
        timeout: float = 2.0,
        local_probe: Optional[LocalProbe] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.store = store
        self.endpoints: Tuple[str, ...] = tuple(endpoints)
        self.interval = interval
        self.timeout = timeout
        self.local_probe = local_probe
        self._client = client
        self._owns_client = client is None
        self._status = PollerStatus()
        self._task: Optional[asyncio.Task] = None
        self._stop_event: Optional[asyncio.Event] = None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=httpx.Timeout(self.timeout))
        return self._client

    async def _fetch(self, url: str) -> List[HostRecord]:
        response = await self._get_client().get(url)
        response.raise_for_status()
        return parse_hosts(response.json())

    async def poll_once(self) -> Optional[FleetSnapshot]:
        """Run one poll round and publish its snapshot.

        Returns:
            The published snapshot, or None if no source answered.
        """
        self._status.rounds_total += 1
        hosts: List[HostRecord] = []
        errors: Dict[str, str] = {}
        succeeded = 0

        results = await asyncio.gather(
            *(self._fetch(url) for url in self.endpoints), return_exceptions=True
        )
        for url, result in zip(self.endpoints, results):
            if isinstance(result, ENDPOINT_ERRORS):
                errors[url] = f"{type(result).__name__}: {result}"
                logger.warning(f"Failed to poll rtinfo endpoint {url}: {result}")
            elif isinstance(result, BaseException):
                raise result
            else:
                hosts.extend(result)
                succeeded += 1

        if self.local_probe is not None:
            try:
                hosts.append(await asyncio.to_thread(self.local_probe.sample))
                succeeded += 1
            except Exception as e:
                errors["local"] = f"{type(e).__name__}: {e}"
                logger.warning(f"Local probe failed: {e}")

        self._status.endpoint_errors = errors
        self._status.last_error = (
            "; ".join(f"{k}: {v}" for k, v in errors.items()) if errors else None
        )

        if succeeded == 0:
            logger.warning("No snapshot source answered, keeping previous snapshot")
            return None

        snapshot = FleetSnapshot(hosts=tuple(hosts))
        generation = self.store.set_snapshot(snapshot)
        self._status.last_success_ts = time.time()
        self._status.last_host_count = len(snapshot.hosts)
        logger.debug(f"Published snapshot generation {generation} with {len(snapshot.hosts)} hosts")
        return snapshot

    async def _poll_loop(self, stop_event: asyncio.Event) -> None:
        """Background loop polling every ``interval`` seconds.

        Args:
            stop_event: Event to signal shutdown
        """
        logger.info(
            f"Snapshot poller started: {len(self.endpoints)} endpoints, "
            f"local probe {'on' if self.local_probe else 'off'}, every {self.interval}s"
        )

        while not stop_event.is_set():
            try:
                await self.poll_once()
            except Exception as e:
                logger.error(f"Error in snapshot poll loop: {e}")

            try:
                await asyncio.wait_for(stop_event.wait(), timeout=self.interval)
                break  # Stop event was set
            except asyncio.TimeoutError:
                continue

        logger.info("Snapshot poller stopped")

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start the background poll task on the running event loop."""
        if self.is_running:
            logger.warning("Snapshot poller already running")
            return

        self._stop_event = asyncio.Event()
        self._task = asyncio.create_task(self._poll_loop(self._stop_event))
        logger.info("Snapshot poller task created")

    def stop(self) -> None:
        """Signal the background poll task to stop."""
        if self._stop_event:
            self._stop_event.set()

        if self._task and not self._task.done():
            self._task.cancel()

        self._task = None
        self._stop_event = None
        logger.info("Snapshot poller stop requested")

    async def aclose(self) -> None:
        """Stop polling and close the HTTP client if this poller created it."""
        self.stop()
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    def status(self) -> PollerStatusModel:
        return PollerStatusModel(
            running=self.is_running,
            endpoints=self.endpoints,
            local_probe=self.local_probe is not None,
            rounds_total=self._status.rounds_total,
            last_success_ts=self._status.last_success_ts,
            last_error=self._status.last_error,
            last_host_count=self._status.last_host_count,
            endpoint_errors=dict(self._status.endpoint_errors),
        )
