from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from prometheus_client import CollectorRegistry

from rtexporter.api.v1 import metrics_router, router as api_router
from rtexporter.core.config import Settings, settings as default_settings
from rtexporter.core.logging_config import get_logger
from rtexporter.services.local_probe import LocalProbe
from rtexporter.services.metrics.collector import SnapshotCollector
from rtexporter.services.metrics.store import SnapshotStore
from rtexporter.services.poller import SnapshotPoller

logger = get_logger("app")


def build_poller(store: SnapshotStore, settings: Settings) -> Optional[SnapshotPoller]:
    """Create the snapshot poller described by ``settings``, if any source is configured."""
    if not settings.poller_enabled:
        return None

    local_probe = LocalProbe(remote_ip=settings.EXPORTER_LOCAL_IP) if settings.EXPORTER_LOCAL_PROBE else None
    return SnapshotPoller(
        store,
        endpoints=settings.RTINFO_ENDPOINTS,
        interval=settings.RTINFO_POLL_INTERVAL,
        timeout=settings.RTINFO_POLL_TIMEOUT,
        local_probe=local_probe,
    )


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[SnapshotStore] = None,
    poller: Optional[SnapshotPoller] = None,
) -> FastAPI:
    """Build the exporter application and its per-app state.

    Args:
        settings: Configuration, defaults to the environment-driven settings
        store: Snapshot store to serve, a fresh one when omitted
        poller: Producer to run during the app lifespan; built from
            ``settings`` when omitted
    """
    settings = settings or default_settings
    store = store or SnapshotStore()
    if poller is None:
        poller = build_poller(store, settings)

    registry = CollectorRegistry(auto_describe=True)
    registry.register(SnapshotCollector(store))

    @asynccontextmanager
    async def lifespan(_: FastAPI):
        # Startup
        if poller is not None:
            poller.start()
        else:
            logger.info("No rtinfo endpoint or local probe configured, waiting for pushed snapshots")

        yield

        # Shutdown
        if poller is not None:
            await poller.aclose()

    app = FastAPI(
        title=settings.PROJECT_NAME,
        description="Prometheus exporter for rtinfo fleet snapshots",
        version=settings.VERSION,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.store = store
    app.state.registry = registry
    app.state.poller = poller

    app.include_router(metrics_router)
    app.include_router(api_router)
    return app


app = create_app()
