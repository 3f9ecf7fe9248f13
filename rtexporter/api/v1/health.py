from typing import Optional

from fastapi import APIRouter, Depends

from rtexporter.core.config import Settings
from rtexporter.services.metrics.models import ExporterHealthModel
from rtexporter.services.metrics.store import SnapshotStore
from rtexporter.services.poller import SnapshotPoller

from .deps import get_poller, get_settings, get_store

router = APIRouter(tags=["health"])


@router.get("/health", response_model=ExporterHealthModel)
async def get_health(
    store: SnapshotStore = Depends(get_store),
    poller: Optional[SnapshotPoller] = Depends(get_poller),
    settings: Settings = Depends(get_settings),
):
    """Exporter health; always 200, even before the first snapshot."""
    snapshot, generation = store.current_with_generation()
    return ExporterHealthModel(
        version=settings.VERSION,
        snapshot_present=snapshot is not None,
        generation=generation,
        host_count=len(snapshot.hosts) if snapshot is not None else 0,
        push_enabled=settings.EXPORTER_ENABLE_PUSH,
        poller=poller.status() if poller is not None else None,
    )
