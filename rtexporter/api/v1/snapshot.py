"""Fleet snapshot REST endpoints.

GET returns the snapshot currently served to Prometheus; PUT lets an
external producer replace it when push mode is enabled.
"""

from fastapi import APIRouter, Depends, HTTPException

from rtexporter.core.config import Settings
from rtexporter.core.logging_config import get_logger
from rtexporter.services.metrics.models import FleetSnapshot, SnapshotAcceptedModel
from rtexporter.services.metrics.store import SnapshotStore

from .deps import get_settings, get_store

logger = get_logger(__name__)

router = APIRouter(prefix="/snapshot", tags=["snapshot"])


@router.get("", response_model=FleetSnapshot)
async def get_snapshot(store: SnapshotStore = Depends(get_store)):
    """Get the fleet snapshot currently exported.

    Raises:
        HTTPException: 404 if no snapshot was published yet
    """
    snapshot = store.current()
    if snapshot is None:
        raise HTTPException(status_code=404, detail="No snapshot has been published yet.")
    return snapshot


@router.put("", response_model=SnapshotAcceptedModel)
async def put_snapshot(
    snapshot: FleetSnapshot,
    store: SnapshotStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
):
    """Replace the exported fleet snapshot.

    Raises:
        HTTPException: 403 if push mode is disabled
    """
    if not settings.EXPORTER_ENABLE_PUSH:
        raise HTTPException(
            status_code=403,
            detail="Snapshot push is disabled. Set EXPORTER_ENABLE_PUSH=true to enable."
        )

    generation = store.set_snapshot(snapshot)
    logger.info(f"Snapshot generation {generation} pushed with {len(snapshot.hosts)} hosts")
    return SnapshotAcceptedModel(hosts=len(snapshot.hosts), generation=generation)
