"""Prometheus scrape endpoint.

Renders the application's CollectorRegistry in the text exposition format.
The handler is synchronous so Starlette runs it in its thread pool, next to
the poller publishing on the event loop.
"""

from fastapi import APIRouter, Depends, Response
from prometheus_client import CONTENT_TYPE_LATEST, CollectorRegistry, generate_latest

from .deps import get_registry

router = APIRouter(tags=["metrics"])


@router.get("/metrics", include_in_schema=False)
def prometheus_metrics(registry: CollectorRegistry = Depends(get_registry)) -> Response:
    """Expose every metric of the current fleet snapshot."""
    return Response(content=generate_latest(registry), media_type=CONTENT_TYPE_LATEST)
