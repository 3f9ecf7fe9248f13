"""FastAPI dependency providers.

Each application owns its store, collector registry and poller on
``app.state``; routes reach them through these providers so that tests can
build isolated applications.
"""

from typing import Optional

from fastapi import Request
from prometheus_client import CollectorRegistry

from rtexporter.core.config import Settings
from rtexporter.services.metrics.store import SnapshotStore
from rtexporter.services.poller import SnapshotPoller


def get_store(request: Request) -> SnapshotStore:
    return request.app.state.store


def get_registry(request: Request) -> CollectorRegistry:
    return request.app.state.registry


def get_poller(request: Request) -> Optional[SnapshotPoller]:
    return request.app.state.poller


def get_settings(request: Request) -> Settings:
    return request.app.state.settings
