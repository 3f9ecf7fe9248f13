"""SnapshotStore - Owner of the current FleetSnapshot reference.

Snapshots are immutable, so publishing one is a reference swap. Writers are
serialised by a lock; readers take the reference once and walk it without
holding anything, which keeps a long scrape from blocking the producer.
"""

import threading
from typing import Optional, Tuple

from .models import FleetSnapshot


class SnapshotStore:
    """Holds the latest FleetSnapshot published by a producer.

    One instance is created per application and shared between the
    producer (poller or push endpoint) and the scrape collector.
    """

    def __init__(self, snapshot: Optional[FleetSnapshot] = None):
        self._lock = threading.Lock()
        self._snapshot: Optional[FleetSnapshot] = None
        self._generation = 0
        if snapshot is not None:
            self.set_snapshot(snapshot)

    def set_snapshot(self, snapshot: FleetSnapshot) -> int:
        """Replace the held snapshot and return its generation number.

        The previous snapshot is dropped; concurrent writers are ordered by
        the lock and the last one wins.
        """
        with self._lock:
            self._generation += 1
            self._snapshot = snapshot
            return self._generation

    def current(self) -> Optional[FleetSnapshot]:
        """Return the snapshot published last, or None if nothing was published."""
        return self._snapshot

    def current_with_generation(self) -> Tuple[Optional[FleetSnapshot], int]:
        """Return the held snapshot together with the generation it was published as."""
        with self._lock:
            return self._snapshot, self._generation

    @property
    def generation(self) -> int:
        """Number of snapshots published so far."""
        return self._generation
