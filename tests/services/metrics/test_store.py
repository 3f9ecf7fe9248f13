"""
Unit tests for SnapshotStore and its use from concurrent threads.

A scrape must always observe a single snapshot generation, even while a
producer keeps swapping snapshots in.
"""

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest
from pydantic import ValidationError

from rtexporter.services.metrics.collector import SnapshotCollector, samples
from rtexporter.services.metrics.models import FleetSnapshot
from rtexporter.services.metrics.store import SnapshotStore

from tests.conftest import build_host


def _generation_snapshot(generation, hosts=20):
    """Snapshot whose every hostname and uptime encode ``generation``."""
    return FleetSnapshot(hosts=tuple(
        build_host(f"g{generation}-h{i}", f"10.{generation % 256}.0.{i}", uptime=generation,
                   disks=(("sda", generation, generation),))
        for i in range(hosts)
    ))


def test_store_starts_empty():
    store = SnapshotStore()

    assert store.current() is None
    assert store.generation == 0
    assert store.current_with_generation() == (None, 0)


def test_set_snapshot_replaces_reference(example_snapshot):
    """Test that set_snapshot() swaps the reference and bumps the generation."""
    store = SnapshotStore()

    assert store.set_snapshot(example_snapshot) == 1
    assert store.current() is example_snapshot

    replacement = FleetSnapshot()
    assert store.set_snapshot(replacement) == 2
    assert store.current() is replacement
    assert store.current_with_generation() == (replacement, 2)


def test_initial_snapshot_counts_as_generation(example_snapshot):
    store = SnapshotStore(example_snapshot)

    assert store.generation == 1
    assert store.current() is example_snapshot


def test_snapshot_is_immutable(example_snapshot):
    """Test that published snapshots cannot be changed in place."""
    with pytest.raises(ValidationError):
        example_snapshot.hosts = ()
    with pytest.raises(ValidationError):
        example_snapshot.hosts[0].hostname = "other"
    assert isinstance(example_snapshot.hosts, tuple)


def test_concurrent_writers_are_all_counted():
    """Test that concurrent set_snapshot() calls never lose a generation."""
    store = SnapshotStore()
    snapshot = FleetSnapshot()

    with ThreadPoolExecutor(max_workers=8) as pool:
        generations = list(pool.map(lambda _: store.set_snapshot(snapshot), range(400)))

    assert sorted(generations) == list(range(1, 401))
    assert store.generation == 400


def test_collect_never_mixes_generations():
    """Test that collect() during constant swaps sees exactly one generation."""
    store = SnapshotStore(_generation_snapshot(0))
    collector = SnapshotCollector(store)
    stop = threading.Event()
    observed = []
    failures = []

    def producer():
        generation = 1
        while not stop.is_set():
            store.set_snapshot(_generation_snapshot(generation))
            generation += 1

    def scraper():
        for _ in range(200):
            collected = samples(collector.collect())
            values = {s.value for s in collected
                      if s.name in ("system_uptime_second_total", "disk_read_byte_total")}
            prefixes = {s.labels["hostname"].split("-")[0] for s in collected}
            if len(values) != 1:
                failures.append(values)
            if len(prefixes) != 1:
                failures.append(prefixes)
            observed.append(values.pop() if values else None)

    writer = threading.Thread(target=producer)
    writer.start()
    try:
        readers = [threading.Thread(target=scraper) for _ in range(4)]
        for reader in readers:
            reader.start()
        for reader in readers:
            reader.join()
    finally:
        stop.set()
        writer.join()

    assert failures == []
    assert len(observed) == 800
