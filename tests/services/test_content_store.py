"""Tests for ContentStore — per-subscription cache, no IO."""

from concurrent.futures import ThreadPoolExecutor

import pytest

from app.core.errors import ContentNotFoundError
from app.services.content_store import ContentStore


def test_store_then_get():
    store = ContentStore()
    store.store(1, "body")
    assert store.get(1) == "body"


def test_store_overwrites():
    store = ContentStore()
    store.store(1, "old")
    store.store(1, "new")
    assert store.get(1) == "new"
    assert len(store) == 1


def test_get_missing_raises():
    with pytest.raises(ContentNotFoundError) as exc_info:
        ContentStore().get(7)
    assert exc_info.value.sub_id == 7
    assert exc_info.value.http_status == 404


def test_delete_is_idempotent():
    store = ContentStore()
    store.store(1, "body")
    store.delete(1)
    store.delete(1)
    assert len(store) == 0


def test_clear_empties_store():
    store = ContentStore()
    for i in range(5):
        store.store(i, str(i))
    store.clear()
    assert len(store) == 0


def test_instances_are_independent():
    a, b = ContentStore(), ContentStore()
    a.store(1, "a")
    with pytest.raises(ContentNotFoundError):
        b.get(1)


def test_concurrent_writes_all_land():
    store = ContentStore()
    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(lambda i: store.store(i, f"c{i}"), range(200)))
    assert len(store) == 200
    assert store.get(123) == "c123"
