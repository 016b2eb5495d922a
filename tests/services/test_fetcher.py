"""Subscription fetcher — URL checks, HTTP outcomes, and cache writes.

Invariants:
    - Non-http(s) or host-less URLs raise InvalidSubscriptionURLError before any request
    - Only 200 is success; other statuses and transport errors raise FetchFailedError
    - Redirects are followed
    - fetch() stores content and stamps last_fetch on the record
"""

import httpx
import pytest
from sqlalchemy.exc import OperationalError

from app.core.errors import (
    FetchFailedError, InvalidSubscriptionURLError, ResourceNotFoundError,
)
from app.models.subscription import Subscription
from app.repositories.subscription import SubscriptionRepository


@pytest.mark.parametrize("url", [
    "ftp://example.com/sub",
    "example.com/sub",
    "http://",
    "",
])
async def test_rejects_non_http_urls(fetcher, fetch_log, url):
    with pytest.raises(InvalidSubscriptionURLError):
        await fetcher.fetch_content(url)
    assert fetch_log == []


async def test_returns_body_on_200(fetcher, remote):
    remote["https://example.com/sub"] = httpx.Response(200, text="payload")
    assert await fetcher.fetch_content("https://example.com/sub") == "payload"


async def test_follows_redirects(fetcher, remote, fetch_log):
    remote["https://example.com/old"] = httpx.Response(
        302, headers={"Location": "https://example.com/new"},
    )
    remote["https://example.com/new"] = httpx.Response(200, text="moved")

    assert await fetcher.fetch_content("https://example.com/old") == "moved"
    assert [str(r.url) for r in fetch_log] == [
        "https://example.com/old", "https://example.com/new",
    ]


@pytest.mark.parametrize("status_code", [201, 204, 404, 500])
async def test_non_200_status_fails(fetcher, remote, status_code):
    remote["https://example.com/sub"] = httpx.Response(status_code)
    with pytest.raises(FetchFailedError) as exc_info:
        await fetcher.fetch_content("https://example.com/sub")
    assert str(status_code) in exc_info.value.reason


async def test_transport_error_fails(fetcher, remote):
    remote["https://example.com/sub"] = httpx.ConnectError("refused")
    with pytest.raises(FetchFailedError) as exc_info:
        await fetcher.fetch_content("https://example.com/sub")
    assert exc_info.value.http_status == 503


async def test_fetch_stores_content_and_stamps_record(
    fetcher, remote, content_store, test_db,
):
    sub = Subscription(url="https://example.com/sub", cron="* * * * *")
    test_db.add(sub)
    await test_db.commit()
    remote["https://example.com/sub"] = httpx.Response(200, text="nodes")

    refreshed = await fetcher.fetch(test_db, sub.id)

    assert refreshed.last_fetch is not None
    assert content_store.get(sub.id) == "nodes"


async def test_fetch_unknown_subscription(fetcher, test_db, fetch_log):
    with pytest.raises(ResourceNotFoundError):
        await fetcher.fetch(test_db, 404)
    assert fetch_log == []


async def test_failed_fetch_leaves_cache_untouched(
    fetcher, remote, content_store, test_db,
):
    sub = Subscription(url="https://example.com/sub", cron="* * * * *")
    test_db.add(sub)
    await test_db.commit()
    content_store.store(sub.id, "previous")
    remote["https://example.com/sub"] = httpx.Response(502)

    with pytest.raises(FetchFailedError):
        await fetcher.fetch(test_db, sub.id)
    assert content_store.get(sub.id) == "previous"


async def test_failed_stamp_is_logged_not_raised(
    fetcher, remote, content_store, test_db, monkeypatch, caplog,
):
    sub = Subscription(url="https://example.com/sub", cron="* * * * *")
    test_db.add(sub)
    await test_db.commit()
    remote["https://example.com/sub"] = httpx.Response(200, text="nodes")

    async def locked(self, sub_id):
        raise OperationalError("UPDATE subscriptions", {}, Exception("database is locked"))

    monkeypatch.setattr(SubscriptionRepository, "update_last_fetch", locked)

    refreshed = await fetcher.fetch(test_db, sub.id)

    assert refreshed.id == sub.id
    assert refreshed.last_fetch is None
    assert content_store.get(sub.id) == "nodes"
    assert "Failed to update last fetch time" in caplog.text
