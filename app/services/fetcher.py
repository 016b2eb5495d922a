"""Subscription Fetcher — downloads a subscription URL into the ContentStore.

Invariants:
    - Only absolute http(s) URLs are requested (InvalidSubscriptionURLError otherwise)
    - 30s timeout, at most 10 redirects, User-Agent "BestSub/1.0"
    - Any transport failure or non-200 status maps to FetchFailedError
    - Content is stored before last_fetch is stamped; a failed stamp is logged, not raised

Design Decisions:
    - One AsyncClient per fetch: fetches are rare, user-triggered admin actions
    - transport injectable so tests can use httpx.MockTransport
"""

import logging

import httpx
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import (
    BestSubError, FetchFailedError, InvalidSubscriptionURLError,
)
from app.models.subscription import Subscription
from app.repositories.subscription import SubscriptionRepository
from app.services.content_store import ContentStore

logger = logging.getLogger(__name__)

USER_AGENT = "BestSub/1.0"
FETCH_TIMEOUT_SECONDS = 30.0
MAX_REDIRECTS = 10


class SubscriptionFetcher:
    """Fetches subscription content and caches it in memory."""

    def __init__(
        self,
        content_store: ContentStore,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = FETCH_TIMEOUT_SECONDS,
    ):
        self.content_store = content_store
        self._transport = transport
        self._timeout = timeout

    async def fetch(self, db: AsyncSession, sub_id: int) -> Subscription:
        repo = SubscriptionRepository(db)
        sub = await repo.get_by_id(sub_id)

        content = await self.fetch_content(sub.url)
        self.content_store.store(sub_id, content)

        try:
            await repo.update_last_fetch(sub_id)
        except BestSubError as e:
            logger.error(f"Failed to update last fetch time for {sub_id}: {e.message}")
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"Failed to update last fetch time for {sub_id}: {e}")

        return await repo.get_by_id(sub_id)

    async def fetch_content(self, url: str) -> str:
        request_url = _parse_url(url)
        try:
            async with httpx.AsyncClient(
                transport=self._transport,
                timeout=self._timeout,
                follow_redirects=True,
                max_redirects=MAX_REDIRECTS,
                headers={"User-Agent": USER_AGENT},
            ) as client:
                response = await client.get(request_url)
        except httpx.HTTPError as e:
            logger.warning(f"Fetch of {url} failed: {e}")
            raise FetchFailedError(str(e))

        if response.status_code != httpx.codes.OK:
            logger.warning(f"Fetch of {url} returned {response.status_code}")
            raise FetchFailedError(
                f"unexpected response status: {response.status_code}",
            )
        return response.text


def _parse_url(url: str) -> httpx.URL:
    try:
        parsed = httpx.URL(url)
    except httpx.InvalidURL:
        raise InvalidSubscriptionURLError(url)
    if parsed.scheme not in ("http", "https") or not parsed.host:
        raise InvalidSubscriptionURLError(url)
    return parsed
