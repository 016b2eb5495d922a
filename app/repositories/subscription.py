"""Subscription Repository — CRUD on the subscriptions table.

Invariants:
    - url uniqueness checked before insert/update (ConflictError, not IntegrityError)
    - list_all() ordered by id ascending
"""

from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import ConflictError, ResourceNotFoundError
from app.models.subscription import Subscription


class SubscriptionRepository:
    def __init__(self, db: AsyncSession):
        self._db = db

    async def get_by_id(self, sub_id: int) -> Subscription:
        sub = await self._db.get(Subscription, sub_id)
        if sub is None:
            raise ResourceNotFoundError("Subscription", sub_id)
        return sub

    async def list_all(self) -> list[Subscription]:
        result = await self._db.execute(
            select(Subscription).order_by(Subscription.id.asc()),
        )
        return list(result.scalars().all())

    async def create(self, sub: Subscription) -> Subscription:
        if await self._url_taken(sub.url):
            raise ConflictError("Subscription URL already exists")
        self._db.add(sub)
        await self._db.commit()
        await self._db.refresh(sub)
        return sub

    async def update(self, sub: Subscription) -> Subscription:
        if await self._url_taken(sub.url, exclude_id=sub.id):
            raise ConflictError("Subscription URL already exists")
        self._db.add(sub)
        await self._db.commit()
        await self._db.refresh(sub)
        return sub

    async def delete(self, sub_id: int) -> None:
        sub = await self.get_by_id(sub_id)
        await self._db.delete(sub)
        await self._db.commit()

    async def update_last_fetch(self, sub_id: int) -> Subscription:
        sub = await self.get_by_id(sub_id)
        sub.last_fetch = datetime.now(timezone.utc)
        await self._db.commit()
        await self._db.refresh(sub)
        return sub

    async def _url_taken(self, url: str, exclude_id: int | None = None) -> bool:
        query = select(Subscription.id).where(Subscription.url == url)
        if exclude_id is not None:
            query = query.where(Subscription.id != exclude_id)
        # pending changes on the row itself must not flush before the check
        with self._db.no_autoflush:
            result = await self._db.execute(query)
        return result.first() is not None
