"""Subscription Handler — CRUD and content refresh under /api/sub.

Invariants:
    - Every route sits behind jwt_auth
    - cron is validated before any write (400 "Invalid cron expression: ...")
    - Deleting a subscription also drops its cached content

Design Decisions:
    - ContentStore and SubscriptionFetcher are injected, never module-global
"""

import logging

from fastapi import Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.middleware import jwt_auth
from app.config import Settings
from app.core.cron import validate_cron
from app.core.routing import GroupRouter, Method, Route
from app.infrastructure.database import get_db
from app.models.subscription import Subscription
from app.repositories.subscription import SubscriptionRepository
from app.schemas.response import respond
from app.schemas.subscription import (
    SubscriptionCreate, SubscriptionOut, SubscriptionUpdate,
)
from app.services.content_store import ContentStore
from app.services.fetcher import SubscriptionFetcher

logger = logging.getLogger(__name__)


class SubscriptionHandler:
    def __init__(
        self,
        settings: Settings,
        fetcher: SubscriptionFetcher,
        content_store: ContentStore,
    ):
        self._settings = settings
        self._fetcher = fetcher
        self._content_store = content_store

    def groups(self) -> list[GroupRouter]:
        return [self.subscription_group()]

    def subscription_group(self) -> GroupRouter:
        return (
            GroupRouter("/api/sub")
            .use(jwt_auth(self._settings))
            .add_route(
                Route("/add", Method.POST)
                .handle(self.create_subscription)
                .with_description("Create subscription"),
            )
            .add_route(
                Route("/list", Method.GET)
                .handle(self.list_subscriptions)
                .with_description("List subscriptions"),
            )
            .add_route(
                Route("/{sub_id}", Method.GET)
                .handle(self.get_subscription)
                .with_description("Get subscription"),
            )
            .add_route(
                Route("/{sub_id}/content", Method.GET)
                .handle(self.fetch_subscription_content)
                .with_description("Fetch subscription content"),
            )
            .add_route(
                Route("/{sub_id}", Method.PUT)
                .handle(self.update_subscription)
                .with_description("Update subscription"),
            )
            .add_route(
                Route("/{sub_id}", Method.DELETE)
                .handle(self.delete_subscription)
                .with_description("Delete subscription"),
            )
        )

    async def create_subscription(
        self, body: SubscriptionCreate, db: AsyncSession = Depends(get_db),
    ):
        validate_cron(body.cron)
        sub = await SubscriptionRepository(db).create(
            Subscription(url=body.url, cron=body.cron, auto_update=body.auto_update),
        )
        logger.info(f"Subscription created: {sub.url}", extra={"sub_id": sub.id})
        return respond(
            SubscriptionOut.model_validate(sub),
            message="Subscription created successfully",
            status_code=status.HTTP_201_CREATED,
        )

    async def list_subscriptions(self, db: AsyncSession = Depends(get_db)):
        subs = await SubscriptionRepository(db).list_all()
        return respond([SubscriptionOut.model_validate(s) for s in subs])

    async def get_subscription(
        self, sub_id: int, db: AsyncSession = Depends(get_db),
    ):
        sub = await SubscriptionRepository(db).get_by_id(sub_id)
        return respond(SubscriptionOut.model_validate(sub))

    async def fetch_subscription_content(
        self, sub_id: int, db: AsyncSession = Depends(get_db),
    ):
        """Download the subscription now and return the refreshed record."""
        sub = await self._fetcher.fetch(db, sub_id)
        return respond(SubscriptionOut.model_validate(sub))

    async def update_subscription(
        self,
        sub_id: int,
        body: SubscriptionUpdate,
        db: AsyncSession = Depends(get_db),
    ):
        repo = SubscriptionRepository(db)
        sub = await repo.get_by_id(sub_id)

        if body.cron:
            validate_cron(body.cron)
            sub.cron = body.cron
        if body.url:
            sub.url = body.url
        if body.auto_update is not None:
            sub.auto_update = body.auto_update

        sub = await repo.update(sub)
        return respond(
            SubscriptionOut.model_validate(sub),
            message="Subscription updated successfully",
        )

    async def delete_subscription(
        self, sub_id: int, db: AsyncSession = Depends(get_db),
    ):
        await SubscriptionRepository(db).delete(sub_id)
        self._content_store.delete(sub_id)
        logger.info(f"Subscription deleted: {sub_id}", extra={"sub_id": sub_id})
        return respond(message="Subscription deleted successfully")
