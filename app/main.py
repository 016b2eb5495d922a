"""BestSub API — FastAPI application factory and entry point.

Invariants:
    - Routes come from handler objects via core/routing.py (must_register_group)
    - Global error handlers map BestSubError → {code, message, data} envelope
    - CORS configured from settings (not hardcoded)
    - Database opened, schema created and admin seeded in the lifespan
    - One ContentStore per app, shared by the fetcher and the subscription handler

Design Decisions:
    - Lifespan over @app.on_event: cleaner cleanup
    - create_app() takes settings and collaborators so tests build isolated apps
    - Static files registered after every API group so /api/* takes precedence
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app import __version__
from app.api.error_handlers import register_error_handlers
from app.api.handlers import SubscriptionHandler, SystemHandler, UserHandler
from app.config import Settings, get_settings
from app.core.routing import must_register_group
from app.infrastructure.database import close_db, init_db
from app.infrastructure.observability import log_requests, setup_logging
from app.services.content_store import ContentStore
from app.services.fetcher import SubscriptionFetcher
from app.services.user_service import ensure_admin_user

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings: Settings = app.state.settings
    setup_logging(settings.log_level, settings.log_format)
    manager = init_db(
        settings.database.url,
        pool_size=settings.database.pool_size,
        max_overflow=settings.database.max_overflow,
    )
    await manager.create_schema()
    async with manager.session() as db:
        await ensure_admin_user(db)
    logger.info("BestSub API started")
    yield
    logger.info("BestSub API shutting down")
    app.state.content_store.clear()
    await close_db()


def create_app(
    settings: Settings | None = None,
    *,
    content_store: ContentStore | None = None,
    fetcher: SubscriptionFetcher | None = None,
) -> FastAPI:
    settings = settings or get_settings()
    if content_store is None:
        content_store = fetcher.content_store if fetcher else ContentStore()
    fetcher = fetcher or SubscriptionFetcher(content_store)

    app = FastAPI(
        title="BestSub API",
        description="Subscription management backend",
        version=__version__,
        lifespan=lifespan,
        docs_url="/api/swagger",
        openapi_url="/api/swagger/doc.json",
        redoc_url=None,
    )
    app.state.settings = settings
    app.state.content_store = content_store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.middleware("http")(log_requests)
    register_error_handlers(app)

    system = SystemHandler(settings)
    must_register_group(app, UserHandler(settings))
    must_register_group(
        app, SubscriptionHandler(settings, fetcher, content_store),
    )
    must_register_group(app, system)
    system.setup_static_assets(app)

    return app


app = create_app()
