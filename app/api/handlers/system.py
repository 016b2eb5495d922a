"""System Handler — health probes and the static frontend.

Invariants:
    - GET /api/health always returns 200 if the process is up (liveness)
    - GET /api/health/ready returns 503 if the database is unreachable (readiness)
    - Unknown /api/ paths never fall back to index.html

Design Decisions:
    - No groups() method: system_group() is picked up by signature discovery
    - Static files mounted last so every API route takes precedence
"""

import logging
from datetime import datetime, timezone
from pathlib import Path

from fastapi import FastAPI, status
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import Settings
from app.core.routing import GroupRouter, Method, Route
from app.infrastructure import database
from app.schemas.response import respond

logger = logging.getLogger(__name__)


class SystemHandler:
    def __init__(self, settings: Settings):
        self._settings = settings

    def system_group(self) -> GroupRouter:
        return (
            GroupRouter("/api")
            .add_route(
                Route("/health", Method.GET)
                .handle(self.health)
                .with_description("Liveness probe"),
            )
            .add_route(
                Route("/health/ready", Method.GET)
                .handle(self.readiness)
                .with_description("Readiness probe"),
            )
        )

    async def health(self):
        return respond({
            "status": "ok",
            "time": datetime.now(timezone.utc).isoformat(),
        })

    async def readiness(self):
        """Readiness probe — includes database connectivity."""
        manager = database.db_manager
        db_ok = await manager.health_check() if manager else False
        if not db_ok:
            return respond(
                {"status": "not_ready", "reason": "database_unavailable"},
                message="Service unavailable",
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            )
        return respond({"status": "ready", "checks": {"database": "healthy"}})

    def setup_static_assets(self, app: FastAPI) -> None:
        """Serve the frontend build at "/" when it is present on disk."""
        static_dir = Path(self._settings.static_dir)
        if not static_dir.is_dir():
            logger.info(f"Static directory {static_dir} not found, frontend disabled")
            return
        app.mount(
            "/", SPAStaticFiles(directory=static_dir, html=True), name="static",
        )
        logger.info(f"Serving frontend from {static_dir}")


class SPAStaticFiles(StaticFiles):
    """StaticFiles that answers client-side routes with index.html."""

    async def get_response(self, path: str, scope):
        try:
            return await super().get_response(path, scope)
        except StarletteHTTPException as exc:
            if exc.status_code != status.HTTP_404_NOT_FOUND:
                raise
            if _is_api_path(path) or Path(path).suffix:
                raise
            return await super().get_response("index.html", scope)


def _is_api_path(path: str) -> bool:
    return path == "api" or path.startswith("api/")
