"""Chain Middlewares — request-scoped steps placed before handlers in a route chain.

Invariants:
    - jwt_auth stores the authenticated id in request.state.user_id
    - Every authentication failure raises AuthenticationError (401 envelope)
"""

import logging

from fastapi import Request

from app.config import Settings
from app.core.errors import AuthenticationError
from app.core.security import decode_access_token

logger = logging.getLogger(__name__)


def jwt_auth(settings: Settings):
    """Build the Bearer-token chain element for the configured secret."""

    async def authenticate(request: Request) -> None:
        header = request.headers.get("Authorization")
        if not header:
            raise _auth_failure(request, "missing authentication header")

        parts = header.split(" ")
        if len(parts) != 2 or parts[0] != "Bearer":
            raise _auth_failure(request, "invalid authentication format")

        try:
            request.state.user_id = decode_access_token(
                parts[1], settings.jwt.secret,
            )
        except AuthenticationError as e:
            raise _auth_failure(request, e.message) from e

    return authenticate


def _auth_failure(request: Request, message: str) -> AuthenticationError:
    logger.warning(
        f"JWT authentication failed: {message}",
        extra={"path": request.url.path},
    )
    return AuthenticationError(message)
