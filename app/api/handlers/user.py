"""User Handler — login and profile endpoints under /api/user.

Invariants:
    - /login is the only unauthenticated route in the group prefix
    - Profile routes read the caller from request.state.user_id (set by jwt_auth)
    - Responses carry UserOut, never the password hash

Design Decisions:
    - Two groups share the /api/user prefix: public login, JWT-protected profile
    - groups() lists them explicitly, so user_group() is only reached through it
"""

import logging

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.middleware import jwt_auth
from app.config import Settings
from app.core.routing import GroupRouter, Method, Route
from app.core.security import issue_access_token
from app.infrastructure.database import get_db
from app.repositories.user import UserRepository
from app.schemas.response import respond
from app.schemas.user import (
    LoginRequest, LoginResponse, UpdateUserInfoRequest,
)
from app.services.user_service import UserService

logger = logging.getLogger(__name__)


class UserHandler:
    def __init__(self, settings: Settings):
        self._settings = settings

    def groups(self) -> list[GroupRouter]:
        return [
            GroupRouter("/api/user").add_route(
                Route("/login", Method.POST)
                .handle(self.login)
                .with_description("User login"),
            ),
            self.user_group(),
        ]

    def user_group(self) -> GroupRouter:
        return (
            GroupRouter("/api/user")
            .use(jwt_auth(self._settings))
            .add_route(
                Route("/logout", Method.POST)
                .handle(self.logout)
                .with_description("User logout"),
            )
            .add_route(
                Route("/info", Method.GET)
                .handle(self.get_user_info)
                .with_description("Get user information"),
            )
            .add_route(
                Route("/info", Method.PUT)
                .handle(self.update_user_info)
                .with_description("Update user information"),
            )
        )

    async def login(self, body: LoginRequest, db: AsyncSession = Depends(get_db)):
        """Exchange username/password for a bearer token."""
        user = await UserService(UserRepository(db)).authenticate(
            body.username, body.password,
        )
        access = issue_access_token(
            user.id, self._settings.jwt.secret, self._settings.jwt.expires_in,
        )
        logger.info(f"User logged in: {user.username}", extra={"user_id": user.id})
        return respond(
            LoginResponse(
                id=user.id, username=user.username,
                token=access.token, exp=access.expires_at,
            ),
            message="Login successful",
        )

    async def logout(self, request: Request):
        """Tokens are stateless; logout is recorded, the client drops the token."""
        user_id = request.state.user_id
        logger.info(f"User logged out: UserID={user_id}", extra={"user_id": user_id})
        return respond(message="Logout successful")

    async def get_user_info(
        self, request: Request, db: AsyncSession = Depends(get_db),
    ):
        user = await UserRepository(db).get_by_id(request.state.user_id)
        return respond(UserService.sanitize(user))

    async def update_user_info(
        self,
        request: Request,
        body: UpdateUserInfoRequest,
        db: AsyncSession = Depends(get_db),
    ):
        """Change password (needs both passwords) and/or username."""
        repo = UserRepository(db)
        service = UserService(repo)
        user = await repo.get_by_id(request.state.user_id)

        if body.old_password and body.new_password:
            await service.change_password(
                user.id, body.old_password, body.new_password,
            )

        if body.username and body.username != user.username:
            user.username = body.username
            await service.update_user_info(user)

        return respond(message="User information updated successfully")
