"""User Service — authentication, password changes and account bootstrap.

Invariants:
    - Unknown username and wrong password are indistinguishable (InvalidCredentialsError)
    - Passwords only leave this module as bcrypt hashes
    - The admin account (id 1) exists after ensure_admin_user()
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import InvalidCredentialsError, ResourceNotFoundError
from app.core.security import hash_password, verify_password
from app.models.user import ADMIN_USER_ID, User
from app.repositories.user import UserRepository
from app.schemas.user import UserOut

logger = logging.getLogger(__name__)

DEFAULT_ADMIN_USERNAME = "admin"
DEFAULT_ADMIN_PASSWORD = "admin"


class UserService:
    def __init__(self, repo: UserRepository):
        self._repo = repo

    async def create_user(
        self, username: str, password: str, user_id: int | None = None,
    ) -> User:
        user = User(id=user_id, username=username, password=hash_password(password))
        return await self._repo.create(user)

    async def authenticate(self, username: str, password: str) -> User:
        try:
            user = await self._repo.get_by_username(username)
        except ResourceNotFoundError:
            raise InvalidCredentialsError()
        if not verify_password(user.password, password):
            raise InvalidCredentialsError()
        return user

    async def change_password(
        self, user_id: int, old_password: str, new_password: str,
    ) -> None:
        user = await self._repo.get_by_id(user_id)
        if not verify_password(user.password, old_password):
            raise InvalidCredentialsError("Invalid old password")
        await self._repo.update_password(user_id, hash_password(new_password))
        logger.info(f"Password changed for user {user_id}")

    async def update_user_info(self, user: User) -> User:
        return await self._repo.update(user)

    @staticmethod
    def is_admin(user: User) -> bool:
        return user.id == ADMIN_USER_ID

    @staticmethod
    def sanitize(user: User) -> UserOut:
        """Public view of a user, without the password hash."""
        return UserOut.model_validate(user)


async def ensure_admin_user(db: AsyncSession) -> None:
    """Create the initial administrator account if it is missing."""
    repo = UserRepository(db)
    if await repo.exists(ADMIN_USER_ID):
        return
    await UserService(repo).create_user(
        DEFAULT_ADMIN_USERNAME, DEFAULT_ADMIN_PASSWORD, user_id=ADMIN_USER_ID,
    )
    logger.info(f"Initial admin user (ID: {ADMIN_USER_ID}) created")
