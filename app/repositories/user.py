"""User Repository — lookups and updates on the users table."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import ConflictError, ResourceNotFoundError
from app.models.user import User


class UserRepository:
    def __init__(self, db: AsyncSession):
        self._db = db

    async def get_by_id(self, user_id: int) -> User:
        user = await self._db.get(User, user_id)
        if user is None:
            raise ResourceNotFoundError("User", user_id)
        return user

    async def get_by_username(self, username: str) -> User:
        result = await self._db.execute(
            select(User).where(User.username == username),
        )
        user = result.scalar_one_or_none()
        if user is None:
            raise ResourceNotFoundError("User", username)
        return user

    async def exists(self, user_id: int) -> bool:
        return await self._db.get(User, user_id) is not None

    async def create(self, user: User) -> User:
        if await self._username_taken(user.username):
            raise ConflictError("Username already exists")
        self._db.add(user)
        await self._db.commit()
        await self._db.refresh(user)
        return user

    async def update(self, user: User) -> User:
        """Persist a changed username."""
        if await self._username_taken(user.username, exclude_id=user.id):
            raise ConflictError("Username already exists")
        self._db.add(user)
        await self._db.commit()
        await self._db.refresh(user)
        return user

    async def update_password(self, user_id: int, hashed_password: str) -> None:
        user = await self.get_by_id(user_id)
        user.password = hashed_password
        await self._db.commit()

    async def _username_taken(
        self, username: str, exclude_id: int | None = None,
    ) -> bool:
        query = select(User.id).where(User.username == username)
        if exclude_id is not None:
            query = query.where(User.id != exclude_id)
        # pending changes on the row itself must not flush before the check
        with self._db.no_autoflush:
            result = await self._db.execute(query)
        return result.first() is not None
