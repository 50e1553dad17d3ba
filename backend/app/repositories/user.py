"""
User repository: lookups by email and partial profile updates.
"""

from typing import Optional

from app.models.user import User
from app.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    model = User

    async def find_by_email(self, email: str) -> Optional[User]:
        return await self.find_one({"email": email})

    async def email_exists(self, email: str) -> bool:
        return await self.exists({"email": email})

    async def update_profile(
        self,
        id: int,
        username: Optional[str] = None,
        hashed_password: Optional[str] = None,
    ) -> Optional[User]:
        """Only the provided fields change; email is never touched."""
        data = {}
        if username is not None:
            data["username"] = username
        if hashed_password is not None:
            data["hashed_password"] = hashed_password
        if not data:
            return await self.find_by_id(id)
        return await self.update(id, data)
