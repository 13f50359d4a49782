from typing import Optional
import logging
from beanie import PydanticObjectId
from pymongo.errors import DuplicateKeyError

from pdc_pro.core.security import get_password_hash, verify_password
from pdc_pro.models.user import User

logger = logging.getLogger(__name__)


class UserRepository:
    """
    Credential store.
    Emails are matched case-insensitively; passwords only ever leave as bcrypt hashes.
    """

    async def get_by_id(self, user_id: str) -> Optional[User]:
        if not user_id or not PydanticObjectId.is_valid(user_id):
            return None
        return await User.get(PydanticObjectId(user_id))

    async def get_by_email(self, email: str) -> Optional[User]:
        return await User.find_one(User.email == User.normalize_email(email))

    async def register(self, name: str, email: str, password: str) -> Optional[User]:
        """
        Create a user.

        Returns:
            The new user, or None if the email is already registered
        """
        if await self.get_by_email(email):
            return None

        user = User(
            name=name.strip(),
            email=User.normalize_email(email),
            hashed_password=get_password_hash(password)
        )
        try:
            await user.insert()
        except DuplicateKeyError:
            # Lost a race against a concurrent sign-up
            return None
        logger.info(f"Registered user {user.id}")
        return user

    async def verify(self, email: str, password: str) -> Optional[User]:
        """Return the user when the email/password pair is valid."""
        user = await self.get_by_email(email)
        if not user or not verify_password(password, user.hashed_password):
            return None
        return user
