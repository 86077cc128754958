import logging
from typing import Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from library_service.exceptions import AuthenticationError, DuplicateResourceError, ResourceNotFoundError
from library_service.models.user import User, UserRole
from library_service.repositories.user import UserRepository
from library_service.schemas.user import UserRegistrationRequest, UserUpdateRequest
from library_service.security import hash_password, verify_password

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.users = UserRepository(session)

    async def register(self, request: UserRegistrationRequest) -> User:
        """Create a MEMBER account; the role is never taken from the request."""
        email = request.email.lower()
        logger.info("Registering user with email: %s", email)
        if await self.users.exists_by_email(email):
            raise DuplicateResourceError.for_user_email(email)

        user = User(
            email=email,
            password=hash_password(request.password),
            first_name=request.first_name,
            last_name=request.last_name,
            phone=request.phone,
            role=UserRole.MEMBER,
        )
        try:
            await self.users.save(user)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        return user

    async def authenticate(self, email: str, password: str) -> User:
        logger.debug("Authenticating user by email: %s", email)
        user = await self.users.find_by_email(email.lower())
        if user is None or not verify_password(password, user.password):
            logger.warning("Failed login for email: %s", email)
            raise AuthenticationError.invalid_credentials()
        return user

    async def find_by_id(self, user_id: int) -> User | None:
        return await self.users.find_by_id(user_id)

    async def get(self, user_id: int) -> User:
        user = await self.users.find_by_id(user_id)
        if user is None:
            raise ResourceNotFoundError.for_user(user_id)
        return user

    async def find_by_email(self, email: str) -> User | None:
        return await self.users.find_by_email(email.lower())

    async def find_all_members(self) -> Sequence[User]:
        return await self.users.find_all_members_ordered_by_name()

    async def search_users_by_name(self, first_name: str | None, last_name: str | None) -> Sequence[User]:
        logger.debug("Searching users by name: %s %s", first_name, last_name)
        return await self.users.search_by_name(first_name, last_name)

    async def find_users_by_role(self, role: UserRole) -> Sequence[User]:
        return await self.users.find_by_role(role)

    async def update_user(self, user_id: int, request: UserUpdateRequest) -> User:
        """Update profile fields and role. Passwords are not changed here."""
        logger.info("Updating user with ID: %s", user_id)
        try:
            user = await self.get(user_id)
            user.first_name = request.first_name
            user.last_name = request.last_name
            user.phone = request.phone
            user.role = request.role
            await self.users.save(user)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        logger.info("User updated successfully: %s", user.email)
        return user

    async def count_all_users(self) -> int:
        return await self.users.count()

    async def count_users_by_role(self, role: UserRole) -> int:
        return await self.users.count_by_role(role)
