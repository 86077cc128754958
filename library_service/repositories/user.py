from typing import Sequence

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from library_service.models.user import User, UserRole


class UserRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def find_by_id(self, user_id: int) -> User | None:
        return await self.session.get(User, user_id)

    async def exists_by_id(self, user_id: int) -> bool:
        result = await self.session.execute(select(User.id).where(User.id == user_id))
        return result.scalar_one_or_none() is not None

    async def find_by_email(self, email: str) -> User | None:
        result = await self.session.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def exists_by_email(self, email: str) -> bool:
        result = await self.session.execute(select(User.id).where(User.email == email))
        return result.scalar_one_or_none() is not None

    async def save(self, user: User) -> User:
        self.session.add(user)
        await self.session.flush()
        return user

    async def find_by_role(self, role: UserRole) -> Sequence[User]:
        result = await self.session.execute(
            select(User).where(User.role == role).order_by(User.id)
        )
        return result.scalars().all()

    async def find_all_members_ordered_by_name(self) -> Sequence[User]:
        result = await self.session.execute(
            select(User)
            .where(User.role == UserRole.MEMBER)
            .order_by(User.last_name, User.first_name)
        )
        return result.scalars().all()

    async def search_by_name(
        self, first_name: str | None, last_name: str | None
    ) -> Sequence[User]:
        clauses = []
        if first_name:
            clauses.append(User.first_name.icontains(first_name, autoescape=True))
        if last_name:
            clauses.append(User.last_name.icontains(last_name, autoescape=True))
        if not clauses:
            return []
        result = await self.session.execute(
            select(User).where(or_(*clauses)).order_by(User.last_name, User.first_name)
        )
        return result.scalars().all()

    async def count(self) -> int:
        result = await self.session.execute(select(func.count()).select_from(User))
        return result.scalar_one()

    async def count_by_role(self, role: UserRole) -> int:
        result = await self.session.execute(
            select(func.count()).select_from(User).where(User.role == role)
        )
        return result.scalar_one()
