from datetime import datetime
from typing import Dict, List, Optional
from uuid import UUID

from sqlmodel import func, or_, select, update
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.user_repository import IUserRepository
from src.domain.entities import User, UserRole


class UserRepository(IUserRepository):
    """User repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email address"""
        stmt = select(User).where(User.email == email)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_by_username(self, username: str) -> Optional[User]:
        """Get user by username"""
        stmt = select(User).where(User.username == username)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_by_id(self, user_id: UUID) -> Optional[User]:
        """Get user by ID"""
        stmt = select(User).where(User.id == user_id)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def list(self, role: Optional[UserRole] = None) -> List[User]:
        """List users, optionally filtered by role"""
        stmt = select(User).order_by(User.created_at)
        if role is not None:
            stmt = stmt.where(User.role == role)
        result = await self.session.exec(stmt)
        return list(result.all())

    async def search(self, query: str, role: Optional[UserRole] = None) -> List[User]:
        """Case-insensitive substring match on username or email"""
        needle = query.lower()
        stmt = (
            select(User)
            .where(
                or_(
                    func.lower(User.username).contains(needle, autoescape=True),
                    func.lower(User.email).contains(needle, autoescape=True),
                )
            )
            .order_by(User.username)
        )
        if role is not None:
            stmt = stmt.where(User.role == role)
        result = await self.session.exec(stmt)
        return list(result.all())

    async def count_by_role(self) -> Dict[UserRole, int]:
        """Number of users per role; roles without users are absent"""
        stmt = select(User.role, func.count(User.id)).group_by(User.role)
        result = await self.session.exec(stmt)
        return {UserRole(role): count for role, count in result.all()}

    async def create(self, user: User) -> User:
        """Create a new user"""
        self.session.add(user)
        await self.session.flush()
        await self.session.refresh(user)
        return user

    async def update(self, user: User) -> User:
        """Update existing user"""
        self.session.add(user)
        await self.session.flush()
        await self.session.refresh(user)
        return user

    async def delete(self, user: User) -> None:
        """Delete a user"""
        await self.session.delete(user)
        await self.session.flush()

    async def get_by_confirmation_token_hash(self, token_hash: str) -> Optional[User]:
        """Get an unconfirmed user by email confirmation token hash"""
        stmt = select(User).where(
            User.confirm_email_token_hash == token_hash,
            User.email_confirmed == False,
        )
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_by_reset_token_hash(
        self, token_hash: str, now: datetime
    ) -> Optional[User]:
        """Get user by reset token hash with an unexpired reset window"""
        stmt = select(User).where(
            User.reset_password_token_hash == token_hash,
            User.reset_password_expires_at > now,
        )
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def consume_confirmation_token(self, user_id: UUID, token_hash: str) -> bool:
        """Match-and-clear the confirmation hash in one statement"""
        stmt = (
            update(User)
            .where(
                User.id == user_id,
                User.confirm_email_token_hash == token_hash,
                User.email_confirmed == False,
            )
            .values(email_confirmed=True, confirm_email_token_hash=None)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount == 1

    async def consume_reset_token(
        self, user_id: UUID, token_hash: str, now: datetime
    ) -> bool:
        """Match-and-clear the reset token fields in one statement"""
        stmt = (
            update(User)
            .where(
                User.id == user_id,
                User.reset_password_token_hash == token_hash,
                User.reset_password_expires_at > now,
            )
            .values(reset_password_token_hash=None, reset_password_expires_at=None)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount == 1

    async def claim_two_factor_attempt(self, user_id: UUID, max_attempts: int) -> bool:
        """Increment the attempt counter only while it is below max_attempts"""
        stmt = (
            update(User)
            .where(
                User.id == user_id,
                User.two_factor_failed_attempts < max_attempts,
            )
            .values(two_factor_failed_attempts=User.two_factor_failed_attempts + 1)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount == 1
