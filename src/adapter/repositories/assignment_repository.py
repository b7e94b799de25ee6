from typing import List, Optional
from uuid import UUID

from sqlmodel import delete, select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.assignment_repository import IAssignmentRepository
from src.domain.entities import Assignment


class AssignmentRepository(IAssignmentRepository):
    """Assignment repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, assignment_id: UUID) -> Optional[Assignment]:
        stmt = select(Assignment).where(Assignment.id == assignment_id)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def list(self, created_by: Optional[UUID] = None) -> List[Assignment]:
        stmt = select(Assignment).order_by(Assignment.created_at.desc())
        if created_by is not None:
            stmt = stmt.where(Assignment.created_by == created_by)
        result = await self.session.exec(stmt)
        return list(result.all())

    async def create(self, assignment: Assignment) -> Assignment:
        self.session.add(assignment)
        await self.session.flush()
        await self.session.refresh(assignment)
        return assignment

    async def update(self, assignment: Assignment) -> Assignment:
        self.session.add(assignment)
        await self.session.flush()
        await self.session.refresh(assignment)
        return assignment

    async def delete(self, assignment: Assignment) -> None:
        await self.session.delete(assignment)
        await self.session.flush()

    async def delete_all_by_owner(self, user_id: UUID) -> int:
        stmt = delete(Assignment).where(Assignment.created_by == user_id)
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount
