from abc import ABC, abstractmethod
from typing import List, Optional
from uuid import UUID

from src.domain.entities import Assignment


class IAssignmentRepository(ABC):
    """Assignment repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, assignment_id: UUID) -> Optional[Assignment]:
        pass

    @abstractmethod
    async def list(self, created_by: Optional[UUID] = None) -> List[Assignment]:
        pass

    @abstractmethod
    async def create(self, assignment: Assignment) -> Assignment:
        pass

    @abstractmethod
    async def update(self, assignment: Assignment) -> Assignment:
        pass

    @abstractmethod
    async def delete(self, assignment: Assignment) -> None:
        pass

    @abstractmethod
    async def delete_all_by_owner(self, user_id: UUID) -> int:
        """Delete every assignment created by a user. Returns count deleted."""
        pass
