from datetime import datetime
from typing import Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel

from src.app.use_cases.auth.dtos import UserInfo
from src.domain.entities import Session


class SessionInfo(BaseModel):
    """One active login as shown to its owner"""

    id: str
    created_at: datetime
    user_agent: Optional[str] = None
    ip_address: Optional[str] = None
    current: bool = False

    @classmethod
    def from_session(cls, session: Session, current_session_id=None) -> "SessionInfo":
        return cls(
            id=str(session.id),
            created_at=session.created_at,
            user_agent=session.user_agent,
            ip_address=session.ip_address,
            current=session.id == current_session_id,
        )


class SessionListResponse(BaseModel):
    success: bool = True
    sessions: List[SessionInfo]


class RevokeSessionsResponse(BaseModel):
    success: bool = True
    message: str
    revoked_count: int


class UserListResponse(BaseModel):
    success: bool = True
    count: int
    users: List[UserInfo]


class DeleteAccountResponse(BaseModel):
    success: bool = True
    message: str
    assignments_deleted: int
    sessions_deleted: int


class BulkCreateUsersResponse(BaseModel):
    success: bool = True
    created_count: int
    users: List[UserInfo]


class RoleUpdate(BaseModel):
    user_id: UUID
    role: str


class BulkUpdateRolesResponse(BaseModel):
    success: bool = True
    matched_count: int
    modified_count: int
    not_found: List[str]


class BulkDeleteUsersResponse(BaseModel):
    success: bool = True
    deleted_count: int
    assignments_deleted: int
    sessions_deleted: int
    not_found: List[str]


class RoleStatsResponse(BaseModel):
    success: bool = True
    total: int
    roles: Dict[str, int]
