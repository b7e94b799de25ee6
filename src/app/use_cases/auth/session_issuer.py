from typing import Optional, Tuple

from src.app.services.token_codec import TokenCodec
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utcnow
from src.domain.entities import Session, User
from .dtos import ClientInfo


async def open_session(
    uow: UnitOfWork,
    token_codec: TokenCodec,
    user: User,
    client: Optional[ClientInfo] = None,
) -> Tuple[Session, str]:
    """
    Record a new session for the user and sign a token bound to it.

    Must run inside the caller's unit of work; the caller commits.
    """
    client = client or ClientInfo()
    session = Session(
        user_id=user.id,
        user_agent=client.user_agent[:255] if client.user_agent else None,
        ip_address=client.ip_address,
    )
    session = await uow.sessions.create(session)
    token = token_codec.issue(user.id, issued_at=utcnow(), session_id=session.id)
    return session, token
