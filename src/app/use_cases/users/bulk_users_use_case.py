"""
Bulk User Administration Use Cases

Admin-only batch operations: provision accounts, change roles and delete
accounts. Every batch is checked up front so a bad entry fails the request
before anything is written.
"""

import logging
from typing import List, Sequence
from uuid import UUID

from sqlalchemy.exc import IntegrityError

from src.libs.result import Error, Result, Return
from src.app.services.authorization import CurrentUser, require_role
from src.app.services.password_hasher import PasswordHasher
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.auth.dtos import RegisterCommand, UserInfo
from src.app.use_cases.auth.register_use_case import duplicate_identity_error
from src.domain.entities import User, UserRole
from .delete_account_use_case import DeleteAccountUseCase
from .dtos import (
    BulkCreateUsersResponse,
    BulkDeleteUsersResponse,
    BulkUpdateRolesResponse,
    RoleUpdate,
)

logger = logging.getLogger(__name__)

MAX_BATCH_SIZE = 100


def _check_batch(current_user: CurrentUser, items: Sequence) -> Result[None]:
    allowed = require_role(current_user, UserRole.admin)
    if allowed.is_err():
        return allowed
    if not items:
        return Return.err(Error("VALIDATION_FAILED", "Batch must not be empty"))
    if len(items) > MAX_BATCH_SIZE:
        return Return.err(
            Error("VALIDATION_FAILED", f"Batch is limited to {MAX_BATCH_SIZE} entries")
        )
    return Return.ok(None)


def _first_repeat(values) -> str:
    seen = set()
    for value in values:
        if value in seen:
            return value
        seen.add(value)
    return ""


class BulkCreateUsersUseCase:
    """
    Business Rules:
    - Admin only
    - All or nothing: a duplicate inside the batch or against existing
      accounts rejects the whole batch
    - Accounts start unconfirmed without a confirmation token; owners use
      resend-confirmation to get a link
    - No sessions are opened for the new accounts
    """

    def __init__(self, uow: UnitOfWork, password_hasher: PasswordHasher):
        self.uow = uow
        self.password_hasher = password_hasher

    async def execute(
        self, current_user: CurrentUser, commands: List[RegisterCommand]
    ) -> Result[BulkCreateUsersResponse]:
        checked = _check_batch(current_user, commands)
        if checked.is_err():
            return Return.err(checked.error)

        repeated_email = _first_repeat(c.email.lower() for c in commands)
        if repeated_email:
            return Return.err(
                Error("DUPLICATE_EMAIL", f"{repeated_email} appears more than once")
            )
        repeated_username = _first_repeat(c.username for c in commands)
        if repeated_username:
            return Return.err(
                Error(
                    "DUPLICATE_USERNAME", f"{repeated_username} appears more than once"
                )
            )

        async with self.uow:
            for command in commands:
                if await self.uow.users.get_by_email(command.email):
                    return Return.err(
                        Error("DUPLICATE_EMAIL", f"{command.email} already exists")
                    )
                if await self.uow.users.get_by_username(command.username):
                    return Return.err(
                        Error(
                            "DUPLICATE_USERNAME", f"{command.username} is already taken"
                        )
                    )

            created = []
            try:
                for command in commands:
                    user = User(
                        username=command.username,
                        email=command.email,
                        role=command.role,
                        password_hash=self.password_hasher.hash_password(
                            command.password
                        ),
                    )
                    created.append(await self.uow.users.create(user))
            except IntegrityError as exc:
                return Return.err(duplicate_identity_error(exc))

            await self.uow.commit()

            logger.info(f"{len(created)} user(s) bulk created by {current_user.id}")

            return Return.ok(
                BulkCreateUsersResponse(
                    created_count=len(created),
                    users=[UserInfo.from_user(u) for u in created],
                )
            )


class BulkUpdateRolesUseCase:
    """
    Business Rules:
    - Admin only, and never for the caller's own account
    - Every role is validated before anything changes
    - Unknown ids are reported, the rest are updated in one transaction
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, current_user: CurrentUser, updates: List[RoleUpdate]
    ) -> Result[BulkUpdateRolesResponse]:
        checked = _check_batch(current_user, updates)
        if checked.is_err():
            return Return.err(checked.error)

        if any(update.user_id == current_user.id for update in updates):
            return Return.err(
                Error("FORBIDDEN", "Administrators cannot change their own role")
            )

        roles = {}
        for update in updates:
            try:
                roles[update.user_id] = UserRole(update.role)
            except ValueError:
                return Return.err(
                    Error(
                        "VALIDATION_FAILED",
                        f"Invalid role: {update.role}. "
                        "Must be one of: student, lecturer, admin",
                    )
                )

        async with self.uow:
            not_found = []
            modified = 0
            for user_id, role in roles.items():
                user = await self.uow.users.get_by_id(user_id)
                if user is None:
                    not_found.append(str(user_id))
                    continue
                if UserRole(user.role) != role:
                    user.role = role
                    await self.uow.users.update(user)
                    modified += 1

            await self.uow.commit()

            logger.info(
                f"Bulk role update by {current_user.id}: {modified} modified, "
                f"{len(not_found)} not found"
            )

            return Return.ok(
                BulkUpdateRolesResponse(
                    matched_count=len(roles) - len(not_found),
                    modified_count=modified,
                    not_found=not_found,
                )
            )


class BulkDeleteUsersUseCase:
    """
    Business Rules:
    - Admin only, and never the caller's own account
    - Each account goes through the DeleteAccountUseCase cascade in its own
      transaction; unknown ids are reported and skipped
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, current_user: CurrentUser, user_ids: List[UUID]
    ) -> Result[BulkDeleteUsersResponse]:
        checked = _check_batch(current_user, user_ids)
        if checked.is_err():
            return Return.err(checked.error)

        if current_user.id in user_ids:
            return Return.err(
                Error("FORBIDDEN", "Administrators cannot delete their own account here")
            )

        cascade = DeleteAccountUseCase(self.uow)
        deleted = assignments = sessions = 0
        not_found = []
        for user_id in dict.fromkeys(user_ids):
            result = await cascade.execute(user_id)
            if result.is_err():
                if result.error.code != "NOT_FOUND":
                    return Return.err(result.error)
                not_found.append(str(user_id))
                continue
            deleted += 1
            assignments += result.value.assignments_deleted
            sessions += result.value.sessions_deleted

        logger.info(f"{deleted} user(s) bulk deleted by {current_user.id}")

        return Return.ok(
            BulkDeleteUsersResponse(
                deleted_count=deleted,
                assignments_deleted=assignments,
                sessions_deleted=sessions,
                not_found=not_found,
            )
        )
