from __future__ import annotations

import logging
from typing import Any

from fastapi import Depends
from starlette.concurrency import run_in_threadpool

from jobtracker.core.auth import Role
from jobtracker.core.config import Settings, get_settings
from jobtracker.core.security import hash_password, issue_token, verify_password
from jobtracker.services.errors import DuplicateEmailError, InvalidCredentialsError
from jobtracker.services.repository import RepositoryConflictError, get_repository
from jobtracker.services.schema import USERS_EMAIL_CONSTRAINT

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS_MESSAGE = "invalid email or password"


def _public_user(row: dict[str, Any]) -> dict[str, Any]:
    return {"id": row["id"], "email": row["email"], "name": row["name"], "role": row["role"]}


class IdentityService:
    """Registration and login; the only code paths that mint tokens."""

    def __init__(self, repository, settings: Settings) -> None:
        self.repository = repository
        self.settings = settings

    async def register(self, *, email: str, password: str, name: str, role: Role) -> tuple[dict[str, Any], str]:
        password_hash = await run_in_threadpool(hash_password, password)
        async with self.repository.connection() as conn:
            if await conn.get_user_by_email(email):
                raise DuplicateEmailError("email already registered")
            try:
                row = await conn.insert_user(
                    email=email,
                    password_hash=password_hash,
                    name=name,
                    role=role.value,
                )
            except RepositoryConflictError as exc:
                if exc.constraint != USERS_EMAIL_CONSTRAINT:
                    raise
                # A concurrent registration won the race past the read above.
                raise DuplicateEmailError("email already registered") from exc

        user = _public_user(row)
        logger.info("user registered id=%s role=%s", user["id"], user["role"])
        return user, issue_token(user, settings=self.settings)

    async def login(self, *, email: str, password: str) -> tuple[dict[str, Any], str]:
        async with self.repository.connection() as conn:
            row = await conn.get_user_by_email(email)

        if not row:
            raise InvalidCredentialsError(INVALID_CREDENTIALS_MESSAGE)
        if not await run_in_threadpool(verify_password, password, row["password_hash"]):
            raise InvalidCredentialsError(INVALID_CREDENTIALS_MESSAGE)

        user = _public_user(row)
        return user, issue_token(user, settings=self.settings)


def get_identity_service(
    repository=Depends(get_repository),
    settings: Settings = Depends(get_settings),
) -> IdentityService:
    return IdentityService(repository, settings)
