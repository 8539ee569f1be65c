from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from functools import lru_cache
from typing import Any

import asyncpg  # type: ignore[import-untyped]
from asyncpg import exceptions as pg_exc

from jobtracker.core.config import get_settings
from jobtracker.services.schema import SCHEMA_STATEMENTS

logger = logging.getLogger(__name__)

_CONNECTION_ERRORS = (
    OSError,
    asyncpg.InterfaceError,
    pg_exc.PostgresConnectionError,
    pg_exc.CannotConnectNowError,
    pg_exc.TooManyConnectionsError,
)

_JOB_COLUMNS = """
  j.id,
  j.publisher_id,
  j.title,
  j.description,
  j.location,
  j.salary_range,
  j.status,
  j.created_at,
  j.updated_at
"""

_APPLICATION_COLUMNS = """
  a.id,
  a.job_id,
  a.applicant_id,
  a.status,
  a.resume_url,
  a.cover_letter,
  a.approver_id,
  a.rejection_reason,
  a.created_at,
  a.updated_at
"""


class RepositoryError(Exception):
    """Base repository error."""


class RepositoryUnavailableError(RepositoryError):
    """Raised when the database is unavailable or not configured."""


class RepositoryNotFoundError(RepositoryError):
    """Raised when a write references an entity that does not exist."""


class RepositoryConflictError(RepositoryError):
    """Raised when a write violates a uniqueness constraint."""

    def __init__(self, message: str, *, constraint: str | None = None) -> None:
        super().__init__(message)
        self.constraint = constraint


class RepositoryConnection:
    """Parameterized queries bound to one checked-out pool connection."""

    def __init__(self, conn: asyncpg.Connection) -> None:
        self._conn = conn

    async def ping(self) -> None:
        await self._conn.execute("select 1")

    async def get_user_by_email(self, email: str) -> dict[str, Any] | None:
        row = await self._conn.fetchrow(
            """
            select id, email, password_hash, name, role, created_at, updated_at
            from users
            where email = $1
            """,
            email,
        )
        return _row_to_dict(row)

    async def insert_user(self, *, email: str, password_hash: str, name: str, role: str) -> dict[str, Any]:
        try:
            row = await self._conn.fetchrow(
                """
                insert into users (email, password_hash, name, role)
                values ($1, $2, $3, $4)
                returning id, email, name, role, created_at, updated_at
                """,
                email,
                password_hash,
                name,
                role,
            )
        except pg_exc.UniqueViolationError as exc:
            raise RepositoryConflictError("email already registered", constraint=exc.constraint_name) from exc
        return dict(row)

    async def insert_job(
        self,
        *,
        publisher_id: int,
        title: str,
        description: str,
        location: str | None,
        salary_range: str | None,
    ) -> dict[str, Any]:
        try:
            row = await self._conn.fetchrow(
                """
                insert into jobs (publisher_id, title, description, location, salary_range)
                values ($1, $2, $3, $4, $5)
                returning id, publisher_id, title, description, location, salary_range, status, created_at, updated_at
                """,
                publisher_id,
                title,
                description,
                location,
                salary_range,
            )
        except pg_exc.ForeignKeyViolationError as exc:
            raise RepositoryNotFoundError("publisher not found") from exc
        return dict(row)

    async def list_open_jobs(self) -> list[dict[str, Any]]:
        rows = await self._conn.fetch(
            f"""
            select {_JOB_COLUMNS}, u.name as publisher_name
            from jobs j
            join users u on u.id = j.publisher_id
            where j.status = 'open'
            order by j.created_at desc, j.id desc
            """
        )
        return [dict(row) for row in rows]

    async def get_job(self, job_id: int) -> dict[str, Any] | None:
        row = await self._conn.fetchrow(
            f"""
            select {_JOB_COLUMNS}, u.name as publisher_name
            from jobs j
            join users u on u.id = j.publisher_id
            where j.id = $1
            """,
            job_id,
        )
        return _row_to_dict(row)

    async def update_job(
        self,
        *,
        job_id: int,
        title: str,
        description: str,
        location: str | None,
        salary_range: str | None,
    ) -> None:
        await self._conn.execute(
            """
            update jobs
            set title = $2, description = $3, location = $4, salary_range = $5
            where id = $1
            """,
            job_id,
            title,
            description,
            location,
            salary_range,
        )

    async def close_job(self, job_id: int) -> None:
        await self._conn.execute("update jobs set status = 'closed' where id = $1", job_id)

    async def find_application(self, *, job_id: int, applicant_id: int) -> dict[str, Any] | None:
        row = await self._conn.fetchrow(
            f"""
            select {_APPLICATION_COLUMNS}
            from applications a
            where a.job_id = $1 and a.applicant_id = $2
            """,
            job_id,
            applicant_id,
        )
        return _row_to_dict(row)

    async def insert_application(
        self,
        *,
        job_id: int,
        applicant_id: int,
        cover_letter: str | None,
        resume_url: str | None,
    ) -> dict[str, Any]:
        try:
            row = await self._conn.fetchrow(
                """
                insert into applications (job_id, applicant_id, cover_letter, resume_url, status)
                values ($1, $2, $3, $4, 'pending')
                returning id, job_id, applicant_id, status, resume_url, cover_letter,
                  approver_id, rejection_reason, created_at, updated_at
                """,
                job_id,
                applicant_id,
                cover_letter,
                resume_url,
            )
        except pg_exc.UniqueViolationError as exc:
            raise RepositoryConflictError("application already exists", constraint=exc.constraint_name) from exc
        except pg_exc.ForeignKeyViolationError as exc:
            raise RepositoryNotFoundError("job not found") from exc
        return dict(row)

    async def list_applications_by_applicant(self, applicant_id: int) -> list[dict[str, Any]]:
        rows = await self._conn.fetch(
            f"""
            select
              {_APPLICATION_COLUMNS},
              j.title,
              j.description,
              j.location,
              u.name as publisher_name
            from applications a
            join jobs j on j.id = a.job_id
            join users u on u.id = j.publisher_id
            where a.applicant_id = $1
            order by a.created_at desc, a.id desc
            """,
            applicant_id,
        )
        return [dict(row) for row in rows]

    async def list_applications_for_job(self, job_id: int) -> list[dict[str, Any]]:
        rows = await self._conn.fetch(
            f"""
            select
              {_APPLICATION_COLUMNS},
              u.name as applicant_name,
              u.email as applicant_email
            from applications a
            join users u on u.id = a.applicant_id
            where a.job_id = $1
            order by a.created_at desc, a.id desc
            """,
            job_id,
        )
        return [dict(row) for row in rows]

    async def update_application_status(
        self,
        *,
        application_id: int,
        status: str,
        approver_id: int,
        rejection_reason: str | None,
    ) -> dict[str, Any] | None:
        row = await self._conn.fetchrow(
            """
            update applications
            set status = $2, approver_id = $3, rejection_reason = $4
            where id = $1
            returning id, job_id, applicant_id, status, resume_url, cover_letter,
              approver_id, rejection_reason, created_at, updated_at
            """,
            application_id,
            status,
            approver_id,
            rejection_reason,
        )
        return _row_to_dict(row)


class PostgresRepository:
    def __init__(
        self,
        database_url: str | None,
        min_pool_size: int,
        max_pool_size: int,
        connect_retries: int,
        connect_retry_delay_seconds: float,
    ) -> None:
        self.database_url = database_url
        self.min_pool_size = min_pool_size
        self.max_pool_size = max_pool_size
        self.connect_retries = max(1, connect_retries)
        self.connect_retry_delay_seconds = max(0.0, connect_retry_delay_seconds)
        self._pool: asyncpg.Pool | None = None

    async def close(self) -> None:
        if self._pool is not None:
            await self._pool.close()
            self._pool = None

    @asynccontextmanager
    async def connection(self) -> AsyncIterator[RepositoryConnection]:
        pool = await self._get_pool()
        try:
            async with pool.acquire() as conn:
                yield RepositoryConnection(conn)
        except _CONNECTION_ERRORS as exc:
            raise RepositoryUnavailableError("database unavailable") from exc

    async def wait_until_ready(self) -> None:
        """Ping the database until it answers, giving up after ``connect_retries`` attempts."""
        if not self.database_url:
            raise RepositoryUnavailableError("JT_DATABASE_URL is required")

        for attempt in range(1, self.connect_retries + 1):
            try:
                async with self.connection() as conn:
                    await conn.ping()
                return
            except RepositoryUnavailableError:
                logger.info("waiting for database (%s/%s)", attempt, self.connect_retries)
                await asyncio.sleep(self.connect_retry_delay_seconds)

        raise RepositoryUnavailableError("database did not become ready in time")

    async def init_schema(self) -> None:
        pool = await self._get_pool()
        async with pool.acquire() as conn:
            async with conn.transaction():
                for statement in SCHEMA_STATEMENTS:
                    await conn.execute(statement)
        logger.info("database schema initialized")

    async def _get_pool(self) -> asyncpg.Pool:
        if not self.database_url:
            raise RepositoryUnavailableError("JT_DATABASE_URL is required")

        if self._pool is not None:
            return self._pool

        try:
            self._pool = await asyncpg.create_pool(
                dsn=self.database_url,
                min_size=self.min_pool_size,
                max_size=self.max_pool_size,
                command_timeout=15,
            )
            return self._pool
        except Exception as exc:  # pragma: no cover - depends on environment
            raise RepositoryUnavailableError("database unavailable") from exc


def _row_to_dict(row: asyncpg.Record | None) -> dict[str, Any] | None:
    if row is None:
        return None
    return dict(row)


@lru_cache
def get_repository() -> PostgresRepository:
    settings = get_settings()
    return PostgresRepository(
        database_url=settings.database_url,
        min_pool_size=settings.database_pool_min_size,
        max_pool_size=settings.database_pool_max_size,
        connect_retries=settings.database_connect_retries,
        connect_retry_delay_seconds=settings.database_connect_retry_delay_seconds,
    )
