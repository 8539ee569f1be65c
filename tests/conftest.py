from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime, timedelta, timezone
from itertools import count
from typing import Any

import pytest
from fastapi.testclient import TestClient

from jobtracker.main import app
from jobtracker.services.repository import (
    RepositoryConflictError,
    RepositoryNotFoundError,
    get_repository,
)
from jobtracker.services.schema import APPLICATIONS_UNIQUE_CONSTRAINT, USERS_EMAIL_CONSTRAINT
from jobtracker.services.store import InMemoryStore, get_tracker_store

PASSWORD = "SecurePass123!"


class FakeRepository:
    """In-memory stand-in for PostgresRepository that keeps the schema constraints.

    ``stale_reads`` makes the duplicate pre-checks miss existing rows, which is
    what a concurrent request sees before the competing insert commits.
    """

    def __init__(self) -> None:
        self.users: dict[int, dict[str, Any]] = {}
        self.jobs: dict[int, dict[str, Any]] = {}
        self.applications: dict[int, dict[str, Any]] = {}
        self.stale_reads = False
        self.checkouts = 0
        self.releases = 0
        self._ids = count(1)
        self._clock = datetime(2024, 1, 1, tzinfo=timezone.utc)

    @asynccontextmanager
    async def connection(self) -> AsyncIterator[FakeConnection]:
        self.checkouts += 1
        try:
            yield FakeConnection(self)
        finally:
            self.releases += 1

    def add_user(self, role: str, name: str) -> int:
        user_id = self.next_id()
        now = self.now()
        self.users[user_id] = {
            "id": user_id,
            "email": f"{name.lower()}@example.com",
            "password_hash": "unused",
            "name": name,
            "role": role,
            "created_at": now,
            "updated_at": now,
        }
        return user_id

    def next_id(self) -> int:
        return next(self._ids)

    def now(self) -> datetime:
        self._clock += timedelta(seconds=1)
        return self._clock


class FakeConnection:
    def __init__(self, repo: FakeRepository) -> None:
        self.repo = repo

    async def ping(self) -> None:
        return None

    async def get_user_by_email(self, email: str) -> dict[str, Any] | None:
        if self.repo.stale_reads:
            return None
        for user in self.repo.users.values():
            if user["email"] == email:
                return dict(user)
        return None

    async def insert_user(self, *, email: str, password_hash: str, name: str, role: str) -> dict[str, Any]:
        if any(user["email"] == email for user in self.repo.users.values()):
            raise RepositoryConflictError("email already registered", constraint=USERS_EMAIL_CONSTRAINT)
        now = self.repo.now()
        user = {
            "id": self.repo.next_id(),
            "email": email,
            "password_hash": password_hash,
            "name": name,
            "role": role,
            "created_at": now,
            "updated_at": now,
        }
        self.repo.users[user["id"]] = user
        return {key: value for key, value in user.items() if key != "password_hash"}

    async def insert_job(
        self,
        *,
        publisher_id: int,
        title: str,
        description: str,
        location: str | None,
        salary_range: str | None,
    ) -> dict[str, Any]:
        if publisher_id not in self.repo.users:
            raise RepositoryNotFoundError("publisher not found")
        now = self.repo.now()
        job = {
            "id": self.repo.next_id(),
            "publisher_id": publisher_id,
            "title": title,
            "description": description,
            "location": location,
            "salary_range": salary_range,
            "status": "open",
            "created_at": now,
            "updated_at": now,
        }
        self.repo.jobs[job["id"]] = job
        return dict(job)

    async def list_open_jobs(self) -> list[dict[str, Any]]:
        rows = [self._job_view(job) for job in self.repo.jobs.values() if job["status"] == "open"]
        return _newest_first(rows)

    async def get_job(self, job_id: int) -> dict[str, Any] | None:
        job = self.repo.jobs.get(job_id)
        return self._job_view(job) if job else None

    async def update_job(
        self,
        *,
        job_id: int,
        title: str,
        description: str,
        location: str | None,
        salary_range: str | None,
    ) -> None:
        job = self.repo.jobs.get(job_id)
        if job:
            job.update(
                title=title,
                description=description,
                location=location,
                salary_range=salary_range,
                updated_at=self.repo.now(),
            )

    async def close_job(self, job_id: int) -> None:
        job = self.repo.jobs.get(job_id)
        if job:
            job.update(status="closed", updated_at=self.repo.now())

    async def find_application(self, *, job_id: int, applicant_id: int) -> dict[str, Any] | None:
        if self.repo.stale_reads:
            return None
        for application in self.repo.applications.values():
            if application["job_id"] == job_id and application["applicant_id"] == applicant_id:
                return dict(application)
        return None

    async def insert_application(
        self,
        *,
        job_id: int,
        applicant_id: int,
        cover_letter: str | None,
        resume_url: str | None,
    ) -> dict[str, Any]:
        if job_id not in self.repo.jobs or applicant_id not in self.repo.users:
            raise RepositoryNotFoundError("job not found")
        for application in self.repo.applications.values():
            if application["job_id"] == job_id and application["applicant_id"] == applicant_id:
                raise RepositoryConflictError(
                    "application already exists",
                    constraint=APPLICATIONS_UNIQUE_CONSTRAINT,
                )
        now = self.repo.now()
        application = {
            "id": self.repo.next_id(),
            "job_id": job_id,
            "applicant_id": applicant_id,
            "status": "pending",
            "resume_url": resume_url,
            "cover_letter": cover_letter,
            "approver_id": None,
            "rejection_reason": None,
            "created_at": now,
            "updated_at": now,
        }
        self.repo.applications[application["id"]] = application
        return dict(application)

    async def list_applications_by_applicant(self, applicant_id: int) -> list[dict[str, Any]]:
        rows = []
        for application in self.repo.applications.values():
            if application["applicant_id"] != applicant_id:
                continue
            job = self.repo.jobs[application["job_id"]]
            rows.append(
                {
                    **application,
                    "title": job["title"],
                    "description": job["description"],
                    "location": job["location"],
                    "publisher_name": self.repo.users[job["publisher_id"]]["name"],
                }
            )
        return _newest_first(rows)

    async def list_applications_for_job(self, job_id: int) -> list[dict[str, Any]]:
        rows = []
        for application in self.repo.applications.values():
            if application["job_id"] != job_id:
                continue
            applicant = self.repo.users[application["applicant_id"]]
            rows.append({**application, "applicant_name": applicant["name"], "applicant_email": applicant["email"]})
        return _newest_first(rows)

    async def update_application_status(
        self,
        *,
        application_id: int,
        status: str,
        approver_id: int,
        rejection_reason: str | None,
    ) -> dict[str, Any] | None:
        application = self.repo.applications.get(application_id)
        if not application:
            return None
        application.update(
            status=status,
            approver_id=approver_id,
            rejection_reason=rejection_reason,
            updated_at=self.repo.now(),
        )
        return dict(application)

    def _job_view(self, job: dict[str, Any]) -> dict[str, Any]:
        return {**job, "publisher_name": self.repo.users[job["publisher_id"]]["name"]}


def _newest_first(rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
    return sorted(rows, key=lambda row: (row["created_at"], row["id"]), reverse=True)


@pytest.fixture
def fake_repository() -> FakeRepository:
    return FakeRepository()


@pytest.fixture
def tracker_store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def client(fake_repository: FakeRepository, tracker_store: InMemoryStore) -> TestClient:
    app.dependency_overrides[get_repository] = lambda: fake_repository
    app.dependency_overrides[get_tracker_store] = lambda: tracker_store

    # Not entered as a context manager: the lifespan would try to reach Postgres.
    yield TestClient(app)

    app.dependency_overrides.clear()


def register_user(client: TestClient, role: str, *, email: str | None = None, name: str | None = None) -> dict[str, Any]:
    response = client.post(
        "/api/auth/register",
        json={
            "email": email or f"{role}@example.com",
            "password": PASSWORD,
            "name": name or f"Test {role.title()}",
            "role": role,
        },
    )
    assert response.status_code == 201, response.text
    return response.json()


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
