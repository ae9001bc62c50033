"""
Root-level conftest for all tests.

Provides explicit test settings and a per-test SQLite database with the
full schema, so repository and service tests run without Postgres.
"""

import os

# Set before importing hive: modules such as the arq worker read settings at import time
for _key, _value in {
    "POSTGRES_USER": "unit_test_user",
    "POSTGRES_HOST": "localhost",
    "POSTGRES_PASSWORD": "unit_test_password",
    "POSTGRES_PORT": "5432",
    "POSTGRES_DB": "unit_test_db",
}.items():
    os.environ.setdefault(_key, _value)

from datetime import datetime, timedelta, timezone
from typing import Optional
from uuid import UUID, uuid4

import pytest

from hive.database.database import DatabaseSessionManager
from hive.database.tables import (
    AuditLogs,
    Base,
    Messages,
    ModelInvocations,
    OrgMembers,
    Orgs,
    TenantSettings,
    Threads,
)
from hive.main.config import Settings, reset_settings, set_settings

NOW = datetime(2026, 6, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def now() -> datetime:
    """Fixed reference time for retention runs."""
    return NOW


@pytest.fixture
def days_ago():
    def _days_ago(days: float) -> datetime:
        return NOW - timedelta(days=days)

    return _days_ago


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """Settings that don't depend on .env or environment variables."""
    return Settings(
        # Minimal database settings (the tests use SQLite)
        postgres_user="unit_test_user",
        postgres_host="localhost",
        postgres_password="unit_test_password",
        postgres_port=5432,
        postgres_db="unit_test_db",
        redis_host="localhost",
        redis_port=6379,
        admin_api_key="test-admin-key",
        cron_token="test-cron-token",
        retention_run_all_url="http://backend:8123/api/admin/retention/run-all",
        retention_dry_run=False,
        retention_batch_size=5000,
        retention_select_chunk=1000,
        default_enabled_providers=["openai"],
        dev=True,
    )


@pytest.fixture(autouse=True)
def settings(test_settings):
    set_settings(test_settings)
    yield test_settings
    reset_settings()


@pytest.fixture
async def sessionmanager(tmp_path):
    """A file backed SQLite database, so that several sessions see the same data."""
    manager = DatabaseSessionManager()
    manager.init(f"sqlite+aiosqlite:///{tmp_path / 'hive.db'}")

    async with manager.connect() as connection:
        await connection.run_sync(Base.metadata.create_all)

    yield manager

    await manager.close()


@pytest.fixture
async def session(sessionmanager):
    async with sessionmanager.session() as session:
        yield session


class Seeder:
    """Inserts rows with explicit timestamps."""

    def __init__(self, session):
        self.session = session

    async def org(self, name: str = "Acme", created_at: Optional[datetime] = None) -> UUID:
        org = Orgs(id=uuid4(), name=name, created_at=created_at or NOW)
        self.session.add(org)
        await self.session.flush()
        return org.id

    async def member(self, org_id: UUID, role: str, user_id: Optional[UUID] = None) -> UUID:
        member = OrgMembers(org_id=org_id, user_id=user_id or uuid4(), role=role)
        self.session.add(member)
        await self.session.flush()
        return member.user_id

    async def setting(self, org_id: UUID, key: str, value) -> None:
        self.session.add(TenantSettings(org_id=org_id, key=key, value=value))
        await self.session.flush()

    async def thread(self, org_id: UUID, created_at: datetime) -> UUID:
        thread = Threads(id=uuid4(), org_id=org_id, created_at=created_at)
        self.session.add(thread)
        await self.session.flush()
        return thread.id

    async def messages(
        self, org_id: UUID, thread_id: UUID, created_at: datetime, count: int = 1
    ) -> list[UUID]:
        rows = [
            Messages(
                id=uuid4(),
                org_id=org_id,
                thread_id=thread_id,
                role="user",
                content_text="hello",
                created_at=created_at + timedelta(seconds=i),
            )
            for i in range(count)
        ]
        self.session.add_all(rows)
        await self.session.flush()
        return [row.id for row in rows]

    async def invocations(
        self, org_id: UUID, created_at: datetime, count: int = 1
    ) -> list[UUID]:
        rows = [
            ModelInvocations(
                id=uuid4(),
                org_id=org_id,
                provider="openai",
                model="gpt-4o",
                prompt_tokens=10,
                completion_tokens=20,
                created_at=created_at + timedelta(seconds=i),
            )
            for i in range(count)
        ]
        self.session.add_all(rows)
        await self.session.flush()
        return [row.id for row in rows]

    async def audit_logs(self, org_id: UUID, created_at: datetime, count: int = 1) -> list[UUID]:
        rows = [
            AuditLogs(
                id=uuid4(),
                org_id=org_id,
                action="chat.message_sent",
                target_type="message",
                meta={},
                created_at=created_at + timedelta(seconds=i),
            )
            for i in range(count)
        ]
        self.session.add_all(rows)
        await self.session.flush()
        return [row.id for row in rows]

    async def commit(self):
        await self.session.commit()


@pytest.fixture
def seed(session) -> Seeder:
    return Seeder(session)
