"""
Shared fixtures: an in-memory database per test, fake providers that count
calls, and an HTTP client with the generation client swapped in.
"""
import asyncio
from typing import List

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from leadlens.database import Base, get_db
from leadlens import models  # noqa: F401
from leadlens.engine.conversation import ConversationActivity
from leadlens.engine.tools import WorkspaceRegistry
from leadlens.events import EventPublisher
from leadlens.generation import GenerationClient
from leadlens.llm.base import LLMProvider, LLMError
from leadlens.models import Project, ContextItem, ContentKind, Persona


class FakeProvider(LLMProvider):
    """Provider double: fails the first `fail_times` calls, then returns `reply`."""

    def __init__(
        self,
        tier: str = "primary",
        reply: str = "generated text",
        fail_times: int = 0,
        delay: float = 0.0,
    ):
        self.tier = tier
        self.reply = reply
        self.fail_times = fail_times
        self.delay = delay
        self.prompts: List[str] = []

    @property
    def calls(self) -> int:
        return len(self.prompts)

    async def generate_text(
        self,
        prompt: str,
        model: str,
        max_tokens: int = 4096,
        temperature: float = 0.7,
    ) -> str:
        self.prompts.append(prompt)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.calls <= self.fail_times:
            raise LLMError(f"{self.tier} failure #{self.calls}")
        return self.reply


ALWAYS = 10**6


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine.sync_engine, "connect")
    def _fk_on(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def primary():
    return FakeProvider("primary", reply="primary reply")


@pytest.fixture
def secondary():
    return FakeProvider("secondary", reply="secondary reply")


@pytest.fixture
def generator(primary, secondary):
    return GenerationClient(primary, secondary, default_model="test-model", attempt_timeout=1.0)


@pytest.fixture
def activity():
    return ConversationActivity()


@pytest.fixture
def publisher():
    return EventPublisher()


@pytest.fixture
def registry():
    return WorkspaceRegistry()


@pytest.fixture
async def project(db):
    project = Project(
        user_id="user-1",
        name="Acme Robotics",
        description="Warehouse automation lead",
        lead_source="Referral",
    )
    db.add(project)
    await db.commit()
    return project


@pytest.fixture
async def context_items(db, project):
    items = [
        ContextItem(
            project_id=project.id,
            content_type=ContentKind.TEXT,
            content="Acme wants to cut picking errors by 30 percent.",
        ),
        ContextItem(
            project_id=project.id,
            content_type=ContentKind.URL,
            content="https://acme.example.com",
            item_metadata={
                "scraped_data": {
                    "title": "Acme Robotics",
                    "summary": "Autonomous picking robots for mid-size warehouses.",
                    "keyPoints": ["Series B", "300 employees"],
                }
            },
        ),
    ]
    for item in items:
        db.add(item)
        await db.commit()
    return items


@pytest.fixture
async def persona(db):
    persona = Persona(
        user_id="user-1",
        persona_name="Dana",
        role_title="Account Executive",
        company_or_business="Pickwise",
        industry="Logistics software",
    )
    db.add(persona)
    await db.commit()
    return persona


@pytest.fixture
async def client(session_factory, generator, registry, activity):
    from leadlens.main import app
    from leadlens.api.deps import get_generator, get_registry, get_activity

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_generator] = lambda: generator
    app.dependency_overrides[get_registry] = lambda: registry
    app.dependency_overrides[get_activity] = lambda: activity

    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport,
        base_url="http://test",
        headers={"X-User-Id": "user-1"},
    ) as ac:
        yield ac

    app.dependency_overrides.clear()
