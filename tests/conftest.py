"""
Shared pytest fixtures and configuration for all tests.
"""

import sys
from collections.abc import AsyncGenerator, Callable, Generator
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

import pytest
import pytest_asyncio
import strawberry
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

# Add src directory to path so imports work without an install
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from postgraph.database.connection import (  # noqa: E402
    create_engine_for_url,
    create_session_factory,
    create_tables,
)
from postgraph.database.records import PostRecord, TagRecord  # noqa: E402
from postgraph.database.unit_of_work import SqlAlchemyUnitOfWork, UnitOfWork  # noqa: E402
from postgraph.events import ChangePublisher  # noqa: E402
from postgraph.graphql.context import build_context  # noqa: E402


class CountingUnitOfWorkFactory:
    """Unit of work factory that counts how many units of work were opened."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory
        self.calls = 0

    def __call__(self) -> UnitOfWork:
        self.calls += 1
        return SqlAlchemyUnitOfWork(self._session_factory)


@pytest_asyncio.fixture
async def engine(tmp_path: Path) -> AsyncGenerator[AsyncEngine, None]:
    """A fresh SQLite database with all tables created."""
    engine = create_engine_for_url(f"sqlite:///{tmp_path / 'test.db'}", echo=False)
    await create_tables(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return create_session_factory(engine)


@pytest.fixture
def unit_of_work_factory(
    session_factory: async_sessionmaker[AsyncSession],
) -> CountingUnitOfWorkFactory:
    return CountingUnitOfWorkFactory(session_factory)


@pytest.fixture
def publisher() -> ChangePublisher:
    return ChangePublisher(queue_size=10)


@pytest.fixture
def graphql_context(
    unit_of_work_factory: CountingUnitOfWorkFactory, publisher: ChangePublisher
) -> Generator[dict[str, Any], None, None]:
    """A real per-request context backed by the test database."""
    context = build_context(None, unit_of_work_factory, publisher)
    yield context
    context["loaders"].close()


@pytest.fixture
def mock_info(graphql_context: dict[str, Any]) -> MagicMock:
    """Create a mock GraphQL info object carrying the request context."""
    info = MagicMock(spec=strawberry.Info)
    info.context = graphql_context
    return info


@pytest.fixture
def make_tag(
    unit_of_work_factory: CountingUnitOfWorkFactory,
) -> Callable[[str], Any]:
    """Insert a tag directly through the gateway."""

    async def _make_tag(name: str) -> TagRecord:
        async with unit_of_work_factory() as uow:
            tag = await uow.tags.add(name)
            await uow.commit()
        return tag

    return _make_tag


@pytest.fixture
def make_post(
    unit_of_work_factory: CountingUnitOfWorkFactory,
) -> Callable[..., Any]:
    """Insert a post with tags directly through the gateway."""
    from datetime import UTC, datetime

    async def _make_post(
        title: str, content: str = "content", tags: tuple[TagRecord, ...] = ()
    ) -> PostRecord:
        async with unit_of_work_factory() as uow:
            post = await uow.posts.add(title, content, datetime.now(UTC))
            post = await uow.posts.save(post.model_copy(update={"tags": tags}))
            await uow.commit()
        return post

    return _make_post


# Test markers
def pytest_configure(config: Any) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "slow: mark test as slow running")
    config.addinivalue_line("markers", "integration: mark test as integration test")
    config.addinivalue_line("markers", "unit: mark test as unit test")
