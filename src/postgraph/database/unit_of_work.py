"""
Request-scoped unit of work over the posts and tags tables.

Repositories hand out immutable ``PostRecord`` / ``TagRecord`` snapshots.
Nothing is written back implicitly: callers build a modified copy of a
record and pass it to ``save``, then ``commit`` the unit of work. Leaving
the ``async with`` block without committing (including on cancellation)
rolls everything back.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable
from datetime import datetime
from types import TracebackType
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import selectinload

from ..dbmodels import Posts, Tags
from ..logging import get_logger
from .records import PostRecord, TagRecord

logger = get_logger(__name__)


class PostRepository:
    """Typed access to posts, always loaded together with their tags."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    @staticmethod
    def _select():
        return select(Posts).options(selectinload(Posts.tags))

    async def get(self, post_id: int) -> PostRecord | None:
        return await self.first(Posts.id == post_id)

    async def get_many(self, post_ids: Iterable[int]) -> dict[int, PostRecord]:
        """Fetch several posts in one round trip, keyed by id."""
        ids = set(post_ids)
        if not ids:
            return {}
        result = await self._session.execute(self._select().where(Posts.id.in_(ids)))
        return {post.id: PostRecord.from_model(post) for post in result.scalars().all()}

    async def first(self, *criteria: Any) -> PostRecord | None:
        """Return the lowest-id post matching all criteria, if any."""
        stmt = self._select().where(*criteria).order_by(Posts.id).limit(1)
        result = await self._session.execute(stmt)
        post = result.scalar_one_or_none()
        return PostRecord.from_model(post) if post else None

    async def get_by_title(self, title: str) -> PostRecord | None:
        return await self.first(Posts.title == title)

    async def page(self, after: int | None, limit: int) -> list[PostRecord]:
        """Posts ordered by id, starting strictly after ``after``."""
        stmt = self._select().order_by(Posts.id).limit(limit)
        if after is not None:
            stmt = stmt.where(Posts.id > after)
        result = await self._session.execute(stmt)
        return [PostRecord.from_model(post) for post in result.scalars().all()]

    async def count(self) -> int:
        result = await self._session.execute(select(func.count()).select_from(Posts))
        return result.scalar_one()

    async def add(self, title: str, content: str, created: datetime) -> PostRecord:
        """Insert a post without tags and flush so the store assigns its id."""
        post = Posts(title=title, content=content, created=created, modified=None, tags=[])
        self._session.add(post)
        await self._session.flush()
        logger.debug("Post inserted", post_id=post.id)
        return PostRecord.from_model(post)

    async def save(self, record: PostRecord) -> PostRecord:
        """Write title, content, modified and the tag set of ``record``.

        ``created`` is never written back. Tag ids that no longer exist in the
        store are left out of the saved tag set.
        """
        result = await self._session.execute(self._select().where(Posts.id == record.id))
        post = result.scalar_one()

        post.title = record.title
        post.content = record.content
        post.modified = record.modified

        wanted = record.tag_ids
        current = {tag.id for tag in post.tags}
        if wanted != current:
            post.tags = [tag for tag in post.tags if tag.id in wanted]
            missing = wanted - current
            if missing:
                tags = await self._session.execute(select(Tags).where(Tags.id.in_(missing)))
                post.tags.extend(sorted(tags.scalars().all(), key=lambda t: t.id))

        await self._session.flush()
        return PostRecord.from_model(post)


class TagRepository:
    """Typed access to tags."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    @staticmethod
    def _select(with_posts: bool):
        stmt = select(Tags)
        if with_posts:
            stmt = stmt.options(selectinload(Tags.posts).selectinload(Posts.tags))
        return stmt

    async def get(self, tag_id: int, with_posts: bool = False) -> TagRecord | None:
        return await self.first(Tags.id == tag_id, with_posts=with_posts)

    async def get_many(
        self, tag_ids: Iterable[int], with_posts: bool = False
    ) -> dict[int, TagRecord]:
        """Fetch several tags in one round trip, keyed by id."""
        ids = set(tag_ids)
        if not ids:
            return {}
        result = await self._session.execute(self._select(with_posts).where(Tags.id.in_(ids)))
        return {
            tag.id: TagRecord.from_model(tag, with_posts=with_posts)
            for tag in result.scalars().all()
        }

    async def first(self, *criteria: Any, with_posts: bool = False) -> TagRecord | None:
        stmt = self._select(with_posts).where(*criteria).order_by(Tags.id).limit(1)
        result = await self._session.execute(stmt)
        tag = result.scalar_one_or_none()
        return TagRecord.from_model(tag, with_posts=with_posts) if tag else None

    async def page(self, after: int | None, limit: int) -> list[TagRecord]:
        """Tags ordered by id with their posts eagerly loaded."""
        stmt = self._select(with_posts=True).order_by(Tags.id).limit(limit)
        if after is not None:
            stmt = stmt.where(Tags.id > after)
        result = await self._session.execute(stmt)
        return [TagRecord.from_model(tag, with_posts=True) for tag in result.scalars().all()]

    async def count(self) -> int:
        result = await self._session.execute(select(func.count()).select_from(Tags))
        return result.scalar_one()

    async def add(self, name: str) -> TagRecord:
        tag = Tags(name=name, posts=[])
        self._session.add(tag)
        await self._session.flush()
        logger.debug("Tag inserted", tag_id=tag.id)
        return TagRecord.from_model(tag, with_posts=True)

    async def delete(self, tag_id: int) -> TagRecord | None:
        """Delete a tag and its post associations.

        Returns the tag as it was just before deletion, or None if it did not
        exist.
        """
        result = await self._session.execute(self._select(with_posts=True).where(Tags.id == tag_id))
        tag = result.scalar_one_or_none()
        if tag is None:
            return None
        snapshot = TagRecord.from_model(tag, with_posts=True)
        await self._session.delete(tag)
        await self._session.flush()
        logger.debug("Tag deleted", tag_id=tag_id, post_count=len(snapshot.posts or ()))
        return snapshot


class UnitOfWork(ABC):
    """One logical operation against the store.

    Use as an async context manager; changes become visible to other units of
    work only after ``commit``.
    """

    posts: PostRepository
    tags: TagRepository

    async def __aenter__(self) -> UnitOfWork:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.rollback()

    @abstractmethod
    async def commit(self) -> None: ...

    @abstractmethod
    async def rollback(self) -> None: ...


class SqlAlchemyUnitOfWork(UnitOfWork):
    """Unit of work backed by a single ``AsyncSession``."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession] | None = None) -> None:
        if session_factory is None:
            from .connection import get_session_factory

            session_factory = get_session_factory()
        self._session_factory = session_factory
        self._session: AsyncSession | None = None

    async def __aenter__(self) -> SqlAlchemyUnitOfWork:
        self._session = self._session_factory()
        self.posts = PostRepository(self._session)
        self.tags = TagRepository(self._session)
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        session = self._session
        if session is None:
            return
        try:
            # Anything not committed by now is discarded
            await session.rollback()
        finally:
            await session.close()
            self._session = None

    @property
    def session(self) -> AsyncSession:
        if self._session is None:
            raise RuntimeError("Unit of work is not active")
        return self._session

    async def commit(self) -> None:
        await self.session.commit()

    async def rollback(self) -> None:
        await self.session.rollback()
