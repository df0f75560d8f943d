"""
Per-request batch loaders.

Every key requested through a loader during one tick of the event loop is
collected into a single batch and fetched with one store round trip. Results
are cached for the rest of the request. A ``Loaders`` instance belongs to one
request: once ``close()`` has run, any further load raises
``StaleLoaderError``.
"""

from collections.abc import Callable, Iterable, Sequence

from strawberry.dataloader import DataLoader

from ..database.records import PostRecord, TagRecord
from ..database.unit_of_work import UnitOfWork
from ..logging import get_logger

logger = get_logger(__name__)

UnitOfWorkFactory = Callable[[], UnitOfWork]


class StaleLoaderError(RuntimeError):
    """Raised when a loader is used after its request has finished."""


class Loaders:
    def __init__(self, unit_of_work_factory: UnitOfWorkFactory) -> None:
        self._unit_of_work_factory = unit_of_work_factory
        self._closed = False
        self.post_by_id: DataLoader[int, PostRecord | None] = DataLoader(load_fn=self._load_posts)
        self.tag_by_id: DataLoader[int, TagRecord | None] = DataLoader(load_fn=self._load_tags)
        self.posts_by_tag_id: DataLoader[int, list[PostRecord]] = DataLoader(
            load_fn=self._load_posts_by_tag
        )

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """End the request scope and drop every cached value."""
        self._closed = True
        for loader in (self.post_by_id, self.tag_by_id, self.posts_by_tag_id):
            loader.clear_all()

    def _ensure_open(self) -> None:
        if self._closed:
            raise StaleLoaderError("Loaders were used after their request finished")

    def prime_posts(self, posts: Iterable[PostRecord]) -> None:
        self._ensure_open()
        for post in posts:
            self.post_by_id.prime(post.id, post)

    def prime_tags(self, tags: Iterable[TagRecord]) -> None:
        """Cache tags and, where loaded, their posts."""
        self._ensure_open()
        for tag in tags:
            self.tag_by_id.prime(tag.id, tag)
            if tag.posts is not None:
                self.posts_by_tag_id.prime(tag.id, list(tag.posts))
                self.prime_posts(tag.posts)

    async def _load_posts(self, keys: Sequence[int]) -> list[PostRecord | None]:
        """Batch load posts by ID."""
        self._ensure_open()
        async with self._unit_of_work_factory() as uow:
            posts = await uow.posts.get_many(keys)
        logger.debug("Batch loaded posts", requested=len(keys), found=len(posts))
        return [posts.get(key) for key in keys]

    async def _load_tags(self, keys: Sequence[int]) -> list[TagRecord | None]:
        """Batch load tags by ID."""
        self._ensure_open()
        async with self._unit_of_work_factory() as uow:
            tags = await uow.tags.get_many(keys)
        logger.debug("Batch loaded tags", requested=len(keys), found=len(tags))
        return [tags.get(key) for key in keys]

    async def _load_posts_by_tag(self, keys: Sequence[int]) -> list[list[PostRecord]]:
        """Batch load the posts of several tags."""
        self._ensure_open()
        async with self._unit_of_work_factory() as uow:
            tags = await uow.tags.get_many(keys, with_posts=True)
        return [list(tags[key].posts or ()) if key in tags else [] for key in keys]
