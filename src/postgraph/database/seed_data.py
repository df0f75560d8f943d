"""
Seed data for local development.

Creates a handful of tags and posts through the unit of work so the seeded
rows follow the same rules as data written through the API.
"""

from __future__ import annotations

from datetime import UTC, datetime

from ..dbmodels import Tags
from ..logging import get_logger
from .records import TagRecord
from .unit_of_work import UnitOfWork

logger = get_logger(__name__)

SAMPLE_TAGS = ["python", "graphql", "databases"]

SAMPLE_POSTS = [
    ("Hello, world", "The first post.", ["python"]),
    ("Paging with cursors", "Keyset pagination keeps pages stable.", ["graphql", "databases"]),
    ("Batching lookups", "One round trip instead of many.", ["graphql"]),
]


async def seed_initial_data(uow: UnitOfWork) -> dict[str, int]:
    """Insert sample tags and posts, skipping rows that already exist.

    Returns:
        Counts of created tags and posts.
    """
    tags: dict[str, TagRecord] = {}
    created_tags = 0
    for name in SAMPLE_TAGS:
        tag = await uow.tags.first(Tags.name == name)
        if tag is None:
            tag = await uow.tags.add(name)
            created_tags += 1
        tags[name] = tag

    created_posts = 0
    for title, content, tag_names in SAMPLE_POSTS:
        if await uow.posts.get_by_title(title) is not None:
            logger.debug("Seed post already present", title=title)
            continue
        post = await uow.posts.add(title, content, datetime.now(UTC))
        await uow.posts.save(
            post.model_copy(update={"tags": tuple(tags[name] for name in tag_names)})
        )
        created_posts += 1

    await uow.commit()
    logger.info("Seed data inserted", tags=created_tags, posts=created_posts)
    return {"tags": created_tags, "posts": created_posts}
