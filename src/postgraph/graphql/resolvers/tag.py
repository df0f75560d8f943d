"""Tag queries and mutations."""

import strawberry

from ...logging import get_logger
from ..context import get_loaders, new_unit_of_work
from ..ids import TAG_TYPE, decode_id_of_type
from ..pagination import after_key, build_connection, page_size
from ..types.connection import Connection
from ..types.inputs import AddTagInput
from ..types.payloads import (
    AddTagPayload,
    AddTagSuccess,
    ApiError,
    DeleteTagPayload,
    DeleteTagSuccess,
    ErrorCode,
)
from ..types.post import Post
from ..types.tag import Tag

logger = get_logger(__name__)


async def resolve_tags(
    info: strawberry.Info, first: int | None = None, after: str | None = None
) -> Connection[Tag]:
    """Get all tags with their posts, ordered by ID, one page at a time."""
    limit = page_size(first)
    key = after_key(after)

    async with new_unit_of_work(info) as uow:
        records = await uow.tags.page(key, limit + 1)
        total_count = await uow.tags.count()

    get_loaders(info).prime_tags(records[:limit])
    return build_connection(records, limit, key, total_count, Tag.from_record)


async def resolve_tag_posts(tag: Tag, info: strawberry.Info) -> list[Post]:
    """Resolve the posts of a tag, batched across all tags in the response."""
    if tag.record.posts is not None:
        posts = tag.record.posts
    else:
        posts = await get_loaders(info).posts_by_tag_id.load(tag.record.id)
    return [Post.from_record(post) for post in posts]


async def add_tag(info: strawberry.Info, input: AddTagInput) -> AddTagPayload:
    """Create a tag. Names need not be unique."""
    async with new_unit_of_work(info) as uow:
        tag = await uow.tags.add(input.name)
        await uow.commit()

    logger.info("Tag created", tag_id=tag.id)
    return AddTagSuccess(tag=Tag.from_record(tag))


async def delete_tag(info: strawberry.Info, id: strawberry.ID) -> DeleteTagPayload:
    """
    Delete a tag by its global ID.

    The tag is removed from every post carrying it. The payload holds the
    tag as it was just before deletion.
    """
    tag_id = decode_id_of_type(id, TAG_TYPE)

    async with new_unit_of_work(info) as uow:
        tag = await uow.tags.delete(tag_id) if tag_id is not None else None
        if tag is None:
            logger.info("Tag not found", tag_id=tag_id)
            return ApiError.from_code(ErrorCode.TAG_NOT_FOUND)
        await uow.commit()

    logger.info("Tag deleted", tag_id=tag.id, post_ids=[post.id for post in tag.posts or ()])
    return DeleteTagSuccess(tag=Tag.from_record(tag))
