"""Post queries and mutations."""

import strawberry
from sqlalchemy.exc import IntegrityError

from ...dbmodels import Posts
from ...events import POST_UPDATED_TOPIC
from ...logging import get_logger
from ..context import get_loaders, get_publisher_from_info, new_unit_of_work
from ..ids import POST_TYPE, decode_id_of_type
from ..pagination import after_key, build_connection, page_size
from ..types.connection import Connection
from ..types.inputs import AddPostInput, UpdatePostInput
from ..types.payloads import (
    AddPostPayload,
    AddPostSuccess,
    ApiError,
    ErrorCode,
    UpdatePostPayload,
    UpdatePostSuccess,
)
from ..types.post import Post
from .common import decode_tag_ids, is_blank, is_title_conflict, utcnow

logger = get_logger(__name__)


# Query resolvers
async def resolve_posts(
    info: strawberry.Info, first: int | None = None, after: str | None = None
) -> Connection[Post]:
    """Get all posts, ordered by ID, one page at a time."""
    limit = page_size(first)
    key = after_key(after)

    async with new_unit_of_work(info) as uow:
        records = await uow.posts.page(key, limit + 1)
        total_count = await uow.posts.count()

    get_loaders(info).prime_posts(records[:limit])
    return build_connection(records, limit, key, total_count, Post.from_record)


async def resolve_post_by_id(info: strawberry.Info, id: strawberry.ID) -> Post | None:
    """Get a post by its global ID."""
    post_id = decode_id_of_type(id, POST_TYPE)
    if post_id is None:
        return None

    record = await get_loaders(info).post_by_id.load(post_id)
    return Post.from_record(record) if record else None


async def resolve_post_by_title(info: strawberry.Info, title: str) -> Post | None:
    """Get a post by its exact title."""
    async with new_unit_of_work(info) as uow:
        record = await uow.posts.get_by_title(title)

    return Post.from_record(record) if record else None


# Mutation resolvers
async def add_post(info: strawberry.Info, input: AddPostInput) -> AddPostPayload:
    """
    Create a post and attach the given tags.

    Tag IDs that do not resolve to an existing tag are ignored. The post and
    its tags are written in one transaction, so the post never becomes
    visible without its tags.
    """
    tag_ids = decode_tag_ids(input.tags)

    async with new_unit_of_work(info) as uow:
        if await uow.posts.get_by_title(input.title) is not None:
            logger.info("Post title already exists", title=input.title)
            return ApiError.from_code(ErrorCode.POST_WITH_TITLE_EXISTS)

        try:
            # The post needs its ID before tags can be linked to it
            post = await uow.posts.add(input.title, input.content, utcnow())
            tags = await uow.tags.get_many(tag_ids)
            post = await uow.posts.save(
                post.model_copy(update={"tags": tuple(tags[tag_id] for tag_id in sorted(tags))})
            )
            await uow.commit()
        except IntegrityError as e:
            if not is_title_conflict(e):
                raise
            logger.info("Post title taken concurrently", title=input.title)
            return ApiError.from_code(ErrorCode.POST_WITH_TITLE_EXISTS)

    logger.info("Post created", post_id=post.id, tag_ids=sorted(post.tag_ids))
    return AddPostSuccess(post=Post.from_record(post))


async def update_post(info: strawberry.Info, input: UpdatePostInput) -> UpdatePostPayload:
    """
    Update a post's title, content and tags.

    Blank title or content keeps the stored value. When ``tags`` is given the
    post ends up with exactly those of the listed tags that exist. On success
    the post ID is published on the PostUpdated topic.
    """
    post_id = decode_id_of_type(input.id, POST_TYPE)
    tag_ids = decode_tag_ids(input.tags) if input.tags is not None else None

    async with new_unit_of_work(info) as uow:
        post = await uow.posts.get(post_id) if post_id is not None else None
        if post is None:
            logger.info("Post not found", post_id=post_id)
            return ApiError.from_code(ErrorCode.POST_NOT_FOUND)

        if not is_blank(input.title):
            other = await uow.posts.first(Posts.title == input.title, Posts.id != post.id)
            if other is not None:
                logger.info("Post title already exists", post_id=post.id, title=input.title)
                return ApiError.from_code(ErrorCode.POST_WITH_TITLE_EXISTS)

        changes = {"modified": utcnow()}
        if not is_blank(input.title):
            changes["title"] = input.title
        if not is_blank(input.content):
            changes["content"] = input.content

        if tag_ids is not None:
            wanted = set(tag_ids)
            kept = [tag for tag in post.tags if tag.id in wanted]
            added = await uow.tags.get_many(wanted - post.tag_ids)
            changes["tags"] = tuple(sorted([*kept, *added.values()], key=lambda tag: tag.id))

        try:
            post = await uow.posts.save(post.model_copy(update=changes))
            await uow.commit()
        except IntegrityError as e:
            if not is_title_conflict(e):
                raise
            logger.info("Post title taken concurrently", post_id=post.id, title=input.title)
            return ApiError.from_code(ErrorCode.POST_WITH_TITLE_EXISTS)

    await get_publisher_from_info(info).publish(POST_UPDATED_TOPIC, post.id)

    logger.info("Post updated", post_id=post.id, tag_ids=sorted(post.tag_ids))
    return UpdatePostSuccess(post=Post.from_record(post))
