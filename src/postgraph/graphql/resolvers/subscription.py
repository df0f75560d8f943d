"""Subscription resolvers."""

from collections.abc import AsyncGenerator

import strawberry

from ...events import POST_UPDATED_TOPIC
from ...logging import get_logger
from ..context import get_publisher_from_info
from ..ids import POST_TYPE, InvalidGlobalIdError, decode_id_of_type, encode_global_id

logger = get_logger(__name__)


async def on_post_updated(
    info: strawberry.Info, post_id: strawberry.ID | None = None
) -> AsyncGenerator[strawberry.ID, None]:
    """Stream the global ID of each post as it is updated.

    When ``post_id`` is given only updates of that post are delivered.
    """
    only_id = None
    if post_id is not None:
        only_id = decode_id_of_type(post_id, POST_TYPE)
        if only_id is None:
            raise InvalidGlobalIdError(f"Not a post id: {post_id!r}")

    subscription = get_publisher_from_info(info).subscribe(POST_UPDATED_TOPIC)
    logger.debug("Post update stream opened", post_id=only_id)
    try:
        async for event in subscription:
            if only_id is not None and event.entity_id != only_id:
                continue
            yield strawberry.ID(encode_global_id(POST_TYPE, event.entity_id))
    finally:
        subscription.close()
        logger.debug("Post update stream closed", post_id=only_id)
