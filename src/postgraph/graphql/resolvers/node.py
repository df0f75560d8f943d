"""Global object lookup."""

import strawberry

from ..context import get_loaders
from ..ids import POST_TYPE, TAG_TYPE, decode_global_id
from ..types.node import Node
from ..types.post import Post
from ..types.tag import Tag


async def resolve_node(info: strawberry.Info, id: strawberry.ID) -> Node | None:
    """Fetch any post or tag by its global ID."""
    type_name, entity_id = decode_global_id(id)
    loaders = get_loaders(info)

    if type_name == POST_TYPE:
        post = await loaders.post_by_id.load(entity_id)
        return Post.from_record(post) if post else None
    if type_name == TAG_TYPE:
        tag = await loaders.tag_by_id.load(entity_id)
        return Tag.from_record(tag) if tag else None
    return None
