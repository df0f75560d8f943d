"""
Root GraphQL query definitions
"""

import strawberry

from ..resolvers.node import resolve_node
from ..resolvers.post import resolve_post_by_id, resolve_post_by_title, resolve_posts
from ..resolvers.tag import resolve_tags
from ..types.connection import Connection
from ..types.node import Node
from ..types.post import Post
from ..types.tag import Tag


@strawberry.type
class Query:
    """Root GraphQL query type."""

    node: Node | None = strawberry.field(resolver=resolve_node)
    posts: Connection[Post] = strawberry.field(resolver=resolve_posts)
    post_by_id: Post | None = strawberry.field(resolver=resolve_post_by_id)
    post_by_title: Post | None = strawberry.field(resolver=resolve_post_by_title)
    tags: Connection[Tag] = strawberry.field(resolver=resolve_tags)
