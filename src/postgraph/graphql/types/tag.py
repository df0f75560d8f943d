"""
Tag GraphQL type definitions
"""

from typing import TYPE_CHECKING, Annotated

import strawberry

from ...database.records import TagRecord
from ..ids import TAG_TYPE, encode_global_id
from .node import Node

if TYPE_CHECKING:
    from .post import Post


@strawberry.type
class Tag(Node):
    """Tag type for GraphQL API."""

    name: str
    record: strawberry.Private[TagRecord]

    @strawberry.field
    async def posts(
        self, info: strawberry.Info
    ) -> list[Annotated["Post", strawberry.lazy(".post")]]:
        """Get the posts carrying this tag."""
        from ..resolvers.tag import resolve_tag_posts

        return await resolve_tag_posts(self, info)

    @classmethod
    def from_record(cls, record: TagRecord) -> "Tag":
        return cls(
            id=strawberry.ID(encode_global_id(TAG_TYPE, record.id)),
            name=record.name,
            record=record,
        )
