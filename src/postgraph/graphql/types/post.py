"""
Post GraphQL type definitions
"""

from datetime import datetime
from typing import TYPE_CHECKING, Annotated

import strawberry

from ...database.records import PostRecord
from ..ids import POST_TYPE, encode_global_id
from .node import Node

if TYPE_CHECKING:
    from .tag import Tag


@strawberry.type
class Post(Node):
    """Post type for GraphQL API."""

    title: str
    content: str
    created: datetime
    modified: datetime | None
    record: strawberry.Private[PostRecord]

    @strawberry.field
    def tags(self) -> list[Annotated["Tag", strawberry.lazy(".tag")]]:
        """Get the tags attached to this post."""
        from .tag import Tag

        return [Tag.from_record(tag) for tag in self.record.tags]

    @classmethod
    def from_record(cls, record: PostRecord) -> "Post":
        return cls(
            id=strawberry.ID(encode_global_id(POST_TYPE, record.id)),
            title=record.title,
            content=record.content,
            created=record.created,
            modified=record.modified,
            record=record,
        )
