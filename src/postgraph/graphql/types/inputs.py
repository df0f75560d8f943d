"""
Input types for mutations
"""

import strawberry


@strawberry.input
class AddPostInput:
    """Input for creating a new post."""

    title: str
    content: str
    tags: list[strawberry.ID] = strawberry.field(default_factory=list)


@strawberry.input
class UpdatePostInput:
    """Input for updating a post.

    Blank title or content leaves the field unchanged. Omitting ``tags`` keeps
    the current tags; an empty list removes them all.
    """

    id: strawberry.ID
    title: str | None = None
    content: str | None = None
    tags: list[strawberry.ID] | None = None


@strawberry.input
class AddTagInput:
    """Input for creating a new tag."""

    name: str
