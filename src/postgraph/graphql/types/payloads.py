"""
Mutation payloads: a success type or an ApiError for every mutation
"""

from enum import Enum
from typing import Annotated

import strawberry

from .post import Post
from .tag import Tag


class ErrorCode(str, Enum):
    POST_NOT_FOUND = "POST_NOT_FOUND"
    POST_WITH_TITLE_EXISTS = "POST_WITH_TITLE_EXISTS"
    TAG_NOT_FOUND = "TAG_NOT_FOUND"


ERROR_MESSAGES = {
    ErrorCode.POST_NOT_FOUND: "Post not found.",
    ErrorCode.POST_WITH_TITLE_EXISTS: "A post with that title already exists.",
    ErrorCode.TAG_NOT_FOUND: "Tag not found.",
}


@strawberry.type
class ApiError:
    """Expected business-rule failure of a mutation."""

    code: str
    message: str

    @classmethod
    def from_code(cls, code: ErrorCode) -> "ApiError":
        return cls(code=code.value, message=ERROR_MESSAGES[code])


@strawberry.type
class AddPostSuccess:
    post: Post


@strawberry.type
class UpdatePostSuccess:
    post: Post


@strawberry.type
class AddTagSuccess:
    tag: Tag


@strawberry.type
class DeleteTagSuccess:
    tag: Tag


AddPostPayload = Annotated[AddPostSuccess | ApiError, strawberry.union("AddPostPayload")]
UpdatePostPayload = Annotated[UpdatePostSuccess | ApiError, strawberry.union("UpdatePostPayload")]
AddTagPayload = Annotated[AddTagSuccess | ApiError, strawberry.union("AddTagPayload")]
DeleteTagPayload = Annotated[DeleteTagSuccess | ApiError, strawberry.union("DeleteTagPayload")]
