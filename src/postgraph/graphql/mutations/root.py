"""
Root GraphQL mutation definitions
"""

import strawberry

from ..resolvers.post import add_post, update_post
from ..resolvers.tag import add_tag, delete_tag
from ..types.payloads import AddPostPayload, AddTagPayload, DeleteTagPayload, UpdatePostPayload


@strawberry.type
class Mutation:
    """Root GraphQL mutation type."""

    add_post: AddPostPayload = strawberry.mutation(resolver=add_post)
    update_post: UpdatePostPayload = strawberry.mutation(resolver=update_post)
    add_tag: AddTagPayload = strawberry.mutation(resolver=add_tag)
    delete_tag: DeleteTagPayload = strawberry.mutation(resolver=delete_tag)
