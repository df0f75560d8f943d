"""
Root GraphQL subscription definitions
"""

import strawberry

from ..resolvers.subscription import on_post_updated


@strawberry.type
class Subscription:
    """Root GraphQL subscription type."""

    on_post_updated: strawberry.ID = strawberry.subscription(resolver=on_post_updated)
