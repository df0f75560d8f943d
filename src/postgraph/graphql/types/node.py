"""
Node interface for globally identifiable objects
"""

import strawberry


@strawberry.interface
class Node:
    """An object with an opaque, globally unique ID."""

    id: strawberry.ID
