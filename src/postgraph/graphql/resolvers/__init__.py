"""Resolver functions for the GraphQL schema.

Query, mutation and subscription handlers live in the sibling modules and are
registered explicitly on the root types in ``queries``, ``mutations`` and
``subscriptions``.
"""
