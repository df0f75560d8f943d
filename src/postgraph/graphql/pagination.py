"""
Keyset pagination helpers for connection fields
"""

from collections.abc import Callable, Sequence
from typing import Protocol, TypeVar

from ..config import settings
from .ids import decode_cursor, encode_cursor
from .types.connection import Connection, Edge, PageInfo

NodeType = TypeVar("NodeType")


class Keyed(Protocol):
    id: int


RecordType = TypeVar("RecordType", bound=Keyed)


def page_size(first: int | None) -> int:
    """Validate ``first`` and clamp it to the configured maximum."""
    if first is None:
        return settings.default_page_size
    if first < 1:
        raise ValueError("Argument 'first' must be a positive integer")
    return min(first, settings.max_page_size)


def after_key(after: str | None) -> int | None:
    return decode_cursor(after) if after else None


def build_connection(
    records: Sequence[RecordType],
    limit: int,
    after: int | None,
    total_count: int,
    to_node: Callable[[RecordType], NodeType],
) -> Connection[NodeType]:
    """Build a connection from up to ``limit + 1`` records fetched after ``after``.

    The extra record, when present, only signals that another page exists.
    """
    has_next_page = len(records) > limit
    page = records[:limit]
    edges = [Edge(cursor=encode_cursor(record.id), node=to_node(record)) for record in page]
    return Connection(
        edges=edges,
        nodes=[edge.node for edge in edges],
        page_info=PageInfo(
            has_next_page=has_next_page,
            has_previous_page=after is not None,
            start_cursor=edges[0].cursor if edges else None,
            end_cursor=edges[-1].cursor if edges else None,
        ),
        total_count=total_count,
    )
