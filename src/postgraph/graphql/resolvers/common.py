"""Helpers shared by the post and tag resolvers."""

from collections.abc import Iterable
from datetime import UTC, datetime

import strawberry
from sqlalchemy.exc import IntegrityError

from ..ids import TAG_TYPE, decode_id_of_type


def utcnow() -> datetime:
    return datetime.now(UTC)


def is_blank(value: str | None) -> bool:
    return value is None or value == ""


def decode_tag_ids(values: Iterable[strawberry.ID]) -> list[int]:
    """Decode tag global ids, dropping ids that name another type."""
    tag_ids = []
    for value in values:
        tag_id = decode_id_of_type(value, TAG_TYPE)
        if tag_id is not None and tag_id not in tag_ids:
            tag_ids.append(tag_id)
    return tag_ids


def is_title_conflict(error: IntegrityError) -> bool:
    """Whether an integrity error is the unique constraint on post titles."""
    message = str(error.orig) if error.orig is not None else str(error)
    return "posts_title_key" in message or "posts.title" in message
