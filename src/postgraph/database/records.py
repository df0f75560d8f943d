"""Immutable snapshots of stored posts and tags."""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict

from ..dbmodels import Posts, Tags


def _as_utc(value: datetime | None) -> datetime | None:
    # SQLite drops tzinfo on the way back out
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


class TagRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    # None means the association was not loaded with this snapshot
    posts: tuple[PostRecord, ...] | None = None

    @classmethod
    def from_model(cls, tag: Tags, with_posts: bool = False) -> TagRecord:
        posts = None
        if with_posts:
            posts = tuple(
                PostRecord.from_model(post) for post in sorted(tag.posts, key=lambda p: p.id)
            )
        return cls(id=tag.id, name=tag.name, posts=posts)


class PostRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    title: str
    content: str
    created: datetime
    modified: datetime | None = None
    tags: tuple[TagRecord, ...] = ()

    @property
    def tag_ids(self) -> frozenset[int]:
        return frozenset(tag.id for tag in self.tags)

    @classmethod
    def from_model(cls, post: Posts) -> PostRecord:
        """Snapshot a post; its ``tags`` collection must already be loaded."""
        return cls(
            id=post.id,
            title=post.title,
            content=post.content,
            created=_as_utc(post.created),
            modified=_as_utc(post.modified),
            tags=tuple(
                TagRecord(id=tag.id, name=tag.name) for tag in sorted(post.tags, key=lambda t: t.id)
            ),
        )


TagRecord.model_rebuild()
