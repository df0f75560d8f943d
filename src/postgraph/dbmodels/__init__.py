"""
Database models for postgraph (authoritative ORM definitions).

This module defines the SQLAlchemy Base with a naming convention for stable
constraint names, the ``posts`` and ``tags`` tables and the ``post_tags``
association between them, and exposes ``target_metadata``.
"""

from datetime import datetime

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKeyConstraint,
    Integer,
    MetaData,
    PrimaryKeyConstraint,
    String,
    Table,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

# Naming convention for deterministic constraint/index names
naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    """Base class for all database models with type checking support."""

    metadata = MetaData(naming_convention=naming_convention)


post_tags = Table(
    "post_tags",
    Base.metadata,
    Column("post_id", Integer, nullable=False),
    Column("tag_id", Integer, nullable=False),
    PrimaryKeyConstraint("post_id", "tag_id", name="post_tags_pkey"),
    ForeignKeyConstraint(
        ["post_id"], ["posts.id"], ondelete="CASCADE", name="post_tags_post_id_fkey"
    ),
    ForeignKeyConstraint(["tag_id"], ["tags.id"], ondelete="CASCADE", name="post_tags_tag_id_fkey"),
)


class Posts(Base):
    __tablename__ = "posts"
    __table_args__ = (
        PrimaryKeyConstraint("id", name="posts_pkey"),
        UniqueConstraint("title", name="posts_title_key"),
    )

    id: Mapped[int] = mapped_column(Integer, autoincrement=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    created: Mapped[datetime] = mapped_column(DateTime(True), nullable=False)
    modified: Mapped[datetime | None] = mapped_column(DateTime(True), nullable=True)

    tags: Mapped[list["Tags"]] = relationship(
        "Tags", secondary=post_tags, uselist=True, back_populates="posts"
    )


class Tags(Base):
    __tablename__ = "tags"
    __table_args__ = (PrimaryKeyConstraint("id", name="tags_pkey"),)

    id: Mapped[int] = mapped_column(Integer, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)

    posts: Mapped[list["Posts"]] = relationship(
        "Posts", secondary=post_tags, uselist=True, back_populates="tags"
    )


target_metadata = Base.metadata

__all__ = ["Base", "Posts", "Tags", "post_tags", "target_metadata"]
