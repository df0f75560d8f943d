"""Pydantic models for change notifications."""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, Field

POST_UPDATED_TOPIC = "PostUpdated"


class ChangeEvent(BaseModel):
    topic: str
    entity_id: int
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
