"""
Tagboard Backend - Message and Tag Schemas
===========================================

What:  Pydantic request/response models for the messages and tags routes.
How:   FastAPI validates request bodies against the *Create/*Update models
       (422 on failure) and serializes service results through the
       *Response models.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


def _clean_tag_name(value: str) -> str:
    name = value.strip()
    if not name:
        raise ValueError("Tag name must not be blank")
    if len(name) > 50:
        raise ValueError("Tag name must be at most 50 characters")
    return name


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class MessageCreate(BaseModel):
    """
    Body of POST /api/messages.

    `tags` names are created on demand; repeated names are collapsed while
    keeping first-seen order.
    """
    text: str = Field(min_length=1, max_length=2000, description="Message body")
    tags: List[str] = Field(default_factory=list, description="Tag names to attach")

    @field_validator("tags")
    @classmethod
    def clean_tags(cls, v: List[str]) -> List[str]:
        seen: List[str] = []
        for raw in v:
            name = _clean_tag_name(raw)
            if name not in seen:
                seen.append(name)
        return seen


class MessageUpdate(BaseModel):
    """Body of PATCH /api/messages/{id}."""
    text: str = Field(min_length=1, max_length=2000)


class TagCreate(BaseModel):
    """Body of POST /api/tags and POST /api/messages/{id}/tags."""
    name: str = Field(description="Tag label (trimmed, 1-50 characters)")

    @field_validator("name")
    @classmethod
    def clean_name(cls, v: str) -> str:
        return _clean_tag_name(v)


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class MessageResponse(BaseModel):
    """
    A message with its tag names nested.

    Built from row aggregator output: one dict per message with a `tags` list.
    """
    id: int
    text: str
    created_at: Optional[datetime] = None
    tags: List[str] = Field(default_factory=list)


class TagResponse(BaseModel):
    """A tag with the number of messages that carry it."""
    id: int
    name: str
    message_count: int = 0

    model_config = {"from_attributes": True}
