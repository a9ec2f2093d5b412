"""
Tagboard Backend - Message and Tag Models
==========================================

What:  ORM models for the many-to-many side of the API: `messages`, `tags`,
       and the `message_tags` association table linking them.
Who:   Used by MessageService and TagService, and by Alembic for migrations.

Table Design:
    messages ──< message_tags >── tags

    - Integer primary keys: the row aggregator groups join rows by message id
    - tags.name is unique: tags are addressed by name in the API
    - message_tags has a composite primary key so a tag is linked to a
      message at most once
    - Both foreign keys cascade on delete; services also delete links
      explicitly so SQLite without PRAGMA foreign_keys behaves the same

Typical query (list endpoint):
    SELECT m.id, m.text, m.created_at, t.name AS tag
    FROM messages m
    LEFT JOIN message_tags mt ON mt.message_id = m.id
    LEFT JOIN tags t ON t.id = mt.tag_id
    ORDER BY m.id, t.name
"""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, String, Table, Text
from sqlalchemy import text as sql_text
from sqlalchemy.orm import Mapped, mapped_column

from tagboard.database import Base


# ── Association Table ─────────────────────────────────────────────────────
# Plain Table (not a mapped class): it carries no columns beyond the two keys.
message_tags = Table(
    "message_tags",
    Base.metadata,
    Column(
        "message_id",
        Integer,
        ForeignKey("messages.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "tag_id",
        Integer,
        ForeignKey("tags.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Index("idx_message_tags_tag_id", "tag_id"),
)


class Message(Base):
    """A short text message that can carry any number of tags."""

    __tablename__ = "messages"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    text: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Message body",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=sql_text("CURRENT_TIMESTAMP"),
        comment="When this message was created (UTC)",
    )

    def __repr__(self) -> str:
        return f"<Message(id={self.id}, text='{self.text[:20]}')>"


class Tag(Base):
    """A unique label attached to messages through `message_tags`."""

    __tablename__ = "tags"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    name: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        unique=True,
        comment="Tag label, unique across all tags",
    )

    def __repr__(self) -> str:
        return f"<Tag(id={self.id}, name='{self.name}')>"
