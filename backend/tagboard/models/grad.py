"""
Tagboard Backend - Grad and Offer Models
=========================================

What:  ORM models for the one-to-many side of the API: a grad receives many
       job offers.
Who:   Used by GradService and by Alembic for migrations.

Table Design:
    grads ──< offers

    - offers.grad_id is indexed: every offers query filters or joins on it
    - grads.email is unique: duplicate sign-ups are rejected with 409
    - ON DELETE CASCADE on offers.grad_id; GradService also deletes offers
      explicitly before the grad
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Integer, String, text
from sqlalchemy.orm import Mapped, mapped_column

from tagboard.database import Base


class Grad(Base):
    """A graduate looking for work."""

    __tablename__ = "grads"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    name: Mapped[str] = mapped_column(String(120), nullable=False)

    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        comment="Contact address, unique per grad",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    def __repr__(self) -> str:
        return f"<Grad(id={self.id}, email='{self.email}')>"


class Offer(Base):
    """A job offer made to one grad."""

    __tablename__ = "offers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    grad_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("grads.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    company: Mapped[str] = mapped_column(String(120), nullable=False)

    # Annual salary in whole currency units; unknown offers leave it NULL
    salary: Mapped[int | None] = mapped_column(Integer, nullable=True, default=None)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    def __repr__(self) -> str:
        return f"<Offer(id={self.id}, grad_id={self.grad_id}, company='{self.company}')>"
