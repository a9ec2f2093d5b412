"""
Tagboard Backend - Tag Service
===============================

What:  Create, list, and delete tags independently of messages.
Who:   Called by routes/tags.py. Tags created implicitly by message writes
       go through MessageService instead.
"""

import logging
from typing import List

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from tagboard.exceptions import ConflictError, NotFoundError
from tagboard.models.message import Tag, message_tags
from tagboard.schemas.message import TagResponse
from tagboard.services.db_errors import translate_db_errors

logger = logging.getLogger(__name__)


class TagService:
    """Business logic for the tags resource."""

    async def list_tags(self, db: AsyncSession) -> List[TagResponse]:
        """
        List every tag with how many messages carry it, ordered by name.

        Query:
            SELECT t.id, t.name, COUNT(mt.message_id) AS message_count
            FROM tags t LEFT JOIN message_tags mt ON mt.tag_id = t.id
            GROUP BY t.id, t.name ORDER BY t.name
        """
        query = (
            select(Tag.id, Tag.name, func.count(message_tags.c.message_id).label("message_count"))
            .select_from(Tag)
            .outerjoin(message_tags, message_tags.c.tag_id == Tag.id)
            .group_by(Tag.id, Tag.name)
            .order_by(Tag.name)
        )
        with translate_db_errors("retrieve tags"):
            result = await db.execute(query)
            rows = result.mappings().all()
        return [TagResponse(**row) for row in rows]

    async def create_tag(self, db: AsyncSession, name: str) -> TagResponse:
        """
        Create a tag.

        Raises:
            ConflictError: A tag with this name exists (→ 409)
        """
        with translate_db_errors("create the tag", tag=name):
            result = await db.execute(select(Tag.id).where(Tag.name == name))
            if result.scalar_one_or_none() is not None:
                raise ConflictError(
                    message=f"Tag '{name}' already exists",
                    context={"name": name},
                )
            tag = Tag(name=name)
            db.add(tag)
            try:
                await db.flush()
            except IntegrityError as e:
                # Another request inserted the same name between check and flush
                raise ConflictError(
                    message=f"Tag '{name}' already exists",
                    context={"name": name},
                ) from e

        logger.info("Tag %d created: %s", tag.id, name)
        return TagResponse(id=tag.id, name=tag.name, message_count=0)

    async def delete_tag(self, db: AsyncSession, tag_id: int) -> None:
        """Delete a tag and unlink it from every message."""
        with translate_db_errors("delete the tag", tag_id=tag_id):
            await db.execute(delete(message_tags).where(message_tags.c.tag_id == tag_id))
            result = await db.execute(delete(Tag).where(Tag.id == tag_id))
            removed = result.rowcount
        if not removed:
            raise NotFoundError(resource="tag", resource_id=tag_id)
        logger.info("Tag %d deleted", tag_id)


tag_service = TagService()
