"""
Tagboard Backend - Message Service
===================================

What:  CRUD for messages plus tag attachment (the many-to-many resource).
How:   Reads run one flat query over messages LEFT JOIN message_tags LEFT JOIN
       tags ordered by message id, then nest tag names with the row
       aggregator. Writes go through the ORM session and re-read the message
       through the same query so every endpoint returns the same shape.
Who:   Called by routes/messages.py.

Read Flow:
    ┌──────────────┐    ┌─────────────────┐    ┌──────────────┐
    │  JOIN query  │───▶│  row_aggregator │───▶│ MessageResp. │
    │ (flat rows)  │    │  (group by id)  │    │  (per msg)   │
    └──────────────┘    └─────────────────┘    └──────────────┘

    A query failure raises DatabaseError before aggregation is attempted;
    an unusable row raises InvalidRowError and no partial list is returned.
"""

import logging
from typing import List, Optional, Sequence

from sqlalchemy import Select, delete, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from tagboard.exceptions import NotFoundError
from tagboard.models.message import Message, Tag, message_tags
from tagboard.schemas.message import MessageCreate, MessageResponse, MessageUpdate
from tagboard.services.db_errors import translate_db_errors
from tagboard.services.row_aggregator import aggregate

logger = logging.getLogger(__name__)


def _message_rows() -> Select:
    """Flat (id, text, created_at, tag) rows; tag is NULL for untagged messages."""
    return (
        select(Message.id, Message.text, Message.created_at, Tag.name.label("tag"))
        .select_from(Message)
        .outerjoin(message_tags, message_tags.c.message_id == Message.id)
        .outerjoin(Tag, Tag.id == message_tags.c.tag_id)
        .order_by(Message.id, Tag.name)
    )


class MessageService:
    """
    Business logic for messages and their tags.

    Responsibilities:
        - list_messages() / get_message(): aggregated reads
        - create_message() / update_message() / delete_message(): CRUD
        - attach_tag() / detach_tag(): manage message_tags links
    """

    async def _fetch(self, db: AsyncSession, query: Select) -> List[MessageResponse]:
        with translate_db_errors("retrieve messages"):
            result = await db.execute(query)
            rows = result.mappings().all()

        messages = aggregate(rows, child_field="tag", children_key="tags", drop_null_children=True)
        return [MessageResponse(**message) for message in messages]

    async def _require_message(self, db: AsyncSession, message_id: int) -> Message:
        with translate_db_errors("retrieve the message", message_id=message_id):
            result = await db.execute(select(Message).where(Message.id == message_id))
            message = result.scalar_one_or_none()
        if message is None:
            raise NotFoundError(resource="message", resource_id=message_id)
        return message

    async def _get_or_create_tags(self, db: AsyncSession, names: Sequence[str]) -> List[Tag]:
        """Return Tag rows for `names` in the given order, inserting missing ones."""
        if not names:
            return []
        result = await db.execute(select(Tag).where(Tag.name.in_(names)))
        existing = {tag.name: tag for tag in result.scalars().all()}

        tags = []
        for name in names:
            tag = existing.get(name)
            if tag is None:
                tag = Tag(name=name)
                db.add(tag)
                existing[name] = tag
            tags.append(tag)
        await db.flush()
        return tags

    async def _link_tags(self, db: AsyncSession, message_id: int, tags: Sequence[Tag]) -> None:
        """Insert message_tags links that do not exist yet."""
        if not tags:
            return
        result = await db.execute(
            select(message_tags.c.tag_id).where(message_tags.c.message_id == message_id)
        )
        linked = set(result.scalars().all())
        new_links = [
            {"message_id": message_id, "tag_id": tag.id}
            for tag in tags
            if tag.id not in linked
        ]
        if new_links:
            await db.execute(insert(message_tags), new_links)

    async def list_messages(
        self,
        db: AsyncSession,
        limit: int = 100,
        offset: int = 0,
        tag: Optional[str] = None,
    ) -> List[MessageResponse]:
        """
        List messages with their tags, ordered by id.

        Pagination applies to messages, not join rows: the page of ids is
        selected first and the join is restricted to it.

        Args:
            db:     Async database session
            limit:  Maximum number of messages
            offset: Number of messages to skip
            tag:    Only include messages carrying this tag (all of their tags
                    are still returned)
        """
        page = select(Message.id).order_by(Message.id).limit(limit).offset(offset)
        if tag is not None:
            tag = tag.strip()
            tagged = (
                select(message_tags.c.message_id)
                .join(Tag, Tag.id == message_tags.c.tag_id)
                .where(Tag.name == tag)
            )
            page = page.where(Message.id.in_(tagged))

        return await self._fetch(db, _message_rows().where(Message.id.in_(page)))

    async def get_message(self, db: AsyncSession, message_id: int) -> MessageResponse:
        """
        Retrieve one message with its tags.

        Raises:
            NotFoundError: No message has this id (→ 404)
            DatabaseError: Query execution failed (→ 500)
        """
        messages = await self._fetch(db, _message_rows().where(Message.id == message_id))
        if not messages:
            raise NotFoundError(resource="message", resource_id=message_id)
        return messages[0]

    async def create_message(self, db: AsyncSession, payload: MessageCreate) -> MessageResponse:
        """Insert a message and link its tags, creating unknown tag names."""
        with translate_db_errors("create the message"):
            message = Message(text=payload.text)
            db.add(message)
            await db.flush()

            tags = await self._get_or_create_tags(db, payload.tags)
            await self._link_tags(db, message.id, tags)

        logger.info("Message %d created with %d tag(s)", message.id, len(payload.tags))
        return await self.get_message(db, message.id)

    async def update_message(
        self, db: AsyncSession, message_id: int, payload: MessageUpdate
    ) -> MessageResponse:
        """Replace the text of an existing message."""
        message = await self._require_message(db, message_id)
        with translate_db_errors("update the message", message_id=message_id):
            message.text = payload.text
            await db.flush()
        return await self.get_message(db, message_id)

    async def delete_message(self, db: AsyncSession, message_id: int) -> None:
        """Delete a message and its tag links. Tags themselves are kept."""
        await self._require_message(db, message_id)
        with translate_db_errors("delete the message", message_id=message_id):
            await db.execute(delete(message_tags).where(message_tags.c.message_id == message_id))
            await db.execute(delete(Message).where(Message.id == message_id))
        logger.info("Message %d deleted", message_id)

    async def attach_tag(self, db: AsyncSession, message_id: int, name: str) -> MessageResponse:
        """Link a tag to a message; attaching an already linked tag is a no-op."""
        await self._require_message(db, message_id)
        with translate_db_errors("attach the tag", message_id=message_id, tag=name):
            tags = await self._get_or_create_tags(db, [name])
            await self._link_tags(db, message_id, tags)
        return await self.get_message(db, message_id)

    async def detach_tag(self, db: AsyncSession, message_id: int, name: str) -> MessageResponse:
        """
        Unlink a tag from a message.

        Raises:
            NotFoundError: The message does not exist, or does not carry the tag
        """
        name = name.strip()
        await self._require_message(db, message_id)
        with translate_db_errors("detach the tag", message_id=message_id, tag=name):
            result = await db.execute(
                delete(message_tags)
                .where(message_tags.c.message_id == message_id)
                .where(message_tags.c.tag_id.in_(select(Tag.id).where(Tag.name == name)))
            )
            removed = result.rowcount
        if not removed:
            raise NotFoundError(
                resource="tag",
                resource_id=name,
                context={"message_id": message_id},
            )
        return await self.get_message(db, message_id)


message_service = MessageService()
