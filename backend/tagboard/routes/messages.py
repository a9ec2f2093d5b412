"""
Tagboard Backend - Message Route Handlers
==========================================

What:  HTTP surface for messages and their tag links.
How:   Extracts path/query/body values, delegates to MessageService, and
       sets status codes. Errors are raised as application exceptions and
       formatted by the global handlers in main.py.

Routes:
    GET    /api/messages                     list (optional ?tag=, ?limit=, ?offset=)
    POST   /api/messages                     create with optional tags
    GET    /api/messages/{id}                detail
    PATCH  /api/messages/{id}                replace text
    DELETE /api/messages/{id}                delete
    POST   /api/messages/{id}/tags           attach tag by name
    DELETE /api/messages/{id}/tags/{name}    detach tag
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from tagboard.config import settings
from tagboard.database import get_db_session
from tagboard.schemas.common import ErrorResponse
from tagboard.schemas.message import MessageCreate, MessageResponse, MessageUpdate, TagCreate
from tagboard.services.message_service import message_service

router = APIRouter(prefix="/api", tags=["Messages"])

_not_found = {404: {"description": "Message not found", "model": ErrorResponse}}


@router.get(
    "/messages",
    response_model=List[MessageResponse],
    summary="List messages with their tags",
)
async def list_messages(
    limit: int = Query(default=settings.default_page_limit, ge=1, le=settings.default_page_limit),
    offset: int = Query(default=0, ge=0),
    tag: Optional[str] = Query(default=None, description="Only messages carrying this tag"),
    db: AsyncSession = Depends(get_db_session),
) -> List[MessageResponse]:
    """
    Each message appears once with every tag it carries, e.g.

        [{"id": 1, "text": "first", "tags": ["funny", "happy"]}, ...]
    """
    return await message_service.list_messages(db=db, limit=limit, offset=offset, tag=tag)


@router.post(
    "/messages",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a message",
)
async def create_message(
    payload: MessageCreate,
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    return await message_service.create_message(db=db, payload=payload)


@router.get(
    "/messages/{message_id}",
    response_model=MessageResponse,
    responses=_not_found,
    summary="Get a message by ID",
)
async def get_message(
    message_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    return await message_service.get_message(db=db, message_id=message_id)


@router.patch(
    "/messages/{message_id}",
    response_model=MessageResponse,
    responses=_not_found,
    summary="Update a message's text",
)
async def update_message(
    message_id: int,
    payload: MessageUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    return await message_service.update_message(db=db, message_id=message_id, payload=payload)


@router.delete(
    "/messages/{message_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses=_not_found,
    summary="Delete a message",
)
async def delete_message(
    message_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await message_service.delete_message(db=db, message_id=message_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/messages/{message_id}/tags",
    response_model=MessageResponse,
    responses=_not_found,
    summary="Attach a tag to a message",
)
async def attach_tag(
    message_id: int,
    payload: TagCreate,
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    """Creates the tag if needed. Attaching a tag twice leaves one link."""
    return await message_service.attach_tag(db=db, message_id=message_id, name=payload.name)


@router.delete(
    "/messages/{message_id}/tags/{name}",
    response_model=MessageResponse,
    responses={404: {"description": "Message not found or tag not attached", "model": ErrorResponse}},
    summary="Detach a tag from a message",
)
async def detach_tag(
    message_id: int,
    name: str,
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    return await message_service.detach_tag(db=db, message_id=message_id, name=name)
