"""
Tagboard Backend - Tag Route Handlers
======================================

Routes:
    GET    /api/tags         list with message counts
    POST   /api/tags         create (409 on duplicate name)
    DELETE /api/tags/{id}    delete and unlink from messages
"""

from typing import List

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from tagboard.database import get_db_session
from tagboard.schemas.common import ErrorResponse
from tagboard.schemas.message import TagCreate, TagResponse
from tagboard.services.tag_service import tag_service

router = APIRouter(prefix="/api", tags=["Tags"])


@router.get("/tags", response_model=List[TagResponse], summary="List tags")
async def list_tags(db: AsyncSession = Depends(get_db_session)) -> List[TagResponse]:
    return await tag_service.list_tags(db=db)


@router.post(
    "/tags",
    response_model=TagResponse,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"description": "Tag name already exists", "model": ErrorResponse}},
    summary="Create a tag",
)
async def create_tag(
    payload: TagCreate,
    db: AsyncSession = Depends(get_db_session),
) -> TagResponse:
    return await tag_service.create_tag(db=db, name=payload.name)


@router.delete(
    "/tags/{tag_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"description": "Tag not found", "model": ErrorResponse}},
    summary="Delete a tag",
)
async def delete_tag(
    tag_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await tag_service.delete_tag(db=db, tag_id=tag_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
