"""
Tagboard Backend - Grad and Offer Route Handlers
=================================================

What:  HTTP surface for grads and the offers nested under them.

Routes:
    GET    /api/grads                  list with offer companies
    POST   /api/grads                  create (409 on duplicate email)
    GET    /api/grads/{id}             detail
    PATCH  /api/grads/{id}             partial update
    DELETE /api/grads/{id}             delete with offers
    GET    /api/grads/{id}/offers      full offers for one grad
    POST   /api/grads/{id}/offers      add an offer
    DELETE /api/offers/{id}            delete one offer

Nesting rule: offers are created and listed through their grad, but an
offer id is globally unique, so deletion addresses it directly.
"""

from typing import List

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from tagboard.config import settings
from tagboard.database import get_db_session
from tagboard.schemas.common import ErrorResponse
from tagboard.schemas.grad import GradCreate, GradResponse, GradUpdate, OfferCreate, OfferResponse
from tagboard.services.grad_service import grad_service

router = APIRouter(prefix="/api", tags=["Grads"])

_grad_not_found = {404: {"description": "Grad not found", "model": ErrorResponse}}
_email_taken = {409: {"description": "Email already registered", "model": ErrorResponse}}


@router.get("/grads", response_model=List[GradResponse], summary="List grads with offers")
async def list_grads(
    limit: int = Query(default=settings.default_page_limit, ge=1, le=settings.default_page_limit),
    offset: int = Query(default=0, ge=0),
    db: AsyncSession = Depends(get_db_session),
) -> List[GradResponse]:
    return await grad_service.list_grads(db=db, limit=limit, offset=offset)


@router.post(
    "/grads",
    response_model=GradResponse,
    status_code=status.HTTP_201_CREATED,
    responses=_email_taken,
    summary="Create a grad",
)
async def create_grad(
    payload: GradCreate,
    db: AsyncSession = Depends(get_db_session),
) -> GradResponse:
    return await grad_service.create_grad(db=db, payload=payload)


@router.get(
    "/grads/{grad_id}",
    response_model=GradResponse,
    responses=_grad_not_found,
    summary="Get a grad by ID",
)
async def get_grad(grad_id: int, db: AsyncSession = Depends(get_db_session)) -> GradResponse:
    return await grad_service.get_grad(db=db, grad_id=grad_id)


@router.patch(
    "/grads/{grad_id}",
    response_model=GradResponse,
    responses={**_grad_not_found, **_email_taken},
    summary="Update a grad",
)
async def update_grad(
    grad_id: int,
    payload: GradUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> GradResponse:
    return await grad_service.update_grad(db=db, grad_id=grad_id, payload=payload)


@router.delete(
    "/grads/{grad_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses=_grad_not_found,
    summary="Delete a grad and its offers",
)
async def delete_grad(grad_id: int, db: AsyncSession = Depends(get_db_session)) -> Response:
    await grad_service.delete_grad(db=db, grad_id=grad_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/grads/{grad_id}/offers",
    response_model=List[OfferResponse],
    responses=_grad_not_found,
    summary="List a grad's offers",
)
async def list_offers(grad_id: int, db: AsyncSession = Depends(get_db_session)) -> List[OfferResponse]:
    return await grad_service.list_offers(db=db, grad_id=grad_id)


@router.post(
    "/grads/{grad_id}/offers",
    response_model=OfferResponse,
    status_code=status.HTTP_201_CREATED,
    responses=_grad_not_found,
    summary="Add an offer to a grad",
)
async def create_offer(
    grad_id: int,
    payload: OfferCreate,
    db: AsyncSession = Depends(get_db_session),
) -> OfferResponse:
    return await grad_service.create_offer(db=db, grad_id=grad_id, payload=payload)


@router.delete(
    "/offers/{offer_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"description": "Offer not found", "model": ErrorResponse}},
    summary="Delete an offer",
)
async def delete_offer(offer_id: int, db: AsyncSession = Depends(get_db_session)) -> Response:
    await grad_service.delete_offer(db=db, offer_id=offer_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
