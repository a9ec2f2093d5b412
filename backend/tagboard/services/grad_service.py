"""
Tagboard Backend - Grad Service
================================

What:  CRUD for grads and their offers (the one-to-many resource).
How:   Grad reads join grads LEFT JOIN offers ordered by grad id, then offer
       id, and nest offer company names with the row aggregator. The nested
       offers routes return full Offer rows through the ORM.
Who:   Called by routes/grads.py.
"""

import logging
from typing import List

from sqlalchemy import Select, delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from tagboard.exceptions import ConflictError, NotFoundError
from tagboard.models.grad import Grad, Offer
from tagboard.schemas.grad import GradCreate, GradResponse, GradUpdate, OfferCreate, OfferResponse
from tagboard.services.db_errors import translate_db_errors
from tagboard.services.row_aggregator import aggregate

logger = logging.getLogger(__name__)


def _grad_rows() -> Select:
    """Flat (id, name, email, created_at, offer) rows; offer is NULL without offers."""
    return (
        select(Grad.id, Grad.name, Grad.email, Grad.created_at, Offer.company.label("offer"))
        .select_from(Grad)
        .outerjoin(Offer, Offer.grad_id == Grad.id)
        .order_by(Grad.id, Offer.id)
    )


class GradService:
    """
    Business logic for grads and offers.

    Responsibilities:
        - list_grads() / get_grad(): aggregated reads with offer companies
        - create_grad() / update_grad() / delete_grad(): CRUD, unique email
        - list_offers() / create_offer() / delete_offer(): nested offers
    """

    async def _fetch(self, db: AsyncSession, query: Select) -> List[GradResponse]:
        with translate_db_errors("retrieve grads"):
            result = await db.execute(query)
            rows = result.mappings().all()

        grads = aggregate(rows, child_field="offer", children_key="offers", drop_null_children=True)
        return [GradResponse(**grad) for grad in grads]

    async def _require_grad(self, db: AsyncSession, grad_id: int) -> Grad:
        with translate_db_errors("retrieve the grad", grad_id=grad_id):
            result = await db.execute(select(Grad).where(Grad.id == grad_id))
            grad = result.scalar_one_or_none()
        if grad is None:
            raise NotFoundError(resource="grad", resource_id=grad_id)
        return grad

    async def _ensure_email_free(self, db: AsyncSession, email: str) -> None:
        result = await db.execute(select(Grad.id).where(Grad.email == email))
        if result.scalar_one_or_none() is not None:
            raise ConflictError(
                message=f"A grad with email '{email}' already exists",
                context={"email": email},
            )

    async def list_grads(self, db: AsyncSession, limit: int = 100, offset: int = 0) -> List[GradResponse]:
        """List grads with their offer companies; pagination counts grads, not rows."""
        page = select(Grad.id).order_by(Grad.id).limit(limit).offset(offset)
        return await self._fetch(db, _grad_rows().where(Grad.id.in_(page)))

    async def get_grad(self, db: AsyncSession, grad_id: int) -> GradResponse:
        """
        Retrieve one grad with offer companies.

        Raises:
            NotFoundError: No grad has this id (→ 404)
        """
        grads = await self._fetch(db, _grad_rows().where(Grad.id == grad_id))
        if not grads:
            raise NotFoundError(resource="grad", resource_id=grad_id)
        return grads[0]

    async def create_grad(self, db: AsyncSession, payload: GradCreate) -> GradResponse:
        """
        Insert a grad.

        Raises:
            ConflictError: The email is already registered (→ 409)
        """
        with translate_db_errors("create the grad"):
            await self._ensure_email_free(db, payload.email)
            grad = Grad(name=payload.name, email=payload.email)
            db.add(grad)
            try:
                await db.flush()
            except IntegrityError as e:
                raise ConflictError(
                    message=f"A grad with email '{payload.email}' already exists",
                    context={"email": payload.email},
                ) from e

        logger.info("Grad %d created", grad.id)
        return GradResponse(id=grad.id, name=grad.name, email=grad.email, created_at=grad.created_at)

    async def update_grad(self, db: AsyncSession, grad_id: int, payload: GradUpdate) -> GradResponse:
        """Apply the provided fields; changing to a taken email raises ConflictError."""
        grad = await self._require_grad(db, grad_id)
        with translate_db_errors("update the grad", grad_id=grad_id):
            if payload.email is not None and payload.email != grad.email:
                await self._ensure_email_free(db, payload.email)
                grad.email = payload.email
            if payload.name is not None:
                grad.name = payload.name
            try:
                await db.flush()
            except IntegrityError as e:
                raise ConflictError(
                    message=f"A grad with email '{payload.email}' already exists",
                    context={"email": payload.email},
                ) from e
        return await self.get_grad(db, grad_id)

    async def delete_grad(self, db: AsyncSession, grad_id: int) -> None:
        """Delete a grad together with all of its offers."""
        await self._require_grad(db, grad_id)
        with translate_db_errors("delete the grad", grad_id=grad_id):
            await db.execute(delete(Offer).where(Offer.grad_id == grad_id))
            await db.execute(delete(Grad).where(Grad.id == grad_id))
        logger.info("Grad %d deleted", grad_id)

    async def list_offers(self, db: AsyncSession, grad_id: int) -> List[OfferResponse]:
        """Full offer records for one grad, oldest first."""
        await self._require_grad(db, grad_id)
        with translate_db_errors("retrieve offers", grad_id=grad_id):
            result = await db.execute(
                select(Offer).where(Offer.grad_id == grad_id).order_by(Offer.id)
            )
            offers = result.scalars().all()
        return [OfferResponse.model_validate(offer) for offer in offers]

    async def create_offer(self, db: AsyncSession, grad_id: int, payload: OfferCreate) -> OfferResponse:
        """Record a new offer for an existing grad."""
        await self._require_grad(db, grad_id)
        with translate_db_errors("create the offer", grad_id=grad_id):
            offer = Offer(grad_id=grad_id, company=payload.company, salary=payload.salary)
            db.add(offer)
            await db.flush()
        logger.info("Offer %d created for grad %d", offer.id, grad_id)
        return OfferResponse.model_validate(offer)

    async def delete_offer(self, db: AsyncSession, offer_id: int) -> None:
        """
        Delete one offer.

        Raises:
            NotFoundError: No offer has this id (→ 404)
        """
        with translate_db_errors("delete the offer", offer_id=offer_id):
            result = await db.execute(delete(Offer).where(Offer.id == offer_id))
            removed = result.rowcount
        if not removed:
            raise NotFoundError(resource="offer", resource_id=offer_id)
        logger.info("Offer %d deleted", offer_id)


grad_service = GradService()
