"""
Tagboard Backend - Grad and Offer Schemas
==========================================

What:  Pydantic request/response models for the grads and offers routes.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


def _check_email(value: str) -> str:
    email = value.strip().lower()
    local, _, domain = email.partition("@")
    if not local or "." not in domain:
        raise ValueError("Invalid email address")
    return email


class GradCreate(BaseModel):
    """Body of POST /api/grads. Emails are stored trimmed and lower-cased."""
    name: str = Field(min_length=1, max_length=120)
    email: str = Field(max_length=255)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        return _check_email(v)


class GradUpdate(BaseModel):
    """Body of PATCH /api/grads/{id}; omitted fields are left unchanged."""
    name: Optional[str] = Field(default=None, min_length=1, max_length=120)
    email: Optional[str] = Field(default=None, max_length=255)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: Optional[str]) -> Optional[str]:
        return _check_email(v) if v is not None else v


class OfferCreate(BaseModel):
    """Body of POST /api/grads/{id}/offers."""
    company: str = Field(min_length=1, max_length=120)
    salary: Optional[int] = Field(default=None, ge=0, description="Annual salary")


class GradResponse(BaseModel):
    """
    A grad with the companies that made offers, in offer creation order.

    Built from row aggregator output over grads LEFT JOIN offers.
    """
    id: int
    name: str
    email: str
    created_at: Optional[datetime] = None
    offers: List[str] = Field(default_factory=list)


class OfferResponse(BaseModel):
    """Full offer record returned by the nested offers routes."""
    id: int
    grad_id: int
    company: str
    salary: Optional[int] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
