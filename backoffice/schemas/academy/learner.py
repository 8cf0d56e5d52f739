# backoffice/schemas/academy/learner.py
from datetime import datetime
from decimal import Decimal
from typing import Literal, Optional

from pydantic import Field, field_validator

from ..auth.auth import _normalize_email
from ..common.common import CamelModel, PartialUpdate

LearnerStatus = Literal["active", "pending", "inactive"]


class LearnerCreate(CamelModel):
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., max_length=255)
    phone: Optional[str] = Field(None, max_length=20)
    gender: Optional[str] = Field(None, max_length=20)
    location: Optional[str] = Field(None, max_length=200)
    bio: Optional[str] = None
    track_id: Optional[int] = None
    status: LearnerStatus = "active"
    amount_paid: Decimal = Field(Decimal("0"), ge=0, max_digits=10, decimal_places=2)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v):
        return _normalize_email(v)


class LearnerUpdate(PartialUpdate):
    non_nullable = frozenset({"first_name", "last_name", "email", "status", "amount_paid"})

    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=20)
    gender: Optional[str] = Field(None, max_length=20)
    location: Optional[str] = Field(None, max_length=200)
    bio: Optional[str] = None
    track_id: Optional[int] = None
    status: Optional[LearnerStatus] = None
    amount_paid: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v):
        return _normalize_email(v) if v is not None else v


class LearnerResponse(CamelModel):
    id: int
    first_name: str
    last_name: str
    email: str
    phone: Optional[str] = None
    gender: Optional[str] = None
    location: Optional[str] = None
    bio: Optional[str] = None
    track_id: Optional[int] = None
    status: str
    amount_paid: Decimal
    date_joined: datetime
    created_at: datetime
