# backoffice/db/models/academy/learner.py
from typing import Optional
from sqlmodel import SQLModel, Field
from sqlalchemy import DateTime
from datetime import datetime
from decimal import Decimal

from ....utils import utcnow

class Learner(SQLModel, table=True):
    __tablename__ = "learners"
    id: Optional[int] = Field(default=None, primary_key=True)
    first_name: str = Field(max_length=100)
    last_name: str = Field(max_length=100)
    email: str = Field(max_length=255, unique=True, index=True)
    phone: Optional[str] = Field(max_length=20, default=None)
    gender: Optional[str] = Field(max_length=20, default=None)
    location: Optional[str] = Field(max_length=200, default=None)
    bio: Optional[str] = Field(default=None)
    track_id: Optional[int] = Field(default=None, foreign_key="tracks.id", index=True)
    status: str = Field(default="active", max_length=20)  # active, pending, inactive
    amount_paid: Decimal = Field(default=Decimal("0"), max_digits=10, decimal_places=2)
    date_joined: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True), index=True)
