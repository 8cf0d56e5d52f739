# backoffice/db/models/academy/track.py
from typing import Optional, List
from sqlmodel import SQLModel, Field
from sqlalchemy import Column, DateTime, JSON
from datetime import datetime
from decimal import Decimal

from ....utils import utcnow

class Track(SQLModel, table=True):
    __tablename__ = "tracks"
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(max_length=200)
    description: Optional[str] = Field(default=None)
    price: Decimal = Field(max_digits=10, decimal_places=2)
    duration: str = Field(max_length=100)
    instructor: str = Field(max_length=200)
    image_url: Optional[str] = Field(max_length=500, default=None)
    technologies: Optional[List[str]] = Field(default=None, sa_column=Column(JSON))
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True), index=True)
