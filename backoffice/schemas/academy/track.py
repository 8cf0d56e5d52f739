# backoffice/schemas/academy/track.py
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import Field

from ..common.common import CamelModel, PartialUpdate


class TrackCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    duration: str = Field(..., min_length=1, max_length=100)
    instructor: str = Field(..., min_length=1, max_length=200)
    image_url: Optional[str] = Field(None, max_length=500)
    technologies: Optional[List[str]] = None


class TrackUpdate(PartialUpdate):
    non_nullable = frozenset({"name", "price", "duration", "instructor"})

    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    duration: Optional[str] = Field(None, min_length=1, max_length=100)
    instructor: Optional[str] = Field(None, min_length=1, max_length=200)
    image_url: Optional[str] = Field(None, max_length=500)
    technologies: Optional[List[str]] = None


class TrackResponse(CamelModel):
    id: int
    name: str
    description: Optional[str] = None
    price: Decimal
    duration: str
    instructor: str
    image_url: Optional[str] = None
    technologies: Optional[List[str]] = None
    created_at: datetime
