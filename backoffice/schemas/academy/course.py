# backoffice/schemas/academy/course.py
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import Field

from ..common.common import CamelModel, PartialUpdate

CourseStatus = Literal["active", "draft", "archived"]


class CourseCreate(CamelModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    track_id: int
    instructor: str = Field(..., min_length=1, max_length=200)
    image: str = Field(..., min_length=1, max_length=500)
    duration: str = Field(..., min_length=1, max_length=100)
    status: CourseStatus = "active"
    technologies: Optional[List[str]] = None


class CourseUpdate(PartialUpdate):
    non_nullable = frozenset({"title", "track_id", "instructor", "image", "duration", "status"})

    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    track_id: Optional[int] = None
    instructor: Optional[str] = Field(None, min_length=1, max_length=200)
    image: Optional[str] = Field(None, min_length=1, max_length=500)
    duration: Optional[str] = Field(None, min_length=1, max_length=100)
    status: Optional[CourseStatus] = None
    technologies: Optional[List[str]] = None


class CourseResponse(CamelModel):
    id: int
    title: str
    description: Optional[str] = None
    track_id: int
    instructor: str
    image: str
    duration: str
    students: int
    status: str
    technologies: Optional[List[str]] = None
    created_at: datetime
