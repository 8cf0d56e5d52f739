# backoffice/db/models/academy/course.py
from typing import Optional, List
from sqlmodel import SQLModel, Field
from sqlalchemy import Column, DateTime, JSON
from datetime import datetime

from ....utils import utcnow

class Course(SQLModel, table=True):
    __tablename__ = "courses"
    id: Optional[int] = Field(default=None, primary_key=True)
    title: str = Field(max_length=200)
    description: Optional[str] = Field(default=None)
    track_id: int = Field(foreign_key="tracks.id", index=True)
    instructor: str = Field(max_length=200)
    image: str = Field(max_length=500)
    duration: str = Field(max_length=100)
    students: int = Field(default=0)
    status: str = Field(default="active", max_length=20)  # active, draft, archived
    technologies: Optional[List[str]] = Field(default=None, sa_column=Column(JSON))
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True), index=True)
