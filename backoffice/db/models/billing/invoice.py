# backoffice/db/models/billing/invoice.py
from typing import Optional
from sqlmodel import SQLModel, Field
from sqlalchemy import DateTime
from datetime import datetime
from decimal import Decimal

from ....utils import utcnow, generate_invoice_number

class Invoice(SQLModel, table=True):
    __tablename__ = "invoices"
    id: Optional[int] = Field(default=None, primary_key=True)
    invoice_number: str = Field(default_factory=generate_invoice_number, max_length=20, unique=True, index=True)
    learner_id: int = Field(foreign_key="learners.id", index=True)
    track_id: Optional[int] = Field(default=None, foreign_key="tracks.id")
    course_id: Optional[int] = Field(default=None, foreign_key="courses.id")
    amount: Decimal = Field(max_digits=10, decimal_places=2)
    status: str = Field(default="pending", max_length=20, index=True)  # pending, paid, overdue, cancelled
    due_date: Optional[datetime] = Field(default=None, sa_type=DateTime(timezone=True))
    paid_date: Optional[datetime] = Field(default=None, sa_type=DateTime(timezone=True))
    notes: Optional[str] = Field(default=None)
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True), index=True)
