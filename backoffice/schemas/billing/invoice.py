# backoffice/schemas/billing/invoice.py
from datetime import datetime
from decimal import Decimal
from typing import Literal, Optional

from pydantic import Field

from ..common.common import CamelModel, PartialUpdate

InvoiceStatus = Literal["pending", "paid", "overdue", "cancelled"]


class InvoiceCreate(CamelModel):
    learner_id: int
    track_id: Optional[int] = None
    course_id: Optional[int] = None
    amount: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2)
    status: InvoiceStatus = "pending"
    due_date: Optional[datetime] = None
    notes: Optional[str] = None


class InvoiceUpdate(PartialUpdate):
    non_nullable = frozenset({"learner_id", "amount", "status"})

    learner_id: Optional[int] = None
    track_id: Optional[int] = None
    course_id: Optional[int] = None
    amount: Optional[Decimal] = Field(None, gt=0, max_digits=10, decimal_places=2)
    status: Optional[InvoiceStatus] = None
    due_date: Optional[datetime] = None
    paid_date: Optional[datetime] = None
    notes: Optional[str] = None


class InvoiceResponse(CamelModel):
    id: int
    invoice_number: str
    learner_id: int
    track_id: Optional[int] = None
    course_id: Optional[int] = None
    amount: Decimal
    status: str
    due_date: Optional[datetime] = None
    paid_date: Optional[datetime] = None
    notes: Optional[str] = None
    created_at: datetime
