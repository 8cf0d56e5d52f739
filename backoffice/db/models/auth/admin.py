# backoffice/db/models/auth/admin.py
from typing import Optional
from sqlmodel import SQLModel, Field
from sqlalchemy import DateTime
from datetime import datetime

from ....utils import utcnow

class Admin(SQLModel, table=True):
    __tablename__ = "admins"
    id: Optional[int] = Field(default=None, primary_key=True)
    first_name: str = Field(max_length=100)
    last_name: str = Field(max_length=100)
    email: str = Field(max_length=255, unique=True, index=True)
    phone: Optional[str] = Field(max_length=20, default=None)
    password: str = Field(max_length=255)  # bcrypt hash
    is_verified: bool = Field(default=False)
    otp_code: Optional[str] = Field(max_length=6, default=None)
    otp_expiry: Optional[datetime] = Field(default=None, sa_type=DateTime(timezone=True))
    reset_token: Optional[str] = Field(max_length=64, default=None, index=True)  # sha256 digest
    reset_token_expiry: Optional[datetime] = Field(default=None, sa_type=DateTime(timezone=True))
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))
