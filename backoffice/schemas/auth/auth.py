# backoffice/schemas/auth/auth.py
import re
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ..common.common import CamelModel

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def _normalize_email(v: str) -> str:
    v = v.strip().lower()
    if not EMAIL_RE.match(v):
        raise ValueError("Invalid email address")
    return v


class RegisterRequest(CamelModel):
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., max_length=255)
    phone: Optional[str] = Field(None, description="Phone number with country code")
    password: str = Field(..., min_length=6, max_length=72)

    @field_validator("first_name", "last_name")
    @classmethod
    def validate_name(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Name cannot be blank")
        return v

    @field_validator("email")
    @classmethod
    def validate_email(cls, v):
        return _normalize_email(v)

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v):
        if v is None or v.strip() == "":
            return None
        phone_clean = re.sub(r"[^\d+]", "", v)
        if not re.match(r"^\+\d{1,4}\d{6,14}$", phone_clean):
            raise ValueError("Invalid phone number format. Must include country code (e.g., +1234567890)")
        return phone_clean


class RegisterResponse(BaseModel):
    message: str
    email: str


class VerifyOTPRequest(CamelModel):
    email: str
    otp_code: str = Field(..., description="6-digit OTP")

    @field_validator("email")
    @classmethod
    def validate_email(cls, v):
        return _normalize_email(v)

    @field_validator("otp_code")
    @classmethod
    def validate_otp(cls, v):
        v = v.strip()
        if not v.isdigit() or len(v) != 6:
            raise ValueError("OTP must be 6 digits")
        return v


class LoginRequest(CamelModel):
    email: str
    password: str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v):
        return _normalize_email(v)


class EmailRequest(CamelModel):
    email: str

    @field_validator("email")
    @classmethod
    def validate_email(cls, v):
        return _normalize_email(v)


class ResendOTPRequest(EmailRequest):
    pass


class ForgotPasswordRequest(EmailRequest):
    pass


class ResetPasswordRequest(CamelModel):
    token: str = Field(..., min_length=1)
    password: str = Field(..., min_length=6, max_length=72)


class AdminResponse(CamelModel):
    id: int
    first_name: str
    last_name: str
    email: str


class AuthResponse(BaseModel):
    message: str
    token: str
    admin: AdminResponse


class MeResponse(BaseModel):
    admin: AdminResponse
