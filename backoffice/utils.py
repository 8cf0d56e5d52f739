import hashlib
import secrets
from datetime import datetime, timezone
from typing import Optional


def utcnow() -> datetime:
    """Timezone-aware UTC timestamp; every stored datetime is UTC."""
    return datetime.now(timezone.utc)


def ensure_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to naive values read back from backends that drop the offset (SQLite)."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


# =========================
# OTP Generation
# =========================
def generate_otp() -> str:
    """Generate a secure 6-digit OTP."""
    return str(100000 + secrets.randbelow(900000))


# =========================
# Reset tokens
# =========================
def generate_reset_token() -> str:
    """Opaque 64-char hex token sent to the account owner."""
    return secrets.token_hex(32)


def hash_token(token: str) -> str:
    """Only the digest of a reset token is persisted."""
    return hashlib.sha256(token.encode()).hexdigest()


def hash_email(email: str) -> str:
    """Hash email address for audit records (one-way hash)"""
    return hashlib.sha256(email.strip().lower().encode()).hexdigest()


def generate_invoice_number() -> str:
    return f"INV-{secrets.token_hex(3).upper()}"
