from typing import Protocol, Optional, Any
from dataclasses import dataclass
from datetime import datetime


@dataclass
class RegistrationData:
    first_name: str
    last_name: str
    email: str
    password: str
    phone: Optional[str] = None


@dataclass
class AccountDto:
    id: int
    first_name: str
    last_name: str
    email: str
    phone: Optional[str]
    is_verified: bool
    otp_code: Optional[str]
    otp_expiry: Optional[datetime]
    reset_token: Optional[str]
    reset_token_expiry: Optional[datetime]
    created_at: datetime


class CredentialStore(Protocol):
    def create(self, registration: RegistrationData) -> AccountDto:
        ...

    def find_by_email(self, email: str) -> Optional[AccountDto]:
        ...

    def find_by_id(self, account_id: int) -> Optional[AccountDto]:
        ...

    def find_by_reset_token(self, token: str) -> Optional[AccountDto]:
        ...

    def update(self, account_id: int, **fields: Any) -> Optional[AccountDto]:
        ...

    def verify_password(self, email: str, password: str) -> Optional[AccountDto]:
        ...

    def set_password(self, account_id: int, password: str) -> Optional[AccountDto]:
        ...

    def delete(self, account_id: int) -> bool:
        ...
