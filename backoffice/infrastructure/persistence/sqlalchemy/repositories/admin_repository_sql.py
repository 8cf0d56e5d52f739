import logging
from datetime import datetime, timedelta
from typing import Any, Callable, Optional

from passlib.context import CryptContext
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from .....db.models import Admin
from .....application.ports.credential_store import CredentialStore, RegistrationData, AccountDto
from .....exceptions import DuplicateAccount
from .....utils import ensure_utc, generate_otp, hash_token, utcnow

logger = logging.getLogger(__name__)

_MUTABLE_FIELDS = {
    "first_name", "last_name", "phone", "is_verified",
    "otp_code", "otp_expiry", "reset_token", "reset_token_expiry",
}


def build_password_context(rounds: int = 12) -> CryptContext:
    return CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)


class SqlCredentialStore(CredentialStore):
    def __init__(self, session: Session, pwd_context: Optional[CryptContext] = None,
                 otp_expiry_minutes: int = 5, clock: Callable[[], datetime] = utcnow):
        self.session = session
        self.pwd_context = pwd_context or build_password_context()
        self.otp_expiry_minutes = otp_expiry_minutes
        self.clock = clock

    def _to_dto(self, admin: Admin) -> AccountDto:
        return AccountDto(
            id=admin.id,
            first_name=admin.first_name,
            last_name=admin.last_name,
            email=admin.email,
            phone=admin.phone,
            is_verified=bool(admin.is_verified),
            otp_code=admin.otp_code,
            otp_expiry=ensure_utc(admin.otp_expiry),
            reset_token=admin.reset_token,
            reset_token_expiry=ensure_utc(admin.reset_token_expiry),
            created_at=ensure_utc(admin.created_at),
        )

    def _get(self, account_id: int) -> Optional[Admin]:
        return self.session.exec(select(Admin).where(Admin.id == account_id)).first()

    def _get_by_email(self, email: str) -> Optional[Admin]:
        return self.session.exec(select(Admin).where(Admin.email == email.strip().lower())).first()

    def create(self, registration: RegistrationData) -> AccountDto:
        email = registration.email.strip().lower()
        if self._get_by_email(email):
            raise DuplicateAccount()
        admin = Admin(
            first_name=registration.first_name,
            last_name=registration.last_name,
            email=email,
            phone=registration.phone,
            password=self.pwd_context.hash(registration.password),
            is_verified=False,
            otp_code=generate_otp(),
            otp_expiry=self.clock() + timedelta(minutes=self.otp_expiry_minutes),
        )
        self.session.add(admin)
        try:
            self.session.commit()
        except IntegrityError:
            # Lost a race with a concurrent registration for the same email
            self.session.rollback()
            raise DuplicateAccount()
        self.session.refresh(admin)
        return self._to_dto(admin)

    def find_by_email(self, email: str) -> Optional[AccountDto]:
        admin = self._get_by_email(email)
        return self._to_dto(admin) if admin else None

    def find_by_id(self, account_id: int) -> Optional[AccountDto]:
        admin = self._get(account_id)
        return self._to_dto(admin) if admin else None

    def find_by_reset_token(self, token: str) -> Optional[AccountDto]:
        if not token:
            return None
        admin = self.session.exec(select(Admin).where(Admin.reset_token == hash_token(token))).first()
        return self._to_dto(admin) if admin else None

    def update(self, account_id: int, **fields: Any) -> Optional[AccountDto]:
        unknown = set(fields) - _MUTABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update admin fields: {sorted(unknown)}")
        admin = self._get(account_id)
        if not admin:
            return None
        for key, value in fields.items():
            setattr(admin, key, value)
        self.session.add(admin)
        self.session.commit()
        self.session.refresh(admin)
        return self._to_dto(admin)

    def verify_password(self, email: str, password: str) -> Optional[AccountDto]:
        admin = self._get_by_email(email)
        if not admin:
            # Burn a hash so unknown emails cost the same as wrong passwords
            self.pwd_context.dummy_verify()
            return None
        if not self.pwd_context.verify(password, admin.password):
            return None
        return self._to_dto(admin)

    def set_password(self, account_id: int, password: str) -> Optional[AccountDto]:
        """Replace the password hash and consume any outstanding reset token."""
        admin = self._get(account_id)
        if not admin:
            return None
        admin.password = self.pwd_context.hash(password)
        admin.reset_token = None
        admin.reset_token_expiry = None
        self.session.add(admin)
        self.session.commit()
        self.session.refresh(admin)
        return self._to_dto(admin)

    def delete(self, account_id: int) -> bool:
        admin = self._get(account_id)
        if not admin:
            return False
        self.session.delete(admin)
        self.session.commit()
        logger.info(f"Deleted admin {account_id}")
        return True
