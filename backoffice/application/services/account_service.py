import hmac
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Callable, Optional

from ..ports.audit_logger import AuditLogger
from ..ports.credential_store import CredentialStore, RegistrationData, AccountDto
from ..ports.notification_sender import Notification, NotificationSender
from ..ports.rate_limiter import RateLimiter
from .token_service import TokenService
from ...core.config import Settings
from ...exceptions import (
    AccountNotFound,
    CodeExpired,
    DuplicateAccount,
    InvalidCode,
    InvalidCredentials,
    InvalidOrExpiredResetToken,
    NotVerified,
    TooManyRequests,
)
from ...utils import ensure_utc, generate_otp, generate_reset_token, hash_token, utcnow

logger = logging.getLogger(__name__)

FORGOT_PASSWORD_MESSAGE = "If an account with that email exists, we've sent password reset instructions."


@dataclass
class SessionResult:
    token: str
    account: AccountDto


@dataclass
class AccountService:
    """Registration, OTP verification, login and password reset for admin accounts.

    Expiry of OTP codes and reset tokens is evaluated lazily against ``clock``;
    nothing sweeps stale rows.
    """

    store: CredentialStore
    tokens: TokenService
    notifier: NotificationSender
    settings: Settings
    audit: Optional[AuditLogger] = None
    rate_limiter: Optional[RateLimiter] = None
    clock: Callable[[], datetime] = field(default=utcnow)

    async def register(self, registration: RegistrationData) -> AccountDto:
        registration.email = registration.email.strip().lower()
        if self.store.find_by_email(registration.email):
            self._audit("register", registration.email, success=False, details={"reason": "duplicate"})
            raise DuplicateAccount()

        account = self.store.create(registration)
        try:
            await self.notifier.send(Notification(
                kind="otp",
                email=account.email,
                name=account.first_name,
                phone=account.phone,
                subject="Verify Your Account",
                body=(
                    f"Your verification code is: {account.otp_code}\n"
                    f"This code expires in {self.settings.OTP_EXPIRY_MINUTES} minutes."
                ),
            ))
        except Exception:
            # Undelivered code: drop the row so the same email can register again
            logger.error(f"Verification code dispatch failed, removing admin {account.id}")
            self.store.delete(account.id)
            self._audit("register", account.email, admin_id=account.id, success=False, details={"reason": "dispatch_failed"})
            raise

        logger.info(f"Registered admin {account.id}, verification pending")
        self._audit("register", account.email, admin_id=account.id)
        return account

    def verify_otp(self, email: str, otp_code: str) -> SessionResult:
        email = email.strip().lower()
        account = self.store.find_by_email(email)
        if not account:
            raise AccountNotFound()

        if not account.otp_code or not hmac.compare_digest(account.otp_code, otp_code):
            self._audit("verify_otp", email, admin_id=account.id, success=False, details={"reason": "mismatch"})
            raise InvalidCode()

        if account.otp_expiry is None or self._now() >= ensure_utc(account.otp_expiry):
            self._audit("verify_otp", email, admin_id=account.id, success=False, details={"reason": "expired"})
            raise CodeExpired()

        # Issue first so a signing failure leaves the code unconsumed
        token = self.tokens.issue(account.id)
        updated = self.store.update(account.id, is_verified=True, otp_code=None, otp_expiry=None)
        if updated is None:
            raise AccountNotFound()

        self._audit("verify_otp", email, admin_id=account.id)
        return SessionResult(token=token, account=updated)

    async def resend_otp(self, email: str) -> None:
        email = email.strip().lower()
        self._check_rate(f"otp:{email}")

        account = self.store.find_by_email(email)
        if not account:
            raise AccountNotFound()

        otp_code = generate_otp()
        otp_expiry = self._now() + timedelta(minutes=self.settings.OTP_EXPIRY_MINUTES)
        self.store.update(account.id, otp_code=otp_code, otp_expiry=otp_expiry)
        try:
            await self.notifier.send(Notification(
                kind="otp",
                email=account.email,
                name=account.first_name,
                phone=account.phone,
                subject="New Verification Code",
                body=(
                    f"Your new verification code is: {otp_code}\n"
                    f"This code expires in {self.settings.OTP_EXPIRY_MINUTES} minutes."
                ),
            ))
        except Exception:
            # The previous code stays valid when the new one never arrived
            self.store.update(account.id, otp_code=account.otp_code, otp_expiry=account.otp_expiry)
            self._audit("resend_otp", email, admin_id=account.id, success=False, details={"reason": "dispatch_failed"})
            raise
        self._audit("resend_otp", email, admin_id=account.id)

    def login(self, email: str, password: str) -> SessionResult:
        email = email.strip().lower()
        account = self.store.verify_password(email, password)
        if not account:
            # Same error for unknown email and wrong password
            self._audit("login", email, success=False)
            raise InvalidCredentials()

        if not account.is_verified:
            self._audit("login", email, admin_id=account.id, success=False, details={"reason": "not_verified"})
            raise NotVerified()

        token = self.tokens.issue(account.id)
        self._audit("login", email, admin_id=account.id)
        return SessionResult(token=token, account=account)

    async def forgot_password(self, email: str) -> str:
        email = email.strip().lower()
        self._check_rate(f"reset:{email}")

        account = self.store.find_by_email(email)
        if not account:
            self._audit("forgot_password", email, success=False, details={"reason": "unknown_email"})
            return FORGOT_PASSWORD_MESSAGE

        reset_token = generate_reset_token()
        expiry = self._now() + timedelta(minutes=self.settings.RESET_TOKEN_EXPIRY_MINUTES)
        self.store.update(account.id, reset_token=hash_token(reset_token), reset_token_expiry=expiry)

        link = f"{self.settings.FRONTEND_URL.rstrip('/')}/reset-password?token={reset_token}"
        try:
            await self.notifier.send(Notification(
                kind="reset_password",
                email=account.email,
                name=account.first_name,
                subject="Password Reset",
                body=(
                    f"Click the following link to reset your password: {link}\n"
                    f"This link expires in {self.settings.RESET_TOKEN_EXPIRY_MINUTES} minutes."
                ),
            ))
        except Exception:
            self.store.update(account.id, reset_token=account.reset_token, reset_token_expiry=account.reset_token_expiry)
            self._audit("forgot_password", email, admin_id=account.id, success=False, details={"reason": "dispatch_failed"})
            raise
        self._audit("forgot_password", email, admin_id=account.id)
        return FORGOT_PASSWORD_MESSAGE

    def reset_password(self, token: str, password: str) -> None:
        account = self.store.find_by_reset_token(token)
        if not account:
            raise InvalidOrExpiredResetToken()

        if account.reset_token_expiry is None or self._now() >= ensure_utc(account.reset_token_expiry):
            self._audit("reset_password", account.email, admin_id=account.id, success=False, details={"reason": "expired"})
            raise InvalidOrExpiredResetToken()

        self.store.set_password(account.id, password)
        self._audit("reset_password", account.email, admin_id=account.id)

    def _now(self) -> datetime:
        return ensure_utc(self.clock())

    def _check_rate(self, key: str) -> None:
        if self.rate_limiter is None:
            return
        allowed = self.rate_limiter.allow(
            key,
            max_requests=self.settings.OTP_RATE_LIMIT_MAX_REQUESTS,
            window_seconds=self.settings.OTP_RATE_LIMIT_WINDOW_SECONDS,
        )
        if not allowed:
            logger.warning(f"Rate limit exceeded for {key.split(':', 1)[0]} flow")
            raise TooManyRequests()

    def _audit(self, action: str, email: str, admin_id: Optional[int] = None, success: bool = True, details: Optional[dict] = None) -> None:
        if self.audit is not None:
            self.audit.log(action, email, admin_id=admin_id, success=success, details=details)
