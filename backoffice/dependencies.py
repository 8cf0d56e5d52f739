import logging
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlmodel import Session

from .application.ports.credential_store import AccountDto
from .application.ports.notification_sender import NotificationSender
from .application.ports.rate_limiter import RateLimiter
from .application.services.account_service import AccountService
from .application.services.catalog_service import CatalogService
from .application.services.request_authorizer import RequestAuthorizer
from .application.services.token_service import TokenService
from .core.config import Settings, get_settings
from .database import get_session
from .db.models import Course, Invoice, Learner, Track
from .infrastructure.audit.std_logger import StdAuditLogger
from .infrastructure.notifications.composite_sender import CompositeNotificationSender
from .infrastructure.notifications.logging_sender import LoggingNotificationSender
from .infrastructure.notifications.smtp_sender import SmtpEmailSender
from .infrastructure.notifications.twilio_sender import TwilioSmsSender
from .infrastructure.persistence.sqlalchemy.repositories.admin_repository_sql import (
    SqlCredentialStore,
    build_password_context,
)
from .infrastructure.persistence.sqlalchemy.repositories.crud_repository_sql import SqlCrudRepository
from .infrastructure.persistence.sqlalchemy.repositories.stats_repository_sql import SqlStatsRepository
from .infrastructure.rate_limit.memory_rate_limiter import InMemoryRateLimiter
from .infrastructure.rate_limit.redis_rate_limiter import RedisRateLimiter

logger = logging.getLogger(__name__)

# Auth scheme
bearer_scheme = HTTPBearer(auto_error=False)

_audit_logger = StdAuditLogger()


def build_notification_sender(settings: Settings) -> NotificationSender:
    senders = []
    for backend in settings.notification_backends_list:
        if backend == "log":
            senders.append(LoggingNotificationSender())
        elif backend == "smtp":
            senders.append(SmtpEmailSender(settings))
        elif backend == "twilio":
            senders.append(TwilioSmsSender(settings))
        else:
            raise ValueError(f"Unknown notification backend: {backend}")
    if not senders:
        senders.append(LoggingNotificationSender())
    if all(isinstance(s, LoggingNotificationSender) for s in senders) and not settings.DEBUG:
        logger.warning("Only the log notification backend is configured; OTP codes and reset links will not be delivered")
    return senders[0] if len(senders) == 1 else CompositeNotificationSender(senders)


def build_rate_limiter(settings: Settings) -> RateLimiter:
    if settings.REDIS_URL:
        logger.info("Using Redis rate limiter")
        return RedisRateLimiter(url=settings.REDIS_URL)
    return InMemoryRateLimiter()


def get_notification_sender(request: Request) -> NotificationSender:
    return request.app.state.notification_sender


def get_rate_limiter(request: Request) -> RateLimiter:
    return request.app.state.otp_rate_limiter


def get_credential_store(
    request: Request,
    session: Session = Depends(get_session),
    settings: Settings = Depends(get_settings),
) -> SqlCredentialStore:
    pwd_context = getattr(request.app.state, "pwd_context", None) or build_password_context(settings.BCRYPT_ROUNDS)
    return SqlCredentialStore(session, pwd_context=pwd_context, otp_expiry_minutes=settings.OTP_EXPIRY_MINUTES)


def get_token_service(settings: Settings = Depends(get_settings)) -> TokenService:
    return TokenService(settings)


def get_account_service(
    store: SqlCredentialStore = Depends(get_credential_store),
    tokens: TokenService = Depends(get_token_service),
    notifier: NotificationSender = Depends(get_notification_sender),
    rate_limiter: RateLimiter = Depends(get_rate_limiter),
    settings: Settings = Depends(get_settings),
) -> AccountService:
    return AccountService(
        store=store,
        tokens=tokens,
        notifier=notifier,
        settings=settings,
        audit=_audit_logger,
        rate_limiter=rate_limiter,
    )


def get_current_admin(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    store: SqlCredentialStore = Depends(get_credential_store),
    tokens: TokenService = Depends(get_token_service),
) -> AccountDto:
    token = credentials.credentials if credentials else None
    admin = RequestAuthorizer(store=store, tokens=tokens).authorize(token)
    request.state.admin = admin
    return admin


def get_catalog_service(session: Session = Depends(get_session)) -> CatalogService:
    return CatalogService(
        tracks=SqlCrudRepository(session, Track, search_fields=("name", "instructor")),
        courses=SqlCrudRepository(session, Course, search_fields=("title", "instructor")),
        learners=SqlCrudRepository(session, Learner, search_fields=("first_name", "last_name", "email")),
        invoices=SqlCrudRepository(session, Invoice, search_fields=("invoice_number", "notes")),
        stats=SqlStatsRepository(session),
    )
