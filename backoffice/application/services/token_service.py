import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Callable

import jwt

from ...core.config import Settings
from ...exceptions import TokenExpired, TokenInvalid
from ...utils import utcnow

logger = logging.getLogger(__name__)


@dataclass
class TokenService:
    """Mints and verifies signed session tokens (HS256 JWT)."""

    settings: Settings
    clock: Callable[[], datetime] = field(default=utcnow)

    def issue(self, account_id: int) -> str:
        # Ensure SECRET_KEY is properly set
        if not self.settings.secret_key_configured:
            raise ValueError("SECRET_KEY not properly configured")
        now = self.clock()
        payload = {
            "sub": str(account_id),
            "adminId": account_id,
            "iat": now,
            "exp": now + timedelta(days=self.settings.ACCESS_TOKEN_EXPIRE_DAYS),
        }
        return jwt.encode(payload, self.settings.SECRET_KEY, algorithm=self.settings.ALGORITHM)

    def verify(self, token: str) -> int:
        """Return the account id bound to token, or raise TokenExpired/TokenInvalid."""
        if not self.settings.secret_key_configured:
            logger.error("JWT rejected: SECRET_KEY not properly configured")
            raise TokenInvalid("signing secret not configured")

        try:
            payload = jwt.decode(
                token,
                self.settings.SECRET_KEY,
                algorithms=[self.settings.ALGORITHM],
                options={"require": ["exp", "sub"], "verify_exp": False, "verify_iat": False},
            )
        except jwt.InvalidTokenError as e:
            logger.warning(f"JWT rejected: {e}")
            raise TokenInvalid(str(e))

        # Expiry is checked against the injected clock rather than the wall clock
        exp = datetime.fromtimestamp(int(payload["exp"]), tz=timezone.utc)
        if self.clock() >= exp:
            logger.info("JWT expired")
            raise TokenExpired("token expired")

        try:
            return int(payload["sub"])
        except (TypeError, ValueError):
            raise TokenInvalid("invalid subject")
