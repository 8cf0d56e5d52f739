import logging
from dataclasses import dataclass
from typing import Optional

from ..ports.credential_store import CredentialStore, AccountDto
from .token_service import TokenService
from ...exceptions import Forbidden, InvalidSessionToken, Unauthorized

logger = logging.getLogger(__name__)


@dataclass
class RequestAuthorizer:
    store: CredentialStore
    tokens: TokenService

    def authorize(self, token: Optional[str]) -> AccountDto:
        if not token:
            raise Unauthorized()

        try:
            account_id = self.tokens.verify(token)
        except InvalidSessionToken:
            raise Forbidden()

        # Re-resolve on every call so deleted accounts lose access immediately
        account = self.store.find_by_id(account_id)
        if not account:
            logger.warning(f"Token references missing admin {account_id}")
            raise Unauthorized("Invalid token")
        return account
