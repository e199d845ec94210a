from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional, Union

from auth_service.models.db_storage import DBStorage
from auth_service.models.refresh_token import RefreshToken
from auth_service.models.user import User
from auth_service.services.token_service import REFRESH_TOKEN_TTL

logger = logging.getLogger(__name__)

TokenId = Union[int, str]


def _as_id(token_id: TokenId) -> Optional[int]:
    try:
        return int(token_id)
    except (TypeError, ValueError):
        return None


class RefreshTokenStore:
    """
    Registry of live refresh tokens. A row's existence is what makes a
    refresh token valid; a user may hold any number of rows (one per session).
    """

    def __init__(self, storage: DBStorage):
        self.storage = storage

    def _query(self):
        return self.storage.get_session().query(RefreshToken)

    def persist(self, user: User) -> RefreshToken:
        record = RefreshToken(
            user_id=user.id,
            expires_at=datetime.now(timezone.utc) + REFRESH_TOKEN_TTL,
        )
        self.storage.new(record)
        self.storage.save()
        logger.debug("Refresh token persisted", extra={"token_id": record.id, "user_id": user.id})
        return record

    def revoke(self, token_id: TokenId) -> None:
        """Delete the record. Deleting an id that does not exist is not an error."""
        pk = _as_id(token_id)
        if pk is None:
            return
        self._query().filter(RefreshToken.id == pk).delete(synchronize_session="fetch")
        self.storage.save()

    def get(self, token_id: TokenId) -> Optional[RefreshToken]:
        pk = _as_id(token_id)
        if pk is None:
            return None
        return self._query().filter(RefreshToken.id == pk).first()

    def exists(self, token_id: TokenId) -> bool:
        pk = _as_id(token_id)
        if pk is None:
            return False
        return self.get(pk) is not None

    def count_for_user(self, user_id: int) -> int:
        return self._query().filter(RefreshToken.user_id == user_id).count()

    def purge_expired(self, now: Optional[datetime] = None) -> int:
        """Remove rows whose advisory expiry has passed. Returns the number removed."""
        now = now or datetime.now(timezone.utc)
        removed = self._query().filter(RefreshToken.expires_at < now).delete(synchronize_session="fetch")
        self.storage.save()
        logger.info("Purged expired refresh tokens", extra={"count": removed})
        return removed
