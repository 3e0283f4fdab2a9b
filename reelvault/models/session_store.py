"""
Session store: durable record of outstanding refresh-token grants.

Creating a session is a three-step sequence because the signed token embeds
the id of its own row:

    record = store.create(user_id, expires_at)   # token is "" for now
    token = create_refresh_token(user_id, record.id)
    store.update(record.id, token)

Nothing here commits; the caller owns the transaction.
"""
from __future__ import annotations

from datetime import datetime

from sqlalchemy import delete, update

from reelvault.models.refresh_token import RefreshToken


class SessionStore:
    def __init__(self, storage):
        self._storage = storage

    def create(self, user_id: str, expires_at: datetime) -> RefreshToken:
        record = RefreshToken(user_id=user_id, token="", expires_at=expires_at)
        self._storage.new(record)
        self._storage.flush()
        return record

    def update(self, record_id: str, token: str) -> None:
        self._storage.get_session().execute(
            update(RefreshToken).where(RefreshToken.id == record_id).values(token=token)
        )

    def find_by_id(self, record_id: str) -> RefreshToken | None:
        return self._storage.get(RefreshToken, record_id)

    def delete_by_id(self, record_id: str) -> bool:
        result = self._storage.get_session().execute(
            delete(RefreshToken).where(RefreshToken.id == record_id)
        )
        return result.rowcount == 1

    def delete_all_for_user(self, user_id: str) -> int:
        result = self._storage.get_session().execute(
            delete(RefreshToken).where(RefreshToken.user_id == user_id)
        )
        return result.rowcount or 0

    def redeem(self, record_id: str, token: str, now: datetime) -> bool:
        """
        Atomically consume a live record: delete it only if it still holds
        exactly `token` and has not expired. True iff this call removed it.

        The row-level write makes concurrent redemptions of one token
        serialize; whoever comes second deletes nothing.
        """
        result = self._storage.get_session().execute(
            delete(RefreshToken).where(
                RefreshToken.id == record_id,
                RefreshToken.token == token,
                RefreshToken.expires_at > now,
            )
        )
        return result.rowcount == 1

    def purge_expired(self, now: datetime) -> int:
        result = self._storage.get_session().execute(
            delete(RefreshToken).where(RefreshToken.expires_at <= now)
        )
        return result.rowcount or 0
