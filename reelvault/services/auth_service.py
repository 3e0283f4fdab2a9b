"""
Auth service: register / login / refresh / logout / current user.

Every operation runs in one database transaction and either commits or
raises an AuthError subclass for the HTTP layer to render. Refresh tokens are
single-use: redemption consumes the session record with a conditional delete
(SessionStore.redeem), so two concurrent refreshes with the same cookie can
never both succeed.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

from flask import current_app
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from reelvault.models.base_model import utcnow
from reelvault.models.session_store import SessionStore
from reelvault.models.user import User
from reelvault.services.exceptions import (
    EmailTaken,
    InvalidCredentials,
    InvalidInput,
    InvalidOrExpiredRefreshToken,
    NoRefreshToken,
    Unauthenticated,
    UserNotFound,
)
from reelvault.utils.security import (
    create_access_token,
    create_refresh_token,
    hash_password,
    verify_access_token,
    verify_password,
    verify_refresh_token,
)
from reelvault.utils.validators import validate_email, validate_password

logger = logging.getLogger(__name__)


@dataclass
class AuthResult:
    user: User
    access_token: str
    refresh_token: str


class AuthService:
    def __init__(self, storage):
        self._storage = storage
        self._store = SessionStore(storage)

    def register(self, email: str, password: str) -> AuthResult:
        if not validate_email(email):
            raise InvalidInput("Invalid email format")
        validate_password(password).raise_for_error()

        email = email.lower()
        session = self._storage.get_session()
        if session.query(User).filter(User.email == email).first():
            raise EmailTaken()

        user = User(email=email, password_hash=hash_password(password))
        self._storage.new(user)
        try:
            self._storage.flush()
        except IntegrityError:
            # Lost a race with a concurrent registration of the same email
            self._storage.rollback()
            raise EmailTaken()

        result = self._issue_session(user)
        logger.info("Registered user %s", user.id)
        return result

    def login(self, email: str, password: str) -> AuthResult:
        if not validate_email(email):
            raise InvalidInput("Invalid email format")

        session = self._storage.get_session()
        user = session.query(User).filter(User.email == email.lower()).first()
        if not user or not verify_password(password, user.password_hash):
            logger.warning("Failed login attempt")
            raise InvalidCredentials()

        result = self._issue_session(user)
        logger.info("User %s logged in", user.id)
        return result

    def refresh(self, presented: str | None) -> AuthResult:
        """
        Rotate a refresh token: consume its record and issue a fresh session.
        Signature and embedded expiry are not enough; the record must still
        exist, be unexpired and hold exactly the presented string.
        """
        if not presented:
            raise NoRefreshToken()

        claims = verify_refresh_token(presented)
        if claims is None:
            raise InvalidOrExpiredRefreshToken()

        token_id = claims["tokenId"]
        if not self._store.redeem(token_id, presented, utcnow()):
            record = self._store.find_by_id(token_id)
            if record is None:
                self._storage.rollback()
                logger.warning("Refresh token %s not found; already rotated or revoked", token_id)
                raise InvalidOrExpiredRefreshToken("Refresh token not found")
            self._store.delete_by_id(token_id)
            self._storage.save()
            logger.warning("Stale refresh token %s presented; record deleted", token_id)
            raise InvalidOrExpiredRefreshToken()

        user = self._storage.get(User, claims["userId"])
        if user is None:
            self._storage.rollback()
            raise InvalidOrExpiredRefreshToken()

        result = self._issue_session(user)
        logger.info("Rotated refresh token %s for user %s", token_id, user.id)
        return result

    def logout(self, presented: str | None) -> None:
        """End the presented session. Best-effort: never raises for a bad token or store error."""
        if not presented:
            return
        claims = verify_refresh_token(presented)
        if claims is None:
            return
        try:
            self._store.delete_by_id(claims["tokenId"])
            self._storage.save()
        except SQLAlchemyError:
            logger.exception("Could not delete refresh token %s at logout", claims["tokenId"])
            return
        logger.info("User %s logged out", claims["userId"])

    def get_current_user(self, access_token: str | None) -> User:
        # Stateless: the session store is never consulted for access tokens
        claims = verify_access_token(access_token)
        if claims is None:
            raise Unauthenticated()
        user = self._storage.get(User, claims["userId"])
        if user is None:
            raise UserNotFound()
        return user

    def purge_expired_sessions(self) -> int:
        removed = self._store.purge_expired(utcnow())
        self._storage.save()
        logger.info("Purged %d expired refresh token record(s)", removed)
        return removed

    def _issue_session(self, user: User) -> AuthResult:
        # The refresh token embeds its record id, so the row must exist before signing
        expires_at = utcnow() + current_app.config["REFRESH_TOKEN_EXPIRES"]
        record = self._store.create(user.id, expires_at)
        access_token = create_access_token(user.id, user.email)
        refresh_token = create_refresh_token(user.id, record.id)
        self._store.update(record.id, refresh_token)
        self._storage.save()
        return AuthResult(user=user, access_token=access_token, refresh_token=refresh_token)
