"""
security helpers:
- Argon2 password hashing via argon2-cffi
- Access/refresh JWT creation and verification via PyJWT

Access and refresh tokens are signed with separate secrets, so a token minted
for one class never verifies as the other. Verification never raises: any
signature, expiry, issuer or payload problem yields None.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import jwt
from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError
from flask import current_app

logger = logging.getLogger(__name__)

ACCESS_CLAIMS = ("userId", "email")
REFRESH_CLAIMS = ("userId", "tokenId")


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _hasher() -> PasswordHasher:
    """One PasswordHasher per app, built from its PASSWORD_HASH_* settings."""
    ph = current_app.extensions.get("argon2")
    if ph is None:
        ph = PasswordHasher(
            time_cost=current_app.config["PASSWORD_HASH_TIME_COST"],
            memory_cost=current_app.config["PASSWORD_HASH_MEMORY_COST"],
            parallelism=current_app.config["PASSWORD_HASH_PARALLELISM"],
        )
        current_app.extensions["argon2"] = ph
    return ph


def hash_password(password: str) -> str:
    """Hash a plaintext password using Argon2; salt and cost live in the output."""
    return _hasher().hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a plaintext password using argon2. False on mismatch or a malformed hash."""
    try:
        return _hasher().verify(password_hash, password)
    except VerifyMismatchError:
        return False
    except (VerificationError, InvalidHashError):
        logger.warning("Stored password hash could not be verified")
        return False


def _encode(claims: Dict[str, Any], secret_key: str, expires_key: str) -> str:
    now = _now()
    payload = {
        **claims,
        "iss": current_app.config["JWT_ISSUER"],
        "iat": int(now.timestamp()),
        "exp": int((now + current_app.config[expires_key]).timestamp()),
    }
    return jwt.encode(
        payload, current_app.config[secret_key], algorithm=current_app.config["JWT_ALGORITHM"]
    )


def _decode(token: str, secret_key: str, required: tuple) -> Optional[Dict[str, Any]]:
    if not token or not isinstance(token, str):
        return None
    try:
        # exp/iat are checked below against _now() so signing and
        # verification share one clock
        decoded = jwt.decode(
            token,
            current_app.config[secret_key],
            algorithms=[current_app.config["JWT_ALGORITHM"]],
            issuer=current_app.config["JWT_ISSUER"],
            options={"require": ["exp", "iat", "iss"], "verify_exp": False, "verify_iat": False},
        )
    except jwt.InvalidTokenError:
        return None
    exp = decoded["exp"]
    if not isinstance(exp, (int, float)) or exp <= _now().timestamp():
        return None
    if not all(isinstance(decoded.get(k), str) and decoded[k] for k in required):
        return None
    return decoded


def create_access_token(user_id: str, email: str) -> str:
    """Short-lived bearer token: {userId, email}, ACCESS_TOKEN_EXPIRES from now."""
    return _encode({"userId": user_id, "email": email}, "JWT_ACCESS_SECRET", "ACCESS_TOKEN_EXPIRES")


def create_refresh_token(user_id: str, token_id: str) -> str:
    """Long-lived cookie token: {userId, tokenId}, REFRESH_TOKEN_EXPIRES from now."""
    return _encode(
        {"userId": user_id, "tokenId": token_id}, "JWT_REFRESH_SECRET", "REFRESH_TOKEN_EXPIRES"
    )


def verify_access_token(token: str) -> Optional[Dict[str, Any]]:
    return _decode(token, "JWT_ACCESS_SECRET", ACCESS_CLAIMS)


def verify_refresh_token(token: str) -> Optional[Dict[str, Any]]:
    return _decode(token, "JWT_REFRESH_SECRET", REFRESH_CLAIMS)
