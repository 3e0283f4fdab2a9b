"""Credential format and strength checks."""
from __future__ import annotations

import re
from typing import NamedTuple, Optional

from reelvault.services.exceptions import WeakPassword

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
UPPERCASE_RE = re.compile(r"[A-Z]")
SPECIAL_RE = re.compile(r"[^a-zA-Z0-9]")

MIN_PASSWORD_LENGTH = 8


class PasswordCheck(NamedTuple):
    valid: bool
    error: Optional[str] = None

    def raise_for_error(self) -> None:
        if not self.valid:
            raise WeakPassword(self.error)


def validate_email(email: str) -> bool:
    return isinstance(email, str) and EMAIL_RE.fullmatch(email) is not None


def validate_password(password: str) -> PasswordCheck:
    """
    Length first, then character classes; reports the first rule broken.
    No upper bound on length.
    """
    if len(password) < MIN_PASSWORD_LENGTH:
        return PasswordCheck(False, f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")

    if not (UPPERCASE_RE.search(password) or SPECIAL_RE.search(password)):
        return PasswordCheck(
            False, "Password must contain at least one uppercase letter or special character"
        )

    return PasswordCheck(True)
