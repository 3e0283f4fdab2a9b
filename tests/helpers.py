"""Cookie and header helpers shared by the API and client tests."""
from __future__ import annotations

COOKIE_NAME = "refreshToken"
PASSWORD = "Password1"


def refresh_cookie(response) -> str | None:
    """Value of the refreshToken Set-Cookie header, or None."""
    for header in response.headers.getlist("Set-Cookie"):
        name, _, rest = header.partition("=")
        if name == COOKIE_NAME:
            return rest.split(";", 1)[0]
    return None


def set_cookie_attrs(response) -> dict:
    for header in response.headers.getlist("Set-Cookie"):
        if header.startswith(COOKIE_NAME + "="):
            attrs = {}
            for part in header.split(";")[1:]:
                key, _, value = part.strip().partition("=")
                attrs[key.lower()] = value
            return attrs
    return {}


def with_cookie(token: str) -> dict:
    return {"Cookie": f"{COOKIE_NAME}={token}"}


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}
