from __future__ import annotations
from functools import wraps
from flask import request, g

from reelvault.services.exceptions import Unauthenticated


def bearer_token_required():
    """
    Require an `Authorization: Bearer <token>` header and expose the raw
    token as g.access_token. Verification is left to the auth service.
    """
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            auth = request.headers.get("Authorization", "")
            if not auth.startswith("Bearer "):
                raise Unauthenticated("No access token provided")
            token = auth.split(" ", 1)[1].strip()
            if not token:
                raise Unauthenticated("No access token provided")
            g.access_token = token
            return fn(*args, **kwargs)

        return wrapper

    return decorator
