"""
Client session manager.

Holds the signed-in user and access token in memory only. The refresh token
never reaches this object: it lives in the HTTP-only cookie kept by the
underlying requests.Session, exactly like a browser cookie jar. Because nothing
readable survives a restart, mount() always starts with a silent refresh.

While an access token is held a renewal timer calls refresh_auth() every
`refresh_interval` (one minute short of the 15 minute access token lifetime).
The timer restarts whenever a new token is set and stops when the token is
cleared or the manager is unmounted.
"""
from __future__ import annotations

import logging
import threading
from datetime import timedelta
from typing import Any, Dict, Optional

import requests

logger = logging.getLogger(__name__)

DEFAULT_REFRESH_INTERVAL = timedelta(minutes=14)


class AuthRequestError(Exception):
    """Login/registration rejected; `message` is the server's reason, verbatim."""

    def __init__(self, message: str, status: int | None = None):
        self.message = message
        self.status = status
        super().__init__(message)


class ClientSessionManager:
    def __init__(
        self,
        base_url: str,
        http: Optional[requests.Session] = None,
        refresh_interval: timedelta = DEFAULT_REFRESH_INTERVAL,
        timeout: Optional[float] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.http = http if http is not None else requests.Session()
        self.refresh_interval = refresh_interval
        self.timeout = timeout

        self.user: Optional[Dict[str, Any]] = None
        self.access_token: Optional[str] = None
        self.is_loading = True

        self._lock = threading.RLock()
        self._timer: Optional[threading.Timer] = None
        self._mounted = False

    # lifecycle

    def mount(self) -> None:
        """Restore the session from the refresh cookie, then stop loading."""
        with self._lock:
            self._mounted = True
        self.refresh_auth()
        with self._lock:
            self.is_loading = False

    def unmount(self) -> None:
        with self._lock:
            self._mounted = False
            self._stop_timer()

    def __enter__(self):
        self.mount()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.unmount()
        return False

    # state

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    def auth_headers(self) -> Dict[str, str]:
        token = self.access_token
        return {"Authorization": f"Bearer {token}"} if token else {}

    def _set_session(self, user: Optional[Dict[str, Any]], access_token: Optional[str]) -> None:
        with self._lock:
            self.user = user
            self.access_token = access_token
            self._stop_timer()
            if access_token and self._mounted:
                self._start_timer()

    def _clear_session(self) -> None:
        self._set_session(None, None)

    # renewal timer

    def _start_timer(self) -> None:
        timer = threading.Timer(self.refresh_interval.total_seconds(), self._on_timer)
        timer.daemon = True
        self._timer = timer
        timer.start()

    def _stop_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _on_timer(self) -> None:
        logger.debug("Renewal timer fired")
        self.refresh_auth()

    # actions

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def refresh_auth(self) -> None:
        """Silent renewal. Any failure, network or rejection, signs the viewer out."""
        try:
            response = self.http.post(self._url("/auth/refresh"), timeout=self.timeout)
        except requests.RequestException:
            logger.warning("Token refresh failed", exc_info=True)
            self._clear_session()
            return

        if response.ok:
            try:
                data = response.json()
                self._set_session(data["user"], data["accessToken"])
                return
            except (ValueError, KeyError, TypeError):
                logger.warning("Malformed refresh response")
        self._clear_session()

    def login(self, email: str, password: str) -> None:
        self._credentials_request("/auth/login", email, password, "Login failed")

    def register(self, email: str, password: str) -> None:
        self._credentials_request("/auth/register", email, password, "Registration failed")

    def _credentials_request(self, path: str, email: str, password: str, fallback: str) -> None:
        response = self.http.post(
            self._url(path), json={"email": email, "password": password}, timeout=self.timeout
        )
        if not response.ok:
            raise AuthRequestError(_error_message(response, fallback), response.status_code)
        data = response.json()
        self._set_session(data["user"], data["accessToken"])

    def logout(self) -> None:
        try:
            self.http.post(self._url("/auth/logout"), timeout=self.timeout)
        except requests.RequestException:
            logger.warning("Logout request failed", exc_info=True)
        finally:
            self._clear_session()


def _error_message(response, fallback: str) -> str:
    try:
        data = response.json()
    except ValueError:
        return fallback
    if isinstance(data, dict):
        return data.get("message") or data.get("error") or fallback
    return fallback
