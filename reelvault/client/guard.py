from __future__ import annotations

from typing import Callable, NamedTuple

from reelvault.client.session import ClientSessionManager


class GuardState(NamedTuple):
    is_authenticated: bool
    is_loading: bool


class RouteGuard:
    """
    Sends an unauthenticated viewer to `redirect_url` once loading is done.

    The redirect is a one-shot side effect through `navigate`; it does not
    block rendering. Callers must not show protected content while
    `is_loading` is True or the viewer is unauthenticated.
    """

    def __init__(
        self,
        manager: ClientSessionManager,
        navigate: Callable[[str], None],
        redirect_url: str = "/login",
    ):
        self.manager = manager
        self.navigate = navigate
        self.redirect_url = redirect_url
        self._redirected = False

    def check(self) -> GuardState:
        state = GuardState(self.manager.is_authenticated, self.manager.is_loading)
        if not state.is_loading and not state.is_authenticated and not self._redirected:
            self._redirected = True
            self.navigate(self.redirect_url)
        return state
