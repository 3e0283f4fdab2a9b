from reelvault.client.guard import GuardState, RouteGuard
from reelvault.client.session import AuthRequestError, ClientSessionManager

__all__ = ["AuthRequestError", "ClientSessionManager", "GuardState", "RouteGuard"]
