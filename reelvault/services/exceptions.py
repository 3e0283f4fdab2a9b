"""
Client-facing auth failures. Each carries the HTTP status and error code that
api.errors renders into the uniform error envelope.
"""


class AuthError(Exception):
    status = 400
    code = "BAD_REQUEST"
    default_message = "Bad request"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidInput(AuthError):
    status = 400
    code = "INVALID_INPUT"
    default_message = "Invalid input"


class WeakPassword(AuthError):
    status = 400
    code = "WEAK_PASSWORD"
    default_message = "Password is too weak"


class EmailTaken(AuthError):
    status = 409
    code = "EMAIL_TAKEN"
    default_message = "User with this email already exists"


class InvalidCredentials(AuthError):
    # Same message for unknown email and wrong password
    status = 401
    code = "INVALID_CREDENTIALS"
    default_message = "Invalid email or password"


class Unauthenticated(AuthError):
    status = 401
    code = "UNAUTHENTICATED"
    default_message = "Invalid or expired access token"


class InvalidOrExpiredRefreshToken(AuthError):
    status = 401
    code = "INVALID_REFRESH_TOKEN"
    default_message = "Invalid or expired refresh token"


class NoRefreshToken(InvalidOrExpiredRefreshToken):
    default_message = "No refresh token provided"


class UserNotFound(AuthError):
    status = 404
    code = "NOT_FOUND"
    default_message = "User not found"
