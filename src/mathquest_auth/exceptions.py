"""Authentication exceptions.

These exceptions are raised by the mathquest_auth package and should be
caught and handled by the application layer.
"""


class AuthError(Exception):
    """Base exception for all authentication errors."""

    def __init__(self, message: str = "Authentication error"):
        self.message = message
        super().__init__(self.message)


class InvalidTokenError(AuthError):
    """Raised when a JWT token has a bad signature or is malformed."""

    def __init__(self, message: str = "Invalid token"):
        super().__init__(message)


class ExpiredTokenError(InvalidTokenError):
    """Raised when a correctly signed JWT token is past its expiry."""

    def __init__(self, message: str = "Token has expired"):
        super().__init__(message)


class WeakPasswordError(AuthError):
    """Raised when a password doesn't meet strength requirements."""

    def __init__(self, message: str = "Password does not meet requirements"):
        super().__init__(message)


class InvalidCredentialsError(AuthError):
    """Raised when username/email or password is incorrect during login."""

    def __init__(self, message: str = "Bad credentials"):
        super().__init__(message)
