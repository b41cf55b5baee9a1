"""gitshelf exception classes."""


class GitShelfError(Exception):
    """Base exception for all gitshelf errors."""

    def __init__(
        self, code: str, message: str, status_code: int | None = None
    ) -> None:
        self.code = code
        self.message = message
        self.status_code = status_code
        super().__init__(f"[{code}] {message}")


class ConfigurationError(GitShelfError):
    """Raised when client configuration is invalid or missing."""

    def __init__(self, message: str) -> None:
        super().__init__("CONFIGURATION_ERROR", message)


class AuthenticationError(GitShelfError):
    """Raised when the access token is rejected or expired.

    Not recoverable locally: the host must re-authenticate.
    """

    pass


class AuthorizationError(GitShelfError):
    """Raised when the token is valid but lacks access."""

    pass


class NotFoundError(GitShelfError):
    """Raised when a path or repository does not exist."""

    pass


class ConflictError(GitShelfError):
    """Raised on a stale content hash or when creating over an existing file.

    Callers should reload the latest version before retrying.
    """

    pass


class BackendError(GitShelfError):
    """Raised on transport failures and unexpected backend responses."""

    pass


class RateLimitedError(BackendError):
    """Raised when the backend's rate budget is exhausted."""

    def __init__(
        self,
        code: str,
        message: str,
        retry_after: int,
        status_code: int | None = None,
    ) -> None:
        super().__init__(code, message, status_code)
        self.retry_after = retry_after


class ValidationError(BackendError):
    """Raised on other 4xx responses."""

    pass


class ServerError(BackendError):
    """Raised on server errors (5xx) and connection failures."""

    pass
