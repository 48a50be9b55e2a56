"""Exception hierarchy for diffcritic."""


class DiffcriticError(Exception):
    """Base exception for all diffcritic errors."""


class NoWorkspaceError(DiffcriticError):
    """No active file or no project root could be resolved."""


class NoRepositoryError(DiffcriticError):
    """Git root search exhausted every anchor."""


class ConfigurationError(DiffcriticError):
    """Configuration read/write/validation failed, or the credential is missing/malformed."""


class ClientError(DiffcriticError):
    """Review service communication failed."""


class AuthenticationError(ClientError):
    """The service rejected the credential (HTTP 401)."""


class RateLimitError(ClientError):
    """The service throttled the request (HTTP 429)."""


class ServiceError(ClientError):
    """The service answered with another non-2xx status or an unusable body."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class NetworkError(ClientError):
    """No response was received (connection failure or timeout)."""


class NoActiveTargetError(DiffcriticError):
    """Injection has nowhere to write."""


class AutomationError(DiffcriticError):
    """The external UI-automation script could not be run."""
