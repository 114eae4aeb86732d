"""Exceptions raised while negotiating or revoking a Vault token.

Every failure is raised, never logged in its place.  Lower layers are chained
with ``raise ... from exc`` so the original cause stays reachable from the
error the caller finally sees.
"""

from __future__ import annotations


class VaultAuthError(Exception):
    """Base class for every auth-method failure."""


class ConfigurationError(VaultAuthError):
    """Raised when a required parameter resolved to an empty value."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class LocalIOError(VaultAuthError):
    """Raised when a token or service-account file cannot be read."""

    def __init__(self, message: str, path: str | None = None) -> None:
        super().__init__(message)
        self.path = path


class EmptyTokenFileError(ConfigurationError, LocalIOError):
    """Raised when a token file exists but holds nothing usable."""

    def __init__(self, message: str, path: str, field: str | None = None) -> None:
        ConfigurationError.__init__(self, message, field=field)
        self.path = path


class BackendExchangeError(VaultAuthError):
    """Raised when a login or revoke write to Vault fails."""

    def __init__(self, message: str, path: str | None = None) -> None:
        super().__init__(message)
        self.path = path


class AuthCancelledError(VaultAuthError):
    """Raised when the caller's context was cancelled."""


class AuthTimeoutError(AuthCancelledError):
    """Raised when the caller's context deadline has passed."""


class AggregateAuthError(VaultAuthError):
    """Raised when every member of a composite auth method failed.

    All member failures are kept in ``failures`` as ``(method name, error)``
    pairs, in the order they were tried.
    """

    def __init__(self, failures: list[tuple[str, VaultAuthError]]) -> None:
        self.failures = list(failures)
        if not self.failures:
            message = "unable to authenticate with vault: no auth methods configured"
        else:
            details = "; ".join(f"{name}: {exc}" for name, exc in self.failures)
            message = (
                "unable to authenticate with vault by any configured method. "
                f"Last error was: {self.last}. All errors: {details}"
            )
        super().__init__(message)

    @property
    def last(self) -> VaultAuthError | None:
        return self.failures[-1][1] if self.failures else None


class LogoutError(VaultAuthError):
    """Raised when a composite auth method cannot log out."""
