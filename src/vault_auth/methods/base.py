"""The auth-method contract and the helpers shared by remote exchanges.

Pattern: Strategy
------------------
An ``AuthMethod`` knows how to turn locally available credentials into a
Vault token (``login``) and how to give that token up again (``logout``).
Construction never validates anything: every parameter left empty is
resolved from the environment when ``login`` runs, so a method built with no
arguments is valid and picks everything up at call time.

Remote methods (AppRole, AppID, GitHub, UserPass, Kubernetes) share one
shape, captured by ``RemoteAuthMethod``:

  1. Resolve parameters; a missing required one fails before any network
     call.
  2. Resolve the mount, defaulting to a well-known per-method name.
  3. Write once to ``auth/<mount>/login[/<identity>]``.
  4. Put the issued token on the session.

Their logout is a best-effort ``auth/token/revoke-self`` followed by an
unconditional local clear.
"""

from __future__ import annotations

import logging
import posixpath
from abc import ABC, abstractmethod
from typing import Any

import hvac.exceptions
import requests

from vault_auth.context import Context
from vault_auth.env import EnvSource
from vault_auth.errors import (
    BackendExchangeError,
    ConfigurationError,
    LocalIOError,
)
from vault_auth.resolver import find_value
from vault_auth.session import SessionHandle

logger = logging.getLogger(__name__)

REVOKE_SELF_PATH = "auth/token/revoke-self"

_TRANSPORT_ERRORS = (hvac.exceptions.VaultError, requests.exceptions.RequestException)


class AuthMethod(ABC):
    """Abstract base class for every way of obtaining a Vault token."""

    #: Short identifier used in error messages, logs and the settings file.
    name: str = ""

    @abstractmethod
    def login(self, session: SessionHandle, ctx: Context | None = None) -> None:
        """Acquire a token and set it on *session*.

        Raises:
            VaultAuthError: a subclass describing why no token was obtained.
                *session* is left untouched in that case.
        """
        ...

    @abstractmethod
    def logout(self, session: SessionHandle, ctx: Context | None = None) -> None:
        """Give up the token held by *session* and clear it."""
        ...

    def validate_config(self) -> list[str]:
        """Check, without contacting Vault, whether ``login`` could proceed.

        Returns:
            Human-readable problems.  An empty list means the method looks
            usable.
        """
        return []


def login_path(mount: str, extra: str = "") -> str:
    """Build ``auth/<mount>/login[/<extra>]``, dropping empty segments."""
    segments = [s.strip("/") for s in ("auth", mount, "login", extra)]
    return posixpath.normpath("/".join(s for s in segments if s))


def remote_auth(
    ctx: Context,
    session: SessionHandle,
    mount: str,
    extra: str,
    data: dict[str, Any],
) -> str:
    """Perform one login write and return the issued client token.

    The session is not modified here.  A cancelled or expired *ctx* raises
    ``AuthCancelledError`` both before the write and after it returns, so a
    token that arrives too late is discarded.
    """
    path = login_path(mount, extra)

    ctx.raise_if_done()
    try:
        secret = session.write(ctx, path, data)
    except _TRANSPORT_ERRORS as exc:
        ctx.raise_if_done()
        raise BackendExchangeError(f"vault write to {path} failed: {exc}", path=path) from exc
    ctx.raise_if_done()

    token = ((secret or {}).get("auth") or {}).get("client_token")
    if not token:
        raise BackendExchangeError(f"vault write to {path} returned no auth token", path=path)
    return token


def revoke_token(ctx: Context, session: SessionHandle) -> None:
    """Revoke the session's own token, then clear it locally.

    The local clear always happens, even when the revoke write fails or the
    context is already done; the failure is raised afterwards.
    """
    try:
        ctx.raise_if_done()
        session.write(ctx, REVOKE_SELF_PATH)
    except _TRANSPORT_ERRORS as exc:
        raise BackendExchangeError(
            f"vault write to {REVOKE_SELF_PATH} failed: {exc}", path=REVOKE_SELF_PATH
        ) from exc
    finally:
        session.clear_token()


class RemoteAuthMethod(AuthMethod):
    """Base for methods that exchange credentials with a Vault login endpoint.

    Subclasses set ``name``, ``mount_envvar`` and ``default_mount`` and
    implement ``_credentials``.
    """

    mount_envvar: str = ""
    default_mount: str = ""

    def __init__(self, mount: str = "", source: EnvSource | None = None) -> None:
        self._mount = mount
        self._source = source if source is not None else EnvSource()

    @property
    def source(self) -> EnvSource:
        return self._source

    @property
    def mount(self) -> str:
        """The mount point as it would be resolved right now."""
        return self._resolve(self._mount, self.mount_envvar, self.default_mount)

    @abstractmethod
    def _credentials(self) -> tuple[str, dict[str, Any]]:
        """Resolve parameters into ``(extra path segment, request body)``.

        Must raise ``ConfigurationError`` / ``LocalIOError`` rather than
        return incomplete values.
        """
        ...

    def login(self, session: SessionHandle, ctx: Context | None = None) -> None:
        ctx = ctx if ctx is not None else Context()
        extra, data = self._credentials()
        mount = self.mount

        try:
            token = remote_auth(ctx, session, mount, extra, data)
        except BackendExchangeError as exc:
            raise BackendExchangeError(f"{self.name} login failed: {exc}", path=exc.path) from exc

        session.set_token(token)
        logger.debug("Logged in with %s auth at mount %s", self.name, mount)

    def logout(self, session: SessionHandle, ctx: Context | None = None) -> None:
        revoke_token(ctx if ctx is not None else Context(), session)

    def validate_config(self) -> list[str]:
        try:
            self._credentials()
        except (ConfigurationError, LocalIOError) as exc:
            return [str(exc)]
        return []

    # -- helpers for subclasses ----------------------------------------------

    def _resolve(self, explicit: str, envvar: str, default: str = "") -> str:
        return find_value(explicit, envvar, default, self._source)

    def _require(self, explicit: str, envvar: str, field: str) -> str:
        value = self._resolve(explicit, envvar)
        if not value:
            raise ConfigurationError(f"{self.name} auth failure: no {field} provided", field=field)
        return value

    def __repr__(self) -> str:
        return f"{type(self).__name__}(mount={self._mount!r})"
