"""The mutable Vault connection that auth methods log in and out of.

Pattern: Session Handle
------------------------
A session is created by the caller before any auth method runs and is passed
by reference into every ``login`` / ``logout`` call.  Auth methods mutate it
in exactly two ways: ``set_token`` after a successful exchange and
``clear_token`` on logout.  At most one token is active at a time; setting a
new one overwrites the previous one.

Sessions are not synchronised.  Callers must serialise login/logout pairs on
a given session.
"""

from __future__ import annotations

import contextlib
import logging
from collections.abc import Iterator
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

import hvac

from vault_auth.context import Context

if TYPE_CHECKING:
    from vault_auth.methods.base import AuthMethod

logger = logging.getLogger(__name__)


class SessionHandle(Protocol):
    """What an auth method needs from a Vault connection."""

    @property
    def token(self) -> str: ...

    def set_token(self, token: str) -> None: ...

    def clear_token(self) -> None: ...

    def write(self, ctx: Context, path: str, data: dict[str, Any] | None = None) -> dict[str, Any] | None:
        """Write *data* to the logical *path* and return the decoded response, if any."""
        ...


@runtime_checkable
class SupportsAuthMethod(Protocol):
    """Optional capability: objects that can be bound to an auth method."""

    def with_auth_method(self, auth: AuthMethod) -> Any: ...


def with_auth_method(auth: AuthMethod, target: Any) -> Any:
    """Bind *auth* to *target* if it supports it, otherwise return *target* unchanged.

    Binding is not needed when ``$VAULT_TOKEN`` is already set.
    """
    if isinstance(target, SupportsAuthMethod):
        return target.with_auth_method(auth)
    return target


class VaultSession:
    """A ``SessionHandle`` backed by an ``hvac.Client``."""

    def __init__(
        self,
        url: str | None = None,
        client: hvac.Client | None = None,
        auth_method: AuthMethod | None = None,
    ) -> None:
        # token="" stops hvac from picking up $VAULT_TOKEN / ~/.vault-token
        # on its own; that is the token auth method's job.
        self._client = client if client is not None else hvac.Client(url=url, token="")
        self._auth_method = auth_method

    @property
    def client(self) -> hvac.Client:
        return self._client

    @property
    def auth_method(self) -> AuthMethod | None:
        return self._auth_method

    @property
    def token(self) -> str:
        return self._client.token or ""

    def set_token(self, token: str) -> None:
        self._client.token = token

    def clear_token(self) -> None:
        self._client.token = ""

    def write(self, ctx: Context, path: str, data: dict[str, Any] | None = None) -> dict[str, Any] | None:
        kwargs: dict[str, Any] = {}
        remaining = ctx.remaining()
        if remaining is not None:
            # requests rejects a zero timeout; a spent deadline is a timeout error.
            if remaining <= 0:
                ctx.raise_if_done()
            kwargs["timeout"] = remaining

        response = self._client.adapter.post(f"/v1/{path}", json=data, **kwargs)
        # 204 No Content comes back as a raw response object.
        if isinstance(response, dict):
            return response
        return None

    def with_auth_method(self, auth: AuthMethod) -> VaultSession:
        """Return a session sharing this client but bound to *auth*."""
        return VaultSession(client=self._client, auth_method=auth)

    @contextlib.contextmanager
    def authenticated(self, ctx: Context | None = None) -> Iterator[VaultSession]:
        """Log in for the duration of the ``with`` block, then log out.

        Uses the bound auth method, or the environment-driven composite when
        none has been bound.
        """
        auth = self._auth_method
        if auth is None:
            from vault_auth.methods.composite import env_auth_method

            logger.debug("No auth method bound; negotiating from the environment")
            auth = env_auth_method()
            self._auth_method = auth

        auth.login(self, ctx)
        try:
            yield self
        finally:
            auth.logout(self, ctx)

    def __repr__(self) -> str:
        state = "authenticated" if self.token else "anonymous"
        return f"VaultSession(url={getattr(self._client, 'url', None)!r}, {state})"
