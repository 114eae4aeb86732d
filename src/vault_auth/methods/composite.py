"""Try several auth methods in order and remember which one worked.

Pattern: Composite Strategy
----------------------------
A ``CompositeAuthMethod`` is itself an ``AuthMethod``.  It holds an ordered,
immutable list of members and a two-state machine:

  * **idle**  - nothing chosen.  ``login`` walks the members in order and
    binds to the first one that succeeds.
  * **bound** - one member chosen.  ``login`` is a no-op; ``logout``
    delegates to the chosen member and returns to idle whatever the outcome.

Moving on to the next member is not a retry: each member is a different
configuration, and each is attempted once per ``login``.  Cancellation is the
exception: it stops the walk immediately.

The state is unsynchronised; use one composite per session.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Sequence

from vault_auth.context import Context
from vault_auth.env import EnvSource
from vault_auth.errors import (
    AggregateAuthError,
    AuthCancelledError,
    LogoutError,
    VaultAuthError,
)
from vault_auth.methods.app_id import AppIDAuthMethod
from vault_auth.methods.approle import AppRoleAuthMethod
from vault_auth.methods.base import AuthMethod
from vault_auth.methods.github import GitHubAuthMethod
from vault_auth.methods.kubernetes import KubernetesAuthMethod
from vault_auth.methods.token import TokenAuthMethod
from vault_auth.methods.userpass import UserPassAuthMethod
from vault_auth.session import SessionHandle

logger = logging.getLogger(__name__)


class State(enum.Enum):
    IDLE = "idle"
    BOUND = "bound"


class CompositeAuthMethod(AuthMethod):
    """Logs in with the first member that succeeds, logs out with that same member."""

    name = "env"

    def __init__(self, methods: Sequence[AuthMethod]) -> None:
        self._methods: tuple[AuthMethod, ...] = tuple(methods)
        self._state = State.IDLE
        self._chosen_index: int | None = None

    @property
    def methods(self) -> tuple[AuthMethod, ...]:
        return self._methods

    @property
    def state(self) -> State:
        return self._state

    @property
    def chosen(self) -> AuthMethod | None:
        if self._chosen_index is None:
            return None
        return self._methods[self._chosen_index]

    def login(self, session: SessionHandle, ctx: Context | None = None) -> None:
        """Bind to the first member whose login succeeds.

        Raises:
            AggregateAuthError: every member failed; the composite stays idle
                and a later call starts again from the first member.
            AuthCancelledError: *ctx* was cancelled or expired.
        """
        if self._state is State.BOUND:
            return

        failures: list[tuple[str, VaultAuthError]] = []
        for index, method in enumerate(self._methods):
            try:
                method.login(session, ctx)
            except AuthCancelledError:
                raise
            except VaultAuthError as exc:
                logger.debug("Auth method %s unavailable: %s", method.name, exc)
                failures.append((method.name, exc))
                continue

            self._bind(index)
            logger.info("Authenticated with Vault using the %s auth method", method.name)
            return

        last = failures[-1][1] if failures else None
        raise AggregateAuthError(failures) from last

    def logout(self, session: SessionHandle, ctx: Context | None = None) -> None:
        """Log out through the chosen member and return to idle.

        Raises:
            LogoutError: nothing is bound, or the chosen member's logout
                failed (the composite is idle afterwards either way).
        """
        method = self.chosen
        if self._state is State.IDLE or method is None:
            raise LogoutError("unable to log out of vault: not logged in with any auth method")

        self._reset()
        try:
            method.logout(session, ctx)
        except VaultAuthError as exc:
            raise LogoutError(f"{method.name} logout failed: {exc}") from exc

    def validate_config(self) -> list[str]:
        problems: list[str] = []
        for method in self._methods:
            errors = method.validate_config()
            if not errors:
                return []
            problems.extend(f"{method.name}: {error}" for error in errors)
        return problems

    # -- state transitions ---------------------------------------------------

    def _bind(self, index: int) -> None:
        self._chosen_index = index
        self._state = State.BOUND

    def _reset(self) -> None:
        self._chosen_index = None
        self._state = State.IDLE

    def __repr__(self) -> str:
        names = ", ".join(m.name for m in self._methods)
        return f"CompositeAuthMethod([{names}], state={self._state.value})"


def env_auth_method(source: EnvSource | None = None) -> CompositeAuthMethod:
    """Build the composite that picks whichever method the environment configures.

    Precedence, highest first: AppRole, GitHub, UserPass, Token, Kubernetes,
    AppID (deprecated).  Methods with required fields come first because a
    missing field fails without a network round trip.
    """
    source = source if source is not None else EnvSource()
    return CompositeAuthMethod(
        [
            AppRoleAuthMethod(source=source),
            GitHubAuthMethod(source=source),
            UserPassAuthMethod(source=source),
            TokenAuthMethod(source=source),
            KubernetesAuthMethod(source=source),
            AppIDAuthMethod(source=source, warn=False),
        ]
    )
