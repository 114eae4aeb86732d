"""Token auth method: use a token that already exists.

See also https://developer.hashicorp.com/vault/docs/auth/token
"""

from __future__ import annotations

import logging
import posixpath

from vault_auth.context import Context
from vault_auth.env import EnvSource
from vault_auth.errors import ConfigurationError, EmptyTokenFileError, LocalIOError
from vault_auth.methods.base import AuthMethod
from vault_auth.resolver import find_value
from vault_auth.session import SessionHandle

logger = logging.getLogger(__name__)

TOKEN_FILE_NAME = ".vault-token"


class TokenAuthMethod(AuthMethod):
    """Authenticate with *token*, ``$VAULT_TOKEN`` or ``$HOME/.vault-token``.

    No request is sent to Vault: the token is put on the session as-is.
    Logout only clears it locally; the token itself stays valid because this
    method did not create it.
    """

    name = "token"

    def __init__(self, token: str = "", source: EnvSource | None = None) -> None:
        self._token = token
        self._source = source if source is not None else EnvSource()

    def login(self, session: SessionHandle, ctx: Context | None = None) -> None:
        if ctx is not None:
            ctx.raise_if_done()
        session.set_token(self._find_token())

    def logout(self, session: SessionHandle, ctx: Context | None = None) -> None:
        session.clear_token()

    def validate_config(self) -> list[str]:
        try:
            self._find_token()
        except (ConfigurationError, LocalIOError) as exc:
            return [str(exc)]
        return []

    def _find_token(self) -> str:
        token = find_value(self._token, "VAULT_TOKEN", "", self._source)
        if token:
            return token

        try:
            home = self._source.home_dir()
        except RuntimeError as exc:
            raise LocalIOError(f"token auth failure: cannot determine home directory: {exc}") from exc

        path = posixpath.join(home, TOKEN_FILE_NAME)
        try:
            content = self._source.read_file(path)
        except OSError as exc:
            raise LocalIOError(
                f"failed to read {TOKEN_FILE_NAME} file from {home!r}: {exc}", path=path
            ) from exc

        token = content.strip()
        if not token:
            raise EmptyTokenFileError(f"token auth failure: file {path!r} is empty", path=path, field="token")

        logger.debug("Using token from %s", path)
        return token

    def __repr__(self) -> str:
        return "TokenAuthMethod()"
