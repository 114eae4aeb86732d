"""UserPass auth method.

See also https://developer.hashicorp.com/vault/docs/auth/userpass
"""

from __future__ import annotations

from typing import Any

from vault_auth.env import EnvSource
from vault_auth.methods.base import RemoteAuthMethod


class UserPassAuthMethod(RemoteAuthMethod):
    """Authenticate with a username and password.

    The username is part of the login path, the password goes in the body.
    Empty values are read from ``$VAULT_AUTH_USERNAME`` and
    ``$VAULT_AUTH_PASSWORD``; the mount defaults to
    ``$VAULT_AUTH_USERPASS_MOUNT`` or ``"userpass"``.
    """

    name = "userpass"
    mount_envvar = "VAULT_AUTH_USERPASS_MOUNT"
    default_mount = "userpass"

    def __init__(
        self,
        username: str = "",
        password: str = "",
        mount: str = "",
        source: EnvSource | None = None,
    ) -> None:
        super().__init__(mount=mount, source=source)
        self._username = username
        self._password = password

    def _credentials(self) -> tuple[str, dict[str, Any]]:
        username = self._require(self._username, "VAULT_AUTH_USERNAME", "username")
        password = self._require(self._password, "VAULT_AUTH_PASSWORD", "password")
        return username, {"password": password}
