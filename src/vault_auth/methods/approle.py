"""AppRole auth method.

See also https://developer.hashicorp.com/vault/docs/auth/approle
"""

from __future__ import annotations

from typing import Any

from vault_auth.env import EnvSource
from vault_auth.methods.base import RemoteAuthMethod


class AppRoleAuthMethod(RemoteAuthMethod):
    """Authenticate with a role ID and secret ID.

    Empty *role_id* / *secret_id* are read from ``$VAULT_ROLE_ID`` and
    ``$VAULT_SECRET_ID``.  The mount defaults to ``$VAULT_AUTH_APPROLE_MOUNT``
    or ``"approle"``.
    """

    name = "approle"
    mount_envvar = "VAULT_AUTH_APPROLE_MOUNT"
    default_mount = "approle"

    def __init__(
        self,
        role_id: str = "",
        secret_id: str = "",
        mount: str = "",
        source: EnvSource | None = None,
    ) -> None:
        super().__init__(mount=mount, source=source)
        self._role_id = role_id
        self._secret_id = secret_id

    def _credentials(self) -> tuple[str, dict[str, Any]]:
        role_id = self._require(self._role_id, "VAULT_ROLE_ID", "role_id")
        secret_id = self._require(self._secret_id, "VAULT_SECRET_ID", "secret_id")
        return "", {"role_id": role_id, "secret_id": secret_id}
