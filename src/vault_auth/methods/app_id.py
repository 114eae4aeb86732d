"""AppID auth method (legacy).

AppID was removed from Vault in favour of AppRole; it is kept here only for
servers that still have it mounted.
"""

from __future__ import annotations

import warnings
from typing import Any

from vault_auth.env import EnvSource
from vault_auth.methods.base import RemoteAuthMethod


class AppIDAuthMethod(RemoteAuthMethod):
    """Authenticate with an app ID and user ID.

    Deprecated: use ``AppRoleAuthMethod`` instead.

    The app ID travels in the URL (``auth/<mount>/login/<app_id>``), the user
    ID in the body.  Empty values are read from ``$VAULT_APP_ID`` and
    ``$VAULT_USER_ID``; the mount defaults to ``$VAULT_AUTH_APP_ID_MOUNT`` or
    ``"app-id"``.

    Pass ``warn=False`` to suppress the ``DeprecationWarning`` (the
    environment composite does, since it includes AppID only as a last
    resort).
    """

    name = "app-id"
    mount_envvar = "VAULT_AUTH_APP_ID_MOUNT"
    default_mount = "app-id"

    def __init__(
        self,
        app_id: str = "",
        user_id: str = "",
        mount: str = "",
        source: EnvSource | None = None,
        *,
        warn: bool = True,
    ) -> None:
        if warn:
            warnings.warn(
                "AppIDAuthMethod is deprecated, use AppRoleAuthMethod instead",
                DeprecationWarning,
                stacklevel=2,
            )
        super().__init__(mount=mount, source=source)
        self._app_id = app_id
        self._user_id = user_id

    def _credentials(self) -> tuple[str, dict[str, Any]]:
        app_id = self._require(self._app_id, "VAULT_APP_ID", "app_id")
        user_id = self._require(self._user_id, "VAULT_USER_ID", "user_id")
        return app_id, {"user_id": user_id}
