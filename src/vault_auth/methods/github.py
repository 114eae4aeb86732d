"""GitHub auth method.

See also https://developer.hashicorp.com/vault/docs/auth/github
"""

from __future__ import annotations

from typing import Any

from vault_auth.env import EnvSource
from vault_auth.methods.base import RemoteAuthMethod


class GitHubAuthMethod(RemoteAuthMethod):
    """Authenticate with a GitHub personal access token.

    An empty *github_token* is read from ``$VAULT_AUTH_GITHUB_TOKEN``.  The
    mount defaults to ``$VAULT_AUTH_GITHUB_MOUNT`` or ``"github"``.
    """

    name = "github"
    mount_envvar = "VAULT_AUTH_GITHUB_MOUNT"
    default_mount = "github"

    def __init__(
        self,
        github_token: str = "",
        mount: str = "",
        source: EnvSource | None = None,
    ) -> None:
        super().__init__(mount=mount, source=source)
        self._github_token = github_token

    def _credentials(self) -> tuple[str, dict[str, Any]]:
        token = self._require(self._github_token, "VAULT_AUTH_GITHUB_TOKEN", "token")
        return "", {"token": token}
