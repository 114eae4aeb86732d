"""Kubernetes auth method.

See also https://developer.hashicorp.com/vault/docs/auth/kubernetes
"""

from __future__ import annotations

from typing import Any

from vault_auth.env import EnvSource
from vault_auth.errors import ConfigurationError, EmptyTokenFileError, LocalIOError
from vault_auth.methods.base import RemoteAuthMethod

DEFAULT_SA_TOKEN_PATH = "/var/run/secrets/kubernetes.io/serviceaccount/token"


class KubernetesAuthMethod(RemoteAuthMethod):
    """Authenticate with a pod's service-account JWT.

    An empty *role* is read from ``$VAULT_AUTH_ROLE``.  An empty
    *sa_token_path* is read from ``$VAULT_AUTH_SATOKEN_PATH``, falling back to
    the default in-cluster token location.  The mount defaults to
    ``$VAULT_AUTH_KUBERNETES_MOUNT`` or ``"kubernetes"``.

    The token file is re-read on every login so rotated tokens are picked up.
    """

    name = "kubernetes"
    mount_envvar = "VAULT_AUTH_KUBERNETES_MOUNT"
    default_mount = "kubernetes"

    def __init__(
        self,
        role: str = "",
        sa_token_path: str = "",
        mount: str = "",
        source: EnvSource | None = None,
    ) -> None:
        super().__init__(mount=mount, source=source)
        self._role = role
        self._sa_token_path = sa_token_path

    def _credentials(self) -> tuple[str, dict[str, Any]]:
        role = self._require(self._role, "VAULT_AUTH_ROLE", "role")

        path = self._resolve(self._sa_token_path, "VAULT_AUTH_SATOKEN_PATH", DEFAULT_SA_TOKEN_PATH)
        if not path:
            raise ConfigurationError(
                "kubernetes auth failure: no sa_token_path provided", field="sa_token_path"
            )

        return "", {"role": role, "jwt": self._read_sa_token(path)}

    def _read_sa_token(self, path: str) -> str:
        try:
            content = self._source.read_file(path)
        except FileNotFoundError as exc:
            raise LocalIOError(
                f"kubernetes auth failure: service account token file {path!r} not found", path=path
            ) from exc
        except OSError as exc:
            raise LocalIOError(f"kubernetes saToken load failed: {exc}", path=path) from exc

        token = content.strip()
        if not token:
            raise EmptyTokenFileError(
                f"kubernetes auth failure: file {path!r} is empty", path=path, field="sa_token"
            )
        return token
