"""Settings-file support: build an auth method from YAML.

A settings file looks like::

    vault:
      address: https://vault.example.com:8200
      auth:
        method: approle
        role_id: 3c9e...
        mount: approle

``method`` defaults to ``env`` (the precedence-ordered composite).  All other
keys are passed to the method's constructor; anything left out is resolved
from the environment at login time as usual.
"""

from __future__ import annotations

import pathlib
from collections.abc import Callable, Mapping
from typing import Any

import yaml

from vault_auth.env import EnvSource
from vault_auth.errors import ConfigurationError
from vault_auth.methods.app_id import AppIDAuthMethod
from vault_auth.methods.approle import AppRoleAuthMethod
from vault_auth.methods.base import AuthMethod
from vault_auth.methods.composite import env_auth_method
from vault_auth.methods.github import GitHubAuthMethod
from vault_auth.methods.kubernetes import KubernetesAuthMethod
from vault_auth.methods.token import TokenAuthMethod
from vault_auth.methods.userpass import UserPassAuthMethod

# method name -> (factory, accepted keys)
_METHODS: dict[str, tuple[Callable[..., AuthMethod], frozenset[str]]] = {
    "env": (env_auth_method, frozenset()),
    "token": (TokenAuthMethod, frozenset({"token"})),
    "approle": (AppRoleAuthMethod, frozenset({"role_id", "secret_id", "mount"})),
    "app-id": (AppIDAuthMethod, frozenset({"app_id", "user_id", "mount"})),
    "github": (GitHubAuthMethod, frozenset({"github_token", "mount"})),
    "userpass": (UserPassAuthMethod, frozenset({"username", "password", "mount"})),
    "kubernetes": (KubernetesAuthMethod, frozenset({"role", "sa_token_path", "mount"})),
}


def method_names() -> list[str]:
    """Return every method name accepted by ``build_auth_method``."""
    return list(_METHODS)


def load_settings(path: str | pathlib.Path) -> dict[str, Any]:
    """Read the YAML settings file at *path*.

    Raises ``ConfigurationError`` if the file is missing or is not a mapping.
    """
    settings_path = pathlib.Path(path)
    if not settings_path.exists():
        raise ConfigurationError(f"Settings file not found: {settings_path}")
    with open(settings_path) as fh:
        data = yaml.safe_load(fh)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Settings file must contain a mapping: {settings_path}")
    return data


def vault_sections(settings: Mapping[str, Any]) -> tuple[dict[str, Any], dict[str, Any]]:
    """Return the ``vault`` and ``vault.auth`` sections of *settings*.

    Missing or null sections come back empty.  Raises ``ConfigurationError``
    if either one is present but is not a mapping.
    """
    vault_cfg = settings.get("vault") or {}
    if not isinstance(vault_cfg, dict):
        raise ConfigurationError("Settings key 'vault' must be a mapping", field="vault")

    auth_cfg = vault_cfg.get("auth") or {}
    if not isinstance(auth_cfg, dict):
        raise ConfigurationError("Settings key 'vault.auth' must be a mapping", field="auth")

    return vault_cfg, dict(auth_cfg)


def build_auth_method(
    auth_section: Mapping[str, Any] | None,
    source: EnvSource | None = None,
) -> AuthMethod:
    """Construct the auth method described by the ``vault.auth`` section."""
    if auth_section is not None and not isinstance(auth_section, Mapping):
        raise ConfigurationError("Auth settings must be a mapping", field="auth")
    options = dict(auth_section or {})
    name = str(options.pop("method", "env"))

    entry = _METHODS.get(name)
    if entry is None:
        available = ", ".join(_METHODS)
        raise ConfigurationError(
            f"Unknown auth method '{name}'. Available methods: {available}", field="method"
        )

    factory, accepted = entry
    unknown = sorted(set(options) - accepted)
    if unknown:
        raise ConfigurationError(
            f"Unsupported option(s) for {name} auth: {', '.join(unknown)}", field=unknown[0]
        )

    # None in YAML means "not set", same as omitting the key.
    kwargs = {key: str(value) for key, value in options.items() if value is not None}
    return factory(source=source, **kwargs)
