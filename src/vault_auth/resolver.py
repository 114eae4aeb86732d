"""Layered parameter resolution: explicit value, then environment, then default."""

from __future__ import annotations

from vault_auth.env import EnvSource


def find_value(explicit: str, envvar: str, default: str, source: EnvSource) -> str:
    """Return the first non-empty of *explicit*, ``source.getenv(envvar)`` and *default*.

    No validation happens here; an empty result means "unset" and it is up to
    the caller to decide whether that is fatal.
    """
    if explicit:
        return explicit

    value = source.getenv(envvar)
    if value:
        return value

    return default
