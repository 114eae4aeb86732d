"""Shared fixtures for tests."""

from __future__ import annotations

import pathlib
from collections.abc import Callable
from typing import Any

import pytest

from vault_auth.context import Context
from vault_auth.env import EnvSource
from vault_auth.errors import BackendExchangeError
from vault_auth.methods.base import AuthMethod

ISSUED_TOKEN = "s.issued"


class FakeSession:
    """In-memory ``SessionHandle`` that records every write.

    ``responses`` maps a path to a dict to return, an exception to raise, or
    a callable taking the context (to simulate work done mid-request).
    Unlisted paths answer with a successful login response.
    """

    def __init__(self) -> None:
        self.token = ""
        self.writes: list[tuple[str, dict[str, Any] | None]] = []
        self.responses: dict[str, Any] = {}

    def set_token(self, token: str) -> None:
        self.token = token

    def clear_token(self) -> None:
        self.token = ""

    def write(self, ctx: Context, path: str, data: dict[str, Any] | None = None) -> dict[str, Any] | None:
        self.writes.append((path, data))
        response = self.responses.get(path, {"auth": {"client_token": ISSUED_TOKEN}})
        if isinstance(response, BaseException):
            raise response
        if callable(response):
            return response(ctx)
        return response

    @property
    def paths(self) -> list[str]:
        return [path for path, _ in self.writes]


class StubMethod(AuthMethod):
    """Auth method with scripted outcomes, for composite and session tests."""

    def __init__(
        self,
        name: str,
        *,
        login_error: Exception | None = None,
        logout_error: Exception | None = None,
        token: str | None = None,
        problems: list[str] | None = None,
    ) -> None:
        self.name = name
        self.login_error = login_error
        self.logout_error = logout_error
        self.token = token or f"s.{name}"
        self.problems = list(problems or [])
        self.logins = 0
        self.logouts = 0

    def login(self, session, ctx=None) -> None:
        self.logins += 1
        if self.login_error is not None:
            raise self.login_error
        session.set_token(self.token)

    def logout(self, session, ctx=None) -> None:
        self.logouts += 1
        session.clear_token()
        if self.logout_error is not None:
            raise self.logout_error

    def validate_config(self) -> list[str]:
        return list(self.problems)


@pytest.fixture
def environ() -> dict[str, str]:
    """An empty environment; tests add the variables they need."""
    return {}


@pytest.fixture
def source(tmp_path: pathlib.Path, environ: dict[str, str]) -> EnvSource:
    """An EnvSource rooted at ``tmp_path`` and reading from ``environ``."""
    return EnvSource(root=tmp_path, environ=environ)


@pytest.fixture
def session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def write_file(tmp_path: pathlib.Path) -> Callable[[str, str], pathlib.Path]:
    """Create a file at an absolute *path* inside the virtual root."""

    def _write(path: str, content: str) -> pathlib.Path:
        target = tmp_path / path.lstrip("/")
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content)
        return target

    return _write


@pytest.fixture
def stub() -> Callable[..., StubMethod]:
    """Factory for scripted auth methods."""
    return StubMethod


@pytest.fixture
def failing_stub() -> Callable[[str], StubMethod]:
    def _make(name: str) -> StubMethod:
        return StubMethod(name, login_error=BackendExchangeError(f"{name} login failed"))

    return _make
