"""Tests for the composite auth method: ordering, binding and logout."""

from __future__ import annotations

import warnings

import pytest

from vault_auth.env import EnvSource
from vault_auth.errors import (
    AggregateAuthError,
    AuthCancelledError,
    BackendExchangeError,
    LogoutError,
)
from vault_auth.methods.base import REVOKE_SELF_PATH
from vault_auth.methods.composite import CompositeAuthMethod, State, env_auth_method
from vault_auth.methods.kubernetes import DEFAULT_SA_TOKEN_PATH


class TestCompositeLogin:
    def test_first_success_is_chosen(self, stub, failing_stub, session) -> None:
        a, b, c = failing_stub("a"), stub("b"), stub("c")
        composite = CompositeAuthMethod([a, b, c])

        composite.login(session)

        assert composite.chosen is b
        assert composite.state is State.BOUND
        assert session.token == "s.b"
        assert (a.logins, b.logins, c.logins) == (1, 1, 0)

    def test_logout_targets_chosen_member_only(self, stub, failing_stub, session) -> None:
        a, b, c = failing_stub("a"), stub("b"), stub("c")
        composite = CompositeAuthMethod([a, b, c])
        composite.login(session)

        composite.logout(session)

        assert (a.logouts, b.logouts, c.logouts) == (0, 1, 0)
        assert composite.state is State.IDLE
        assert composite.chosen is None
        assert session.token == ""

    def test_login_while_bound_is_a_noop(self, stub, session) -> None:
        a = stub("a")
        composite = CompositeAuthMethod([a])
        composite.login(session)
        composite.login(session)
        assert a.logins == 1

    def test_all_fail(self, failing_stub, session) -> None:
        a, b, c = failing_stub("a"), failing_stub("b"), failing_stub("c")
        composite = CompositeAuthMethod([a, b, c])

        with pytest.raises(AggregateAuthError, match="Last error was: c login failed") as excinfo:
            composite.login(session)

        error = excinfo.value
        assert [name for name, _ in error.failures] == ["a", "b", "c"]
        assert error.last is c.login_error
        assert error.__cause__ is c.login_error
        assert "a login failed" in str(error)
        assert composite.state is State.IDLE
        assert session.token == ""

    def test_retry_after_exhaustion_starts_from_the_top(self, stub, failing_stub, session) -> None:
        a, b = failing_stub("a"), failing_stub("b")
        composite = CompositeAuthMethod([a, b])
        with pytest.raises(AggregateAuthError):
            composite.login(session)

        b.login_error = None
        composite.login(session)

        assert a.logins == 2
        assert composite.chosen is b

    def test_empty_composite(self, session) -> None:
        with pytest.raises(AggregateAuthError, match="no auth methods configured") as excinfo:
            CompositeAuthMethod([]).login(session)
        assert excinfo.value.last is None

    def test_cancellation_stops_the_walk(self, stub, session) -> None:
        a = stub("a", login_error=AuthCancelledError("operation cancelled"))
        b = stub("b")
        composite = CompositeAuthMethod([a, b])

        with pytest.raises(AuthCancelledError):
            composite.login(session)

        assert b.logins == 0
        assert composite.state is State.IDLE

    def test_members_are_immutable(self, stub) -> None:
        members = [stub("a")]
        composite = CompositeAuthMethod(members)
        members.append(stub("b"))
        assert len(composite.methods) == 1


class TestCompositeLogout:
    def test_logout_while_idle(self, stub, session) -> None:
        composite = CompositeAuthMethod([stub("a")])
        with pytest.raises(LogoutError, match="not logged in"):
            composite.logout(session)

    def test_double_logout(self, stub, session) -> None:
        a = stub("a")
        composite = CompositeAuthMethod([a])
        composite.login(session)
        composite.logout(session)

        with pytest.raises(LogoutError):
            composite.logout(session)

        assert a.logouts == 1
        assert session.token == ""

    def test_member_logout_failure_still_resets(self, stub, session) -> None:
        cause = BackendExchangeError("revoke failed", path=REVOKE_SELF_PATH)
        a = stub("a", logout_error=cause)
        composite = CompositeAuthMethod([a])
        composite.login(session)

        with pytest.raises(LogoutError, match="a logout failed") as excinfo:
            composite.logout(session)

        assert excinfo.value.__cause__ is cause
        assert composite.state is State.IDLE
        assert session.token == ""

    def test_relogin_may_choose_another_member(self, stub, failing_stub, session) -> None:
        a, b = failing_stub("a"), stub("b")
        composite = CompositeAuthMethod([a, b])
        composite.login(session)
        composite.logout(session)

        a.login_error = None
        composite.login(session)

        assert composite.chosen is a
        assert session.token == "s.a"


class TestCompositeValidateConfig:
    def test_usable_when_any_member_is(self, stub) -> None:
        composite = CompositeAuthMethod([stub("a", problems=["broken"]), stub("b")])
        assert composite.validate_config() == []

    def test_lists_every_problem_when_none_is_usable(self, stub) -> None:
        composite = CompositeAuthMethod([stub("a", problems=["a is broken"]), stub("b", problems=["b is broken"])])
        assert composite.validate_config() == ["a: a is broken", "b: b is broken"]


class TestEnvAuthMethod:
    def test_precedence(self, source: EnvSource) -> None:
        names = [m.name for m in env_auth_method(source).methods]
        assert names == ["approle", "github", "userpass", "token", "kubernetes", "app-id"]

    def test_does_not_warn_about_app_id(self, source: EnvSource) -> None:
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            env_auth_method(source)

    def test_picks_configured_method_without_extra_calls(self, source: EnvSource, environ, session) -> None:
        environ.update({"VAULT_AUTH_USERNAME": "alice", "VAULT_AUTH_PASSWORD": "pw", "VAULT_TOKEN": "abc"})
        composite = env_auth_method(source)

        composite.login(session)

        assert composite.chosen.name == "userpass"
        assert session.paths == ["auth/userpass/login/alice"]

    def test_approle_beats_token(self, source: EnvSource, environ, session) -> None:
        environ.update({"VAULT_ROLE_ID": "r", "VAULT_SECRET_ID": "s", "VAULT_TOKEN": "abc"})
        composite = env_auth_method(source)
        composite.login(session)
        assert composite.chosen.name == "approle"

    def test_token_from_environment(self, source: EnvSource, environ, session) -> None:
        environ["VAULT_TOKEN"] = "abc"
        composite = env_auth_method(source)

        composite.login(session)
        composite.logout(session)

        assert session.writes == []
        assert session.token == ""

    def test_nothing_configured(self, source: EnvSource, environ, session) -> None:
        environ["HOME"] = "/home/nobody"

        with pytest.raises(AggregateAuthError) as excinfo:
            env_auth_method(source).login(session)

        assert len(excinfo.value.failures) == 6
        assert excinfo.value.failures[-1][0] == "app-id"
        assert session.writes == []

    def test_unreadable_token_files_do_not_stop_the_walk(
        self, source: EnvSource, environ, session, write_file
    ) -> None:
        write_file(DEFAULT_SA_TOKEN_PATH, "").write_bytes(b"\xff\xfe\x00bad")
        write_file("/home/nobody/.vault-token", "").write_bytes(b"\xff\xfe\x00bad")
        environ.update(
            {"HOME": "/home/nobody", "VAULT_AUTH_ROLE": "web", "VAULT_APP_ID": "app-1", "VAULT_USER_ID": "user-1"}
        )
        composite = env_auth_method(source)

        composite.login(session)

        assert composite.chosen.name == "app-id"
        assert session.paths == ["auth/app-id/login/app-1"]
