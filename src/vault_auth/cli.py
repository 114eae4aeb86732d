"""Terminal rendering for the ``vault-auth`` commands.

The functions here only present results; building sessions and auth methods
happens in ``vault_auth.main``.
"""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from vault_auth.context import Context
from vault_auth.errors import VaultAuthError
from vault_auth.methods.base import AuthMethod, RemoteAuthMethod
from vault_auth.methods.composite import CompositeAuthMethod
from vault_auth.session import SessionHandle

console = Console()


def _mask(token: str) -> str:
    if len(token) <= 8:
        return "*" * len(token)
    return f"{token[:4]}...{token[-4:]}"


def _members(auth: AuthMethod) -> list[AuthMethod]:
    if isinstance(auth, CompositeAuthMethod):
        return list(auth.methods)
    return [auth]


def show_methods(auth: AuthMethod) -> None:
    """Print the auth methods in precedence order and whether each is usable."""
    table = Table(title="Vault Auth Methods")
    table.add_column("#", style="cyan")
    table.add_column("Method", style="bold")
    table.add_column("Mount")
    table.add_column("Status")

    for position, method in enumerate(_members(auth), start=1):
        mount = method.mount if isinstance(method, RemoteAuthMethod) else "-"
        problems = method.validate_config()
        status = "[red]" + escape("; ".join(problems)) + "[/red]" if problems else "[green]ready[/green]"
        table.add_row(str(position), method.name, mount, status)

    console.print(table)


def run_login(
    session: SessionHandle,
    auth: AuthMethod,
    ctx: Context | None = None,
    *,
    show_token: bool = False,
    revoke: bool = False,
) -> int:
    """Log in, report the outcome and optionally revoke straight away.

    Returns the process exit status.
    """
    try:
        auth.login(session, ctx)
    except VaultAuthError as exc:
        console.print(f"[red]Authentication failed:[/red] {escape(str(exc))}", highlight=False)
        return 1

    chosen = auth.chosen if isinstance(auth, CompositeAuthMethod) else auth
    method_name = chosen.name if chosen is not None else auth.name
    console.print(f"[green]Authenticated[/green] using the [bold]{method_name}[/bold] auth method")

    if show_token:
        console.print(session.token, markup=False, highlight=False, soft_wrap=True)
    else:
        console.print(f"  Token: {_mask(session.token)}", markup=False, highlight=False)

    if revoke:
        try:
            auth.logout(session, ctx)
        except VaultAuthError as exc:
            console.print(f"[red]Logout failed:[/red] {escape(str(exc))}", highlight=False)
            return 1
        console.print("[dim]Token released.[/dim]")

    return 0
