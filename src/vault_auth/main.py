"""CLI entry point: ties together settings, environment and the auth methods."""

from __future__ import annotations

import argparse
import logging
import sys

from rich.markup import escape

from vault_auth.config import build_auth_method, load_settings, method_names, vault_sections
from vault_auth.context import Context
from vault_auth.env import EnvSource
from vault_auth.errors import ConfigurationError
from vault_auth.session import VaultSession


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="vault-auth",
        description="Obtain and revoke Vault tokens using configured or environment auth methods",
    )
    parser.add_argument("--config", default=None, help="Path to a settings.yaml file")
    parser.add_argument(
        "--address",
        default=None,
        help="Vault address (default: vault.address from settings, then $VAULT_ADDR)",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("methods", help="List auth methods and whether they are usable")

    login = commands.add_parser("login", help="Negotiate a Vault token")
    login.add_argument("--method", choices=method_names(), default=None, help="Auth method to use")
    login.add_argument("--show-token", action="store_true", help="Print the full token")
    login.add_argument("--revoke", action="store_true", help="Revoke the token again right away")
    login.add_argument("--timeout", type=float, default=None, help="Give up after this many seconds")
    return parser


def main(argv: list[str] | None = None) -> None:
    args = _build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    from vault_auth.cli import console, run_login, show_methods

    try:
        settings = load_settings(args.config) if args.config else {}
        vault_cfg, auth_cfg = vault_sections(settings)

        method = getattr(args, "method", None)
        if method and method != auth_cfg.get("method", "env"):
            auth_cfg = {"method": method}

        auth = build_auth_method(auth_cfg, EnvSource())
    except ConfigurationError as exc:
        console.print(f"[red]Configuration error:[/red] {escape(str(exc))}", highlight=False)
        sys.exit(1)

    if args.command == "methods":
        show_methods(auth)
        return

    session = VaultSession(url=args.address or vault_cfg.get("address"))
    status = run_login(
        session,
        auth,
        Context(timeout=args.timeout),
        show_token=args.show_token,
        revoke=args.revoke,
    )
    if status:
        sys.exit(status)


if __name__ == "__main__":
    main()
