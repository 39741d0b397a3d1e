"""
flowdemo CLI

Command-line front-end for a Flow access node: wallet session, scripts,
transactions, contract deployment and event queries.

Identity = a local secp256k1 key registered on a Flow account. The wallet
session maps that key to the account; every transaction is proposed, paid
and authorized by the logged-in account.

Commands:
  script   - Execute the sample script (a + b)
  keygen   - Create a signing key
  login    - Open a wallet session
  logout   - Close the wallet session
  whoami   - Show the logged-in account
  send     - Submit a simple transaction
  deploy   - Deploy the HelloWorld contract
  ping     - Call HelloWorld.hello()
  events   - Query HelloWorld events
  info     - Show configuration and session status
"""

from __future__ import annotations

import sys

import click

from .access.rpc import AccessConfig
from .identity.keys import get_public_key, load_private_key
from .identity.session import CurrentUser, is_logged_in
from .logs import setup_logging


# ============ Constants ============

VERSION = "0.1.0"


# ============ Banner ============


def _print_banner() -> None:
    border = click.style("  ◆ ═══════════════════════════════════════ ◆", fg="cyan")
    click.echo()
    click.echo(border)
    click.echo(
        click.style("        F L O W D E M O", fg="bright_white", bold=True)
        + click.style(f"        v{VERSION}", dim=True)
    )
    click.echo(border)
    click.echo()


# ============ Main CLI Group ============


@click.group(invoke_without_command=True)
@click.version_option(version=VERSION, prog_name="flowdemo")
@click.option(
    "--log-level",
    envvar="FLOWDEMO_LOG_LEVEL",
    default="WARNING",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Diagnostic log level (logs go to stderr)",
)
@click.pass_context
def cli(ctx: click.Context, log_level: str) -> None:
    """Flow access node demo."""
    setup_logging(log_level)
    if ctx.invoked_subcommand is None:
        _print_banner()
        click.echo(ctx.get_help())


# ============ Top-level Commands ============

from .commands.auth import keygen, login, logout
from .commands.events import events
from .commands.script import script
from .commands.transact import deploy, ping, send

cli.add_command(script)
cli.add_command(keygen)
cli.add_command(login)
cli.add_command(logout)
cli.add_command(send)
cli.add_command(deploy)
cli.add_command(ping)
cli.add_command(events)


# ============ Identity ============


@cli.command()
def whoami() -> None:
    """Show the logged-in account."""
    user = CurrentUser().snapshot()
    if not is_logged_in(user):
        click.echo("Not logged in.")
        click.echo("Run 'flowdemo login --address <addr>' to log in.")
        sys.exit(1)

    click.secho(f"Welcome, {user['identity']['name']}", bold=True)
    click.echo("Your Address")
    click.echo(f"  {user['addr']}")


# ============ Info ============


@cli.command()
def info() -> None:
    """Show configuration and session status."""
    _print_banner()

    config = AccessConfig.from_env()
    click.echo(
        click.style("  Access node: ", dim=True)
        + click.style(config.access_node, fg="bright_white")
    )

    try:
        private_key = load_private_key()
    except ValueError:
        private_key = None
    if private_key is None:
        key_text = click.style("not created", fg="yellow") + click.style("  (run: flowdemo keygen)", dim=True)
    else:
        try:
            public_key = get_public_key(private_key)
            key_text = click.style(public_key[:16] + "…", fg="bright_white")
        except ValueError:
            key_text = click.style("malformed", fg="red") + click.style("  (run: flowdemo keygen --force)", dim=True)
    click.echo(click.style("  Key:         ", dim=True) + key_text)

    user = CurrentUser().snapshot()
    if is_logged_in(user):
        session_text = click.style(user["addr"], fg="green")
    else:
        session_text = click.style("logged out", fg="yellow")
    click.echo(click.style("  Session:     ", dim=True) + session_text)
    click.echo()


# ============ Entry Points ============


def main() -> None:
    """flowdemo CLI entry point."""
    # Ensure UTF-8 output on Windows (for box-drawing symbols)
    if sys.platform == "win32":
        try:
            sys.stdout.reconfigure(encoding="utf-8")  # type: ignore[union-attr]
            sys.stderr.reconfigure(encoding="utf-8")  # type: ignore[union-attr]
        except (AttributeError, OSError):
            pass
    cli()


if __name__ == "__main__":
    main()
