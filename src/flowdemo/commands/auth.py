"""
Auth - Local key creation and wallet session commands.

- keygen: create a secp256k1 key pair and store it in ~/.flowdemo/.env
- login:  bind the stored key to a Flow account and open a session
- logout: clear the session
"""

from __future__ import annotations

import sys
from typing import Optional

import click

from ..access.rpc import DEFAULT_ACCESS_NODE, AccessClient, AccessConfig
from ..errors import FlowDemoError
from ..identity.keys import generate_keypair, get_public_key, load_private_key, save_private_key
from ..identity.session import HASH_ALGORITHM, SIGNATURE_ALGORITHM, CurrentUser


@click.command()
@click.option("--force", is_flag=True, help="Replace an existing key")
def keygen(force: bool) -> None:
    """Create a key pair for signing transactions."""
    if not force:
        try:
            existing = load_private_key()
        except ValueError:
            existing = None
        if existing:
            try:
                public_key = get_public_key(existing)
            except ValueError as exc:
                click.secho(f"ERROR: {exc}", fg="red")
                click.echo("Fix the key file or run 'flowdemo keygen --force' to replace it.")
                sys.exit(1)
            click.echo("A key already exists (use --force to replace it).")
            click.echo(f"  Public key: {public_key}")
            return

    private_key, public_key = generate_keypair()
    env_path = save_private_key(private_key)

    click.secho("Key created.", fg="green")
    click.echo(f"  Saved to:   {env_path}")
    click.echo(f"  Public key: {public_key}")
    click.echo(f"  Algorithms: {SIGNATURE_ALGORITHM} / {HASH_ALGORITHM}")
    click.echo("")
    click.echo("Add this key to a Flow account, then run 'flowdemo login --address <addr>'.")


@click.command()
@click.option("--address", required=True, help="Flow account address (0x...)")
@click.option("--key-index", default=0, type=int, show_default=True, help="Account key index")
@click.option("--name", default=None, help="Display name for the session")
@click.option(
    "--access-node",
    envvar="FLOW_ACCESS_NODE",
    default=DEFAULT_ACCESS_NODE,
    help="Flow Access Node REST URL",
)
def login(address: str, key_index: int, name: Optional[str], access_node: str) -> None:
    """Log in with the local key as a Flow account."""
    current_user = CurrentUser()
    try:
        with AccessClient(AccessConfig(access_node=access_node)) as client:
            user = current_user.authenticate(client, address, key_index=key_index, name=name)
    except FlowDemoError as exc:
        click.secho(f"Login failed: {exc}", fg="red")
        sys.exit(exc.exit_code)

    click.secho(f"Welcome, {user['identity']['name']}", fg="green", bold=True)
    click.echo(f"  Address: {user['addr']}")


@click.command()
def logout() -> None:
    """Log out of the current session."""
    CurrentUser().unauthenticate()
    click.echo("Logged out.")
