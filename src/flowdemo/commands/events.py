"""
Events - Query historical events and print them with normalized field names.
"""

from __future__ import annotations

import json
import sys
from typing import Optional

import click

from ..access.events import get_hello_events
from ..access.rpc import DEFAULT_ACCESS_NODE, AccessClient, AccessConfig
from ..access.scripts import DEFAULT_HELLO_ADDRESS, HELLO_CONTRACT_NAME, HELLO_EVENT_NAME
from ..errors import FlowDemoError


@click.command()
@click.option(
    "--contract-address",
    envvar="HELLO_CONTRACT_ADDRESS",
    default=DEFAULT_HELLO_ADDRESS,
    show_default=True,
    help="Contract address (with or without 0x)",
)
@click.option("--contract-name", default=HELLO_CONTRACT_NAME, show_default=True)
@click.option("--event-name", default=HELLO_EVENT_NAME, show_default=True)
@click.option("--from", "from_height", default=0, type=int, show_default=True, help="First block height")
@click.option("--to", "to_height", default=None, type=int, help="Last block height (default: latest sealed)")
@click.option(
    "--access-node",
    envvar="FLOW_ACCESS_NODE",
    default=DEFAULT_ACCESS_NODE,
    help="Flow Access Node REST URL",
)
def events(
    contract_address: str,
    contract_name: str,
    event_name: str,
    from_height: int,
    to_height: Optional[int],
    access_node: str,
) -> None:
    """Fetch events of a contract over a block range."""
    try:
        with AccessClient(AccessConfig(access_node=access_node)) as client:
            found = get_hello_events(
                client,
                contract_address=contract_address,
                contract_name=contract_name,
                event_name=event_name,
                from_height=from_height,
                to_height=to_height,
            )
    except ValueError as exc:
        raise click.BadParameter(str(exc)) from exc
    except FlowDemoError as exc:
        click.secho(f"ERROR: {exc}", fg="red")
        sys.exit(exc.exit_code)

    click.echo(json.dumps({"events": found}, indent=2, default=str))
