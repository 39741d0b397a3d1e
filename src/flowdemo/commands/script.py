"""
Script - Execute a read-only Cadence script on the access node.
"""

from __future__ import annotations

import sys

import click

from ..access import cadence
from ..access.rpc import DEFAULT_ACCESS_NODE, AccessClient, AccessConfig
from ..access.scripts import SUM_SCRIPT
from ..errors import FlowDemoError


@click.command()
@click.option("--a", "a", default=10, type=int, show_default=True, help="First operand")
@click.option("--b", "b", default=20, type=int, show_default=True, help="Second operand")
@click.option(
    "--access-node",
    envvar="FLOW_ACCESS_NODE",
    default=DEFAULT_ACCESS_NODE,
    help="Flow Access Node REST URL",
)
def script(a: int, b: int, access_node: str) -> None:
    """Execute the sample script (a + b) and show the result."""
    try:
        with AccessClient(AccessConfig(access_node=access_node)) as client:
            result = client.execute_script(
                SUM_SCRIPT, [cadence.arg(a, "Int"), cadence.arg(b, "Int")]
            )
    except FlowDemoError as exc:
        click.secho(f"ERROR: {exc}", fg="red")
        sys.exit(exc.exit_code)

    click.echo(f"Computation Result: {result}")
