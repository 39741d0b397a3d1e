"""
Transact - Commands that submit transactions as the logged-in account.

- send:   a transaction that only logs a message
- deploy: deploy the HelloWorld sample contract
- ping:   call HelloWorld.hello(), which emits CustomEvent

Each command prints the transaction id, follows its status until it is
executed, and exits non-zero if it fails.
"""

from __future__ import annotations

import sys
from typing import Any, Optional

import click

from ..access import cadence
from ..access.rpc import DEFAULT_ACCESS_NODE, AccessClient, AccessConfig
from ..access.scripts import (
    DEFAULT_HELLO_ADDRESS,
    DEPLOY_TRANSACTION,
    HELLO_CONTRACT_NAME,
    HELLO_WORLD_CONTRACT,
    LOG_TRANSACTION,
    ping_transaction,
)
from ..access.tx import DEFAULT_GAS_LIMIT, TransactionResult, send_transaction, wait_until_executed
from ..errors import FlowDemoError
from ..identity.session import CurrentUser

access_node_option = click.option(
    "--access-node",
    envvar="FLOW_ACCESS_NODE",
    default=DEFAULT_ACCESS_NODE,
    help="Flow Access Node REST URL",
)
gas_limit_option = click.option(
    "--gas-limit", default=DEFAULT_GAS_LIMIT, type=int, show_default=True, help="Gas limit"
)
wait_option = click.option(
    "--wait/--no-wait", default=True, show_default=True, help="Follow the transaction status"
)


def _print_status(result: TransactionResult) -> None:
    click.echo(f"  Status: {result.status.name}")


def _submit(
    access_node: str,
    code: str,
    success_message: str,
    arguments: Optional[list[dict[str, Any]]] = None,
    gas_limit: int = DEFAULT_GAS_LIMIT,
    wait: bool = True,
) -> None:
    try:
        authorizer = CurrentUser().authorization()
        with AccessClient(AccessConfig(access_node=access_node)) as client:
            tx_id = send_transaction(
                client, code, authorizer, arguments=arguments, gas_limit=gas_limit
            )
            click.echo(f"  TX: {tx_id}")
            if not wait:
                return
            wait_until_executed(client, tx_id, on_status=_print_status)
    except FlowDemoError as exc:
        click.secho(f"ERROR: {exc}", fg="red")
        sys.exit(exc.exit_code)
    except TimeoutError as exc:
        click.secho(f"ERROR: {exc}", fg="red")
        sys.exit(1)

    click.secho(success_message, fg="green")


@click.command()
@access_node_option
@gas_limit_option
@wait_option
def send(access_node: str, gas_limit: int, wait: bool) -> None:
    """Submit a transaction that logs a message."""
    _submit(access_node, LOG_TRANSACTION, "Transaction was executed", gas_limit=gas_limit, wait=wait)


@click.command()
@access_node_option
@click.option("--gas-limit", default=1000, type=int, show_default=True, help="Gas limit")
@wait_option
def deploy(access_node: str, gas_limit: int, wait: bool) -> None:
    """Deploy the HelloWorld contract to your account."""
    code_hex = HELLO_WORLD_CONTRACT.encode("utf-8").hex()
    _submit(
        access_node,
        DEPLOY_TRANSACTION,
        "Contract was deployed",
        arguments=[cadence.arg(HELLO_CONTRACT_NAME, "String"), cadence.arg(code_hex, "String")],
        gas_limit=gas_limit,
        wait=wait,
    )


@click.command()
@access_node_option
@click.option(
    "--contract-address",
    envvar="HELLO_CONTRACT_ADDRESS",
    default=DEFAULT_HELLO_ADDRESS,
    help="Address of the deployed HelloWorld contract",
)
@gas_limit_option
@wait_option
def ping(access_node: str, contract_address: str, gas_limit: int, wait: bool) -> None:
    """Call HelloWorld.hello(), emitting a CustomEvent."""
    _submit(
        access_node,
        ping_transaction(contract_address),
        "Transaction was executed",
        gas_limit=gas_limit,
        wait=wait,
    )
