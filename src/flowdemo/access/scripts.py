"""
Cadence sources used by the demo commands.

The sample contract emits ``CustomEvent`` from ``hello()``; the ping
transaction calls it so ``flowdemo events`` has something to find.
"""

from __future__ import annotations

from string import Template

from ..utils import strip_hex_prefix

HELLO_CONTRACT_NAME = "HelloWorld"
HELLO_EVENT_NAME = "CustomEvent"
# Address is written without the 0x prefix, as it appears in event types
DEFAULT_HELLO_ADDRESS = "01cf0e2f2f715450"

SUM_SCRIPT = """\
access(all) fun main(a: Int, b: Int): Int {
    return a + b
}
"""

LOG_TRANSACTION = """\
transaction {
    prepare(acct: &Account) {
        log("Transaction Submitted")
    }
}
"""

HELLO_WORLD_CONTRACT = """\
access(all) contract HelloWorld {
    access(all) event CustomEvent(x: Int, y: Int)

    access(all) let greeting: String

    init() {
        self.greeting = "Hello, Cadence!"
    }

    access(all) fun hello(): String {
        emit CustomEvent(x: 4, y: 2)
        return self.greeting
    }
}
"""

DEPLOY_TRANSACTION = """\
transaction(name: String, code: String) {
    prepare(signer: auth(AddContract) &Account) {
        signer.contracts.add(name: name, code: code.decodeHex())
    }
}
"""

_PING_TEMPLATE = Template("""\
import HelloWorld from 0x$address

transaction {
    prepare(acct: &Account) {}

    execute {
        log(HelloWorld.hello())
    }
}
""")


def ping_transaction(contract_address: str) -> str:
    return _PING_TEMPLATE.substitute(address=strip_hex_prefix(contract_address))
