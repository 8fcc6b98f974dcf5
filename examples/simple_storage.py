#!/usr/bin/env python3
"""
Simple Storage Example

Binds a deployed SimpleStorage contract, reads its value, then writes a
new one and reports confirmations as blocks arrive.

Requires a JSON-RPC node (e.g. anvil or hardhat on localhost:8545) with
the contract deployed. Configure it through a .env file:

    CHAINBIND_RPC_URL=http://localhost
    CHAINBIND_RPC_PORT=8545
    CHAINBIND_POLLING_INTERVAL_MS=200
    CONTRACT_ADDRESS=0x...
    PRIVATE_KEY=0x...

Run with: python examples/simple_storage.py "new value"
"""

import asyncio
import logging
import os
import sys

from dotenv import load_dotenv

from chainbind import (
    ConfirmationMessage,
    Contract,
    LocalSigner,
    configure_logging,
    load_config_from_env,
    set_config,
)

SIMPLE_STORAGE_ABI = [
    {
        "inputs": [],
        "name": "getValue",
        "outputs": [{"name": "", "type": "string"}],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "inputs": [{"name": "value", "type": "string"}],
        "name": "setValue",
        "outputs": [],
        "stateMutability": "nonpayable",
        "type": "function",
    },
    {
        "anonymous": False,
        "inputs": [
            {"indexed": True, "name": "author", "type": "address"},
            {"indexed": False, "name": "oldValue", "type": "string"},
            {"indexed": False, "name": "newValue", "type": "string"},
        ],
        "name": "ValueChanged",
        "type": "event",
    },
]

WANTED_CONFIRMATIONS = 1


async def main() -> None:
    load_dotenv()
    configure_logging(logging.INFO)
    set_config(load_config_from_env())

    address = os.environ["CONTRACT_ADDRESS"]
    signer = LocalSigner.from_private_key(os.environ["PRIVATE_KEY"])
    new_value = sys.argv[1] if len(sys.argv) > 1 else "hello from chainbind"

    print("=" * 60)
    print("CHAINBIND - Simple Storage")
    print("=" * 60)

    contract = Contract(address, SIMPLE_STORAGE_ABI)
    print(f"Current value: {await contract.getValue()!r}")

    writable = contract.with_signer(signer)
    subscription = writable.setValue(new_value)
    done = asyncio.Event()

    def on_confirmation(message: ConfirmationMessage) -> None:
        print(f"[{message.receipt.transaction_hash[:10]}] {message.confirmations} confirmation(s)")
        if message.confirmations >= WANTED_CONFIRMATIONS:
            subscription.unsubscribe()
            done.set()

    def on_failed(error: Exception) -> None:
        print(f"Subscription failed: {error}")
        done.set()

    await subscription.on("failed", on_failed)
    await subscription.on("confirmation", on_confirmation)

    tx = await subscription.get_transaction()
    print(f"Transaction sent: {tx.hash} (nonce {tx.nonce})")

    await done.wait()
    print(f"Value now: {await contract.getValue()!r}")


if __name__ == "__main__":
    asyncio.run(main())
