#!/usr/bin/env python3
"""
Simple example of using the Pact SDK against a local devnet.
"""
import asyncio
import os

from pact_sdk import NetworkContext, KeyPairWallet, execution, coin, generate_k_account


async def main():
    """
    Demonstrate basic usage of the builder and dispatcher.

    This example shows how to:
    1. Create a network context and a wallet
    2. Read an account with a dirty read
    3. Create an account and transfer to it
    """
    context = NetworkContext.from_network(
        os.environ.get("PACT_NETWORK", "development"),
        rpc_url=os.environ.get("PACT_RPC_URL")
    )
    wallet = KeyPairWallet.from_context(context)
    context.set_wallet(wallet)

    if not context.get_client().health_check():
        print("ERROR: node is not reachable, start a devnet first")
        return

    try:
        # Read-only query, no signature needed
        balance = await execution('(coin.get-balance "sender00")', context).build().dirty_read()
        print(f"sender00 balance: {balance}")

        # Same query on every chain
        balances = await execution('(coin.get-balance "sender00")', context).build().dirty_read(["0", "1", "2"])
        print(f"sender00 balances on chains 0-2: {balances}")

        # Create a fresh k: account and fund it
        new_account = generate_k_account()
        await coin.create_account(new_account, context)
        result = await coin.transfer("sender00", new_account.account, 1.5, context)
        print(f"Transfer result: {result}")

    except Exception as e:
        print(f"Error: {str(e)}")


if __name__ == "__main__":
    asyncio.run(main())
