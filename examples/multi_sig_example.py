#!/usr/bin/env python3
"""
Example of a transaction signed by two independent wallets.
"""
import asyncio

from pact_sdk import (
    KeyPairWallet,
    NetworkContext,
    collect_signatures,
    execution,
    merge_signatures,
    pact_decimal,
)


async def main():
    context = NetworkContext.from_network("development")
    sender00 = KeyPairWallet.from_context(context, "sender00")
    sender01 = KeyPairWallet.from_context(context, "sender01")

    builder = (
        execution('(coin.transfer "sender01" "sender00" 1.0)', context)
        .with_meta(sender="sender00")
        .with_signer(sender00.public_key, lambda sign_for: [sign_for("coin.GAS")])
        .with_signer(sender01.public_key, lambda sign_for: [
            sign_for("coin.TRANSFER", "sender01", "sender00", pact_decimal(1.0))
        ])
    )

    # Both wallets available in one process: collect in one step
    result = await builder.multi_sign([sender01, sender00]).submit_and_listen(preflight=True)
    print(f"Multi-signed transfer: {result}")

    # Wallets held by different parties: each signs its own copy, then merge
    unsigned = await builder.with_nonce("multi-sig-example").build().get_signed_transaction()
    from_sender00 = await sender00.sign(unsigned)
    from_sender01 = await sender01.sign(unsigned)
    merged = merge_signatures(from_sender00, from_sender01)
    print(f"Merged signatures: {[slot.sig[:16] for slot in merged.sigs]}")

    # collect_signatures also works on an already serialized transaction
    collected = await collect_signatures(unsigned, [sender00, sender01])
    print(f"Collected {len(collected.sigs)} signatures for {collected.hash}")


if __name__ == "__main__":
    asyncio.run(main())
