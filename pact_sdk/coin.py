"""
Helpers for the ``coin`` contract.
"""
import json
import logging
from decimal import Decimal
from typing import Any, Dict, Optional, Union

from .builder import execution
from .client import PactClient
from .context import NetworkContext
from .exceptions import TransactionError
from .models import KeyPair, Keyset
from .signer import KeyPairWallet, Wallet
from .utils import get_k_account_key, pact_decimal

logger = logging.getLogger(__name__)

Amount = Union[int, float, str, Decimal]


def _pact_string(value: str) -> str:
    return json.dumps(value)


def _resolve_wallet(context: NetworkContext, wallet: Optional[Wallet]) -> Wallet:
    return wallet or context.get_wallet() or KeyPairWallet.from_context(context)


async def details(
    account: str,
    context: NetworkContext,
    chain_id: Optional[str] = None,
    client: Optional[PactClient] = None
) -> Dict[str, Any]:
    """Read the details (balance, guard) of a coin account"""
    return await (
        execution(f"(coin.details {_pact_string(account)})", context)
        .build()
        .dirty_read(chain_id, client=client)
    )


async def get_balance(
    account: str,
    context: NetworkContext,
    chain_id: Optional[str] = None,
    client: Optional[PactClient] = None
) -> Any:
    return await (
        execution(f"(coin.get-balance {_pact_string(account)})", context)
        .build()
        .dirty_read(chain_id, client=client)
    )


async def account_exists(
    account: str,
    context: NetworkContext,
    chain_id: Optional[str] = None,
    client: Optional[PactClient] = None
) -> bool:
    """True if the account exists on the chain"""
    try:
        await details(account, context, chain_id=chain_id, client=client)
        return True
    except TransactionError as e:
        logger.debug("Account %s not found: %s", account, e.error)
        return False


async def create_account(
    key_pair: KeyPair,
    context: NetworkContext,
    wallet: Optional[Wallet] = None,
    chain_id: Optional[str] = None,
    client: Optional[PactClient] = None
) -> Any:
    """
    Create a coin account guarded by a single key

    Gas is paid by the wallet's account, which defaults to the context's
    sender account.

    Args:
        key_pair: Account name and public key of the new account
        context: Target network
        wallet: Gas payer (defaults to the context's wallet or sender key pair)
        chain_id: Target chain (defaults to the context's chain)
        client: Client to use instead of the context's

    Returns:
        The result data of the transaction
    """
    wallet = _resolve_wallet(context, wallet)
    payer = await wallet.get_account()

    builder = (
        execution(f'(coin.create-account {_pact_string(key_pair.account)} (read-keyset "ks"))', context)
        .with_meta(sender=payer.address)
        .with_keyset("ks", Keyset(keys=[key_pair.public_key]))
        .with_signer(payer.public_key, lambda sign_for: [sign_for("coin.GAS")])
    )
    if chain_id is not None:
        builder.with_chain_id(chain_id)

    logger.info("Creating account %s", key_pair.account)
    return await builder.sign(wallet).submit_and_listen(client=client)


async def transfer(
    sender: str,
    receiver: str,
    amount: Amount,
    context: NetworkContext,
    wallet: Optional[Wallet] = None,
    chain_id: Optional[str] = None,
    client: Optional[PactClient] = None
) -> Any:
    """
    Transfer coins between two existing accounts

    The wallet must hold the sender's key; it signs for gas and the transfer.
    """
    wallet = _resolve_wallet(context, wallet)
    signer = await wallet.get_account()

    builder = (
        execution(
            f'(coin.transfer {_pact_string(sender)} {_pact_string(receiver)} (read-decimal "amount"))',
            context
        )
        .with_data("amount", pact_decimal(amount))
        .with_meta(sender=sender)
        .with_signer(
            signer.public_key,
            lambda sign_for: [
                sign_for("coin.GAS"),
                sign_for("coin.TRANSFER", sender, receiver, pact_decimal(amount)),
            ]
        )
    )
    if chain_id is not None:
        builder.with_chain_id(chain_id)

    logger.info("Transferring %s from %s to %s", amount, sender, receiver)
    return await builder.sign(wallet).submit_and_listen(client=client)


async def transfer_create(
    sender: str,
    receiver: str,
    amount: Amount,
    context: NetworkContext,
    wallet: Optional[Wallet] = None,
    chain_id: Optional[str] = None,
    client: Optional[PactClient] = None
) -> Any:
    """Transfer coins to a ``k:`` account, creating it if needed"""
    if not receiver.startswith("k:"):
        raise ValueError(f"transfer_create needs a k: receiver account, got {receiver!r}")
    wallet = _resolve_wallet(context, wallet)
    signer = await wallet.get_account()

    builder = (
        execution(
            f'(coin.transfer-create {_pact_string(sender)} {_pact_string(receiver)} '
            f'(read-keyset "ks") (read-decimal "amount"))',
            context
        )
        .with_data("amount", pact_decimal(amount))
        .with_meta(sender=sender)
        .with_keyset("ks", Keyset(keys=[get_k_account_key(receiver)]))
        .with_signer(
            signer.public_key,
            lambda sign_for: [
                sign_for("coin.GAS"),
                sign_for("coin.TRANSFER", sender, receiver, pact_decimal(amount)),
            ]
        )
    )
    if chain_id is not None:
        builder.with_chain_id(chain_id)

    return await builder.sign(wallet).submit_and_listen(client=client)
