"""
Signature collection across one or more signing authorities.
"""
import logging
from typing import TYPE_CHECKING, List, Sequence

from ..envelope import create_transaction
from ..exceptions import HashMismatchError, MissingSignaturesError, WalletError
from ..models import Capability, Command, PartiallySignedTransaction, Signer, TransactionSig

if TYPE_CHECKING:
    from . import Wallet

logger = logging.getLogger(__name__)

GAS_CAPABILITY = "coin.GAS"


async def sign_with_wallet(command: Command, wallet: "Wallet") -> PartiallySignedTransaction:
    """
    Serialize a command and have a single wallet sign it.

    When the command declares no signers, the wallet's account becomes the
    only signer (with a gas capability) and the gas payer.

    Args:
        command: Command to sign; updated in place when a default signer is added
        wallet: Signing authority

    Returns:
        The transaction as returned by the wallet

    Raises:
        WalletError: If the wallet returns a transaction for another command
    """
    if not command.signers:
        account = await wallet.get_account()
        command.signers.append(
            Signer(pub_key=account.public_key, clist=[Capability(name=GAS_CAPABILITY)])
        )
        command.meta.sender = account.address
        logger.debug("No signers declared, using wallet account %s", account.address)

    tx = create_transaction(command)
    signed = await wallet.sign(tx)
    if signed.hash != tx.hash:
        raise WalletError(f"Wallet returned transaction {signed.hash}, expected {tx.hash}")
    return signed


async def collect_signatures(
    tx: PartiallySignedTransaction,
    wallets: Sequence["Wallet"]
) -> PartiallySignedTransaction:
    """
    Collect signatures for every signer of a transaction from several wallets.

    Each wallet is asked to sign the original transaction only if its account
    key matches at least one signer, and only the slots it controls are taken
    from its answer, by position.

    Args:
        tx: Unsigned or partially signed transaction
        wallets: Signing authorities, processed in order

    Returns:
        Fully signed transaction; every slot carries ``sig`` and ``pub_key``

    Raises:
        MissingSignaturesError: If any slot is still unsigned afterwards
        WalletError: If a wallet's answer is not aligned with the signers or
            belongs to another command
    """
    keys = tx.signer_keys()
    result: List[TransactionSig] = [TransactionSig(pub_key=key) for key in keys]

    for wallet in wallets:
        account = await wallet.get_account()
        controlled = [index for index, key in enumerate(keys) if key == account.public_key]
        if not controlled:
            logger.debug("Wallet %s controls no signer of %s", account.address, tx.hash)
            continue

        signed = await wallet.sign(tx)
        if signed.hash != tx.hash:
            raise WalletError(
                f"Wallet {account.address} signed a different transaction: {signed.hash} != {tx.hash}"
            )
        if len(signed.sigs) != len(keys):
            raise WalletError(
                f"Wallet {account.address} returned {len(signed.sigs)} signature slot(s), "
                f"expected {len(keys)}"
            )

        for index in controlled:
            slot = signed.sigs[index]
            if slot is not None and slot.sig:
                result[index] = TransactionSig(sig=slot.sig, pub_key=keys[index])

    missing = [index for index, slot in enumerate(result) if not slot.sig]
    if missing:
        raise MissingSignaturesError(missing)

    return PartiallySignedTransaction(cmd=tx.cmd, hash=tx.hash, sigs=result)


def merge_signatures(*transactions: PartiallySignedTransaction) -> PartiallySignedTransaction:
    """
    Merge the signatures of several copies of the same transaction.

    For each slot the first non-empty signature, in argument order, wins.
    Slots nobody signed keep the public key they are waiting for.

    Raises:
        ValueError: If no transaction is given
        HashMismatchError: If the transactions do not share the same hash
    """
    if not transactions:
        raise ValueError("No transactions to merge")

    first = transactions[0]
    if any(tx.hash != first.hash for tx in transactions[1:]):
        raise HashMismatchError("Cannot merge transactions with different hashes")

    keys = first.signer_keys()
    merged: List[TransactionSig] = [TransactionSig(pub_key=key) for key in keys]
    for tx in transactions:
        for index, slot in enumerate(tx.sigs[:len(keys)]):
            if not merged[index].sig and slot is not None and slot.sig:
                merged[index] = TransactionSig(sig=slot.sig, pub_key=slot.pub_key or keys[index])

    return PartiallySignedTransaction(cmd=first.cmd, hash=first.hash, sigs=merged)
