"""
Signing authorities for Pact transactions.
"""
from typing import Protocol, runtime_checkable

from ..models import PartiallySignedTransaction, WalletAccount


@runtime_checkable
class Wallet(Protocol):
    """
    Protocol for signing authorities.

    ``sign`` must return a transaction whose ``sigs`` array is positionally
    aligned with the signers of the transaction it was given.
    """

    async def get_account(self) -> WalletAccount:
        """Return the account (address and public key) this wallet controls"""
        ...

    async def sign(self, tx: PartiallySignedTransaction) -> PartiallySignedTransaction:
        """Sign every slot this wallet controls and return a new transaction"""
        ...


from .local import KeyPairWallet, generate_k_account, generate_k_accounts  # noqa: E402
from .multi_sig import collect_signatures, merge_signatures, sign_with_wallet  # noqa: E402

__all__ = [
    "Wallet",
    "KeyPairWallet",
    "generate_k_account",
    "generate_k_accounts",
    "collect_signatures",
    "merge_signatures",
    "sign_with_wallet",
]
