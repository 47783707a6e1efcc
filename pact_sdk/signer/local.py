"""
Key pair wallet backed by an in-memory Ed25519 private key.
"""
import logging
from typing import TYPE_CHECKING, List, Optional, Union

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey,
    Ed25519PublicKey,
)
from cryptography.hazmat.primitives.serialization import (
    Encoding,
    NoEncryption,
    PrivateFormat,
    PublicFormat,
)

from ..exceptions import WalletError
from ..models import KeyPair, PartiallySignedTransaction, TransactionSig, WalletAccount
from ..utils import base64url_decode, k_account

if TYPE_CHECKING:
    from ..context import NetworkContext

logger = logging.getLogger(__name__)


def _public_key_hex(private_key: Ed25519PrivateKey) -> str:
    return private_key.public_key().public_bytes(Encoding.Raw, PublicFormat.Raw).hex()


def _private_key_hex(private_key: Ed25519PrivateKey) -> str:
    return private_key.private_bytes(Encoding.Raw, PrivateFormat.Raw, NoEncryption()).hex()


def generate_k_account() -> KeyPair:
    """
    Generate a fresh Ed25519 key pair and its ``k:`` account.

    Returns:
        KeyPair with hex encoded keys
    """
    private_key = Ed25519PrivateKey.generate()
    public_key = _public_key_hex(private_key)
    return KeyPair(
        account=k_account(public_key),
        public_key=public_key,
        secret_key=_private_key_hex(private_key),
    )


def generate_k_accounts(count: int = 10) -> List[KeyPair]:
    """Generate ``count`` fresh ``k:`` accounts"""
    if count < 0:
        raise ValueError(f"count must be non-negative, got {count}")
    return [generate_k_account() for _ in range(count)]


def verify_signature(public_key: str, tx_hash: str, sig: str) -> bool:
    """
    Check an Ed25519 signature over a transaction hash.

    Args:
        public_key: Hex encoded public key
        tx_hash: Unpadded base64url transaction hash
        sig: Hex encoded signature

    Returns:
        True if the signature is valid
    """
    try:
        key = Ed25519PublicKey.from_public_bytes(bytes.fromhex(public_key))
        key.verify(bytes.fromhex(sig), base64url_decode(tx_hash))
        return True
    except (InvalidSignature, ValueError):
        return False


class KeyPairWallet:
    """
    Wallet holding a single Ed25519 key.

    Signs the slots whose declared public key matches its own key and leaves
    every other slot untouched, so results from several wallets can be
    combined by position.
    """

    def __init__(
        self,
        private_key: Union[str, bytes, Ed25519PrivateKey],
        account: Optional[str] = None
    ):
        """
        Initialize the wallet

        Args:
            private_key: Ed25519 private key as a 32-byte hex string, raw bytes
                or a cryptography key object
            account: Account name (defaults to the ``k:`` account of the key)

        Raises:
            WalletError: If the private key is malformed
        """
        if isinstance(private_key, Ed25519PrivateKey):
            self._private_key = private_key
        else:
            try:
                raw = bytes.fromhex(private_key) if isinstance(private_key, str) else private_key
                self._private_key = Ed25519PrivateKey.from_private_bytes(raw)
            except ValueError as e:
                raise WalletError(f"Invalid Ed25519 private key: {e}")

        self.public_key = _public_key_hex(self._private_key)
        self.account = account or k_account(self.public_key)

    @classmethod
    def from_private_key(cls, private_key: str, account: Optional[str] = None) -> "KeyPairWallet":
        return cls(private_key, account=account)

    @classmethod
    def from_key_pair(cls, key_pair: KeyPair) -> "KeyPairWallet":
        wallet = cls(key_pair.secret_key, account=key_pair.account)
        if wallet.public_key != key_pair.public_key:
            raise WalletError(f"Secret key does not match public key for account {key_pair.account}")
        return wallet

    @classmethod
    def generate(cls) -> "KeyPairWallet":
        """Create a wallet with a freshly generated key"""
        return cls(Ed25519PrivateKey.generate())

    @classmethod
    def from_context(cls, context: "NetworkContext", account: Optional[str] = None) -> "KeyPairWallet":
        """
        Create a wallet from the key pairs configured for a network

        Args:
            context: Network context holding the key pairs
            account: Account name (defaults to the network's sender account)

        Raises:
            WalletError: If no key pair is configured for the account
        """
        key_pair = context.get_signer_keys(account)
        if key_pair is None:
            raise WalletError(
                f"No key pair configured for account {account or context.sender_account!r} "
                f"on network {context.name}"
            )
        return cls.from_key_pair(key_pair)

    async def get_account(self) -> WalletAccount:
        return WalletAccount(address=self.account, public_key=self.public_key)

    def sign_hash(self, tx_hash: str) -> str:
        """Sign the raw bytes of a base64url hash, returning a hex signature"""
        try:
            digest = base64url_decode(tx_hash)
        except ValueError as e:
            raise WalletError(f"Cannot sign malformed hash {tx_hash!r}: {e}")
        return self._private_key.sign(digest).hex()

    async def sign(self, tx: PartiallySignedTransaction) -> PartiallySignedTransaction:
        sigs = list(tx.sigs)
        signed = 0
        for index, key in enumerate(tx.signer_keys()):
            if key == self.public_key:
                sigs[index] = TransactionSig(sig=self.sign_hash(tx.hash), pub_key=key)
                signed += 1

        if signed == 0:
            logger.debug("Key %s… is not a signer of %s", self.public_key[:8], tx.hash)
        else:
            logger.debug("Signed %d slot(s) of %s", signed, tx.hash)

        return PartiallySignedTransaction(cmd=tx.cmd, hash=tx.hash, sigs=sigs)

    def __repr__(self) -> str:
        return f"KeyPairWallet(account={self.account!r})"
