"""
Pact SDK - build, sign and dispatch Pact transactions on Chainweb.
"""
from .version import __version__
from .builder import PactTransactionBuilder, continuation, execution, sign_for
from .client import (
    PactClient,
    create_client,
    create_devnet_client,
    create_mainnet_client,
    create_testnet_client,
)
from .config import NetworkConfig
from .context import NetworkContext
from .dispatcher import PactTransactionDispatcher
from .envelope import create_transaction, is_fully_signed, parse_transaction
from .exceptions import (
    ClientError,
    ClientErrorCode,
    ConfigurationError,
    EnvelopeError,
    HashMismatchError,
    MissingSignaturesError,
    PactSdkError,
    PreflightError,
    SigningError,
    TransactionError,
    UnsignedTransactionError,
    WalletError,
)
from .models import (
    Capability,
    Command,
    ContPayload,
    ExecPayload,
    KeyPair,
    Keyset,
    LocalTransactionResult,
    Meta,
    PartiallySignedTransaction,
    Signer,
    Transaction,
    TransactionDescriptor,
    TransactionResult,
    TransactionSig,
    Verifier,
    WalletAccount,
)
from .signer import (
    KeyPairWallet,
    Wallet,
    collect_signatures,
    generate_k_account,
    generate_k_accounts,
    merge_signatures,
)
from .utils import ALL_CHAINS, get_k_account_key, pact_decimal
from . import coin

__all__ = [
    "__version__",
    "PactTransactionBuilder",
    "PactTransactionDispatcher",
    "execution",
    "continuation",
    "sign_for",
    "PactClient",
    "create_client",
    "create_devnet_client",
    "create_mainnet_client",
    "create_testnet_client",
    "NetworkConfig",
    "NetworkContext",
    "create_transaction",
    "is_fully_signed",
    "parse_transaction",
    "PactSdkError",
    "ConfigurationError",
    "EnvelopeError",
    "SigningError",
    "UnsignedTransactionError",
    "MissingSignaturesError",
    "HashMismatchError",
    "TransactionError",
    "PreflightError",
    "WalletError",
    "ClientError",
    "ClientErrorCode",
    "Capability",
    "Command",
    "ContPayload",
    "ExecPayload",
    "KeyPair",
    "Keyset",
    "LocalTransactionResult",
    "Meta",
    "PartiallySignedTransaction",
    "Signer",
    "Transaction",
    "TransactionDescriptor",
    "TransactionResult",
    "TransactionSig",
    "Verifier",
    "WalletAccount",
    "Wallet",
    "KeyPairWallet",
    "collect_signatures",
    "merge_signatures",
    "generate_k_account",
    "generate_k_accounts",
    "ALL_CHAINS",
    "get_k_account_key",
    "pact_decimal",
    "coin",
]
