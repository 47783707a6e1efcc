"""
Exceptions for the Pact SDK.
"""
from enum import Enum
from typing import Any, List, Optional, Sequence


class PactSdkError(Exception):
    """Base exception for all Pact SDK errors."""
    pass


class ConfigurationError(PactSdkError):
    """Raised when a network context, wallet or sender is missing or invalid."""
    pass


class EnvelopeError(PactSdkError):
    """Raised when a transaction envelope (cmd/hash/sigs) is malformed."""
    pass


class SigningError(PactSdkError):
    """Base exception for signature related errors."""
    pass


class UnsignedTransactionError(SigningError):
    """Raised when a submission is attempted with empty signature slots."""
    pass


class MissingSignaturesError(SigningError):
    """Raised when signature collection leaves one or more slots empty."""

    def __init__(self, indices: Sequence[int]):
        self.indices: List[int] = list(indices)
        joined = ", ".join(str(i) for i in self.indices)
        super().__init__(f"Missing signatures from signers at indices: {joined}")


class HashMismatchError(SigningError):
    """Raised when merging signatures of transactions with different hashes."""
    pass


class TransactionError(PactSdkError):
    """
    Raised when the chain reports a failed execution.

    Carries the error payload returned by the node so callers can inspect it.
    """

    def __init__(self, message: str, error: Any = None, request_key: Optional[str] = None):
        self.error = error
        self.request_key = request_key
        super().__init__(message)


class PreflightError(TransactionError):
    """Raised when a preflight (local) run of a signed transaction fails."""

    def __init__(self, message: str, error: Any = None, warnings: Optional[List[str]] = None):
        self.warnings = list(warnings or [])
        super().__init__(message, error=error)


class WalletError(PactSdkError):
    """Raised when a wallet cannot provide an account or signatures."""
    pass


class ClientErrorCode(str, Enum):
    """Error codes for RPC transport failures."""
    NETWORK_ERROR = "NETWORK_ERROR"
    TIMEOUT = "TIMEOUT"
    HTTP_ERROR = "HTTP_ERROR"
    PARSE_ERROR = "PARSE_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"


class ClientError(PactSdkError):
    """Raised when a request to a Chainweb node fails at the transport level."""

    def __init__(
        self,
        message: str,
        code: ClientErrorCode = ClientErrorCode.NETWORK_ERROR,
        status: Optional[int] = None,
        response: Any = None,
    ):
        self.code = code
        self.status = status
        self.response = response
        super().__init__(message)
