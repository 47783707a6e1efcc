"""
Utility functions for the Pact SDK.
"""
import base64
import hashlib
import json
import time
from decimal import Decimal
from typing import Any, Dict, Union

# Defaults applied to every new command
DEFAULT_GAS_LIMIT = 150000
DEFAULT_GAS_PRICE = 1e-8
DEFAULT_TTL = 900
# Nodes reject commands created "in the future", so creation time lags the local clock
CLOCK_SKEW_OFFSET_SECONDS = 10

NONCE_PREFIX = "pact-sdk:nonce:"
K_ACCOUNT_PREFIX = "k:"

# Chain ids of a standard 20-chain Chainweb network
ALL_CHAINS = tuple(str(i) for i in range(20))


def stable_stringify(value: Any) -> str:
    """
    Serialize a value to canonical JSON.

    Keys are sorted and no insignificant whitespace is emitted, so independent
    parties serializing the same value produce byte-identical output.

    Args:
        value: JSON-compatible value

    Returns:
        Canonical JSON string

    Raises:
        ValueError: If the value contains NaN or Infinity
        TypeError: If the value is not JSON serializable
    """
    return json.dumps(
        value,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        allow_nan=False,
    )


def base64url_encode(data: bytes) -> str:
    """Encode bytes as base64url without padding."""
    return base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")


def base64url_decode(data: str) -> bytes:
    """
    Decode an unpadded base64url string.

    Raises:
        ValueError: If the input is not valid base64url
    """
    padding = "=" * (-len(data) % 4)
    try:
        return base64.urlsafe_b64decode(data + padding)
    except (ValueError, TypeError) as e:
        raise ValueError(f"Invalid base64url string: {e}")


def blake2b_digest(data: Union[str, bytes]) -> bytes:
    """Return the 32-byte blake2b digest of a string (UTF-8) or bytes."""
    if isinstance(data, str):
        data = data.encode("utf-8")
    return hashlib.blake2b(data, digest_size=32).digest()


def blake2b_base64url(data: Union[str, bytes]) -> str:
    """
    Hash data with blake2b-256 and encode the digest as unpadded base64url.

    This is the hash Chainweb uses for a command's request key.
    """
    return base64url_encode(blake2b_digest(data))


def creation_time() -> int:
    """Current unix time in seconds, shifted back by the clock skew offset."""
    return int(time.time()) - CLOCK_SKEW_OFFSET_SECONDS


def generate_nonce() -> str:
    """Generate a time-based nonce for a new command."""
    return f"{NONCE_PREFIX}{int(time.time() * 1000)}"


def get_k_account_key(account: str) -> str:
    """Strip the ``k:`` prefix from a principal account name."""
    if account.startswith(K_ACCOUNT_PREFIX):
        return account[len(K_ACCOUNT_PREFIX):]
    return account


def k_account(public_key: str) -> str:
    """Build the ``k:`` principal account name for a public key."""
    return f"{K_ACCOUNT_PREFIX}{public_key}"


def pact_decimal(amount: Union[int, float, str, Decimal]) -> Dict[str, str]:
    """
    Wrap an amount in Pact's decimal JSON representation.

    Numbers are rendered with 12 fractional digits, strings are passed as is.
    """
    if isinstance(amount, str):
        return {"decimal": amount}
    if isinstance(amount, bool):
        raise TypeError("pact_decimal expects a number or string, got bool")
    return {"decimal": f"{Decimal(str(amount)):.12f}"}
