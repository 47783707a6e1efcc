"""
Command serialization, hashing and transaction envelope helpers.
"""
import json
import logging
from typing import Any, Dict, Optional, Union

from pydantic import ValidationError

from .exceptions import ConfigurationError, EnvelopeError
from .models import (
    Command,
    ContPayload,
    ExecPayload,
    Meta,
    PartiallySignedTransaction,
    Transaction,
)
from .utils import blake2b_base64url, stable_stringify

logger = logging.getLogger(__name__)


def create_command(
    payload: Union[ExecPayload, ContPayload],
    network_id: str,
    meta: Optional[Dict[str, Any]] = None,
) -> Command:
    """
    Create a new command with default metadata.

    The nonce and creation time are fixed here, once, so that every later
    serialization of the same command is byte-identical.

    Args:
        payload: Exec or continuation payload
        network_id: Target network id (e.g. "development", "mainnet01")
        meta: Metadata overrides (snake_case or camelCase keys)

    Returns:
        A new Command

    Raises:
        ConfigurationError: If the metadata overrides are invalid
    """
    try:
        command_meta = Meta.model_validate(dict(meta or {}))
    except ValidationError as e:
        raise ConfigurationError(f"Invalid command metadata: {e}")
    return Command(
        payload=payload,
        meta=command_meta,
        signers=[],
        network_id=network_id,
    )


def serialize_command(command: Command) -> str:
    """Return the canonical ``cmd`` string for a command"""
    try:
        cmd = stable_stringify(command.to_wire())
        # Lone surrogates survive json.dumps but have no UTF-8 encoding
        cmd.encode("utf-8")
    except (TypeError, ValueError) as e:
        raise EnvelopeError(f"Command is not serializable: {e}")
    return cmd


def create_transaction(command: Command) -> PartiallySignedTransaction:
    """
    Serialize and hash a command into an unsigned transaction.

    Args:
        command: Command to serialize

    Returns:
        PartiallySignedTransaction with one empty signature slot per signer

    Raises:
        EnvelopeError: If the command holds values that cannot be serialized
    """
    cmd = serialize_command(command)
    tx_hash = blake2b_base64url(cmd)
    logger.debug("Serialized command %s with %d signer(s)", tx_hash, len(command.signers))
    return PartiallySignedTransaction(
        cmd=cmd,
        hash=tx_hash,
        sigs=[None] * len(command.signers),
    )


def is_fully_signed(tx: PartiallySignedTransaction) -> bool:
    """True when every signature slot of the transaction is filled"""
    return all(slot is not None and slot.is_signed for slot in tx.sigs)


def verify_hash(tx: PartiallySignedTransaction) -> bool:
    """True when ``hash`` is the blake2b hash of ``cmd``"""
    return blake2b_base64url(tx.cmd) == tx.hash


def finalize_transaction(tx: Transaction) -> Dict[str, Any]:
    """
    Return the wire envelope of a fully signed transaction.

    Raises:
        EnvelopeError: If the hash does not match the command
    """
    if not verify_hash(tx):
        raise EnvelopeError(f"Transaction hash {tx.hash} does not match its command")
    return tx.to_wire()


def parse_transaction(envelope: Union[str, Dict[str, Any]]) -> PartiallySignedTransaction:
    """
    Parse a ``{cmd, hash, sigs}`` envelope received from another party.

    Args:
        envelope: Envelope as a dict or a JSON string

    Returns:
        PartiallySignedTransaction

    Raises:
        EnvelopeError: If the envelope is malformed or its hash does not match
    """
    if isinstance(envelope, str):
        try:
            envelope = json.loads(envelope)
        except json.JSONDecodeError as e:
            raise EnvelopeError(f"Invalid transaction JSON: {e}")

    if not isinstance(envelope, dict):
        raise EnvelopeError(f"Transaction must be a dictionary, got {type(envelope).__name__}")

    missing = [field for field in ("cmd", "hash", "sigs") if field not in envelope]
    if missing:
        raise EnvelopeError(f"Transaction missing required fields: {', '.join(missing)}")

    try:
        tx = PartiallySignedTransaction.model_validate(envelope)
    except ValidationError as e:
        raise EnvelopeError(f"Invalid transaction: {e}")

    if not verify_hash(tx):
        raise EnvelopeError(f"Transaction hash {tx.hash} does not match its command")
    try:
        signer_keys = tx.signer_keys()
    except (json.JSONDecodeError, AttributeError) as e:
        raise EnvelopeError(f"Invalid command JSON: {e}")
    if len(tx.sigs) != len(signer_keys):
        raise EnvelopeError(
            f"Transaction has {len(tx.sigs)} signature slot(s) for {len(signer_keys)} signer(s)"
        )
    return tx
