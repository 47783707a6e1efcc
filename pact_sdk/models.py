"""
Data models for the Pact SDK.

Field names are snake_case in Python and camelCase on the wire; every model
accepts both spellings.
"""
import json
from typing import Dict, Any, Optional, List, Union, Literal

from pydantic import BaseModel, Field, field_validator

from .utils import (
    DEFAULT_GAS_LIMIT,
    DEFAULT_GAS_PRICE,
    DEFAULT_TTL,
    creation_time,
    generate_nonce,
)


class Capability(BaseModel):
    """A named, argument-scoped authorization granted by a signer"""
    name: str
    args: List[Any] = Field(default_factory=list)

    def to_wire(self) -> Dict[str, Any]:
        return {"name": self.name, "args": list(self.args)}


class Signer(BaseModel):
    """A public key expected to sign the command, with its capability list"""
    pub_key: str = Field(..., alias="pubKey")
    scheme: str = "ED25519"
    address: Optional[str] = None
    clist: Optional[List[Capability]] = None

    class Config:
        populate_by_name = True

    def to_wire(self) -> Dict[str, Any]:
        wire: Dict[str, Any] = {"pubKey": self.pub_key, "scheme": self.scheme}
        if self.address is not None:
            wire["address"] = self.address
        if self.clist is not None:
            wire["clist"] = [cap.to_wire() for cap in self.clist]
        return wire


class Verifier(BaseModel):
    """A verifier plugin invocation attached to the command"""
    name: str
    proof: Any
    clist: Optional[List[Capability]] = None

    def to_wire(self) -> Dict[str, Any]:
        wire: Dict[str, Any] = {"name": self.name, "proof": self.proof}
        if self.clist is not None:
            wire["clist"] = [cap.to_wire() for cap in self.clist]
        return wire


class Keyset(BaseModel):
    """A Pact keyset: public keys plus a predicate"""
    keys: List[str]
    pred: str = "keys-all"


class ExecPayload(BaseModel):
    """Payload executing Pact code"""
    code: str
    data: Dict[str, Any] = Field(default_factory=dict)

    def to_wire(self) -> Dict[str, Any]:
        return {"exec": {"code": self.code, "data": self.data}}


class ContPayload(BaseModel):
    """Payload continuing a multi-step pact"""
    pact_id: str = Field(..., alias="pactId")
    step: int = Field(..., ge=0)
    rollback: bool = False
    data: Dict[str, Any] = Field(default_factory=dict)
    proof: Optional[str] = None

    class Config:
        populate_by_name = True

    def to_wire(self) -> Dict[str, Any]:
        # proof is always present, null when the continuation is same-chain
        return {
            "cont": {
                "pactId": self.pact_id,
                "step": self.step,
                "rollback": self.rollback,
                "data": self.data,
                "proof": self.proof,
            }
        }


Payload = Union[ExecPayload, ContPayload]


class Meta(BaseModel):
    """Public metadata of a command"""
    chain_id: str = Field("0", alias="chainId")
    sender: str = ""
    gas_limit: int = Field(DEFAULT_GAS_LIMIT, alias="gasLimit")
    gas_price: float = Field(DEFAULT_GAS_PRICE, alias="gasPrice")
    ttl: int = DEFAULT_TTL
    creation_time: int = Field(default_factory=creation_time, alias="creationTime")

    class Config:
        populate_by_name = True

    @field_validator("chain_id", mode="before")
    @classmethod
    def _chain_id_as_string(cls, value: Any) -> Any:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    def to_wire(self) -> Dict[str, Any]:
        return {
            "chainId": self.chain_id,
            "creationTime": self.creation_time,
            "gasLimit": self.gas_limit,
            "gasPrice": self.gas_price,
            "sender": self.sender,
            "ttl": self.ttl,
        }


class Command(BaseModel):
    """
    The mutable working object a builder owns before serialization.

    The order of ``signers`` is significant: signature slot *i* of every
    transaction derived from this command belongs to ``signers[i]``.
    """
    payload: Union[ExecPayload, ContPayload]
    meta: Meta = Field(default_factory=Meta)
    signers: List[Signer] = Field(default_factory=list)
    network_id: str = Field(..., alias="networkId")
    nonce: str = Field(default_factory=generate_nonce)
    verifiers: Optional[List[Verifier]] = None

    class Config:
        populate_by_name = True

    def to_wire(self) -> Dict[str, Any]:
        """Return the JSON structure that is serialized into ``cmd``"""
        wire: Dict[str, Any] = {
            "payload": self.payload.to_wire(),
            "meta": self.meta.to_wire(),
            "signers": [signer.to_wire() for signer in self.signers],
            "networkId": self.network_id,
            "nonce": self.nonce,
        }
        if self.verifiers is not None:
            wire["verifiers"] = [verifier.to_wire() for verifier in self.verifiers]
        return wire

    @classmethod
    def from_wire(cls, wire: Dict[str, Any]) -> "Command":
        """Build a command from the parsed JSON of a ``cmd`` string"""
        payload_wire = wire.get("payload") or {}
        if "exec" in payload_wire:
            payload: Payload = ExecPayload.model_validate(payload_wire["exec"])
        elif "cont" in payload_wire:
            payload = ContPayload.model_validate(payload_wire["cont"])
        else:
            raise ValueError("Command payload must contain an 'exec' or 'cont' key")
        return cls(
            payload=payload,
            meta=Meta.model_validate(wire.get("meta") or {}),
            signers=[Signer.model_validate(s) for s in wire.get("signers") or []],
            network_id=wire["networkId"],
            nonce=wire["nonce"],
            verifiers=(
                [Verifier.model_validate(v) for v in wire["verifiers"]]
                if wire.get("verifiers") is not None else None
            ),
        )


class TransactionSig(BaseModel):
    """One signature slot of a transaction"""
    sig: Optional[str] = None
    pub_key: Optional[str] = Field(None, alias="pubKey")

    class Config:
        populate_by_name = True

    @property
    def is_signed(self) -> bool:
        return bool(self.sig)


class PartiallySignedTransaction(BaseModel):
    """
    Immutable snapshot of a serialized command.

    ``sigs`` has one slot per declared signer; an empty slot is ``None`` or a
    ``TransactionSig`` without ``sig``. Signing never edits an instance, it
    produces a new one.
    """
    cmd: str
    hash: str
    sigs: List[Optional[TransactionSig]]

    class Config:
        frozen = True
        populate_by_name = True

    def command(self) -> Command:
        """Parse ``cmd`` back into a Command"""
        return Command.from_wire(json.loads(self.cmd))

    def signer_keys(self) -> List[str]:
        """Public keys of the declared signers, in slot order"""
        return [signer.get("pubKey") for signer in json.loads(self.cmd).get("signers", [])]

    @property
    def chain_id(self) -> str:
        return json.loads(self.cmd)["meta"]["chainId"]

    @property
    def network_id(self) -> str:
        return json.loads(self.cmd)["networkId"]

    def to_wire(self) -> Dict[str, Any]:
        """Return the ``{cmd, hash, sigs}`` envelope sent to a node"""
        return {
            "cmd": self.cmd,
            "hash": self.hash,
            "sigs": [
                {"sig": slot.sig} if slot is not None and slot.sig else None
                for slot in self.sigs
            ],
        }


# A fully signed transaction has the same shape; see envelope.is_fully_signed
Transaction = PartiallySignedTransaction


class TransactionDescriptor(BaseModel):
    """Handle returned by submission, used to poll or listen for the result"""
    request_key: str = Field(..., alias="requestKey")
    chain_id: str = Field(..., alias="chainId")
    network_id: str = Field(..., alias="networkId")

    class Config:
        populate_by_name = True


class PactResult(BaseModel):
    """Outcome of executing a command"""
    status: Literal["success", "failure"]
    data: Any = None
    error: Any = None


class TransactionResult(BaseModel):
    """Command result as returned by /listen, /poll and /local"""
    req_key: str = Field(..., alias="reqKey")
    tx_id: Optional[int] = Field(None, alias="txId")
    result: PactResult
    gas: int = 0
    logs: Optional[str] = None
    continuation: Optional[Dict[str, Any]] = None
    meta_data: Optional[Dict[str, Any]] = Field(None, alias="metaData")
    events: Optional[List[Dict[str, Any]]] = None

    class Config:
        populate_by_name = True

    @property
    def succeeded(self) -> bool:
        return self.result.status == "success"


class LocalTransactionResult(TransactionResult):
    """Result of a /local call, with warnings reported by preflight runs"""
    preflight_warnings: Optional[List[Any]] = Field(None, alias="preflightWarnings")


class WalletAccount(BaseModel):
    """Account exposed by a signing authority"""
    address: str
    public_key: str = Field(..., alias="publicKey")

    class Config:
        populate_by_name = True


class KeyPair(BaseModel):
    """An Ed25519 key pair and the account it controls"""
    account: str
    public_key: str = Field(..., alias="publicKey")
    secret_key: str = Field(..., alias="secretKey", repr=False)

    class Config:
        populate_by_name = True


class NetworkSettings(BaseModel):
    """Connection and signing defaults for one network"""
    name: str
    network_id: str = Field(..., alias="networkId")
    rpc_url: str = Field(..., alias="rpcUrl")
    type: str = "chainweb"
    sender_account: Optional[str] = Field(None, alias="senderAccount")
    meta: Dict[str, Any] = Field(default_factory=dict)
    key_pairs: List[KeyPair] = Field(default_factory=list, alias="keyPairs")

    class Config:
        populate_by_name = True
