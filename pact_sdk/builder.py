"""
Chainable builder for Pact commands.
"""
import logging
from typing import (
    Any,
    Awaitable,
    Callable,
    Dict,
    List,
    Mapping,
    Optional,
    Sequence,
    Union,
)

from pydantic import ValidationError

from .context import NetworkContext
from .dispatcher import PactTransactionDispatcher
from .envelope import create_command, create_transaction
from .exceptions import ConfigurationError
from .models import (
    Capability,
    Command,
    ContPayload,
    ExecPayload,
    Keyset,
    Meta,
    PartiallySignedTransaction,
    Signer,
    Verifier,
)
from .signer import Wallet, collect_signatures, sign_with_wallet

logger = logging.getLogger(__name__)

FinalizeStrategy = Callable[[Command], Awaitable[PartiallySignedTransaction]]
CapabilityFactory = Callable[..., Capability]
CapabilityDeclaration = Callable[[CapabilityFactory], Sequence[Union[Capability, Mapping[str, Any]]]]
SignerSpec = Union[str, Signer, Mapping[str, Any]]

DUPLICATE_POLICIES = ("replace", "merge", "error")


def sign_for(name: str, *args: Any) -> Capability:
    """Capability constructor handed to capability declarations"""
    return Capability(name=name, args=list(args))


def _to_signer(spec: SignerSpec) -> Signer:
    if isinstance(spec, str):
        return Signer(pub_key=spec)
    if isinstance(spec, Signer):
        return spec.model_copy(deep=True)
    if isinstance(spec, Mapping):
        return Signer.model_validate(dict(spec))
    raise ConfigurationError(f"Unsupported signer type: {type(spec).__name__}")


def _to_capability(cap: Union[Capability, Mapping[str, Any]]) -> Capability:
    if isinstance(cap, Capability):
        return cap.model_copy(deep=True)
    return Capability.model_validate(dict(cap))


class PactTransactionBuilder:
    """
    Builds one Pact command and hands it to a dispatcher.

    Every ``with_*`` method mutates the owned command and returns the builder.
    ``build``, ``sign`` and ``multi_sign`` choose how the command becomes a
    transaction and return a dispatcher that finalizes it once per chain.

    Example:
        >>> builder = execution('(coin.details "alice")', context)
        >>> await builder.with_chain_id("1").build().dirty_read()
    """

    def __init__(self, payload: Union[ExecPayload, ContPayload], context: Optional[NetworkContext]):
        """
        Initialize the builder

        Args:
            payload: Exec or continuation payload
            context: Network the command targets

        Raises:
            ConfigurationError: If no network context is given
        """
        if context is None:
            raise ConfigurationError("A NetworkContext is required to build a transaction")
        self.context = context
        self._command = create_command(payload, context.network_id, context.meta)
        self._strategy: Optional[FinalizeStrategy] = None

    def with_data(self, key: str, value: Any) -> "PactTransactionBuilder":
        self._command.payload.data[key] = value
        return self

    def with_data_map(self, data: Mapping[str, Any]) -> "PactTransactionBuilder":
        self._command.payload.data.update(data)
        return self

    def with_keyset(
        self,
        name: str,
        keyset: Union[Keyset, Mapping[str, Any]]
    ) -> "PactTransactionBuilder":
        """
        Add a keyset to the payload data

        Raises:
            ConfigurationError: If the command has no sender yet
        """
        if not self._command.meta.sender:
            raise ConfigurationError(
                f"Cannot add keyset '{name}': set a sender with with_meta(sender=...) first"
            )
        if not isinstance(keyset, Keyset):
            keyset = Keyset.model_validate(dict(keyset))
        self._command.payload.data[name] = keyset.model_dump()
        return self

    def with_keyset_map(
        self,
        keysets: Mapping[str, Union[Keyset, Mapping[str, Any]]]
    ) -> "PactTransactionBuilder":
        for name, keyset in keysets.items():
            self.with_keyset(name, keyset)
        return self

    def with_chain_id(self, chain_id: Union[str, int]) -> "PactTransactionBuilder":
        self._command.meta.chain_id = str(chain_id)
        return self

    def with_meta(self, meta: Optional[Mapping[str, Any]] = None, **fields: Any) -> "PactTransactionBuilder":
        """
        Update command metadata

        Accepts a mapping and/or keyword arguments, using either snake_case
        names (``gas_limit``) or wire names (``gasLimit``).

        Raises:
            ConfigurationError: If a field is unknown or has an invalid value
        """
        updates = {**dict(meta or {}), **fields}
        aliases = {field.alias or name: name for name, field in Meta.model_fields.items()}
        current = self._command.meta.model_dump()
        for key, value in updates.items():
            name = key if key in Meta.model_fields else aliases.get(key)
            if name is None:
                raise ConfigurationError(f"Unknown meta field: {key}")
            current[name] = str(value) if name == "chain_id" else value

        try:
            self._command.meta = Meta.model_validate(current)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid meta: {e}")
        return self

    def with_signer(
        self,
        signer: Union[SignerSpec, Sequence[SignerSpec]],
        capabilities: Optional[CapabilityDeclaration] = None,
        on_duplicate: str = "replace"
    ) -> "PactTransactionBuilder":
        """
        Declare one or more signers

        Args:
            signer: Public key, Signer, mapping, or a list of those
            capabilities: Function receiving ``sign_for`` and returning the
                capabilities the signer grants, e.g.
                ``lambda sign_for: [sign_for("coin.GAS")]``
            on_duplicate: What to do when the public key is already a signer:
                "replace" its capability list, "merge" the new capabilities
                into it, or raise an "error"

        Raises:
            ConfigurationError: On an unknown policy or a duplicate key with "error"
        """
        if on_duplicate not in DUPLICATE_POLICIES:
            raise ConfigurationError(
                f"on_duplicate must be one of {', '.join(DUPLICATE_POLICIES)}, got {on_duplicate!r}"
            )

        specs = signer if isinstance(signer, (list, tuple)) else [signer]
        clist = [_to_capability(cap) for cap in capabilities(sign_for)] if capabilities else None

        for spec in specs:
            new_signer = _to_signer(spec)
            if clist is not None:
                new_signer.clist = [cap.model_copy(deep=True) for cap in clist]
            self._add_signer(new_signer, on_duplicate)
        return self

    def _add_signer(self, new_signer: Signer, on_duplicate: str) -> None:
        for existing in self._command.signers:
            if existing.pub_key != new_signer.pub_key:
                continue

            if on_duplicate == "error":
                raise ConfigurationError(f"Signer {new_signer.pub_key} is already declared")

            if on_duplicate == "merge":
                merged = list(existing.clist or [])
                for cap in new_signer.clist or []:
                    if cap not in merged:
                        merged.append(cap)
                existing.clist = merged if merged or existing.clist is not None else None
            else:
                if existing.clist and existing.clist != new_signer.clist:
                    logger.warning(
                        "Replacing capabilities of signer %s… (%d capability(ies) dropped)",
                        new_signer.pub_key[:8], len(existing.clist)
                    )
                existing.clist = new_signer.clist
            return

        self._command.signers.append(new_signer)

    def with_verifier(self, verifier: Union[Verifier, Mapping[str, Any]]) -> "PactTransactionBuilder":
        if not isinstance(verifier, Verifier):
            verifier = Verifier.model_validate(dict(verifier))
        if self._command.verifiers is None:
            self._command.verifiers = []
        self._command.verifiers.append(verifier)
        return self

    def with_nonce(self, nonce: str) -> "PactTransactionBuilder":
        self._command.nonce = nonce
        return self

    def with_network_id(self, network_id: str) -> "PactTransactionBuilder":
        self._command.network_id = network_id
        return self

    def with_context(self, context: NetworkContext) -> "PactTransactionBuilder":
        """Retarget the builder to another network"""
        if context is None:
            raise ConfigurationError("A NetworkContext is required to build a transaction")
        self.context = context
        self._command.network_id = context.network_id
        return self

    def get_command(self) -> Command:
        return self._command

    def build(self) -> PactTransactionDispatcher:
        """Finalize without signing"""
        async def _serialize(command: Command) -> PartiallySignedTransaction:
            return create_transaction(command)

        self._strategy = _serialize
        return PactTransactionDispatcher(self)

    def sign(self, wallet: Optional[Wallet] = None) -> PactTransactionDispatcher:
        """
        Finalize by having a single wallet sign

        Args:
            wallet: Signing authority (defaults to the context's wallet)

        Raises:
            ConfigurationError: If no wallet is given or configured
        """
        wallet = wallet or self.context.get_wallet()
        if wallet is None:
            raise ConfigurationError("No wallet given and no default wallet configured for the context")

        async def _sign(command: Command) -> PartiallySignedTransaction:
            return await sign_with_wallet(command, wallet)

        self._strategy = _sign
        return PactTransactionDispatcher(self)

    def multi_sign(self, wallets: Sequence[Wallet]) -> PactTransactionDispatcher:
        """
        Finalize by collecting signatures from several wallets

        Raises:
            ConfigurationError: If no wallets are given
        """
        wallets = list(wallets)
        if not wallets:
            raise ConfigurationError("multi_sign requires at least one wallet")

        async def _collect(command: Command) -> PartiallySignedTransaction:
            return await collect_signatures(create_transaction(command), wallets)

        self._strategy = _collect
        return PactTransactionDispatcher(self)

    async def get_partial_transaction(self, chain_id: Optional[Union[str, int]] = None) -> PartiallySignedTransaction:
        """
        Run the finalization strategy on a copy of the command

        Args:
            chain_id: Chain to target instead of the command's own

        Raises:
            ConfigurationError: If no terminal method was called yet
        """
        if self._strategy is None:
            raise ConfigurationError("Call build(), sign() or multi_sign() before finalizing")

        command = self._command.model_copy(deep=True)
        if chain_id is not None:
            command.meta.chain_id = str(chain_id)
        return await self._strategy(command)


def execution(code: str, context: Optional[NetworkContext]) -> PactTransactionBuilder:
    """Start building a command that executes Pact code"""
    return PactTransactionBuilder(ExecPayload(code=code), context)


def continuation(
    cont: Union[ContPayload, Mapping[str, Any]],
    context: Optional[NetworkContext]
) -> PactTransactionBuilder:
    """
    Start building a command that continues a multi-step pact

    Args:
        cont: ContPayload or mapping with pact_id/pactId, step, rollback, data, proof
        context: Network the command targets
    """
    if not isinstance(cont, ContPayload):
        cont = ContPayload.model_validate(dict(cont))
    return PactTransactionBuilder(cont, context)
