"""
Dispatching finalized transactions to one or many chains.

All operations are coroutines. The blocking HTTP client runs in worker
threads, and fan-out across chains runs concurrently.
"""
import asyncio
import logging
from typing import TYPE_CHECKING, Any, List, Optional, Sequence, Tuple, Union

from ._rate_limited_log import rate_limited_log
from .client import PactClient
from .envelope import is_fully_signed
from .exceptions import PreflightError, TransactionError, UnsignedTransactionError
from .models import (
    LocalTransactionResult,
    PartiallySignedTransaction,
    TransactionDescriptor,
    TransactionResult,
)
from .utils import ALL_CHAINS

if TYPE_CHECKING:
    from .builder import PactTransactionBuilder

logger = logging.getLogger(__name__)

ChainIds = Union[None, str, int, Sequence[Union[str, int]]]


def get_tx_data_or_fail(result: TransactionResult) -> Any:
    """
    Unwrap the data of a command result

    Raises:
        TransactionError: If the chain reports a failure
    """
    if result.result.status == "failure":
        raise TransactionError(
            f"Transaction failed with error: {result.result.error}",
            error=result.result.error,
            request_key=result.req_key
        )
    return result.result.data


def require_signed(txs: Sequence[PartiallySignedTransaction]) -> None:
    """
    Raises:
        UnsignedTransactionError: If any transaction has an empty signature slot
    """
    unsigned = [tx.hash for tx in txs if not is_fully_signed(tx)]
    if unsigned:
        raise UnsignedTransactionError(f"Not all transactions are signed: {', '.join(unsigned)}")


async def local_or_fail(
    tx: PartiallySignedTransaction,
    client: PactClient,
    signature_verification: bool = True
) -> Any:
    """Execute a transaction locally and return its data"""
    result = await asyncio.to_thread(
        client.local, tx, preflight=False, signature_verification=signature_verification
    )
    return get_tx_data_or_fail(result)


async def dirty_read_or_fail(tx: PartiallySignedTransaction, client: PactClient) -> Any:
    """Execute a transaction locally without signature verification and return its data"""
    return await local_or_fail(tx, client, signature_verification=False)


async def preflight_or_fail(tx: PartiallySignedTransaction, client: PactClient) -> LocalTransactionResult:
    """
    Run a signed transaction through the node's preflight checks

    Returns:
        The local result, including preflight warnings

    Raises:
        UnsignedTransactionError: If the transaction is not fully signed
        PreflightError: If the preflight run fails
    """
    require_signed([tx])
    result = await asyncio.to_thread(client.local, tx, preflight=True, signature_verification=True)

    warnings = result.preflight_warnings or []
    for warning in warnings:
        rate_limited_log(f"Preflight warning: {warning}", logger_instance=logger)

    if result.result.status == "failure":
        raise PreflightError("Preflight failed", error=result.result.error, warnings=warnings)
    return result


async def submit(
    tx: PartiallySignedTransaction,
    client: PactClient,
    preflight: bool = False
) -> TransactionDescriptor:
    """
    Submit a signed transaction without waiting for its result

    Raises:
        UnsignedTransactionError: If the transaction is not fully signed
        PreflightError: If preflight was requested and failed
    """
    require_signed([tx])
    if preflight:
        await preflight_or_fail(tx, client)
    descriptor = await asyncio.to_thread(client.submit, tx)
    logger.info("Submitted %s to chain %s", descriptor.request_key, descriptor.chain_id)
    return descriptor


async def listen(descriptor: TransactionDescriptor, client: PactClient) -> Any:
    """Wait for the result of a submitted transaction and return its data"""
    result = await asyncio.to_thread(
        client.listen, descriptor.request_key, descriptor.chain_id, descriptor.network_id
    )
    return get_tx_data_or_fail(result)


async def submit_and_listen(
    tx: PartiallySignedTransaction,
    client: PactClient,
    preflight: bool = False
) -> Any:
    """Submit a signed transaction and wait for its result"""
    descriptor = await submit(tx, client, preflight=preflight)
    return await listen(descriptor, client)


class PactTransactionDispatcher:
    """
    Finalizes a builder's command and sends it to the node.

    Every operation takes an optional ``chain_id``: ``None`` uses the
    command's chain, a single id returns a single value, and a list of ids
    fans out and returns a list of values in the same order.
    """

    def __init__(self, builder: "PactTransactionBuilder"):
        self._builder = builder

    def _client(self, client: Optional[PactClient]) -> PactClient:
        return client or self._builder.context.get_client()

    async def _finalize(self, chain_id: ChainIds) -> Tuple[List[PartiallySignedTransaction], bool]:
        if chain_id is None or isinstance(chain_id, (str, int)):
            tx = await self._builder.get_partial_transaction(chain_id)
            return [tx], True

        chain_ids = [str(c) for c in chain_id]
        txs = await asyncio.gather(*(self._builder.get_partial_transaction(c) for c in chain_ids))
        return list(txs), False

    @staticmethod
    def _unwrap(results: List[Any], single: bool) -> Any:
        return results[0] if single else results

    async def get_signed_transaction(self, chain_id: ChainIds = None) -> Any:
        """Finalize without dispatching"""
        txs, single = await self._finalize(chain_id)
        return self._unwrap(txs, single)

    async def dirty_read(self, chain_id: ChainIds = None, client: Optional[PactClient] = None) -> Any:
        """Execute locally without signature verification and return the data"""
        client = self._client(client)
        txs, single = await self._finalize(chain_id)
        results = await asyncio.gather(*(dirty_read_or_fail(tx, client) for tx in txs))
        return self._unwrap(list(results), single)

    async def local(self, chain_id: ChainIds = None, client: Optional[PactClient] = None) -> Any:
        """Execute locally with signature verification and return the data"""
        client = self._client(client)
        txs, single = await self._finalize(chain_id)
        results = await asyncio.gather(*(local_or_fail(tx, client) for tx in txs))
        return self._unwrap(list(results), single)

    async def preflight(self, chain_id: ChainIds = None, client: Optional[PactClient] = None) -> Any:
        """Run preflight checks and return the local result(s)"""
        client = self._client(client)
        txs, single = await self._finalize(chain_id)
        require_signed(txs)
        results = await asyncio.gather(*(preflight_or_fail(tx, client) for tx in txs))
        return self._unwrap(list(results), single)

    async def submit(
        self,
        chain_id: ChainIds = None,
        preflight: bool = False,
        client: Optional[PactClient] = None
    ) -> Any:
        """Submit and return the transaction descriptor(s)"""
        client = self._client(client)
        txs, single = await self._finalize(chain_id)
        require_signed(txs)
        results = await asyncio.gather(*(submit(tx, client, preflight=preflight) for tx in txs))
        return self._unwrap(list(results), single)

    async def submit_and_listen(
        self,
        chain_id: ChainIds = None,
        preflight: bool = False,
        sequence: bool = False,
        client: Optional[PactClient] = None
    ) -> Any:
        """
        Submit and wait for the result data

        Args:
            chain_id: Target chain(s)
            preflight: Run preflight before each submission
            sequence: Submit and await each transaction in order, one at a
                time, instead of submitting all and awaiting concurrently
            client: Client to use instead of the context's
        """
        client = self._client(client)
        txs, single = await self._finalize(chain_id)
        require_signed(txs)

        if sequence:
            results = []
            for tx in txs:
                results.append(await submit_and_listen(tx, client, preflight=preflight))
        else:
            descriptors = await asyncio.gather(*(submit(tx, client, preflight=preflight) for tx in txs))
            results = list(await asyncio.gather(*(listen(d, client) for d in descriptors)))
        return self._unwrap(results, single)

    async def dirty_read_all(self, client: Optional[PactClient] = None) -> List[Any]:
        return await self.dirty_read(list(ALL_CHAINS), client=client)

    async def local_all(self, client: Optional[PactClient] = None) -> List[Any]:
        return await self.local(list(ALL_CHAINS), client=client)

    async def preflight_all(self, client: Optional[PactClient] = None) -> List[LocalTransactionResult]:
        return await self.preflight(list(ALL_CHAINS), client=client)

    async def submit_all(self, preflight: bool = False, client: Optional[PactClient] = None) -> List[TransactionDescriptor]:
        return await self.submit(list(ALL_CHAINS), preflight=preflight, client=client)

    async def submit_and_listen_all(
        self,
        preflight: bool = False,
        sequence: bool = False,
        client: Optional[PactClient] = None
    ) -> List[Any]:
        return await self.submit_and_listen(
            list(ALL_CHAINS), preflight=preflight, sequence=sequence, client=client
        )
