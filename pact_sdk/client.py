"""
PactClient - HTTP client for the Pact API of a Chainweb node.
"""
import logging
import urllib.parse
from typing import Any, Dict, List, Optional, Sequence

import requests
from pydantic import ValidationError
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .config import NetworkConfig
from .envelope import finalize_transaction
from .exceptions import ClientError, ClientErrorCode
from .models import (
    LocalTransactionResult,
    PartiallySignedTransaction,
    TransactionDescriptor,
    TransactionResult,
)


class PactClient:
    """
    Client for the ``/api/v1`` endpoints of a Chainweb node.

    The RPC URL is a template containing ``{networkId}`` and ``{chainId}``
    placeholders. A transaction is always sent to the chain named in its own
    command, so one client serves every chain of a network.
    """

    API_PREFIX = "/api/v1"

    def __init__(
        self,
        rpc_url: str,
        network_id: str,
        chain_id: str = "0",
        retry_count: int = 3,
        timeout: int = 30,
        listen_timeout: int = 180,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the PactClient

        Args:
            rpc_url: RPC URL template, e.g.
                "https://api.chainweb.com/chainweb/0.0/{networkId}/chain/{chainId}/pact"
            network_id: Network id substituted into the template
            chain_id: Chain used when a call does not name one
            retry_count: Number of retries for HTTP requests
            timeout: Timeout for HTTP requests in seconds
            listen_timeout: Timeout for the blocking /listen request in seconds
            logger: Optional logger instance to use for debug/info logging

        Raises:
            ValueError: If the URL doesn't use https (unless it's localhost/127.0.0.1)
        """
        parsed = urllib.parse.urlparse(rpc_url)
        host = parsed.netloc.split(':')[0] if parsed.netloc else ''
        is_local = host in ('localhost', '127.0.0.1')
        if parsed.scheme != 'https' and not is_local:
            raise ValueError(f"rpc_url must use https:// for security (got: {parsed.scheme}://)")

        self.rpc_url = rpc_url.rstrip('/')
        self.network_id = network_id
        self.chain_id = chain_id
        self.timeout = timeout
        self.listen_timeout = listen_timeout
        self.logger = logger or logging.getLogger(__name__)

        # Setup HTTP session with retries
        self.session = requests.Session()
        retries = Retry(
            total=retry_count,
            backoff_factor=0.5,
            status_forcelist=[500, 502, 503, 504],
            allowed_methods=["GET", "POST"],
            raise_on_status=False,
            connect=retry_count,
            read=retry_count,
            other=retry_count
        )
        self.session.mount("http://", HTTPAdapter(max_retries=retries))
        self.session.mount("https://", HTTPAdapter(max_retries=retries))

    def get_chain_url(self, chain_id: Optional[str] = None, network_id: Optional[str] = None) -> str:
        """Expand the RPC URL template for one chain"""
        return (
            self.rpc_url
            .replace("{networkId}", network_id or self.network_id)
            .replace("{chainId}", str(chain_id if chain_id is not None else self.chain_id))
        )

    def _endpoint(self, name: str, chain_id: Optional[str] = None, network_id: Optional[str] = None) -> str:
        return f"{self.get_chain_url(chain_id, network_id)}{self.API_PREFIX}/{name}"

    def _post(
        self,
        url: str,
        body: Dict[str, Any],
        params: Optional[Dict[str, str]] = None,
        timeout: Optional[int] = None
    ) -> Any:
        """
        POST a JSON body and decode the JSON response

        Raises:
            ClientError: On connection failures, timeouts, HTTP errors or invalid JSON
        """
        self.logger.debug(f"POST {url}")
        try:
            response = self.session.post(
                url,
                json=body,
                params=params,
                timeout=timeout or self.timeout
            )
        except requests.Timeout as e:
            self.logger.error(f"Request to {url} timed out: {e}")
            raise ClientError(f"Request timed out: {e}", code=ClientErrorCode.TIMEOUT)
        except requests.RequestException as e:
            self.logger.error(f"Request to {url} failed: {e}")
            raise ClientError(f"Network error: {e}", code=ClientErrorCode.NETWORK_ERROR)

        if response.status_code >= 400:
            self.logger.error(f"HTTP {response.status_code} from {url}: {response.text}")
            raise ClientError(
                f"HTTP {response.status_code}: {response.text}",
                code=ClientErrorCode.HTTP_ERROR,
                status=response.status_code,
                response=response.text
            )

        try:
            return response.json()
        except ValueError as e:
            self.logger.error(f"Invalid JSON response from {url}: {e}")
            raise ClientError(
                f"Invalid JSON response: {e}",
                code=ClientErrorCode.PARSE_ERROR,
                status=response.status_code,
                response=response.text
            )

    def _parse_result(self, data: Any, model=TransactionResult):
        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise ClientError(
                f"Unexpected command result: {e}",
                code=ClientErrorCode.PARSE_ERROR,
                response=data
            )

    def local(
        self,
        tx: PartiallySignedTransaction,
        preflight: bool = False,
        signature_verification: bool = True
    ) -> LocalTransactionResult:
        """
        Execute a transaction without committing it

        Args:
            tx: Transaction to execute; only filled signature slots are sent
            preflight: Run the node's preflight checks (gas, signatures, ttl)
            signature_verification: Ask the node to verify signatures

        Returns:
            LocalTransactionResult, with preflight warnings when requested

        Raises:
            ClientError: If the request fails
        """
        url = self._endpoint("local", tx.chain_id, tx.network_id)
        params = {
            "preflight": str(preflight).lower(),
            "signatureVerification": str(signature_verification).lower(),
        }
        data = self._post(url, tx.to_wire(), params=params)

        # Preflight responses wrap the command result
        if isinstance(data, dict) and "preflightResult" in data:
            result = dict(data["preflightResult"])
            result["preflightWarnings"] = data.get("preflightWarnings") or []
            data = result
        return self._parse_result(data, LocalTransactionResult)

    def send(self, txs: Sequence[PartiallySignedTransaction]) -> List[str]:
        """
        Submit signed transactions to their chain

        All transactions of one call must target the same chain.

        Returns:
            Request keys, in submission order

        Raises:
            ClientError: If the transactions target different chains or the request fails
        """
        if not txs:
            raise ClientError("No transactions to send", code=ClientErrorCode.VALIDATION_ERROR)

        targets = {(tx.network_id, tx.chain_id) for tx in txs}
        if len(targets) > 1:
            raise ClientError(
                f"Transactions of one batch must target a single chain, got {sorted(targets)}",
                code=ClientErrorCode.VALIDATION_ERROR
            )
        network_id, chain_id = targets.pop()

        url = self._endpoint("send", chain_id, network_id)
        data = self._post(url, {"cmds": [finalize_transaction(tx) for tx in txs]})
        request_keys = data.get("requestKeys") if isinstance(data, dict) else None
        if not isinstance(request_keys, list):
            raise ClientError(
                f"Missing requestKeys in send response: {data}",
                code=ClientErrorCode.PARSE_ERROR,
                response=data
            )
        self.logger.info(f"Submitted {len(request_keys)} transaction(s) to chain {chain_id}")
        return request_keys

    def submit(self, tx: PartiallySignedTransaction) -> TransactionDescriptor:
        """Submit one signed transaction and return its descriptor"""
        request_key = self.send([tx])[0]
        return TransactionDescriptor(
            request_key=request_key,
            chain_id=tx.chain_id,
            network_id=tx.network_id
        )

    def poll(
        self,
        request_keys: Sequence[str],
        chain_id: Optional[str] = None,
        network_id: Optional[str] = None
    ) -> Dict[str, TransactionResult]:
        """
        Fetch the results of submitted transactions without blocking

        Returns:
            Mapping of request key to result, for the keys that have completed
        """
        url = self._endpoint("poll", chain_id, network_id)
        data = self._post(url, {"requestKeys": list(request_keys)})
        if not isinstance(data, dict):
            raise ClientError(
                f"Unexpected poll response: {data}",
                code=ClientErrorCode.PARSE_ERROR,
                response=data
            )
        return {key: self._parse_result(value) for key, value in data.items()}

    def listen(
        self,
        request_key: str,
        chain_id: Optional[str] = None,
        network_id: Optional[str] = None
    ) -> TransactionResult:
        """Block until the result of a submitted transaction is available"""
        url = self._endpoint("listen", chain_id, network_id)
        data = self._post(url, {"listen": request_key}, timeout=self.listen_timeout)
        return self._parse_result(data)

    def get_transaction(
        self,
        request_key: str,
        chain_id: Optional[str] = None,
        network_id: Optional[str] = None
    ) -> Optional[TransactionResult]:
        """Return the result of a transaction, or None if it is still pending"""
        return self.poll([request_key], chain_id, network_id).get(request_key)

    def health_check(self) -> bool:
        """True when the node answers its /info endpoint"""
        parsed = urllib.parse.urlparse(self.get_chain_url())
        url = f"{parsed.scheme}://{parsed.netloc}/info"
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            self.logger.warning(f"Health check against {url} failed: {e}")
            return False
        return response.status_code == 200


def create_client(network: str, rpc_url: Optional[str] = None, **kwargs) -> PactClient:
    """Create a client for one of the bundled networks"""
    return PactClient(
        rpc_url=NetworkConfig.get_rpc_url(network, override=rpc_url),
        network_id=NetworkConfig.get_network_id(network),
        **kwargs
    )


def create_mainnet_client(**kwargs) -> PactClient:
    return create_client("mainnet", **kwargs)


def create_testnet_client(**kwargs) -> PactClient:
    return create_client("testnet", **kwargs)


def create_devnet_client(port: int = 8080, **kwargs) -> PactClient:
    return create_client(
        "development",
        rpc_url=f"http://localhost:{port}/chainweb/0.0/{{networkId}}/chain/{{chainId}}/pact",
        **kwargs
    )
