"""
Network context passed to builders and dispatchers.
"""
import logging
from typing import TYPE_CHECKING, Any, Dict, Optional

from .client import PactClient
from .config import NetworkConfig
from .exceptions import ConfigurationError
from .models import KeyPair, NetworkSettings

if TYPE_CHECKING:
    from .signer import Wallet

logger = logging.getLogger(__name__)

LOCAL_HOSTS = ("localhost", "127.0.0.1")


class NetworkContext:
    """
    Everything a builder needs to know about its target network: network id,
    metadata defaults, signer key material and an RPC client.
    """

    def __init__(
        self,
        settings: NetworkSettings,
        client: Optional[PactClient] = None,
        wallet: Optional["Wallet"] = None
    ):
        if not isinstance(settings, NetworkSettings):
            raise ConfigurationError(
                f"NetworkContext requires NetworkSettings, got {type(settings).__name__}"
            )
        self.settings = settings
        self._client = client
        self._wallet = wallet

    @classmethod
    def from_network(cls, name: str, rpc_url: Optional[str] = None, **kwargs) -> "NetworkContext":
        """
        Create a context for one of the bundled networks

        Raises:
            ConfigurationError: If the network is unknown
        """
        try:
            settings = NetworkConfig.get_settings(name, rpc_url=rpc_url)
        except ValueError as e:
            raise ConfigurationError(str(e))
        return cls(settings, **kwargs)

    @property
    def name(self) -> str:
        return self.settings.name

    @property
    def network_id(self) -> str:
        return self.settings.network_id

    @property
    def network_type(self) -> str:
        return self.settings.type

    @property
    def sender_account(self) -> Optional[str]:
        return self.settings.sender_account

    @property
    def meta(self) -> Dict[str, Any]:
        """Metadata defaults for new commands (a fresh copy on every access)"""
        return dict(self.settings.meta)

    def get_signer_keys(self, account: Optional[str] = None) -> Optional[KeyPair]:
        """Key pair configured for an account (defaults to the sender account)"""
        account = account or self.sender_account
        for key_pair in self.settings.key_pairs:
            if key_pair.account == account:
                return key_pair
        return None

    def get_default_signer(self) -> Optional[KeyPair]:
        return self.get_signer_keys()

    def get_wallet(self) -> Optional["Wallet"]:
        return self._wallet

    def set_wallet(self, wallet: Optional["Wallet"]) -> None:
        self._wallet = wallet

    def get_client(self) -> PactClient:
        """RPC client for this network, created on first use"""
        if self._client is None:
            self._client = PactClient(rpc_url=self.settings.rpc_url, network_id=self.network_id)
            logger.debug("Created client for network %s", self.name)
        return self._client

    def is_local_network(self) -> bool:
        return any(host in self.settings.rpc_url for host in LOCAL_HOSTS)

    def __repr__(self) -> str:
        return f"NetworkContext(name={self.name!r}, network_id={self.network_id!r})"
