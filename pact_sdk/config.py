"""
Network configuration for the Pact SDK.

Network presets ship with the package in ``networks.json``; RPC URLs can be
overridden per network with a ``<NAME>_RPC_URL`` environment variable.
"""
import importlib.resources
import json
import logging
import os
from typing import Any, Dict, Optional

from .exceptions import ConfigurationError
from .models import NetworkSettings

logger = logging.getLogger(__name__)


class NetworkConfig:
    """Access to the bundled network presets"""

    _networks_cache: Optional[Dict[str, Dict[str, Any]]] = None

    @classmethod
    def load_networks(cls) -> Dict[str, Dict[str, Any]]:
        """
        Load the network presets, caching them after the first read

        Returns:
            Mapping of network name to its raw configuration

        Raises:
            ConfigurationError: If the bundled presets cannot be read
        """
        if cls._networks_cache is not None:
            return cls._networks_cache

        try:
            resource = importlib.resources.files("pact_sdk").joinpath("networks.json")
            with resource.open("r", encoding="utf-8") as f:
                cls._networks_cache = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"Failed to load network presets: {e}")

        logger.debug("Loaded %d network preset(s)", len(cls._networks_cache))
        return cls._networks_cache

    @classmethod
    def get_network(cls, name: str) -> Dict[str, Any]:
        """
        Get the raw configuration of a network

        Raises:
            ValueError: If the network is unknown
        """
        networks = cls.load_networks()
        if name not in networks:
            available = ", ".join(sorted(networks))
            raise ValueError(f"Unknown network '{name}'. Available networks: {available}")
        return networks[name]

    @staticmethod
    def _env_var_name(name: str) -> str:
        return f"{name.upper().replace('-', '_')}_RPC_URL"

    @classmethod
    def get_rpc_url(cls, name: str, override: Optional[str] = None) -> str:
        """
        Resolve the RPC URL template of a network

        Precedence: explicit override, environment variable, bundled preset.
        """
        if override:
            return override

        env_value = os.environ.get(cls._env_var_name(name))
        if env_value:
            logger.debug("Using %s from environment", cls._env_var_name(name))
            return env_value

        return cls.get_network(name)["rpcUrl"]

    @classmethod
    def get_network_id(cls, name: str) -> str:
        return cls.get_network(name)["networkId"]

    @classmethod
    def get_settings(cls, name: str, rpc_url: Optional[str] = None) -> NetworkSettings:
        """Build validated NetworkSettings for a named network"""
        raw = dict(cls.get_network(name))
        raw["rpcUrl"] = cls.get_rpc_url(name, override=rpc_url)
        return NetworkSettings.model_validate({"name": name, **raw})
