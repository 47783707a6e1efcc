"""
Pytest fixtures for the Pact SDK tests.
"""
import time

import pytest

from pact_sdk._rate_limited_log import reset_rate_limited_log
from pact_sdk.config import NetworkConfig
from pact_sdk.context import NetworkContext
from pact_sdk.models import NetworkSettings
from pact_sdk.signer import KeyPairWallet

from test_helpers.fake_client import FakePactClient

# Publicly known devnet keys, never funded outside a local devnet
SENDER00_PUBLIC = "368820f80c324bbc7c2b0610688a7da43e39f91d118732671cd9c7500ff43cca"
SENDER00_SECRET = "251a920c403ae8c8f65f59142316af3c82b631fba46ddea92ee8c95035bd2898"
SENDER01_PUBLIC = "6be2f485a7af75fedb4b7f153a903f7e6000ca4aa501179c91a2450b777bd2a7"
SENDER01_SECRET = "2beae45b29e850e6b1882ae245b0bab7d0689ebdd0cd777d4314d24d7024b4f7"

TEST_RPC_URL = "https://node.example.com/chainweb/0.0/{networkId}/chain/{chainId}/pact"
TEST_NETWORK_ID = "testnet04"


@pytest.fixture(autouse=True)
def _fast_sleep(monkeypatch):
    """Make time.sleep instantaneous so retries don't slow the suite down"""
    monkeypatch.setattr(time, "sleep", lambda *_a, **_kw: None)


@pytest.fixture(autouse=True)
def _reset_shared_state():
    """Network presets and rate-limited logs are process-wide caches"""
    NetworkConfig._networks_cache = None
    reset_rate_limited_log()
    yield
    NetworkConfig._networks_cache = None


@pytest.fixture
def fake_client():
    return FakePactClient()


@pytest.fixture
def test_settings():
    return NetworkSettings(
        name="test",
        network_id=TEST_NETWORK_ID,
        rpc_url=TEST_RPC_URL,
        sender_account="sender00",
        meta={"chainId": "0", "gasLimit": 1000, "ttl": 600},
        key_pairs=[
            {"account": "sender00", "publicKey": SENDER00_PUBLIC, "secretKey": SENDER00_SECRET},
            {"account": "sender01", "publicKey": SENDER01_PUBLIC, "secretKey": SENDER01_SECRET},
        ],
    )


@pytest.fixture
def context(test_settings, fake_client):
    """Network context whose client is an in-memory fake"""
    return NetworkContext(test_settings, client=fake_client)


@pytest.fixture
def sender00_wallet():
    return KeyPairWallet(SENDER00_SECRET, account="sender00")


@pytest.fixture
def sender01_wallet():
    return KeyPairWallet(SENDER01_SECRET, account="sender01")
