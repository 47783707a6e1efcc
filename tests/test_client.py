"""
Tests for the PactClient HTTP transport.
"""
import json

import pytest
import requests

from pact_sdk.client import PactClient, create_devnet_client, create_mainnet_client, create_testnet_client
from pact_sdk.envelope import create_command, create_transaction
from pact_sdk.exceptions import ClientError, ClientErrorCode, EnvelopeError
from pact_sdk.models import ExecPayload, PartiallySignedTransaction, Signer, TransactionSig

from conftest import SENDER00_PUBLIC, TEST_NETWORK_ID, TEST_RPC_URL
from test_helpers.fake_client import failure, success

CHAIN_0 = f"https://node.example.com/chainweb/0.0/{TEST_NETWORK_ID}/chain/0/pact/api/v1"
CHAIN_1 = f"https://node.example.com/chainweb/0.0/{TEST_NETWORK_ID}/chain/1/pact/api/v1"


@pytest.fixture
def client():
    return PactClient(rpc_url=TEST_RPC_URL, network_id=TEST_NETWORK_ID)


def _tx(chain_id="0", signed=True):
    command = create_command(ExecPayload(code="(+ 1 2)"), TEST_NETWORK_ID, {"chainId": chain_id})
    command.signers = [Signer(pub_key=SENDER00_PUBLIC)]
    tx = create_transaction(command)
    sig = TransactionSig(sig="ab" * 64, pub_key=SENDER00_PUBLIC) if signed else None
    return PartiallySignedTransaction(cmd=tx.cmd, hash=tx.hash, sigs=[sig])


class TestClientInit:
    """Test client construction."""

    def test_rejects_plain_http(self):
        with pytest.raises(ValueError) as exc_info:
            PactClient(rpc_url="http://node.example.com/{networkId}/{chainId}", network_id="x")
        assert "https://" in str(exc_info.value)

    def test_allows_local_http(self):
        client = PactClient(rpc_url="http://localhost:8080/chainweb/0.0/{networkId}/chain/{chainId}/pact",
                            network_id="development")
        assert client.get_chain_url("3") == "http://localhost:8080/chainweb/0.0/development/chain/3/pact"

    def test_chain_url_defaults(self, client):
        assert client.get_chain_url() == CHAIN_0[:-len("/api/v1")]

    def test_factories(self):
        assert create_mainnet_client().get_chain_url("1").startswith("https://api.chainweb.com/chainweb/0.0/mainnet01/chain/1")
        assert create_testnet_client().network_id == "testnet04"
        devnet = create_devnet_client(port=9999)
        assert devnet.get_chain_url("0") == "http://localhost:9999/chainweb/0.0/development/chain/0/pact"


class TestLocal:
    """Test the /local endpoint."""

    def test_local_result(self, client, requests_mock):
        tx = _tx()
        route = requests_mock.post(f"{CHAIN_0}/local", json=success(tx.hash, 3))

        result = client.local(tx)

        assert result.result.data == 3
        assert route.last_request.qs == {"preflight": ["false"], "signatureverification": ["true"]}
        body = route.last_request.json()
        assert body == {"cmd": tx.cmd, "hash": tx.hash, "sigs": [{"sig": "ab" * 64}]}

    def test_local_routes_by_command_chain(self, client, requests_mock):
        tx = _tx(chain_id="1")
        route = requests_mock.post(f"{CHAIN_1}/local", json=success(tx.hash, 1))
        client.local(tx)
        assert route.called

    def test_unsigned_slots_sent_as_null(self, client, requests_mock):
        tx = _tx(signed=False)
        route = requests_mock.post(f"{CHAIN_0}/local", json=success(tx.hash))
        client.local(tx, signature_verification=False)
        assert route.last_request.json()["sigs"] == [None]

    def test_preflight_result_unwrapped(self, client, requests_mock):
        tx = _tx()
        requests_mock.post(f"{CHAIN_0}/local", json={
            "preflightResult": failure(tx.hash, {"message": "boom"}),
            "preflightWarnings": ["deprecated"],
        })
        result = client.local(tx, preflight=True)
        assert result.result.status == "failure"
        assert result.preflight_warnings == ["deprecated"]

    def test_unexpected_result_shape(self, client, requests_mock):
        requests_mock.post(f"{CHAIN_0}/local", json={"unexpected": True})
        with pytest.raises(ClientError) as exc_info:
            client.local(_tx())
        assert exc_info.value.code == ClientErrorCode.PARSE_ERROR


class TestSend:
    """Test /send and submission."""

    def test_submit(self, client, requests_mock):
        tx = _tx()
        route = requests_mock.post(f"{CHAIN_0}/send", json={"requestKeys": [tx.hash]})

        descriptor = client.submit(tx)

        assert descriptor.request_key == tx.hash
        assert descriptor.chain_id == "0"
        assert descriptor.network_id == TEST_NETWORK_ID
        assert route.last_request.json() == {"cmds": [tx.to_wire()]}

    def test_send_rejects_mixed_chains(self, client):
        with pytest.raises(ClientError) as exc_info:
            client.send([_tx("0"), _tx("1")])
        assert exc_info.value.code == ClientErrorCode.VALIDATION_ERROR

    def test_send_rejects_empty(self, client):
        with pytest.raises(ClientError):
            client.send([])

    def test_send_rejects_forged_hash(self, client):
        tx = _tx()
        forged = PartiallySignedTransaction(cmd=tx.cmd, hash="forged", sigs=tx.sigs)
        with pytest.raises(EnvelopeError):
            client.send([forged])

    def test_send_missing_request_keys(self, client, requests_mock):
        requests_mock.post(f"{CHAIN_0}/send", json={"error": "nope"})
        with pytest.raises(ClientError) as exc_info:
            client.send([_tx()])
        assert exc_info.value.code == ClientErrorCode.PARSE_ERROR


class TestPollAndListen:
    """Test /poll and /listen."""

    def test_listen(self, client, requests_mock):
        route = requests_mock.post(f"{CHAIN_1}/listen", json=success("key", {"ok": True}, txId=12))
        result = client.listen("key", chain_id="1")
        assert result.tx_id == 12
        assert result.succeeded
        assert route.last_request.json() == {"listen": "key"}

    def test_poll(self, client, requests_mock):
        route = requests_mock.post(f"{CHAIN_0}/poll", json={"a": success("a", 1)})
        results = client.poll(["a", "b"])
        assert list(results) == ["a"]
        assert route.last_request.json() == {"requestKeys": ["a", "b"]}

    def test_get_transaction_pending(self, client, requests_mock):
        requests_mock.post(f"{CHAIN_0}/poll", json={})
        assert client.get_transaction("a") is None


class TestErrors:
    """Test transport error mapping."""

    def test_http_error(self, client, requests_mock):
        requests_mock.post(f"{CHAIN_0}/local", status_code=400, text="Validation failed for hash")
        with pytest.raises(ClientError) as exc_info:
            client.local(_tx())
        assert exc_info.value.code == ClientErrorCode.HTTP_ERROR
        assert exc_info.value.status == 400
        assert "Validation failed" in exc_info.value.response

    def test_invalid_json(self, client, requests_mock):
        requests_mock.post(f"{CHAIN_0}/listen", text="not json")
        with pytest.raises(ClientError) as exc_info:
            client.listen("key")
        assert exc_info.value.code == ClientErrorCode.PARSE_ERROR

    def test_timeout(self, client, requests_mock):
        requests_mock.post(f"{CHAIN_0}/listen", exc=requests.exceptions.ReadTimeout)
        with pytest.raises(ClientError) as exc_info:
            client.listen("key")
        assert exc_info.value.code == ClientErrorCode.TIMEOUT

    def test_connection_error(self, client, requests_mock):
        requests_mock.post(f"{CHAIN_0}/poll", exc=requests.exceptions.ConnectionError)
        with pytest.raises(ClientError) as exc_info:
            client.poll(["a"])
        assert exc_info.value.code == ClientErrorCode.NETWORK_ERROR


class TestHealthCheck:
    """Test the /info health check."""

    def test_healthy(self, client, requests_mock):
        requests_mock.get("https://node.example.com/info", json={"nodeVersion": TEST_NETWORK_ID})
        assert client.health_check() is True

    def test_unhealthy(self, client, requests_mock):
        requests_mock.get("https://node.example.com/info", status_code=503)
        assert client.health_check() is False

    def test_unreachable(self, client, requests_mock):
        requests_mock.get("https://node.example.com/info", exc=requests.exceptions.ConnectionError)
        assert client.health_check() is False
