"""
Tests for the key pair wallet.
"""
import asyncio

import pytest
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey

from pact_sdk.envelope import create_command, create_transaction
from pact_sdk.exceptions import WalletError
from pact_sdk.models import ExecPayload, KeyPair, Signer, TransactionSig
from pact_sdk.signer import KeyPairWallet, Wallet, generate_k_account, generate_k_accounts
from pact_sdk.signer.local import verify_signature

from conftest import SENDER00_PUBLIC, SENDER00_SECRET, SENDER01_PUBLIC


def _tx(*pub_keys):
    command = create_command(ExecPayload(code="(+ 1 2)"), "development")
    command.signers = [Signer(pub_key=key) for key in pub_keys]
    return create_transaction(command)


class TestKeyPairWallet:
    """Test KeyPairWallet construction and signing."""

    def test_derives_public_key(self, sender00_wallet):
        assert sender00_wallet.public_key == SENDER00_PUBLIC
        assert sender00_wallet.account == "sender00"

    def test_default_account_is_k_account(self):
        wallet = KeyPairWallet(SENDER00_SECRET)
        assert wallet.account == f"k:{SENDER00_PUBLIC}"

    def test_accepts_key_objects_and_bytes(self):
        wallet = KeyPairWallet(Ed25519PrivateKey.generate())
        assert len(wallet.public_key) == 64
        assert KeyPairWallet(bytes.fromhex(SENDER00_SECRET)).public_key == SENDER00_PUBLIC

    @pytest.mark.parametrize("bad_key", ["zz", "abcd", ""])
    def test_invalid_private_key(self, bad_key):
        with pytest.raises(WalletError):
            KeyPairWallet(bad_key)

    def test_is_a_wallet(self, sender00_wallet):
        assert isinstance(sender00_wallet, Wallet)

    def test_get_account(self, sender00_wallet):
        account = asyncio.run(sender00_wallet.get_account())
        assert account.address == "sender00"
        assert account.public_key == SENDER00_PUBLIC

    def test_signs_matching_slots_only(self, sender00_wallet):
        tx = _tx(SENDER01_PUBLIC, SENDER00_PUBLIC, SENDER00_PUBLIC)
        signed = asyncio.run(sender00_wallet.sign(tx))

        assert signed.hash == tx.hash
        assert signed.sigs[0] is None
        for slot in signed.sigs[1:]:
            assert slot.pub_key == SENDER00_PUBLIC
            assert verify_signature(SENDER00_PUBLIC, tx.hash, slot.sig)

    def test_sign_does_not_mutate_input(self, sender00_wallet):
        tx = _tx(SENDER00_PUBLIC)
        asyncio.run(sender00_wallet.sign(tx))
        assert tx.sigs == [None]

    def test_sign_keeps_existing_slots(self, sender00_wallet):
        tx = _tx(SENDER01_PUBLIC, SENDER00_PUBLIC)
        existing = TransactionSig(sig="ab" * 64, pub_key=SENDER01_PUBLIC)
        partial = tx.model_copy(update={"sigs": [existing, None]})
        signed = asyncio.run(sender00_wallet.sign(partial))
        assert signed.sigs[0] == existing
        assert signed.sigs[1].sig

    def test_non_signer_returns_unchanged_slots(self, sender00_wallet):
        tx = _tx(SENDER01_PUBLIC)
        assert asyncio.run(sender00_wallet.sign(tx)).sigs == [None]

    def test_from_key_pair_mismatch(self):
        pair = KeyPair(account="x", public_key=SENDER01_PUBLIC, secret_key=SENDER00_SECRET)
        with pytest.raises(WalletError):
            KeyPairWallet.from_key_pair(pair)

    def test_from_context(self, context):
        wallet = KeyPairWallet.from_context(context)
        assert wallet.account == "sender00"
        assert KeyPairWallet.from_context(context, "sender01").public_key == SENDER01_PUBLIC

    def test_from_context_unknown_account(self, context):
        with pytest.raises(WalletError) as exc_info:
            KeyPairWallet.from_context(context, "nobody")
        assert "nobody" in str(exc_info.value)

    def test_repr_hides_key(self, sender00_wallet):
        assert SENDER00_SECRET not in repr(sender00_wallet)


class TestSignatureVerification:
    """Test verify_signature."""

    def test_rejects_other_hash(self, sender00_wallet):
        tx = _tx(SENDER00_PUBLIC)
        other = _tx(SENDER00_PUBLIC, SENDER01_PUBLIC)
        sig = sender00_wallet.sign_hash(tx.hash)
        assert verify_signature(SENDER00_PUBLIC, tx.hash, sig)
        assert not verify_signature(SENDER00_PUBLIC, other.hash, sig)
        assert not verify_signature(SENDER01_PUBLIC, tx.hash, sig)

    def test_rejects_garbage(self):
        assert not verify_signature("nothex", "abc", "00")


class TestKAccounts:
    """Test k: account generation."""

    def test_generate_k_account(self):
        pair = generate_k_account()
        assert pair.account == f"k:{pair.public_key}"
        assert KeyPairWallet.from_key_pair(pair).public_key == pair.public_key

    def test_generate_k_accounts(self):
        pairs = generate_k_accounts(3)
        assert len({pair.public_key for pair in pairs}) == 3

    def test_generate_negative_count(self):
        with pytest.raises(ValueError):
            generate_k_accounts(-1)
