"""Tests for sealing and opening payloads."""

import pytest
from gqg.crypto import (
    decrypt_payload,
    encrypt_payload,
    generate_nonce,
    open_box,
    seal,
)
from gqg.keys import generate_keypair, private_key_from_bytes, public_key_from_bytes, public_key_to_bytes
from gqg.types import AuthFailure, HEADER_SIZE, InvalidOuterEncoding, NONCE_SIZE, TAG_SIZE
from .test_vectors import ALICE_SECRET_KEY_HEX, BOB_SECRET_KEY_HEX, LOW_ORDER_PUBLIC_KEYS_HEX


@pytest.fixture
def alice_keys():
    """Alice's key pair."""
    private_key = private_key_from_bytes(bytes.fromhex(ALICE_SECRET_KEY_HEX))
    return private_key, private_key.public_key()


@pytest.fixture
def bob_keys():
    """Bob's key pair."""
    private_key = private_key_from_bytes(bytes.fromhex(BOB_SECRET_KEY_HEX))
    return private_key, private_key.public_key()


class TestSealOpen:
    """Test the box primitive."""

    def test_seal_adds_tag(self, alice_keys, bob_keys) -> None:
        alice_private, _ = alice_keys
        _, bob_public = bob_keys

        ciphertext = seal(b"Hello, Bob!", generate_nonce(), bob_public, alice_private)
        assert len(ciphertext) == len(b"Hello, Bob!") + TAG_SIZE

    def test_open_as_recipient(self, alice_keys, bob_keys) -> None:
        alice_private, alice_public = alice_keys
        bob_private, bob_public = bob_keys
        nonce = generate_nonce()

        ciphertext = seal(b"Hello, Bob!", nonce, bob_public, alice_private)
        assert open_box(ciphertext, nonce, alice_public, bob_private) == b"Hello, Bob!"

    def test_same_nonce_same_ciphertext(self, alice_keys, bob_keys) -> None:
        """Sealing is deterministic for a given nonce."""
        alice_private, _ = alice_keys
        _, bob_public = bob_keys
        nonce = bytes(NONCE_SIZE)

        assert seal(b"data", nonce, bob_public, alice_private) == seal(
            b"data", nonce, bob_public, alice_private
        )

    def test_wrong_nonce(self, alice_keys, bob_keys) -> None:
        alice_private, alice_public = alice_keys
        bob_private, bob_public = bob_keys

        ciphertext = seal(b"data", generate_nonce(), bob_public, alice_private)
        with pytest.raises(AuthFailure):
            open_box(ciphertext, generate_nonce(), alice_public, bob_private)

    def test_wrong_recipient(self, alice_keys, bob_keys) -> None:
        alice_private, alice_public = alice_keys
        _, bob_public = bob_keys
        eve_private, _ = generate_keypair()
        nonce = generate_nonce()

        ciphertext = seal(b"data", nonce, bob_public, alice_private)
        with pytest.raises(AuthFailure):
            open_box(ciphertext, nonce, alice_public, eve_private)

    def test_wrong_sender(self, alice_keys, bob_keys) -> None:
        alice_private, _ = alice_keys
        bob_private, bob_public = bob_keys
        _, eve_public = generate_keypair()
        nonce = generate_nonce()

        ciphertext = seal(b"data", nonce, bob_public, alice_private)
        with pytest.raises(AuthFailure):
            open_box(ciphertext, nonce, eve_public, bob_private)

    def test_truncated_ciphertext(self, alice_keys, bob_keys) -> None:
        _, alice_public = alice_keys
        bob_private, _ = bob_keys

        with pytest.raises(AuthFailure):
            open_box(b"short", generate_nonce(), alice_public, bob_private)

    @pytest.mark.parametrize("key", LOW_ORDER_PUBLIC_KEYS_HEX.values(), ids=LOW_ORDER_PUBLIC_KEYS_HEX.keys())
    def test_seal_to_low_order_key(self, alice_keys, key: str) -> None:
        alice_private, _ = alice_keys
        recipient = public_key_from_bytes(bytes.fromhex(key))

        with pytest.raises(AuthFailure, match="Key agreement failed"):
            seal(b"data", generate_nonce(), recipient, alice_private)


class TestPayload:
    """Test the clear header around the ciphertext."""

    def test_layout(self, alice_keys, bob_keys) -> None:
        """Data is senderPublicKey || nonce || ciphertext."""
        alice_private, alice_public = alice_keys
        _, bob_public = bob_keys

        data = encrypt_payload(b"payload", alice_private, bob_public)

        assert data[:32] == public_key_to_bytes(alice_public)
        assert len(data) == HEADER_SIZE + len(b"payload") + TAG_SIZE

    def test_fresh_nonce_per_call(self, alice_keys, bob_keys) -> None:
        alice_private, _ = alice_keys
        _, bob_public = bob_keys

        first = encrypt_payload(b"payload", alice_private, bob_public)
        second = encrypt_payload(b"payload", alice_private, bob_public)

        assert first[32:HEADER_SIZE] != second[32:HEADER_SIZE]
        assert first[HEADER_SIZE:] != second[HEADER_SIZE:]

    def test_round_trip(self, alice_keys, bob_keys) -> None:
        alice_private, alice_public = alice_keys
        bob_private, bob_public = bob_keys

        data = encrypt_payload(b"payload", alice_private, bob_public)
        sender, plaintext = decrypt_payload(data, bob_private)

        assert sender == public_key_to_bytes(alice_public)
        assert plaintext == b"payload"

    @pytest.mark.parametrize("size", [0, 1, 31, 32, 55])
    def test_too_short(self, bob_keys, size: int) -> None:
        bob_private, _ = bob_keys

        with pytest.raises(InvalidOuterEncoding):
            decrypt_payload(bytes(size), bob_private)

    def test_header_only(self, bob_keys) -> None:
        """A header without ciphertext fails authentication."""
        bob_private, _ = bob_keys

        with pytest.raises(AuthFailure):
            decrypt_payload(bytes(range(HEADER_SIZE)), bob_private)
