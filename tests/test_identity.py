"""Tests for identity strings."""

import base64

import pytest
from gqg.identity import from_id, identity_from_bytes, to_id
from gqg.keys import private_key_from_bytes, public_key_to_bytes
from gqg.types import InvalidIdentityError
from .test_vectors import ALICE_SECRET_KEY_HEX, ALICE_PUBLIC_KEY_HEX, LOW_ORDER_PUBLIC_KEYS_HEX


@pytest.fixture
def alice_public():
    """Alice's public key."""
    return private_key_from_bytes(bytes.fromhex(ALICE_SECRET_KEY_HEX)).public_key()


class TestIdentityString:
    """Test identity string creation and parsing."""

    def test_to_id(self, alice_public) -> None:
        expected = base64.b64encode(bytes.fromhex(ALICE_PUBLIC_KEY_HEX)).decode()
        assert to_id(alice_public) == f"[GQG1-ID:{expected}]"

    def test_round_trip(self, alice_public) -> None:
        parsed = from_id(to_id(alice_public))
        assert public_key_to_bytes(parsed) == public_key_to_bytes(alice_public)

    def test_identity_from_bytes(self, alice_public) -> None:
        assert identity_from_bytes(bytes.fromhex(ALICE_PUBLIC_KEY_HEX)) == to_id(alice_public)

    def test_whitespace_ignored(self, alice_public) -> None:
        identity = to_id(alice_public)
        wrapped = identity[:20] + "\n  " + identity[20:] + "\n"

        assert public_key_to_bytes(from_id(wrapped)) == public_key_to_bytes(alice_public)

    @pytest.mark.parametrize(
        "identity",
        [
            "",
            "hello",
            "[GQG1-ID]",
            "[GQG1-ID:]",
            "[GQG1-MESSAGE:AAEC]",
            "[GQG1-ID" + base64.b64encode(bytes(32)).decode() + "]",
            "[GQG1-ID:" + base64.b64encode(bytes(32)).decode(),
            "[GQG1-ID:" + base64.b64encode(bytes(31)).decode() + "]",
            "[GQG1-ID:" + base64.b64encode(bytes(33)).decode() + "]",
            "[GQG1-ID:!!!!]",
        ],
    )
    def test_invalid(self, identity: str) -> None:
        with pytest.raises(InvalidIdentityError):
            from_id(identity)

    @pytest.mark.parametrize("key", LOW_ORDER_PUBLIC_KEYS_HEX.values(), ids=LOW_ORDER_PUBLIC_KEYS_HEX.keys())
    def test_low_order_key_rejected(self, key: str) -> None:
        identity = "[GQG1-ID:" + base64.b64encode(bytes.fromhex(key)).decode() + "]"

        with pytest.raises(InvalidIdentityError, match="small-order"):
            from_id(identity)
