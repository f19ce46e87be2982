"""Identity strings for sharing GQG1 public keys."""

import base64
import binascii

from cryptography.hazmat.primitives.asymmetric.x25519 import X25519PublicKey

from .envelope import remove_whitespace
from .keys import is_low_order, public_key_from_bytes, public_key_to_bytes
from .types import (
    FOOTER,
    HEADER_IDENTITY,
    InvalidIdentityError,
    PUBLIC_KEY_SIZE,
    SEPARATOR,
)


def to_id(public_key: X25519PublicKey) -> str:
    """Create an identity string for a public key.

    Format: [GQG1-ID:<base64 public key>]

    Args:
        public_key: The X25519 public key.

    Returns:
        The identity string.
    """
    encoded = base64.b64encode(public_key_to_bytes(public_key)).decode("ascii")
    return HEADER_IDENTITY + SEPARATOR + encoded + FOOTER


def from_id(identity: str) -> X25519PublicKey:
    """Parse an identity string.

    Args:
        identity: The identity string.

    Returns:
        The X25519 public key it names.

    Raises:
        InvalidIdentityError: If the identity string is invalid or names a
            small-order key.
    """
    text = remove_whitespace(identity)

    if not text.startswith(HEADER_IDENTITY + SEPARATOR):
        raise InvalidIdentityError("Invalid identifier format: missing header")

    if not text.endswith(FOOTER):
        raise InvalidIdentityError("Invalid identifier format: missing footer")

    body = text[len(HEADER_IDENTITY) + len(SEPARATOR) : -len(FOOTER)]
    try:
        raw = base64.b64decode(body, validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidIdentityError("Invalid identifier format: bad base64") from e

    if len(raw) != PUBLIC_KEY_SIZE:
        raise InvalidIdentityError(
            f"Invalid identifier format: key is {len(raw)} bytes, expected {PUBLIC_KEY_SIZE}"
        )

    public_key = public_key_from_bytes(raw)
    if is_low_order(public_key):
        raise InvalidIdentityError("Invalid identifier: key is a small-order point")

    return public_key


def identity_from_bytes(public_key: bytes) -> str:
    """Create an identity string from a raw 32-byte public key."""
    return to_id(public_key_from_bytes(public_key))
