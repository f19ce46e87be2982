"""Key generation and conversion for GQG1 identities."""

from typing import Tuple

from cryptography.hazmat.primitives.asymmetric.x25519 import X25519PrivateKey, X25519PublicKey
from cryptography.hazmat.primitives.serialization import (
    Encoding,
    NoEncryption,
    PrivateFormat,
    PublicFormat,
)

from .types import PUBLIC_KEY_SIZE, SECRET_KEY_SIZE


def generate_keypair() -> Tuple[X25519PrivateKey, X25519PublicKey]:
    """
    Generate a random X25519 key pair for a new identity.

    Returns:
        Tuple of (private_key, public_key)
    """
    private_key = X25519PrivateKey.generate()
    public_key = private_key.public_key()
    return private_key, public_key


def public_key_to_bytes(public_key: X25519PublicKey) -> bytes:
    """Convert X25519 public key to raw bytes."""
    return public_key.public_bytes(Encoding.Raw, PublicFormat.Raw)


def public_key_from_bytes(data: bytes) -> X25519PublicKey:
    """Create X25519 public key from raw bytes."""
    if len(data) != PUBLIC_KEY_SIZE:
        raise ValueError(f"Public key must be {PUBLIC_KEY_SIZE} bytes, got {len(data)}")
    return X25519PublicKey.from_public_bytes(data)


def private_key_to_bytes(private_key: X25519PrivateKey) -> bytes:
    """Convert X25519 private key to raw bytes."""
    return private_key.private_bytes(Encoding.Raw, PrivateFormat.Raw, NoEncryption())


def private_key_from_bytes(data: bytes) -> X25519PrivateKey:
    """Create X25519 private key from raw bytes."""
    if len(data) != SECRET_KEY_SIZE:
        raise ValueError(f"Secret key must be {SECRET_KEY_SIZE} bytes, got {len(data)}")
    return X25519PrivateKey.from_private_bytes(data)


def is_low_order(public_key: X25519PublicKey) -> bool:
    """
    Check whether a public key is a small-order point.

    Key agreement with such a key yields an all-zero shared secret for
    every secret key, so it cannot be used to seal anything.
    """
    try:
        X25519PrivateKey.generate().exchange(public_key)
    except ValueError:
        return True
    return False
