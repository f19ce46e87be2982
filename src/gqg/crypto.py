"""Authenticated public-key encryption for GQG1 payloads.

Payloads are sealed with NaCl crypto_box (X25519 key agreement +
XSalsa20-Poly1305). The sender public key and nonce travel in clear ahead of
the ciphertext:

    [0-31]   senderPublicKey (32 bytes)
    [32-55]  nonce (24 bytes)
    [56+]    ciphertext (plaintext + 16-byte tag)
"""

import logging
from typing import Tuple

from cryptography.hazmat.primitives.asymmetric.x25519 import X25519PrivateKey, X25519PublicKey
from nacl.exceptions import CryptoError
from nacl.public import Box, PrivateKey, PublicKey
from nacl.utils import random as nacl_random

from .keys import private_key_to_bytes, public_key_to_bytes, public_key_from_bytes
from .types import (
    AuthFailure,
    HEADER_SIZE,
    InvalidOuterEncoding,
    NONCE_SIZE,
    PUBLIC_KEY_SIZE,
)

logger = logging.getLogger(__name__)


def _box(private_key: X25519PrivateKey, public_key: X25519PublicKey) -> Box:
    """Build a NaCl box from X25519 key objects."""
    return Box(
        PrivateKey(private_key_to_bytes(private_key)),
        PublicKey(public_key_to_bytes(public_key)),
    )


def generate_nonce() -> bytes:
    """Generate a fresh random 24-byte nonce."""
    nonce = nacl_random(NONCE_SIZE)
    assert len(nonce) == NONCE_SIZE
    return nonce


def seal(
    plaintext: bytes,
    nonce: bytes,
    recipient_public_key: X25519PublicKey,
    sender_private_key: X25519PrivateKey,
) -> bytes:
    """
    Encrypt and authenticate plaintext for a recipient.

    Args:
        plaintext: Bytes to encrypt
        nonce: 24-byte nonce, never reused for the same key pair
        recipient_public_key: Recipient's X25519 public key
        sender_private_key: Sender's X25519 private key

    Returns:
        Ciphertext with the 16-byte authentication tag

    Raises:
        AuthFailure: If key agreement fails (small-order recipient key)
    """
    try:
        box = _box(sender_private_key, recipient_public_key)
        return box.encrypt(plaintext, nonce).ciphertext
    except CryptoError as e:
        raise AuthFailure("Key agreement failed: unusable recipient public key") from e


def open_box(
    ciphertext: bytes,
    nonce: bytes,
    sender_public_key: X25519PublicKey,
    recipient_private_key: X25519PrivateKey,
) -> bytes:
    """
    Verify and decrypt a ciphertext produced by seal().

    Args:
        ciphertext: Ciphertext with authentication tag
        nonce: 24-byte nonce used for sealing
        sender_public_key: Claimed sender's X25519 public key
        recipient_private_key: Our X25519 private key

    Returns:
        Decrypted plaintext

    Raises:
        AuthFailure: If the tag does not verify
    """
    try:
        box = _box(recipient_private_key, sender_public_key)
        return box.decrypt(ciphertext, nonce)
    except CryptoError as e:
        raise AuthFailure("Authentication failed") from e


def encrypt_payload(
    plaintext: bytes,
    sender_private_key: X25519PrivateKey,
    recipient_public_key: X25519PublicKey,
) -> bytes:
    """
    Seal a packed payload and prepend the clear header.

    Args:
        plaintext: Packed payload
        sender_private_key: Sender's X25519 private key
        recipient_public_key: Recipient's X25519 public key

    Returns:
        senderPublicKey || nonce || ciphertext
    """
    sender_pub_bytes = public_key_to_bytes(sender_private_key.public_key())
    nonce = generate_nonce()
    ciphertext = seal(plaintext, nonce, recipient_public_key, sender_private_key)
    return sender_pub_bytes + nonce + ciphertext


def decrypt_payload(
    data: bytes,
    recipient_private_key: X25519PrivateKey,
) -> Tuple[bytes, bytes]:
    """
    Split the clear header off and open the ciphertext.

    Args:
        data: senderPublicKey || nonce || ciphertext
        recipient_private_key: Our X25519 private key

    Returns:
        Tuple of (sender public key bytes, plaintext)

    Raises:
        InvalidOuterEncoding: If data is shorter than the header
        AuthFailure: If the ciphertext does not authenticate
    """
    if len(data) < HEADER_SIZE:
        raise InvalidOuterEncoding(f"Data too short: {len(data)} bytes (minimum {HEADER_SIZE})")

    sender_public_key = bytes(data[:PUBLIC_KEY_SIZE])
    nonce = bytes(data[PUBLIC_KEY_SIZE:HEADER_SIZE])
    ciphertext = bytes(data[HEADER_SIZE:])

    plaintext = open_box(
        ciphertext,
        nonce,
        public_key_from_bytes(sender_public_key),
        recipient_private_key,
    )
    return sender_public_key, plaintext
