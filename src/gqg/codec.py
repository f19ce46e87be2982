"""Envelope encoding and decoding for GQG1.

encode: pack payload -> seal -> frame
decode: unframe -> open -> unpack payload

The file name and compression tag are sealed together with the body, so
none of them can be altered without breaking authentication.
"""

import logging

from cryptography.hazmat.primitives.asymmetric.x25519 import X25519PrivateKey, X25519PublicKey

from .crypto import decrypt_payload, encrypt_payload
from .envelope import frame, unframe
from .payload import pack_payload, unpack_payload
from .types import (
    Decoded,
    EncodeFlags,
    EnvelopeType,
    File,
    GqgError,
)

logger = logging.getLogger(__name__)


def encode(
    sender_private_key: X25519PrivateKey,
    recipient_public_key: X25519PublicKey,
    envelope_type: EnvelopeType,
    flags: EncodeFlags,
    data: bytes,
) -> str:
    """
    Encrypt a message or file for a recipient.

    Args:
        sender_private_key: Sender's X25519 private key
        recipient_public_key: Recipient's X25519 public key
        envelope_type: Message() or File(file_name)
        flags: EncodeFlags.NONE or EncodeFlags.COMPRESSED
        data: Message or file body

    Returns:
        Printable envelope text

    Raises:
        InvalidFileName: If a file envelope has an invalid name
    """
    is_file = isinstance(envelope_type, File)
    plaintext = pack_payload(envelope_type, flags, data)
    payload = encrypt_payload(plaintext, sender_private_key, recipient_public_key)
    text = frame(is_file, payload)

    logger.debug(
        "Encoded %s envelope: body=%d plaintext=%d envelope=%d",
        "file" if is_file else "message",
        len(data),
        len(plaintext),
        len(text),
    )
    return text


def decode(recipient_private_key: X25519PrivateKey, text: str) -> Decoded:
    """
    Decrypt an envelope addressed to us.

    Args:
        recipient_private_key: Our X25519 private key
        text: Envelope text (whitespace is ignored)

    Returns:
        Decoded sender public key and contents

    Raises:
        InvalidOuterEncoding: If the framing or binary layout is invalid
        AuthFailure: If the envelope does not authenticate
        InvalidInnerEncoding: If the compression tag is missing or unknown
        InvalidFileName: If the sealed file name is invalid
        DecompressFailure: If a compressed body is malformed
    """
    try:
        is_file, payload = unframe(text)
        sender, plaintext = decrypt_payload(payload, recipient_private_key)
        data = unpack_payload(is_file, plaintext)
    except GqgError as e:
        logger.debug("Envelope rejected: %s: %s", type(e).__name__, e)
        raise

    return Decoded(sender=sender, data=data)
