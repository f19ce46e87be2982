"""Printable framing for GQG1 envelopes."""

import base64
import binascii
from typing import Tuple

from .types import (
    FOOTER,
    HEADER_FILE,
    HEADER_MESSAGE,
    InvalidOuterEncoding,
    SEPARATOR,
)


def remove_whitespace(text: str) -> str:
    """Drop every whitespace character, undoing line wrapping."""
    return "".join(text.split())


def frame(is_file: bool, data: bytes) -> str:
    """
    Wrap binary envelope data in printable text.

    Format:
        [GQG1-MESSAGE:<base64>]
        [GQG1-FILE:<base64>]

    Args:
        is_file: Whether the envelope carries a file
        data: senderPublicKey || nonce || ciphertext

    Returns:
        ASCII envelope text
    """
    header = HEADER_FILE if is_file else HEADER_MESSAGE
    return header + SEPARATOR + base64.b64encode(data).decode("ascii") + FOOTER


def unframe(text: str) -> Tuple[bool, bytes]:
    """
    Recover binary envelope data from printable text.

    Whitespace anywhere in the text is ignored.

    Args:
        text: Envelope text

    Returns:
        Tuple of (is_file, data)

    Raises:
        InvalidOuterEncoding: If the header, separator, footer or base64 is invalid
    """
    text = remove_whitespace(text)

    if text.startswith(HEADER_MESSAGE):
        is_file = False
        text = text[len(HEADER_MESSAGE) :]
    elif text.startswith(HEADER_FILE):
        is_file = True
        text = text[len(HEADER_FILE) :]
    else:
        raise InvalidOuterEncoding("Unknown envelope header")

    if not text.endswith(FOOTER):
        raise InvalidOuterEncoding("Missing envelope footer")
    text = text[: -len(FOOTER)]

    if not text.startswith(SEPARATOR):
        raise InvalidOuterEncoding("Missing separator after header")
    text = text[len(SEPARATOR) :]

    try:
        data = base64.b64decode(text, validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidOuterEncoding("Invalid base64 body") from e

    return is_file, data


def is_envelope(text: str) -> bool:
    """
    Check if text looks like a GQG1 envelope.

    Args:
        text: Text to check

    Returns:
        True if text has an envelope header and footer
    """
    text = remove_whitespace(text)
    if not text.endswith(FOOTER):
        return False
    return text.startswith(HEADER_MESSAGE + SEPARATOR) or text.startswith(HEADER_FILE + SEPARATOR)
