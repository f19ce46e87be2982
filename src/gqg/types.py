"""Type definitions for GQG1 envelopes."""

from dataclasses import dataclass
from enum import Enum
from typing import Union


# Envelope framing
HEADER_MESSAGE = "[GQG1-MESSAGE"
HEADER_FILE = "[GQG1-FILE"
HEADER_IDENTITY = "[GQG1-ID"
SEPARATOR = ":"
FOOTER = "]"

# Crypto constants (NaCl crypto_box)
PUBLIC_KEY_SIZE = 32
SECRET_KEY_SIZE = 32
NONCE_SIZE = 24
TAG_SIZE = 16
HEADER_SIZE = PUBLIC_KEY_SIZE + NONCE_SIZE

# Payload constants
FILE_NAME_TERMINATOR = 0x00
MAX_FILE_NAME_SIZE = 32
TAG_RAW = 0x00
TAG_COMPRESSED = 0x01


class EncodeFlags(Enum):
    """Body encoding selected by the sender."""
    NONE = TAG_RAW
    COMPRESSED = TAG_COMPRESSED


@dataclass(frozen=True)
class Message:
    """Envelope carrying a plain message."""


@dataclass(frozen=True)
class File:
    """Envelope carrying a named file."""
    file_name: str


EnvelopeType = Union[Message, File]


@dataclass
class DecodedMessage:
    """Contents of a decoded message envelope."""
    contents: bytes


@dataclass
class DecodedFile:
    """Contents of a decoded file envelope."""
    file_name: str
    contents: bytes


DecodedData = Union[DecodedMessage, DecodedFile]


@dataclass
class Decoded:
    """Result of decoding an envelope."""
    sender: bytes  # 32-byte X25519 public key
    data: DecodedData


# Exception types
class GqgError(Exception):
    """Base exception for envelope codec errors."""
    pass


class InvalidOuterEncoding(GqgError):
    """Envelope text or its binary framing is malformed."""
    pass


class InvalidInnerEncoding(GqgError):
    """Decrypted payload has a missing or unknown compression tag."""
    pass


class InvalidFileName(GqgError):
    """File name is empty, too long, or unsafe."""
    pass


class AuthFailure(GqgError):
    """Authentication tag did not verify."""
    pass


class DecompressFailure(GqgError):
    """Compressed body could not be decompressed."""
    pass


class InvalidIdentityError(Exception):
    """Identity string is malformed."""
    pass


class StoreError(Exception):
    """Identity/friend store operation failed."""
    pass
