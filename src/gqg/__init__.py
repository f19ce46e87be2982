"""
GQG - Authenticated offline envelopes

Python implementation of the GQG1 envelope format using X25519 +
XSalsa20-Poly1305 (NaCl box).
"""

from .keys import (
    generate_keypair,
    public_key_to_bytes,
    public_key_from_bytes,
    private_key_to_bytes,
    private_key_from_bytes,
)
from .codec import encode, decode
from .envelope import frame, unframe, is_envelope
from .crypto import seal, open_box, encrypt_payload, decrypt_payload
from .payload import pack_payload, unpack_payload, validate_file_name
from .compression import compress, decompress, DecompressError
from .identity import to_id, from_id, identity_from_bytes
from .types import (
    EncodeFlags,
    Message,
    File,
    EnvelopeType,
    Decoded,
    DecodedMessage,
    DecodedFile,
    DecodedData,
    PUBLIC_KEY_SIZE,
    SECRET_KEY_SIZE,
    NONCE_SIZE,
    HEADER_SIZE,
    MAX_FILE_NAME_SIZE,
    GqgError,
    InvalidOuterEncoding,
    InvalidInnerEncoding,
    InvalidFileName,
    AuthFailure,
    DecompressFailure,
    InvalidIdentityError,
    StoreError,
)
from .store import Database, Identity, Friend
from .config import Config

__version__ = "0.1.0"

__all__ = [
    # Keys
    "generate_keypair",
    "public_key_to_bytes",
    "public_key_from_bytes",
    "private_key_to_bytes",
    "private_key_from_bytes",
    # Codec
    "encode",
    "decode",
    # Envelope
    "frame",
    "unframe",
    "is_envelope",
    # Crypto
    "seal",
    "open_box",
    "encrypt_payload",
    "decrypt_payload",
    # Payload
    "pack_payload",
    "unpack_payload",
    "validate_file_name",
    # Compression
    "compress",
    "decompress",
    "DecompressError",
    # Identity
    "to_id",
    "from_id",
    "identity_from_bytes",
    # Types
    "EncodeFlags",
    "Message",
    "File",
    "EnvelopeType",
    "Decoded",
    "DecodedMessage",
    "DecodedFile",
    "DecodedData",
    # Constants
    "PUBLIC_KEY_SIZE",
    "SECRET_KEY_SIZE",
    "NONCE_SIZE",
    "HEADER_SIZE",
    "MAX_FILE_NAME_SIZE",
    # Errors
    "GqgError",
    "InvalidOuterEncoding",
    "InvalidInnerEncoding",
    "InvalidFileName",
    "AuthFailure",
    "DecompressFailure",
    "InvalidIdentityError",
    "StoreError",
    # Store
    "Database",
    "Identity",
    "Friend",
    # Config
    "Config",
]
