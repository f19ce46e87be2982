"""Plaintext payload packing for GQG1 envelopes.

Format (before encryption):
    [file name (1-32 bytes, UTF-8) || 0x00]   only for file envelopes
    compression tag (1 byte)                   0x00 raw, 0x01 compressed
    body (variable)
"""

import logging

from .compression import compress, decompress, DecompressError
from .types import (
    DecodedData,
    DecodedFile,
    DecodedMessage,
    DecompressFailure,
    EncodeFlags,
    EnvelopeType,
    File,
    FILE_NAME_TERMINATOR,
    InvalidFileName,
    InvalidInnerEncoding,
    InvalidOuterEncoding,
    MAX_FILE_NAME_SIZE,
    TAG_COMPRESSED,
    TAG_RAW,
)

logger = logging.getLogger(__name__)


def validate_file_name(file_name: str) -> bool:
    """
    Check that a file name is safe to write on the receiving side.

    A valid name is 1 to 32 bytes once UTF-8 encoded, contains no path
    separator and no ".." sequence.
    """
    size = len(file_name.encode("utf-8"))
    if size == 0 or size > MAX_FILE_NAME_SIZE:
        return False
    if "/" in file_name or "\\" in file_name:
        return False
    if ".." in file_name:
        return False
    return True


def pack_payload(envelope_type: EnvelopeType, flags: EncodeFlags, data: bytes) -> bytes:
    """
    Build the plaintext that gets sealed into an envelope.

    Args:
        envelope_type: Message() or File(file_name)
        flags: Whether the body is stored raw or compressed
        data: Message or file body

    Returns:
        Packed plaintext bytes

    Raises:
        InvalidFileName: If a file envelope has an invalid name
    """
    prefix = b""
    if isinstance(envelope_type, File):
        if not validate_file_name(envelope_type.file_name):
            raise InvalidFileName(f"Invalid file name: {envelope_type.file_name!r}")
        prefix = envelope_type.file_name.encode("utf-8") + bytes([FILE_NAME_TERMINATOR])

    if flags is EncodeFlags.COMPRESSED:
        body = compress(data)
        logger.debug("Compressed body from %d to %d bytes", len(data), len(body))
    else:
        body = bytes(data)

    return prefix + bytes([flags.value]) + body


def unpack_payload(is_file: bool, plaintext: bytes) -> DecodedData:
    """
    Parse a decrypted payload.

    Args:
        is_file: Whether the envelope header announced a file
        plaintext: Decrypted payload bytes

    Returns:
        DecodedMessage or DecodedFile

    Raises:
        InvalidOuterEncoding: If a file payload has no name terminator
        InvalidFileName: If the file name is not valid UTF-8 or is unsafe
        InvalidInnerEncoding: If the compression tag is missing or unknown
        DecompressFailure: If a compressed body is malformed
    """
    file_name = None
    offset = 0

    if is_file:
        separator = plaintext.find(bytes([FILE_NAME_TERMINATOR]))
        if separator < 0:
            raise InvalidOuterEncoding("File name terminator not found")
        try:
            file_name = plaintext[:separator].decode("utf-8")
        except UnicodeDecodeError as e:
            raise InvalidFileName("File name is not valid UTF-8") from e
        # The sender should have rejected this already
        if not validate_file_name(file_name):
            raise InvalidFileName(f"Invalid file name: {file_name!r}")
        offset = separator + 1

    if offset >= len(plaintext):
        raise InvalidInnerEncoding("Missing compression tag")

    tag = plaintext[offset]
    body = plaintext[offset + 1 :]

    if tag == TAG_RAW:
        contents = bytes(body)
    elif tag == TAG_COMPRESSED:
        try:
            contents = decompress(body)
        except DecompressError as e:
            raise DecompressFailure(str(e)) from e
    else:
        raise InvalidInnerEncoding(f"Unknown compression tag: {tag}")

    if file_name is not None:
        return DecodedFile(file_name=file_name, contents=contents)
    return DecodedMessage(contents=contents)
