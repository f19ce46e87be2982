"""Body compression for GQG1 payloads."""

import zlib


class DecompressError(Exception):
    """Raised when a compressed body is malformed."""
    pass


def compress(data: bytes) -> bytes:
    """Compress a message or file body."""
    return zlib.compress(data, 9)


def decompress(data: bytes) -> bytes:
    """
    Decompress a body produced by compress().

    The input must be exactly one complete zlib stream; truncated streams
    and trailing bytes are rejected.

    Raises:
        DecompressError: If the stream is malformed
    """
    decompressor = zlib.decompressobj()
    try:
        result = decompressor.decompress(data) + decompressor.flush()
    except zlib.error as e:
        raise DecompressError(str(e)) from e

    if not decompressor.eof:
        raise DecompressError("Truncated compressed stream")
    if decompressor.unused_data:
        raise DecompressError(
            f"{len(decompressor.unused_data)} trailing bytes after compressed stream"
        )

    return result
