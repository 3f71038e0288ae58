"""
Font Codec
==========

Compression and text encoding shared by the acquirer and the loader.

Stored assets are gzip payloads encoded as base64 text. Engines receive the
raw font again as base64, produced in fixed-size chunks so that large fonts
never have to be expanded in a single step.
"""

import base64
import binascii
import gzip
import logging
import zlib

from fontembed.core.config import DEFAULT_CHUNK_SIZE
from fontembed.core.exceptions import (
    InvalidBase64Error,
    InvalidChunkSizeError,
    InvalidCompressedDataError,
)
from fontembed.core.models import CompressedFontAsset

logger = logging.getLogger(__name__)

# base64 maps every 3 input bytes to 4 output characters
_QUANTUM = 3


def compress_font(raw: bytes, level: int = 9) -> CompressedFontAsset:
    """
    Compress a raw font and encode it for embedding in source code.

    Args:
        raw: TrueType font bytes
        level: gzip compression level (0-9)

    Returns:
        CompressedFontAsset holding the base64 text and size accounting
    """
    # mtime=0 keeps the output stable across builds of the same font
    compressed = gzip.compress(raw, compresslevel=level, mtime=0)
    asset = CompressedFontAsset(
        data=base64.b64encode(compressed).decode("ascii"),
        original_size=len(raw),
        compressed_size=len(compressed),
    )
    logger.info(
        f"Original: {asset.original_size / 1024:.1f}KB, "
        f"Compressed: {asset.compressed_size / 1024:.1f}KB "
        f"({asset.compression_ratio * 100:.1f}% reduction)"
    )
    return asset


def decode_asset(asset: CompressedFontAsset | str) -> bytes:
    """Decode the base64 text of a stored asset into gzip bytes."""
    text = asset.data if isinstance(asset, CompressedFontAsset) else asset
    try:
        return base64.b64decode(text, validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidBase64Error(str(e)) from e


def decompress_font(asset: CompressedFontAsset | str) -> bytes:
    """
    Recover the original font bytes from a stored asset.

    Raises:
        DecompressionError: If the text is not base64 or the payload is not gzip data
    """
    compressed = decode_asset(asset)
    if not compressed:
        raise InvalidCompressedDataError("payload is empty")
    try:
        raw = gzip.decompress(compressed)
    except (OSError, EOFError, zlib.error) as e:
        raise InvalidCompressedDataError(str(e)) from e
    if not raw:
        raise InvalidCompressedDataError("payload inflates to zero bytes")
    return raw


def encode_base64_chunked(data: bytes, chunk_size: int = DEFAULT_CHUNK_SIZE) -> str:
    """
    Base64-encode data chunk by chunk.

    Bytes that do not complete a 3-byte quantum at the end of a chunk are
    carried into the next one, so the result equals ``base64.b64encode(data)``
    for every chunk size.

    Args:
        data: Bytes to encode
        chunk_size: Number of input bytes consumed per step

    Returns:
        Base64 text
    """
    if chunk_size < 1:
        raise InvalidChunkSizeError(chunk_size)

    view = memoryview(data)
    parts: list[str] = []
    carry = b""

    for start in range(0, len(view), chunk_size):
        block = carry + view[start : start + chunk_size].tobytes()
        usable = len(block) - len(block) % _QUANTUM
        if usable:
            parts.append(base64.b64encode(block[:usable]).decode("ascii"))
        carry = block[usable:]

    if carry:
        parts.append(base64.b64encode(carry).decode("ascii"))

    return "".join(parts)
